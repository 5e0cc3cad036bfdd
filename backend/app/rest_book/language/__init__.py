"""Language - 요청 텍스트 편집 지원"""

from .completion import CompletionItem, MethodCompletionProvider

__all__ = ["CompletionItem", "MethodCompletionProvider"]
