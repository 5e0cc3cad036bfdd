"""Document - 노트북 파일 직렬화"""

from .serializer import NotebookSerializer

__all__ = ["NotebookSerializer"]
