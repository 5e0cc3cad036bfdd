"""Method Completion

요청 줄 첫 단어에 대한 HTTP 메서드 자동완성
"""

from pydantic import BaseModel

from backend.app.rest_book.models import HttpMethod


class CompletionItem(BaseModel):
    """자동완성 항목"""

    label: str
    kind: str = "keyword"
    insert_text: str


class MethodCompletionProvider:
    """메서드 자동완성"""

    def provide(self, prefix: str = "") -> list[CompletionItem]:
        prefix = prefix.strip().upper()
        return [
            CompletionItem(label=method.value, insert_text=f"{method.value} ")
            for method in HttpMethod
            if method.value.startswith(prefix)
        ]
