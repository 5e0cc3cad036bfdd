"""Notebook Routes

렌더링, 자동완성, 노트북 직렬화
"""

from fastapi import APIRouter, Query, Response

from backend.api.schemas.request import DocumentDeserializeRequest, RenderRequest
from backend.api.schemas.response import ErrorResponse, RenderResponse
from backend.app.rest_book.document import NotebookSerializer
from backend.app.rest_book.language import CompletionItem, MethodCompletionProvider
from backend.app.rest_book.models import NotebookDocument
from backend.app.rest_book.response import render

router = APIRouter(tags=["Notebook"], responses={500: {"model": ErrorResponse}})

_serializer = NotebookSerializer()
_completions = MethodCompletionProvider()


@router.post("/render", response_model=RenderResponse)
async def render_response(request: RenderRequest) -> RenderResponse:
    """정규화된 응답 재렌더링"""
    return RenderResponse(outputs=render(request.response).as_cell_outputs())


@router.get("/language/completions", response_model=list[CompletionItem])
async def method_completions(
    prefix: str = Query("", max_length=16, description="입력 중인 첫 단어"),
) -> list[CompletionItem]:
    """HTTP 메서드 자동완성"""
    return _completions.provide(prefix)


@router.post("/documents/serialize")
async def serialize_document(document: NotebookDocument) -> Response:
    """문서 → .restbook 파일 내용"""
    return Response(
        content=_serializer.serialize(document),
        media_type="application/json",
    )


@router.post("/documents/deserialize", response_model=NotebookDocument)
async def deserialize_document(request: DocumentDeserializeRequest) -> NotebookDocument:
    """.restbook 파일 내용 → 문서 (잘못된 내용은 빈 문서)"""
    return _serializer.deserialize(request.content.encode("utf-8"))
