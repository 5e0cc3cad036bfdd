"""Cache Routes

요청별 마지막 응답 조회 / 재렌더링
"""

from fastapi import APIRouter

from backend.api.schemas.request import CachedRenderRequest
from backend.api.schemas.response import (
    CacheClearResponse,
    CacheEntriesResponse,
    ErrorResponse,
    RenderResponse,
)
from backend.app.core.errors import ErrorCode, RestBookError
from backend.app.rest_book.cache import get_response_cache
from backend.app.rest_book.request import parse
from backend.app.rest_book.response import render

router = APIRouter(
    prefix="/cache",
    tags=["Cache"],
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


@router.get("", response_model=CacheEntriesResponse)
async def list_cache() -> CacheEntriesResponse:
    """캐시 엔트리 목록과 통계"""
    cache = get_response_cache()
    return CacheEntriesResponse(entries=cache.entries(), stats=cache.get_stats())


@router.post("/render", response_model=RenderResponse)
async def render_cached(request: CachedRenderRequest) -> RenderResponse:
    """같은 요청의 마지막 응답을 다시 렌더링 (네트워크 호출 없음)"""
    descriptor = parse(request.text)
    response = get_response_cache().get(descriptor)
    if response is None:
        raise RestBookError(
            ErrorCode.EXECUTION_NOT_FOUND,
            details={"method": descriptor.method.value, "url": descriptor.url},
        )
    return RenderResponse(outputs=render(response).as_cell_outputs())


@router.delete("", response_model=CacheClearResponse)
async def clear_cache() -> CacheClearResponse:
    """캐시 비우기"""
    return CacheClearResponse(cleared=get_response_cache().clear())
