"""Cell Routes

셀 실행 / 취소
"""

from fastapi import APIRouter, Query

from backend.api.schemas.request import CellCancelRequest, CellExecuteRequest
from backend.api.schemas.response import AttemptResponse, CellCancelResponse, ErrorResponse
from backend.app.core.logging import get_logger, log_context
from backend.app.rest_book.execution import get_kernel_registry

router = APIRouter(
    prefix="/cells",
    tags=["Cells"],
    responses={500: {"model": ErrorResponse}},
)
logger = get_logger(__name__)

DEFAULT_DOCUMENT_ID = "default"


@router.post("/{cell_id}/execute", response_model=AttemptResponse)
async def execute_cell(
    cell_id: str,
    request: CellExecuteRequest,
    document_id: str = Query(DEFAULT_DOCUMENT_ID, description="문서 ID"),
) -> AttemptResponse:
    """셀 실행

    요청이 끝날 때까지 기다린 뒤 종료된 실행 시도와 렌더 출력을 돌려준다.
    파싱/전송 실패도 200 으로 응답하며 error 출력에 담긴다.
    """
    log_context(document_id=document_id)
    engine = get_kernel_registry().get(document_id)
    attempt = await engine.execute(cell_id, request.text)

    logger.info(
        "Cell executed via HTTP",
        document_id=document_id,
        cell_id=cell_id,
        order=attempt.order,
        state=attempt.state.value,
    )
    return AttemptResponse.from_attempt(attempt)


@router.post("/{cell_id}/cancel", response_model=CellCancelResponse)
async def cancel_cell(
    cell_id: str,
    request: CellCancelRequest,
    document_id: str = Query(DEFAULT_DOCUMENT_ID, description="문서 ID"),
) -> CellCancelResponse:
    """실행 중인 셀 취소 (종료된 시도에는 영향 없음)"""
    log_context(document_id=document_id)
    engine = get_kernel_registry().get(document_id)
    cancelled = engine.cancel_cell(cell_id, request.reason or "cancelled by user")

    return CellCancelResponse(
        cell_id=cell_id,
        cancelled=cancelled,
        status="cancelled" if cancelled else "not_running",
    )
