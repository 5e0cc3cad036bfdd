"""API Response Schemas"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from backend.app.rest_book.models import CellOutput, ExecutionAttempt, RenderTag


class AttemptResponse(BaseModel):
    """셀 실행 결과"""

    attempt_id: str
    cell_id: str
    order: int
    state: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_ms: Optional[float] = None
    response: Optional[dict[str, Any]] = None
    outputs: list[CellOutput] = Field(default_factory=list)

    @classmethod
    def from_attempt(cls, attempt: ExecutionAttempt) -> "AttemptResponse":
        return cls(
            attempt_id=attempt.attempt_id,
            cell_id=attempt.cell_id,
            order=attempt.order,
            state=attempt.state.value,
            start_time=attempt.start_time,
            end_time=attempt.end_time,
            duration_ms=attempt.duration_ms,
            response=attempt.outputs.get(RenderTag.STRUCTURED) if attempt.outputs else None,
            outputs=attempt.outputs.as_cell_outputs() if attempt.outputs else [],
        )


class CellCancelResponse(BaseModel):
    """셀 취소 결과"""

    cell_id: str
    cancelled: int = Field(..., description="취소된 실행 시도 수")
    status: str


class RenderResponse(BaseModel):
    """렌더 결과"""

    outputs: list[CellOutput] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """헬스체크 응답"""

    status: str = Field("ok", description="상태")
    version: str = Field(..., description="버전")
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class HealthDetailResponse(BaseModel):
    """상세 헬스체크 응답"""

    status: str = Field("ok", description="상태")
    version: str = Field(..., description="버전")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    checks: dict[str, dict[str, Any]] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """에러 응답"""

    success: bool = False
    error: dict[str, Any] = Field(..., description="에러 정보")


class CacheEntriesResponse(BaseModel):
    """응답 캐시 목록"""

    entries: list[dict[str, Any]] = Field(default_factory=list)
    stats: dict[str, Any] = Field(default_factory=dict)


class CacheClearResponse(BaseModel):
    """응답 캐시 비우기 결과"""

    cleared: int = Field(..., description="삭제된 엔트리 수")
