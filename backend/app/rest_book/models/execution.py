"""Execution Models"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.core.errors import ErrorCode, ExecutionError
from backend.app.rest_book.cancellation import CancellationToken
from .enums import AttemptState, ExecutionEventType
from .output import RenderedOutput
from .request import RequestDescriptor
from .response import NormalizedResponse


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExecutionAttempt(BaseModel):
    """셀 실행 시도 (셀 실행 1회당 1개)

    종료 상태로는 정확히 한 번만 전이하며, 이후에는 변경되지 않는다.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    attempt_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    cell_id: str
    order: int = Field(..., ge=1)

    state: AttemptState = AttemptState.PENDING
    start_time: datetime = Field(default_factory=_utcnow)
    end_time: Optional[datetime] = None

    request: Optional[RequestDescriptor] = None
    response: Optional[NormalizedResponse] = None
    outputs: Optional[RenderedOutput] = None

    cancel_token: CancellationToken = Field(default_factory=CancellationToken, exclude=True)

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @property
    def duration_ms(self) -> Optional[float]:
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds() * 1000

    def mark_running(self) -> None:
        if self.state != AttemptState.PENDING:
            raise ExecutionError(
                ErrorCode.EXECUTION_INVALID_STATE,
                f"cannot start attempt in state {self.state.value}",
            )
        self.state = AttemptState.RUNNING

    def finish(
        self,
        state: AttemptState,
        response: NormalizedResponse,
        outputs: Optional[RenderedOutput] = None,
        end_time: Optional[datetime] = None,
    ) -> None:
        """종료 상태로 전이 (한 번만 허용)"""
        if not state.is_terminal:
            raise ExecutionError(
                ErrorCode.EXECUTION_INVALID_STATE,
                f"{state.value} is not a terminal state",
            )
        if self.is_terminal:
            raise ExecutionError(
                ErrorCode.EXECUTION_INVALID_STATE,
                f"attempt {self.attempt_id} already finished as {self.state.value}",
            )
        self.response = response
        self.outputs = outputs
        self.end_time = end_time or _utcnow()
        self.state = state
        self.cancel_token.close()


class ExecutionEvent(BaseModel):
    """엔진 → 표면 메시지"""

    type: ExecutionEventType
    attempt: ExecutionAttempt
    timestamp: datetime = Field(default_factory=_utcnow)
