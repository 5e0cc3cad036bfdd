"""WebSocket Protocol

표시 표면 ↔ 커널 메시지 프로토콜
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from backend.app.rest_book.models import ExecutionAttempt, ExecutionEvent, ExecutionEventType
from backend.api.schemas.response import AttemptResponse


class ServerMessageType(str, Enum):
    """서버 → 클라이언트 메시지 타입"""

    # 실행 진행
    EXECUTION_STARTED = "execution_started"
    EXECUTION_COMPLETE = "execution_complete"

    # 알림/에러
    NOTIFICATION = "notification"
    ERROR = "error"

    # 연결
    CONNECTED = "connected"
    PONG = "pong"


class ClientCommand(str, Enum):
    """클라이언트 → 서버 명령"""

    EXECUTE = "execute"
    CANCEL = "cancel"
    PERSIST_RESPONSE = "persist-response"
    PING = "ping"


class ServerMessage(BaseModel):
    """서버 메시지"""

    type: ServerMessageType
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    document_id: Optional[str] = None


class ClientMessage(BaseModel):
    """클라이언트 메시지

    command 는 자유 문자열이다. 모르는 명령은 사이드 채널에서 무시된다.
    """

    command: str
    data: Any = None
    request_id: Optional[str] = None


# ── 메시지 생성 헬퍼 ──


def _attempt_data(attempt: ExecutionAttempt) -> dict[str, Any]:
    return AttemptResponse.from_attempt(attempt).model_dump(mode="json")


def create_execution_started(
    attempt: ExecutionAttempt,
    document_id: Optional[str] = None,
) -> ServerMessage:
    """실행 시작 메시지"""
    return ServerMessage(
        type=ServerMessageType.EXECUTION_STARTED,
        data=_attempt_data(attempt),
        document_id=document_id,
    )


def create_execution_complete(
    attempt: ExecutionAttempt,
    document_id: Optional[str] = None,
) -> ServerMessage:
    """실행 완료 메시지"""
    return ServerMessage(
        type=ServerMessageType.EXECUTION_COMPLETE,
        data=_attempt_data(attempt),
        document_id=document_id,
    )


def from_execution_event(
    event: ExecutionEvent,
    document_id: Optional[str] = None,
) -> ServerMessage:
    if event.type == ExecutionEventType.STARTED:
        return create_execution_started(event.attempt, document_id)
    return create_execution_complete(event.attempt, document_id)


def create_notification(
    message: str,
    document_id: Optional[str] = None,
) -> ServerMessage:
    """일시 알림 메시지"""
    return ServerMessage(
        type=ServerMessageType.NOTIFICATION,
        data={"message": message},
        document_id=document_id,
    )


def create_error(
    code: str,
    message: str,
    document_id: Optional[str] = None,
) -> ServerMessage:
    """에러 메시지"""
    return ServerMessage(
        type=ServerMessageType.ERROR,
        data={"code": code, "message": message},
        document_id=document_id,
    )


def create_connected(document_id: str) -> ServerMessage:
    """연결 완료 메시지"""
    return ServerMessage(
        type=ServerMessageType.CONNECTED,
        data={"document_id": document_id},
        document_id=document_id,
    )


def create_pong(document_id: Optional[str] = None) -> ServerMessage:
    return ServerMessage(type=ServerMessageType.PONG, document_id=document_id)
