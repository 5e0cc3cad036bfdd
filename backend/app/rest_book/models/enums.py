"""Shared Enums for Models"""

from enum import Enum


class HttpMethod(str, Enum):
    """지원 HTTP 메서드"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class AttemptState(str, Enum):
    """셀 실행 상태"""
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (AttemptState.SUCCEEDED, AttemptState.FAILED, AttemptState.CANCELLED)


class ErrorKind(str, Enum):
    """정규화된 응답의 에러 종류"""
    PARSE = "parse"
    TRANSPORT = "transport"
    NETWORK = "network"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    NORMALIZATION = "normalization"


class RenderTag(str, Enum):
    """렌더 출력 태그"""
    STRUCTURED = "structured"
    MARKUP = "markup"
    RICH_SUMMARY = "rich-summary"
    ERROR = "error"

    @property
    def mime(self) -> str:
        return RENDER_TAG_MIME[self]


RENDER_TAG_MIME: dict[RenderTag, str] = {
    RenderTag.STRUCTURED: "application/json",
    RenderTag.MARKUP: "text/html",
    RenderTag.RICH_SUMMARY: "application/x.rest-book-response",
    RenderTag.ERROR: "application/x.notebook.error-traceback",
}


class ExecutionEventType(str, Enum):
    """엔진 → 표면 이벤트 타입"""
    STARTED = "started"
    COMPLETED = "completed"


class CellKind(int, Enum):
    """노트북 셀 종류 (VS Code NotebookCellKind 값과 동일)"""
    MARKUP = 1
    CODE = 2
