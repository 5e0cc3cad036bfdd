"""Models - Pydantic 모델 패키지

구조:
- enums.py: HttpMethod, AttemptState, ErrorKind, RenderTag 등 공용 Enum
- request.py: RequestDescriptor, RequestBody, RequestOptions
- outcome.py: TransportSuccess / TransportFailure 태그 변형
- response.py: NormalizedResponse, RequestMeta, ResponseError
- output.py: RenderedOutput, CellOutput
- execution.py: ExecutionAttempt, ExecutionEvent
- document.py: NotebookDocument, NotebookCell

사용 예:
    from backend.app.rest_book.models import RequestDescriptor, NormalizedResponse
"""

from .enums import (
    AttemptState,
    CellKind,
    ErrorKind,
    ExecutionEventType,
    HttpMethod,
    RenderTag,
)
from .request import RequestBody, RequestDescriptor, RequestOptions, set_header
from .outcome import (
    TransportFailure,
    TransportOutcome,
    TransportResponse,
    TransportSuccess,
)
from .response import NormalizedResponse, RequestMeta, ResponseError
from .output import CellOutput, RenderedOutput
from .execution import ExecutionAttempt, ExecutionEvent
from .document import NotebookCell, NotebookDocument

__all__ = [
    # Enums
    "AttemptState",
    "CellKind",
    "ErrorKind",
    "ExecutionEventType",
    "HttpMethod",
    "RenderTag",
    # Request
    "RequestBody",
    "RequestDescriptor",
    "RequestOptions",
    "set_header",
    # Outcome
    "TransportFailure",
    "TransportOutcome",
    "TransportResponse",
    "TransportSuccess",
    # Response
    "NormalizedResponse",
    "RequestMeta",
    "ResponseError",
    # Output
    "CellOutput",
    "RenderedOutput",
    # Execution
    "ExecutionAttempt",
    "ExecutionEvent",
    # Document
    "NotebookCell",
    "NotebookDocument",
]
