"""Error Codes and Exceptions

셀 실행 파이프라인 전반에서 사용하는 에러 코드와 예외 계층
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class ErrorCategory(str, Enum):
    """에러 카테고리"""
    REQUEST = "REQUEST"        # E1xxx: 요청 텍스트 파싱
    TRANSPORT = "TRANSPORT"    # E2xxx: 네트워크 호출
    EXECUTION = "EXECUTION"    # E3xxx: 셀 실행
    RESPONSE = "RESPONSE"      # E4xxx: 응답 정규화/렌더링
    SYSTEM = "SYSTEM"          # E5xxx: 저장소 및 시스템


class ErrorCode(str, Enum):
    """에러 코드"""

    # === E1xxx: Request ===
    PARSE_EMPTY_REQUEST = "E1001"
    PARSE_INVALID_METHOD = "E1002"
    PARSE_INVALID_URL = "E1003"
    PARSE_MALFORMED_HEADER = "E1004"
    PARSE_INVALID_DIRECTIVE = "E1005"

    # === E2xxx: Transport ===
    TRANSPORT_FAILED = "E2001"
    TRANSPORT_NETWORK_ERROR = "E2002"
    TRANSPORT_TIMEOUT = "E2003"

    # === E3xxx: Execution ===
    EXECUTION_CANCELLED = "E3001"
    EXECUTION_INVALID_STATE = "E3002"
    EXECUTION_ORDER_EXHAUSTED = "E3003"
    EXECUTION_NOT_FOUND = "E3004"

    # === E4xxx: Response ===
    NORMALIZATION_FAILED = "E4001"

    # === E5xxx: System ===
    STORAGE_WRITE_FAILED = "E5001"
    INTERNAL_ERROR = "E5003"
    VALIDATION_ERROR = "E5004"


# Error Code -> Message mapping
ERROR_MESSAGES: dict[ErrorCode, str] = {
    # Request
    ErrorCode.PARSE_EMPTY_REQUEST: "요청 텍스트가 비어 있습니다.",
    ErrorCode.PARSE_INVALID_METHOD: "지원하지 않는 HTTP 메서드입니다.",
    ErrorCode.PARSE_INVALID_URL: "Not a valid HTTP/HTTPS URL.",
    ErrorCode.PARSE_MALFORMED_HEADER: "헤더 형식이 올바르지 않습니다.",
    ErrorCode.PARSE_INVALID_DIRECTIVE: "알 수 없는 지시어입니다.",

    # Transport
    ErrorCode.TRANSPORT_FAILED: "요청 전송에 실패했습니다.",
    ErrorCode.TRANSPORT_NETWORK_ERROR: "네트워크 오류가 발생했습니다.",
    ErrorCode.TRANSPORT_TIMEOUT: "요청 시간이 초과되었습니다.",

    # Execution
    ErrorCode.EXECUTION_CANCELLED: "실행이 취소되었습니다.",
    ErrorCode.EXECUTION_INVALID_STATE: "잘못된 실행 상태 전이입니다.",
    ErrorCode.EXECUTION_ORDER_EXHAUSTED: "실행 순번이 소진되었습니다.",
    ErrorCode.EXECUTION_NOT_FOUND: "실행 기록을 찾을 수 없습니다.",

    # Response
    ErrorCode.NORMALIZATION_FAILED: "응답 정규화에 실패했습니다.",

    # System
    ErrorCode.STORAGE_WRITE_FAILED: "응답 저장에 실패했습니다.",
    ErrorCode.INTERNAL_ERROR: "내부 서버 오류가 발생했습니다.",
    ErrorCode.VALIDATION_ERROR: "입력 검증에 실패했습니다.",
}


class ErrorDetail(BaseModel):
    """API 에러 응답 상세"""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None
    cell_id: Optional[str] = None


class RestBookError(Exception):
    """Base REST Book Exception"""

    def __init__(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cell_id: Optional[str] = None,
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, "Unknown error")
        self.details = details
        self.cell_id = cell_id
        super().__init__(self.message)

    def to_detail(self) -> ErrorDetail:
        """Convert to API response format"""
        return ErrorDetail(
            code=self.code.value,
            message=self.message,
            details=self.details,
            cell_id=self.cell_id,
        )


class ParseError(RestBookError):
    """Malformed request text"""

    def __init__(
        self,
        message: Optional[str] = None,
        code: ErrorCode = ErrorCode.PARSE_INVALID_URL,
        line: Optional[int] = None,
    ):
        details = {"line": line} if line is not None else None
        super().__init__(code, message, details=details)
        self.line = line


class TransportError(RestBookError):
    """Network / transport level errors"""
    pass


class ExecutionCancelledError(RestBookError):
    """Attempt cancelled before or during the transport call"""

    def __init__(self, message: Optional[str] = None):
        super().__init__(ErrorCode.EXECUTION_CANCELLED, message)


class ExecutionError(RestBookError):
    """Execution sequencing errors"""
    pass


class NormalizationError(RestBookError):
    """Response normalization errors (never leave the normalizer)"""

    def __init__(self, message: Optional[str] = None):
        super().__init__(ErrorCode.NORMALIZATION_FAILED, message)


class StorageError(RestBookError):
    """Side-channel persistence errors"""

    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(ErrorCode.STORAGE_WRITE_FAILED, message, details=details)
