"""Transport Outcome Models

트랜스포트 호출 결과를 성공/실패 태그 변형으로 표현한다.
실패도 부분 응답(status, headers, body)을 가질 수 있다.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from .enums import ErrorKind


class TransportResponse(BaseModel):
    """트랜스포트가 받은 원본 응답"""

    status_code: Optional[int] = None
    reason_phrase: Optional[str] = None
    # 다중 값 헤더(set-cookie 등)는 리스트
    headers: dict[str, Union[str, list[str]]] = Field(default_factory=dict)
    body: Any = None
    http_version: Optional[str] = None
    url: Optional[str] = None
    method: Optional[str] = None


class TransportSuccess(BaseModel):
    """전송 성공"""

    kind: Literal["success"] = "success"
    response: TransportResponse


class TransportFailure(BaseModel):
    """전송 실패 (부분 응답 포함 가능)"""

    kind: Literal["failure"] = "failure"
    error_kind: ErrorKind = ErrorKind.TRANSPORT
    message: str = ""
    response: Optional[TransportResponse] = None


TransportOutcome = Annotated[
    Union[TransportSuccess, TransportFailure],
    Field(discriminator="kind"),
]
