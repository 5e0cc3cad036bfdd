"""Normalized Response Models

종료된 실행 시도 하나당 하나씩 생성되는 렌더 안전 응답 레코드.
필드 이름은 표시 표면과 주고받는 JSON에서 camelCase 로 직렬화된다.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .enums import ErrorKind


class ResponseError(BaseModel):
    """응답 에러"""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str = ""


class RequestMeta(BaseModel):
    """요청 메타 (메서드 + 최소 전송 정보)"""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    method: Optional[str] = None
    http_version: Optional[str] = None
    response_url: Optional[str] = None


class NormalizedResponse(BaseModel):
    """정규화된 응답

    status 와 error 중 정확히 하나만 설정된다.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    status: Optional[int] = None
    status_text: Optional[str] = None
    headers: dict[str, Union[str, list[str]]] = Field(default_factory=dict)
    request_meta: RequestMeta = Field(default_factory=RequestMeta)
    body: Any = None
    error: Optional[ResponseError] = None

    @model_validator(mode="after")
    def _status_xor_error(self) -> "NormalizedResponse":
        if (self.status is None) == (self.error is None):
            raise ValueError("exactly one of status or error must be set")
        return self

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def from_error(
        cls,
        kind: ErrorKind,
        message: str,
        request_meta: Optional[RequestMeta] = None,
    ) -> "NormalizedResponse":
        """에러 응답 생성"""
        return cls(
            error=ResponseError(kind=kind, message=message),
            request_meta=request_meta or RequestMeta(),
        )

    def to_payload(self) -> dict[str, Any]:
        """표시 표면으로 전달되는 구조화 페이로드"""
        return self.model_dump(mode="json", by_alias=True)
