"""Response Normalizer

TransportOutcome → NormalizedResponse

예외를 던지지 않는다. 내부 추출 실패는 error.kind = "normalization" 응답이 된다.
"""

from typing import Any, Optional, Union

from backend.app.core.errors import NormalizationError
from backend.app.core.logging import get_logger
from backend.app.rest_book.models import (
    ErrorKind,
    NormalizedResponse,
    RequestDescriptor,
    RequestMeta,
    TransportFailure,
    TransportResponse,
    TransportSuccess,
)

logger = get_logger(__name__)

# 응답 헤더 허용 목록 (이 순서대로 출력)
HEADER_ALLOW_LIST: tuple[str, ...] = (
    "date",
    "allow",
    "expires",
    "cache-control",
    "content-type",
    "content-length",
    "p3p",
    "server",
    "x-xss-protection",
    "x-frame-options",
    "x-content-type-options",
    "strict-transport-security",
    "content-security-policy",
    "set-cookie",
    "connection",
    "transfer-encoding",
)

# 항상 리스트로 유지하는 다중 값 헤더
MULTI_VALUE_HEADERS = frozenset({"set-cookie"})

HeaderValue = Union[str, list[str]]


class ResponseNormalizer:
    """응답 정규화기"""

    def normalize(
        self,
        outcome: Any,
        request: Optional[RequestDescriptor] = None,
    ) -> NormalizedResponse:
        """전송 결과 정규화

        Args:
            outcome: TransportSuccess 또는 TransportFailure
            request: 원본 요청 (메타 보완용)

        Returns:
            status 또는 error 중 하나만 설정된 NormalizedResponse
        """
        try:
            if isinstance(outcome, TransportSuccess):
                return self._from_response(outcome.response, request)

            if isinstance(outcome, TransportFailure):
                embedded = outcome.response
                if (
                    outcome.error_kind != ErrorKind.CANCELLED
                    and embedded is not None
                    and embedded.status_code is not None
                ):
                    # 응답을 감싼 실패: 내장 응답 우선
                    return self._from_response(embedded, request)
                return NormalizedResponse.from_error(
                    kind=outcome.error_kind,
                    message=outcome.message or outcome.error_kind.value,
                    request_meta=self._meta(embedded, request),
                )

            raise NormalizationError(
                f"Unsupported transport outcome: {type(outcome).__name__}"
            )

        except Exception as e:
            logger.warning(
                "Response normalization failed",
                error=str(e),
                outcome_type=type(outcome).__name__,
            )
            return NormalizedResponse.from_error(
                kind=ErrorKind.NORMALIZATION,
                message=str(e) or "normalization failed",
                request_meta=self._safe_meta(request),
            )

    def _from_response(
        self,
        response: TransportResponse,
        request: Optional[RequestDescriptor],
    ) -> NormalizedResponse:
        status = response.status_code
        if status is None or isinstance(status, bool) or not isinstance(status, int):
            raise NormalizationError(f"Response has no usable status code: {status!r}")

        return NormalizedResponse(
            status=status,
            status_text=response.reason_phrase or None,
            headers=filter_headers(response.headers),
            request_meta=self._meta(response, request),
            body=response.body,
        )

    def _meta(
        self,
        response: Optional[TransportResponse],
        request: Optional[RequestDescriptor],
    ) -> RequestMeta:
        method = response.method if response is not None else None
        url = response.url if response is not None else None
        return RequestMeta(
            method=method or (request.method.value if request else None),
            http_version=response.http_version if response is not None else None,
            response_url=url or (request.url if request else None),
        )

    def _safe_meta(self, request: Optional[RequestDescriptor]) -> RequestMeta:
        if request is None:
            return RequestMeta()
        return RequestMeta(method=request.method.value, response_url=request.url)


def filter_headers(headers: dict[str, HeaderValue]) -> dict[str, HeaderValue]:
    """허용 목록 헤더만 남긴다 (이름은 소문자, 없는 항목은 생략)"""
    lowered: dict[str, HeaderValue] = {}
    for name, value in (headers or {}).items():
        lowered[str(name).lower()] = value

    result: dict[str, HeaderValue] = {}
    for name in HEADER_ALLOW_LIST:
        if name not in lowered:
            continue
        value = lowered[name]
        if name in MULTI_VALUE_HEADERS:
            result[name] = [str(v) for v in value] if isinstance(value, list) else [str(value)]
        elif isinstance(value, list):
            result[name] = ", ".join(str(v) for v in value)
        else:
            result[name] = str(value)
    return result


_normalizer = ResponseNormalizer()


def normalize(outcome: Any, request: Optional[RequestDescriptor] = None) -> NormalizedResponse:
    return _normalizer.normalize(outcome, request)
