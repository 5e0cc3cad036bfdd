"""HTTPX Transport

httpx.AsyncClient 기반 기본 트랜스포트
"""

from typing import Any, Optional, Union

import httpx

from backend.app.core.config import settings
from backend.app.core.logging import get_logger
from backend.app.rest_book.cancellation import CancellationToken
from backend.app.rest_book.models import (
    ErrorKind,
    RequestDescriptor,
    TransportFailure,
    TransportResponse,
    TransportSuccess,
)

logger = get_logger(__name__)


class HttpxTransport:
    """httpx 트랜스포트

    Args:
        timeout: 기본 타임아웃(초), None 이면 무제한
        follow_redirects: 기본 리다이렉트 정책
        max_redirects: 최대 리다이렉트 횟수
        raise_for_status: True 면 2xx 외 응답을 (응답을 포함한) 실패로 돌려준다
        transport: httpx 하위 트랜스포트 (테스트에서 httpx.MockTransport 주입)
    """

    def __init__(
        self,
        timeout: Optional[float] = settings.REQUEST_TIMEOUT_SEC,
        follow_redirects: bool = settings.FOLLOW_REDIRECTS,
        max_redirects: int = settings.MAX_REDIRECTS,
        raise_for_status: bool = settings.TREAT_HTTP_ERRORS_AS_FAILURE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.max_redirects = max_redirects
        self.raise_for_status = raise_for_status
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self, max_redirects: Optional[int] = None) -> httpx.AsyncClient:
        if max_redirects is not None and max_redirects != self.max_redirects:
            # 요청별 리다이렉트 한도는 별도 클라이언트로
            return httpx.AsyncClient(transport=self._transport, max_redirects=max_redirects)
        if self._client is None:
            self._client = httpx.AsyncClient(
                transport=self._transport,
                max_redirects=self.max_redirects,
            )
        return self._client

    async def send(
        self,
        request: RequestDescriptor,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Union[TransportSuccess, TransportFailure]:
        """요청 전송

        Args:
            request: 파싱된 요청
            cancel_token: 취소 토큰 (엔진이 태스크 취소로도 바인딩한다)

        Returns:
            TransportSuccess 또는 TransportFailure
        """
        if cancel_token is not None and cancel_token.is_cancelled:
            return TransportFailure(
                error_kind=ErrorKind.CANCELLED,
                message=cancel_token.reason or "cancelled",
            )

        options = request.options
        timeout = options.timeout if options.timeout is not None else self.timeout
        follow = (
            options.follow_redirects
            if options.follow_redirects is not None
            else self.follow_redirects
        )

        client = self._get_client(options.max_redirects)
        owns_client = client is not self._client

        logger.debug(
            "Sending request",
            method=request.method.value,
            url=request.url,
            timeout=timeout,
        )

        headers = dict(request.headers)
        if request.body and request.body.content_type and request.get_header("content-type") is None:
            headers["Content-Type"] = request.body.content_type

        try:
            http_request = client.build_request(
                request.method.value,
                request.url,
                headers=headers,
                content=request.body.content.encode("utf-8") if request.body else None,
                timeout=httpx.Timeout(timeout),
            )
            response = await client.send(http_request, follow_redirects=follow)
        except httpx.TimeoutException as e:
            return TransportFailure(
                error_kind=ErrorKind.TIMEOUT,
                message=f"timeout of {timeout}s exceeded: {e}",
            )
        except httpx.TooManyRedirects as e:
            return TransportFailure(error_kind=ErrorKind.TRANSPORT, message=str(e))
        except httpx.TransportError as e:
            return TransportFailure(
                error_kind=ErrorKind.NETWORK,
                message=str(e) or type(e).__name__,
            )
        except httpx.HTTPError as e:
            return TransportFailure(error_kind=ErrorKind.TRANSPORT, message=str(e))
        finally:
            if owns_client:
                await client.aclose()

        transport_response = to_transport_response(response)

        if self.raise_for_status and not response.is_success:
            return TransportFailure(
                error_kind=ErrorKind.TRANSPORT,
                message=f"Request failed with status code {response.status_code}",
                response=transport_response,
            )
        return TransportSuccess(response=transport_response)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def to_transport_response(response: httpx.Response) -> TransportResponse:
    """httpx.Response → TransportResponse"""
    headers: dict[str, Union[str, list[str]]] = {}
    for name, value in response.headers.multi_items():
        key = name.lower()
        if key in headers:
            existing = headers[key]
            headers[key] = (existing if isinstance(existing, list) else [existing]) + [value]
        else:
            headers[key] = value

    return TransportResponse(
        status_code=response.status_code,
        reason_phrase=response.reason_phrase,
        headers=headers,
        body=_decode_body(response),
        http_version=response.http_version,
        url=str(response.url),
        method=response.request.method,
    )


def _decode_body(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    if "json" in content_type and response.content:
        try:
            return response.json()
        except ValueError:
            pass
    return response.text
