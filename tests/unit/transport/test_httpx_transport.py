"""HTTPX Transport 테스트

위치: backend.app.rest_book.transport.httpx_transport
httpx.MockTransport 로 네트워크 없이 검증한다.
"""

import json

import httpx
import pytest

from backend.app.rest_book.cancellation import CancellationToken
from backend.app.rest_book.models import ErrorKind, TransportFailure, TransportSuccess
from backend.app.rest_book.request import parse
from backend.app.rest_book.transport import HttpxTransport, Transport


def _transport(handler, **kwargs) -> HttpxTransport:
    return HttpxTransport(transport=httpx.MockTransport(handler), **kwargs)


class TestSend:
    """요청 전송 테스트"""

    @pytest.mark.asyncio
    async def test_json_response(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["headers"] = request.headers
            seen["body"] = request.content
            return httpx.Response(201, json={"id": 7})

        transport = _transport(handler)
        request = parse(
            "POST https://api.example.com/items\n"
            "X-Api-Key: secret\n"
            "\n"
            '{"name": "cushion"}'
        )

        outcome = await transport.send(request)
        await transport.aclose()

        assert isinstance(outcome, TransportSuccess)
        assert outcome.response.status_code == 201
        assert outcome.response.body == {"id": 7}
        assert outcome.response.method == "POST"
        assert outcome.response.url == "https://api.example.com/items"
        assert seen["method"] == "POST"
        assert seen["headers"]["x-api-key"] == "secret"
        assert seen["headers"]["content-type"] == "application/json"
        assert json.loads(seen["body"]) == {"name": "cushion"}

    @pytest.mark.asyncio
    async def test_text_response(self):
        transport = _transport(lambda request: httpx.Response(200, text="pong"))

        outcome = await transport.send(parse("GET https://example.com/ping"))

        assert outcome.response.body == "pong"
        assert outcome.response.reason_phrase == "OK"

    @pytest.mark.asyncio
    async def test_repeated_headers_become_list(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                headers=[("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("Server", "nginx")],
            )

        outcome = await _transport(handler).send(parse("GET https://example.com"))

        assert outcome.response.headers["set-cookie"] == ["a=1", "b=2"]
        assert outcome.response.headers["server"] == "nginx"

    def test_satisfies_protocol(self):
        assert isinstance(HttpxTransport(), Transport)


class TestHttpErrors:
    """2xx 외 응답 테스트"""

    @pytest.mark.asyncio
    async def test_non_2xx_is_failure_with_response(self):
        transport = _transport(lambda request: httpx.Response(404, json={"message": "missing"}))

        outcome = await transport.send(parse("GET https://example.com/missing"))

        assert isinstance(outcome, TransportFailure)
        assert outcome.message == "Request failed with status code 404"
        assert outcome.response.status_code == 404
        assert outcome.response.body == {"message": "missing"}

    @pytest.mark.asyncio
    async def test_non_2xx_success_when_not_raising(self):
        transport = _transport(
            lambda request: httpx.Response(500, text="boom"),
            raise_for_status=False,
        )

        outcome = await transport.send(parse("GET https://example.com"))

        assert isinstance(outcome, TransportSuccess)
        assert outcome.response.status_code == 500


class TestTransportFailures:
    """네트워크 실패 테스트"""

    @pytest.mark.asyncio
    async def test_connect_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        outcome = await _transport(handler).send(parse("GET https://down.example.com"))

        assert isinstance(outcome, TransportFailure)
        assert outcome.error_kind == ErrorKind.NETWORK
        assert "connection refused" in outcome.message

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        outcome = await _transport(handler).send(parse("@timeout 1\nGET https://slow.example.com"))

        assert outcome.error_kind == ErrorKind.TIMEOUT
        assert "1.0s" in outcome.message

    @pytest.mark.asyncio
    async def test_cancelled_token_skips_request(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200)

        token = CancellationToken()
        token.cancel("stop")

        outcome = await _transport(handler).send(parse("GET https://example.com"), token)

        assert outcome.error_kind == ErrorKind.CANCELLED
        assert calls == []


class TestRedirects:
    """리다이렉트 테스트"""

    @staticmethod
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(302, headers={"Location": "https://example.com/new"})
        return httpx.Response(200, text="new")

    @pytest.mark.asyncio
    async def test_follows_by_default(self):
        outcome = await _transport(self._handler).send(parse("GET https://example.com/old"))

        assert outcome.response.status_code == 200
        assert outcome.response.url == "https://example.com/new"

    @pytest.mark.asyncio
    async def test_directive_disables_redirects(self):
        transport = _transport(self._handler, raise_for_status=False)

        outcome = await transport.send(
            parse("@follow-redirects false\nGET https://example.com/old")
        )

        assert outcome.response.status_code == 302

    @pytest.mark.asyncio
    async def test_too_many_redirects(self):
        def loop(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": "https://example.com/loop"})

        outcome = await _transport(loop).send(
            parse("@max-redirects 2\nGET https://example.com/loop")
        )

        assert isinstance(outcome, TransportFailure)
        assert outcome.error_kind == ErrorKind.TRANSPORT
