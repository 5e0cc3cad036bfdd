"""Response Normalizer 테스트

위치: backend.app.rest_book.response.normalizer
"""

import pytest
from pydantic import ValidationError

from backend.app.rest_book.models import (
    ErrorKind,
    NormalizedResponse,
    TransportFailure,
    TransportResponse,
    TransportSuccess,
)
from backend.app.rest_book.request import parse
from backend.app.rest_book.response import HEADER_ALLOW_LIST, filter_headers, normalize


class TestNormalizeSuccess:
    """성공 결과 정규화 테스트"""

    def test_status_and_body(self, success_outcome):
        response = normalize(success_outcome)

        assert response.status == 200
        assert response.status_text == "OK"
        assert response.body == {"id": 1, "name": "라네즈"}
        assert response.error is None

    def test_headers_filtered_and_lowercased(self, success_outcome):
        """허용 목록 헤더만 남음"""
        response = normalize(success_outcome)

        assert response.headers == {
            "content-type": "application/json; charset=utf-8",
            "server": "nginx",
            "set-cookie": ["a=1", "b=2"],
        }
        assert "x-request-id" not in response.headers

    def test_request_meta_from_response(self, success_outcome):
        response = normalize(success_outcome)

        assert response.request_meta.method == "GET"
        assert response.request_meta.http_version == "HTTP/1.1"
        assert response.request_meta.response_url == "https://api.example.com/users/1"

    def test_request_meta_falls_back_to_request(self):
        """응답에 메서드/URL 이 없으면 원본 요청 사용"""
        request = parse("POST https://example.com/items")
        outcome = TransportSuccess(response=TransportResponse(status_code=201))

        response = normalize(outcome, request)

        assert response.status == 201
        assert response.request_meta.method == "POST"
        assert response.request_meta.response_url == "https://example.com/items"


class TestNormalizeFailure:
    """실패 결과 정규화 테스트"""

    def test_network_failure(self, network_failure):
        response = normalize(network_failure)

        assert response.status is None
        assert response.error.kind == ErrorKind.NETWORK
        assert response.error.message == "connection refused"

    def test_failure_with_embedded_response_prefers_response(self):
        """응답을 감싼 실패는 응답 기준으로 정규화"""
        outcome = TransportFailure(
            error_kind=ErrorKind.TRANSPORT,
            message="Request failed with status code 404",
            response=TransportResponse(
                status_code=404,
                reason_phrase="Not Found",
                headers={"content-type": "application/json"},
                body={"message": "missing"},
            ),
        )

        response = normalize(outcome)

        assert response.status == 404
        assert response.status_text == "Not Found"
        assert response.body == {"message": "missing"}
        assert response.error is None

    def test_embedded_response_without_status(self):
        outcome = TransportFailure(
            error_kind=ErrorKind.TIMEOUT,
            message="timeout",
            response=TransportResponse(url="https://slow.example.com"),
        )

        response = normalize(outcome)

        assert response.error.kind == ErrorKind.TIMEOUT
        assert response.request_meta.response_url == "https://slow.example.com"

    def test_cancelled_ignores_embedded_response(self):
        outcome = TransportFailure(
            error_kind=ErrorKind.CANCELLED,
            message="cancelled by user",
            response=TransportResponse(status_code=200),
        )

        response = normalize(outcome)

        assert response.error.kind == ErrorKind.CANCELLED

    def test_empty_message_uses_kind(self):
        response = normalize(TransportFailure(error_kind=ErrorKind.TIMEOUT))

        assert response.error.message == "timeout"


class TestNormalizationErrors:
    """정규화 실패 테스트 (예외를 던지지 않음)"""

    def test_unknown_outcome(self):
        response = normalize({"status": 200})

        assert response.error.kind == ErrorKind.NORMALIZATION

    def test_none_outcome(self):
        response = normalize(None)

        assert response.error.kind == ErrorKind.NORMALIZATION

    def test_success_without_status(self):
        """상태 코드 없는 성공 응답"""
        request = parse("GET https://example.com")
        outcome = TransportSuccess(response=TransportResponse(body="x"))

        response = normalize(outcome, request)

        assert response.error.kind == ErrorKind.NORMALIZATION
        assert response.request_meta.response_url == "https://example.com"


class TestStatusXorError:
    """status / error 배타성 테스트"""

    @pytest.mark.parametrize("outcome_fixture", ["success_outcome", "network_failure"])
    def test_exactly_one(self, outcome_fixture, request):
        response = normalize(request.getfixturevalue(outcome_fixture))

        assert (response.status is None) != (response.error is None)

    def test_model_rejects_both(self):
        with pytest.raises(ValidationError):
            NormalizedResponse(status=200, error={"kind": "network", "message": "x"})

    def test_model_rejects_neither(self):
        with pytest.raises(ValidationError):
            NormalizedResponse()


class TestFilterHeaders:
    """헤더 필터 테스트"""

    def test_allow_list_order(self):
        headers = {"Server": "a", "Date": "b", "Content-Type": "c"}

        assert list(filter_headers(headers)) == ["date", "content-type", "server"]

    def test_multi_value_joined(self):
        """set-cookie 외 다중 값은 합친다"""
        result = filter_headers({"cache-control": ["no-cache", "no-store"]})

        assert result == {"cache-control": "no-cache, no-store"}

    def test_single_set_cookie_becomes_list(self):
        assert filter_headers({"Set-Cookie": "a=1"}) == {"set-cookie": ["a=1"]}

    def test_absent_headers_omitted(self):
        assert filter_headers({}) == {}
        assert filter_headers(None) == {}

    def test_security_headers_allowed(self):
        for name in ("strict-transport-security", "x-frame-options", "content-security-policy"):
            assert name in HEADER_ALLOW_LIST
