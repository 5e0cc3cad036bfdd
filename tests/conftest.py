"""테스트 설정 및 공통 fixture"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Optional

import pytest

# 프로젝트 루트를 Python 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from backend.app.rest_book.models import (  # noqa: E402
    ErrorKind,
    RequestDescriptor,
    TransportFailure,
    TransportResponse,
    TransportSuccess,
)


class FakeTransport:
    """호출을 기록하고 미리 정한 결과를 돌려주는 트랜스포트"""

    def __init__(self, outcome: Any = None, delay: float = 0.0):
        self.outcome = outcome or TransportSuccess(
            response=TransportResponse(
                status_code=200,
                reason_phrase="OK",
                headers={"content-type": "application/json"},
                body={"ok": True},
                http_version="HTTP/1.1",
            )
        )
        self.delay = delay
        self.calls: list[RequestDescriptor] = []
        self.cancelled = 0

    async def send(self, request: RequestDescriptor, cancel_token: Any = None) -> Any:
        self.calls.append(request)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class SpyCache:
    """record 호출 기록용 캐시"""

    def __init__(self, fail: bool = False):
        self.records: list[tuple[RequestDescriptor, Any]] = []
        self.fail = fail

    def record(self, request: RequestDescriptor, response: Any) -> None:
        if self.fail:
            raise RuntimeError("cache unavailable")
        self.records.append((request, response))


class MemoryStorage:
    """사용자가 제안된 이름을 그대로 고르는 저장 협력자"""

    def __init__(self, accept: bool = True, error: Optional[Exception] = None):
        self.accept = accept
        self.error = error
        self.written: dict[str, Any] = {}

    async def prompt_and_write(self, suggested_name: str, payload: Any) -> Optional[str]:
        if self.error is not None:
            raise self.error
        if not self.accept:
            return None
        self.written[suggested_name] = payload
        return f"/tmp/{suggested_name}"


@pytest.fixture
def fake_transport():
    """200 JSON 응답을 돌려주는 트랜스포트"""
    return FakeTransport()


@pytest.fixture
def slow_transport():
    """5초 걸리는 트랜스포트"""
    return FakeTransport(delay=5.0)


@pytest.fixture
def spy_cache():
    return SpyCache()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def success_outcome():
    """헤더가 섞인 성공 결과"""
    return TransportSuccess(
        response=TransportResponse(
            status_code=200,
            reason_phrase="OK",
            headers={
                "Content-Type": "application/json; charset=utf-8",
                "Server": "nginx",
                "X-Request-Id": "abc-123",
                "set-cookie": ["a=1", "b=2"],
            },
            body={"id": 1, "name": "라네즈"},
            http_version="HTTP/1.1",
            url="https://api.example.com/users/1",
            method="GET",
        )
    )


@pytest.fixture
def network_failure():
    return TransportFailure(error_kind=ErrorKind.NETWORK, message="connection refused")


@pytest.fixture
def sample_payload():
    """렌더된 structured 페이로드"""
    return {
        "status": 200,
        "statusText": "OK",
        "headers": {"content-type": "application/json"},
        "requestMeta": {
            "method": "GET",
            "httpVersion": "HTTP/1.1",
            "responseUrl": "https://api.github.com/users/octocat",
        },
        "body": {"login": "octocat"},
    }
