"""ResponseCache - 요청별 마지막 응답 저장소

엔진은 쓰기 인터페이스(record)만 사용한다.
조회는 표시 표면이 캐시된 응답을 다시 렌더링할 때 사용한다.
"""

from collections import OrderedDict
from datetime import datetime
from hashlib import md5
from threading import Lock
from typing import Any, Awaitable, Dict, Optional, Protocol, Union, runtime_checkable

from backend.app.core.config import settings
from backend.app.core.logging import get_logger
from backend.app.rest_book.models import NormalizedResponse, RequestDescriptor

logger = get_logger(__name__)


@runtime_checkable
class CacheWriter(Protocol):
    """응답 캐시 쓰기 인터페이스 (best-effort)"""

    def record(
        self,
        request: RequestDescriptor,
        response: NormalizedResponse,
    ) -> Union[None, Awaitable[None]]:
        ...


class CacheEntry:
    """캐시 엔트리

    Attributes:
        key: 캐시 키
        request: 원본 요청
        response: 마지막 응답
        recorded_at: 기록 시간
        hit_count: 조회 횟수
    """

    def __init__(
        self,
        key: str,
        request: RequestDescriptor,
        response: NormalizedResponse,
    ):
        self.key = key
        self.request = request
        self.response = response
        self.recorded_at = datetime.now()
        self.hit_count = 0

    def hit(self) -> NormalizedResponse:
        """캐시 히트 (조회 횟수 증가)"""
        self.hit_count += 1
        return self.response

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "method": self.request.method.value,
            "url": self.request.url,
            "recorded_at": self.recorded_at.isoformat(),
            "hit_count": self.hit_count,
            "is_error": self.response.is_error,
        }


class ResponseCache:
    """요청 → 마지막 응답 캐시

    Example:
        ```python
        cache = get_response_cache()
        cache.record(request, response)
        last = cache.get(request)
        ```
    """

    def __init__(self, max_entries: int = settings.CACHE_MAX_ENTRIES):
        self.max_entries = max_entries
        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = Lock()
        self._stats = {
            "writes": 0,
            "hits": 0,
            "misses": 0,
            "evictions": 0,
        }

    def make_key(self, request: RequestDescriptor) -> str:
        """캐시 키 생성 (메서드 + URL 의 MD5)"""
        return md5(request.cache_key.encode()).hexdigest()

    def record(self, request: RequestDescriptor, response: NormalizedResponse) -> None:
        """응답 기록 (같은 요청은 덮어쓴다)"""
        key = self.make_key(request)
        with self._lock:
            self._cache.pop(key, None)
            self._cache[key] = CacheEntry(key, request, response)
            self._stats["writes"] += 1

            while len(self._cache) > self.max_entries:
                evicted, _ = self._cache.popitem(last=False)
                self._stats["evictions"] += 1
                logger.debug("Cache evicted", key=evicted[:8])

    def get(self, request: RequestDescriptor) -> Optional[NormalizedResponse]:
        """마지막 응답 조회"""
        key = self.make_key(request)
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return None
            self._stats["hits"] += 1
            return entry.hit()

    def entries(self) -> list[Dict[str, Any]]:
        with self._lock:
            return [entry.to_dict() for entry in self._cache.values()]

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {**self._stats, "size": len(self._cache), "max_entries": self.max_entries}

    def clear(self) -> int:
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
        logger.info("Response cache cleared", count=count)
        return count


# 싱글톤
_response_cache: Optional[ResponseCache] = None


def get_response_cache() -> ResponseCache:
    """ResponseCache 싱글톤 반환"""
    global _response_cache
    if _response_cache is None:
        _response_cache = ResponseCache()
    return _response_cache
