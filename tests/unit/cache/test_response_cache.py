"""ResponseCache 테스트

위치: backend.app.rest_book.cache.response_cache
"""

from backend.app.rest_book.cache import CacheWriter, ResponseCache
from backend.app.rest_book.models import ErrorKind, NormalizedResponse
from backend.app.rest_book.request import parse


def _ok(status: int = 200) -> NormalizedResponse:
    return NormalizedResponse(status=status)


class TestResponseCache:
    """응답 캐시 테스트"""

    def test_record_and_get(self):
        cache = ResponseCache()
        request = parse("GET https://example.com/a")

        cache.record(request, _ok())

        assert cache.get(request).status == 200
        assert cache.get_stats()["writes"] == 1
        assert cache.get_stats()["hits"] == 1

    def test_miss(self):
        cache = ResponseCache()

        assert cache.get(parse("GET https://example.com/none")) is None
        assert cache.get_stats()["misses"] == 1

    def test_last_response_wins(self):
        """같은 메서드+URL 은 덮어쓴다"""
        cache = ResponseCache()
        request = parse("GET https://example.com/a")

        cache.record(request, _ok(200))
        cache.record(parse("GET https://example.com/a\nAccept: text/plain"), _ok(304))

        assert cache.get(request).status == 304
        assert len(cache.entries()) == 1

    def test_method_is_part_of_key(self):
        cache = ResponseCache()

        cache.record(parse("GET https://example.com/a"), _ok(200))
        cache.record(parse("DELETE https://example.com/a"), _ok(204))

        assert cache.get(parse("GET https://example.com/a")).status == 200
        assert len(cache.entries()) == 2

    def test_eviction(self):
        cache = ResponseCache(max_entries=2)

        for i in range(3):
            cache.record(parse(f"GET https://example.com/{i}"), _ok())

        assert cache.get(parse("GET https://example.com/0")) is None
        assert cache.get(parse("GET https://example.com/2")) is not None
        assert cache.get_stats()["evictions"] == 1
        assert cache.get_stats()["size"] == 2

    def test_error_responses_are_recorded(self):
        cache = ResponseCache()
        request = parse("GET https://example.com/a")

        cache.record(request, NormalizedResponse.from_error(ErrorKind.NETWORK, "down"))

        assert cache.entries()[0]["is_error"] is True

    def test_clear(self):
        cache = ResponseCache()
        cache.record(parse("GET https://example.com/a"), _ok())

        assert cache.clear() == 1
        assert cache.entries() == []

    def test_satisfies_writer_protocol(self):
        assert isinstance(ResponseCache(), CacheWriter)
