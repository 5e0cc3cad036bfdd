"""Cache - 응답 캐시 협력자"""

from .response_cache import CacheEntry, CacheWriter, ResponseCache, get_response_cache

__all__ = [
    "CacheEntry",
    "CacheWriter",
    "ResponseCache",
    "get_response_cache",
]
