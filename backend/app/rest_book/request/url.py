"""URL Validation"""

from typing import Optional
from urllib.parse import urlencode, urlsplit, urlunsplit

ALLOWED_SCHEMES = ("http", "https")


def url_error(url: str) -> Optional[str]:
    """URL 검증 실패 사유 (유효하면 None)"""
    if not url or any(ch.isspace() for ch in url):
        return f"Not a valid HTTP/HTTPS URL: {url!r}"

    try:
        parts = urlsplit(url)
        # 잘못된 포트는 접근 시점에 ValueError
        parts.port
    except ValueError:
        return f"Not a valid HTTP/HTTPS URL: {url!r}"

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return f"Unsupported URL scheme {parts.scheme or '(none)'!r}; only http and https are allowed"
    if not parts.hostname:
        return f"URL has no host: {url!r}"
    return None


def validate_url(url: str) -> bool:
    return url_error(url) is None


def append_query(url: str, pairs: list[tuple[str, str]]) -> str:
    """기존 쿼리 뒤에 파라미터 추가 (사용자가 쓴 쿼리는 그대로 둔다)"""
    if not pairs:
        return url
    parts = urlsplit(url)
    query = "&".join(part for part in (parts.query, urlencode(pairs)) if part)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
