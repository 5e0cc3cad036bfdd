"""Destination Naming

저장 파일 이름 제안: response-{host}-{date}.json
"""

from datetime import date
from typing import Any, Optional
from urllib.parse import urlsplit

UNKNOWN_URL_NAME = "unknown-url"


def response_url_of(payload: Any) -> Optional[str]:
    """렌더 페이로드에서 최종 URL 추출

    requestMeta.responseUrl 을 우선하고, 이전 포맷의 request.responseUrl 도 허용한다.
    """
    if not isinstance(payload, dict):
        return None
    for section in ("requestMeta", "request"):
        meta = payload.get(section)
        if isinstance(meta, dict) and meta.get("responseUrl"):
            return str(meta["responseUrl"])
    return None


def host_slug(url: Optional[str]) -> str:
    """호스트에서 최외곽 서브도메인과 최상위 접미사를 떼고 점을 하이픈으로 바꾼다

    api.github.com → github, docs.api.example.co → api-example, localhost → localhost
    """
    if not url:
        return UNKNOWN_URL_NAME
    try:
        hostname = urlsplit(url).hostname or ""
    except ValueError:
        return UNKNOWN_URL_NAME

    labels = [label for label in hostname.split(".") if label]
    if not labels:
        return UNKNOWN_URL_NAME
    if len(labels) >= 3:
        labels = labels[1:-1]
    elif len(labels) == 2:
        labels = labels[:1]
    return "-".join(labels)


def date_slug(today: date) -> str:
    """Mon-Oct-19-2026"""
    return today.strftime("%a-%b-%d-%Y")


def suggest_destination_name(payload: Any, today: date) -> str:
    return f"response-{host_slug(response_url_of(payload))}-{date_slug(today)}.json"
