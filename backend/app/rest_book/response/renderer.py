"""Response Renderer

NormalizedResponse → 태그별 출력 (structured / markup / rich-summary / error)

모든 태그는 같은 NormalizedResponse 에서 결정적으로 만들어지며,
렌더링할 수 없는 필드는 예외 대신 repr 로 대체된다.
"""

import json
from html import escape
from typing import Any

from jinja2 import BaseLoader, Environment

from backend.app.core.logging import get_logger
from backend.app.rest_book.models import NormalizedResponse, RenderedOutput, RenderTag

logger = get_logger(__name__)


_MARKUP_TEMPLATE = """\
<div class="rest-book-response">
{% if error %}
<div class="rest-book-error"><strong>{{ error.kind }}</strong>: {{ error.message }}</div>
{% else %}
<div class="rest-book-status">{{ status }}{% if status_text %} {{ status_text }}{% endif %}</div>
{% endif %}
{% if method or url %}
<div class="rest-book-request">{{ method or "" }} {{ url or "" }}{% if http_version %} ({{ http_version }}){% endif %}</div>
{% endif %}
{% if headers %}
<table class="rest-book-headers">
{% for name, value in headers %}
<tr><th>{{ name }}</th><td>{{ value }}</td></tr>
{% endfor %}
</table>
{% endif %}
{% if body is not none %}
<pre class="rest-book-body">{{ body }}</pre>
{% endif %}
</div>
"""


class ResponseRenderer:
    """응답 렌더러"""

    def __init__(self):
        self.env = Environment(
            loader=BaseLoader(),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.from_string(_MARKUP_TEMPLATE)

    def render(self, response: NormalizedResponse) -> RenderedOutput:
        """응답 렌더링

        Args:
            response: 정규화된 응답

        Returns:
            태그별 RenderedOutput
        """
        structured = self.structured(response)

        items: dict[RenderTag, Any] = {
            RenderTag.STRUCTURED: structured,
            RenderTag.MARKUP: self.markup(structured),
            # rich-summary 는 structured 와 동일한 페이로드
            RenderTag.RICH_SUMMARY: json.loads(json.dumps(structured, default=repr)),
        }
        if response.error is not None:
            items[RenderTag.ERROR] = {
                "ename": response.error.kind.value,
                "evalue": response.error.message,
                "traceback": [],
            }
        return RenderedOutput(items=items)

    def structured(self, response: NormalizedResponse) -> dict[str, Any]:
        """구조화 페이로드 (camelCase 키)"""
        try:
            dumped = response.to_payload()
        except Exception as e:
            logger.debug("Body is not JSON serializable, using repr", error=str(e))
            dumped = response.model_copy(update={"body": repr(response.body)}).to_payload()

        payload: dict[str, Any] = {
            "status": dumped.get("status"),
            "statusText": dumped.get("statusText"),
            "headers": dumped.get("headers", {}),
            "requestMeta": dumped.get("requestMeta", {}),
            "body": dumped.get("body"),
        }
        if dumped.get("error") is not None:
            payload["error"] = dumped["error"]
        return payload

    def markup(self, structured: dict[str, Any]) -> str:
        """사람이 읽는 HTML"""
        try:
            meta = structured.get("requestMeta") or {}
            return self.template.render(
                status=structured.get("status"),
                status_text=structured.get("statusText"),
                error=structured.get("error"),
                method=meta.get("method"),
                url=meta.get("responseUrl"),
                http_version=meta.get("httpVersion"),
                headers=_header_rows(structured.get("headers") or {}),
                body=_body_text(structured.get("body")),
            )
        except Exception as e:
            logger.warning("Markup rendering failed", error=str(e))
            return f'<pre class="rest-book-raw">{escape(repr(structured))}</pre>'


def _header_rows(headers: dict[str, Any]) -> list[tuple[str, str]]:
    rows: list[tuple[str, str]] = []
    for name, value in headers.items():
        if isinstance(value, list):
            rows.extend((name, str(item)) for item in value)
        else:
            rows.append((name, str(value)))
    return rows


def _body_text(body: Any) -> Any:
    if body is None or isinstance(body, str):
        return body
    try:
        return json.dumps(body, indent=4, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(body)


_renderer = ResponseRenderer()


def render(response: NormalizedResponse) -> RenderedOutput:
    return _renderer.render(response)
