"""Response Renderer 테스트

위치: backend.app.rest_book.response.renderer
"""

from backend.app.rest_book.models import (
    ErrorKind,
    NormalizedResponse,
    RenderTag,
    RequestMeta,
)
from backend.app.rest_book.response import ResponseRenderer, render


def _ok_response(body=None) -> NormalizedResponse:
    return NormalizedResponse(
        status=200,
        status_text="OK",
        headers={"content-type": "application/json", "set-cookie": ["a=1", "b=2"]},
        request_meta=RequestMeta(
            method="GET",
            http_version="HTTP/1.1",
            response_url="https://api.example.com/items",
        ),
        body=body if body is not None else {"items": [1, 2]},
    )


class TestRenderTags:
    """렌더 태그 테스트"""

    def test_success_tags(self):
        output = render(_ok_response())

        assert output.tags == [RenderTag.RICH_SUMMARY, RenderTag.STRUCTURED, RenderTag.MARKUP]
        assert output.get(RenderTag.ERROR) is None

    def test_error_tags(self):
        response = NormalizedResponse.from_error(ErrorKind.TIMEOUT, "timeout of 1s exceeded")
        output = render(response)

        assert output.tags[0] == RenderTag.ERROR
        assert output.get(RenderTag.ERROR) == {
            "ename": "timeout",
            "evalue": "timeout of 1s exceeded",
            "traceback": [],
        }

    def test_mime_types(self):
        outputs = render(_ok_response()).as_cell_outputs()

        assert [o.mime for o in outputs] == [
            "application/x.rest-book-response",
            "application/json",
            "text/html",
        ]


class TestStructured:
    """structured 페이로드 테스트"""

    def test_camel_case_keys(self):
        structured = render(_ok_response()).get(RenderTag.STRUCTURED)

        assert structured["status"] == 200
        assert structured["statusText"] == "OK"
        assert structured["requestMeta"] == {
            "method": "GET",
            "httpVersion": "HTTP/1.1",
            "responseUrl": "https://api.example.com/items",
        }
        assert structured["body"] == {"items": [1, 2]}
        assert "error" not in structured

    def test_error_included(self):
        structured = render(
            NormalizedResponse.from_error(ErrorKind.PARSE, "Not a valid HTTP/HTTPS URL.")
        ).get(RenderTag.STRUCTURED)

        assert structured["status"] is None
        assert structured["error"] == {"kind": "parse", "message": "Not a valid HTTP/HTTPS URL."}

    def test_rich_summary_matches_structured(self):
        output = render(_ok_response())

        assert output.get(RenderTag.RICH_SUMMARY) == output.get(RenderTag.STRUCTURED)

    def test_unserializable_body_falls_back_to_repr(self):
        """직렬화할 수 없는 본문은 repr"""
        body = {"value": object()}
        structured = ResponseRenderer().structured(_ok_response(body))

        assert isinstance(structured["body"], str)
        assert "object" in structured["body"]


class TestMarkup:
    """markup 렌더 테스트"""

    def test_contains_status_and_headers(self):
        html = render(_ok_response()).get(RenderTag.MARKUP)

        assert "200 OK" in html
        assert "<th>content-type</th>" in html
        assert html.count("<th>set-cookie</th>") == 2
        assert "https://api.example.com/items" in html

    def test_body_is_escaped(self):
        html = render(_ok_response("<script>alert(1)</script>")).get(RenderTag.MARKUP)

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_error_markup(self):
        html = render(
            NormalizedResponse.from_error(ErrorKind.NETWORK, "connection refused")
        ).get(RenderTag.MARKUP)

        assert "rest-book-error" in html
        assert "connection refused" in html


class TestDeterminism:
    """같은 입력 → 같은 바이트"""

    def test_same_bytes(self):
        response = _ok_response()

        first = render(response)
        second = ResponseRenderer().render(response)

        for tag in first.tags:
            assert first.to_bytes(tag) == second.to_bytes(tag)

    def test_render_does_not_mutate_response(self):
        response = _ok_response()
        before = response.model_dump()

        render(response)

        assert response.model_dump() == before
