"""Request Parser

셀 텍스트 → RequestDescriptor

문법:
    # 주석
    @timeout 5
    [METHOD] URL [HTTP/1.1]
        ?key=value
        &other=value
    Name: Value

    body...

순수 함수이며 공유 상태가 없으므로 여러 셀에서 동시에 호출해도 안전하다.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import parse_qsl

from pydantic import ValidationError

from backend.app.core.errors import ErrorCode, ParseError
from backend.app.core.logging import get_logger
from backend.app.rest_book.models import (
    HttpMethod,
    RequestBody,
    RequestDescriptor,
    RequestOptions,
    set_header,
)
from .url import append_query, url_error

logger = get_logger(__name__)

_HEADER_RE = re.compile(r"^([!#$%&'*+\-.^_`|~0-9A-Za-z]+)\s*:\s*(.*)$")
_HTTP_VERSION_RE = re.compile(r"^HTTP/\d(\.\d)?$", re.IGNORECASE)
_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0"}


@dataclass(frozen=True)
class ParseResult:
    """parse 결과 (예외를 던지지 않는 경계용)"""

    request: Optional[RequestDescriptor] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.request is not None


class RequestParser:
    """요청 텍스트 파서"""

    DIRECTIVES = {
        "timeout": "timeout",
        "follow-redirects": "follow_redirects",
        "max-redirects": "max_redirects",
    }

    def parse(self, text: str) -> RequestDescriptor:
        """요청 텍스트 파싱

        Args:
            text: 셀 원문

        Returns:
            RequestDescriptor

        Raises:
            ParseError: 메서드/URL/헤더/지시어가 올바르지 않을 때
        """
        lines = (text or "").splitlines()
        index = 0
        options: dict[str, Any] = {}

        # 선행 빈 줄, 주석, 지시어
        while index < len(lines):
            stripped = lines[index].strip()
            if not stripped or stripped.startswith("#"):
                index += 1
                continue
            if stripped.startswith("@"):
                self._parse_directive(stripped, index + 1, options)
                index += 1
                continue
            break

        if index >= len(lines):
            raise ParseError(code=ErrorCode.PARSE_EMPTY_REQUEST)

        method, url = self._parse_request_line(lines[index].strip(), index + 1)
        index += 1

        # 쿼리 연속 줄
        query: list[tuple[str, str]] = []
        while index < len(lines):
            stripped = lines[index].strip()
            if not stripped or stripped[0] not in "?&":
                break
            query.extend(parse_qsl(stripped[1:], keep_blank_values=True))
            index += 1
        url = append_query(url, query)

        # 헤더 블록 (첫 빈 줄까지)
        headers: dict[str, str] = {}
        while index < len(lines):
            line = lines[index]
            if not line.strip():
                index += 1
                break
            match = _HEADER_RE.match(line.strip())
            if not match:
                raise ParseError(
                    f"Malformed header on line {index + 1}: {line.strip()!r}",
                    code=ErrorCode.PARSE_MALFORMED_HEADER,
                    line=index + 1,
                )
            set_header(headers, match.group(1), match.group(2).strip())
            index += 1

        body = self._parse_body(lines[index:], headers)

        try:
            request_options = RequestOptions(**options)
        except ValidationError as e:
            raise ParseError(str(e), code=ErrorCode.PARSE_INVALID_DIRECTIVE) from e

        return RequestDescriptor(
            method=method,
            url=url,
            headers=headers,
            body=body,
            options=request_options,
        )

    def try_parse(self, text: str) -> ParseResult:
        """예외 대신 ParseResult 로 실패를 돌려준다"""
        try:
            return ParseResult(request=self.parse(text))
        except ParseError as e:
            logger.debug("Request parse failed", code=e.code.value, error=e.message)
            return ParseResult(error=e)

    def _parse_request_line(self, line: str, line_no: int) -> tuple[HttpMethod, str]:
        tokens = line.split()
        if len(tokens) > 1 and _HTTP_VERSION_RE.match(tokens[-1]):
            tokens = tokens[:-1]

        if len(tokens) == 1:
            method, url = HttpMethod.GET, tokens[0]
        elif len(tokens) == 2:
            try:
                method = HttpMethod(tokens[0].upper())
            except ValueError:
                raise ParseError(
                    f"Unsupported method {tokens[0]!r}",
                    code=ErrorCode.PARSE_INVALID_METHOD,
                    line=line_no,
                )
            url = tokens[1]
        else:
            raise ParseError(
                f"Expected '[METHOD] URL' on line {line_no}, got {line!r}",
                code=ErrorCode.PARSE_INVALID_URL,
                line=line_no,
            )

        reason = url_error(url)
        if reason:
            raise ParseError(reason, code=ErrorCode.PARSE_INVALID_URL, line=line_no)
        return method, url

    def _parse_directive(self, line: str, line_no: int, options: dict[str, Any]) -> None:
        name, _, value = line[1:].partition(" ")
        field = self.DIRECTIVES.get(name.strip().lower())
        value = value.strip()
        if field is None or not value:
            raise ParseError(
                f"Unknown or empty directive {line!r}",
                code=ErrorCode.PARSE_INVALID_DIRECTIVE,
                line=line_no,
            )

        if field == "follow_redirects":
            lowered = value.lower()
            if lowered not in _TRUE_VALUES | _FALSE_VALUES:
                raise ParseError(
                    f"Expected a boolean for @{name}, got {value!r}",
                    code=ErrorCode.PARSE_INVALID_DIRECTIVE,
                    line=line_no,
                )
            options[field] = lowered in _TRUE_VALUES
            return

        try:
            options[field] = float(value) if field == "timeout" else int(value)
        except ValueError:
            raise ParseError(
                f"Expected a number for @{name}, got {value!r}",
                code=ErrorCode.PARSE_INVALID_DIRECTIVE,
                line=line_no,
            )

    def _parse_body(self, lines: list[str], headers: dict[str, str]) -> Optional[RequestBody]:
        content = "\n".join(lines)
        if not content.strip():
            return None

        content_type = None
        for name, value in headers.items():
            if name.lower() == "content-type":
                content_type = value
        if content_type is None:
            content_type = _infer_content_type(content)
        return RequestBody(content=content, content_type=content_type)


def _infer_content_type(content: str) -> str:
    try:
        json.loads(content)
    except ValueError:
        return "text/plain"
    return "application/json"


_parser = RequestParser()


def parse(text: str) -> RequestDescriptor:
    """모듈 수준 진입점"""
    return _parser.parse(text)


def try_parse(text: str) -> ParseResult:
    return _parser.try_parse(text)
