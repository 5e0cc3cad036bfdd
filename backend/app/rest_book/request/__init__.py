"""Request - 셀 텍스트 파싱"""

from .parser import ParseResult, RequestParser, parse, try_parse
from .url import validate_url

__all__ = [
    "ParseResult",
    "RequestParser",
    "parse",
    "try_parse",
    "validate_url",
]
