"""Response - 응답 정규화 및 렌더링"""

from .normalizer import HEADER_ALLOW_LIST, ResponseNormalizer, filter_headers, normalize
from .renderer import ResponseRenderer, render

__all__ = [
    "HEADER_ALLOW_LIST",
    "ResponseNormalizer",
    "ResponseRenderer",
    "filter_headers",
    "normalize",
    "render",
]
