"""Transport - 네트워크 호출 협력자"""

from .base import Transport
from .httpx_transport import HttpxTransport, to_transport_response

__all__ = [
    "HttpxTransport",
    "Transport",
    "to_transport_response",
]
