"""Side Channel - 표시 표면 메시지 처리"""

from .handler import PERSIST_RESPONSE, SideChannelHandler, SideChannelMessage
from .naming import UNKNOWN_URL_NAME, host_slug, suggest_destination_name
from .storage import DirectoryResponseStorage, LoggingNotifier, Notifier, ResponseStorage

__all__ = [
    "PERSIST_RESPONSE",
    "SideChannelHandler",
    "SideChannelMessage",
    "UNKNOWN_URL_NAME",
    "host_slug",
    "suggest_destination_name",
    "DirectoryResponseStorage",
    "LoggingNotifier",
    "Notifier",
    "ResponseStorage",
]
