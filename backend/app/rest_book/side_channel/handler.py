"""Side-Channel Handler

표시 표면에서 비동기로 오는 메시지 처리.
현재는 "persist-response" 하나만 인식하고 나머지는 조용히 무시한다.
"""

import inspect
from datetime import date
from typing import Any, Callable, Optional

from pydantic import BaseModel

from backend.app.core.errors import StorageError
from backend.app.core.logging import get_logger
from .naming import suggest_destination_name
from .storage import LoggingNotifier, Notifier, ResponseStorage

logger = get_logger(__name__)

PERSIST_RESPONSE = "persist-response"


class SideChannelMessage(BaseModel):
    """표면 → 코어 메시지"""

    command: str
    data: Any = None


class SideChannelHandler:
    """사이드 채널 핸들러

    Args:
        storage: 저장 협력자
        notifier: 일시 알림 협력자
        today: 오늘 날짜 공급자 (테스트 주입용)
    """

    def __init__(
        self,
        storage: ResponseStorage,
        notifier: Optional[Notifier] = None,
        today: Callable[[], date] = date.today,
    ):
        self.storage = storage
        self.notifier = notifier or LoggingNotifier()
        self.today = today

    async def handle(self, message: Any) -> None:
        """메시지 처리

        Args:
            message: SideChannelMessage 또는 {"command": ..., "data": ...} dict
        """
        command, data = _unpack(message)

        handlers = {
            PERSIST_RESPONSE: self._handle_persist_response,
        }

        handler = handlers.get(command)
        if handler is None:
            logger.debug("Ignoring side-channel message", command=command)
            return
        await handler(data)

    async def _handle_persist_response(self, data: Any) -> None:
        """렌더된 응답을 저장 협력자로 그대로 전달"""
        name = suggest_destination_name(data, self.today())
        try:
            location = await self.storage.prompt_and_write(name, data)
        except StorageError as e:
            logger.warning("Response persist failed", error=e.message, name=name)
            await self._notify(e.message)
            return
        except Exception as e:
            logger.warning("Response persist failed", error=str(e), name=name)
            await self._notify(str(e) or type(e).__name__)
            return

        if location:
            await self._notify(f"Saved response to {location}")

    async def _notify(self, text: str) -> None:
        try:
            result = self.notifier.notify(text)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.warning("Notification failed", error=str(e))


def _unpack(message: Any) -> tuple[Optional[str], Any]:
    if isinstance(message, SideChannelMessage):
        return message.command, message.data
    if isinstance(message, dict):
        return message.get("command"), message.get("data")
    return None, None
