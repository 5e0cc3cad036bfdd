"""Storage Collaborators

응답 저장 협력자 및 사용자 알림 협력자
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Optional, Protocol, Union, runtime_checkable

from backend.app.core.config import settings
from backend.app.core.errors import StorageError
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class ResponseStorage(Protocol):
    """저장 위치 선택 + 쓰기 협력자

    사용자가 저장을 취소하면 아무것도 쓰지 않고 정상 반환한다.
    """

    async def prompt_and_write(self, suggested_name: str, payload: Any) -> Optional[str]:
        ...


@runtime_checkable
class Notifier(Protocol):
    """일시적인 사용자 알림"""

    def notify(self, message: str) -> Union[None, Awaitable[None]]:
        ...


class DirectoryResponseStorage:
    """지정 디렉터리에 제안된 이름 그대로 JSON 저장"""

    def __init__(self, base_dir: Union[str, Path] = settings.RESPONSE_SAVE_DIR):
        self.base_dir = Path(base_dir)

    async def prompt_and_write(self, suggested_name: str, payload: Any) -> Optional[str]:
        # 경로 구분자는 허용하지 않는다
        target = self.base_dir / Path(suggested_name).name
        try:
            text = json.dumps(payload, indent=4, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Response is not JSON serializable: {e}") from e

        try:
            await asyncio.to_thread(self._write, target, text)
        except OSError as e:
            raise StorageError(str(e), details={"path": str(target)}) from e

        logger.info("Response saved", path=str(target))
        return str(target)

    def _write(self, target: Path, text: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")


class LoggingNotifier:
    """알림을 로그로 남기는 기본 구현"""

    def __init__(self):
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)
        logger.info("Notification", message=message)
