"""Cancellation Token

실행 시도 하나에 1:1 로 묶이는 협조적 취소 핸들
"""

import asyncio
import threading
from typing import Callable, Optional

from backend.app.core.logging import get_logger

logger = get_logger(__name__)

CancelCallback = Callable[[], object]


class CancellationToken:
    """협조적 취소 토큰

    - cancel() 은 멱등이며, 바인딩된 콜백을 한 번씩 호출한다.
    - 이미 취소된 토큰에 bind() 하면 콜백이 즉시 호출된다.
    - close() 이후(종료 상태 이후)의 cancel() 은 아무 효과가 없다.

    Example:
        ```python
        token = CancellationToken()
        unbind = token.bind(task.cancel)
        ...
        token.cancel()
        ```
    """

    def __init__(self, reason: Optional[str] = None):
        self._cancelled = False
        self._closed = False
        self._reason = reason
        self._callbacks: list[CancelCallback] = []
        self._lock = threading.Lock()
        self._event: Optional[asyncio.Event] = None

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> bool:
        """취소 요청

        Returns:
            이번 호출로 실제 취소되었는지 여부
        """
        with self._lock:
            if self._cancelled or self._closed:
                return False
            self._cancelled = True
            self._reason = reason or self._reason or "cancelled by user"
            callbacks = list(self._callbacks)
            self._callbacks.clear()

        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.warning("Cancel callback failed", error=str(e))

        if self._event is not None:
            self._event.set()
        return True

    def bind(self, callback: CancelCallback) -> Callable[[], None]:
        """취소 시 호출될 콜백 등록

        Returns:
            등록 해제 함수
        """
        with self._lock:
            fire_now = self._cancelled
            if not fire_now:
                self._callbacks.append(callback)

        if fire_now:
            callback()

        def unbind() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return unbind

    def close(self) -> None:
        """종료 상태 도달 후 호출: 이후 cancel() 은 no-op"""
        with self._lock:
            self._closed = True
            self._callbacks.clear()

    async def wait(self) -> None:
        """취소될 때까지 대기 (트랜스포트가 협조적으로 관찰할 때 사용)"""
        if self._cancelled:
            return
        if self._event is None:
            self._event = asyncio.Event()
            if self._cancelled:
                self._event.set()
        await self._event.wait()
