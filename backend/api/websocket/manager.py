"""WebSocket Connection Manager

연결별 메시지 큐 관리 및 전송.
같은 문서에 여러 연결이 붙을 수 있으며 각 연결은 자기 큐를 가진다.
"""

import asyncio
from typing import Optional, Union

from fastapi import WebSocket

from backend.app.core.logging import get_logger
from backend.app.rest_book.models import ExecutionEvent
from .protocol import ServerMessage, from_execution_event

logger = get_logger(__name__)

QueueItem = Union[ServerMessage, ExecutionEvent]


class ConnectionManager:
    """WebSocket 연결 관리자"""

    def __init__(self):
        # document_id → {id(WebSocket) → asyncio.Queue (ExecutionEvent / ServerMessage)}
        self._connections: dict[str, dict[int, asyncio.Queue]] = {}

    async def connect(self, websocket: WebSocket, document_id: str) -> asyncio.Queue:
        """연결 수락

        Args:
            websocket: WebSocket 연결
            document_id: 문서 ID

        Returns:
            연결 전용 메시지 큐 (실행 엔진 이벤트 큐로도 쓰인다)
        """
        await websocket.accept()
        queue: asyncio.Queue = asyncio.Queue()
        self._connections.setdefault(document_id, {})[id(websocket)] = queue

        logger.info(
            "WebSocket connected",
            document_id=document_id,
            connections=len(self._connections[document_id]),
        )
        return queue

    def disconnect(self, document_id: str, websocket: WebSocket) -> None:
        """연결 해제 (같은 문서의 다른 연결은 유지)"""
        connections = self._connections.get(document_id)
        if connections is None or connections.pop(id(websocket), None) is None:
            return
        if not connections:
            del self._connections[document_id]

        logger.info("WebSocket disconnected", document_id=document_id)

    def get_queue(self, document_id: str, websocket: WebSocket) -> Optional[asyncio.Queue]:
        return self._connections.get(document_id, {}).get(id(websocket))

    async def send_message(
        self,
        document_id: str,
        websocket: WebSocket,
        message: ServerMessage,
    ) -> bool:
        """메시지 전송

        Returns:
            전송 성공 여부
        """
        if self.get_queue(document_id, websocket) is None:
            logger.warning("No connection for document", document_id=document_id)
            return False

        try:
            await websocket.send_json(message.model_dump(mode="json"))
            return True
        except Exception as e:
            logger.error(
                "Failed to send message",
                document_id=document_id,
                error=str(e),
            )
            self.disconnect(document_id, websocket)
            return False

    def enqueue_message(
        self,
        document_id: str,
        websocket: WebSocket,
        message: QueueItem,
    ) -> bool:
        """메시지 큐에 추가 (비동기 전송용)

        Returns:
            큐 추가 성공 여부
        """
        queue = self.get_queue(document_id, websocket)
        if queue is None:
            return False

        queue.put_nowait(message)
        return True

    async def process_queue(self, document_id: str, websocket: WebSocket) -> None:
        """메시지 큐 처리 (연결별 백그라운드 태스크)

        ExecutionEvent 는 ServerMessage 로 바꿔 보낸다.
        """
        queue = self.get_queue(document_id, websocket)
        if queue is None:
            return

        while True:
            try:
                item = await asyncio.wait_for(queue.get(), timeout=1.0)
                if isinstance(item, ExecutionEvent):
                    item = from_execution_event(item, document_id)
                await self.send_message(document_id, websocket, item)
                queue.task_done()
            except asyncio.TimeoutError:
                if self.get_queue(document_id, websocket) is not queue:
                    break
            except Exception as e:
                logger.error(
                    "Queue processing error",
                    document_id=document_id,
                    error=str(e),
                )
                break

    def get_connection_count(self) -> int:
        return sum(len(connections) for connections in self._connections.values())


# 싱글톤
_connection_manager: Optional[ConnectionManager] = None


def get_connection_manager() -> ConnectionManager:
    """ConnectionManager 싱글톤 반환"""
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager()
    return _connection_manager
