"""WebSocket Handler

문서 단위 WebSocket 요청 처리.
execute / cancel / ping 은 커널이, 나머지는 사이드 채널이 처리한다.
"""

import asyncio
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from backend.app.core.errors import RestBookError
from backend.app.core.logging import clear_log_context, get_logger, log_context
from backend.app.rest_book.execution import KernelRegistry, get_kernel_registry
from backend.app.rest_book.side_channel import (
    DirectoryResponseStorage,
    ResponseStorage,
    SideChannelHandler,
    SideChannelMessage,
)
from .manager import ConnectionManager, get_connection_manager
from .protocol import (
    ClientCommand,
    ClientMessage,
    create_connected,
    create_error,
    create_notification,
    create_pong,
)

logger = get_logger(__name__)


class WebSocketNotifier:
    """사이드 채널 알림을 문서 연결로 전달"""

    def __init__(self, manager: ConnectionManager, document_id: str, websocket: WebSocket):
        self.manager = manager
        self.document_id = document_id
        self.websocket = websocket

    def notify(self, message: str) -> None:
        self.manager.enqueue_message(
            self.document_id,
            self.websocket,
            create_notification(message, self.document_id),
        )


class WebSocketHandler:
    """WebSocket 핸들러"""

    def __init__(
        self,
        connection_manager: Optional[ConnectionManager] = None,
        registry: Optional[KernelRegistry] = None,
        storage: Optional[ResponseStorage] = None,
    ):
        self.manager = connection_manager or get_connection_manager()
        self._registry = registry
        self.storage = storage or DirectoryResponseStorage()
        # 실행 중인 execute 태스크 (참조 유지용)
        self._tasks: dict[str, set[asyncio.Task]] = {}

    @property
    def registry(self) -> KernelRegistry:
        return self._registry or get_kernel_registry()

    async def handle_connection(
        self,
        websocket: WebSocket,
        document_id: str,
    ) -> None:
        """WebSocket 연결 처리"""
        log_context(document_id=document_id)
        queue = await self.manager.connect(websocket, document_id)
        self.registry.attach_events(document_id, queue)
        sender = asyncio.create_task(self.manager.process_queue(document_id, websocket))
        side_channel = SideChannelHandler(
            storage=self.storage,
            notifier=WebSocketNotifier(self.manager, document_id, websocket),
        )

        try:
            await self.manager.send_message(document_id, websocket, create_connected(document_id))
            await self._receive_loop(websocket, document_id, side_channel)

        except WebSocketDisconnect:
            logger.info("Client disconnected", document_id=document_id)
        except Exception as e:
            logger.error(
                "WebSocket error",
                document_id=document_id,
                error=str(e),
            )
        finally:
            self.registry.detach_events(document_id, queue)
            self.manager.disconnect(document_id, websocket)
            sender.cancel()
            self._cleanup(document_id)
            clear_log_context()

    async def _receive_loop(
        self,
        websocket: WebSocket,
        document_id: str,
        side_channel: SideChannelHandler,
    ) -> None:
        """메시지 수신 루프"""
        while True:
            try:
                data = await websocket.receive_json()
                message = ClientMessage(**data)
                await self._handle_message(websocket, document_id, message, side_channel)
            except WebSocketDisconnect:
                raise
            except (ValidationError, TypeError, ValueError) as e:
                logger.warning(
                    "Invalid client message",
                    document_id=document_id,
                    error=str(e),
                )
                await self.manager.send_message(
                    document_id,
                    websocket,
                    create_error("INVALID_MESSAGE", str(e), document_id),
                )

    async def _handle_message(
        self,
        websocket: WebSocket,
        document_id: str,
        message: ClientMessage,
        side_channel: SideChannelHandler,
    ) -> None:
        """메시지 처리"""
        logger.debug(
            "Received message",
            document_id=document_id,
            command=message.command,
        )

        handlers = {
            ClientCommand.EXECUTE.value: self._handle_execute,
            ClientCommand.CANCEL.value: self._handle_cancel,
            ClientCommand.PING.value: self._handle_ping,
        }

        handler = handlers.get(message.command)
        if handler:
            await handler(websocket, document_id, message)
        else:
            await side_channel.handle(
                SideChannelMessage(command=message.command, data=message.data)
            )

    async def _handle_execute(
        self,
        websocket: WebSocket,
        document_id: str,
        message: ClientMessage,
    ) -> None:
        """셀 실행 시작 (완료는 이벤트 큐로 전달)"""
        data = message.data if isinstance(message.data, dict) else {}
        cell_id = data.get("cell_id")
        text = data.get("text")
        if not isinstance(cell_id, str) or not isinstance(text, str):
            await self.manager.send_message(
                document_id,
                websocket,
                create_error("INVALID_MESSAGE", "execute requires cell_id and text", document_id),
            )
            return

        engine = self.registry.get(document_id)
        task = asyncio.create_task(engine.execute(cell_id, text))
        tasks = self._tasks.setdefault(document_id, set())
        tasks.add(task)
        task.add_done_callback(tasks.discard)
        task.add_done_callback(
            lambda done: self._report_failure(done, websocket, document_id, cell_id)
        )

    async def _handle_cancel(
        self,
        websocket: WebSocket,
        document_id: str,
        message: ClientMessage,
    ) -> None:
        """셀 실행 취소"""
        data = message.data if isinstance(message.data, dict) else {}
        cell_id = data.get("cell_id")
        if not isinstance(cell_id, str):
            return

        engine = self.registry.get(document_id)
        cancelled = engine.cancel_cell(cell_id, data.get("reason") or "cancelled by user")
        logger.info(
            "Cell cancelled via WebSocket",
            document_id=document_id,
            cell_id=cell_id,
            cancelled=cancelled,
        )

    async def _handle_ping(
        self,
        websocket: WebSocket,
        document_id: str,
        message: ClientMessage,
    ) -> None:
        """핑 응답"""
        await self.manager.send_message(document_id, websocket, create_pong(document_id))

    def _report_failure(
        self,
        task: asyncio.Task,
        websocket: WebSocket,
        document_id: str,
        cell_id: str,
    ) -> None:
        """실행 태스크가 예외로 끝나면 로그를 남기고 클라이언트에 에러 전달"""
        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return

        logger.error(
            "Cell execution failed",
            document_id=document_id,
            cell_id=cell_id,
            error=str(error),
        )
        code = error.code.value if isinstance(error, RestBookError) else "EXECUTION_FAILED"
        self.manager.enqueue_message(
            document_id,
            websocket,
            create_error(code, str(error), document_id),
        )

    def _cleanup(self, document_id: str) -> None:
        """연결 종료 후 정리 (실행 중인 태스크는 끝날 때까지 참조 유지)"""
        tasks = self._tasks.get(document_id)
        if tasks is not None and not tasks:
            del self._tasks[document_id]


# 싱글톤
_handler: Optional[WebSocketHandler] = None


def get_websocket_handler() -> WebSocketHandler:
    """WebSocketHandler 싱글톤 반환"""
    global _handler
    if _handler is None:
        _handler = WebSocketHandler()
    return _handler
