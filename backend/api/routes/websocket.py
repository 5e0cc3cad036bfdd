"""WebSocket Route"""

from fastapi import APIRouter, WebSocket

from backend.api.websocket import get_websocket_handler

router = APIRouter(tags=["WebSocket"])


@router.websocket("/ws/{document_id}")
async def websocket_endpoint(
    websocket: WebSocket,
    document_id: str,
) -> None:
    """문서 단위 실행 이벤트 / 사이드 채널 연결"""
    handler = get_websocket_handler()
    await handler.handle_connection(websocket, document_id)
