"""WebSocket Package

WebSocket 핸들러 및 프로토콜
"""

from .handler import WebSocketHandler, WebSocketNotifier, get_websocket_handler
from .manager import ConnectionManager, get_connection_manager
from .protocol import (
    ClientCommand,
    ClientMessage,
    ServerMessage,
    ServerMessageType,
    create_connected,
    create_error,
    create_execution_complete,
    create_execution_started,
    create_notification,
    create_pong,
    from_execution_event,
)

__all__ = [
    # Handler
    "WebSocketHandler",
    "WebSocketNotifier",
    "get_websocket_handler",
    # Manager
    "ConnectionManager",
    "get_connection_manager",
    # Protocol
    "ServerMessage",
    "ServerMessageType",
    "ClientMessage",
    "ClientCommand",
    # Message creators
    "create_execution_started",
    "create_execution_complete",
    "create_notification",
    "create_error",
    "create_connected",
    "create_pong",
    "from_execution_event",
]
