"""API Routes Package"""
from .cache import router as cache_router
from .cells import router as cells_router
from .health import router as health_router
from .notebook import router as notebook_router
from .websocket import router as websocket_router

__all__ = ["cache_router", "cells_router", "health_router", "notebook_router", "websocket_router"]
