"""Health Check Routes"""

from datetime import datetime
from pathlib import Path
from typing import Any

from fastapi import APIRouter

from backend.api.schemas.response import HealthDetailResponse, HealthResponse
from backend.api.websocket import get_connection_manager
from backend.app.core.config import settings
from backend.app.core.logging import get_logger
from backend.app.rest_book.cache import get_response_cache
from backend.app.rest_book.execution import get_kernel_registry

router = APIRouter(prefix="/health", tags=["Health"])
logger = get_logger(__name__)


def _check_kernels() -> dict[str, Any]:
    """커널 상태 체크"""
    try:
        registry = get_kernel_registry()
        running = sum(
            len(registry.get(document_id).running_attempts())
            for document_id in registry.document_ids()
        )
        return {
            "status": "ok",
            "message": f"Documents: {len(registry.document_ids())}",
            "documents": len(registry.document_ids()),
            "running_attempts": running,
        }
    except Exception as e:
        return {
            "status": "error",
            "message": f"Kernel error: {str(e)}",
        }


def _check_cache() -> dict[str, Any]:
    """응답 캐시 체크"""
    try:
        stats = get_response_cache().get_stats()
        return {"status": "ok", "message": "Response cache available", **stats}
    except Exception as e:
        return {
            "status": "error",
            "message": f"Cache error: {str(e)}",
        }


def _check_storage() -> dict[str, Any]:
    """응답 저장 디렉터리 체크 (없으면 첫 저장 시 생성)"""
    path = Path(settings.RESPONSE_SAVE_DIR)
    if path.exists() and not path.is_dir():
        return {
            "status": "error",
            "message": f"Save path is not a directory: {path}",
        }
    if not path.exists():
        return {
            "status": "warning",
            "message": f"Save directory will be created: {path}",
        }
    return {"status": "ok", "message": f"Save directory: {path}"}


def _check_websocket() -> dict[str, Any]:
    """WebSocket 상태 체크"""
    try:
        manager = get_connection_manager()
        return {
            "status": "ok",
            "message": f"Active connections: {manager.get_connection_count()}",
            "connections": manager.get_connection_count(),
        }
    except Exception as e:
        return {
            "status": "error",
            "message": f"WebSocket error: {str(e)}",
        }


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """기본 헬스체크"""
    return HealthResponse(
        status="ok",
        version=settings.APP_VERSION,
        timestamp=datetime.utcnow(),
    )


@router.get("/ready", response_model=HealthDetailResponse)
async def readiness_check() -> HealthDetailResponse:
    """Readiness 체크 (의존성 확인)"""
    checks = {
        "kernels": _check_kernels(),
        "cache": _check_cache(),
        "storage": _check_storage(),
        "websocket": _check_websocket(),
    }

    # 전체 상태 결정
    statuses = [c["status"] for c in checks.values()]
    if all(s == "ok" for s in statuses):
        overall_status = "ok"
    elif any(s == "error" for s in statuses):
        overall_status = "degraded"
    else:
        overall_status = "warning"

    return HealthDetailResponse(
        status=overall_status,
        version=settings.APP_VERSION,
        timestamp=datetime.utcnow(),
        checks=checks,
    )
