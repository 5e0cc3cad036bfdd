"""API Schemas

API 요청/응답 스키마
"""

from backend.api.schemas.request import (
    CellCancelRequest,
    CachedRenderRequest,
    CellExecuteRequest,
    DocumentDeserializeRequest,
    RenderRequest,
)
from backend.api.schemas.response import (
    AttemptResponse,
    CacheClearResponse,
    CacheEntriesResponse,
    CellCancelResponse,
    ErrorResponse,
    HealthDetailResponse,
    HealthResponse,
    RenderResponse,
)

__all__ = [
    # Request
    "CellExecuteRequest",
    "CellCancelRequest",
    "RenderRequest",
    "DocumentDeserializeRequest",
    "CachedRenderRequest",
    # Response
    "AttemptResponse",
    "CellCancelResponse",
    "RenderResponse",
    "CacheEntriesResponse",
    "CacheClearResponse",
    "HealthResponse",
    "HealthDetailResponse",
    "ErrorResponse",
]
