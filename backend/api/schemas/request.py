"""API Request Schemas"""

from typing import Optional

from pydantic import BaseModel, Field

from backend.app.rest_book.models import NormalizedResponse


class CellExecuteRequest(BaseModel):
    """셀 실행 요청"""

    text: str = Field(..., max_length=1_000_000, description="셀 원문")


class CellCancelRequest(BaseModel):
    """셀 취소 요청"""

    reason: Optional[str] = Field(None, description="취소 사유")


class RenderRequest(BaseModel):
    """캐시된 응답 재렌더링 요청"""

    response: NormalizedResponse


class DocumentDeserializeRequest(BaseModel):
    """노트북 파일 내용"""

    content: str = Field("", description=".restbook 파일 원문")


class CachedRenderRequest(BaseModel):
    """캐시된 마지막 응답 조회 요청 (셀 원문으로 키 계산)"""

    text: str = Field(..., max_length=1_000_000, description="셀 원문")
