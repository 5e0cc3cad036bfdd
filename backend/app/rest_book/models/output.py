"""Rendered Output Models"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import RenderTag


# 셀 출력 표시 순서
OUTPUT_ORDER: tuple[RenderTag, ...] = (
    RenderTag.ERROR,
    RenderTag.RICH_SUMMARY,
    RenderTag.STRUCTURED,
    RenderTag.MARKUP,
)


class CellOutput(BaseModel):
    """저장되는 셀 출력 항목 (mime, value)"""

    mime: str
    value: Any = None


class RenderedOutput(BaseModel):
    """태그별 렌더 결과"""

    model_config = ConfigDict(frozen=True)

    items: dict[RenderTag, Any] = Field(default_factory=dict)

    def get(self, tag: RenderTag) -> Any:
        return self.items.get(tag)

    @property
    def tags(self) -> list[RenderTag]:
        return [tag for tag in OUTPUT_ORDER if tag in self.items]

    def to_bytes(self, tag: RenderTag) -> bytes:
        """태그 하나를 바이트로 직렬화 (동일 입력 → 동일 바이트)"""
        value = self.items[tag]
        if isinstance(value, str):
            return value.encode("utf-8")
        return json.dumps(value, ensure_ascii=False, default=repr).encode("utf-8")

    def as_cell_outputs(self) -> list[CellOutput]:
        return [CellOutput(mime=tag.mime, value=self.items[tag]) for tag in self.tags]
