"""Notebook Document Models

저장 포맷: 셀 레코드 배열 [{kind, language, value, outputs: [{mime, value}]}]
"""

from typing import Optional

from pydantic import BaseModel, Field

from .enums import CellKind
from .output import CellOutput


class NotebookCell(BaseModel):
    """셀 레코드"""

    kind: CellKind = CellKind.CODE
    language: str = "rest-book"
    value: str = ""
    editable: Optional[bool] = None
    outputs: list[CellOutput] = Field(default_factory=list)


class NotebookDocument(BaseModel):
    """셀 컬렉션"""

    cells: list[NotebookCell] = Field(default_factory=list)

    def code_cells(self) -> list[NotebookCell]:
        return [cell for cell in self.cells if cell.kind == CellKind.CODE]
