"""Notebook Serializer

.restbook 파일 ↔ NotebookDocument
"""

import json
from typing import Any

from pydantic import ValidationError

from backend.app.core.logging import get_logger
from backend.app.rest_book.models import CellOutput, NotebookCell, NotebookDocument

logger = get_logger(__name__)


class NotebookSerializer:
    """노트북 직렬화기"""

    def deserialize(self, data: bytes) -> NotebookDocument:
        """바이트 → 문서

        JSON 이 아니거나 배열이 아니면 빈 문서를 돌려준다.
        형식이 맞지 않는 셀은 건너뛴다.
        """
        try:
            raw = json.loads(data.decode("utf-8")) if data else []
        except (UnicodeDecodeError, ValueError) as e:
            logger.warning("Notebook content is not valid JSON", error=str(e))
            raw = []

        if not isinstance(raw, list):
            logger.warning("Notebook content is not a cell list", type=type(raw).__name__)
            raw = []

        cells: list[NotebookCell] = []
        for index, item in enumerate(raw):
            try:
                cells.append(NotebookCell.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping malformed cell", index=index, error=str(e))
        return NotebookDocument(cells=cells)

    def serialize(self, document: NotebookDocument) -> bytes:
        """문서 → 바이트 ({kind, language, value, outputs} 배열)"""
        contents: list[dict[str, Any]] = []
        for cell in document.cells:
            contents.append({
                "kind": cell.kind.value,
                "language": cell.language,
                "value": cell.value,
                "outputs": [_raw_output(output) for output in cell.outputs],
            })
        return json.dumps(contents, ensure_ascii=False).encode("utf-8")


def _raw_output(output: CellOutput) -> dict[str, Any]:
    return {"mime": output.mime, "value": output.value}
