"""Notebook Serializer 테스트

위치: backend.app.rest_book.document.serializer
"""

import json

from backend.app.rest_book.document import NotebookSerializer
from backend.app.rest_book.models import CellKind, CellOutput, NotebookCell, NotebookDocument


class TestDeserialize:
    """역직렬화 테스트"""

    def test_cells(self):
        raw = json.dumps([
            {"kind": 1, "language": "markdown", "value": "# Users", "outputs": []},
            {
                "kind": 2,
                "language": "rest-book",
                "value": "GET https://example.com",
                "outputs": [{"mime": "application/json", "value": {"status": 200}}],
            },
        ]).encode("utf-8")

        document = NotebookSerializer().deserialize(raw)

        assert len(document.cells) == 2
        assert document.cells[0].kind == CellKind.MARKUP
        assert document.code_cells()[0].outputs[0].value == {"status": 200}

    def test_invalid_json_is_empty(self):
        serializer = NotebookSerializer()

        assert serializer.deserialize(b"{not json").cells == []
        assert serializer.deserialize(b"").cells == []
        assert serializer.deserialize(b'{"cells": []}').cells == []

    def test_malformed_cell_skipped(self):
        raw = json.dumps([{"kind": 9, "value": "x"}, {"value": "GET https://e.com"}]).encode()

        document = NotebookSerializer().deserialize(raw)

        assert len(document.cells) == 1
        assert document.cells[0].kind == CellKind.CODE


class TestSerialize:
    """직렬화 테스트"""

    def test_format(self):
        document = NotebookDocument(cells=[
            NotebookCell(
                value="GET https://example.com",
                outputs=[CellOutput(mime="text/html", value="<b>200</b>")],
            ),
        ])

        data = json.loads(NotebookSerializer().serialize(document))

        assert data == [{
            "kind": 2,
            "language": "rest-book",
            "value": "GET https://example.com",
            "outputs": [{"mime": "text/html", "value": "<b>200</b>"}],
        }]

    def test_non_ascii_preserved(self):
        document = NotebookDocument(cells=[NotebookCell(value="# 리뷰 조회")])

        assert "리뷰".encode("utf-8") in NotebookSerializer().serialize(document)
