"""Side-Channel Handler 테스트

위치: backend.app.rest_book.side_channel
"""

import json
from datetime import date

import pytest

from backend.app.core.errors import StorageError
from backend.app.rest_book.side_channel import (
    PERSIST_RESPONSE,
    UNKNOWN_URL_NAME,
    DirectoryResponseStorage,
    LoggingNotifier,
    SideChannelHandler,
    SideChannelMessage,
    host_slug,
    suggest_destination_name,
)
from conftest import MemoryStorage

TODAY = date(2026, 10, 19)


def _handler(storage, notifier=None) -> SideChannelHandler:
    return SideChannelHandler(storage=storage, notifier=notifier or LoggingNotifier(), today=lambda: TODAY)


class TestNaming:
    """저장 파일 이름 테스트"""

    def test_host_slug(self):
        assert host_slug("https://api.github.com/users") == "github"
        assert host_slug("https://docs.api.example.co/x") == "api-example"
        assert host_slug("https://example.com") == "example"
        assert host_slug("http://localhost:3000/") == "localhost"

    def test_unknown_url(self):
        assert host_slug(None) == UNKNOWN_URL_NAME
        assert host_slug("") == UNKNOWN_URL_NAME
        assert host_slug("not a url") == UNKNOWN_URL_NAME

    def test_suggested_name(self, sample_payload):
        assert suggest_destination_name(sample_payload, TODAY) == "response-github-Mon-Oct-19-2026.json"

    def test_legacy_request_section(self):
        payload = {"request": {"responseUrl": "https://www.example.org/a"}}

        assert suggest_destination_name(payload, TODAY) == "response-example-Mon-Oct-19-2026.json"

    def test_missing_url(self):
        assert suggest_destination_name({}, TODAY) == "response-unknown-url-Mon-Oct-19-2026.json"
        assert suggest_destination_name("oops", TODAY) == "response-unknown-url-Mon-Oct-19-2026.json"


class TestPersistResponse:
    """persist-response 처리 테스트"""

    @pytest.mark.asyncio
    async def test_writes_payload_unchanged(self, memory_storage, sample_payload):
        notifier = LoggingNotifier()

        await _handler(memory_storage, notifier).handle(
            SideChannelMessage(command=PERSIST_RESPONSE, data=sample_payload)
        )

        assert memory_storage.written == {"response-github-Mon-Oct-19-2026.json": sample_payload}
        assert notifier.messages == ["Saved response to /tmp/response-github-Mon-Oct-19-2026.json"]

    @pytest.mark.asyncio
    async def test_accepts_dict_message(self, memory_storage, sample_payload):
        await _handler(memory_storage).handle({"command": "persist-response", "data": sample_payload})

        assert len(memory_storage.written) == 1

    @pytest.mark.asyncio
    async def test_user_dismisses_dialog(self, sample_payload):
        """저장 위치 선택 취소: 쓰기/알림 없음"""
        storage = MemoryStorage(accept=False)
        notifier = LoggingNotifier()

        await _handler(storage, notifier).handle(
            SideChannelMessage(command=PERSIST_RESPONSE, data=sample_payload)
        )

        assert storage.written == {}
        assert notifier.messages == []

    @pytest.mark.asyncio
    async def test_storage_error_is_notified(self, sample_payload):
        """저장 실패는 알림으로만 전달되고 예외는 전파되지 않음"""
        storage = MemoryStorage(error=StorageError("disk full"))
        notifier = LoggingNotifier()

        await _handler(storage, notifier).handle(
            SideChannelMessage(command=PERSIST_RESPONSE, data=sample_payload)
        )

        assert notifier.messages == ["disk full"]

    @pytest.mark.asyncio
    async def test_unexpected_error_is_notified(self, sample_payload):
        storage = MemoryStorage(error=PermissionError("denied"))
        notifier = LoggingNotifier()

        await _handler(storage, notifier).handle(
            SideChannelMessage(command=PERSIST_RESPONSE, data=sample_payload)
        )

        assert notifier.messages == ["denied"]

    @pytest.mark.asyncio
    async def test_unknown_command_ignored(self, memory_storage):
        notifier = LoggingNotifier()
        handler = _handler(memory_storage, notifier)

        await handler.handle(SideChannelMessage(command="open-link", data={}))
        await handler.handle({"data": {}})
        await handler.handle("garbage")

        assert memory_storage.written == {}
        assert notifier.messages == []


class TestDirectoryResponseStorage:
    """디렉터리 저장소 테스트"""

    @pytest.mark.asyncio
    async def test_write(self, tmp_path, sample_payload):
        storage = DirectoryResponseStorage(tmp_path / "responses")

        location = await storage.prompt_and_write("response-github.json", sample_payload)

        saved = json.loads((tmp_path / "responses" / "response-github.json").read_text(encoding="utf-8"))
        assert saved == sample_payload
        assert location.endswith("response-github.json")

    @pytest.mark.asyncio
    async def test_path_components_stripped(self, tmp_path, sample_payload):
        storage = DirectoryResponseStorage(tmp_path)

        await storage.prompt_and_write("../../escape.json", sample_payload)

        assert (tmp_path / "escape.json").exists()

    @pytest.mark.asyncio
    async def test_unserializable_payload(self, tmp_path):
        storage = DirectoryResponseStorage(tmp_path)

        with pytest.raises(StorageError):
            await storage.prompt_and_write("x.json", {"value": object()})
