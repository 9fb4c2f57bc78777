"""
Unit tests for LocalStorage.
"""

import pytest
from unittest.mock import patch

from nova.storage import LocalStorage


class TestLocalStorage:
    """Tests for the filesystem storage backend."""

    @pytest.mark.asyncio
    async def test_save_and_load_text(self, storage):
        assert await storage.save("chats/a.json", '{"a": 1}') is True
        assert await storage.load("chats/a.json") == b'{"a": 1}'

    @pytest.mark.asyncio
    async def test_save_and_load_bytes(self, storage):
        assert await storage.save("blob.bin", b"\x00\x01")
        assert await storage.load("blob.bin") == b"\x00\x01"

    @pytest.mark.asyncio
    async def test_save_replaces_and_leaves_no_temp_files(self, storage):
        await storage.save("chats/a.json", "first")
        await storage.save("chats/a.json", "second")
        assert await storage.load("chats/a.json") == b"second"
        assert [p.name for p in (storage.base_dir / "chats").iterdir()] == ["a.json"]

    @pytest.mark.asyncio
    async def test_failed_replace_keeps_previous_content(self, storage):
        await storage.save("chats/a.json", "first")
        with patch("nova.storage.local_storage.aiofiles.os.replace", side_effect=OSError("disk full")):
            assert await storage.save("chats/a.json", "second") is False
        assert await storage.load("chats/a.json") == b"first"
        assert [p.name for p in (storage.base_dir / "chats").iterdir()] == ["a.json"]

    @pytest.mark.asyncio
    async def test_load_missing(self, storage):
        assert await storage.load("missing.json") is None

    @pytest.mark.asyncio
    async def test_exists_and_delete(self, storage):
        await storage.save("chats/a.json", "x")
        assert await storage.exists("chats/a.json")
        assert await storage.delete("chats/a.json") is True
        assert not await storage.exists("chats/a.json")
        assert await storage.delete("chats/a.json") is False

    @pytest.mark.asyncio
    async def test_list_with_pattern(self, storage):
        await storage.save("chats/b.json", "x")
        await storage.save("chats/a.json", "x")
        await storage.save("chats/notes.txt", "x")
        (storage.base_dir / "chats" / ".a.json.123.tmp").write_text("partial")

        assert await storage.list("chats", pattern="*.json") == ["chats/a.json", "chats/b.json"]
        assert len(await storage.list("chats")) == 3

    @pytest.mark.asyncio
    async def test_list_missing_directory(self, storage):
        assert await storage.list("nothing-here") == []

    def test_path_traversal_rejected(self, tmp_path):
        storage = LocalStorage(str(tmp_path / "base"))
        with pytest.raises(ValueError, match="path traversal"):
            storage._get_full_path("../outside.json")
