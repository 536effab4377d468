"""
Tests for local document storage
"""
import os

import pytest

from app.exceptions import DependencyFailure
from app.services.document_storage import DocumentStorage


@pytest.fixture
def storage(tmp_path):
    return DocumentStorage(storage_dir=str(tmp_path / "docs"), base_url="http://files.test/documents/")


class TestDocumentStorage:
    @pytest.mark.asyncio
    async def test_upload_writes_file_and_returns_url(self, storage):
        url = await storage.upload("chapter 1.pdf", b"%PDF-1.4")

        assert url.startswith("http://files.test/documents/")
        assert url.endswith("-chapter%201.pdf")
        with open(storage.path_for(url), "rb") as f:
            assert f.read() == b"%PDF-1.4"

    @pytest.mark.asyncio
    async def test_upload_strips_directories(self, storage):
        url = await storage.upload("../../etc/passwd", b"x")

        path = storage.path_for(url)
        assert os.path.dirname(path) == storage.storage_dir
        assert path.endswith("-passwd")

    @pytest.mark.asyncio
    async def test_delete(self, storage):
        url = await storage.upload("notes.pdf", b"data")

        assert await storage.delete(url) is True
        assert not os.path.exists(storage.path_for(url))

    @pytest.mark.asyncio
    async def test_delete_missing_file(self, storage):
        assert await storage.delete("http://files.test/documents/missing.pdf") is False

    @pytest.mark.asyncio
    async def test_upload_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        storage = DocumentStorage(storage_dir=str(blocker), base_url="http://files.test")

        with pytest.raises(DependencyFailure):
            await storage.upload("a.pdf", b"data")
