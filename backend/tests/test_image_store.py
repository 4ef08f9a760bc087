"""
Product Catalog Backend — Image Store Unit Tests
==================================================

What:  Tests for ImageStore naming, writing, deleting and resolving files.
How:   Real files in a temporary directory; no HTTP.

Test Strategy:
    ✅ Generated names keep the original filename behind a timestamp
    ✅ Saved bytes land in the upload directory
    ✅ Deletion is best-effort and never raises
    ✅ Resolution refuses names outside the upload directory
"""

import logging
import re
from unittest.mock import patch

import pytest

from app.exceptions import FileStorageError
from app.services.image_store import ImageStore


class TestNaming:
    """Tests for generated filenames."""

    def test_generate_name_prefixes_timestamp(self):
        name = ImageStore.generate_name("pen.jpg")
        assert re.fullmatch(r"\d+-pen\.jpg", name)

    def test_generate_name_strips_directories(self):
        """Client-supplied directory parts must not leak into the stored name."""
        name = ImageStore.generate_name("../../etc/passwd")
        assert "/" not in name
        assert name.endswith("-passwd")

    def test_generate_name_distinct_for_same_file(self):
        with patch("app.services.image_store.time.time_ns", side_effect=[1, 2]):
            first = ImageStore.generate_name("pen.jpg")
            second = ImageStore.generate_name("pen.jpg")
        assert first != second


class TestDirectory:

    def test_ensure_directory_creates_missing(self, tmp_path):
        target = tmp_path / "nested" / "uploads"
        store = ImageStore(str(target))
        store.ensure_directory()
        assert target.is_dir()

    def test_ensure_directory_idempotent(self, image_store):
        image_store.ensure_directory()
        image_store.ensure_directory()
        assert image_store.directory.is_dir()


class TestSave:

    @pytest.mark.asyncio
    async def test_save_writes_content(self, image_store, sample_image_bytes):
        stored_name = await image_store.save("pen.jpg", sample_image_bytes)

        stored = image_store.directory / stored_name
        assert stored.is_file()
        assert stored.read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_save_accepts_any_payload(self, image_store):
        """No type or size checks: a text file is stored as-is."""
        stored_name = await image_store.save("notes.txt", b"not an image")
        assert (image_store.directory / stored_name).read_bytes() == b"not an image"

    @pytest.mark.asyncio
    async def test_save_into_missing_directory_raises(self, tmp_path):
        store = ImageStore(str(tmp_path / "never-created"))
        with pytest.raises(FileStorageError):
            await store.save("pen.jpg", b"data")


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_file_by_public_path(self, image_store, sample_image_bytes):
        stored_name = await image_store.save("pen.jpg", sample_image_bytes)

        await image_store.delete(f"/uploads/{stored_name}")

        assert not (image_store.directory / stored_name).exists()

    @pytest.mark.asyncio
    async def test_delete_missing_file_does_not_raise(self, image_store, caplog):
        with caplog.at_level(logging.WARNING, logger="app.services.image_store"):
            await image_store.delete("/uploads/123-gone.jpg")
        assert "already gone" in caplog.text

    @pytest.mark.asyncio
    async def test_delete_os_error_is_logged(self, image_store, caplog):
        with patch("app.services.image_store.aiofiles.os.remove", side_effect=PermissionError("denied")), \
             caplog.at_level(logging.ERROR, logger="app.services.image_store"):
            await image_store.delete("/uploads/123-locked.jpg")
        assert "Failed to delete image" in caplog.text

    def test_path_for_stays_inside_directory(self, image_store):
        path = image_store.path_for("/uploads/../../secret.jpg")
        assert path.parent == image_store.directory
        assert path.name == "secret.jpg"


class TestResolve:

    @pytest.mark.asyncio
    async def test_resolve_existing_file(self, image_store, sample_image_bytes):
        stored_name = await image_store.save("pen.jpg", sample_image_bytes)
        assert image_store.resolve(stored_name) == image_store.directory / stored_name

    def test_resolve_missing_file(self, image_store):
        assert image_store.resolve("123-missing.jpg") is None

    def test_resolve_traversal_rejected(self, image_store, tmp_path):
        outside = tmp_path / "outside.jpg"
        outside.write_bytes(b"secret")
        assert image_store.resolve("../outside.jpg") is None

    def test_path_for_decodes_public_path(self, image_store):
        path = image_store.path_for("/uploads/1-50%25%20off.jpg")
        assert path == image_store.directory / "1-50% off.jpg"
