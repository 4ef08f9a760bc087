"""
Product Catalog Backend — Image Store
=======================================

What:  Keeps uploaded product images in one flat directory.
Why:   Centralizes every file system operation on uploaded images.
How:   Files are written under a generated name, <timestamp>-<original-name>,
       with async file I/O; deletions are best-effort.
Who:   Used by UploadHandler (save), ProductService (delete, via background
       tasks), and the uploads route (resolve).

Directory Structure:
    uploads/
    ├── 1718000000000000000-pen.jpg
    └── 1718000000123456789-notebook.png

No type or size checks are done here; any payload is stored as-is.
"""

import logging
import time
from pathlib import Path
from typing import Optional
from urllib.parse import unquote

import aiofiles
import aiofiles.os

from app.exceptions import FileStorageError

logger = logging.getLogger(__name__)


class ImageStore:
    """
    Flat directory of uploaded images addressed by generated filenames.

    Uniqueness comes from the nanosecond timestamp prefix alone; there is no
    collision detection beyond it.
    """

    def __init__(self, directory: str):
        self.directory = Path(directory).resolve()

    def ensure_directory(self) -> None:
        """
        Create the upload directory if it does not exist.

        Idempotent, called on every startup.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.info("Upload directory: %s", self.directory)

    @staticmethod
    def generate_name(original_filename: str) -> str:
        # Path(...).name drops any directory part a client put in the filename
        return f"{time.time_ns()}-{Path(original_filename).name}"

    async def save(self, original_filename: str, content: bytes) -> str:
        """
        Write an uploaded payload and return the generated filename.

        Raises:
            FileStorageError if the file cannot be written.
        """
        stored_name = self.generate_name(original_filename)
        target = self.directory / stored_name

        try:
            async with aiofiles.open(target, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store image at %s: %s", target, str(e))
            raise FileStorageError(
                context={"path": str(target), "os_error": str(e)},
            )

        logger.info("Image stored: %s (%d bytes)", stored_name, len(content))
        return stored_name

    def path_for(self, stored_path: str) -> Path:
        """
        Map a stored public path (/uploads/<name>, percent-encoded) onto the
        file inside the upload directory.
        """
        return self.directory / Path(unquote(stored_path)).name

    async def delete(self, stored_path: str) -> None:
        """
        Remove the file behind a stored path, best-effort.

        Runs as a background task after the response has been sent. A file
        that is already gone, or that cannot be removed, is logged and
        otherwise ignored; this method never raises.
        """
        path = self.path_for(stored_path)
        try:
            await aiofiles.os.remove(path)
            logger.info("Deleted image: %s", path.name)
        except FileNotFoundError:
            logger.warning("Image already gone, nothing to delete: %s", path.name)
        except OSError as e:
            logger.error("Failed to delete image %s: %s", path.name, str(e))

    def resolve(self, filename: str) -> Optional[Path]:
        """
        Find a stored file for serving.

        Returns None if the name escapes the upload directory or the file
        does not exist.
        """
        candidate = (self.directory / filename).resolve()
        if candidate.parent != self.directory:
            return None
        if not candidate.is_file():
            return None
        return candidate
