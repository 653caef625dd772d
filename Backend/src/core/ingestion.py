"""
File Ingestion Module
Receives uploaded files to disk, waits for them to become visible, and
guarantees their removal once the request no longer needs them.
"""

import asyncio
import logging
import os
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from api.errors import FileVisibilityError, NoFileError, UploadTooLargeError
from core.media import UploadedFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1 MB

_MIME_MAP = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    ".tiff": "image/tiff",
    ".tif": "image/tiff",
    ".heic": "image/heic",
    ".mp4": "video/mp4",
    ".m4v": "video/mp4",
    ".avi": "video/x-msvideo",
    ".mov": "video/quicktime",
    ".mkv": "video/x-matroska",
    ".webm": "video/webm",
    ".3gp": "video/3gpp",
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".json": "application/json",
    ".zip": "application/zip",
}


def mime_from_extension(file_name: str) -> str:
    ext = Path(file_name).suffix.lower()
    return _MIME_MAP.get(ext, "application/octet-stream")


def resolve_content_type(declared: str | None, file_name: str) -> str:
    """Use the client's declared MIME type unless it is missing or generic."""
    if declared and declared != "application/octet-stream":
        return declared
    return mime_from_extension(file_name)


def temp_file_name(original_name: str) -> str:
    """Timestamp-prefixed, collision-free name for a received file."""
    base = Path(original_name).name or "upload"
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}_{base}"


async def save_upload(upload, upload_dir: str | Path, max_bytes: int) -> UploadedFile:
    """
    Stream a multipart upload to disk.

    Args:
        upload: FastAPI ``UploadFile`` (anything with filename, content_type, async read)
        upload_dir: Directory receiving temp files
        max_bytes: Upper bound on accepted file size

    Returns:
        UploadedFile describing the on-disk temp file

    Raises:
        NoFileError: upload missing or empty
        UploadTooLargeError: more than ``max_bytes`` were sent
    """
    if upload is None or not getattr(upload, "filename", None):
        raise NoFileError()

    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    dest = directory / temp_file_name(upload.filename)

    size = 0
    try:
        with open(dest, "wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise UploadTooLargeError(f"File exceeds {max_bytes // (1024 * 1024)} MB limit.")
                out.write(chunk)
    except BaseException:
        discard(dest)
        raise

    if size == 0:
        discard(dest)
        raise NoFileError()

    logger.info("Received %s (%d bytes) -> %s", upload.filename, size, dest.name)
    return UploadedFile(
        original_name=Path(upload.filename).name,
        content_type=resolve_content_type(upload.content_type, upload.filename),
        path=dest,
        size=size,
    )


async def wait_for_file(path: Path, attempts: int = 5, delay: float = 0.2) -> None:
    """Poll until ``path`` exists; raise FileVisibilityError after ``attempts`` checks."""
    for attempt in range(1, attempts + 1):
        if os.path.exists(path):
            return
        logger.debug("Waiting for %s to become visible (%d/%d)", path, attempt, attempts)
        if attempt < attempts:
            await asyncio.sleep(delay)
    raise FileVisibilityError()


def discard(path: Path | None) -> None:
    """Remove a temp file. Never raises: a failed cleanup must not mask the real error."""
    if path is None:
        return
    try:
        os.remove(path)
        logger.debug("Removed temp file %s", path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Failed to remove temp file %s: %s", path, exc)


@asynccontextmanager
async def scoped_temp_file(path: Path) -> AsyncIterator[Path]:
    """Own ``path`` for the duration of the block and delete it on every exit."""
    try:
        yield path
    finally:
        discard(path)
