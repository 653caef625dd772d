from __future__ import annotations

from pathlib import Path

import pytest

from core.media import AuthenticatedUser, UploadedFile
from db.operations import DatabaseHandler


@pytest.fixture
def user() -> AuthenticatedUser:
    return AuthenticatedUser(uid="uid-1", email="alice@example.com", name="Alice")


@pytest.fixture
def db(tmp_path: Path) -> DatabaseHandler:
    """Fresh SQLite database per test."""
    handler = DatabaseHandler(str(tmp_path / "relay.db"))
    handler.init_schema()
    return handler


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "uploads"
    directory.mkdir()
    return directory


@pytest.fixture
def make_upload(upload_dir: Path):
    """Create an UploadedFile backed by a real temp file."""

    def _make(name: str = "clip.mp4", content_type: str = "video/mp4", data: bytes = b"raw-bytes") -> UploadedFile:
        path = upload_dir / f"1700000000000_abcd1234_{name}"
        path.write_bytes(data)
        return UploadedFile(original_name=name, content_type=content_type, path=path, size=len(data))

    return _make
