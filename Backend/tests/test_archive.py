"""Tests for the Google Drive archive collaborator."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from api.errors import ArchiveError
from api.services.archive import GoogleDriveArchive, build_drive_service


@pytest.fixture
def artifact_path(tmp_path: Path) -> Path:
    path = tmp_path / "clip_compressed.mp4"
    path.write_bytes(b"encoded")
    return path


def _drive(file_id: str | None = "abc123") -> MagicMock:
    drive = MagicMock()
    drive.files.return_value.create.return_value.execute.return_value = {"id": file_id} if file_id else {}
    return drive


def test_upload_creates_file_and_makes_it_public(artifact_path: Path) -> None:
    drive = _drive()
    archive = GoogleDriveArchive("", "folder-1", service_factory=lambda: drive)

    url = asyncio.run(archive.upload(artifact_path, "clip.mp4", "video/mp4"))

    assert url == "https://drive.google.com/uc?id=abc123"
    create_kwargs = drive.files.return_value.create.call_args.kwargs
    assert create_kwargs["body"] == {"name": "clip.mp4", "mimeType": "video/mp4", "parents": ["folder-1"]}
    drive.permissions.return_value.create.assert_called_once_with(
        fileId="abc123", body={"role": "reader", "type": "anyone"}
    )


def test_missing_file_id_is_a_failure(artifact_path: Path) -> None:
    drive = _drive(file_id=None)
    archive = GoogleDriveArchive("", "folder-1", service_factory=lambda: drive)

    with pytest.raises(ArchiveError):
        asyncio.run(archive.upload(artifact_path, "clip.mp4", "video/mp4"))

    drive.permissions.assert_not_called()


def test_api_errors_become_archive_errors(artifact_path: Path) -> None:
    drive = _drive()
    drive.files.return_value.create.return_value.execute.side_effect = ConnectionError("quota exceeded")
    archive = GoogleDriveArchive("", "folder-1", service_factory=lambda: drive)

    with pytest.raises(ArchiveError):
        asyncio.run(archive.upload(artifact_path, "clip.mp4", "video/mp4"))


def test_authorization_failure_becomes_archive_error(artifact_path: Path) -> None:
    def refuse():
        raise PermissionError("invalid grant")

    archive = GoogleDriveArchive("", "folder-1", service_factory=refuse)

    with pytest.raises(ArchiveError):
        asyncio.run(archive.upload(artifact_path, "clip.mp4", "video/mp4"))


def test_undecodable_service_account_is_rejected() -> None:
    with pytest.raises(ArchiveError, match="authorization failed"):
        build_drive_service("!!! not base64 json !!!", timeout=5)
