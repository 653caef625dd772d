"""Tests for media classification and record shaping."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from api.errors import UnsupportedMediaTypeError
from core.media import FileRecord, MediaKind


@pytest.mark.parametrize(
    ("mime", "kind"),
    [
        ("video/mp4", MediaKind.VIDEO),
        ("video/quicktime", MediaKind.VIDEO),
        ("image/jpeg", MediaKind.IMAGE),
        ("IMAGE/PNG", MediaKind.IMAGE),
    ],
)
def test_kind_from_primary_mime_component(mime: str, kind: MediaKind) -> None:
    assert MediaKind.from_mime(mime) is kind


@pytest.mark.parametrize("mime", ["application/pdf", "audio/mpeg", "text/plain", "", None])
def test_unsupported_kinds_are_rejected(mime) -> None:
    with pytest.raises(UnsupportedMediaTypeError):
        MediaKind.from_mime(mime)


def test_file_record_serializes_with_wire_names() -> None:
    created = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    record = FileRecord("clip.mp4", "https://drive.google.com/uc?id=1", 0.5, False, created)

    assert record.to_dict() == {
        "fileName": "clip.mp4",
        "fileUrl": "https://drive.google.com/uc?id=1",
        "score": 0.5,
        "is_deepfake": False,
        "createdAt": "2024-05-01T12:00:00+00:00",
    }
