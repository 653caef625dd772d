"""
Media Module
Domain types that flow through the upload pipeline.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

from api.errors import UnsupportedMediaTypeError


class MediaKind(str, Enum):
    """Closed set of media kinds the relay can process."""

    VIDEO = "video"
    IMAGE = "image"

    @classmethod
    def from_mime(cls, mime_type: Optional[str]) -> "MediaKind":
        """Classify by the primary component of a MIME type (``video/mp4`` -> VIDEO)."""
        primary = (mime_type or "").split("/", 1)[0].strip().lower()
        for kind in cls:
            if kind.value == primary:
                return kind
        raise UnsupportedMediaTypeError(f"Unsupported file type: {mime_type or 'unknown'}")


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity attached to a request by the authentication dependency."""

    uid: str
    email: str
    name: str = ""


@dataclass(frozen=True)
class UploadedFile:
    """A client file that has been written to a temp path on disk."""

    original_name: str
    content_type: str
    path: Path
    size: int


@dataclass(frozen=True)
class CompressedArtifact:
    """Normalized file derived from an UploadedFile by the compression stage."""

    name: str
    content_type: str
    path: Path


@dataclass(frozen=True)
class DetectionResult:
    """Canonical detector verdict, shared by every media kind."""

    score: Optional[float]
    is_deepfake: bool


@dataclass(frozen=True)
class FileRecord:
    """One persisted outcome of a processed upload."""

    file_name: str
    file_url: str
    score: Optional[float]
    is_deepfake: bool
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "fileName": self.file_name,
            "fileUrl": self.file_url,
            "score": self.score,
            "is_deepfake": self.is_deepfake,
            "createdAt": self.created_at.isoformat(),
        }
