"""User file upload/listing schemas and detector payload schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Response for a successfully processed upload."""
    message: str = "File uploaded & link saved"
    fileName: str
    fileUrl: str
    score: Optional[float] = Field(None, ge=0.0, le=1.0)
    is_deepfake: bool


class FileRecordOut(BaseModel):
    """A stored upload outcome."""
    fileName: str
    fileUrl: str
    score: Optional[float] = None
    is_deepfake: bool
    createdAt: datetime


class FileListResponse(BaseModel):
    """All stored uploads for the current user."""
    message: str = "User files retrieved successfully"
    files: list[FileRecordOut]


class UserProfileResponse(BaseModel):
    """Profile recorded from the auth token on the last upload."""
    message: str = "User profile retrieved successfully"
    email: str
    uid: Optional[str] = None
    name: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime


# ── Detector payloads ──────────────────────────────────────────────────
class VideoDetectorResponse(BaseModel):
    """Body returned by the video detector: ``{score, is_deepfake}``."""
    score: Optional[float] = Field(None, ge=0.0, le=1.0)
    is_deepfake: bool


class ImageDetectorResponse(BaseModel):
    """Body returned by the image detector: ``{probability, is_deepfake}``."""
    probability: Optional[float] = Field(None, ge=0.0, le=1.0)
    is_deepfake: bool
