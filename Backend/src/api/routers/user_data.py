"""
User data router.

Endpoints (mounted at /user/data):
  POST /upload   - Compress, score, archive and record one media file
  GET  /         - List the caller's recorded files
  GET  /profile  - The caller's stored profile
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

import config
from api.dependencies import get_current_user
from api.errors import RelayError
from api.schemas.user_data import FileListResponse, FileRecordOut, UploadResponse, UserProfileResponse
from api.services.service_registry import ServiceRegistry
from api.services.user_files_service import get_user_profile, list_user_files
from core.ingestion import save_upload
from core.media import AuthenticatedUser

logger = logging.getLogger(__name__)

router = APIRouter()


def _service(name: str):
    try:
        return ServiceRegistry.get(name)
    except RuntimeError as exc:
        raise HTTPException(503, str(exc))


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload a video or image for deepfake detection",
)
async def upload_file(
    file: Optional[UploadFile] = File(None, description="Video or image file"),
    user: AuthenticatedUser = Depends(get_current_user),
):
    """
    Run the upload pipeline on a single file.

    - Re-encodes video / resizes images
    - Scores the result with the matching detector service
    - Archives it to Google Drive and records the outcome for the user

    Returns:
        File name, public URL, deepfake score and verdict
    """
    pipeline = _service("pipeline")
    try:
        uploaded = await save_upload(file, config.UPLOAD_DIR, config.MAX_UPLOAD_BYTES) if file is not None else None
        record = await pipeline.handle_upload(user, uploaded)
    except RelayError as exc:
        logger.warning("Upload rejected for %s: %s", user.email, exc.message)
        raise HTTPException(exc.status_code, exc.message)
    except Exception:
        logger.exception("Unexpected upload failure for %s", user.email)
        raise HTTPException(500, "Error uploading file")

    return UploadResponse(
        fileName=record.file_name,
        fileUrl=record.file_url,
        score=record.score,
        is_deepfake=record.is_deepfake,
    )


@router.get(
    "/",
    response_model=FileListResponse,
    status_code=status.HTTP_200_OK,
    summary="List the current user's files",
)
async def get_user_files(user: AuthenticatedUser = Depends(get_current_user)):
    """Return every recorded upload for the caller, oldest first."""
    db = _service("db")
    try:
        records = await list_user_files(db, user)
    except RelayError as exc:
        raise HTTPException(exc.status_code, exc.message)
    except Exception:
        logger.exception("File lookup failed for %s", user.email)
        raise HTTPException(500, "Server error")

    return FileListResponse(files=[FileRecordOut(**r.to_dict()) for r in records])


@router.get(
    "/profile",
    response_model=UserProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Get the current user's stored profile",
)
async def get_profile(user: AuthenticatedUser = Depends(get_current_user)):
    """Profile saved alongside the caller's most recent upload."""
    db = _service("db")
    try:
        profile = await get_user_profile(db, user)
    except RelayError as exc:
        raise HTTPException(exc.status_code, exc.message)
    except Exception:
        logger.exception("Profile lookup failed for %s", user.email)
        raise HTTPException(500, "Server error")

    return UserProfileResponse(
        email=profile["email"],
        uid=profile["uid"],
        name=profile["name"],
        createdAt=profile["created_at"],
        updatedAt=profile["updated_at"],
    )
