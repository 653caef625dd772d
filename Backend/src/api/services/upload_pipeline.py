"""
Upload pipeline service.

Moves one received file through
receive → validate → compress → detect → archive → persist → cleanup.

Stages run strictly in order. The received temp file and the compressed
artifact are each owned by a ``scoped_temp_file`` block, so they are removed
on every exit path. A FileRecord is written only after both detection and
archival succeeded.
"""

import asyncio
import logging
from typing import Optional, Protocol

from api.errors import NoFileError
from core.ingestion import discard, scoped_temp_file, wait_for_file
from core.media import (
    AuthenticatedUser,
    CompressedArtifact,
    DetectionResult,
    FileRecord,
    MediaKind,
    UploadedFile,
)
from db.operations import DatabaseHandler

logger = logging.getLogger(__name__)


class Compressor(Protocol):
    async def compress(self, upload: UploadedFile) -> CompressedArtifact: ...


class Detector(Protocol):
    async def detect(self, artifact: CompressedArtifact) -> DetectionResult: ...


class Archive(Protocol):
    async def upload(self, path, name: str, mime_type: str) -> str: ...


class UploadPipeline:
    """Orchestrates one upload request end to end."""

    def __init__(
        self,
        db: DatabaseHandler,
        archive: Archive,
        video_compressor: Compressor,
        image_compressor: Compressor,
        video_detector: Detector,
        image_detector: Detector,
        visibility_attempts: int = 5,
        visibility_delay: float = 0.2,
    ):
        self.db = db
        self.archive = archive
        self.video_compressor = video_compressor
        self.image_compressor = image_compressor
        self.video_detector = video_detector
        self.image_detector = image_detector
        self.visibility_attempts = visibility_attempts
        self.visibility_delay = visibility_delay

    def _stages_for(self, kind: MediaKind) -> tuple[Compressor, Detector]:
        if kind is MediaKind.VIDEO:
            return self.video_compressor, self.video_detector
        if kind is MediaKind.IMAGE:
            return self.image_compressor, self.image_detector
        raise AssertionError(f"No stages registered for {kind}")

    async def handle_upload(
        self, user: AuthenticatedUser, upload: Optional[UploadedFile]
    ) -> FileRecord:
        """
        Process one received file for ``user``.

        Returns:
            The FileRecord that was persisted

        Raises:
            ClientInputError: no file, unsupported kind, file never visible
            UpstreamServiceError: compression, detection or archive failure
            PersistenceError: the record could not be written
        """
        if upload is None:
            raise NoFileError()

        async with scoped_temp_file(upload.path):
            await wait_for_file(upload.path, self.visibility_attempts, self.visibility_delay)
            kind = MediaKind.from_mime(upload.content_type)
            compressor, detector = self._stages_for(kind)
            logger.info("Processing %s upload %s for %s", kind.value, upload.original_name, user.email)

            artifact = await compressor.compress(upload)
            # The original is no longer needed once the artifact exists
            discard(upload.path)

        async with scoped_temp_file(artifact.path):
            result = await detector.detect(artifact)
            file_url = await self.archive.upload(artifact.path, artifact.name, artifact.content_type)

        record = FileRecord(
            file_name=upload.original_name,
            file_url=file_url,
            score=result.score,
            is_deepfake=result.is_deepfake,
        )
        # Archived object without a record is possible past this point; it surfaces as a 500
        await asyncio.to_thread(self.db.append_file_record, user, record)
        logger.info("✓ Saved %s for %s (score=%s, is_deepfake=%s)",
                    record.file_name, user.email, record.score, record.is_deepfake)
        return record
