"""
Compression stage: normalizes uploads before they are scored and archived.

Video is re-encoded with ffmpeg (H.264/AAC, bounded bitrate, fixed width);
images are resized and recompressed to JPEG with Pillow. Both write the
artifact next to the source file and leave deleting the source to the caller.
"""

import asyncio
import logging
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from api.errors import CompressionError
from core.ingestion import discard
from core.media import CompressedArtifact, UploadedFile

logger = logging.getLogger(__name__)


class VideoCompressor:
    """Re-encodes video with an explicitly configured ffmpeg binary."""

    def __init__(
        self,
        ffmpeg_path: str = "ffmpeg",
        target_width: int = 640,
        video_bitrate: str = "1000k",
        audio_bitrate: str = "128k",
        preset: str = "veryfast",
    ):
        self.ffmpeg_path = ffmpeg_path
        self.target_width = target_width
        self.video_bitrate = video_bitrate
        self.audio_bitrate = audio_bitrate
        self.preset = preset

    def build_command(self, source: Path, dest: Path) -> list[str]:
        # Never upscales; width and height (-2) are rounded to even values for yuv420p
        return [
            self.ffmpeg_path,
            "-y",
            "-i", str(source),
            "-vf", f"scale='trunc(min({self.target_width},iw)/2)*2':-2",
            "-c:v", "libx264",
            "-profile:v", "baseline",
            "-level", "3.0",
            "-pix_fmt", "yuv420p",
            "-preset", self.preset,
            "-b:v", self.video_bitrate,
            "-c:a", "aac",
            "-b:a", self.audio_bitrate,
            "-movflags", "+faststart",
            str(dest),
        ]

    async def compress(self, upload: UploadedFile) -> CompressedArtifact:
        dest = upload.path.with_name(f"{upload.path.stem}_compressed.mp4")
        cmd = self.build_command(upload.path, dest)
        logger.info("Compressing video %s", upload.original_name)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.error("Could not start ffmpeg at %s: %s", self.ffmpeg_path, exc)
            raise CompressionError() from exc

        _, stderr = await proc.communicate()
        if proc.returncode != 0 or not dest.exists() or dest.stat().st_size == 0:
            discard(dest)
            err = (stderr or b"").decode(errors="replace")[-800:]
            logger.error("ffmpeg failed for %s (exit %s): %s", upload.original_name, proc.returncode, err)
            raise CompressionError()

        logger.info("Video compressed: %s (%d -> %d bytes)", upload.original_name, upload.size, dest.stat().st_size)
        return CompressedArtifact(
            name=f"{Path(upload.original_name).stem}.mp4",
            content_type="video/mp4",
            path=dest,
        )


class ImageCompressor:
    """Resizes to a fixed width and recompresses as JPEG."""

    def __init__(self, target_width: int = 640, quality: int = 75):
        self.target_width = target_width
        self.quality = quality

    def _compress_sync(self, source: Path, dest: Path) -> None:
        with Image.open(source) as img:
            rgb = ImageOps.exif_transpose(img).convert("RGB")
            width, height = rgb.size
            new_height = max(1, round(height * self.target_width / width))
            resized = rgb.resize((self.target_width, new_height), Image.Resampling.LANCZOS)
            resized.save(dest, format="JPEG", quality=self.quality, optimize=True)

    async def compress(self, upload: UploadedFile) -> CompressedArtifact:
        dest = upload.path.with_name(f"{upload.path.stem}_compressed.jpg")
        logger.info("Compressing image %s", upload.original_name)
        try:
            await asyncio.to_thread(self._compress_sync, upload.path, dest)
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            discard(dest)
            logger.error("Image compression failed for %s: %s", upload.original_name, exc)
            raise CompressionError() from exc

        return CompressedArtifact(
            name=f"{Path(upload.original_name).stem}.jpg",
            content_type="image/jpeg",
            path=dest,
        )
