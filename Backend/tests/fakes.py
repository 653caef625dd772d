"""In-process stand-ins for the pipeline's collaborators."""

from __future__ import annotations

from pathlib import Path

from api.errors import CompressionError
from core.media import CompressedArtifact, DetectionResult, UploadedFile


class FakeCompressor:
    """Writes a small derived file next to the upload, like the real compressors."""

    def __init__(self, suffix: str = ".mp4", content_type: str = "video/mp4", fail: bool = False):
        self.suffix = suffix
        self.content_type = content_type
        self.fail = fail
        self.calls: list[UploadedFile] = []

    async def compress(self, upload: UploadedFile) -> CompressedArtifact:
        self.calls.append(upload)
        if self.fail:
            raise CompressionError()
        dest = upload.path.with_name(f"{upload.path.stem}_compressed{self.suffix}")
        dest.write_bytes(b"compressed:" + upload.path.read_bytes())
        return CompressedArtifact(
            name=Path(upload.original_name).stem + self.suffix,
            content_type=self.content_type,
            path=dest,
        )


class FakeDetector:
    def __init__(self, result: DetectionResult | None = None, error: Exception | None = None):
        self.result = result or DetectionResult(score=0.83, is_deepfake=True)
        self.error = error
        self.calls: list[CompressedArtifact] = []

    async def detect(self, artifact: CompressedArtifact) -> DetectionResult:
        assert artifact.path.exists()
        self.calls.append(artifact)
        if self.error is not None:
            raise self.error
        return self.result


class FakeArchive:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple[Path, str, str]] = []

    async def upload(self, path: Path, name: str, mime_type: str) -> str:
        assert Path(path).exists()
        self.calls.append((Path(path), name, mime_type))
        if self.error is not None:
            raise self.error
        return f"https://drive.google.com/uc?id=file{len(self.calls)}"
