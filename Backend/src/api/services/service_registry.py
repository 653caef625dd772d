"""Central service registry - builds all collaborators once at startup."""
import logging
from typing import Any

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """
    Central registry for the relay's collaborators.
    Services are constructed once at startup from ``config`` and shared
    across requests; nothing reads configuration after this point.

    Keys: ``db``, ``archive``, ``video_detector``, ``image_detector``,
    ``video_compressor``, ``image_compressor``, ``pipeline``.
    """
    _registry: dict[str, Any] = {}

    @classmethod
    async def load_all(cls) -> None:
        """Construct every collaborator from configuration."""
        import config
        from api.services.archive import GoogleDriveArchive
        from api.services.compression import ImageCompressor, VideoCompressor
        from api.services.detector_client import DetectorClient
        from api.services.upload_pipeline import UploadPipeline
        from db.operations import DatabaseHandler

        db = DatabaseHandler(config.DB_PATH)
        db.init_schema()
        cls.register("db", db)

        if not config.GOOGLE_SERVICE_ACCOUNT or not config.DRIVE_FOLDER_ID:
            logger.warning("GOOGLE_SERVICE_ACCOUNT or DRIVE_FOLDER_ID is empty; uploads will fail at archival")
        cls.register("archive", GoogleDriveArchive(
            config.GOOGLE_SERVICE_ACCOUNT, config.DRIVE_FOLDER_ID, timeout=config.ARCHIVE_TIMEOUT,
        ))
        cls.register("video_detector", DetectorClient(config.VIDEO_DETECTOR_URL, timeout=config.DETECTOR_TIMEOUT))
        cls.register("image_detector", DetectorClient(config.IMAGE_DETECTOR_URL, timeout=config.DETECTOR_TIMEOUT))
        cls.register("video_compressor", VideoCompressor(
            ffmpeg_path=config.FFMPEG_PATH,
            target_width=config.VIDEO_TARGET_WIDTH,
            video_bitrate=config.VIDEO_BITRATE,
            audio_bitrate=config.AUDIO_BITRATE,
            preset=config.VIDEO_PRESET,
        ))
        cls.register("image_compressor", ImageCompressor(
            target_width=config.IMAGE_TARGET_WIDTH, quality=config.IMAGE_QUALITY,
        ))
        cls.register("pipeline", UploadPipeline(
            db=db,
            archive=cls.get("archive"),
            video_compressor=cls.get("video_compressor"),
            image_compressor=cls.get("image_compressor"),
            video_detector=cls.get("video_detector"),
            image_detector=cls.get("image_detector"),
            visibility_attempts=config.FILE_VISIBILITY_ATTEMPTS,
            visibility_delay=config.FILE_VISIBILITY_DELAY,
        ))
        logger.info("✓ Services ready: %s", cls.loaded_services())

    @classmethod
    def register(cls, key: str, service: Any) -> None:
        cls._registry[key] = service

    @classmethod
    async def unload_all(cls) -> None:
        """Close network clients and clear the registry at shutdown."""
        for key in ("video_detector", "image_detector"):
            client = cls._registry.get(key)
            if client is not None and hasattr(client, "aclose"):
                await client.aclose()
        cls._registry.clear()
        logger.info("All services unloaded")

    @classmethod
    def get(cls, key: str) -> Any:
        """Get a service from registry."""
        service = cls._registry.get(key)
        if service is None:
            raise RuntimeError(f"Service '{key}' is not available.")
        return service

    @classmethod
    def loaded_services(cls) -> list[str]:
        """Return list of registered services."""
        return [k for k, v in cls._registry.items() if v is not None]
