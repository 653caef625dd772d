"""
Remote deepfake detector client.

Each detector is an external HTTP service exposing ``POST {base}/detect``
that accepts a multipart body with a single ``file`` field and answers 200
with a JSON verdict. Anything else (other status, timeout, transport error,
malformed body) is a hard failure for the request; nothing is retried.
"""

import asyncio
import logging

import httpx

from api.errors import DetectorError
from api.services.result_aggregator import normalize_detection
from core.media import CompressedArtifact, DetectionResult

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30  # seconds per request


class DetectorClient:
    """
    Async client for one detector service.
    detect(artifact) -> DetectionResult
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        logger.info("✓ DetectorClient configured for %s", self._base_url)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def detect(self, artifact: CompressedArtifact) -> DetectionResult:
        """Submit ``artifact`` for scoring and return the normalized verdict."""
        url = f"{self._base_url}/detect"
        data = await asyncio.to_thread(artifact.path.read_bytes)
        files = {"file": (artifact.name, data, artifact.content_type)}

        try:
            response = await self._client.post(url, files=files)
        except httpx.TimeoutException as exc:
            logger.error("Detector timed out (%ss) for %s", self._timeout, url)
            raise DetectorError() from exc
        except httpx.HTTPError as exc:
            logger.error("Detector unreachable at %s: %s", url, exc)
            raise DetectorError() from exc

        if response.status_code != 200:
            logger.error("Detector %s answered HTTP %d", url, response.status_code)
            raise DetectorError("Unexpected detection service response")

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Detector %s returned a non-JSON body", url)
            raise DetectorError("Unexpected detection service response") from exc

        result = normalize_detection(payload)
        logger.info("Scored %s: score=%s is_deepfake=%s", artifact.name, result.score, result.is_deepfake)
        return result

    async def aclose(self) -> None:
        await self._client.aclose()
