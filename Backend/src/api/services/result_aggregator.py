"""Reconciles the detector response schemas into one DetectionResult."""
import logging
from typing import Any

from pydantic import ValidationError

from api.errors import DetectorError
from api.schemas.user_data import ImageDetectorResponse, VideoDetectorResponse
from core.media import DetectionResult

logger = logging.getLogger(__name__)


def normalize_detection(payload: Any) -> DetectionResult:
    """
    Map a raw detector body to the canonical ``{score, is_deepfake}`` pair.

    ``{probability, is_deepfake}`` (image detector) and ``{score, is_deepfake}``
    (video detector) both produce the same DetectionResult.

    Raises:
        DetectorError: body is not a JSON object of either shape
    """
    if not isinstance(payload, dict):
        raise DetectorError("Unexpected detection response")

    try:
        if "probability" in payload:
            image = ImageDetectorResponse.model_validate(payload)
            return DetectionResult(score=image.probability, is_deepfake=image.is_deepfake)
        video = VideoDetectorResponse.model_validate(payload)
        return DetectionResult(score=video.score, is_deepfake=video.is_deepfake)
    except ValidationError as exc:
        logger.error("Malformed detector response %s: %s", payload, exc)
        raise DetectorError("Unexpected detection response") from exc
