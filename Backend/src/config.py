"""
Configuration Module
Service endpoints, credentials, transcoding targets, and path constants.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Base Paths ---
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PROJECT_ROOT = BASE_DIR  # alias

OUTPUT_DIR = os.getenv("OUTPUT_DIR", os.path.join(PROJECT_ROOT, "OUTPUT"))
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(PROJECT_ROOT, "uploads"))


def _sqlite_path(url: str) -> str:
    """Accept either a bare path or a sqlite:/// URL."""
    prefix = "sqlite:///"
    return url[len(prefix):] if url.startswith(prefix) else url


DB_PATH = _sqlite_path(os.getenv("DATABASE_URL", os.path.join(OUTPUT_DIR, "relay.db")))

# --- Server ---
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# --- Detector services ---
# FLASK_API_URL is the legacy name for the video detector
VIDEO_DETECTOR_URL = os.getenv("VIDEO_DETECTOR_URL", os.getenv("FLASK_API_URL", "http://localhost:5000"))
IMAGE_DETECTOR_URL = os.getenv("IMAGE_DETECTOR_URL", "http://localhost:5001")
DETECTOR_TIMEOUT = float(os.getenv("DETECTOR_TIMEOUT", "30"))

# --- Archive (Google Drive) ---
GOOGLE_SERVICE_ACCOUNT = os.getenv("GOOGLE_SERVICE_ACCOUNT", "")  # base64 service-account JSON
DRIVE_FOLDER_ID = os.getenv("DRIVE_FOLDER_ID", "")
ARCHIVE_TIMEOUT = float(os.getenv("ARCHIVE_TIMEOUT", "30"))

# --- Authentication ---
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")

# --- Video compression ---
FFMPEG_PATH = os.getenv("FFMPEG_PATH", "ffmpeg")
VIDEO_TARGET_WIDTH = int(os.getenv("VIDEO_TARGET_WIDTH", "640"))
VIDEO_BITRATE = os.getenv("VIDEO_BITRATE", "1000k")
AUDIO_BITRATE = os.getenv("AUDIO_BITRATE", "128k")
VIDEO_PRESET = os.getenv("VIDEO_PRESET", "veryfast")

# --- Image compression ---
IMAGE_TARGET_WIDTH = int(os.getenv("IMAGE_TARGET_WIDTH", "640"))
IMAGE_QUALITY = int(os.getenv("IMAGE_QUALITY", "75"))

# --- Upload handling ---
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(500 * 1024 * 1024)))  # 500 MB
FILE_VISIBILITY_ATTEMPTS = int(os.getenv("FILE_VISIBILITY_ATTEMPTS", "5"))
FILE_VISIBILITY_DELAY = float(os.getenv("FILE_VISIBILITY_DELAY", "0.2"))
