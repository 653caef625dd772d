"""
Google Drive archive: stores a processed file and returns a public link.

Authorization uses a service account whose JSON key is supplied base64
encoded. After the upload the object is explicitly shared as
``anyone: reader`` so the returned URL resolves without credentials.
"""

import asyncio
import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Any, Callable

from api.errors import ArchiveError

logger = logging.getLogger(__name__)

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive.file"]
PUBLIC_URL = "https://drive.google.com/uc?id={file_id}"


def build_drive_service(service_account_b64: str, timeout: float) -> Any:
    """Authorize with the service account and build a Drive v3 client."""
    import google_auth_httplib2
    import httplib2
    from google.oauth2 import service_account
    from googleapiclient.discovery import build

    try:
        info = json.loads(base64.b64decode(service_account_b64).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise ArchiveError("Google Drive authorization failed") from exc

    credentials = service_account.Credentials.from_service_account_info(info, scopes=DRIVE_SCOPES)
    http = google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http(timeout=timeout))
    return build("drive", "v3", http=http, cache_discovery=False)


class GoogleDriveArchive:
    """
    Archive collaborator.
    upload(path, name, mime_type) -> public URL
    """

    def __init__(
        self,
        service_account_b64: str,
        folder_id: str,
        timeout: float = 30,
        service_factory: Callable[[], Any] | None = None,
    ):
        self.folder_id = folder_id
        self._service_factory = service_factory or (
            lambda: build_drive_service(service_account_b64, timeout)
        )

    def _upload_sync(self, path: Path, name: str, mime_type: str) -> str:
        from googleapiclient.http import MediaIoBaseUpload

        drive = self._service_factory()
        with open(path, "rb") as fh:
            media = MediaIoBaseUpload(fh, mimetype=mime_type, resumable=False)
            created = drive.files().create(
                body={"name": name, "mimeType": mime_type, "parents": [self.folder_id]},
                media_body=media,
                fields="id",
            ).execute()

        file_id = (created or {}).get("id")
        if not file_id:
            raise ArchiveError("Google Drive upload failed: No file ID returned")

        drive.permissions().create(
            fileId=file_id,
            body={"role": "reader", "type": "anyone"},
        ).execute()
        return PUBLIC_URL.format(file_id=file_id)

    async def upload(self, path: Path, name: str, mime_type: str) -> str:
        logger.info("Archiving %s", name)
        try:
            url = await asyncio.to_thread(self._upload_sync, path, name, mime_type)
        except ArchiveError as exc:
            logger.error("Google Drive upload error for %s: %s", name, exc)
            raise
        except Exception as exc:
            logger.error("Google Drive upload error for %s: %s", name, exc)
            raise ArchiveError() from exc
        logger.info("✓ Archived %s: %s", name, url)
        return url
