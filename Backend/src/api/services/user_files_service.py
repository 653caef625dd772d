"""Read-only lookup of a user's stored uploads."""
import asyncio
import logging

from api.errors import NoFilesFoundError, ProfileNotFoundError
from core.media import AuthenticatedUser, FileRecord
from db.operations import DatabaseHandler

logger = logging.getLogger(__name__)


async def list_user_files(db: DatabaseHandler, user: AuthenticatedUser) -> list[FileRecord]:
    """Return every FileRecord for ``user`` in insertion order; 404 when there are none."""
    records = await asyncio.to_thread(db.get_user_files, user.email)
    if not records:
        raise NoFilesFoundError()
    logger.debug("Found %d files for %s", len(records), user.email)
    return records


async def get_user_profile(db: DatabaseHandler, user: AuthenticatedUser) -> dict:
    profile = await asyncio.to_thread(db.get_user, user.email)
    if profile is None:
        raise ProfileNotFoundError()
    return profile
