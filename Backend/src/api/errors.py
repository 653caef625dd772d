"""
Error taxonomy for the upload relay.

Every error carries the HTTP status it maps to and a message that is safe
to show to the client. Routers translate these into ``HTTPException``.
"""


class RelayError(Exception):
    """Base class for all expected request failures."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ── Client input (4xx) ─────────────────────────────────────────────────
class ClientInputError(RelayError):
    status_code = 400
    default_message = "Invalid request"


class NoFileError(ClientInputError):
    default_message = "No file uploaded or invalid format"


class UnsupportedMediaTypeError(ClientInputError):
    default_message = "Unsupported file type"


class FileVisibilityError(ClientInputError):
    """The received temp file never became visible on disk."""

    default_message = "Temporary file not found"


class UploadTooLargeError(ClientInputError):
    status_code = 413
    default_message = "File exceeds upload size limit"


class AuthenticationError(RelayError):
    status_code = 401
    default_message = "Unauthorized"


class NoFilesFoundError(RelayError):
    status_code = 404
    default_message = "No files found for this user"


class ProfileNotFoundError(RelayError):
    status_code = 404
    default_message = "No profile stored for this user"


# ── Upstream services (5xx) ────────────────────────────────────────────
class UpstreamServiceError(RelayError):
    default_message = "Upstream service failed"


class CompressionError(UpstreamServiceError):
    default_message = "File compression failed"


class DetectorError(UpstreamServiceError):
    default_message = "Detection service failed, upload canceled"


class ArchiveError(UpstreamServiceError):
    default_message = "Error uploading file to storage"


class PersistenceError(RelayError):
    default_message = "Failed to save file record"
