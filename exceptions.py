"""
Error types raised while fetching a record and turning it into a manifest.
Each error carries the HTTP status the web layer answers with.
"""

from typing import Optional


class ManifestError(Exception):
    """Base class for all errors raised by the manifest engine."""

    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def to_dict(self):
        return {"success": False, "error": type(self).__name__, "message": self.message}


class DataInconsistentError(ManifestError):
    """Web resources cannot be put in a single consistent page order."""

    status_code = 500


class RecordNotFoundError(ManifestError):
    status_code = 404


class InvalidApiKeyError(ManifestError):
    status_code = 401


class RecordRetrieveError(ManifestError):
    status_code = 502


class FullTextCheckError(ManifestError):
    """Raised by the full-text client internally, never surfaced to callers."""

    status_code = 502


class SerializationError(ManifestError):
    status_code = 500


class InvalidRequestError(ManifestError):
    status_code = 400
