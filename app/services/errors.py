# app/services/errors.py
"""
Error taxonomy for the application record store.

Raised by the repository / store layer and translated to HTTP responses
by the `/applications` router. Nothing here is retried automatically.
"""

from typing import Any, Dict, Optional


class TrackerError(Exception):
    code = "TRACKER_ERROR"
    http_status = 500
    title = "Application store error"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationFailed(TrackerError):
    code = "VALIDATION_FAILED"
    http_status = 400
    title = "Invalid application data"


class NotFound(TrackerError):
    code = "NOT_FOUND"
    http_status = 404
    title = "Application not found"


class StorageCorrupt(TrackerError):
    code = "STORAGE_CORRUPT"
    title = "Application storage is corrupt"


class StorageUnavailable(TrackerError):
    code = "STORAGE_UNAVAILABLE"
    title = "Application storage is unavailable"
