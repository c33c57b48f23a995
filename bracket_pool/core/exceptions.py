"""
Error taxonomy for the sync pipeline.

Every error carries the HTTP status it maps to; the exception handlers in
``bracket_pool.main`` render them as ``{"ok": false, "error": ...}``.
Reconciliation misses are not errors and never appear here; jobs count them.
"""
from typing import Any, Dict, Optional


class SyncError(Exception):
    """Base class for errors that abort a sync request."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> Dict[str, Any]:
        return {"ok": False, "error": self.message}


class ConfigurationError(SyncError):
    """A required setting is missing; raised before any network call."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"{setting} is required.")


class BadRequestError(SyncError):
    status_code = 400


class AuthenticationError(SyncError):
    """Shared secret missing or mismatched."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class PermissionDeniedError(SyncError):
    """Caller is not allowed to run this job (e.g. not the pool creator)."""

    status_code = 403

    def __init__(self, message: str = "not authorized"):
        super().__init__(message)


class NotFoundError(SyncError):
    status_code = 404


class InvalidWinnerError(SyncError):
    """Winner is not one of the game's two teams."""

    status_code = 422


class UpstreamProviderError(SyncError):
    """
    A provider answered with a non-success status or could not be reached.

    The provider's response body is kept verbatim for diagnosis.
    """

    status_code = 502

    def __init__(self, provider: str, status: Optional[int], body: str):
        self.provider = provider
        self.status = status
        self.body = body
        if status is None:
            message = f"{provider} request failed: {body}"
        else:
            message = f"{provider} error {status}: {body}"
        super().__init__(message)


class PayloadShapeError(SyncError):
    """Provider JSON could not be turned into game records."""

    status_code = 502


class StoreError(SyncError):
    """Read or write against the relational store failed."""

    status_code = 500


class SyncStepFailedError(SyncError):
    """A step of the full sync failed; later steps were not run."""

    def __init__(self, step: str, cause: Exception):
        self.step = step
        self.cause = cause
        message = cause.message if isinstance(cause, SyncError) else str(cause)
        super().__init__(message)
        if isinstance(cause, SyncError):
            self.status_code = cause.status_code

    def to_response(self) -> Dict[str, Any]:
        response = super().to_response()
        response["failedStep"] = self.step
        return response
