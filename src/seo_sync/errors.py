from __future__ import annotations


class SeoSyncError(Exception):
    """Base class for errors raised by the sync subsystem."""


class ConfigurationError(SeoSyncError):
    """A required setting (OAuth client, database URL) is missing."""


class NotConnectedError(SeoSyncError):
    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} is not connected to Google")
        self.user_id = user_id


class UpstreamAPIError(SeoSyncError):
    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        detail = f"{message}: HTTP {status_code}" if status_code is not None else message
        if body:
            detail = f"{detail}: {body}"
        super().__init__(detail)
        self.status_code = status_code
        self.body = body

    @property
    def retriable(self) -> bool:
        return self.status_code is not None and (self.status_code == 429 or self.status_code >= 500)


class PersistenceError(SeoSyncError):
    """Storage is unavailable or a write failed."""
