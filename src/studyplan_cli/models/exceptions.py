"""Custom exceptions for StudyPlan storage."""


class StoreError(Exception):
    """Base exception for all storage access errors."""


class LocalStoreError(StoreError):
    """Raised when the local vault cannot be read or written."""


class RemoteStoreError(StoreError):
    """Raised when a remote store request fails (transport or HTTP status)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(StoreError):
    """Raised when a record with the requested id does not exist."""
