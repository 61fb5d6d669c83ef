"""Remote store API client."""

from .client import RemoteStoreClient

__all__ = ["RemoteStoreClient"]
