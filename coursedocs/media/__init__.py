from .client import MediaStoreClient

__all__ = ["MediaStoreClient"]
