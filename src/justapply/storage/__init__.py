from justapply.storage.base import StorageBackend
from justapply.storage.database import DatabaseStorage
from justapply.storage.factory import open_storage
from justapply.storage.local import LocalFileStorage

__all__ = ["DatabaseStorage", "LocalFileStorage", "StorageBackend", "open_storage"]
