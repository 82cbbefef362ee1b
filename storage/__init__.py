"""In-memory storage."""

from storage.store import Collection, SparksStorage, get_storage, new_id

__all__ = ["Collection", "SparksStorage", "get_storage", "new_id"]
