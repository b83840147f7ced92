# src/model_sync/sync/errors.py
from typing import Optional


class SyncError(RuntimeError):
    """Base class for every failure surfaced by an artifact sync."""

    def __init__(self, artifact_id: str, message: str):
        super().__init__(f"[{artifact_id}] {message}")
        self.artifact_id = artifact_id


class RegistryUnreachable(SyncError):
    """Metadata query failed or returned a malformed answer. Nothing on disk was touched."""


class TransferFailed(SyncError):
    """File content fetch failed partway. The revision marker was not updated."""


class LocalIOError(SyncError):
    """Directory creation or marker write failed."""

    def __init__(self, artifact_id: str, message: str, path: Optional[str] = None):
        super().__init__(artifact_id, message)
        self.path = path
