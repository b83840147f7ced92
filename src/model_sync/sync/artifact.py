# src/model_sync/sync/artifact.py
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class ArtifactRef:
    """A remote artifact and the cache root it syncs into.

    `identifier` is the registry id: "org/name" on HuggingFace Hub,
    "name:tag" (optionally "namespace/name:tag") on Ollama.
    """

    identifier: str
    cache_root: Path

    @property
    def name(self) -> str:
        # BAAI/bge-m3 -> bge-m3, qwen2.5:3b -> qwen2.5-3b
        return self.identifier.rstrip("/").split("/")[-1].replace(":", "-")

    @property
    def local_dir(self) -> Path:
        return Path(self.cache_root) / self.name


@dataclass
class CacheEntry:
    path: Path
    revision: Optional[str] = None


@dataclass
class RemoteDescriptor:
    revision: str
    files: List[str] = field(default_factory=list)
    # full commit id used to pin the transfer, when the registry has one
    commit: Optional[str] = None


@dataclass
class SyncResult:
    local_path: Path
    updated: bool
    revision: str
    files: List[str] = field(default_factory=list)

    def __iter__(self):
        # allows `path, updated = sync(...)`
        return iter((self.local_path, self.updated))
