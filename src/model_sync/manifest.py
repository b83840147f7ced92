# src/model_sync/manifest.py
import json, jsonschema
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config import EXCLUDE_PATTERNS, MODELS_DIR, SCHEMA_DIR
from .sync.artifact import ArtifactRef

SCHEMA_PATH = Path(SCHEMA_DIR) / "manifest.schema.json"


@dataclass
class ManifestEntry:
    id: str
    registry: str
    smoke: Optional[str] = None
    exclude: Optional[List[str]] = None
    subdir: str = ""

    @property
    def exclude_patterns(self) -> List[str]:
        return list(EXCLUDE_PATTERNS) if self.exclude is None else list(self.exclude)

    def ref(self, models_dir: str = MODELS_DIR) -> ArtifactRef:
        return ArtifactRef(identifier=self.id, cache_root=Path(models_dir) / self.subdir)


def validate_manifest(obj, schema_path: str = str(SCHEMA_PATH)):
    schema = json.loads(Path(schema_path).read_text(encoding="utf-8"))
    jsonschema.validate(instance=obj, schema=schema)


def load_manifest(path: str) -> List[ManifestEntry]:
    obj = json.loads(Path(path).read_text(encoding="utf-8"))
    validate_manifest(obj)
    entries = [ManifestEntry(**item) for item in obj]

    # org/a and other/a under one subdir would share a directory and a marker
    seen = {}
    for e in entries:
        local = e.ref("").local_dir
        if local in seen:
            raise ValueError(f"{e.id!r} and {seen[local]!r} both map to {local}; give one a different subdir")
        seen[local] = e.id
    return entries
