# src/model_sync/sync/marker.py
import os
from pathlib import Path
from typing import Optional

from ..config import REVISION_FILE


def marker_path(local_dir: Path, filename: str = REVISION_FILE) -> Path:
    return Path(local_dir) / filename


def read_marker(local_dir: Path, filename: str = REVISION_FILE) -> Optional[str]:
    """
    Return the stored revision, or None when the directory, the marker
    file, or its content is missing. A marker that is not valid UTF-8
    counts as missing too, so the next sync re-fetches. Other read
    errors propagate (OSError).
    """
    path = marker_path(local_dir, filename)
    if not Path(local_dir).is_dir() or not path.is_file():
        return None
    try:
        value = path.read_text(encoding="utf-8").strip()
    except UnicodeDecodeError:
        return None
    return value or None


def write_marker(local_dir: Path, revision: str, filename: str = REVISION_FILE) -> Path:
    """
    Write the revision to a temp sibling and rename it over the marker,
    so readers see either the old value or the new one, never a torn file.
    """
    path = marker_path(local_dir, filename)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(revision, encoding="utf-8")
    os.replace(tmp, path)
    return path
