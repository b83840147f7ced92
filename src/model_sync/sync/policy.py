# src/model_sync/sync/policy.py
import logging
from fnmatch import fnmatchcase
from typing import Iterable, List, Optional, Tuple

from . import marker
from .artifact import ArtifactRef, CacheEntry, RemoteDescriptor, SyncResult
from .errors import LocalIOError, RegistryUnreachable, SyncError, TransferFailed
from ..registry.base import Registry

log = logging.getLogger("model_sync.sync")


def filter_files(files: Iterable[str], exclude_patterns: Iterable[str]) -> List[str]:
    """
    Drop every path matching any exclusion glob (case-sensitive).

    `*` also matches "/", so "onnx/*" drops the whole onnx/ subtree.
    """
    patterns = list(exclude_patterns or [])
    return [f for f in files if not any(fnmatchcase(f, p) for p in patterns)]


def _describe(ref: ArtifactRef, registry: Registry) -> RemoteDescriptor:
    try:
        desc = registry.describe(ref)
    except SyncError:
        raise
    except Exception as e:
        raise RegistryUnreachable(ref.identifier, f"could not query registry: {e}") from e

    # an empty or non-string revision is fatal, never "always update"
    if desc is None or not isinstance(desc.revision, str) or not desc.revision.strip():
        raise RegistryUnreachable(ref.identifier, "registry returned no usable revision")
    if not isinstance(desc.files, list) or not all(isinstance(f, str) for f in desc.files):
        raise RegistryUnreachable(ref.identifier, "registry returned a malformed file listing")
    desc.revision = desc.revision.strip()
    return desc


def read_entry(ref: ArtifactRef, registry: Optional[Registry] = None) -> CacheEntry:
    """
    Load the cache entry. When a registry is given, a marker whose content
    has gone missing (e.g. removed from the Ollama store) counts as absent.
    """
    try:
        stored = marker.read_marker(ref.local_dir)
    except OSError as e:
        raise LocalIOError(ref.identifier, f"could not read revision marker: {e}", str(ref.local_dir)) from e

    if stored is not None and registry is not None and not _present(ref, registry):
        log.warning("marker present but content missing", extra={"artifact": ref.identifier, "stored": stored})
        stored = None
    return CacheEntry(path=ref.local_dir, revision=stored)


def _present(ref: ArtifactRef, registry: Registry) -> bool:
    try:
        return bool(registry.present(ref))
    except SyncError:
        raise
    except Exception as e:
        raise TransferFailed(ref.identifier, f"could not verify local copy: {e}") from e


def check(ref: ArtifactRef, registry: Registry) -> Tuple[Optional[str], str, bool]:
    """Compare the stored marker with the remote revision without fetching anything."""
    desc = _describe(ref, registry)
    entry = read_entry(ref, registry)
    return entry.revision, desc.revision, entry.revision == desc.revision


def sync(ref: ArtifactRef, registry: Registry, exclude_patterns: Iterable[str] = ()) -> SyncResult:
    """
    Bring ref.local_dir up to the registry's latest revision.

    Costs one metadata round-trip when the stored marker already matches.
    The marker is written only after every file has been fetched, so an
    interrupted run leaves a stale/absent marker and the next call re-fetches.
    """
    desc = _describe(ref, registry)
    entry = read_entry(ref, registry)
    local_dir = entry.path

    if entry.revision == desc.revision:
        log.info("up to date", extra={"artifact": ref.identifier, "revision": desc.revision})
        return SyncResult(local_path=local_dir, updated=False, revision=desc.revision)

    if entry.revision is None:
        log.info("downloading", extra={"artifact": ref.identifier, "revision": desc.revision})
    else:
        log.info(
            "update available",
            extra={"artifact": ref.identifier, "stored": entry.revision, "revision": desc.revision},
        )

    try:
        local_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise LocalIOError(ref.identifier, f"could not create {local_dir}: {e}", str(local_dir)) from e

    wanted = filter_files(desc.files, exclude_patterns)
    skipped = len(desc.files) - len(wanted)
    log.debug("fetching files", extra={"artifact": ref.identifier, "files": len(wanted), "excluded": skipped})

    try:
        registry.fetch(ref, local_dir, wanted, desc)
    except SyncError:
        raise
    except Exception as e:
        raise TransferFailed(ref.identifier, f"transfer failed: {e}") from e

    try:
        marker.write_marker(local_dir, desc.revision)
    except OSError as e:
        raise LocalIOError(ref.identifier, f"could not write revision marker: {e}", str(local_dir)) from e

    log.info("saved", extra={"artifact": ref.identifier, "revision": desc.revision, "path": str(local_dir)})
    return SyncResult(local_path=local_dir, updated=True, revision=desc.revision, files=wanted)
