# src/model_sync/registry/huggingface.py
import logging
from pathlib import Path
from typing import List, Optional

from huggingface_hub import HfApi, hf_hub_download

from ..config import HF_TOKEN, REVISION_LENGTH
from ..sync.artifact import ArtifactRef, RemoteDescriptor
from ..sync.errors import RegistryUnreachable, TransferFailed

log = logging.getLogger("model_sync.registry.huggingface")


class HuggingFaceRegistry:
    """
    Model repos on the HuggingFace Hub.

    The revision is the short commit sha of the repo's default branch;
    files are fetched one by one pinned to the full sha that was described,
    so a push landing mid-download cannot mix two commits on disk.
    """

    def __init__(self, token: Optional[str] = HF_TOKEN, revision_length: int = REVISION_LENGTH):
        self.token = token
        self.revision_length = revision_length
        self.api = HfApi(token=token)

    def describe(self, ref: ArtifactRef) -> RemoteDescriptor:
        try:
            info = self.api.model_info(ref.identifier)
        except Exception as e:
            raise RegistryUnreachable(ref.identifier, f"could not reach HuggingFace Hub: {e}") from e

        sha = getattr(info, "sha", None)
        if not isinstance(sha, str) or not sha.strip():
            raise RegistryUnreachable(ref.identifier, "HuggingFace Hub returned no commit sha")
        sha = sha.strip()

        files = [s.rfilename for s in (getattr(info, "siblings", None) or [])]
        return RemoteDescriptor(revision=sha[: self.revision_length], files=files, commit=sha)

    def present(self, ref: ArtifactRef) -> bool:
        # files and marker share ref.local_dir, so the marker alone vouches for them
        return ref.local_dir.is_dir()

    def fetch(self, ref: ArtifactRef, dest: Path, files: List[str], descriptor: RemoteDescriptor) -> None:
        revision = descriptor.commit or descriptor.revision
        for i, filename in enumerate(files, 1):
            log.debug("download", extra={"artifact": ref.identifier, "file": filename, "n": i, "of": len(files)})
            try:
                hf_hub_download(
                    repo_id=ref.identifier,
                    filename=filename,
                    revision=revision,
                    local_dir=str(dest),
                    token=self.token,
                )
            except Exception as e:
                raise TransferFailed(ref.identifier, f"failed to download {filename}: {e}") from e
