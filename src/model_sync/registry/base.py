"""Registry port: what the sync policy needs from a remote model registry."""

from pathlib import Path
from typing import List, Protocol

from ..sync.artifact import ArtifactRef, RemoteDescriptor


class Registry(Protocol):
    """Port for registry operations."""

    def describe(self, ref: ArtifactRef) -> RemoteDescriptor:
        """Return the latest revision and the remote file listing."""
        ...

    def fetch(self, ref: ArtifactRef, dest: Path, files: List[str], descriptor: RemoteDescriptor) -> None:
        """Write `files` of the described revision under `dest`, overwriting existing ones."""
        ...

    def present(self, ref: ArtifactRef) -> bool:
        """Whether the content the stored marker vouches for is still in place locally."""
        ...
