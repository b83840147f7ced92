# src/model_sync/registry/ollama.py
import hashlib
import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import ollama
import requests

from ..config import OLLAMA_HOST, OLLAMA_REGISTRY, OLLAMA_TIMEOUT, REVISION_LENGTH
from ..sync.artifact import ArtifactRef, RemoteDescriptor
from ..sync.errors import RegistryUnreachable, TransferFailed

log = logging.getLogger("model_sync.registry.ollama")

MANIFEST_ACCEPT = "application/vnd.docker.distribution.manifest.v2+json"


def parse_model(identifier: str) -> Tuple[str, str, str]:
    """'qwen2.5:3b' -> ('library', 'qwen2.5', '3b'); tag defaults to 'latest'."""
    name, _, tag = identifier.strip().partition(":")
    namespace, _, model = name.rpartition("/")
    return (namespace or "library", model, tag or "latest")


def normalize_model(identifier: str) -> str:
    """'llama3' -> 'llama3:latest'; 'library/x:1b' -> 'x:1b' (the form `ollama list` prints)."""
    namespace, model, tag = parse_model(identifier)
    name = model if namespace == "library" else f"{namespace}/{model}"
    return f"{name}:{tag}"


class OllamaRegistry:
    """
    Models on the Ollama registry, pulled into a local Ollama server.

    The revision is the sha256 of the tag's manifest, which is the digest
    `ollama list` shows. Blobs live in the server's own store; the local
    cache directory only holds the revision marker, so `present` asks the
    server whether the model is still there before trusting it.
    """

    def __init__(
        self,
        host: str = OLLAMA_HOST,
        registry_url: str = OLLAMA_REGISTRY,
        timeout: float = OLLAMA_TIMEOUT,
        revision_length: int = REVISION_LENGTH,
        client: Optional[ollama.Client] = None,
    ):
        self.host = host
        self.registry_url = registry_url.rstrip("/")
        self.timeout = timeout
        self.revision_length = revision_length
        self._client = client

    @property
    def client(self) -> ollama.Client:
        if self._client is None:
            self._client = ollama.Client(host=self.host, timeout=self.timeout)
        return self._client

    def manifest_url(self, identifier: str) -> str:
        namespace, model, tag = parse_model(identifier)
        return f"{self.registry_url}/v2/{namespace}/{model}/manifests/{tag}"

    def describe(self, ref: ArtifactRef) -> RemoteDescriptor:
        url = self.manifest_url(ref.identifier)
        try:
            resp = requests.get(url, headers={"Accept": MANIFEST_ACCEPT}, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise RegistryUnreachable(ref.identifier, f"could not reach Ollama registry: {e}") from e

        body = resp.content
        try:
            manifest = json.loads(body)
            layers = [layer["digest"] for layer in manifest.get("layers", [])]
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise RegistryUnreachable(ref.identifier, f"malformed manifest from {url}") from e
        if not layers:
            raise RegistryUnreachable(ref.identifier, f"manifest from {url} lists no layers")

        digest = hashlib.sha256(body).hexdigest()
        return RemoteDescriptor(revision=digest[: self.revision_length], files=layers, commit=digest)

    def present(self, ref: ArtifactRef) -> bool:
        """Whether the local server still has the model, as `ollama list` would show."""
        wanted = normalize_model(ref.identifier)
        try:
            listing = self.client.list()
        except Exception as e:
            raise TransferFailed(ref.identifier, f"could not list models on {self.host}: {e}") from e
        names = {normalize_model(m.get("model") or m.get("name") or "") for m in (listing.get("models") or [])}
        return wanted in names

    def fetch(self, ref: ArtifactRef, dest: Path, files: List[str], descriptor: RemoteDescriptor) -> None:
        # the server resolves layers itself; `files` only matters for logging
        last_status = None
        try:
            for progress in self.client.pull(ref.identifier, stream=True):
                status = progress.get("status")
                if status != last_status:
                    log.info("pull", extra={"artifact": ref.identifier, "status": status})
                    last_status = status
        except Exception as e:
            raise TransferFailed(ref.identifier, f"ollama pull failed: {e}") from e
        if last_status != "success":
            raise TransferFailed(ref.identifier, f"ollama pull ended with status {last_status!r}")
