from pathlib import Path

import pytest

from model_sync.sync.artifact import ArtifactRef, RemoteDescriptor


class FakeRegistry:
    """In-memory registry: `files` maps remote path -> content."""

    def __init__(self, revision="abcd1234", files=None, fail_after=None):
        self.revision = revision
        self.files = dict(files or {})
        self.fail_after = fail_after
        self.describe_calls = 0
        self.is_present = True
        self.fetch_calls = []

    def describe(self, ref):
        self.describe_calls += 1
        return RemoteDescriptor(revision=self.revision, files=sorted(self.files))

    def present(self, ref):
        return self.is_present

    def fetch(self, ref, dest, files, descriptor):
        self.fetch_calls.append(list(files))
        for i, name in enumerate(files):
            if self.fail_after is not None and i == self.fail_after:
                raise ConnectionError("connection reset")
            out = Path(dest) / name
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(self.files[name], encoding="utf-8")


@pytest.fixture
def ref(tmp_path):
    return ArtifactRef(identifier="org/demo-model", cache_root=tmp_path / "models")


@pytest.fixture
def registry():
    return FakeRegistry(files={"weights.bin": "w1", "config.json": "{}", "model.onnx": "onnx"})


def local_files(path):
    return {str(p.relative_to(path)) for p in Path(path).rglob("*") if p.is_file()}
