import json
import logging

import pytest

from model_sync import cli
from model_sync.manifest import ManifestEntry
from model_sync.smoke.base import SmokeResult

from conftest import FakeRegistry


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def manifest(tmp_path):
    path = tmp_path / "models.json"
    path.write_text(json.dumps([
        {"id": "org/embed", "registry": "huggingface", "smoke": "embedding", "exclude": ["*.onnx"]},
        {"id": "org/other", "registry": "huggingface"},
    ]))
    return str(path)


@pytest.fixture
def fake_registry(monkeypatch):
    reg = FakeRegistry(files={"weights.bin": "w", "model.onnx": "o"})
    monkeypatch.setitem(cli.REGISTRIES, "huggingface", lambda: reg)
    return reg


def test_run_syncs_and_smokes(tmp_path, monkeypatch, fake_registry):
    seen = []

    def fake_smoke(kind, target):
        seen.append((kind, target))
        return SmokeResult(name=kind, passed=True)

    monkeypatch.setattr(cli, "run_smoke", fake_smoke)
    entries = [ManifestEntry(id="org/embed", registry="huggingface", smoke="embedding", exclude=["*.onnx"])]

    (outcome,) = cli.run(entries, str(tmp_path))

    assert outcome.ok and outcome.updated and outcome.smoke == "pass"
    assert seen == [("embedding", str(tmp_path / "embed"))]
    assert not (tmp_path / "embed" / "model.onnx").exists()


def test_failed_smoke_marks_outcome(tmp_path, monkeypatch, fake_registry):
    monkeypatch.setattr(cli, "run_smoke", lambda kind, target: SmokeResult(name=kind, passed=False))
    entries = [ManifestEntry(id="org/embed", registry="huggingface", smoke="embedding")]
    (outcome,) = cli.run(entries, str(tmp_path))
    assert not outcome.ok and outcome.smoke == "fail"


def test_main_exits_nonzero_on_registry_failure(tmp_path, manifest, monkeypatch, capsys):
    class Down(FakeRegistry):
        def describe(self, ref):
            raise ConnectionError("offline")

    monkeypatch.setitem(cli.REGISTRIES, "huggingface", Down)
    with pytest.raises(SystemExit) as exc:
        cli.main(["--manifest", manifest, "--models-dir", str(tmp_path), "--skip-smoke"])
    assert exc.value.code == 1
    out = capsys.readouterr().out
    assert "Failed: 2" in out and "[failed] org/embed" in out


def test_main_check_only_downloads_nothing(tmp_path, manifest, fake_registry, capsys):
    cli.main(["--manifest", manifest, "--models-dir", str(tmp_path), "--check", "--only", "org/other"])
    assert fake_registry.fetch_calls == []
    assert "Artifacts: 1  Updated: 0  Failed: 0" in capsys.readouterr().out


def test_main_rejects_unknown_only(tmp_path, manifest):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--manifest", manifest, "--only", "org/missing"])
    assert exc.value.code == 2


def test_json_formatter_includes_extras():
    record = logging.LogRecord("model_sync.sync", logging.INFO, __file__, 1, "saved", None, None)
    record.artifact = "org/demo-model"
    record.path = object()
    payload = json.loads(cli.JsonFormatter().format(record))
    assert payload["msg"] == "saved"
    assert payload["artifact"] == "org/demo-model"
    assert payload["path"].startswith("<object")
    assert "pathname" not in payload


def test_inference_crash_does_not_stop_later_entries(tmp_path, monkeypatch, fake_registry):
    from model_sync.smoke import embedder

    class OutOfMemory:
        def __init__(self, path, local_files_only):
            pass

        def encode(self, *args, **kwargs):
            raise RuntimeError("CUDA out of memory during encode")

    monkeypatch.setattr(embedder, "SentenceTransformer", OutOfMemory)
    entries = [
        ManifestEntry(id="org/embed", registry="huggingface", smoke="embedding"),
        ManifestEntry(id="org/other", registry="huggingface"),
    ]

    first, second = cli.run(entries, str(tmp_path))

    assert not first.ok and first.updated and first.smoke == "fail"
    assert "failed to encode" in first.error
    assert second.ok and second.updated


def test_unexpected_smoke_error_fails_only_that_entry(tmp_path, monkeypatch, fake_registry):
    def crash(kind, target):
        raise RuntimeError("segfault in runtime")

    monkeypatch.setattr(cli, "run_smoke", crash)
    entries = [
        ManifestEntry(id="org/embed", registry="huggingface", smoke="embedding"),
        ManifestEntry(id="org/other", registry="huggingface"),
    ]

    first, second = cli.run(entries, str(tmp_path))

    assert not first.ok and "segfault in runtime" in first.error
    assert second.ok


def test_main_rejects_colliding_manifest_entries(tmp_path):
    path = tmp_path / "models.json"
    path.write_text(json.dumps([
        {"id": "org/model", "registry": "huggingface"},
        {"id": "other/model", "registry": "huggingface"},
    ]))
    with pytest.raises(SystemExit) as exc:
        cli.main(["--manifest", str(path), "--models-dir", str(tmp_path)])
    assert exc.value.code == 2
