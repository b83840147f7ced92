from model_sync.sync.artifact import ArtifactRef
from model_sync.sync.marker import read_marker, write_marker


def test_missing_dir_and_file(tmp_path):
    assert read_marker(tmp_path / "nope") is None
    assert read_marker(tmp_path) is None


def test_empty_marker_counts_as_absent(tmp_path):
    (tmp_path / ".last_revision").write_text("  \n")
    assert read_marker(tmp_path) is None


def test_write_replaces_and_leaves_no_temp(tmp_path):
    write_marker(tmp_path, "aaaa1111")
    write_marker(tmp_path, "bbbb2222")
    assert read_marker(tmp_path) == "bbbb2222"
    assert sorted(p.name for p in tmp_path.iterdir()) == [".last_revision"]


def test_ref_local_dir(tmp_path):
    assert ArtifactRef("BAAI/bge-m3", tmp_path).local_dir == tmp_path / "bge-m3"
    assert ArtifactRef("qwen2.5:3b", tmp_path).local_dir == tmp_path / "qwen2.5-3b"


def test_invalid_utf8_counts_as_absent(tmp_path):
    (tmp_path / ".last_revision").write_bytes(b"\xff\xfe\x00garbage")
    assert read_marker(tmp_path) is None
