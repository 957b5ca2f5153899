import json
import os

import pytest

from cluster_profile_cleaner.storage.backup import ProfileBackupWriter


@pytest.fixture
def writer(source, tmp_path):
    return ProfileBackupWriter(source, str(tmp_path), "20240101_120000")


def test_backup_path_layout(writer, tmp_path):
    assert writer.path_for("base", "1.2.0") == os.path.join(
        str(tmp_path), "backups", "profile_base_v1.2.0_20240101_120000.json"
    )


def test_export_is_written_with_project_context(writer, source):
    path = writer.backup("p1", "base", "1.2.0", {"metadata": {}}, "uid-a")

    with open(path, "rb") as f:
        assert f.read() == source.export_payload
    assert source.calls_to("export_cluster_profile") == [
        ("export_cluster_profile", "p1", "uid-a")
    ]


def test_detail_snapshot_when_export_fails(writer, source):
    source.fail_export = True
    detail = {"metadata": {"uid": "p1", "name": "base"}, "status": {}}

    path = writer.backup("p1", "base", "1.2.0", detail)

    with open(path, encoding="utf-8") as f:
        assert json.load(f) == detail


def test_unwritable_location_raises(source, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    writer = ProfileBackupWriter(source, str(blocker), "ts")

    with pytest.raises(OSError):
        writer.backup("p1", "base", "1.0.0", {})
