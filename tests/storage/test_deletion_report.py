import json
import os

from cluster_profile_cleaner.models.outcome import CleanupResults
from cluster_profile_cleaner.models.outcome import DeletedProfile
from cluster_profile_cleaner.models.outcome import RunMode
from cluster_profile_cleaner.storage.report import DeletionReportSink


def test_report_without_deletions(tmp_path):
    sink = DeletionReportSink(str(tmp_path), "20240101_120000", backup_enabled=True)
    results = CleanupResults(mode=RunMode.CLEANUP, total_checked=3)

    path = sink.save(results)

    assert path == str(tmp_path / "deleted_profiles_20240101_120000.txt")
    text = open(path, encoding="utf-8").read()
    assert "Backup enabled: true" in text
    assert "Total profiles checked: 3" in text
    assert "Profiles deleted: 0" in text
    assert "No unused profiles were deleted." in text
    assert not os.path.exists(sink.json_path)


def test_report_lists_deleted_profiles(tmp_path):
    sink = DeletionReportSink(str(tmp_path), "ts", backup_enabled=False)
    results = CleanupResults(mode=RunMode.CLEANUP, total_checked=2)
    results.deleted.append(
        DeletedProfile("p1", "base", "1.0.0", {"metadata": {"uid": "p1"}})
    )

    sink.save(results)

    text = open(sink.text_path, encoding="utf-8").read()
    assert "Backup enabled: false" in text
    assert "Profile: base v1.0.0" in text
    assert "  UID: p1" in text
    with open(sink.json_path, encoding="utf-8") as f:
        manifest = json.load(f)
    assert manifest == [
        {
            "profileUid": "p1",
            "profileName": "base",
            "version": "1.0.0",
            "profileInfo": {"metadata": {"uid": "p1"}},
        }
    ]
