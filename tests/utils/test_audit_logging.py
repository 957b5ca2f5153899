import logging

import pytest

from cluster_profile_cleaner.utils.logging import audit_log_path
from cluster_profile_cleaner.utils.logging import finish_audit_log
from cluster_profile_cleaner.utils.logging import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_audit_log_path(tmp_path):
    assert audit_log_path(str(tmp_path), "20240101_120000") == str(
        tmp_path / "audit_20240101_120000.log"
    )


def test_audit_log_lifecycle(tmp_path, restore_root_logger):
    audit_file = audit_log_path(str(tmp_path / "out"), "ts")

    setup_logging(audit_file=audit_file, mode="analyze", api_url="https://palette")
    logging.getLogger("cluster_profile_cleaner.test").warning("Profile: base - UNUSED")
    finish_audit_log(audit_file)

    text = open(audit_file, encoding="utf-8").read()
    assert "Execution Started:" in text
    assert "Mode: analyze" in text
    assert "API URL: https://palette" in text
    assert "[WARNING] cluster_profile_cleaner.test: Profile: base - UNUSED" in text
    assert text.rstrip().splitlines()[-2].startswith("Execution Completed:")
    assert not any(
        isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers
    )


def test_debug_level(restore_root_logger):
    setup_logging(debug=True)

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.WARNING
