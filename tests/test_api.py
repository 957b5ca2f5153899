import json
import os
from unittest.mock import patch

import pytest

from cluster_profile_cleaner import analyze_profiles
from cluster_profile_cleaner import cleanup_profiles
from cluster_profile_cleaner.api import create_client
from cluster_profile_cleaner.config.settings import API_KEY_ENV
from cluster_profile_cleaner.exceptions import MissingCredentialError
from cluster_profile_cleaner.exceptions import ProfileNotFoundError
from cluster_profile_cleaner.exceptions import ProjectNotFoundError
from cluster_profile_cleaner.models.outcome import ProfileStatus


@pytest.fixture
def tenant(source):
    source.add_project("uid-a", "Proj-A")
    source.add_profile("t1", "shared-base", scope="tenant")
    source.add_profile(
        "pa1", "edge", scope="project", listed_in="uid-a", inUseClusters=["c1"]
    )
    source.add_profile("pa2", "edge-old", scope="project", listed_in="uid-a")
    return source


def test_analyze_resolves_project_name(tenant, config):
    config.project_name = "proj-a"

    results = analyze_profiles(config, datasource=tenant)

    assert config.project_uid == "uid-a"
    statuses = {r.name: r.status for r in results.records}
    assert statuses == {"edge": ProfileStatus.IN_USE, "edge-old": ProfileStatus.UNUSED}
    assert results.skipped_out_of_scope == 1


def test_analyze_writes_csv_only_when_asked(tenant, config):
    analyze_profiles(config, datasource=tenant)
    assert not os.path.exists(os.path.join(config.output_dir, "analyze_20240101_120000.csv"))

    config.export_csv = True
    analyze_profiles(config, datasource=tenant)
    assert os.path.exists(os.path.join(config.output_dir, "analyze_20240101_120000.csv"))


def test_unknown_project_fails_before_any_profile_call(tenant, config):
    config.project_name = "nope"

    with pytest.raises(ProjectNotFoundError):
        analyze_profiles(config, datasource=tenant)

    assert tenant.calls_to("list_cluster_profiles") == []


def test_unknown_profile_name_fails_before_processing(tenant, config):
    config.profile_name = "missing"

    with pytest.raises(ProfileNotFoundError):
        cleanup_profiles(config, confirm=lambda inspected: "yes", datasource=tenant)

    assert tenant.calls_to("get_cluster_profile") == []
    assert tenant.calls_to("delete_cluster_profile") == []


def test_cleanup_writes_report_and_manifest(tenant, config):
    config.confirm_all = True
    config.backup_enabled = True
    config.export_csv = True

    results = cleanup_profiles(config, datasource=tenant)

    assert sorted(d.profile_uid for d in results.deleted) == ["pa2", "t1"]
    out = config.output_dir
    assert os.path.exists(os.path.join(out, "cleanup_20240101_120000.csv"))
    assert os.path.exists(os.path.join(out, "deleted_profiles_20240101_120000.txt"))
    with open(os.path.join(out, "deleted_profiles_20240101_120000.json")) as f:
        assert sorted(item["profileName"] for item in json.load(f)) == [
            "edge-old",
            "shared-base",
        ]
    assert len(os.listdir(os.path.join(out, "backups"))) == 2


def test_cleanup_report_written_when_nothing_deleted(tenant, config):
    results = cleanup_profiles(config, confirm=lambda inspected: "no", datasource=tenant)

    assert results.deleted_count == 0
    assert os.path.exists(
        os.path.join(config.output_dir, "deleted_profiles_20240101_120000.txt")
    )
    assert not os.path.exists(
        os.path.join(config.output_dir, "deleted_profiles_20240101_120000.json")
    )


def test_cleanup_requires_confirm_or_confirm_all(tenant, config):
    with pytest.raises(ValueError):
        cleanup_profiles(config, datasource=tenant)

    assert tenant.calls == []


def test_create_client_reads_key_from_environment(config, monkeypatch):
    config.api_key = None
    monkeypatch.setenv(API_KEY_ENV, "env-key")

    client = create_client(config)

    assert client.api_key == "env-key"
    assert client.base_url == "https://palette.example.com"


def test_create_client_without_key(config, monkeypatch):
    config.api_key = None
    monkeypatch.delenv(API_KEY_ENV, raising=False)

    with pytest.raises(MissingCredentialError):
        create_client(config)


def test_default_datasource_is_the_palette_client(config):
    with patch("cluster_profile_cleaner.api.create_client") as create:
        create.return_value.list_cluster_profiles.return_value = []
        create.return_value.list_projects.return_value = []

        results = analyze_profiles(config)

    create.assert_called_once_with(config)
    assert results.records == []


def test_project_listing_failures_count_as_errors(tenant, config):
    tenant.fail_listings.add("uid-a")
    config.confirm_all = True

    results = cleanup_profiles(config, datasource=tenant)

    assert results.errors == 1
    assert [d.profile_uid for d in results.deleted] == ["t1"]
