"""Fixtures shared by all unit tests."""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import pytest

from cluster_profile_cleaner.collectors.datasource import IDataSource
from cluster_profile_cleaner.config.settings import RunConfig
from cluster_profile_cleaner.exceptions import PaletteApiError


class FakeDataSource(IDataSource):
    """In-memory Palette tenant that records every call made to it."""

    def __init__(self):
        self.projects: List[Dict[str, Any]] = []
        # Keyed by project uid, None for the tenant-scoped listing
        self.listings: Dict[Optional[str], List[Dict[str, Any]]] = {None: []}
        self.details: Dict[str, Dict[str, Any]] = {}
        self.export_payload = b'{"exported": true}'
        self.fail_projects = False
        self.fail_listings: set = set()
        self.fail_details: set = set()
        self.fail_deletes: set = set()
        self.fail_export = False
        self.calls: List[tuple] = []

    @staticmethod
    def item(
        uid: str,
        name: str,
        scope: Optional[str] = "tenant",
        version: str = "1.0.0",
        project_uid: Optional[str] = None,
    ) -> Dict[str, Any]:
        annotations = {}
        if scope is not None:
            annotations["scope"] = scope
        if project_uid:
            annotations["projectUid"] = project_uid
        return {
            "metadata": {
                "uid": uid,
                "name": name,
                "version": version,
                "annotations": annotations,
            }
        }

    @staticmethod
    def detail(
        uid: str,
        name: str,
        scope: Optional[str] = "tenant",
        version: str = "1.0.0",
        **status: Any,
    ) -> Dict[str, Any]:
        detail = FakeDataSource.item(uid, name, scope, version)
        detail["status"] = status
        return detail

    def add_project(self, uid: str, name: str) -> None:
        self.projects.append({"metadata": {"uid": uid, "name": name}})
        self.listings.setdefault(uid, [])

    def add_profile(
        self,
        uid: str,
        name: str,
        scope: Optional[str] = "tenant",
        version: str = "1.0.0",
        project_uid: Optional[str] = None,
        listed_in: Optional[str] = None,
        **status: Any,
    ) -> None:
        self.listings.setdefault(listed_in, []).append(
            self.item(uid, name, scope, version, project_uid)
        )
        self.details[uid] = self.detail(uid, name, scope, version, **status)

    def _error(self, method: str, path: str) -> PaletteApiError:
        return PaletteApiError(method, path, 500, "boom")

    def list_projects(self):
        self.calls.append(("list_projects",))
        if self.fail_projects:
            raise self._error("GET", "projects")
        return list(self.projects)

    def list_cluster_profiles(self, project_uid=None):
        self.calls.append(("list_cluster_profiles", project_uid))
        if project_uid in self.fail_listings:
            raise self._error("GET", "clusterprofiles")
        return list(self.listings.get(project_uid, []))

    def get_cluster_profile(self, profile_uid, project_uid=None):
        self.calls.append(("get_cluster_profile", profile_uid, project_uid))
        if profile_uid in self.fail_details or profile_uid not in self.details:
            raise self._error("GET", f"clusterprofiles/{profile_uid}")
        return self.details[profile_uid]

    def delete_cluster_profile(self, profile_uid, project_uid=None):
        self.calls.append(("delete_cluster_profile", profile_uid, project_uid))
        if profile_uid in self.fail_deletes:
            raise self._error("DELETE", f"clusterprofiles/{profile_uid}")
        self.details.pop(profile_uid, None)
        return {"success": True}

    def export_cluster_profile(self, profile_uid, project_uid=None):
        self.calls.append(("export_cluster_profile", profile_uid, project_uid))
        if self.fail_export:
            raise self._error("GET", f"clusterprofiles/{profile_uid}/export")
        return self.export_payload

    def calls_to(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def source() -> FakeDataSource:
    return FakeDataSource()


@pytest.fixture
def config(tmp_path) -> RunConfig:
    return RunConfig(
        api_url="https://palette.example.com",
        api_key="test-key",
        output_dir=str(tmp_path / "output"),
        timestamp="20240101_120000",
    )
