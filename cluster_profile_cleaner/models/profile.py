"""Data models for Palette projects and cluster profiles.

This module contains dataclasses built from Palette API payloads:
- Project: an entry of the project registry
- ClusterProfile: a cluster profile list item, validated at the aggregation boundary
- UsageSignal: the usage fields of a cluster profile's detailed status
"""

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Tuple

from cluster_profile_cleaner.utils.conversions import camelcase
from cluster_profile_cleaner.utils.conversions import dig
from cluster_profile_cleaner.utils.conversions import first_non_empty
from cluster_profile_cleaner.utils.conversions import safe_len

SCOPE_TENANT = "tenant"
SCOPE_PROJECT = "project"
SCOPE_SYSTEM = "system"

DEFAULT_SCOPE = SCOPE_PROJECT
DEFAULT_VERSION = "1.0.0"

USAGE_STATUS_FIELDS = ("inUseClusters", "inUseClusterUids", "inUseClusterTemplates")


def scope_of(payload: Dict[str, Any]) -> str:
    """Scope annotation of a profile payload, 'project' when absent."""
    return dig(payload, "metadata", "annotations", "scope") or DEFAULT_SCOPE


def version_of(payload: Dict[str, Any]) -> str:
    version = dig(payload, "metadata", "version") or dig(payload, "spec", "version")
    return str(version) if version else DEFAULT_VERSION


def project_uid_candidates(payload: Dict[str, Any]) -> List[Any]:
    """Places where a profile payload may record its owning project uid, in order."""
    return [
        dig(payload, "metadata", "annotations", "projectUid"),
        dig(payload, "spec", "projectUid"),
        dig(payload, "metadata", "projectUid"),
    ]


@dataclass
class Project:
    """Represents a Palette project."""

    uid: str
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        """Create Project from a /v1/projects item."""
        return cls(
            uid=dig(data, "metadata", "uid") or "",
            name=dig(data, "metadata", "name") or "",
        )


@camelcase
@dataclass
class UsageSignal:
    """Consumers referencing a cluster profile. A missing list means no consumers."""

    in_use_clusters: Optional[Any] = field(default=None)
    in_use_cluster_uids: Optional[Any] = field(default=None)
    in_use_cluster_templates: Optional[Any] = field(default=None)

    @classmethod
    def from_detail(cls, detail: Dict[str, Any]) -> "UsageSignal":
        """Create UsageSignal from a cluster profile detail payload."""
        status = dig(detail, "status")
        if not isinstance(status, dict):
            return cls()
        return cls(**{k: v for k, v in status.items() if k in USAGE_STATUS_FIELDS})

    @property
    def consumer_count(self) -> float:
        return (
            safe_len(self.in_use_clusters)
            + safe_len(self.in_use_cluster_uids)
            + safe_len(self.in_use_cluster_templates)
        )

    def is_empty(self) -> bool:
        return self.consumer_count == 0


@dataclass
class ClusterProfile:
    """Represents a cluster profile version as returned by the list endpoint.

    ``project_uid`` is the owning project recorded in the profile's own payload,
    ``source_project_uid``/``project_name`` describe the project whose scoped
    listing returned it, when it came from one.
    """

    uid: str
    name: str
    version: str
    scope: str = DEFAULT_SCOPE
    project_uid: Optional[str] = None
    project_name: Optional[str] = None
    source_project_uid: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        source_project: Optional[Project] = None,
    ) -> "ClusterProfile":
        """Create ClusterProfile from a /v1/clusterprofiles item."""
        return cls(
            uid=dig(data, "metadata", "uid") or "",
            name=dig(data, "metadata", "name") or "",
            version=version_of(data),
            scope=scope_of(data),
            project_uid=first_non_empty(project_uid_candidates(data)),
            project_name=(
                source_project.name
                if source_project
                else dig(data, "metadata", "annotations", "projectName")
            ),
            source_project_uid=source_project.uid if source_project else None,
            payload=data,
        )

    @property
    def key(self) -> Tuple[str, str, str]:
        """Identity of the profile: uid within its (scope, owning project)."""
        owner = ""
        if self.scope == SCOPE_PROJECT:
            owner = self.project_uid or self.source_project_uid or ""
        return (self.scope, owner, self.uid)
