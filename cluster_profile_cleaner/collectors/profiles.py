"""Aggregation of cluster profiles across the tenant and its projects.

The aggregator reads a point-in-time snapshot of every cluster profile the run
could act on:
1. the tenant-scoped list, always, as the baseline
2. the filtered project's scoped list, when a project filter is active
3. otherwise the scoped list of every project in the registry

A targeted profile name short-circuits all of the above and fetches only the
list of the targeted scope.
"""
import logging
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional
from typing import Tuple

from cluster_profile_cleaner.config.settings import RunConfig
from cluster_profile_cleaner.exceptions import AggregationError
from cluster_profile_cleaner.exceptions import PaletteApiError
from cluster_profile_cleaner.exceptions import ProfileNotFoundError
from cluster_profile_cleaner.models.profile import ClusterProfile
from cluster_profile_cleaner.models.profile import Project
from cluster_profile_cleaner.models.profile import SCOPE_PROJECT
from cluster_profile_cleaner.models.profile import SCOPE_SYSTEM
from cluster_profile_cleaner.models.profile import SCOPE_TENANT
from cluster_profile_cleaner.models.profile import scope_of

from .datasource import IDataSource
from .projects import list_projects

logger = logging.getLogger(__name__)


class ProfileAggregator:
    """Builds the candidate set of cluster profiles for a run."""

    def __init__(self, datasource: IDataSource):
        self.datasource = datasource
        # Project registry, filled when all projects are scanned
        self.projects: List[Project] = []
        # Non-fatal list fetch failures of the last aggregation
        self.list_errors = 0
        self._profiles: Dict[Tuple[str, str, str], ClusterProfile] = {}

    def get_all_profiles(self, config: RunConfig) -> List[ClusterProfile]:
        """Return every cluster profile the run should look at.

        Raises:
            ProfileNotFoundError: If a profile name is targeted and has no match.
            AggregationError: If the tenant baseline, or the targeted scope's list,
                couldn't be fetched.
        """
        logger.info("Fetching cluster profiles...")
        self._profiles = {}
        self.list_errors = 0

        if config.profile_name:
            return self._get_named_profile(config)

        self._add_tenant_baseline()

        if config.has_project_filter:
            self._add_filtered_project(config)
        else:
            self._add_all_projects()
            self._name_from_registry()

        logger.info("Total profiles to process: %d", len(self._profiles))
        return list(self._profiles.values())

    def _filter_project(self, config: RunConfig) -> Project:
        return Project(uid=config.project_uid, name=config.project_name or "")

    def _union(
        self, items: Iterable[dict], source_project: Optional[Project] = None
    ) -> int:
        """Add items to the aggregated set, returning how many were new."""
        added = 0
        for item in items:
            owner = source_project if scope_of(item) == SCOPE_PROJECT else None
            profile = ClusterProfile.from_dict(item, source_project=owner)
            if profile.key in self._profiles:
                continue
            self._profiles[profile.key] = profile
            added += 1
        return added

    def _get_named_profile(self, config: RunConfig) -> List[ClusterProfile]:
        logger.info("Fetching specific profile: %s", config.profile_name)
        try:
            items = self.datasource.list_cluster_profiles(config.project_uid)
        except PaletteApiError as e:
            where = "project" if config.has_project_filter else "tenant"
            raise AggregationError(
                f"Failed to fetch {where}-scoped cluster profiles: {e}"
            ) from e

        matching = [
            item
            for item in items
            if (item.get("metadata") or {}).get("name") == config.profile_name
        ]
        if not matching:
            logger.error("Profile '%s' not found", config.profile_name)
            raise ProfileNotFoundError(config.profile_name)

        source = self._filter_project(config) if config.has_project_filter else None
        self._union(matching, source)
        logger.info("Found profile: %s", config.profile_name)
        return list(self._profiles.values())

    def _add_tenant_baseline(self) -> None:
        logger.info("Fetching tenant-scoped cluster profiles...")
        try:
            items = self.datasource.list_cluster_profiles()
        except PaletteApiError as e:
            raise AggregationError(
                f"Failed to fetch tenant-scoped cluster profiles: {e}"
            ) from e
        self._union(items)
        logger.info("Retrieved %d tenant-scoped profiles", len(items))

    def _add_filtered_project(self, config: RunConfig) -> None:
        logger.info(
            "Fetching project-scoped cluster profiles for project: %s...",
            config.project_uid,
        )
        try:
            items = self.datasource.list_cluster_profiles(config.project_uid)
        except PaletteApiError:
            logger.warning("Failed to fetch project-scoped cluster profiles")
            self.list_errors += 1
            return
        self._union(items, self._filter_project(config))
        logger.info(
            "Retrieved %d project-scoped profiles (using ProjectUid header)",
            len(items),
        )

    def _add_all_projects(self) -> None:
        logger.info("Fetching all projects to get project-scoped cluster profiles...")
        try:
            self.projects = list_projects(self.datasource)
        except PaletteApiError:
            logger.warning(
                "Failed to fetch projects list - only tenant-scoped profiles will be processed"
            )
            self.list_errors += 1
            return
        logger.info("Found %d projects", len(self.projects))

        for index, project in enumerate(self.projects, start=1):
            logger.info(
                "Fetching profiles from project %d/%d: %s...",
                index,
                len(self.projects),
                project.name,
            )
            try:
                items = self.datasource.list_cluster_profiles(project.uid)
            except PaletteApiError:
                logger.warning("  └─ Failed to fetch profiles from project %s", project.name)
                self.list_errors += 1
                continue

            # Scoped listings also return the shared profiles, already in the baseline
            project_only = [
                item
                for item in items
                if scope_of(item) not in (SCOPE_TENANT, SCOPE_SYSTEM)
            ]
            if not project_only:
                logger.info("  └─ No project-scoped profiles found")
                continue
            self._union(project_only, project)
            logger.info("  └─ Found %d project-scoped profiles", len(project_only))

        logger.info("Finished fetching profiles from all projects")

    def _name_from_registry(self) -> None:
        """Name project profiles that only record their owning project uid."""
        names = {project.uid: project.name for project in self.projects}
        for profile in self._profiles.values():
            if profile.scope != SCOPE_PROJECT or profile.project_name:
                continue
            if profile.project_uid in names:
                profile.project_name = names[profile.project_uid]
