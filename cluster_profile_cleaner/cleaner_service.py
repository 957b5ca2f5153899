import logging
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Callable
from typing import Dict
from typing import Iterable
from typing import Optional
from typing import Set
from typing import Tuple

from cluster_profile_cleaner.analytics.base import BaseScopeStrategy
from cluster_profile_cleaner.analytics.base import BaseUsageStrategy
from cluster_profile_cleaner.analytics.scope import ProjectScopeStrategy
from cluster_profile_cleaner.analytics.usage import StatusUsageStrategy
from cluster_profile_cleaner.collectors.datasource import IDataSource
from cluster_profile_cleaner.config.settings import RunConfig
from cluster_profile_cleaner.exceptions import PaletteApiError
from cluster_profile_cleaner.models.outcome import CleanupResults
from cluster_profile_cleaner.models.outcome import DeletedProfile
from cluster_profile_cleaner.models.outcome import OutcomeRecord
from cluster_profile_cleaner.models.outcome import ProfileAction
from cluster_profile_cleaner.models.outcome import ProfileStatus
from cluster_profile_cleaner.models.outcome import RunMode
from cluster_profile_cleaner.models.profile import ClusterProfile
from cluster_profile_cleaner.models.profile import SCOPE_PROJECT
from cluster_profile_cleaner.storage.backup import ProfileBackupWriter
from cluster_profile_cleaner.utils.conversions import dig

logger = logging.getLogger(__name__)

CONFIRM_ANSWER = "yes"


@dataclass
class InspectedProfile:
    """A profile whose detail has been fetched and whose usage is known."""

    profile: ClusterProfile
    detail: Dict[str, Any] = field(repr=False)
    version: str
    scope: str
    project_display: str
    project_uid: Optional[str]
    in_use: bool

    @property
    def uid(self) -> str:
        return self.profile.uid

    @property
    def name(self) -> str:
        return self.profile.name

    def record(
        self,
        status: ProfileStatus,
        action: ProfileAction = ProfileAction.NONE,
        declined: bool = False,
    ) -> OutcomeRecord:
        return OutcomeRecord(
            uid=self.uid,
            name=self.name,
            version=self.version,
            scope=self.scope,
            project=self.project_display,
            status=status,
            action=action,
            declined=declined,
        )


# Receives the profile about to be deleted, returns the operator's raw answer
ConfirmCallback = Callable[[InspectedProfile], str]


class ProfileCleanerService:
    """Drives the analyze and cleanup workflows over an aggregated profile list.

    Profiles are handled strictly one after the other: detail fetch, usage check,
    then in cleanup mode the optional confirmation, backup and delete. A failure
    on one profile is logged and counted, and the run moves on to the next one.
    """

    def __init__(
        self,
        datasource: IDataSource,
        scope_strategy: Optional[BaseScopeStrategy] = None,
        usage_strategy: Optional[BaseUsageStrategy] = None,
        confirm: Optional[ConfirmCallback] = None,
        backup_writer: Optional[ProfileBackupWriter] = None,
    ):
        self.datasource = datasource
        self.scope_strategy = scope_strategy or ProjectScopeStrategy()
        self.usage_strategy = usage_strategy or StatusUsageStrategy()
        self.confirm = confirm
        self.backup_writer = backup_writer

    def analyze(
        self, profiles: Iterable[ClusterProfile], config: RunConfig
    ) -> CleanupResults:
        """Classify every in-scope profile as UNUSED or IN USE."""
        logger.info("Analyzing cluster profiles for usage...")
        results = CleanupResults(mode=RunMode.ANALYZE)

        for inspected in self._inspect_all(profiles, config, results):
            if inspected.in_use:
                results.add(inspected.record(ProfileStatus.IN_USE))
            else:
                results.add(inspected.record(ProfileStatus.UNUSED))

        return results

    def cleanup(
        self, profiles: Iterable[ClusterProfile], config: RunConfig
    ) -> CleanupResults:
        """Delete every in-scope profile that nothing references.

        Raises:
            ValueError: If confirmations are required but no confirm callback was given.
        """
        if not config.confirm_all and self.confirm is None:
            raise ValueError(
                "A confirm callback is required unless confirm_all is enabled."
            )

        logger.info("Analyzing and cleaning up unused cluster profiles...")
        results = CleanupResults(mode=RunMode.CLEANUP)
        backup_writer = self._backup_writer(config)

        for inspected in self._inspect_all(profiles, config, results):
            if inspected.in_use:
                logger.info(
                    "Profile: %s (v%s) - IN USE - Skipping",
                    inspected.name,
                    inspected.version,
                )
                results.add(
                    inspected.record(ProfileStatus.IN_USE, ProfileAction.SKIPPED)
                )
                continue

            results.add(self._cleanup_unused(inspected, config, results, backup_writer))

        return results

    def _backup_writer(self, config: RunConfig) -> Optional[ProfileBackupWriter]:
        if not config.backup_enabled:
            return None
        return self.backup_writer or ProfileBackupWriter(
            self.datasource, config.output_dir, config.timestamp
        )

    def _inspect_all(
        self,
        profiles: Iterable[ClusterProfile],
        config: RunConfig,
        results: CleanupResults,
    ) -> Iterable[InspectedProfile]:
        seen: Set[Tuple[str, str, str]] = set()
        for profile in profiles:
            if profile.key in seen:
                continue
            seen.add(profile.key)

            if not self.scope_strategy.should_process(profile, config.project_uid):
                results.skipped_out_of_scope += 1
                logger.debug(
                    "Skipping %s (scope: %s, not in target project)",
                    profile.name,
                    profile.scope,
                )
                continue

            inspected = self._inspect(profile, config)
            if inspected is None:
                results.errors += 1
                continue

            results.total_checked += 1
            yield inspected

    def _inspect(
        self, profile: ClusterProfile, config: RunConfig
    ) -> Optional[InspectedProfile]:
        """Fetch the profile's detail and evaluate its usage, None if the fetch failed."""
        logger.info("Checking: %s (UID: %s)", profile.name, profile.uid)
        project_uid = self.scope_strategy.acting_project_uid(
            profile, config.project_uid
        )
        try:
            detail = self.datasource.get_cluster_profile(profile.uid, project_uid)
        except PaletteApiError as e:
            logger.warning("Failed to fetch details for profile: %s", profile.uid)
            logger.warning("  └─ Skipping due to API error: %s", e)
            return None

        scope = dig(detail, "metadata", "annotations", "scope") or profile.scope
        version = (
            dig(detail, "metadata", "version")
            or dig(detail, "spec", "version")
            or profile.version
        )
        return InspectedProfile(
            profile=profile,
            detail=detail,
            version=str(version),
            scope=scope,
            project_display=self._project_display(profile, scope, config),
            project_uid=project_uid,
            in_use=self.usage_strategy.is_in_use(detail),
        )

    def _project_display(
        self, profile: ClusterProfile, scope: str, config: RunConfig
    ) -> str:
        if scope != SCOPE_PROJECT:
            return "-"
        return config.project_name or profile.project_name or "unknown"

    def _cleanup_unused(
        self,
        inspected: InspectedProfile,
        config: RunConfig,
        results: CleanupResults,
        backup_writer: Optional[ProfileBackupWriter],
    ) -> OutcomeRecord:
        logger.warning(
            "Profile: %s (v%s, Scope: %s, Project: %s) - UNUSED",
            inspected.name,
            inspected.version,
            inspected.scope,
            inspected.project_display,
        )

        if not config.confirm_all:
            answer = self.confirm(inspected)
            if (answer or "").strip() != CONFIRM_ANSWER:
                logger.info("  Skipped by user")
                return inspected.record(
                    ProfileStatus.IN_USE, ProfileAction.SKIPPED, declined=True
                )

        logger.warning("  Deleting profile...")
        if backup_writer is not None:
            try:
                backup_writer.backup(
                    inspected.uid,
                    inspected.name,
                    inspected.version,
                    inspected.detail,
                    inspected.project_uid,
                )
            except OSError as e:
                logger.error("  Failed to write backup: %s", e)
                results.errors += 1

        try:
            self.datasource.delete_cluster_profile(inspected.uid, inspected.project_uid)
        except PaletteApiError as e:
            logger.error("  Failed to delete profile: %s", e)
            results.errors += 1
            return inspected.record(ProfileStatus.FAILED, ProfileAction.DELETE_FAILED)

        logger.info("  Deleted successfully")
        results.deleted.append(
            DeletedProfile(
                profile_uid=inspected.uid,
                profile_name=inspected.name,
                version=inspected.version,
                profile_info=inspected.detail,
            )
        )
        return inspected.record(ProfileStatus.DELETED, ProfileAction.DELETED)
