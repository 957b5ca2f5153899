from typing import Optional

from cluster_profile_cleaner.models.profile import ClusterProfile
from cluster_profile_cleaner.models.profile import SCOPE_PROJECT
from cluster_profile_cleaner.models.profile import SCOPE_SYSTEM
from cluster_profile_cleaner.models.profile import SCOPE_TENANT
from cluster_profile_cleaner.utils.conversions import first_non_empty

from .base import BaseScopeStrategy


class ProjectScopeStrategy(BaseScopeStrategy):
    """
    Scope rules for Palette cluster profiles: system profiles are never touched,
    and a project filter narrows the run to that project's own profiles.
    """

    def should_process(
        self, profile: ClusterProfile, project_uid: Optional[str]
    ) -> bool:
        scope = profile.scope or SCOPE_PROJECT
        if scope == SCOPE_SYSTEM:
            return False
        if not project_uid:
            return True
        # Shared profiles are out of scope once a project is targeted
        return scope != SCOPE_TENANT

    def acting_project_uid(
        self, profile: ClusterProfile, project_uid: Optional[str]
    ) -> Optional[str]:
        """
        Filter project first, then the profile's own record of its project, then the
        project whose listing returned it. Non-project profiles get no context.
        """
        if (profile.scope or SCOPE_PROJECT) != SCOPE_PROJECT:
            return None
        return first_non_empty(
            [project_uid, profile.project_uid, profile.source_project_uid]
        )


_default_strategy = ProjectScopeStrategy()


def should_process(profile: ClusterProfile, project_uid: Optional[str]) -> bool:
    """Whether profile is in scope for a run with the given project filter."""
    return _default_strategy.should_process(profile, project_uid)
