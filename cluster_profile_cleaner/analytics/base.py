# cluster_profile_cleaner/analytics/base.py
from abc import ABC
from abc import abstractmethod
from typing import Any
from typing import Dict
from typing import Optional

from cluster_profile_cleaner.models.profile import ClusterProfile


class BaseScopeStrategy(ABC):
    """Abstract base class for deciding which profiles a run may act on."""

    @abstractmethod
    def should_process(
        self, profile: ClusterProfile, project_uid: Optional[str]
    ) -> bool:
        """Whether the profile is in scope, given the active project filter (if any)."""
        pass

    @abstractmethod
    def acting_project_uid(
        self, profile: ClusterProfile, project_uid: Optional[str]
    ) -> Optional[str]:
        """The project uid to send as scoping context for calls about the profile."""
        pass


class BaseUsageStrategy(ABC):
    """Abstract base class for all usage evaluation strategies."""

    @abstractmethod
    def is_in_use(self, profile_detail: Dict[str, Any]) -> bool:
        """Whether anything still references the profile described by profile_detail."""
        pass
