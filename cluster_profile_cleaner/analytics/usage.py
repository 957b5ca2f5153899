from typing import Any
from typing import Dict

from cluster_profile_cleaner.models.profile import UsageSignal

from .base import BaseUsageStrategy


class StatusUsageStrategy(BaseUsageStrategy):
    """
    A usage strategy based on the consumer lists of the profile's detailed status.

    A profile is in use as soon as one of inUseClusters, inUseClusterUids or
    inUseClusterTemplates is non-empty. Missing, null or malformed fields count as
    empty, so an unreadable status reports the profile as unused.
    """

    def is_in_use(self, profile_detail: Dict[str, Any]) -> bool:
        return not UsageSignal.from_detail(profile_detail).is_empty()


def check_usage(profile_detail: Dict[str, Any]) -> bool:
    """True when at least one consumer references the profile."""
    return StatusUsageStrategy().is_in_use(profile_detail)
