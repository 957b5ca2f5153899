from abc import ABC
from abc import abstractmethod
from typing import Optional

from cluster_profile_cleaner.models.outcome import CleanupResults


class IDataSink(ABC):
    """
    Interface for data sinks that store the results of a run.
    """

    @abstractmethod
    def save(self, data: CleanupResults) -> Optional[str]:
        """Save the given results, returning the written path if anything was written."""
        pass
