from abc import ABC
from abc import abstractmethod
from typing import Any
from typing import Dict
from typing import List
from typing import Optional


class IDataSource(ABC):
    """
    Interface for data sources that expose Palette projects and cluster profiles.

    Every project-scoped call takes the uid of the project to act in; None means
    the call is made at tenant scope.
    """

    @abstractmethod
    def list_projects(self) -> List[Dict[str, Any]]:
        """List all projects of the tenant."""
        pass

    @abstractmethod
    def list_cluster_profiles(
        self, project_uid: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """List cluster profiles visible at tenant scope or in a project."""
        pass

    @abstractmethod
    def get_cluster_profile(
        self, profile_uid: str, project_uid: Optional[str] = None
    ) -> Dict[str, Any]:
        """Get the detailed cluster profile, including its usage status."""
        pass

    @abstractmethod
    def delete_cluster_profile(
        self, profile_uid: str, project_uid: Optional[str] = None
    ) -> Dict[str, Any]:
        """Delete a cluster profile."""
        pass

    @abstractmethod
    def export_cluster_profile(
        self, profile_uid: str, project_uid: Optional[str] = None
    ) -> bytes:
        """Export a cluster profile as a raw backup payload."""
        pass
