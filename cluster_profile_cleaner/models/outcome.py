from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Dict
from typing import List


class RunMode(str, Enum):
    ANALYZE = "analyze"
    CLEANUP = "cleanup"


class ProfileStatus(str, Enum):
    UNUSED = "UNUSED"
    IN_USE = "IN USE"
    DELETED = "DELETED"
    FAILED = "FAILED"


class ProfileAction(str, Enum):
    NONE = ""
    DELETED = "Deleted"
    SKIPPED = "Skipped"
    DELETE_FAILED = "Delete Failed"


@dataclass(frozen=True)
class OutcomeRecord:
    """
    One row of the outcome stream: the final state of a processed profile.
    """

    uid: str
    name: str
    version: str
    scope: str
    project: str
    status: ProfileStatus
    action: ProfileAction = ProfileAction.NONE
    # The operator answered anything but "yes"; status still reads IN USE
    declined: bool = False

    @property
    def uid_or_action(self) -> str:
        """Last report column: the action in cleanup runs, the uid otherwise."""
        return self.action.value if self.action != ProfileAction.NONE else self.uid

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["status"] = self.status.value
        data["action"] = self.action.value
        return data


@dataclass(frozen=True)
class DeletedProfile:
    """Manifest entry for a successfully deleted profile."""

    profile_uid: str
    profile_name: str
    version: str
    profile_info: Dict[str, Any] = field(repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase manifest layout."""
        return {
            "profileUid": self.profile_uid,
            "profileName": self.profile_name,
            "version": self.version,
            "profileInfo": self.profile_info,
        }


@dataclass
class CleanupResults:
    """Accumulator for a single analyze or cleanup run."""

    mode: RunMode
    records: List[OutcomeRecord] = field(default_factory=list)
    deleted: List[DeletedProfile] = field(default_factory=list)
    total_checked: int = 0
    skipped_out_of_scope: int = 0
    errors: int = 0

    @property
    def unused_count(self) -> int:
        return sum(1 for r in self.records if r.status == ProfileStatus.UNUSED)

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.records if r.status == ProfileStatus.FAILED)

    def add(self, record: OutcomeRecord) -> None:
        self.records.append(record)

    def records_with_status(self, status: ProfileStatus) -> List[OutcomeRecord]:
        return [r for r in self.records if r.status == status]
