"""Exceptions raised by the cluster profile cleaner components."""
from typing import List
from typing import Optional

# Response bodies are cut to this size in error messages
MAX_BODY_CHARS = 500


class CleanerError(Exception):
    """Base class for all cleaner errors."""

    pass


class MissingCredentialError(CleanerError):
    """Exception for when no Palette API key could be found."""

    pass


class ProjectNotFoundError(CleanerError):
    """Exception for when a project name can't be resolved to a project uid."""

    def __init__(self, name: str, known_projects: Optional[List[str]] = None):
        self.name = name
        self.known_projects = known_projects or []
        super().__init__(f"Project not found: {name}")


class ProfileNotFoundError(CleanerError):
    """Exception for when a targeted cluster profile name has no match."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Profile '{name}' not found")


class AggregationError(CleanerError):
    """Exception for when the baseline cluster profile list can't be fetched."""

    pass


class PaletteApiError(CleanerError):
    """A single Palette API call failed.

    Carries the call context so that callers can report it and decide whether
    the failure is fatal for the run or only for the current item.
    """

    def __init__(
        self,
        method: str,
        endpoint: str,
        status_code: Optional[int] = None,
        body: str = "",
        reason: Optional[str] = None,
    ):
        self.method = method
        self.endpoint = endpoint
        self.status_code = status_code
        self.body = (body or "")[:MAX_BODY_CHARS]
        self.reason = reason
        super().__init__(self._format())

    def _format(self) -> str:
        if self.reason:
            message = f"{self.reason}: {self.method} {self.endpoint}"
        else:
            message = (
                f"API request failed with HTTP {self.status_code}: "
                f"{self.method} {self.endpoint}"
            )
        if self.status_code is not None and self.reason:
            message += f" (HTTP {self.status_code})"
        if self.body:
            message += f" - Response: {self.body}"
        return message


class ApiResponseError(PaletteApiError):
    """The API answered with an empty or non-JSON body where JSON was expected."""

    pass
