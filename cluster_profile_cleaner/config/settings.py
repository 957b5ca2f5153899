"""Run configuration for the cluster profile cleaner.

This module holds the defaults shared by the CLI and the programmatic API:
- Palette endpoint and output directory defaults
- Environment variables the tool reads (API key, endpoint override)
- The RunConfig dataclass describing a single analyze/cleanup run
"""
import os
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from typing import Optional

from cluster_profile_cleaner.exceptions import MissingCredentialError

DEFAULT_API_URL = "https://api.spectrocloud.com"
DEFAULT_OUTPUT_DIR = "./output"
DEFAULT_TIMEOUT = 30
API_KEY_ENV = "SPECTROCLOUD_APIKEY"
API_URL_ENV = "PALETTE_API_URL"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def run_timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def default_api_url() -> str:
    """Endpoint used when none is given, overridable through PALETTE_API_URL."""
    return os.environ.get(API_URL_ENV) or DEFAULT_API_URL


def load_api_key() -> str:
    """Read the Palette API key from the environment.

    Raises:
        MissingCredentialError: If SPECTROCLOUD_APIKEY is unset or empty.
    """
    api_key = os.environ.get(API_KEY_ENV, "").strip()
    if not api_key:
        raise MissingCredentialError(
            f"{API_KEY_ENV} environment variable is not set. "
            f"Please export your Palette API key: export {API_KEY_ENV}='your-api-key'"
        )
    return api_key


@dataclass
class RunConfig:
    """Options for one analyze or cleanup run."""

    api_url: str = field(default_factory=default_api_url)
    api_key: Optional[str] = None
    project_name: Optional[str] = None
    # Filled in once project_name has been resolved
    project_uid: Optional[str] = None
    profile_name: Optional[str] = None
    backup_enabled: bool = False
    confirm_all: bool = False
    export_csv: bool = False
    output_dir: str = DEFAULT_OUTPUT_DIR
    timestamp: str = field(default_factory=run_timestamp)
    timeout: int = DEFAULT_TIMEOUT
    verify_ssl: bool = True

    @property
    def has_project_filter(self) -> bool:
        return bool(self.project_uid)
