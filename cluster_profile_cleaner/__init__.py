"""Find and clean up unused Palette cluster profile versions."""

from cluster_profile_cleaner.api import analyze_profiles
from cluster_profile_cleaner.api import cleanup_profiles

__version__ = "0.1.0"

__all__ = ["analyze_profiles", "cleanup_profiles", "__version__"]
