"""
docval Version Management - Centralized version for all components

This module provides a single source of truth for the docval version.
All components should import from here to ensure consistency.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

# =============================================================================
# docval Version - Single Source of Truth
# =============================================================================

__version__ = "0.3.0"

# Semantic versioning components
VERSION_MAJOR = 0
VERSION_MINOR = 3
VERSION_PATCH = 0
VERSION_SUFFIX = ""  # e.g., "alpha", "beta", "rc1", ""

# Build metadata
BUILD_DATE = "2026-03-02"
BUILD_ORG = "Adservio"

# Full version string with optional suffix
VERSION_FULL = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"
if VERSION_SUFFIX:
    VERSION_FULL = f"{VERSION_FULL}-{VERSION_SUFFIX}"


def get_version() -> str:
    """Get the current docval version string."""
    return __version__


def get_version_info() -> dict:
    """Get detailed version information."""
    return {
        "version": __version__,
        "major": VERSION_MAJOR,
        "minor": VERSION_MINOR,
        "patch": VERSION_PATCH,
        "suffix": VERSION_SUFFIX,
        "full": VERSION_FULL,
        "build_date": BUILD_DATE,
        "organization": BUILD_ORG,
    }


def get_short_banner() -> str:
    """Get a compact version banner for CLI tools."""
    return f"docval v{__version__} | {BUILD_ORG} | {BUILD_DATE}"


# For module-level access
VERSION = __version__
