"""Version information for windrose-card-config and its runtime libraries."""

import importlib.metadata
from typing import Dict


def get_windrose_card_config_version() -> str:
    """Return the windrose-card-config version."""
    try:
        return importlib.metadata.version("windrose-card-config")
    except importlib.metadata.PackageNotFoundError:
        # Source checkout without an installed distribution
        return "0.1.0-dev"


def _distribution_version(name: str) -> str:
    try:
        return importlib.metadata.version(name)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_version_info() -> Dict[str, str]:
    """Get version information for the package and the libraries it loads configs with."""
    return {
        "windrose_card_config": get_windrose_card_config_version(),
        "pyyaml": _distribution_version("PyYAML"),
        "structlog": _distribution_version("structlog"),
    }
