"""Validation and normalization of wind rose dashboard card configurations."""

from windrose_card.core import (
    CardConfigWrapper,
    ConfigCheckResult,
    ConfigDefaults,
    ConfigValidationError,
    DEFAULTS,
    check_config,
    load_config,
)

__all__ = [
    "CardConfigWrapper",
    "ConfigCheckResult",
    "ConfigDefaults",
    "ConfigValidationError",
    "DEFAULTS",
    "check_config",
    "load_config",
]
