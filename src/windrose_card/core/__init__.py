"""Core package exports."""

from .config_loader import CardConfigWrapper, ConfigCheckResult, check_config, load_config
from .defaults import DEFAULTS, ConfigDefaults
from .errors import (
    ConfigErrorKind,
    ConfigValidationError,
    InvalidEnumValueError,
    MissingRequiredFieldError,
    MutuallyExclusiveFieldsError,
    NotANumberError,
    OutOfRangeValueError,
)

__all__ = [
    "CardConfigWrapper",
    "ConfigCheckResult",
    "ConfigDefaults",
    "ConfigErrorKind",
    "ConfigValidationError",
    "DEFAULTS",
    "InvalidEnumValueError",
    "MissingRequiredFieldError",
    "MutuallyExclusiveFieldsError",
    "NotANumberError",
    "OutOfRangeValueError",
    "check_config",
    "load_config",
]
