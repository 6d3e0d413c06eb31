from __future__ import annotations

import math
from typing import Any, Mapping

from .errors import (
    ConfigValidationError,
    InvalidEnumValueError,
    MissingRequiredFieldError,
    NotANumberError,
    OutOfRangeValueError,
)

Number = int | float

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def is_present(value: Any) -> bool:
    """Return True unless the value is missing (``None``) or an empty string."""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


# ----------------------------------------------------------------------
# Total primitives: never raise, fall back to the default instead
# ----------------------------------------------------------------------
def boolean_or_default(value: Any, default: bool | None) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False
    return default


def optional_boolean(value: Any) -> bool | None:
    return boolean_or_default(value, None)


def boolean_default_false(value: Any) -> bool:
    return boolean_or_default(value, False)


def boolean_default_true(value: Any) -> bool:
    return boolean_or_default(value, True)


def number_or_default(value: Any, default: Number | None) -> Number | None:
    try:
        return _to_number(value)
    except ValueError:
        return default


def check_string(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


# ----------------------------------------------------------------------
# Raising coercers used by the section builders
# ----------------------------------------------------------------------
def _to_number(value: Any) -> Number:
    if isinstance(value, bool) or value is None:
        raise ValueError(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value):
            raise ValueError(value)
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            number = float(text)
        if math.isnan(number) or math.isinf(number):
            raise ValueError(value)
        return number
    raise ValueError(value)


def coerce_number(value: Any, field_name: str, message: str | None = None) -> Number:
    try:
        return _to_number(value)
    except ValueError as exc:
        raise NotANumberError(message or f"{field_name} must be a number, received {value!r}", field_name) from exc


def optional_number(value: Any, field_name: str, message: str | None = None) -> Number | None:
    if not is_present(value):
        return None
    return coerce_number(value, field_name, message)


def in_range(
    number: Number,
    field_name: str,
    *,
    min_value: Number | None = None,
    max_value: Number | None = None,
    message: str | None = None,
) -> Number:
    if (min_value is not None and number < min_value) or (max_value is not None and number > max_value):
        if message is None:
            if max_value is None:
                message = f"{field_name} must be >= {min_value}"
            elif min_value is None:
                message = f"{field_name} must be <= {max_value}"
            else:
                message = f"{field_name} must be between {min_value} and {max_value}"
        raise OutOfRangeValueError(message, field_name)
    return number


def require_string(value: Any, field_name: str, message: str | None = None) -> str:
    text = check_string(value)
    if text is None:
        raise MissingRequiredFieldError(message or f"{field_name} is required", field_name)
    return text


def choice(value: Any, field_name: str, options: tuple[str, ...], default: str) -> str:
    if not is_present(value):
        return default
    if not isinstance(value, str) or value not in options:
        raise InvalidEnumValueError(
            f"Invalid {field_name} {value}. Valid options: {', '.join(options)}",
            field_name,
            options,
        )
    return value


def get_section(data: Mapping[str, Any], key: str, namespace: str | None = None) -> Mapping[str, Any]:
    section = data.get(key)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        path = f"{namespace}.{key}" if namespace else key
        raise ConfigValidationError(f"{path} section must be a mapping", path)
    return section
