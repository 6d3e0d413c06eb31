"""Validation errors raised while building the card configuration."""

from __future__ import annotations

from enum import Enum


class ConfigErrorKind(Enum):
    """Kinds of configuration validation failures."""

    MUTUALLY_EXCLUSIVE = "mutually_exclusive_fields"
    MISSING_REQUIRED = "missing_required_field"
    OUT_OF_RANGE = "out_of_range_value"
    INVALID_ENUM = "invalid_enum_value"
    NOT_A_NUMBER = "not_a_number"
    INVALID_TYPE = "invalid_type"


class ConfigValidationError(Exception):
    """Raised when the raw card configuration cannot be validated."""

    kind: ConfigErrorKind = ConfigErrorKind.INVALID_TYPE

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict[str, str | None]:
        return {
            "kind": self.kind.value,
            "field": self.field,
            "message": self.message,
        }


class MutuallyExclusiveFieldsError(ConfigValidationError):
    """Two options that cannot be combined are both set."""

    kind = ConfigErrorKind.MUTUALLY_EXCLUSIVE


class MissingRequiredFieldError(ConfigValidationError):
    """A field required by the other settings is absent."""

    kind = ConfigErrorKind.MISSING_REQUIRED


class OutOfRangeValueError(ConfigValidationError):
    """A value is present but outside its valid domain."""

    kind = ConfigErrorKind.OUT_OF_RANGE


class InvalidEnumValueError(ConfigValidationError):
    """A string value is not one of its legal options."""

    kind = ConfigErrorKind.INVALID_ENUM

    def __init__(self, message: str, field: str | None = None, options: tuple[str, ...] = ()) -> None:
        self.options = options
        super().__init__(message, field)


class NotANumberError(ConfigValidationError):
    """A value expected to be numeric cannot be read as a number."""

    kind = ConfigErrorKind.NOT_A_NUMBER
