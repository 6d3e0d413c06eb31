from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .checks import Number, in_range, is_present, optional_number
from .defaults import DEFAULTS, ConfigDefaults
from .errors import MissingRequiredFieldError, MutuallyExclusiveFieldsError, OutOfRangeValueError


@dataclass(frozen=True)
class DataPeriod:
    """Time window of historical samples aggregated into the rose.

    Exactly one of ``hours_to_show`` and ``from_hour_of_day`` is set.
    ``time_interval`` is the sample bucket size in minutes.
    """

    hours_to_show: Number | None
    from_hour_of_day: Number | None
    time_interval: Number

    @classmethod
    def from_config(
        cls,
        old_hours_to_show: Any,
        data_period: Mapping[str, Any],
        defaults: ConfigDefaults = DEFAULTS,
        logger: Any = None,
    ) -> "DataPeriod":
        time_interval = _check_time_interval(data_period.get("time_interval"), defaults.time_interval)

        # The deprecated top-level field wins over the nested window fields.
        if is_present(old_hours_to_show):
            hours = _check_hours_to_show(old_hours_to_show, "hours_to_show")
            if logger is not None:
                logger.warning(
                    "hours_to_show config is deprecated, use the data_period object.",
                    field="hours_to_show",
                )
            return cls(hours_to_show=hours, from_hour_of_day=None, time_interval=time_interval)

        hours = _check_hours_to_show(data_period.get("hours_to_show"), "data_period.hours_to_show")
        from_hour = _check_from_hour_of_day(data_period.get("from_hour_of_day"))

        if hours is not None and from_hour is not None:
            raise MutuallyExclusiveFieldsError(
                "Only one is allowed: data_period.hours_to_show or data_period.from_hour_of_day",
                "data_period",
            )
        if hours is None and from_hour is None:
            raise MissingRequiredFieldError(
                "One config option of object data_period should be filled: hours_to_show or from_hour_of_day",
                "data_period",
            )
        return cls(hours_to_show=hours, from_hour_of_day=from_hour, time_interval=time_interval)


def _check_hours_to_show(value: Any, field_name: str) -> Number | None:
    message = f"Invalid {field_name}, should be a number above 0."
    hours = optional_number(value, field_name, message)
    if hours is not None and hours <= 0:
        raise OutOfRangeValueError(message, field_name)
    return hours


def _check_from_hour_of_day(value: Any) -> Number | None:
    field_name = "data_period.from_hour_of_day"
    message = f"Invalid {field_name}, should be a number between 0 and 23, hour of the day."
    hour = optional_number(value, field_name, message)
    if hour is None:
        return None
    return in_range(hour, field_name, min_value=0, max_value=23, message=message)


def _check_time_interval(value: Any, default: Number) -> Number:
    field_name = "data_period.time_interval"
    interval = optional_number(value, field_name)
    if interval is None or interval == 0:
        return default
    if interval < 0:
        raise OutOfRangeValueError(f"{field_name} must be a positive number of minutes", field_name)
    return interval
