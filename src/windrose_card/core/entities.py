from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from .checks import (
    Number,
    boolean_default_false,
    boolean_or_default,
    check_string,
    coerce_number,
    is_present,
    optional_boolean,
    optional_number,
    require_string,
)
from .defaults import DEFAULTS, ConfigDefaults
from .errors import (
    ConfigValidationError,
    MissingRequiredFieldError,
    MutuallyExclusiveFieldsError,
    OutOfRangeValueError,
)

_RANGE_KEYS = ("speed_range_step", "speed_range_max", "speed_ranges")


@dataclass(frozen=True)
class WindDirectionEntity:
    entity: str | None
    attribute: str | None = None
    use_statistics: bool = False
    direction_compensation: Number = 0

    @classmethod
    def from_config(
        cls,
        config: Any,
        defaults: ConfigDefaults = DEFAULTS,
        logger: Any = None,
    ) -> "WindDirectionEntity":
        field_name = "wind_direction_entity"
        if isinstance(config, str) and config.strip():
            if logger is not None:
                logger.warning(
                    "wind_direction_entity as a plain entity id is deprecated, use an object with an entity key.",
                    field=field_name,
                )
            config = {"entity": config}
        if config is None or (isinstance(config, str) and not config.strip()):
            raise MissingRequiredFieldError(f"{field_name} is required", field_name)
        if not isinstance(config, Mapping):
            raise ConfigValidationError(f"{field_name} section must be a mapping", field_name)

        use_statistics = boolean_default_false(config.get("use_statistics"))
        entity = check_string(config.get("entity"))
        if entity is None and not use_statistics:
            raise MissingRequiredFieldError(f"{field_name}.entity is required", f"{field_name}.entity")
        compensation = optional_number(config.get("direction_compensation"), f"{field_name}.direction_compensation")
        return cls(
            entity=entity,
            attribute=check_string(config.get("attribute")),
            use_statistics=use_statistics,
            direction_compensation=defaults.direction_compensation if compensation is None else compensation,
        )


@dataclass(frozen=True)
class SpeedRange:
    from_value: Number
    color: str

    @classmethod
    def from_config(cls, config: Any, field_name: str) -> "SpeedRange":
        if not isinstance(config, Mapping):
            raise ConfigValidationError(f"{field_name} must be a mapping with from_value and color", field_name)
        if not is_present(config.get("from_value")):
            raise MissingRequiredFieldError(f"{field_name}.from_value is required", f"{field_name}.from_value")
        from_value = coerce_number(config.get("from_value"), f"{field_name}.from_value")
        color = require_string(config.get("color"), f"{field_name}.color")
        return cls(from_value=from_value, color=color)


@dataclass(frozen=True)
class WindSpeedParent:
    """Shared windspeed settings taken from the top level of the card config.

    Holds the raw values; each ``windspeed_entities`` entry falls back to
    these before falling back to the global defaults.
    """

    windspeed_bar_full: Any = None
    output_speed_unit: Any = None
    output_speed_unit_label: Any = None
    speed_range_beaufort: Any = None
    speed_range_step: Any = None
    speed_range_max: Any = None
    speed_ranges: Any = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "WindSpeedParent":
        return cls(
            windspeed_bar_full=config.get("windspeed_bar_full"),
            output_speed_unit=config.get("output_speed_unit"),
            output_speed_unit_label=config.get("output_speed_unit_label"),
            speed_range_beaufort=config.get("speed_range_beaufort"),
            speed_range_step=config.get("speed_range_step"),
            speed_range_max=config.get("speed_range_max"),
            speed_ranges=config.get("speed_ranges"),
        )


def resolve_setting(
    key: str,
    entity_config: Mapping[str, Any],
    parent: WindSpeedParent,
    default: Any,
    coerce: Callable[[Any], Any] | None = None,
) -> Any:
    """Resolve one windspeed setting: entity entry, then parent snapshot, then default.

    With ``coerce``, a tier only counts when its value survives coercion, so an
    unreadable entity value falls through to the parent instead of the default.
    """
    for value in (entity_config.get(key), getattr(parent, key)):
        if coerce is not None:
            value = coerce(value)
        if is_present(value):
            return value
    return default


@dataclass(frozen=True)
class WindSpeedEntity:
    entity: str | None
    name: str | None
    attribute: str | None
    use_statistics: bool
    render_relative_scale: bool
    speed_unit: str
    windspeed_bar_full: bool
    output_speed_unit: str
    output_speed_unit_label: str | None
    speed_range_beaufort: bool
    speed_range_step: Number | None = None
    speed_range_max: Number | None = None
    speed_ranges: tuple[SpeedRange, ...] = ()

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        parent: WindSpeedParent,
        defaults: ConfigDefaults = DEFAULTS,
        field_name: str = "windspeed_entities[0]",
    ) -> "WindSpeedEntity":
        if not isinstance(config, Mapping):
            raise ConfigValidationError(f"{field_name} must be a mapping", field_name)

        use_statistics = boolean_default_false(config.get("use_statistics"))
        entity = check_string(config.get("entity"))
        if entity is None and not use_statistics:
            raise MissingRequiredFieldError(f"{field_name}.entity is required", f"{field_name}.entity")

        bar_full = resolve_setting(
            "windspeed_bar_full", config, parent, defaults.windspeed_bar_full, optional_boolean
        )
        beaufort = resolve_setting(
            "speed_range_beaufort", config, parent, defaults.speed_range_beaufort, optional_boolean
        )
        output_unit = resolve_setting("output_speed_unit", config, parent, defaults.output_speed_unit, check_string)
        output_label = resolve_setting("output_speed_unit_label", config, parent, None, check_string)
        step, maximum, ranges = _check_speed_ranges(config, parent, field_name)

        return cls(
            entity=entity,
            name=check_string(config.get("name")),
            attribute=check_string(config.get("attribute")),
            use_statistics=use_statistics,
            render_relative_scale=boolean_or_default(config.get("render_relative_scale"), defaults.render_relative_scale),
            speed_unit=check_string(config.get("speed_unit")) or defaults.input_speed_unit,
            windspeed_bar_full=bar_full,
            output_speed_unit=output_unit,
            output_speed_unit_label=output_label,
            speed_range_beaufort=beaufort,
            speed_range_step=step,
            speed_range_max=maximum,
            speed_ranges=ranges,
        )


def build_windspeed_entities(
    config: Mapping[str, Any],
    defaults: ConfigDefaults = DEFAULTS,
) -> tuple[WindSpeedEntity, ...]:
    raw_entities = config.get("windspeed_entities")
    if not raw_entities:
        raise MissingRequiredFieldError(
            "No windspeed_entities configured, minimal 1 needed.",
            "windspeed_entities",
        )
    if isinstance(raw_entities, (str, bytes)) or not isinstance(raw_entities, Sequence):
        raise ConfigValidationError("windspeed_entities must be a list", "windspeed_entities")

    parent = WindSpeedParent.from_config(config)
    return tuple(
        WindSpeedEntity.from_config(entry, parent, defaults, f"windspeed_entities[{index}]")
        for index, entry in enumerate(raw_entities)
    )


def _check_speed_ranges(
    config: Mapping[str, Any],
    parent: WindSpeedParent,
    field_name: str,
) -> tuple[Number | None, Number | None, tuple[SpeedRange, ...]]:
    # The range settings travel together: an entry that sets any of them
    # replaces the whole group from the parent.
    if any(is_present(config.get(key)) for key in _RANGE_KEYS):
        source = {key: config.get(key) for key in _RANGE_KEYS}
        prefix = field_name
    else:
        source = {key: getattr(parent, key) for key in _RANGE_KEYS}
        prefix = None

    def path(key: str) -> str:
        return f"{prefix}.{key}" if prefix else key

    step = optional_number(source["speed_range_step"], path("speed_range_step"))
    maximum = optional_number(source["speed_range_max"], path("speed_range_max"))
    raw_ranges = source["speed_ranges"]

    if is_present(raw_ranges) and (step is not None or maximum is not None):
        raise MutuallyExclusiveFieldsError(
            f"Only one is allowed: {path('speed_ranges')} or {path('speed_range_step')}/{path('speed_range_max')}",
            path("speed_ranges"),
        )
    if (step is None) != (maximum is None):
        missing = "speed_range_max" if maximum is None else "speed_range_step"
        raise MissingRequiredFieldError(
            f"{path('speed_range_step')} and {path('speed_range_max')} should both be set",
            path(missing),
        )
    if step is not None and maximum is not None:
        if step <= 0:
            raise OutOfRangeValueError(f"{path('speed_range_step')} must be above 0", path("speed_range_step"))
        if maximum < step:
            raise OutOfRangeValueError(
                f"{path('speed_range_max')} must be greater than or equal to {path('speed_range_step')}",
                path("speed_range_max"),
            )

    ranges: tuple[SpeedRange, ...] = ()
    if is_present(raw_ranges):
        if isinstance(raw_ranges, (str, bytes, Mapping)) or not isinstance(raw_ranges, Sequence) or not raw_ranges:
            raise ConfigValidationError(f"{path('speed_ranges')} must be a non-empty list", path("speed_ranges"))
        ranges = tuple(
            sorted(
                (SpeedRange.from_config(item, f"{path('speed_ranges')}[{index}]") for index, item in enumerate(raw_ranges)),
                key=lambda speed_range: speed_range.from_value,
            )
        )
    return step, maximum, ranges
