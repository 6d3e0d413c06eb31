from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .checks import (
    Number,
    boolean_default_false,
    boolean_or_default,
    check_string,
    choice,
    get_section,
    in_range,
    optional_number,
)
from .data_period import DataPeriod
from .defaults import (
    DEFAULTS,
    MATCHING_STRATEGIES,
    MAX_WIND_DIRECTION_COUNT,
    MIN_WIND_DIRECTION_COUNT,
    WINDSPEED_BAR_LOCATIONS,
    ConfigDefaults,
)
from .entities import WindDirectionEntity, WindSpeedEntity, build_windspeed_entities
from .errors import ConfigValidationError, OutOfRangeValueError
from .log_bridge import check_log_level, get_logger
from .sections import CardColors, CompassConfig, CornersInfo, CurrentDirectionConfig, DirectionLabels

DEFAULT_CONFIG_FILE = "windrose.yaml"
QUERY_SEPARATOR = ","


@dataclass(frozen=True)
class CardConfigWrapper:
    """Validated, immutable wind rose card configuration.

    Build it with :meth:`from_config`; construction either succeeds with every
    field resolved or raises a :class:`ConfigValidationError`.
    """

    title: str | None
    data_period: DataPeriod
    refresh_interval: Number
    wind_direction_entity: WindDirectionEntity
    windspeed_entities: tuple[WindSpeedEntity, ...]
    windrose_draw_north_offset: Number
    current_direction: CurrentDirectionConfig
    windspeed_bar_location: str
    hide_windspeed_bar: bool
    center_calm_percentage: bool
    direction_labels: DirectionLabels
    wind_direction_count: Number
    matching_strategy: str
    filter_entities_query_parameter: str
    card_colors: CardColors
    compass_config: CompassConfig
    corners_info: CornersInfo
    background_image: str | None
    log_level: str
    actions: Mapping[str, Any] | None = field(default=None, hash=False)

    @classmethod
    def from_config(
        cls,
        raw: Mapping[str, Any],
        defaults: ConfigDefaults = DEFAULTS,
        logger: Any = None,
    ) -> "CardConfigWrapper":
        if not isinstance(raw, Mapping):
            raise ConfigValidationError("Card configuration root must be a mapping")
        log = logger if logger is not None else get_logger()

        title = check_string(raw.get("title"))
        data_period = DataPeriod.from_config(raw.get("hours_to_show"), get_section(raw, "data_period"), defaults, log)
        refresh_interval = _check_refresh_interval(raw.get("refresh_interval"), defaults)
        wind_direction_entity = WindDirectionEntity.from_config(raw.get("wind_direction_entity"), defaults, log)
        windspeed_entities = build_windspeed_entities(raw, defaults)
        north_offset = _check_north_offset(raw.get("windrose_draw_north_offset"), defaults)
        current_direction = CurrentDirectionConfig.from_config(
            None if raw.get("current_direction") is None else get_section(raw, "current_direction"),
            defaults,
        )
        bar_location = choice(
            raw.get("windspeed_bar_location"),
            "windspeed_bar_location",
            WINDSPEED_BAR_LOCATIONS,
            defaults.windspeed_bar_location,
        )
        hide_windspeed_bar = boolean_default_false(raw.get("hide_windspeed_bar"))
        center_calm_percentage = boolean_or_default(raw.get("center_calm_percentage"), defaults.center_calm_percentage)
        direction_labels = DirectionLabels.from_config(
            get_section(raw, "direction_labels"),
            raw.get("cardinal_direction_letters"),
            defaults,
            log,
        )
        wind_direction_count = _check_wind_direction_count(raw.get("wind_direction_count"), defaults)
        matching_strategy = choice(
            raw.get("matching_strategy"),
            "matching_strategy",
            MATCHING_STRATEGIES,
            defaults.matching_strategy,
        )
        query_parameter = _create_entities_query_parameter(wind_direction_entity, windspeed_entities)
        card_colors = CardColors.from_config(get_section(raw, "colors"), defaults)
        compass_config = CompassConfig.from_config(get_section(raw, "compass_direction"))
        corners_info = CornersInfo.from_config(get_section(raw, "corner_info"))
        background_image = check_string(raw.get("background_image"))
        log_level = check_log_level(raw.get("log_level"), defaults.log_level)
        actions = raw.get("actions")
        if actions is not None:
            actions = MappingProxyType(copy.deepcopy(dict(get_section(raw, "actions"))))

        config = cls(
            title=title,
            data_period=data_period,
            refresh_interval=refresh_interval,
            wind_direction_entity=wind_direction_entity,
            windspeed_entities=windspeed_entities,
            windrose_draw_north_offset=north_offset,
            current_direction=current_direction,
            windspeed_bar_location=bar_location,
            hide_windspeed_bar=hide_windspeed_bar,
            center_calm_percentage=center_calm_percentage,
            direction_labels=direction_labels,
            wind_direction_count=wind_direction_count,
            matching_strategy=matching_strategy,
            filter_entities_query_parameter=query_parameter,
            card_colors=card_colors,
            compass_config=compass_config,
            corners_info=corners_info,
            background_image=background_image,
            log_level=log_level,
            actions=actions,
        )
        log.info("Config check OK", entities=len(config.all_entities()))
        return config

    @staticmethod
    def example_config(defaults: ConfigDefaults = DEFAULTS) -> dict[str, Any]:
        """Canonical raw configuration for the dashboard's card editor."""
        return {
            "title": "Wind direction",
            "data_period": {
                "hours_to_show": defaults.hours_to_show,
            },
            "refresh_interval": defaults.refresh_interval,
            "windspeed_bar_location": defaults.windspeed_bar_location,
            "wind_direction_entity": {
                "entity": "",
                "use_statistics": False,
                "direction_compensation": defaults.direction_compensation,
            },
            "windspeed_entities": [
                {
                    "entity": "",
                    "name": "",
                    "speed_unit": defaults.input_speed_unit,
                    "use_statistics": False,
                    "windspeed_bar_full": defaults.windspeed_bar_full,
                    "output_speed_unit": defaults.output_speed_unit,
                    "speed_range_beaufort": defaults.speed_range_beaufort,
                    "speed_range_step": None,
                    "speed_range_max": None,
                    "speed_ranges": None,
                }
            ],
            "direction_labels": {
                "cardinal_direction_letters": defaults.cardinal_direction_letters,
            },
            "windrose_draw_north_offset": defaults.windrose_draw_north_offset,
            "current_direction": {
                "show_arrow": False,
                "arrow_size": defaults.current_direction_arrow_size,
                "center_circle_size": defaults.current_direction_circle_size,
            },
            "compass_direction": {
                "auto_rotate": False,
                "entity": "",
            },
            "matching_strategy": defaults.matching_strategy,
            "center_calm_percentage": defaults.center_calm_percentage,
            "background_image": None,
            "log_level": defaults.log_level,
        }

    def wind_bar_count(self) -> int:
        if self.hide_windspeed_bar:
            return 0
        return len(self.windspeed_entities)

    def all_entities(self) -> list[str]:
        entities = [self.wind_direction_entity.entity]
        entities.extend(speed.entity for speed in self.windspeed_entities)
        return [entity for entity in entities if entity is not None]

    def create_raw_entities_array(self) -> list[str]:
        return self._entities_by_source(use_statistics=False)

    def create_statistics_entities_array(self) -> list[str]:
        return self._entities_by_source(use_statistics=True)

    def attributes_configured(self) -> bool:
        if self.wind_direction_entity.attribute:
            return True
        return any(speed.attribute for speed in self.windspeed_entities)

    def _entities_by_source(self, *, use_statistics: bool) -> list[str]:
        entities: list[str] = []
        direction = self.wind_direction_entity
        if direction.use_statistics == use_statistics and direction.entity is not None:
            entities.append(direction.entity)
        entities.extend(
            speed.entity
            for speed in self.windspeed_entities
            if speed.use_statistics == use_statistics and speed.entity is not None
        )
        return entities


@dataclass(frozen=True)
class ConfigCheckResult:
    """Outcome of :func:`check_config`: a validated config or the error that stopped it."""

    config: CardConfigWrapper | None = None
    error: ConfigValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def check_config(
    raw: Mapping[str, Any],
    defaults: ConfigDefaults = DEFAULTS,
    logger: Any = None,
) -> ConfigCheckResult:
    try:
        return ConfigCheckResult(config=CardConfigWrapper.from_config(raw, defaults, logger))
    except ConfigValidationError as exc:
        return ConfigCheckResult(error=exc)


def load_raw_config(path: Path | str | None = None) -> dict[str, Any]:
    """Read the raw card configuration from YAML and apply environment overrides."""
    config_path = resolve_config_path(path)
    load_dotenv(dotenv_path=config_path.parent / ".env")

    return _apply_env_overrides(read_yaml_mapping(config_path), os.environ)


def read_yaml_mapping(config_path: Path) -> Mapping[str, Any]:
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigValidationError(f"Failed to read configuration file {config_path}: {exc}") from exc
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Failed to parse configuration file: {exc}") from exc

    if not isinstance(raw, Mapping):
        raise ConfigValidationError("Configuration root must be a mapping")
    return raw


def load_config(
    path: Path | str | None = None,
    defaults: ConfigDefaults = DEFAULTS,
    logger: Any = None,
) -> CardConfigWrapper:
    """Load the card configuration from YAML, apply environment overrides, and validate."""
    return CardConfigWrapper.from_config(load_raw_config(path), defaults, logger)


def resolve_config_path(path: Path | str | None) -> Path:
    if path is not None:
        candidate = Path(path)
    else:
        env_path = os.environ.get("WINDROSE_CONFIG")
        candidate = Path(env_path) if env_path else Path.cwd() / DEFAULT_CONFIG_FILE

    if not candidate.exists():
        raise FileNotFoundError(candidate)
    if not candidate.is_file():
        raise ConfigValidationError(f"Configuration path {candidate} is not a file")
    return candidate


def _apply_env_overrides(raw: Mapping[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    overridden = dict(raw)
    if "WINDROSE_LOG_LEVEL" in env:
        value = env["WINDROSE_LOG_LEVEL"].strip()
        if not value:
            raise ConfigValidationError("WINDROSE_LOG_LEVEL cannot be empty", "log_level")
        overridden["log_level"] = value
    if "WINDROSE_REFRESH_INTERVAL" in env:
        value = env["WINDROSE_REFRESH_INTERVAL"].strip()
        if value:
            overridden["refresh_interval"] = value
    return overridden


def _check_refresh_interval(value: Any, defaults: ConfigDefaults) -> Number:
    interval = optional_number(value, "refresh_interval", "Invalid refresh_interval, should be a number in seconds.")
    if interval is None:
        return defaults.refresh_interval
    if interval <= 0:
        raise OutOfRangeValueError("refresh_interval must be above 0 seconds.", "refresh_interval")
    return interval


def _check_north_offset(value: Any, defaults: ConfigDefaults) -> Number:
    offset = optional_number(
        value,
        "windrose_draw_north_offset",
        "Invalid windrose_draw_north_offset, should be a number in degrees between 0 and 360.",
    )
    return defaults.windrose_draw_north_offset if offset is None else offset


def _check_wind_direction_count(value: Any, defaults: ConfigDefaults) -> Number:
    message = f"wind_direction_count should be a number between {MIN_WIND_DIRECTION_COUNT} and {MAX_WIND_DIRECTION_COUNT}"
    count = optional_number(value, "wind_direction_count", message)
    if count is None:
        return defaults.wind_direction_count
    return in_range(
        count,
        "wind_direction_count",
        min_value=MIN_WIND_DIRECTION_COUNT,
        max_value=MAX_WIND_DIRECTION_COUNT,
        message=message,
    )


def _create_entities_query_parameter(
    direction: WindDirectionEntity,
    speeds: tuple[WindSpeedEntity, ...],
) -> str:
    entities = [direction.entity] + [speed.entity for speed in speeds]
    return QUERY_SEPARATOR.join(entity for entity in entities if entity is not None)
