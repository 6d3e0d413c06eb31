from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .checks import (
    Number,
    boolean_default_false,
    check_string,
    get_section,
    number_or_default,
    require_string,
)
from .defaults import COMPASS_POINTS, CORNERS, DEFAULTS, ConfigDefaults
from .errors import InvalidEnumValueError, OutOfRangeValueError


@dataclass(frozen=True)
class CompassConfig:
    auto_rotate: bool = False
    entity: str | None = None
    attribute: str | None = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "CompassConfig":
        auto_rotate = boolean_default_false(config.get("auto_rotate"))
        if not auto_rotate:
            return cls()
        entity = require_string(
            config.get("entity"),
            "compass_direction.entity",
            "compass_direction.auto_rotate set to true, but no compass_direction.entity configured.",
        )
        return cls(auto_rotate=True, entity=entity, attribute=check_string(config.get("attribute")))


@dataclass(frozen=True)
class CurrentDirectionConfig:
    show_arrow: bool = False
    arrow_size: Number | None = None
    center_circle_size: Number | None = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None, defaults: ConfigDefaults = DEFAULTS) -> "CurrentDirectionConfig":
        if config is None:
            return cls()
        return cls(
            show_arrow=boolean_default_false(config.get("show_arrow")),
            arrow_size=number_or_default(config.get("arrow_size"), defaults.current_direction_arrow_size),
            center_circle_size=number_or_default(config.get("center_circle_size"), defaults.current_direction_circle_size),
        )


@dataclass(frozen=True)
class CornerInfo:
    label: str | None = None
    unit: str | None = None
    entity: str | None = None
    attribute: str | None = None
    precision: Number | None = None
    label_color: str | None = None
    value_color: str | None = None
    label_text_size: Number | None = None
    value_text_size: Number | None = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "CornerInfo":
        return cls(
            label=check_string(config.get("label")),
            unit=check_string(config.get("unit")),
            entity=check_string(config.get("entity")),
            attribute=check_string(config.get("attribute")),
            precision=number_or_default(config.get("precision"), None),
            label_color=check_string(config.get("label_color")),
            value_color=check_string(config.get("value_color")),
            label_text_size=number_or_default(config.get("label_text_size"), None),
            value_text_size=number_or_default(config.get("value_text_size"), None),
        )


@dataclass(frozen=True)
class CornersInfo:
    top_left: CornerInfo = field(default_factory=CornerInfo)
    top_right: CornerInfo = field(default_factory=CornerInfo)
    bottom_left: CornerInfo = field(default_factory=CornerInfo)
    bottom_right: CornerInfo = field(default_factory=CornerInfo)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "CornersInfo":
        return cls(**{corner: CornerInfo.from_config(get_section(config, corner, "corner_info")) for corner in CORNERS})


@dataclass(frozen=True)
class DirectionLabels:
    cardinal_direction_letters: str = "NESW"
    custom_labels: tuple[tuple[str, str], ...] = ()

    @property
    def count(self) -> int:
        return len(self.cardinal_direction_letters)

    def label(self, compass_point: str) -> str | None:
        """Custom label for a compass point such as ``"nne"``, if configured."""
        return dict(self.custom_labels).get(compass_point.lower())

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        old_letters: Any = None,
        defaults: ConfigDefaults = DEFAULTS,
        logger: Any = None,
    ) -> "DirectionLabels":
        letters = check_string(config.get("cardinal_direction_letters"))
        field_name = "direction_labels.cardinal_direction_letters"
        if letters is None and check_string(old_letters) is not None:
            if logger is not None:
                logger.warning(
                    "cardinal_direction_letters config is deprecated, use the direction_labels object.",
                    field="cardinal_direction_letters",
                )
            letters = check_string(old_letters)
            field_name = "cardinal_direction_letters"
        if letters is None:
            letters = defaults.cardinal_direction_letters
        if len(letters) != 4:
            raise OutOfRangeValueError(
                f"{field_name} should contain exactly 4 letters, for north, east, south and west.",
                field_name,
            )

        labels = get_section(config, "custom_labels", "direction_labels")
        custom: list[tuple[str, str]] = []
        for key, value in labels.items():
            point = str(key).lower()
            if point not in COMPASS_POINTS:
                raise InvalidEnumValueError(
                    f"Invalid direction_labels.custom_labels key {key}. Valid options: {', '.join(COMPASS_POINTS)}",
                    "direction_labels.custom_labels",
                    COMPASS_POINTS,
                )
            text = check_string(value)
            if text is not None:
                custom.append((point, text))
        return cls(cardinal_direction_letters=letters, custom_labels=tuple(custom))


@dataclass(frozen=True)
class CardColors:
    rose_lines: str
    rose_direction_letters: str
    rose_current_direction_arrow: str
    rose_percentages: str
    rose_center_percentage: str
    bar_border: str
    bar_unit_name: str
    bar_name: str
    bar_unit_values: str
    bar_percentages: str

    @classmethod
    def from_config(cls, config: Mapping[str, Any], defaults: ConfigDefaults = DEFAULTS) -> "CardColors":
        return cls(**{slot: check_string(config.get(slot)) or default for slot, default in defaults.colors.items()})
