"""Default values applied when the card configuration leaves a field unset."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

WINDSPEED_BAR_LOCATIONS: tuple[str, ...] = ("bottom", "right")
MATCHING_STRATEGIES: tuple[str, ...] = ("direction-first", "speed-first", "time-frame", "full-time")
LOG_LEVELS: tuple[str, ...] = ("none", "error", "warn", "info", "debug", "trace")
COMPASS_POINTS: tuple[str, ...] = (
    "n", "nne", "ne", "ene", "e", "ese", "se", "sse",
    "s", "ssw", "sw", "wsw", "w", "wnw", "nw", "nnw",
)
CORNERS: tuple[str, ...] = ("top_left", "top_right", "bottom_left", "bottom_right")

MIN_WIND_DIRECTION_COUNT = 4
MAX_WIND_DIRECTION_COUNT = 32


def _default_colors() -> dict[str, str]:
    return {
        "rose_lines": "rgb(160, 160, 160)",
        "rose_direction_letters": "var(--primary-text-color)",
        "rose_current_direction_arrow": "red",
        "rose_percentages": "var(--primary-text-color)",
        "rose_center_percentage": "auto",
        "bar_border": "rgb(160, 160, 160)",
        "bar_unit_name": "var(--primary-text-color)",
        "bar_name": "var(--primary-text-color)",
        "bar_unit_values": "var(--primary-text-color)",
        "bar_percentages": "black",
    }


@dataclass(frozen=True)
class ConfigDefaults:
    hours_to_show: int = 4
    time_interval: int = 60
    refresh_interval: int = 300
    windspeed_bar_location: str = "bottom"
    windspeed_bar_full: bool = True
    input_speed_unit: str = "auto"
    output_speed_unit: str = "mps"
    speed_range_beaufort: bool = True
    render_relative_scale: bool = True
    cardinal_direction_letters: str = "NESW"
    wind_direction_count: int = 16
    windrose_draw_north_offset: float = 0
    direction_compensation: float = 0
    matching_strategy: str = "direction-first"
    center_calm_percentage: bool = True
    current_direction_arrow_size: int = 50
    current_direction_circle_size: int = 30
    log_level: str = "warn"
    colors: Mapping[str, str] = field(default_factory=_default_colors, hash=False)

    def __post_init__(self) -> None:
        # Read-only copy of the caller's mapping
        object.__setattr__(self, "colors", MappingProxyType(dict(self.colors)))


DEFAULTS = ConfigDefaults()
