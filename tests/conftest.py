from __future__ import annotations

import copy
from typing import Any, Callable, Dict, Iterable, Optional

import pytest


def _build_base_raw_config() -> Dict[str, Any]:
    return {
        "type": "custom:windrose-card",
        "title": "Wind direction",
        "data_period": {"hours_to_show": 4},
        "refresh_interval": 300,
        "wind_direction_entity": {"entity": "sensor.wind_direction"},
        "windspeed_entities": [
            {"entity": "sensor.wind_speed", "name": "Wind speed"},
            {"entity": "sensor.wind_gust", "name": "Gust speed"},
        ],
    }


def _apply_dotted_overrides(config: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    for path, value in overrides.items():
        segments = path.split(".")
        current: Any = config
        for segment in segments[:-1]:
            current = current.setdefault(segment, {})
        if value is None:
            current.pop(segments[-1], None)
        else:
            current[segments[-1]] = value


@pytest.fixture
def raw_config_factory() -> Callable[..., Dict[str, Any]]:
    """Build a valid raw card config; keyword sections replace, dotted overrides patch.

    A ``None`` override removes the key.
    """

    def factory(*, overrides: Optional[Dict[str, Any]] = None, **sections: Any) -> Dict[str, Any]:
        config = copy.deepcopy(_build_base_raw_config())

        for section, value in sections.items():
            if value is None:
                config.pop(section, None)
            else:
                config[section] = value

        if overrides:
            _apply_dotted_overrides(config, overrides)

        return config

    return factory


@pytest.fixture
def config_env(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    def apply(**env: Any) -> None:
        for key, value in env.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, str(value))

    return apply


@pytest.fixture
def reset_structlog() -> Iterable[None]:
    import logging

    import structlog

    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
    windrose_logger = logging.getLogger("windrose")
    for handler in windrose_logger.handlers[:]:
        windrose_logger.removeHandler(handler)
    windrose_logger.propagate = True
    windrose_logger.setLevel(logging.NOTSET)
