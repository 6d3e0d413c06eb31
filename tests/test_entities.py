from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from windrose_card.core.defaults import ConfigDefaults
from windrose_card.core.entities import (
    SpeedRange,
    WindDirectionEntity,
    WindSpeedEntity,
    WindSpeedParent,
    build_windspeed_entities,
    resolve_setting,
)
from windrose_card.core.errors import (
    ConfigValidationError,
    MissingRequiredFieldError,
    MutuallyExclusiveFieldsError,
    NotANumberError,
    OutOfRangeValueError,
)
from windrose_card.core.log_bridge import get_logger

pytestmark = pytest.mark.usefixtures("reset_structlog")


def test_direction_entity_defaults():
    entity = WindDirectionEntity.from_config({"entity": "sensor.dir"})

    assert entity == WindDirectionEntity(entity="sensor.dir", attribute=None, use_statistics=False, direction_compensation=0)


def test_direction_entity_options():
    entity = WindDirectionEntity.from_config(
        {"entity": "weather.home", "attribute": "wind_bearing", "use_statistics": "true", "direction_compensation": "-12.5"}
    )

    assert entity.attribute == "wind_bearing"
    assert entity.use_statistics is True
    assert entity.direction_compensation == -12.5


def test_direction_entity_required():
    with pytest.raises(MissingRequiredFieldError) as excinfo:
        WindDirectionEntity.from_config(None)

    assert excinfo.value.field == "wind_direction_entity"


def test_direction_entity_id_required_without_statistics():
    with pytest.raises(MissingRequiredFieldError) as excinfo:
        WindDirectionEntity.from_config({"attribute": "bearing"})

    assert excinfo.value.field == "wind_direction_entity.entity"


def test_direction_entity_from_plain_string_warns():
    with capture_logs() as logs:
        entity = WindDirectionEntity.from_config("sensor.dir", logger=get_logger())

    assert entity.entity == "sensor.dir"
    assert logs[0]["log_level"] == "warning"
    assert logs[0]["field"] == "wind_direction_entity"


def test_direction_entity_rejects_non_mapping():
    with pytest.raises(ConfigValidationError) as excinfo:
        WindDirectionEntity.from_config(["sensor.dir"])

    assert excinfo.value.field == "wind_direction_entity"


def test_direction_compensation_not_a_number():
    with pytest.raises(NotANumberError):
        WindDirectionEntity.from_config({"entity": "sensor.dir", "direction_compensation": "north"})


def test_resolve_setting_precedence():
    parent = WindSpeedParent(output_speed_unit="kph")

    assert resolve_setting("output_speed_unit", {"output_speed_unit": "mps"}, parent, "bft") == "mps"
    assert resolve_setting("output_speed_unit", {"output_speed_unit": ""}, parent, "bft") == "kph"
    assert resolve_setting("output_speed_unit", {}, WindSpeedParent(), "bft") == "bft"
    assert resolve_setting("windspeed_bar_full", {}, WindSpeedParent(windspeed_bar_full=False), True) is False


def test_speed_entity_defaults():
    entity = WindSpeedEntity.from_config({"entity": "sensor.speed"}, WindSpeedParent())

    assert entity.name is None
    assert entity.speed_unit == "auto"
    assert entity.output_speed_unit == "mps"
    assert entity.output_speed_unit_label is None
    assert entity.windspeed_bar_full is True
    assert entity.speed_range_beaufort is True
    assert entity.render_relative_scale is True
    assert entity.speed_ranges == ()


def test_speed_entity_uses_custom_defaults():
    defaults = ConfigDefaults(output_speed_unit="kph", speed_range_beaufort=False)

    entity = WindSpeedEntity.from_config({"entity": "sensor.speed"}, WindSpeedParent(), defaults)

    assert entity.output_speed_unit == "kph"
    assert entity.speed_range_beaufort is False


def test_parent_settings_inherited_and_overridden():
    config = {
        "output_speed_unit": "km/h",
        "windspeed_bar_full": False,
        "windspeed_entities": [
            {"entity": "sensor.speed"},
            {"entity": "sensor.gust", "output_speed_unit": "m/s", "windspeed_bar_full": True},
        ],
    }

    speed, gust = build_windspeed_entities(config)

    assert speed.output_speed_unit == "km/h"
    assert speed.windspeed_bar_full is False
    assert gust.output_speed_unit == "m/s"
    assert gust.windspeed_bar_full is True


def test_entity_id_required_unless_statistics():
    with pytest.raises(MissingRequiredFieldError) as excinfo:
        build_windspeed_entities({"windspeed_entities": [{"entity": "sensor.a"}, {"name": "b"}]})

    assert excinfo.value.field == "windspeed_entities[1].entity"

    (entity,) = build_windspeed_entities({"windspeed_entities": [{"use_statistics": True}]})
    assert entity.entity is None
    assert entity.use_statistics is True


@pytest.mark.parametrize("entities", [None, []])
def test_windspeed_entities_required(entities):
    with pytest.raises(MissingRequiredFieldError, match="minimal 1 needed"):
        build_windspeed_entities({"windspeed_entities": entities})


def test_windspeed_entities_must_be_a_list():
    with pytest.raises(ConfigValidationError, match="must be a list"):
        build_windspeed_entities({"windspeed_entities": {"entity": "sensor.a"}})


def test_step_and_max_from_parent():
    (entity,) = build_windspeed_entities(
        {"speed_range_step": 5, "speed_range_max": 30, "windspeed_entities": [{"entity": "sensor.a"}]}
    )

    assert (entity.speed_range_step, entity.speed_range_max) == (5, 30)


def test_entity_range_group_replaces_parent_group():
    config = {
        "speed_ranges": [{"from_value": 0, "color": "blue"}],
        "windspeed_entities": [{"entity": "sensor.a", "speed_range_step": 2, "speed_range_max": 10}],
    }

    (entity,) = build_windspeed_entities(config)

    assert entity.speed_ranges == ()
    assert (entity.speed_range_step, entity.speed_range_max) == (2, 10)


def test_ranges_and_step_are_mutually_exclusive():
    with pytest.raises(MutuallyExclusiveFieldsError) as excinfo:
        build_windspeed_entities(
            {
                "windspeed_entities": [
                    {
                        "entity": "sensor.a",
                        "speed_range_step": 2,
                        "speed_range_max": 10,
                        "speed_ranges": [{"from_value": 0, "color": "blue"}],
                    }
                ]
            }
        )

    assert excinfo.value.field == "windspeed_entities[0].speed_ranges"


def test_step_without_max_is_missing():
    with pytest.raises(MissingRequiredFieldError) as excinfo:
        build_windspeed_entities({"speed_range_step": 2, "windspeed_entities": [{"entity": "sensor.a"}]})

    assert excinfo.value.field == "speed_range_max"


@pytest.mark.parametrize(("step", "maximum"), [(0, 10), (-1, 10), (5, 4)])
def test_step_and_max_range(step, maximum):
    with pytest.raises(OutOfRangeValueError):
        build_windspeed_entities(
            {"windspeed_entities": [{"entity": "sensor.a", "speed_range_step": step, "speed_range_max": maximum}]}
        )


def test_speed_ranges_sorted_by_from_value():
    (entity,) = build_windspeed_entities(
        {
            "windspeed_entities": [
                {
                    "entity": "sensor.a",
                    "speed_ranges": [
                        {"from_value": 10, "color": "red"},
                        {"from_value": 0, "color": "blue"},
                        {"from_value": "5", "color": "green"},
                    ],
                }
            ]
        }
    )

    assert entity.speed_ranges == (
        SpeedRange(from_value=0, color="blue"),
        SpeedRange(from_value=5, color="green"),
        SpeedRange(from_value=10, color="red"),
    )


def test_speed_range_needs_color():
    with pytest.raises(MissingRequiredFieldError) as excinfo:
        SpeedRange.from_config({"from_value": 0}, "speed_ranges[0]")

    assert excinfo.value.field == "speed_ranges[0].color"


def test_speed_ranges_must_be_a_list():
    with pytest.raises(ConfigValidationError, match="non-empty list"):
        build_windspeed_entities({"speed_ranges": {"from_value": 0}, "windspeed_entities": [{"entity": "sensor.a"}]})


def test_unreadable_entity_setting_falls_back_to_parent():
    config = {
        "windspeed_bar_full": False,
        "speed_range_beaufort": "no",
        "output_speed_unit": "kph",
        "windspeed_entities": [
            {"entity": "sensor.a", "windspeed_bar_full": "maybe", "speed_range_beaufort": 3, "output_speed_unit": " "},
        ],
    }

    (entity,) = build_windspeed_entities(config)

    assert entity.windspeed_bar_full is False
    assert entity.speed_range_beaufort is False
    assert entity.output_speed_unit == "kph"


def test_unreadable_parent_setting_falls_back_to_default():
    (entity,) = build_windspeed_entities(
        {"windspeed_bar_full": "maybe", "windspeed_entities": [{"entity": "sensor.a"}]},
        ConfigDefaults(windspeed_bar_full=False),
    )

    assert entity.windspeed_bar_full is False
