import json

import pytest

from frenet_planning.object.config import Setting, load_setting


def test_defaults():
    setting = Setting().validate()

    assert setting.num_width == 5
    assert isinstance(setting.num_t, int)
    assert setting.max_speed == pytest.approx(50.0 / 3.6)
    assert setting.tick_t == pytest.approx(0.1)
    assert setting.vehicle_length == pytest.approx(4.5)


def test_overrides_are_cast():
    setting = Setting(num_speed=3.0, max_t="4.5")

    assert setting.num_speed == 3
    assert isinstance(setting.num_speed, int)
    assert setting.max_t == 4.5


def test_unknown_key():
    with pytest.raises(ValueError, match="max_velocity"):
        Setting(max_velocity=10.0)


@pytest.mark.parametrize("overrides", [
    {"num_width": 0},
    {"num_t": -1},
    {"min_t": 6.0, "max_t": 5.0},
    {"min_t": 0.0},
    {"tick_t": 0.0},
    {"lowest_speed": 12.0, "highest_speed": 10.0},
    {"max_accel": -1.0},
    {"max_decel": 1.0},
    {"max_curvature": -0.1},
    {"vehicle_width": -1.0},
    {"safety_margin_lat": -0.1},
])
def test_validate_rejects(overrides):
    with pytest.raises(ValueError):
        Setting(**overrides).validate()


def test_dict_round_trip():
    setting = Setting(num_width=7, k_jerk=0.5)

    assert Setting.from_dict(setting.to_dict()).to_dict() == setting.to_dict()


def test_load_setting(tmp_path):
    file_path = tmp_path / "setting.json"
    file_path.write_text(json.dumps({"num_width": 3, "max_t": 4.0}), encoding="UTF-8")

    setting = load_setting(str(file_path))
    assert setting.num_width == 3
    assert setting.max_t == 4.0
    assert setting.min_t == 3.0


def test_load_invalid_setting(tmp_path):
    file_path = tmp_path / "setting.json"
    file_path.write_text(json.dumps({"min_t": 5.0, "max_t": 2.0}), encoding="UTF-8")

    with pytest.raises(ValueError):
        load_setting(str(file_path))
