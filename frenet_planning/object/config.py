"""This module defines all the config parameters."""
import json

##############################  Lane  ############################################
_WAYPOINTS_STEP = 0.1


##############################  Vehicle  ############################################
# Static geometry: distance from the rear axle to the geometric centre
_VEHICLE_LR = 1.5
_VEHICLE_LENGTH = 4.5
_VEHICLE_WIDTH = 1.8


##############################  Planner  ############################################
_DEFAULT_SETTING = {
    # Kinematic limits
    "max_speed": 50.0 / 3.6,     # [m/s]
    "max_accel": 4.0,            # [m/ss]
    "max_decel": -6.0,           # [m/ss]
    "max_curvature": 1.0,        # [1/m]

    # Lateral sampling
    "center_offset": 0.0,        # [m]
    "num_width": 5,

    # Longitudinal sampling
    "highest_speed": 40.0 / 3.6,  # [m/s]
    "lowest_speed": 0.0,          # [m/s]
    "num_speed": 5,

    # Horizon sampling
    "min_t": 3.0,                # [s]
    "max_t": 5.0,                # [s]
    "num_t": 5,
    "tick_t": 0.1,               # [s]

    # Footprint and safety margins
    "vehicle_length": _VEHICLE_LENGTH,
    "vehicle_width": _VEHICLE_WIDTH,
    "safety_margin_lon": 0.5,    # [m]
    "safety_margin_lat": 0.3,    # [m]

    # Cost weights
    "k_jerk": 0.1,
    "k_time": 10.0,
    "k_diff": 1.0,
    "k_lat": 1.0,
    "k_lon": 1.0,
}

_COUNT_FIELDS = ("num_width", "num_speed", "num_t")


class Setting(object):
    """
    Tunable configuration of the planner, read-only during a planning cycle.
    """

    def __init__(self, **kwargs):
        unknown = set(kwargs) - set(_DEFAULT_SETTING)
        if unknown:
            raise ValueError("Unknown setting(s): {}".format(", ".join(sorted(unknown))))

        for key, value in _DEFAULT_SETTING.items():
            value = kwargs.get(key, value)
            setattr(self, key, int(value) if key in _COUNT_FIELDS else float(value))

    def validate(self):
        for key in _COUNT_FIELDS:
            if getattr(self, key) < 1:
                raise ValueError("{} must be at least 1, got {}".format(key, getattr(self, key)))
        if not 0.0 < self.min_t <= self.max_t:
            raise ValueError("Horizon range must satisfy 0 < min_t <= max_t, got [{}, {}]".format(self.min_t, self.max_t))
        if not self.tick_t > 0.0:
            raise ValueError("tick_t must be positive, got {}".format(self.tick_t))
        if self.lowest_speed > self.highest_speed:
            raise ValueError("lowest_speed {} exceeds highest_speed {}".format(self.lowest_speed, self.highest_speed))
        if not self.max_decel <= 0.0 <= self.max_accel:
            raise ValueError("Acceleration range must satisfy max_decel <= 0 <= max_accel")
        for key in ("max_speed", "max_curvature", "vehicle_length", "vehicle_width",
                    "safety_margin_lon", "safety_margin_lat"):
            if getattr(self, key) < 0.0:
                raise ValueError("{} must not be negative, got {}".format(key, getattr(self, key)))
        return self

    def to_dict(self):
        return {key: getattr(self, key) for key in _DEFAULT_SETTING}

    @classmethod
    def from_dict(cls, setting_dict: dict):
        return cls(**setting_dict).validate()

    def __repr__(self) -> str:
        return "Setting(%s)" % ", ".join("{}={}".format(k, v) for k, v in self.to_dict().items())


def load_setting(file_path: str) -> Setting:
    """
    Load a Setting from a json file, keys missing from the file keep their defaults.
    """
    with open(file_path, "r", encoding="UTF-8") as f:
        setting_dict = json.load(f)
    return Setting.from_dict(setting_dict)
