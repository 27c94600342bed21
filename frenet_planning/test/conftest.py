import numpy as np
import pytest

from frenet_planning.object.config import Setting
from frenet_planning.object.reference_line import ReferenceLine
from frenet_planning.object.vehicle_state import FrenetState


@pytest.fixture
def straight_line():
    return ReferenceLine([0.0, 20.0, 40.0, 60.0, 80.0], [0.0, 0.0, 0.0, 0.0, 0.0])


@pytest.fixture
def quarter_circle():
    # radius 10, counter-clockwise around the origin
    angles = np.linspace(0.0, np.pi / 2.0, 19)
    return ReferenceLine(10.0 * np.cos(angles), 10.0 * np.sin(angles))


@pytest.fixture
def cruise_setting():
    return Setting(num_width=3, num_speed=1, num_t=1, highest_speed=5.0, lowest_speed=0.0, min_t=3.0, max_t=3.0)


@pytest.fixture
def cruise_start():
    return FrenetState(s=0.0, s_d=5.0, d=0.0)
