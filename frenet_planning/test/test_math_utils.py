import math

import numpy as np
import pytest

from frenet_planning.utils.math_utils import cal_rot_matrix, normalize_angle, quaternion_to_yaw


@pytest.mark.parametrize("angle, expected", [
    (0.0, 0.0),
    (math.pi, math.pi),
    (-math.pi, math.pi),
    (1.5 * math.pi, -0.5 * math.pi),
    (-2.5 * math.pi, -0.5 * math.pi),
    (4.0 * math.pi + 0.1, 0.1),
])
def test_normalize_angle(angle, expected):
    assert normalize_angle(angle) == pytest.approx(expected)


def test_normalize_angle_array():
    result = normalize_angle(np.array([0.0, 2.0 * math.pi, 2.5 * math.pi]))
    assert np.allclose(result, [0.0, 0.0, 0.5 * math.pi])


def test_rot_matrix_quarter_turn():
    assert np.allclose(cal_rot_matrix(math.pi / 2.0) @ np.array([1.0, 0.0]), [0.0, 1.0])


def test_quaternion_to_yaw():
    half = math.pi / 4.0
    assert quaternion_to_yaw(0.0, 0.0, math.sin(half), math.cos(half)) == pytest.approx(math.pi / 2.0)
    # unnormalized input describes the same rotation
    assert quaternion_to_yaw(0.0, 0.0, 2.0 * math.sin(half), 2.0 * math.cos(half)) == pytest.approx(math.pi / 2.0)
    assert quaternion_to_yaw(0.0, 0.0, 0.0, 0.0) == 0.0
