import math

import numpy as np
import pytest

from frenet_planning.utils.collision_checker import check_collision, construct_rectangle, rectangle_to_polygon


def _shoelace(corners):
    x, y = corners[:, 0], corners[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def test_rectangle_corners():
    rect = construct_rectangle(1.0, 2.0, 0.0, 4.0, 2.0)

    assert rect.shape == (4, 2)
    assert np.allclose(rect.mean(axis=0), [1.0, 2.0])
    # counter-clockwise order gives a positive signed area
    assert _shoelace(rect) == pytest.approx(8.0)


def test_rectangle_margins():
    rect = construct_rectangle(0.0, 0.0, math.pi / 3.0, 4.0, 2.0, margin_lon=0.5, margin_lat=0.25)
    polygon = rectangle_to_polygon(rect)

    assert polygon.area == pytest.approx(5.0 * 2.5)
    assert polygon.is_valid


def test_overlap_and_separation():
    a = construct_rectangle(0.0, 0.0, 0.0, 2.0, 2.0)

    assert check_collision(a, construct_rectangle(0.5, 0.0, 0.0, 2.0, 2.0))
    assert not check_collision(a, construct_rectangle(3.0, 0.0, 0.0, 2.0, 2.0))
    assert not check_collision(a, construct_rectangle(0.0, -2.5, 0.3, 2.0, 1.0))


def test_containment():
    outer = construct_rectangle(0.0, 0.0, 0.2, 10.0, 10.0)
    inner = construct_rectangle(0.5, -0.5, 1.0, 1.0, 1.0)

    assert check_collision(outer, inner)
    assert check_collision(inner, outer)


def test_touching_counts_as_collision():
    a = construct_rectangle(0.0, 0.0, 0.0, 2.0, 2.0)
    b = construct_rectangle(2.0, 0.0, 0.0, 2.0, 2.0)

    assert check_collision(a, b)


def test_rotated_separation_on_diagonal():
    # the bounding boxes overlap but the diagonal axis separates the shapes
    a = construct_rectangle(0.0, 0.0, 0.0, 2.0, 2.0)
    b = construct_rectangle(2.3, 2.3, math.pi / 4.0, 2.0, 2.0)

    assert not check_collision(a, b)
    assert not check_collision(b, a)
    assert not rectangle_to_polygon(a).intersects(rectangle_to_polygon(b))


@pytest.mark.parametrize("yaw", [0.0, 0.4, math.pi / 2.0, 2.5])
def test_collision_is_symmetric(yaw):
    a = construct_rectangle(0.0, 0.0, 0.1, 4.5, 1.8)
    for dx in np.linspace(-6.0, 6.0, 13):
        b = construct_rectangle(dx, 1.0, yaw, 2.0, 1.0)
        assert check_collision(a, b) == check_collision(b, a)


def test_margin_closes_gap():
    ego = construct_rectangle(0.0, 0.0, 0.0, 2.0, 2.0)

    assert not check_collision(ego, construct_rectangle(2.2, 0.0, 0.0, 2.0, 2.0))
    assert check_collision(ego, construct_rectangle(2.2, 0.0, 0.0, 2.0, 2.0, margin_lon=0.3))
    assert not check_collision(ego, construct_rectangle(2.2, 0.0, 0.0, 2.0, 2.0, margin_lat=0.3))
