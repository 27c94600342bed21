import numpy as np
from shapely.geometry import Polygon

from frenet_planning.utils.math_utils import cal_rot_matrix


def construct_rectangle(center_x: float, center_y: float, yaw: float, length: float, width: float,
                        margin_lon: float = 0.0, margin_lat: float = 0.0) -> np.ndarray:
    """
    Corners of an oriented rectangle, counter-clockwise, shape (4, 2).
    The margins inflate the box on each side, along (lon) and across (lat) its heading.
    """
    half_l = length / 2.0 + margin_lon
    half_w = width / 2.0 + margin_lat
    corners = np.array([[half_l, -half_w],
                        [half_l, half_w],
                        [-half_l, half_w],
                        [-half_l, -half_w]])
    return corners @ cal_rot_matrix(yaw).T + np.array([center_x, center_y])


def rectangle_to_polygon(corners: np.ndarray) -> Polygon:
    return Polygon([tuple(p) for p in corners])


def _edge_normals(corners: np.ndarray) -> np.ndarray:
    edges = np.roll(corners, -1, axis=0) - corners
    # Opposite edges of a rectangle are parallel, two axes are enough
    return np.stack((-edges[:2, 1], edges[:2, 0]), axis=1)


def check_collision(rect_a: np.ndarray, rect_b: np.ndarray) -> bool:
    """
    Separating axis test for two convex polygons given by their corners.
    Touching boundaries count as a collision.
    :return: True if the polygons overlap
    """
    for axis in np.concatenate((_edge_normals(rect_a), _edge_normals(rect_b))):
        proj_a = rect_a @ axis
        proj_b = rect_b @ axis
        if proj_a.max() < proj_b.min() or proj_b.max() < proj_a.min():
            return False

    return True
