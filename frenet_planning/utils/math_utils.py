import math
import numpy as np
from typing import Union


def normalize_angle(angle: Union[float, np.ndarray]):
    """
    Wrap an angle (or an array of angles) into (-pi, pi].
    """
    angle = np.mod(angle, 2 * math.pi)
    result = angle - (angle > math.pi) * (2 * math.pi)

    return result


def cal_rot_matrix(yaw: float):
    norm_yaw = normalize_angle(yaw)
    cos_yaw = np.cos(norm_yaw)
    sin_yaw = np.sin(norm_yaw)

    rot_matrix = np.array(
        [[cos_yaw, -sin_yaw],
         [sin_yaw, cos_yaw]]
    )

    return rot_matrix


def quaternion_to_yaw(qx: float, qy: float, qz: float, qw: float) -> float:
    """
    Heading of a rotation given as a quaternion (ZYX convention).
    The quaternion is normalized first; a zero quaternion is treated as no rotation.
    """
    norm = math.sqrt(qx * qx + qy * qy + qz * qz + qw * qw)
    if norm == 0.0:
        return 0.0
    qx, qy, qz, qw = qx / norm, qy / norm, qz / norm, qw / norm

    siny_cosp = 2.0 * (qw * qz + qx * qy)
    cosy_cosp = 1.0 - 2.0 * (qy * qy + qz * qz)
    return math.atan2(siny_cosp, cosy_cosp)
