import math
import logging

import numpy as np

from frenet_planning.utils.math_utils import normalize_angle

logger = logging.getLogger(__name__)


def convert_veh_frenet(yaw, kappa, vel, acc, d, ryaw, rkappa, rkappa_prime=0.0):
    """
    Convert the ground-frame motion of a vehicle sitting at lateral offset d from its
    reference point (ryaw, rkappa, rkappa_prime) into Frenet time derivatives.
    :return: s_d, s_dd, d_d, d_dd
    """
    delta_yaw = normalize_angle(yaw - ryaw)
    one_minus_rkappa_d = 1 - rkappa * d
    if abs(delta_yaw) >= math.pi / 2:
        logger.debug("The delta yaw is larger than pi/2")
    if one_minus_rkappa_d <= 0:
        raise RuntimeError("Encounter extreme situation that one_minus_rkappa_d <= 0")

    tan_delta_yaw = math.tan(delta_yaw)
    cos_delta_yaw = math.cos(delta_yaw)
    sin_delta_yaw = math.sin(delta_yaw)

    # Derivative with respect to arc length
    d_prime = one_minus_rkappa_d * tan_delta_yaw
    rkappa_d_prime = rkappa_prime * d + rkappa * d_prime
    delta_theta_prime = kappa * one_minus_rkappa_d / cos_delta_yaw - rkappa
    d_prime_prime = - rkappa_d_prime * tan_delta_yaw + \
                    one_minus_rkappa_d / cos_delta_yaw ** 2 * delta_theta_prime

    # Derivative with respect to time
    s_d = vel * cos_delta_yaw / one_minus_rkappa_d
    s_dd = (acc * cos_delta_yaw
            - s_d ** 2 * (d_prime * delta_theta_prime - rkappa_d_prime)
            ) / one_minus_rkappa_d
    d_d = vel * sin_delta_yaw
    d_dd = s_dd * d_prime + s_d ** 2 * d_prime_prime

    return s_d, s_dd, d_d, d_dd


def convert_frenet_global(s: np.ndarray, d: np.ndarray, course_csp):
    """
    Project Frenet samples (s, d) to the ground frame along the spline course_csp.

    The series is truncated at the first sample whose s lies outside the spline domain or
    whose ground coordinate is not finite. Yaw, step length and curvature are derived from
    consecutive points, the last sample repeating the previous one.
    :return: x, y, yaw, ds, c
    """
    s = np.asarray(s, dtype=float)
    d = np.asarray(d, dtype=float)

    rx, ry, ryaw, _ = course_csp.calc_all_in_single_forward(s)
    x = rx + d * np.cos(ryaw + math.pi / 2.0)
    y = ry + d * np.sin(ryaw + math.pi / 2.0)

    legal = np.isfinite(x) & np.isfinite(y) & course_csp.in_range(s)
    num = len(s) if legal.all() else int(np.argmin(legal))
    if num < len(s):
        logger.debug("Truncate trajectory at sample %d/%d (s = %.3f)", num, len(s), s[num])
    x, y = x[:num], y[:num]
    if num < 2:
        empty = np.empty(0)
        return x, y, empty, empty, empty

    dx, dy = np.diff(x), np.diff(y)
    yaw = np.arctan2(dy, dx)
    ds = np.hypot(dx, dy)
    yaw = np.append(yaw, yaw[-1])
    ds = np.append(ds, ds[-1])

    # A zero step length (vehicle standing still) carries no heading change
    yaw_diff = normalize_angle(np.diff(yaw))
    c = np.divide(yaw_diff, ds[:-1], out=np.zeros_like(yaw_diff), where=ds[:-1] > 0.0)
    c = np.append(c, c[-1])

    return x, y, yaw, ds, c
