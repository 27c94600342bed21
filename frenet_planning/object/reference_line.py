import math

import numpy as np
from scipy.spatial import KDTree
from shapely.geometry import LineString

from frenet_planning.object.config import _WAYPOINTS_STEP
from frenet_planning.object.vehicle_state import FrenetState, VehicleState
from frenet_planning.utils.generator_utils import convert_veh_frenet
from frenet_planning.utils.spline_planner import CubicSpline2D


def remove_repeated_waypoints(waypoint_x, waypoint_y, tol: float = 1e-6):
    """
    Drop waypoints coinciding with their predecessor, the chord length between them would be zero.
    """
    xy = np.column_stack((np.asarray(waypoint_x, dtype=float), np.asarray(waypoint_y, dtype=float)))
    if xy.shape[0] == 0:
        return xy[:, 0], xy[:, 1]
    keep = np.append(True, np.hypot(*np.diff(xy, axis=0).T) > tol)
    return xy[keep, 0], xy[keep, 1]


class ReferenceLine(object):
    """
    Smooth reference curve through lane waypoints, the s axis of the Frenet frame.
    """
    def __init__(self, waypoint_x, waypoint_y, wps_step=_WAYPOINTS_STEP):
        self.wps_step = wps_step

        waypoint_x, waypoint_y = remove_repeated_waypoints(waypoint_x, waypoint_y)
        if len(waypoint_x) < 2:
            raise ValueError("A reference line needs at least 2 distinct waypoints, got {}".format(len(waypoint_x)))

        # Lane Discretization
        self.course_csp = CubicSpline2D(waypoint_x, waypoint_y)
        self.generate_discrete_course()

        self.ref_line_ls = LineString(coordinates=np.column_stack((self.rx, self.ry)))

    @property
    def s_max(self):
        return self.course_csp.s_max

    def generate_discrete_course(self):
        self.rs = np.append(np.arange(0, self.s_max, self.wps_step), self.s_max)
        self.rx, self.ry, self.ryaw, self.rkappa = self.course_csp.calc_all_in_single_forward(self.rs)
        self.KDTree = KDTree(np.column_stack((self.rx, self.ry)))

    def get_full_info(self):
        return np.array((self.rs, self.rx, self.ry, self.ryaw, self.rkappa)).transpose()

    def calc_position(self, s):
        return self.course_csp.calc_position(s)

    def calc_yaw(self, s):
        return self.course_csp.calc_yaw(s)

    def calc_curvature(self, s):
        return self.course_csp.calc_curvature(s)

    def get_correspond_rpoint(self, global_x, global_y):
        """
        Project (global_x, global_y) onto the reference line.

        The nearest discretized waypoint is refined along the local tangent, so s is not limited
        to multiples of wps_step.
        :return: s, d, rx, ry, ryaw, rkappa of the projected point
        """
        _, idx = self.KDTree.query([global_x, global_y])
        s = self.rs[idx]
        rx, ry, ryaw, rkappa = self.rx[idx], self.ry[idx], self.ryaw[idx], self.rkappa[idx]
        for _ in range(3):
            s += (global_x - rx) * math.cos(ryaw) + (global_y - ry) * math.sin(ryaw)
            s = min(max(s, 0.0), self.s_max)
            rx, ry, ryaw, rkappa = self.course_csp.calc_all_in_single_forward(s)
        d = (global_y - ry) * math.cos(ryaw) - (global_x - rx) * math.sin(ryaw)

        return s, d, rx, ry, ryaw, rkappa

    def get_track_sd(self, xy: np.ndarray) -> np.ndarray:
        """
        Retrieve s&d coordinates of the input xy trajectory.
        :param xy: shape (N, 2)
        :return: shape (N, 2)
        """
        sd = np.zeros(xy.shape)
        for i in range(xy.shape[0]):
            sd[i][0], sd[i][1] = self.get_correspond_rpoint(xy[i][0], xy[i][1])[:2]
        return sd

    def get_frenet_state(self, veh_state: VehicleState) -> FrenetState:
        """
        Frenet start state of a vehicle from its odometry.
        """
        x, y, yaw, kappa, vel, acc = veh_state.get_global_info()

        s, d, _, _, ryaw, rkappa = self.get_correspond_rpoint(x, y)
        s_d, s_dd, d_d, d_dd = convert_veh_frenet(yaw, kappa, vel, acc, d, ryaw, rkappa)

        return FrenetState(s=float(s), s_d=s_d, s_dd=s_dd, d=float(d), d_d=d_d, d_dd=d_dd)
