import math
from typing import NamedTuple


class VehicleState(object):
    def __init__(self, x: float, y: float, vx: float, vy: float, acc: float,
                 yaw: float, kappa: float = 0.0):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.yaw = yaw
        self.kappa = kappa

        self.vel = math.hypot(self.vx, self.vy)
        self.acc = acc

    def get_global_info(self):
        return self.x, self.y, self.yaw, self.kappa, self.vel, self.acc


class FrenetState(NamedTuple):
    """
    Longitudinal (s) and lateral (d) state with its first two time derivatives.
    T is the horizon for end states and zero for the start state.
    """
    s: float = 0.0
    s_d: float = 0.0
    s_dd: float = 0.0
    d: float = 0.0
    d_d: float = 0.0
    d_dd: float = 0.0
    T: float = 0.0
