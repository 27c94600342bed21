import math
from typing import List, Sequence

import numpy as np

from frenet_planning.utils.math_utils import quaternion_to_yaw


class Obstacle(object):
    """
    A detected obstacle: 2D pose, heading, linear velocity and bounding box (length along its heading).
    """
    def __init__(self, x: float, y: float, yaw: float, length: float, width: float,
                 vx: float = 0.0, vy: float = 0.0, vz: float = 0.0):
        self.x = x
        self.y = y
        self.yaw = yaw
        self.length = length
        self.width = width

        # only the magnitude of the velocity is used, the obstacle keeps its heading
        self.speed = math.sqrt(vx ** 2 + vy ** 2 + vz ** 2)

    @classmethod
    def from_pose(cls, position: Sequence[float], orientation: Sequence[float],
                  linear_velocity: Sequence[float], dimensions: Sequence[float]):
        """
        :param position: (x, y[, z])
        :param orientation: quaternion (qx, qy, qz, qw)
        :param linear_velocity: (vx, vy[, vz])
        :param dimensions: (length, width[, height])
        """
        yaw = quaternion_to_yaw(*orientation)
        vz = linear_velocity[2] if len(linear_velocity) > 2 else 0.0
        return cls(x=position[0], y=position[1], yaw=yaw, length=dimensions[0], width=dimensions[1],
                   vx=linear_velocity[0], vy=linear_velocity[1], vz=vz)

    def __repr__(self) -> str:
        return "Obstacle(x=%.2f, y=%.2f, yaw=%.2f, v=%.2f)" % (self.x, self.y, self.yaw, self.speed)


class ObstaclePrediction(object):
    """
    Constant speed, constant heading extrapolation of one obstacle, sampled every tick_t.
    Sample i corresponds to time i * tick_t.
    """
    def __init__(self, obstacle: Obstacle, horizon: float, tick_t: float):
        self.obstacle = obstacle
        steps = int(horizon / tick_t + 1e-9)

        t = np.arange(steps + 1) * tick_t
        self.x = obstacle.x + obstacle.speed * t * math.cos(obstacle.yaw)
        self.y = obstacle.y + obstacle.speed * t * math.sin(obstacle.yaw)
        self.yaw = np.full(steps + 1, obstacle.yaw)
        self.v = np.full(steps + 1, obstacle.speed)

    def __len__(self):
        return len(self.x)


def predict_trajectories(obstacles: List[Obstacle], horizon: float, tick_t: float) -> List[ObstaclePrediction]:
    return [ObstaclePrediction(obstacle, horizon, tick_t) for obstacle in obstacles]
