import math
from typing import Optional, Sequence

import matplotlib.axes
from shapely.geometry import Polygon

from frenet_planning.object.config import _VEHICLE_LR, Setting
from frenet_planning.object.obstacle import Obstacle
from frenet_planning.object.reference_line import ReferenceLine
from frenet_planning.utils.collision_checker import construct_rectangle, rectangle_to_polygon
from frenet_planning.utils.frenet_utils import FrenetTrajectory


def plot_polygon(polygon: Polygon, axes: matplotlib.axes.Axes, color: str = "red", alpha: float = 0.5):
    x, y = polygon.exterior.xy
    axes.fill(x, y, color=color, alpha=alpha, zorder=20)
    return axes


def plot_reference_line(ref_line: ReferenceLine, axes: matplotlib.axes.Axes, color: str = "gray"):
    axes.plot(ref_line.rx, ref_line.ry, color=color, linestyle="--")
    return axes


def plot_obstacles(obstacles: Sequence[Obstacle], axes: matplotlib.axes.Axes, setting: Optional[Setting] = None,
                   color: str = "red"):
    """
    Obstacle boxes at their current pose, with the safety margins when a setting is given.
    """
    margin_lon = setting.safety_margin_lon if setting is not None else 0.0
    margin_lat = setting.safety_margin_lat if setting is not None else 0.0
    for obstacle in obstacles:
        rect = construct_rectangle(obstacle.x, obstacle.y, obstacle.yaw, obstacle.length, obstacle.width,
                                   margin_lon, margin_lat)
        plot_polygon(rectangle_to_polygon(rect), axes, color=color)
    return axes


def plot_trajectory(traj: FrenetTrajectory, axes: matplotlib.axes.Axes, setting: Optional[Setting] = None,
                    color: str = "purple", footprint_every: int = 10):
    """
    Ground-frame path of a trajectory; with a setting, the ego footprint is drawn every footprint_every samples.
    """
    axes.plot(traj.x, traj.y, color=color, marker="o", markersize=3, zorder=10)
    if setting is not None:
        for j in range(0, traj.num_global_samples, footprint_every):
            rect = construct_rectangle(traj.x[j] + _VEHICLE_LR * math.cos(traj.yaw[j]),
                                       traj.y[j] + _VEHICLE_LR * math.sin(traj.yaw[j]),
                                       traj.yaw[j], setting.vehicle_length, setting.vehicle_width)
            plot_polygon(rectangle_to_polygon(rect), axes, color=color, alpha=0.2)
    return axes


def plot_planning_result(ref_line: ReferenceLine, obstacles: Sequence[Obstacle], traj: Optional[FrenetTrajectory],
                         axes: matplotlib.axes.Axes, setting: Optional[Setting] = None):
    plot_reference_line(ref_line, axes)
    plot_obstacles(obstacles, axes, setting)
    if traj is not None:
        plot_trajectory(traj, axes, setting)
    axes.set_aspect("equal", adjustable="box")
    return axes
