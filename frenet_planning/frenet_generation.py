import heapq
import itertools
import logging
import math
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import List, Optional, Sequence

import numpy as np

from frenet_planning.lattice import CandidateLattice, LatticeSearch
from frenet_planning.object.config import _VEHICLE_LR, Setting
from frenet_planning.object.obstacle import Obstacle, ObstaclePrediction, predict_trajectories
from frenet_planning.object.reference_line import ReferenceLine
from frenet_planning.object.vehicle_state import FrenetState
from frenet_planning.utils.collision_checker import check_collision, construct_rectangle
from frenet_planning.utils.frenet_utils import FrenetTrajectory
from frenet_planning.utils.generator_utils import convert_frenet_global
from frenet_planning.utils.polynomial_planner import QuarticPolynomial, QuinticPolynomial

logger = logging.getLogger(__name__)


class PlanningStats(object):
    """
    Counters of one planning cycle, summed over cycles with +.
    """
    def __init__(self):
        self.num_obstacles = 0
        self.num_end_states = 0
        self.num_iter = 0
        self.num_trajs_generated = 0
        self.num_trajs_validated = 0
        self.num_collision_checks = 0

    def __add__(self, other):
        result = PlanningStats()
        for key in vars(result):
            setattr(result, key, getattr(self, key) + getattr(other, key))
        return result

    def __repr__(self) -> str:
        return "PlanningStats(%s)" % ", ".join("{}={}".format(k, v) for k, v in vars(self).items())


class FrenetPlanner(object):
    """
    Frenet optimal trajectory planner with a lazily evaluated candidate lattice.

    Each call of plan() samples the end-state lattice, walks it by coordinate descent while
    synthesizing only the trajectories it touches, then validates those trajectories in
    increasing cost order and returns the first one that is feasible and collision free.
    """

    def __init__(self, setting: Optional[Setting] = None):
        self.setting = (setting if setting is not None else Setting()).validate()

        # state of the current / last planning cycle
        self.start_state = None
        self.lattice = None
        self.search = None
        self.stats = PlanningStats()
        self._cycle_setting = self.setting
        self._candidate_trajs = []
        self._counter = itertools.count()

    def update_settings(self, setting: Setting):
        self.setting = setting.validate()

    def plan(self, reference_line: ReferenceLine, start_state: FrenetState, left_width: float, right_width: float,
             current_speed: float, obstacles: Sequence[Obstacle] = (), check_collision: bool = True,
             use_async: bool = False) -> Optional[FrenetTrajectory]:
        """
        Run one planning cycle.
        :param reference_line: reference curve of the lane
        :param start_state: current Frenet state of the vehicle
        :param left_width: left lateral bound of the drivable area [m], positive
        :param right_width: right lateral bound of the drivable area [m], negative
        :param current_speed: current speed of the vehicle [m/s]
        :param obstacles: obstacles in the ground frame
        :param check_collision: if False, candidates are only checked against the kinematic constraints
        :param use_async: run obstacle prediction and each collision check on a worker thread
        :return: the cheapest valid trajectory, or None if no candidate survives validation
        """
        # the setting of a running cycle is never swapped
        self._cycle_setting = setting = self.setting
        self.start_state = start_state
        self.stats = PlanningStats()
        self._candidate_trajs = []
        self._counter = itertools.count()

        if use_async:
            with ThreadPoolExecutor(max_workers=1) as executor:
                prediction = executor.submit(predict_trajectories, list(obstacles), setting.max_t, setting.tick_t)
                self.lattice = CandidateLattice(setting, start_state, left_width, right_width, current_speed)
                obstacle_trajs = prediction.result()
                best_traj = self._search_and_validate(reference_line, obstacle_trajs, check_collision, executor)
        else:
            obstacle_trajs = predict_trajectories(list(obstacles), setting.max_t, setting.tick_t)
            self.lattice = CandidateLattice(setting, start_state, left_width, right_width, current_speed)
            best_traj = self._search_and_validate(reference_line, obstacle_trajs, check_collision, None)

        logger.info("Planning done: %s", self.stats)
        if best_traj is None:
            logger.warning("No feasible trajectory found among %d candidates", self.stats.num_trajs_validated)
        return best_traj

    def _search_and_validate(self, reference_line, obstacle_trajs, check_collision, executor: Optional[Executor]):
        self.stats.num_obstacles = len(obstacle_trajs)
        self.stats.num_end_states = len(self.lattice)

        # Search process
        self.search = LatticeSearch(self.lattice, self.get_traj_and_real_cost)
        self.search.run()
        self.stats.num_iter = self.search.num_iter

        # Validation process
        while self._candidate_trajs:
            candidate_traj = self.pop_candidate()
            self.stats.num_trajs_validated += 1

            self.convert_to_global_frame(candidate_traj, reference_line)
            if not self.check_constraints(candidate_traj):
                continue

            if check_collision:
                if not self.check_collisions(candidate_traj, obstacle_trajs, executor):
                    continue
            else:
                logger.debug("Collision checking skipped")

            logger.debug("Best trajectory found: %s", candidate_traj)
            return candidate_traj

        return None

    def get_traj_and_real_cost(self, traj: FrenetTrajectory) -> float:
        """
        Synthesize the trajectory of a lattice cell on its first request and queue it as a
        candidate. Later requests return the memoized final cost.
        """
        if traj.is_generated:
            return traj.final_cost

        setting = self._cycle_setting
        traj.is_generated = True
        self.stats.num_trajs_generated += 1

        num_samples = int(traj.end_state.T / setting.tick_t + 1e-9) + 1
        traj.t = np.arange(num_samples) * setting.tick_t

        # lateral quintic polynomial
        lat_qp = QuinticPolynomial.from_states(self.start_state, traj.end_state)
        traj.d = lat_qp.calc_point(traj.t)
        traj.d_d = lat_qp.calc_first_derivative(traj.t)
        traj.d_dd = lat_qp.calc_second_derivative(traj.t)
        traj.d_ddd = lat_qp.calc_third_derivative(traj.t)

        # longitudinal quartic polynomial
        lon_qp = QuarticPolynomial.from_states(self.start_state, traj.end_state)
        traj.s = lon_qp.calc_point(traj.t)
        traj.s_d = lon_qp.calc_first_derivative(traj.t)
        traj.s_dd = lon_qp.calc_second_derivative(traj.t)
        traj.s_ddd = lon_qp.calc_third_derivative(traj.t)

        jerk_d = float(np.sum(np.power(traj.d_ddd, 2)))
        jerk_s = float(np.sum(np.power(traj.s_ddd, 2)))
        traj.dyn_cost = setting.k_jerk * (setting.k_lon * jerk_s + setting.k_lat * jerk_d)
        traj.final_cost = traj.fix_cost + traj.dyn_cost

        self.push_candidate(traj)
        return traj.final_cost

    def push_candidate(self, traj: FrenetTrajectory):
        # the counter keeps equal costs in insertion order
        heapq.heappush(self._candidate_trajs, (traj.final_cost, next(self._counter), traj))

    def pop_candidate(self) -> FrenetTrajectory:
        return heapq.heappop(self._candidate_trajs)[-1]

    @property
    def num_candidates(self):
        return len(self._candidate_trajs)

    @staticmethod
    def convert_to_global_frame(traj: FrenetTrajectory, reference_line: ReferenceLine):
        traj.x, traj.y, traj.yaw, traj.ds, traj.c = convert_frenet_global(traj.s, traj.d, reference_line.course_csp)
        return traj

    def check_constraints(self, traj: FrenetTrajectory) -> bool:
        """
        Checks whether a trajectory satisfies the speed, acceleration and curvature limits.
        """
        setting = self._cycle_setting
        passed = traj.num_global_samples >= 2
        if not passed:
            logger.debug("Condition 0: Less than 2 legal samples in %s", traj)

        for i in range(traj.num_global_samples if passed else 0):
            if not (math.isfinite(traj.x[i]) and math.isfinite(traj.y[i])):
                logger.debug("Condition 0: Contains illegal values")
                passed = False
            elif traj.s_d[i] > setting.max_speed:
                logger.debug("Condition 1: Exceeded max speed")
                passed = False
            elif traj.s_dd[i] > setting.max_accel or traj.s_dd[i] < setting.max_decel:
                logger.debug("Condition 2: Exceeded max acceleration")
                passed = False
            elif abs(traj.c[i]) > setting.max_curvature:
                logger.debug("Condition 3: Exceeded max curvature %.4f, got %.4f", setting.max_curvature, traj.c[i])
                passed = False
            if not passed:
                break

        traj.constraint_passed = passed
        return passed

    def check_collisions(self, traj: FrenetTrajectory, obstacle_trajs: List[ObstaclePrediction],
                         executor: Optional[Executor] = None) -> bool:
        """
        Collision check of one candidate, optionally run on the executor and joined right away.
        """
        if executor is not None:
            passed, num_checks = executor.submit(self.check_traj_collision, traj, obstacle_trajs).result()
        else:
            passed, num_checks = self.check_traj_collision(traj, obstacle_trajs)

        self.stats.num_collision_checks += num_checks
        traj.collision_passed = passed
        return passed

    def check_traj_collision(self, ego_traj: FrenetTrajectory, obstacle_trajs: List[ObstaclePrediction]):
        """
        Check for collisions at each time step between ego and every predicted obstacle.
        :return: (False at the first overlap found else True, number of rectangle pairs checked)
        """
        setting = self._cycle_setting
        num_checks = 0
        for obstacle_traj in obstacle_trajs:
            obstacle = obstacle_traj.obstacle
            num_steps = min(ego_traj.num_global_samples, len(obstacle_traj))
            for j in range(num_steps):
                num_checks += 1
                ego_yaw = ego_traj.yaw[j]
                ego_rect = construct_rectangle(ego_traj.x[j] + _VEHICLE_LR * math.cos(ego_yaw),
                                               ego_traj.y[j] + _VEHICLE_LR * math.sin(ego_yaw),
                                               ego_yaw, setting.vehicle_length, setting.vehicle_width)
                obstacle_rect = construct_rectangle(obstacle_traj.x[j], obstacle_traj.y[j], obstacle_traj.yaw[j],
                                                    obstacle.length, obstacle.width,
                                                    setting.safety_margin_lon, setting.safety_margin_lat)
                if check_collision(ego_rect, obstacle_rect):
                    logger.debug("Collision with %s at step %d", obstacle, j)
                    return False, num_checks

        return True, num_checks
