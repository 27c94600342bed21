import numpy as np

from frenet_planning.object.vehicle_state import FrenetState


class FrenetTrajectory(object):
    """
    One cell of the candidate lattice and, once materialized, its time-sampled trajectory.
    """
    def __init__(self, idx, end_state: FrenetState, fix_cost: float, hur_cost: float):
        self.idx = idx                  # (i, j, k) position in the lattice
        self.end_state = end_state

        # search flags, each only ever flips from False to True
        self.is_used = False            # visited by the lattice search
        self.is_generated = False       # polynomials sampled and costed

        # cost parameters: fixed (lattice position), heuristic (start index only), dynamic (jerk)
        self.fix_cost = fix_cost
        self.hur_cost = hur_cost
        self.dyn_cost = 0.0
        self.final_cost = 0.0

        self.t = None

        # d--lateral offset relative to centerline
        self.d = None
        self.d_d = None
        self.d_dd = None
        self.d_ddd = None

        # s--arc length along centerline
        self.s = None
        self.s_d = None
        self.s_dd = None
        self.s_ddd = None

        # vehicle's global information
        self.x = None           # global x
        self.y = None           # global y
        self.yaw = None         # heading angle
        self.ds = None          # distance between points
        self.c = None           # curvature

        self.constraint_passed = None
        self.collision_passed = None

    @property
    def est_cost(self):
        return self.fix_cost + self.hur_cost

    @property
    def num_samples(self):
        return 0 if self.t is None else len(self.t)

    @property
    def num_global_samples(self):
        return 0 if self.x is None else len(self.x)

    def get_global_array(self) -> np.ndarray:
        """
        Ground-frame samples as rows of (t, x, y, yaw, curvature, s, s_d, d, d_d).
        """
        n = self.num_global_samples
        return np.column_stack((self.t[:n], self.x, self.y, self.yaw, self.c,
                                self.s[:n], self.s_d[:n], self.d[:n], self.d_d[:n]))

    def __repr__(self) -> str:
        return "FrenetTrajectory(idx=%s, d=%.2f, v=%.2f, T=%.2f, cost=%.3f)" % (
            self.idx, self.end_state.d, self.end_state.s_d, self.end_state.T,
            self.final_cost if self.is_generated else self.est_cost)
