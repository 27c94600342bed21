import logging
from typing import Callable, Iterator, List, Tuple

import numpy as np

from frenet_planning.object.config import Setting
from frenet_planning.object.vehicle_state import FrenetState
from frenet_planning.utils.frenet_utils import FrenetTrajectory

logger = logging.getLogger(__name__)

Index = Tuple[int, int, int]


def sample_axis(low: float, high: float, num: int, single: float) -> np.ndarray:
    """
    num evenly spaced samples over [low, high], or [single] if only one sample is requested.
    """
    if num == 1:
        return np.array([single], dtype=float)
    return np.linspace(low, high, num)


class CandidateLattice(object):
    """
    3D grid of end states over (lateral offset, target speed, horizon), stored as a flat
    row-major list of cells addressed by (i, j, k).
    """

    def __init__(self, setting: Setting, start_state: FrenetState, left_bound: float, right_bound: float,
                 current_speed: float):
        setting.validate()
        if left_bound < right_bound:
            raise ValueError("Left bound {} lies right of the right bound {}".format(left_bound, right_bound))

        self.setting = setting
        self.start_state = start_state
        self.sizes = (setting.num_width, setting.num_speed, setting.num_t)

        self.ds = sample_axis(right_bound, left_bound, setting.num_width, setting.center_offset)
        self.vs = sample_axis(setting.lowest_speed, setting.highest_speed, setting.num_speed, setting.highest_speed)
        self.ts = sample_axis(setting.min_t, setting.max_t, setting.num_t, setting.max_t)

        self.cells: List[FrenetTrajectory] = []
        self.best_idx = None
        self.sample_end_states(left_bound, right_bound, current_speed)

    def sample_end_states(self, left_bound, right_bound, current_speed):
        st = self.setting
        lat_norm = max((left_bound - st.center_offset) ** 2, (right_bound - st.center_offset) ** 2)
        if lat_norm == 0.0:
            lat_norm = 1.0

        min_cost = np.inf
        for i, d in enumerate(self.ds):
            lat_cost = (d - st.center_offset) ** 2 / lat_norm
            for j, v in enumerate(self.vs):
                speed_cost = (st.highest_speed - v) ** 2 + 0.5 * (current_speed - v) ** 2
                for k, T in enumerate(self.ts):
                    end_state = FrenetState(s=0.0, s_d=float(v), s_dd=0.0, d=float(d), d_d=0.0, d_dd=0.0, T=float(T))

                    # Planning horizon cost (encourage longer planning horizon)
                    time_cost = 1.0 - T / st.max_t
                    fix_cost = st.k_lat * st.k_diff * lat_cost \
                        + st.k_lon * (st.k_time * time_cost + st.k_diff * speed_cost)
                    # Heuristic: lateral distance to travel from the current offset
                    hur_cost = st.k_lat * st.k_diff * (self.start_state.d - d) ** 2

                    cell = FrenetTrajectory((i, j, k), end_state, fix_cost, hur_cost)
                    # strict comparison keeps the first cell in scan order on ties
                    if cell.est_cost < min_cost:
                        min_cost = cell.est_cost
                        self.best_idx = (i, j, k)
                    self.cells.append(cell)

    def linear_index(self, idx: Index) -> int:
        i, j, k = idx
        return (i * self.sizes[1] + j) * self.sizes[2] + k

    def contains(self, idx: Index) -> bool:
        return all(0 <= idx[dim] < self.sizes[dim] for dim in range(3))

    def __getitem__(self, idx: Index) -> FrenetTrajectory:
        if not self.contains(idx):
            raise IndexError("Lattice index {} out of range {}".format(idx, self.sizes))
        return self.cells[self.linear_index(idx)]

    def __len__(self):
        return len(self.cells)

    def __iter__(self) -> Iterator[FrenetTrajectory]:
        return iter(self.cells)


class LatticeSearch(object):
    """
    Steepest coordinate descent over a CandidateLattice.

    Costs are obtained through get_cost, which is expected to materialize a cell on its first
    request and return the memoized final cost afterwards. The search stops once it steps onto
    a cell it has already visited, which is a local minimum of the lattice.

    At most one cell is visited per iteration, so at most len(lattice) cells are visited.
    num_iter also counts the last iteration, which only detects the revisit.
    """

    def __init__(self, lattice: CandidateLattice, get_cost: Callable[[FrenetTrajectory], float]):
        self.lattice = lattice
        self.get_cost = get_cost
        self.num_iter = 0
        self.visited: List[Index] = []

    def run(self) -> Index:
        idx = self.lattice.best_idx
        converged = False
        while not converged:
            converged, idx = self.find_next_best(idx)
            self.num_iter += 1
        logger.debug("Lattice search converged at %s in %d iterations", idx, self.num_iter)
        return idx

    def find_next_best(self, idx: Index):
        """
        :return: (converged, next index)
        """
        cell = self.lattice[idx]
        if cell.is_used:
            return True, idx

        cell.is_used = True
        self.visited.append(idx)
        gradients = self.find_gradients(idx)

        grad_dim = int(np.argmax(np.abs(gradients)))
        max_grad = gradients[grad_dim]
        if max_grad == 0.0:
            # flat in every direction, stay here and converge on the next iteration
            return False, idx

        # move against the gradient, towards lower cost
        next_idx = list(idx)
        next_idx[grad_dim] += -1 if max_grad > 0 else 1
        return False, tuple(next_idx)

    def find_direction(self, idx: Index) -> Index:
        """
        +1 where a forward neighbor exists, -1 at the upper edge of the lattice.
        """
        return tuple(-1 if idx[dim] >= self.lattice.sizes[dim] - 1 else 1 for dim in range(3))

    def find_gradients(self, idx: Index) -> np.ndarray:
        sizes = self.lattice.sizes
        directions = self.find_direction(idx)
        cost_center = self.get_cost(self.lattice[idx])

        gradients = np.zeros(3)
        for dim in range(3):
            if sizes[dim] == 1:
                continue
            next_idx = list(idx)
            next_idx[dim] += directions[dim]
            cost_next = self.get_cost(self.lattice[tuple(next_idx)])

            if directions[dim] > 0:
                gradients[dim] = cost_next - cost_center
                # no neighbor below to move to
                if gradients[dim] >= 0 and idx[dim] == 0:
                    gradients[dim] = 0.0
            else:
                gradients[dim] = cost_center - cost_next
                # no neighbor above to move to
                if gradients[dim] <= 0 and idx[dim] == sizes[dim] - 1:
                    gradients[dim] = 0.0

        return gradients
