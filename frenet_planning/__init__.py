from frenet_planning.frenet_generation import FrenetPlanner, PlanningStats
from frenet_planning.lattice import CandidateLattice, LatticeSearch
from frenet_planning.object.config import Setting, load_setting
from frenet_planning.object.obstacle import Obstacle, ObstaclePrediction
from frenet_planning.object.reference_line import ReferenceLine
from frenet_planning.object.vehicle_state import FrenetState, VehicleState
from frenet_planning.utils.frenet_utils import FrenetTrajectory
