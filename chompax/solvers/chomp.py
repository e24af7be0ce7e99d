# Copyright 2024 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Covariant Hamiltonian Optimization for Motion Planning (CHOMP).

CHOMP improves a discretized trajectory by covariant gradient descent:
the gradient of smoothness plus weighted obstacle cost is preconditioned
by the inverse of the smoothness metric A, so an update spreads a local
push smoothly over the whole trajectory instead of moving single waypoints.
"""

from typing import Any, Dict, Optional

import numpy as np

from chompax.core.obstacles import ObstacleLike
from chompax.core.trajectory import Trajectory
from chompax.solvers.base import TrajectoryOptimizerBase
from chompax.solvers.config import ChompConfig


class ChompOptimizer(TrajectoryOptimizerBase):
    """Covariant gradient descent on smoothness plus obstacle cost.

    Each update computes

        g = nabla_smooth + lambda * nabla_obs
        xi <- xi - (1 / eta) * A^-1 g

    where A^-1 g is a Cholesky solve with the factor cached alongside the
    memoized metric. Without obstacles one update moves xi a fraction
    1 / eta of the way to the straight line, so the smoothness cost decreases
    monotonically for any eta > 1/2.

    Attributes:
        name: "chomp"
        covariant: True

    Example:
        >>> optimizer = ChompOptimizer(eta=100.0, obstacle_weight=0.1)
        >>> trajectory = Trajectory.zeros([-5., -5.], [7., 7.], nq=20)
        >>> obstacles = ObstacleSet([(3., 0., 2.), (0., 3., 2.)])
        >>> result = optimizer.step(trajectory, obstacles)  # once per tick
        >>> result = optimizer.optimize(trajectory, obstacles, {'maxiter': 500})
    """

    name = "chomp"
    covariant = True

    def __init__(
        self,
        eta: float = 100.0,
        obstacle_weight: float = 0.1,
        margin: float = 0.0,
        potential: str = 'hinge',
        dt: float = 1.0,
        maxiter: int = 100,
        tol: float = 0.0,
    ):
        """Initialize CHOMP optimizer.

        Args:
            eta: Inverse step size (the update is scaled by 1 / eta).
            obstacle_weight: Weight lambda of the obstacle gradient.
            margin: Safety margin added to every obstacle radius.
            potential: Obstacle potential ('hinge', 'quadratic').
            dt: Time between consecutive waypoints.
            maxiter: Maximum iterations of optimize().
            tol: Stop optimize() once a step norm is <= tol.
        """
        super().__init__(
            eta=eta,
            obstacle_weight=obstacle_weight,
            margin=margin,
            potential=potential,
            dt=dt,
            maxiter=maxiter,
            tol=tol,
        )

    @classmethod
    def from_config(cls, config: ChompConfig) -> 'ChompOptimizer':
        """Create an optimizer from a ChompConfig."""
        if config.solver_type != cls.name:
            raise ValueError(
                f"config is for solver '{config.solver_type}', not '{cls.name}'"
            )
        return cls(**config.to_dict())

    def _step_size(self, options: Dict[str, Any]) -> float:
        eta = float(options.get('eta', 100.0))
        if eta <= 0:
            raise ValueError(f"eta must be > 0, got {eta}")
        return 1.0 / eta


def run_chomp(
    start,
    goal,
    trajectory,
    obstacles: ObstacleLike = None,
    config: Optional[ChompConfig] = None,
):
    """Advance a trajectory by one CHOMP step.

    This is the per-tick entry point for a driver that keeps start, goal,
    waypoints and obstacles itself. Calling it repeatedly continues the
    descent; start, goal and obstacles are never modified.

    Args:
        start: Start configuration (cdim,).
        goal: Goal configuration (cdim,).
        trajectory: Waypoints to update. A Trajectory gets its xi
            replaced, a writable NumPy array of shape (nq * cdim,) or
            (nq, cdim) is overwritten in place, and any other array
            (JAX arrays are immutable) is left alone.
        obstacles: ObstacleSet, (3, k) columns, (x, y, r) rows or None.
        config: Solver configuration. Defaults to ChompConfig().

    Returns:
        The Trajectory or NumPy array that was passed in, updated; for
        other inputs the new flat trajectory.

    Raises:
        DimensionError: If start, goal and trajectory sizes disagree.
        SingularMetricError: If the trajectory has no waypoints.
    """
    optimizer = ChompOptimizer.from_config(config or ChompConfig())

    if isinstance(trajectory, Trajectory):
        work = Trajectory(start=start, goal=goal, xi=trajectory.xi)
        optimizer.step(work, obstacles)
        trajectory.xi = work.xi
        return trajectory

    work = Trajectory(start=start, goal=goal, xi=trajectory)
    optimizer.step(work, obstacles)
    if isinstance(trajectory, np.ndarray) and trajectory.flags.writeable:
        np.copyto(trajectory, np.asarray(work.xi).reshape(trajectory.shape))
        return trajectory
    return work.xi
