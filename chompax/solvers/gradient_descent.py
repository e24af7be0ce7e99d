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

"""Euclidean gradient descent baseline.

Uses the same objective and gradients as CHOMP but with the identity
metric, xi <- xi - alpha * g. Useful to compare against the covariant
update, which converges in far fewer iterations on long trajectories.
"""

from typing import Any, Dict

from chompax.solvers.base import TrajectoryOptimizerBase
from chompax.solvers.config import ChompConfig


class GradientDescentOptimizer(TrajectoryOptimizerBase):
    """Plain gradient descent on smoothness plus obstacle cost.

    Without obstacles the update is stable for alpha < 2 / lambda_max(A),
    and lambda_max(A) < 4 / (dt^2 (nq + 1)).

    Attributes:
        name: "gradient_descent"
        covariant: False
    """

    name = "gradient_descent"
    covariant = False

    def __init__(
        self,
        alpha: float = 1.0,
        obstacle_weight: float = 0.1,
        margin: float = 0.0,
        potential: str = 'hinge',
        dt: float = 1.0,
        maxiter: int = 100,
        tol: float = 0.0,
    ):
        """Initialize gradient descent optimizer.

        Args:
            alpha: Step size.
            obstacle_weight: Weight lambda of the obstacle gradient.
            margin: Safety margin added to every obstacle radius.
            potential: Obstacle potential ('hinge', 'quadratic').
            dt: Time between consecutive waypoints.
            maxiter: Maximum iterations of optimize().
            tol: Stop optimize() once a step norm is <= tol.
        """
        super().__init__(
            alpha=alpha,
            obstacle_weight=obstacle_weight,
            margin=margin,
            potential=potential,
            dt=dt,
            maxiter=maxiter,
            tol=tol,
        )

    @classmethod
    def from_config(cls, config: ChompConfig) -> 'GradientDescentOptimizer':
        """Create an optimizer from a ChompConfig."""
        if config.solver_type != cls.name:
            raise ValueError(
                f"config is for solver '{config.solver_type}', not '{cls.name}'"
            )
        return cls(**config.to_dict())

    def _step_size(self, options: Dict[str, Any]) -> float:
        alpha = float(options.get('alpha', 1.0))
        if alpha <= 0:
            raise ValueError(f"alpha must be > 0, got {alpha}")
        return alpha
