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

"""Result container returned by trajectory optimizers."""

from dataclasses import dataclass, field
from typing import Any, Dict

from jax import Array

from chompax.core.types import SolverStatus
from chompax.utils.waypoints import unflatten


@dataclass
class OptimizationResult:
    """Outcome of one optimizer step or a bounded sequence of steps.

    Costs are evaluated at the returned trajectory; the gradient norm is
    that of the last gradient used for an update.

    Attributes:
        xi: Updated flat trajectory of shape (nq * cdim,).
        obj: Smoothness cost plus weighted obstacle cost.
        smoothness_cost: Smoothness cost of xi.
        obstacle_cost: Unweighted obstacle cost of xi.
        gradient_norm: Norm of the last total gradient.
        step_norm: Norm of the last update applied to xi.
        iterations: Number of updates applied.
        status: Solver status.
        info: Solver-specific information, e.g. 'solver', 'metric_key'.

    Example:
        >>> result = optimizer.step(trajectory, obstacles)
        >>> print(f"cost {result.obj:.3f} after {result.iterations} step")
    """

    xi: Array
    obj: float
    smoothness_cost: float
    obstacle_cost: float
    gradient_norm: float
    step_norm: float
    iterations: int
    status: SolverStatus = SolverStatus.UNKNOWN
    info: Dict[str, Any] = field(default_factory=dict)

    @property
    def converged(self) -> bool:
        """Return True if the step norm fell below tolerance."""
        return self.status == SolverStatus.CONVERGED

    def waypoints(self, cdim: int) -> Array:
        """Return xi as an (nq, cdim) array."""
        return unflatten(self.xi, cdim)
