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

"""Smoothness cost and the covariant metric of CHOMP.

The trajectory start -> q_1 -> ... -> q_nq -> goal has nq + 1 segments.
Their forward-difference velocities are stacked as D xi + b, where D maps
the interior waypoints and b carries the fixed start and goal:

    cost(xi) = 0.5 * ||D xi + b||^2
    grad(xi) = A xi + D' b,    A = D' D

D is scaled by 1 / (dt * sqrt(nq + 1)), so the cost is the mean squared
velocity over the segments. A is block tridiagonal with 2 I on the diagonal
and -I off the diagonal (times 1 / (dt^2 (nq + 1))). Pinning both ends
makes it symmetric positive definite for any nq >= 1.

The first-order scheme biases waypoints toward drifting from start to goal
near the boundaries. That is a known limitation of this discretization.
"""

import functools
from dataclasses import dataclass

import jax.numpy as jnp
from jax import Array

from chompax.core.types import DimensionError, MetricKey, SingularMetricError
from chompax.utils.linalg import cholesky, kron_identity, solve_cholesky


@dataclass(frozen=True, eq=False)
class SmoothnessMetric:
    """Finite-difference operator and metric for a fixed (nq, cdim, dt).

    Instances are memoized by get_metric() and must be treated as
    read-only. They depend only on the trajectory size, never on start,
    goal or obstacle values. Equality and hashing go through the key, so a
    metric can be passed to jitted functions as a static argument.

    Attributes:
        nq: Number of interior waypoints.
        cdim: Configuration space dimension.
        dt: Time between consecutive waypoints.
        D: Difference operator of shape ((nq + 1) * cdim, nq * cdim).
        A: Metric D' D of shape (nq * cdim, nq * cdim).
        factor: Lower Cholesky factor of A.
    """

    nq: int
    cdim: int
    dt: float
    D: Array
    A: Array
    factor: Array

    @property
    def key(self) -> MetricKey:
        return (self.nq, self.cdim, self.dt)

    def __hash__(self):
        return hash(self.key)

    def __eq__(self, other):
        if not isinstance(other, SmoothnessMetric):
            return NotImplemented
        return self.key == other.key

    @property
    def scale(self) -> float:
        """Factor applied to raw waypoint differences."""
        return 1.0 / (self.dt * (self.nq + 1) ** 0.5)

    def solve(self, g: Array) -> Array:
        """Return A^-1 g through the cached Cholesky factor."""
        return solve_cholesky(self.factor, g)


def difference_matrix(nq: int) -> Array:
    """Unscaled (nq + 1, nq) forward-difference matrix over segments.

    Row s is the difference q_{s+1} - q_s restricted to interior waypoints:
    +1 on the diagonal and -1 on the sub-diagonal.
    """
    return jnp.eye(nq + 1, nq) - jnp.eye(nq + 1, nq, k=-1)


def get_metric(nq: int, cdim: int, dt: float = 1.0) -> SmoothnessMetric:
    """Build (once) the smoothness metric for a trajectory size.

    Args:
        nq: Number of interior waypoints.
        cdim: Configuration space dimension.
        dt: Time between consecutive waypoints.

    Returns:
        The memoized SmoothnessMetric for (nq, cdim, dt). Repeated calls
        with the same key return the identical object.

    Raises:
        SingularMetricError: If nq < 1.
        DimensionError: If cdim < 1.
        ValueError: If dt is not positive.
    """
    return _build_metric(int(nq), int(cdim), float(dt))


@functools.lru_cache(maxsize=None)
def _build_metric(nq: int, cdim: int, dt: float) -> SmoothnessMetric:
    if nq < 1:
        raise SingularMetricError(
            f"smoothness metric needs at least one waypoint, got nq={nq}"
        )
    if cdim < 1:
        raise DimensionError(f"cdim must be >= 1, got {cdim}")
    if dt <= 0:
        raise ValueError(f"dt must be > 0, got {dt}")

    scale = 1.0 / (dt * (nq + 1) ** 0.5)
    D = scale * kron_identity(difference_matrix(nq), cdim)
    A = D.T @ D
    factor, _ = cholesky(A)
    return SmoothnessMetric(nq=nq, cdim=cdim, dt=dt, D=D, A=A, factor=factor)


def boundary_vector(start: Array, goal: Array, metric: SmoothnessMetric) -> Array:
    """Start and goal contributions b to the segment velocities.

    Returns:
        Vector of shape ((nq + 1) * cdim,) with -start in the first block,
        +goal in the last block and zeros in between.
    """
    interior = jnp.zeros((metric.nq - 1) * metric.cdim, dtype=metric.D.dtype)
    return metric.scale * jnp.concatenate([-start, interior, goal])


def smoothness_cost(
    xi: Array,
    start: Array,
    goal: Array,
    metric: SmoothnessMetric,
) -> Array:
    """Smoothness cost 0.5 * ||D xi + b||^2 (scalar)."""
    v = metric.D @ xi + boundary_vector(start, goal, metric)
    return 0.5 * jnp.sum(v ** 2)


def smoothness_gradient(
    xi: Array,
    start: Array,
    goal: Array,
    metric: SmoothnessMetric,
) -> Array:
    """Gradient A xi + D' b of the smoothness cost, shape (nq * cdim,)."""
    return metric.A @ xi + metric.D.T @ boundary_vector(start, goal, metric)
