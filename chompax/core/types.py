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

"""Type definitions and error kinds for CHOMP trajectory optimization."""

from __future__ import annotations

from enum import Enum, auto
from typing import Protocol, Tuple

from jax import Array


# Type aliases for common shapes
# Configuration: (cdim,) array
# FlatTrajectory: (nq * cdim,) array, waypoint i at [i*cdim, (i+1)*cdim)
# Waypoints: (nq, cdim) array
# ObstacleColumns: (3, k) array, column j is (x, y, radius)

Configuration = Array
FlatTrajectory = Array
ObstacleColumns = Array

# Rows of (x, y, radius) accepted wherever an obstacle list is expected.
ObstacleRow = Tuple[float, float, float]

# (nq, cdim, dt) identifying one smoothness metric.
MetricKey = Tuple[int, int, float]


class SolverStatus(Enum):
    """Status codes for trajectory optimizers."""
    STEPPED = auto()          # Took the requested single step
    CONVERGED = auto()        # Step norm fell below tolerance
    MAX_ITERATIONS = auto()   # Reached maximum iterations
    UNKNOWN = auto()          # Unknown status


class ChompError(Exception):
    """Base class for errors raised by chompax."""


class DimensionError(ChompError, ValueError):
    """A configuration or trajectory vector has the wrong length."""


class SingularMetricError(ChompError, ValueError):
    """The smoothness metric cannot be built (empty trajectory)."""


class PotentialFn(Protocol):
    """Protocol for workspace obstacle potentials.

    Signature: potential(depth) -> (cost, dcost_ddist)

    Args:
        depth: Penetration depth max(0, radius + margin - distance),
            shape (nq, k).

    Returns:
        cost: Potential value, shape (nq, k). Zero where depth is zero.
        dcost_ddist: Derivative of the cost with respect to the distance
            from the obstacle center, shape (nq, k). Non-positive.
    """
    def __call__(self, depth: Array) -> Tuple[Array, Array]:
        ...
