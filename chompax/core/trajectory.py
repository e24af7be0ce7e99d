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

"""Discretized trajectory between a fixed start and goal."""

from dataclasses import dataclass

import jax.numpy as jnp
from jax import Array, random

from chompax.core.types import (
    Configuration,
    FlatTrajectory,
    SingularMetricError,
)
from chompax.utils.waypoints import (
    as_configuration,
    as_flat_trajectory,
    stack_path,
    straight_line,
    unflatten,
)

# Range of the uniform samples drawn by Trajectory.jumble().
JUMBLE_LOW = -5.0
JUMBLE_HIGH = 5.0


@dataclass
class Trajectory:
    """Start, goal and the flat vector of interior waypoints.

    The trajectory holds nq interior configurations of dimension cdim in
    one flat vector xi of length nq * cdim. Waypoint i lives at
    xi[i * cdim:(i + 1) * cdim]. Start and goal anchor the path and are
    never written by an optimizer; optimizers replace xi in place.

    Attributes:
        start: Start configuration of shape (cdim,), a.k.a. q_0.
        goal: Goal configuration of shape (cdim,), a.k.a. q_(nq+1).
        xi: Flat waypoint vector of shape (nq * cdim,). A (nq, cdim)
            array is accepted and flattened.

    Example:
        >>> traj = Trajectory.straight_line([-5., -5.], [7., 7.], nq=20)
        >>> traj.waypoints.shape
        (20, 2)
        >>> traj.set_waypoint(0, [-4.0, -5.0])
    """

    start: Configuration
    goal: Configuration
    xi: FlatTrajectory

    def __post_init__(self):
        """Validate dimensions."""
        self.start = as_configuration(self.start, name="start")
        self.goal = as_configuration(self.goal, self.cdim, name="goal")
        self.xi = as_flat_trajectory(self.xi, self.cdim)

    @classmethod
    def straight_line(cls, start, goal, nq: int) -> 'Trajectory':
        """Trajectory with nq waypoints evenly spaced from start to goal."""
        start = as_configuration(start, name="start")
        goal = as_configuration(goal, start.shape[0], name="goal")
        _check_nq(nq)
        return cls(start=start, goal=goal, xi=straight_line(start, goal, nq))

    @classmethod
    def zeros(cls, start, goal, nq: int) -> 'Trajectory':
        """Trajectory with all nq waypoints at the origin."""
        start = as_configuration(start, name="start")
        _check_nq(nq)
        return cls(start=start, goal=goal,
                   xi=jnp.zeros(nq * start.shape[0], dtype=start.dtype))

    @property
    def cdim(self) -> int:
        """Return the configuration space dimension."""
        return self.start.shape[0]

    @property
    def nq(self) -> int:
        """Return the number of interior waypoints."""
        return self.xi.shape[0] // self.cdim

    @property
    def waypoints(self) -> Array:
        """Interior waypoints as an (nq, cdim) array."""
        return unflatten(self.xi, self.cdim)

    @property
    def path(self) -> Array:
        """Start, waypoints and goal stacked as an (nq + 2, cdim) array."""
        return stack_path(self.start, self.xi, self.goal)

    def set_endpoints(self, start, goal) -> None:
        """Replace start and goal.

        Raises:
            DimensionError: If either does not have exactly cdim components.
        """
        start = as_configuration(start, self.cdim, name="start")
        goal = as_configuration(goal, self.cdim, name="goal")
        self.start, self.goal = start, goal

    def get_waypoint(self, i: int) -> Configuration:
        """Return waypoint i as a (cdim,) array.

        Raises:
            IndexError: If i is not in [0, nq).
        """
        i = self._check_index(i)
        return self.xi[i * self.cdim:(i + 1) * self.cdim]

    def set_waypoint(self, i: int, config) -> None:
        """Overwrite waypoint i.

        Raises:
            IndexError: If i is not in [0, nq).
            DimensionError: If config does not have cdim components.
        """
        i = self._check_index(i)
        config = as_configuration(config, self.cdim, name="waypoint")
        self.xi = self.xi.at[i * self.cdim:(i + 1) * self.cdim].set(
            config.astype(self.xi.dtype))

    def resize(self, nq: int) -> None:
        """Reallocate xi for nq waypoints.

        The new content is the straight line between start and goal; no
        part of the previous trajectory is kept. Optimizers key their
        smoothness metric on nq, so the next step uses a fresh one.

        Raises:
            SingularMetricError: If nq < 1.
        """
        _check_nq(nq)
        self.xi = straight_line(self.start, self.goal, nq).astype(self.xi.dtype)

    def jumble(self, seed: int = 0) -> None:
        """Replace every coordinate of xi with a uniform sample in [-5, 5)."""
        key = random.PRNGKey(seed)
        self.xi = random.uniform(
            key, self.xi.shape, dtype=self.xi.dtype,
            minval=JUMBLE_LOW, maxval=JUMBLE_HIGH,
        )

    def _check_index(self, i: int) -> int:
        if not 0 <= i < self.nq:
            raise IndexError(
                f"waypoint index {i} out of range for nq={self.nq}"
            )
        return i


def _check_nq(nq: int) -> None:
    if nq < 1:
        raise SingularMetricError(
            f"trajectory needs at least one waypoint, got nq={nq}"
        )
