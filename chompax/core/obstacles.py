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

"""Growable set of circular workspace obstacles."""

from typing import Iterable, Iterator, Optional, Union

import jax.numpy as jnp
from jax import Array

from chompax.core.types import DimensionError, ObstacleColumns, ObstacleRow

# Rows per obstacle column: x, y, radius.
OBSTACLE_DIM = 3


def _empty_columns() -> Array:
    return jnp.zeros((OBSTACLE_DIM, 0), dtype=jnp.result_type(float))


class ObstacleSet:
    """Ordered collection of circular obstacles stored as (3, k) columns.

    Obstacles may be appended or have their center moved at any time
    between optimizer calls. The radius is fixed when an obstacle is
    created. Appending reallocates the column array, which is fine for
    the handful of obstacles an interactive session places.

    Example:
        >>> obstacles = ObstacleSet([(3.0, 0.0, 2.0)])
        >>> index = obstacles.add_obstacle(0.0, 3.0, 2.0)
        >>> obstacles.move_obstacle(index, 1.0, 3.0)
        >>> obstacles.columns.shape
        (3, 2)
    """

    def __init__(self, obstacles: Optional[Iterable[ObstacleRow]] = None):
        """Initialize the set.

        Args:
            obstacles: Optional iterable of (x, y, radius) rows.
        """
        self._columns = _empty_columns()
        if obstacles is not None:
            for x, y, radius in obstacles:
                self.add_obstacle(float(x), float(y), float(radius))

    @classmethod
    def from_columns(cls, columns) -> 'ObstacleSet':
        """Create a set from a (3, k) array of (x, y, radius) columns."""
        columns = as_obstacle_columns(columns)
        return cls(tuple(float(v) for v in col) for col in columns.T)

    @property
    def columns(self) -> ObstacleColumns:
        """Obstacle columns of shape (3, k)."""
        return self._columns

    @property
    def centers(self) -> Array:
        """Obstacle centers of shape (k, 2)."""
        return self._columns[:2].T

    @property
    def radii(self) -> Array:
        """Obstacle radii of shape (k,)."""
        return self._columns[2]

    def __len__(self) -> int:
        return self._columns.shape[1]

    def __iter__(self) -> Iterator[Array]:
        return iter(self._columns.T)

    def __getitem__(self, index: int) -> Array:
        """Return obstacle `index` as an (x, y, radius) vector."""
        return self._columns[:, self._check_index(index)]

    def add_obstacle(self, x: float, y: float, radius: float) -> int:
        """Append an obstacle and return its index.

        Raises:
            ValueError: If radius is not positive.
        """
        if not radius > 0:
            raise ValueError(f"obstacle radius must be > 0, got {radius}")
        column = jnp.array([[x], [y], [radius]], dtype=self._columns.dtype)
        self._columns = jnp.concatenate([self._columns, column], axis=1)
        return len(self) - 1

    def move_obstacle(self, index: int, x: float, y: float) -> None:
        """Update the center of an existing obstacle.

        Raises:
            IndexError: If index is out of range.
        """
        index = self._check_index(index)
        self._columns = self._columns.at[:2, index].set(
            jnp.array([x, y], dtype=self._columns.dtype))

    def find_at(self, px: float, py: float) -> Optional[int]:
        """Index of the first obstacle whose disk contains (px, py)."""
        if not len(self):
            return None
        dist = jnp.hypot(self._columns[0] - px, self._columns[1] - py)
        hits = jnp.nonzero(dist <= self._columns[2])[0]
        return int(hits[0]) if hits.size else None

    def copy(self) -> 'ObstacleSet':
        other = ObstacleSet()
        other._columns = self._columns
        return other

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self):
            raise IndexError(
                f"obstacle index {index} out of range for {len(self)} obstacles"
            )
        return index


ObstacleLike = Union[ObstacleSet, Array, Iterable[ObstacleRow], None]


def as_obstacle_columns(obstacles: ObstacleLike) -> ObstacleColumns:
    """Convert obstacle input to a (3, k) column array.

    Accepts an ObstacleSet, a (3, k) array, a sequence of (x, y, radius)
    rows, or None for no obstacles.

    Raises:
        DimensionError: If the input cannot be read as obstacle columns.
    """
    if obstacles is None:
        return _empty_columns()
    if isinstance(obstacles, ObstacleSet):
        return obstacles.columns
    if isinstance(obstacles, (list, tuple)):
        if not obstacles:
            return _empty_columns()
        rows = jnp.asarray(obstacles, dtype=jnp.result_type(float))
        if rows.ndim != 2 or rows.shape[1] != OBSTACLE_DIM:
            raise DimensionError(
                f"obstacle rows must have shape (k, 3), got {rows.shape}"
            )
        return rows.T
    columns = jnp.asarray(obstacles)
    if columns.ndim != 2 or columns.shape[0] != OBSTACLE_DIM:
        raise DimensionError(
            f"obstacle columns must have shape (3, k), got {columns.shape}"
        )
    if not jnp.issubdtype(columns.dtype, jnp.floating):
        columns = columns.astype(jnp.result_type(float))
    return columns
