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

"""Conversions between configurations, flat trajectories and waypoints.

A trajectory of ``nq`` waypoints in a ``cdim``-dimensional configuration
space is stored as one flat vector ``xi`` of length ``nq * cdim``. Waypoint
``i`` occupies the slice ``xi[i * cdim:(i + 1) * cdim]``.
"""

from typing import Optional

import jax.numpy as jnp
from jax import Array

from chompax.core.types import DimensionError, SingularMetricError


def _as_float_array(value) -> Array:
    arr = jnp.asarray(value)
    if not jnp.issubdtype(arr.dtype, jnp.floating):
        arr = arr.astype(jnp.result_type(float))
    return arr


def as_configuration(
    value,
    cdim: Optional[int] = None,
    name: str = "configuration",
) -> Array:
    """Convert value to a configuration vector.

    Args:
        value: Array-like of shape (cdim,).
        cdim: Expected dimension. If None, any non-empty length is accepted.
        name: Name used in error messages.

    Returns:
        Float array of shape (cdim,).

    Raises:
        DimensionError: If value is not a vector of the expected length.
    """
    arr = _as_float_array(value)
    if arr.ndim != 1 or arr.shape[0] == 0:
        raise DimensionError(
            f"{name} must be a non-empty vector, got shape {arr.shape}"
        )
    if cdim is not None and arr.shape[0] != cdim:
        raise DimensionError(
            f"{name} has {arr.shape[0]} components (but needs {cdim})"
        )
    return arr


def as_flat_trajectory(value, cdim: int) -> Array:
    """Convert value to a flat trajectory vector of length nq * cdim.

    Accepts either a flat vector or an (nq, cdim) waypoint array.

    Raises:
        DimensionError: If the length is not a multiple of cdim.
        SingularMetricError: If the trajectory has no waypoints.
    """
    arr = _as_float_array(value)
    if arr.ndim == 2:
        if arr.shape[1] != cdim:
            raise DimensionError(
                f"waypoints have {arr.shape[1]} components (but need {cdim})"
            )
        arr = arr.reshape(-1)
    if arr.ndim != 1:
        raise DimensionError(
            f"trajectory must be a flat vector, got shape {arr.shape}"
        )
    if arr.shape[0] % cdim != 0:
        raise DimensionError(
            f"trajectory length {arr.shape[0]} is not a multiple of cdim={cdim}"
        )
    if arr.shape[0] == 0:
        raise SingularMetricError("trajectory has no waypoints (nq == 0)")
    return arr


def unflatten(xi: Array, cdim: int) -> Array:
    """Reshape a flat trajectory to (nq, cdim) waypoints."""
    return jnp.reshape(xi, (-1, cdim))


def straight_line(start: Array, goal: Array, nq: int) -> Array:
    """Evenly spaced interior waypoints on the segment start -> goal.

    Args:
        start: Start configuration (cdim,).
        goal: Goal configuration (cdim,).
        nq: Number of interior waypoints.

    Returns:
        Flat trajectory of shape (nq * cdim,). The endpoints themselves are
        not included.
    """
    s = jnp.arange(1, nq + 1, dtype=start.dtype) / (nq + 1)
    return (start[None, :] + s[:, None] * (goal - start)[None, :]).reshape(-1)


def stack_path(start: Array, xi: Array, goal: Array) -> Array:
    """Stack start, waypoints and goal into an (nq + 2, cdim) array."""
    cdim = start.shape[0]
    return jnp.vstack([start[None, :], unflatten(xi, cdim), goal[None, :]])


def segment_lengths_squared(start: Array, goal: Array, xi: Array) -> Array:
    """Mean squared distance between consecutive configurations.

    The average runs over the nq + 1 segments start -> q_1 -> ... -> goal.
    """
    path = stack_path(start, xi, goal)
    steps = jnp.diff(path, axis=0)
    return jnp.mean(jnp.sum(steps ** 2, axis=-1))
