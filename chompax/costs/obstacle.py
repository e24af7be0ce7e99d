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

"""Obstacle cost and gradient for circular workspace obstacles.

Every waypoint is tested against every obstacle on each call (O(nq * k)).
Nothing is cached, since obstacles may be added or dragged between calls.

Each obstacle influences the disk of radius R + margin around its center.
Inside that disk the cost is a function of the penetration depth
p = R + margin - d, where d is the distance to the center:

    hinge:      c = p          dc/dd = -1
    quadratic:  c = p^2 / 2    dc/dd = -p

The gradient of c with respect to the waypoint is dc/dd times the unit
vector from the center to the waypoint, so a descent step pushes waypoints
radially outward. Outside the disk both cost and gradient are zero.

A waypoint within MIN_DISTANCE of a center has no push direction and gets
a zero gradient. Smoothness alone must move it off the center, so a
symmetric setup (for example nq = 1 with the start, the center and the goal
collinear and equally spaced) leaves it stuck inside the disk.
"""

from typing import Dict, Tuple

import jax.numpy as jnp
from jax import Array

from chompax.core.types import DimensionError, PotentialFn
from chompax.utils.waypoints import unflatten

# Below this distance from a center the push direction is undefined.
MIN_DISTANCE = 1e-9


def hinge_potential(depth: Array) -> Tuple[Array, Array]:
    return depth, -jnp.where(depth > 0, 1.0, 0.0).astype(depth.dtype)


def quadratic_potential(depth: Array) -> Tuple[Array, Array]:
    return 0.5 * depth ** 2, -depth


POTENTIALS: Dict[str, PotentialFn] = {
    'hinge': hinge_potential,
    'quadratic': quadratic_potential,
}


def get_potential(name: str) -> PotentialFn:
    """Look up a potential by name.

    Raises:
        ValueError: If the name is not recognized.
    """
    if name not in POTENTIALS:
        raise ValueError(
            f"Unknown potential: {name}. Available: {list(POTENTIALS)}"
        )
    return POTENTIALS[name]


def obstacle_terms(
    waypoints: Array,
    obstacles: Array,
    margin: float = 0.0,
    potential: str = 'hinge',
) -> Tuple[Array, Array]:
    """Per-waypoint obstacle cost and workspace gradient.

    Args:
        waypoints: Waypoint positions of shape (nq, 2).
        obstacles: Obstacle columns of shape (3, k), each (x, y, radius).
            k may be zero.
        margin: Safety margin added to every radius.
        potential: Name of the potential, see POTENTIALS.

    Returns:
        cost: Summed cost over obstacles for each waypoint, shape (nq,).
        grad: Summed cost gradient for each waypoint, shape (nq, 2).
    """
    potential_fn = get_potential(potential)
    centers = obstacles[:2].T
    radius = obstacles[2] + margin

    delta = waypoints[:, None, :] - centers[None, :, :]
    dist = jnp.sqrt(jnp.sum(delta ** 2, axis=-1))
    depth = jnp.maximum(radius[None, :] - dist, 0.0)

    cost, dcost = potential_fn(depth)
    inside = depth > 0
    cost = jnp.where(inside, cost, 0.0)

    pushing = inside & (dist > MIN_DISTANCE)
    safe_dist = jnp.where(pushing, dist, 1.0)
    grad = jnp.where(
        pushing[..., None],
        dcost[..., None] * delta / safe_dist[..., None],
        0.0,
    )
    return jnp.sum(cost, axis=1), jnp.sum(grad, axis=1)


def check_workspace(cdim: int, obstacles: Array) -> None:
    """Raise DimensionError if obstacles are used outside the plane."""
    if obstacles.ndim != 2 or obstacles.shape[0] != 3:
        raise DimensionError(
            f"obstacles must have shape (3, k), got {obstacles.shape}"
        )
    if obstacles.shape[1] > 0 and cdim != 2:
        raise DimensionError(
            f"circular obstacles need a planar configuration space, got cdim={cdim}"
        )


def obstacle_cost(
    xi: Array,
    obstacles: Array,
    cdim: int = 2,
    margin: float = 0.0,
    potential: str = 'hinge',
) -> Array:
    """Total obstacle cost of a flat trajectory (scalar)."""
    cost, _ = obstacle_terms(unflatten(xi, cdim), obstacles, margin, potential)
    return jnp.sum(cost)


def obstacle_gradient(
    xi: Array,
    obstacles: Array,
    cdim: int = 2,
    margin: float = 0.0,
    potential: str = 'hinge',
) -> Array:
    """Obstacle cost gradient of a flat trajectory, shape (nq * cdim,)."""
    _, grad = obstacle_terms(unflatten(xi, cdim), obstacles, margin, potential)
    return grad.reshape(-1)
