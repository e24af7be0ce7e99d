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

"""Tests for the obstacle cost and gradient."""

from absl.testing import absltest
from absl.testing import parameterized

import jax
import jax.numpy as jnp
from jax import config
import numpy as np

from chompax.core import DimensionError
from chompax.costs import (
    get_potential,
    obstacle_cost,
    obstacle_gradient,
    obstacle_terms,
)
from chompax.costs.obstacle import check_workspace

config.update('jax_enable_x64', True)

# One obstacle at (3, 0) with radius 2.
SINGLE = jnp.array([[3.0], [0.0], [2.0]])
EMPTY = jnp.zeros((3, 0))


class PointCostTest(parameterized.TestCase):
    """Cost and gradient at hand-computed points."""

    @parameterized.parameters('hinge', 'quadratic')
    def test_zero_outside(self, potential):
        waypoints = jnp.array([[6.0, 0.0], [3.0, 5.0], [-10.0, -10.0]])
        cost, grad = obstacle_terms(waypoints, SINGLE, potential=potential)
        np.testing.assert_array_equal(cost, 0.0)
        np.testing.assert_array_equal(grad, 0.0)

    def test_hinge_at_center(self):
        """Full radius of cost at the center, with no push direction."""
        cost, grad = obstacle_terms(jnp.array([[3.0, 0.0]]), SINGLE)
        np.testing.assert_allclose(cost, [2.0])
        np.testing.assert_array_equal(grad, 0.0)

    @parameterized.named_parameters(
        ('hinge', 'hinge', 1.0, -1.0),
        ('quadratic', 'quadratic', 0.5, -1.0),
    )
    def test_depth_one(self, potential, expected_cost, expected_slope):
        """Waypoint (4, 0) is one unit inside the obstacle."""
        cost, grad = obstacle_terms(
            jnp.array([[4.0, 0.0]]), SINGLE, potential=potential)
        np.testing.assert_allclose(cost, [expected_cost])
        np.testing.assert_allclose(grad, [[expected_slope, 0.0]])

    def test_gradient_points_toward_center(self):
        """Descending the gradient moves the waypoint radially outward."""
        waypoint = jnp.array([[3.6, 0.8]])
        _, grad = obstacle_terms(waypoint, SINGLE)
        outward = (waypoint[0] - SINGLE[:2, 0]) / 1.0
        np.testing.assert_allclose(grad[0], -outward, atol=1e-12)

    def test_margin_widens_disk(self):
        waypoint = jnp.array([[5.5, 0.0]])
        cost, _ = obstacle_terms(waypoint, SINGLE)
        np.testing.assert_array_equal(cost, 0.0)
        cost, grad = obstacle_terms(waypoint, SINGLE, margin=1.0)
        np.testing.assert_allclose(cost, [0.5])
        np.testing.assert_allclose(grad, [[-1.0, 0.0]])

    def test_contributions_add(self):
        obstacles = jnp.array([[3.0, 0.0], [0.0, 3.0], [2.5, 2.5]])
        waypoint = jnp.array([[1.0, 1.0]])
        cost, grad = obstacle_terms(waypoint, obstacles)
        depth = 2.5 - jnp.sqrt(5.0)
        np.testing.assert_allclose(cost, [2.0 * depth])
        # Pushes away from (3, 0) and (0, 3) sum to (1, 1) / sqrt(5).
        np.testing.assert_allclose(grad[0], jnp.ones(2) / jnp.sqrt(5.0))

    def test_unknown_potential(self):
        with self.assertRaises(ValueError):
            get_potential('gaussian')


class TrajectoryCostTest(parameterized.TestCase):
    """Costs over flat trajectories."""

    def test_empty_obstacles(self):
        xi = jnp.arange(10.0)
        self.assertEqual(float(obstacle_cost(xi, EMPTY)), 0.0)
        grad = obstacle_gradient(xi, EMPTY)
        self.assertEqual(grad.shape, (10,))
        np.testing.assert_array_equal(grad, 0.0)

    def test_flat_layout(self):
        xi = jnp.array([10.0, 10.0, 4.0, 0.0, 10.0, 10.0])
        grad = obstacle_gradient(xi, SINGLE)
        np.testing.assert_allclose(grad, [0.0, 0.0, -1.0, 0.0, 0.0, 0.0])
        self.assertAlmostEqual(float(obstacle_cost(xi, SINGLE)), 1.0)

    @parameterized.parameters('hinge', 'quadratic')
    def test_gradient_matches_autodiff(self, potential):
        obstacles = jnp.array([[3.0, 0.0], [0.0, 3.0], [2.0, 2.0]])
        # Waypoints inside, outside and in the overlap, none on a boundary.
        xi = jnp.array([3.5, 0.7, 0.4, 2.1, 1.2, 1.1, -4.0, -4.0, 2.2, 0.3])
        auto = jax.grad(obstacle_cost)(xi, obstacles, 2, 0.25, potential)
        np.testing.assert_allclose(
            obstacle_gradient(xi, obstacles, margin=0.25, potential=potential),
            auto, atol=1e-10)

    def test_workspace_check(self):
        check_workspace(2, SINGLE)
        check_workspace(3, EMPTY)
        with self.assertRaises(DimensionError):
            check_workspace(3, SINGLE)
        with self.assertRaises(DimensionError):
            check_workspace(2, jnp.zeros((2, 1)))


if __name__ == '__main__':
    absltest.main()
