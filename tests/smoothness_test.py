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

"""Tests for the smoothness cost and metric."""

from absl.testing import absltest
from absl.testing import parameterized

import jax
import jax.numpy as jnp
from jax import config
import numpy as np

from chompax.core import DimensionError, SingularMetricError
from chompax.costs import (
    boundary_vector,
    get_metric,
    smoothness_cost,
    smoothness_gradient,
)
from chompax.utils import (
    is_positive_definite,
    kron_identity,
    segment_lengths_squared,
    straight_line,
)

config.update('jax_enable_x64', True)


class MetricTest(parameterized.TestCase):
    """Tests for the finite-difference operator and metric."""

    @parameterized.parameters((1, 1), (4, 2), (20, 2), (5, 3))
    def test_shapes(self, nq, cdim):
        metric = get_metric(nq, cdim)
        self.assertEqual(metric.D.shape, ((nq + 1) * cdim, nq * cdim))
        self.assertEqual(metric.A.shape, (nq * cdim, nq * cdim))
        self.assertEqual(metric.factor.shape, (nq * cdim, nq * cdim))

    def test_tridiagonal_structure(self):
        nq = 4
        metric = get_metric(nq, 1)
        expected = (2.0 * np.eye(nq) - np.eye(nq, k=1) - np.eye(nq, k=-1))
        np.testing.assert_allclose(metric.A, expected / (nq + 1), atol=1e-12)

    def test_block_structure(self):
        """Configuration dimensions must not couple."""
        nq, cdim = 3, 2
        metric = get_metric(nq, cdim)
        scalar = get_metric(nq, 1)
        np.testing.assert_allclose(
            metric.A, kron_identity(scalar.A, cdim), atol=1e-12)

    def test_dt_scaling(self):
        A1 = get_metric(6, 2, 1.0).A
        A2 = get_metric(6, 2, 0.5).A
        np.testing.assert_allclose(A2, 4.0 * A1, rtol=1e-12)

    @parameterized.parameters(1, 2, 7, 20)
    def test_positive_definite(self, nq):
        self.assertTrue(is_positive_definite(get_metric(nq, 2).A))

    def test_memoized(self):
        self.assertIs(get_metric(12, 2), get_metric(12, 2))
        self.assertIs(get_metric(12, 2), get_metric(12, 2, 1.0))
        self.assertIsNot(get_metric(12, 2), get_metric(13, 2))

    def test_hash_by_key(self):
        metric = get_metric(8, 2)
        self.assertEqual(metric.key, (8, 2, 1.0))
        self.assertEqual(hash(metric), hash((8, 2, 1.0)))

    def test_solve(self):
        metric = get_metric(10, 2)
        x = jnp.linspace(-1.0, 1.0, 20)
        np.testing.assert_allclose(metric.solve(metric.A @ x), x, atol=1e-9)

    @parameterized.parameters(0, -3)
    def test_empty_trajectory(self, nq):
        with self.assertRaises(SingularMetricError):
            get_metric(nq, 2)

    def test_bad_cdim(self):
        with self.assertRaises(DimensionError):
            get_metric(4, 0)

    def test_bad_dt(self):
        with self.assertRaises(ValueError):
            get_metric(4, 2, 0.0)

    def test_not_positive_definite(self):
        self.assertFalse(is_positive_definite(jnp.array([[1.0, 2.0], [0.0, 1.0]])))
        self.assertFalse(is_positive_definite(jnp.array([[1.0, 0.0], [0.0, -1.0]])))


class SmoothnessCostTest(parameterized.TestCase):
    """Tests for the smoothness cost and its gradient."""

    def setUp(self):
        super().setUp()
        self.start = jnp.array([-5.0, -5.0])
        self.goal = jnp.array([7.0, 7.0])

    def test_boundary_vector(self):
        metric = get_metric(3, 2)
        b = boundary_vector(self.start, self.goal, metric)
        self.assertEqual(b.shape, (8,))
        np.testing.assert_allclose(b[:2], -metric.scale * self.start)
        np.testing.assert_allclose(b[2:6], 0.0)
        np.testing.assert_allclose(b[6:], metric.scale * self.goal)

    def test_single_waypoint_boundary_vector(self):
        metric = get_metric(1, 2)
        b = boundary_vector(self.start, self.goal, metric)
        self.assertEqual(b.shape, (4,))

    @parameterized.parameters(1.0, 0.25)
    def test_cost_is_mean_squared_velocity(self, dt):
        """0.5 * mean over the nq + 1 segments of |q_{s+1} - q_s|^2 / dt^2."""
        nq = 9
        metric = get_metric(nq, 2, dt)
        xi = jax.random.normal(jax.random.PRNGKey(0), (nq * 2,))
        expected = 0.5 * segment_lengths_squared(self.start, self.goal, xi) / dt**2
        np.testing.assert_allclose(
            smoothness_cost(xi, self.start, self.goal, metric), expected,
            rtol=1e-10)

    @parameterized.parameters(1, 5, 20)
    def test_gradient_matches_autodiff(self, nq):
        metric = get_metric(nq, 2)
        xi = jax.random.uniform(jax.random.PRNGKey(nq), (nq * 2,),
                                minval=-5.0, maxval=5.0)
        auto = jax.grad(smoothness_cost)(xi, self.start, self.goal, metric)
        np.testing.assert_allclose(
            smoothness_gradient(xi, self.start, self.goal, metric), auto,
            atol=1e-10)

    @parameterized.parameters(1, 4, 20)
    def test_straight_line_is_stationary(self, nq):
        metric = get_metric(nq, 2)
        xi = straight_line(self.start, self.goal, nq)
        grad = smoothness_gradient(xi, self.start, self.goal, metric)
        np.testing.assert_allclose(grad, 0.0, atol=1e-10)

    def test_straight_line_is_minimum(self):
        nq = 6
        metric = get_metric(nq, 2)
        xi = straight_line(self.start, self.goal, nq)
        best = smoothness_cost(xi, self.start, self.goal, metric)
        bumped = xi.at[5].add(0.1)
        self.assertGreater(
            float(smoothness_cost(bumped, self.start, self.goal, metric)),
            float(best))


if __name__ == '__main__':
    absltest.main()
