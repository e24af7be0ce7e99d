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

"""Tests for the trajectory model."""

from absl.testing import absltest
from absl.testing import parameterized

import jax.numpy as jnp
from jax import config
import numpy as np

from chompax.core import DimensionError, SingularMetricError, Trajectory

config.update('jax_enable_x64', True)


class TrajectoryConstructionTest(parameterized.TestCase):
    """Tests for creating trajectories."""

    def test_straight_line_spacing(self):
        """Waypoints should be evenly spaced strictly between start and goal."""
        traj = Trajectory.straight_line([0.0, 0.0], [10.0, 0.0], nq=9)
        self.assertEqual(traj.nq, 9)
        self.assertEqual(traj.cdim, 2)
        self.assertEqual(traj.xi.shape, (18,))
        np.testing.assert_allclose(traj.waypoints[:, 0], np.arange(1.0, 10.0))
        np.testing.assert_allclose(traj.waypoints[:, 1], 0.0)

    def test_zeros_seed(self):
        traj = Trajectory.zeros([-5.0, -5.0], [7.0, 7.0], nq=20)
        self.assertEqual(traj.xi.shape, (40,))
        self.assertTrue(jnp.all(traj.xi == 0.0))

    def test_accepts_waypoint_array(self):
        """An (nq, cdim) array should be flattened row by row."""
        waypoints = jnp.array([[1.0, 2.0], [3.0, 4.0]])
        traj = Trajectory(start=[0.0, 0.0], goal=[5.0, 5.0], xi=waypoints)
        np.testing.assert_array_equal(traj.xi, [1.0, 2.0, 3.0, 4.0])

    def test_integer_input_promoted_to_float(self):
        traj = Trajectory.straight_line([0, 0], [4, 4], nq=3)
        self.assertTrue(jnp.issubdtype(traj.start.dtype, jnp.floating))
        self.assertTrue(jnp.issubdtype(traj.xi.dtype, jnp.floating))

    def test_path_includes_endpoints(self):
        traj = Trajectory.straight_line([0.0, 0.0], [3.0, 3.0], nq=2)
        path = traj.path
        self.assertEqual(path.shape, (4, 2))
        np.testing.assert_array_equal(path[0], traj.start)
        np.testing.assert_array_equal(path[-1], traj.goal)

    def test_goal_dimension_mismatch(self):
        with self.assertRaises(DimensionError):
            Trajectory(start=[0.0, 0.0], goal=[1.0, 1.0, 1.0], xi=jnp.zeros(4))

    def test_length_not_multiple_of_cdim(self):
        with self.assertRaises(DimensionError):
            Trajectory(start=[0.0, 0.0], goal=[1.0, 1.0], xi=jnp.zeros(5))

    @parameterized.parameters(0, -1)
    def test_empty_trajectory_rejected(self, nq):
        with self.assertRaises(SingularMetricError):
            Trajectory.straight_line([0.0, 0.0], [1.0, 1.0], nq=nq)

    def test_empty_xi_rejected(self):
        with self.assertRaises(SingularMetricError):
            Trajectory(start=[0.0, 0.0], goal=[1.0, 1.0], xi=jnp.zeros(0))


class TrajectoryAccessTest(parameterized.TestCase):
    """Tests for bounds-checked access and mutation."""

    def setUp(self):
        super().setUp()
        self.traj = Trajectory.straight_line([0.0, 0.0], [5.0, 0.0], nq=4)

    def test_get_waypoint(self):
        np.testing.assert_allclose(self.traj.get_waypoint(0), [1.0, 0.0])
        np.testing.assert_allclose(self.traj.get_waypoint(3), [4.0, 0.0])

    def test_set_waypoint_only_touches_its_slice(self):
        before = np.asarray(self.traj.xi)
        self.traj.set_waypoint(2, [3.0, 1.5])
        after = np.asarray(self.traj.xi)
        np.testing.assert_allclose(after[4:6], [3.0, 1.5])
        np.testing.assert_array_equal(after[:4], before[:4])
        np.testing.assert_array_equal(after[6:], before[6:])

    @parameterized.parameters(4, 10, -1)
    def test_index_out_of_range(self, index):
        with self.assertRaises(IndexError):
            self.traj.get_waypoint(index)
        with self.assertRaises(IndexError):
            self.traj.set_waypoint(index, [0.0, 0.0])

    def test_set_waypoint_wrong_dimension(self):
        with self.assertRaises(DimensionError):
            self.traj.set_waypoint(0, [1.0, 2.0, 3.0])

    def test_set_endpoints(self):
        self.traj.set_endpoints([1.0, 1.0], [2.0, 2.0])
        np.testing.assert_array_equal(self.traj.start, [1.0, 1.0])
        np.testing.assert_array_equal(self.traj.goal, [2.0, 2.0])

    @parameterized.parameters(
        ([1.0], [2.0, 2.0]),
        ([1.0, 1.0], [2.0, 2.0, 2.0]),
        ([[1.0, 1.0]], [2.0, 2.0]),
    )
    def test_set_endpoints_wrong_dimension(self, start, goal):
        with self.assertRaises(DimensionError):
            self.traj.set_endpoints(start, goal)
        np.testing.assert_array_equal(self.traj.start, [0.0, 0.0])

    def test_resize(self):
        self.traj.resize(7)
        self.assertEqual(self.traj.nq, 7)
        self.assertEqual(self.traj.xi.shape, (14,))

    def test_resize_to_zero_rejected(self):
        with self.assertRaises(SingularMetricError):
            self.traj.resize(0)
        self.assertEqual(self.traj.nq, 4)

    def test_jumble_range(self):
        self.traj.jumble(seed=3)
        self.assertEqual(self.traj.xi.shape, (8,))
        self.assertTrue(jnp.all(self.traj.xi >= -5.0))
        self.assertTrue(jnp.all(self.traj.xi < 5.0))

    def test_jumble_keeps_endpoints(self):
        start, goal = self.traj.start, self.traj.goal
        self.traj.jumble(seed=0)
        self.assertIs(self.traj.start, start)
        self.assertIs(self.traj.goal, goal)


if __name__ == '__main__':
    absltest.main()
