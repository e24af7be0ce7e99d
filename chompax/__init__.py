"""Chompax: CHOMP trajectory optimization in JAX.

Covariant gradient descent over discretized trajectories for a point robot
in the plane, with circular obstacles that may move between iterations.

Main modules:
- chompax.core: Trajectory model, obstacle set, result and error types
- chompax.costs: Smoothness metric and cost, obstacle potentials
- chompax.solvers: CHOMP and Euclidean gradient descent optimizers
- chompax.driver: Headless interactive session (tick, drag, run/pause)
- chompax.utils: Waypoint conversions and linear algebra helpers
"""

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

from . import core
from . import costs
from . import solvers
from . import driver
from . import utils

from chompax.core import (
    DimensionError,
    ObstacleSet,
    SingularMetricError,
    Trajectory,
)
from chompax.solvers import ChompConfig, ChompOptimizer, run_chomp
from chompax.driver import ChompSession, DriveMode, SessionConfig
