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

"""Core abstractions for CHOMP trajectory optimization.

This module provides the fundamental data structures and type definitions:

- Trajectory: Start, goal and the flat vector of interior waypoints
- ObstacleSet: Growable set of circular obstacles
- OptimizationResult: Outcome of an optimizer step or run
- Error kinds and type aliases
"""

from chompax.core.types import (
    SolverStatus,
    Configuration,
    FlatTrajectory,
    ObstacleColumns,
    ObstacleRow,
    MetricKey,
    PotentialFn,
    ChompError,
    DimensionError,
    SingularMetricError,
)

from chompax.core.trajectory import Trajectory

from chompax.core.obstacles import (
    ObstacleSet,
    as_obstacle_columns,
)

from chompax.core.result import OptimizationResult

__all__ = [
    # Types
    'SolverStatus',
    'Configuration',
    'FlatTrajectory',
    'ObstacleColumns',
    'ObstacleRow',
    'MetricKey',
    'PotentialFn',
    # Errors
    'ChompError',
    'DimensionError',
    'SingularMetricError',
    # Data structures
    'Trajectory',
    'ObstacleSet',
    'as_obstacle_columns',
    'OptimizationResult',
]
