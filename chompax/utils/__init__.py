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

"""Utility functions for CHOMP.

- Waypoint conversions between configurations, flat vectors and paths
- Dense linear algebra for the block-structured smoothness metric
"""

# Waypoint utilities
from chompax.utils.waypoints import (
    as_configuration,
    as_flat_trajectory,
    unflatten,
    straight_line,
    stack_path,
    segment_lengths_squared,
)

# Linear algebra utilities
from chompax.utils.linalg import (
    kron_identity,
    symmetrize,
    is_positive_definite,
    cholesky,
    solve_cholesky,
)

__all__ = [
    # Waypoints
    'as_configuration',
    'as_flat_trajectory',
    'unflatten',
    'straight_line',
    'stack_path',
    'segment_lengths_squared',
    # Linear algebra
    'kron_identity',
    'symmetrize',
    'is_positive_definite',
    'cholesky',
    'solve_cholesky',
]
