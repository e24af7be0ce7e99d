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

"""Cost functionals and their gradients.

- Smoothness: finite-difference velocity cost and the covariant metric
- Obstacle: workspace potentials of circular obstacles
"""

from chompax.costs.smoothness import (
    SmoothnessMetric,
    difference_matrix,
    get_metric,
    boundary_vector,
    smoothness_cost,
    smoothness_gradient,
)

from chompax.costs.obstacle import (
    POTENTIALS,
    get_potential,
    hinge_potential,
    quadratic_potential,
    obstacle_terms,
    obstacle_cost,
    obstacle_gradient,
)

__all__ = [
    # Smoothness
    'SmoothnessMetric',
    'difference_matrix',
    'get_metric',
    'boundary_vector',
    'smoothness_cost',
    'smoothness_gradient',
    # Obstacle
    'POTENTIALS',
    'get_potential',
    'hinge_potential',
    'quadratic_potential',
    'obstacle_terms',
    'obstacle_cost',
    'obstacle_gradient',
]
