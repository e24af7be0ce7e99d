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

"""Trajectory optimizers with a class-based interface.

Available solvers:
- ChompOptimizer: Covariant gradient descent (CHOMP)
- GradientDescentOptimizer: Euclidean gradient descent baseline

Example:
    >>> from chompax.solvers import ChompOptimizer
    >>> optimizer = ChompOptimizer(eta=100.0)
    >>> result = optimizer.step(trajectory, obstacles)
    >>>
    >>> # Or a bounded run with the obstacles held fixed
    >>> result = optimizer.optimize(trajectory, obstacles, {'maxiter': 500})
"""

from chompax.solvers.base import (
    TrajectoryOptimizer,
    TrajectoryOptimizerBase,
    compute_gradients,
    evaluate_costs,
    get_solver,
)

from chompax.solvers.config import ChompConfig
from chompax.solvers.chomp import ChompOptimizer, run_chomp
from chompax.solvers.gradient_descent import GradientDescentOptimizer

__all__ = [
    # Base classes
    'TrajectoryOptimizer',
    'TrajectoryOptimizerBase',
    'compute_gradients',
    'evaluate_costs',
    'get_solver',
    # Configuration
    'ChompConfig',
    # Solvers
    'ChompOptimizer',
    'GradientDescentOptimizer',
    'run_chomp',
]
