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

"""Configuration for CHOMP optimizers."""

from dataclasses import dataclass, field
from typing import Any, Dict, Literal

from chompax.costs.obstacle import POTENTIALS


@dataclass
class ChompConfig:
    """Configuration for a CHOMP optimizer.

    Attributes:
        solver_type: Type of solver ('chomp', 'gradient_descent').
        eta: Inverse step size; the covariant update is scaled by 1 / eta.
        alpha: Step size of the Euclidean gradient descent baseline.
        obstacle_weight: Weight lambda of the obstacle gradient.
        margin: Safety margin added to every obstacle radius.
        potential: Obstacle potential ('hinge', 'quadratic').
        dt: Time between consecutive waypoints.
        maxiter: Maximum iterations of a bounded optimize() run.
        tol: Stop optimize() once the step norm is <= tol.
    """
    solver_type: Literal['chomp', 'gradient_descent'] = 'chomp'
    eta: float = 100.0
    alpha: float = 1.0
    obstacle_weight: float = 0.1
    margin: float = 0.0
    potential: str = 'hinge'
    dt: float = 1.0
    maxiter: int = 100
    tol: float = 0.0

    # Additional solver kwargs
    extra_options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate configuration."""
        if self.eta <= 0:
            raise ValueError(f"eta must be > 0, got {self.eta}")
        if self.alpha <= 0:
            raise ValueError(f"alpha must be > 0, got {self.alpha}")
        if self.obstacle_weight < 0:
            raise ValueError(
                f"obstacle_weight must be >= 0, got {self.obstacle_weight}")
        if self.margin < 0:
            raise ValueError(f"margin must be >= 0, got {self.margin}")
        if self.potential not in POTENTIALS:
            raise ValueError(
                f"Unknown potential: {self.potential}. "
                f"Available: {list(POTENTIALS)}"
            )
        if self.dt <= 0:
            raise ValueError(f"dt must be > 0, got {self.dt}")
        if self.maxiter < 0:
            raise ValueError(f"maxiter must be >= 0, got {self.maxiter}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for solver initialization."""
        base = {
            'obstacle_weight': self.obstacle_weight,
            'margin': self.margin,
            'potential': self.potential,
            'dt': self.dt,
            'maxiter': self.maxiter,
            'tol': self.tol,
        }
        if self.solver_type == 'gradient_descent':
            base['alpha'] = self.alpha
        else:
            base['eta'] = self.eta
        base.update(self.extra_options)
        return base
