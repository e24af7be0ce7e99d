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

"""Configuration for interactive CHOMP sessions.

The defaults reproduce the planar demo scene: 20 waypoints seeded at the
origin between (-5, -5) and (7, 7), two obstacles of radius 2.
"""

from dataclasses import dataclass, field
from typing import Literal, Tuple

from chompax.core.types import ObstacleRow
from chompax.solvers.config import ChompConfig


@dataclass
class SessionConfig:
    """Configuration for a ChompSession.

    Attributes:
        nq: Number of interior waypoints.
        start: Start configuration.
        goal: Goal configuration.
        obstacles: Initial obstacles as (x, y, radius) rows.
        seed: Initial waypoints, 'zeros' (all at the origin) or
            'straight_line'.
        default_radius: Radius of obstacles added without one.
        view_margin: Padding around the scene for view_bounds().
        solver: Solver configuration.
    """
    nq: int = 20
    start: Tuple[float, ...] = (-5.0, -5.0)
    goal: Tuple[float, ...] = (7.0, 7.0)
    obstacles: Tuple[ObstacleRow, ...] = ((3.0, 0.0, 2.0), (0.0, 3.0, 2.0))
    seed: Literal['zeros', 'straight_line'] = 'zeros'
    default_radius: float = 2.0
    view_margin: float = 2.0
    solver: ChompConfig = field(default_factory=ChompConfig)

    def __post_init__(self):
        """Convert solver dict to ChompConfig if needed, then validate."""
        if isinstance(self.solver, dict):
            self.solver = ChompConfig(**self.solver)
        if self.seed not in ('zeros', 'straight_line'):
            raise ValueError(
                f"seed must be 'zeros' or 'straight_line', got {self.seed!r}"
            )
        if self.default_radius <= 0:
            raise ValueError(
                f"default_radius must be > 0, got {self.default_radius}")
