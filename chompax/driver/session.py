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

"""Headless session state for interactive CHOMP front ends.

A ChompSession owns everything a GUI needs to drive CHOMP: start, goal,
waypoints, obstacles, the run/pause/step mode and the state of an obstacle
being dragged. The front end forwards pointer events and calls tick() once
per frame; it reads snapshot() and view_bounds() to draw. Nothing here
draws or blocks.

The session is not thread-safe. A multi-threaded host must hold one lock
around every tick() and every obstacle mutation.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
import logging
from typing import Optional, Tuple

import jax.numpy as jnp
from jax import Array

from chompax.core.obstacles import ObstacleSet
from chompax.core.result import OptimizationResult
from chompax.core.trajectory import Trajectory
from chompax.core.types import DimensionError
from chompax.driver.config import SessionConfig
from chompax.solvers.base import TrajectoryOptimizerBase, get_solver

logger = logging.getLogger(__name__)


class DriveMode(Enum):
    """Whether tick() advances the optimizer."""
    PAUSED = auto()       # tick() does nothing
    SINGLE_STEP = auto()  # next tick() steps once, then pauses
    RUNNING = auto()      # every tick() steps


@dataclass
class DragState:
    """Obstacle currently held by the pointer.

    Attributes:
        index: Index of the dragged obstacle, None when nothing is held.
        offset: Obstacle center minus pointer position at grab time.
    """
    index: Optional[int] = None
    offset: Tuple[float, float] = (0.0, 0.0)

    @property
    def active(self) -> bool:
        return self.index is not None


@dataclass
class SessionState:
    """Mutable driver state.

    Attributes:
        mode: Current drive mode.
        drag: Drag state.
        tick_count: Number of tick() calls.
        step_count: Number of optimizer steps taken.
        last_result: Result of the most recent optimizer step.
    """
    mode: DriveMode = DriveMode.PAUSED
    drag: DragState = field(default_factory=DragState)
    tick_count: int = 0
    step_count: int = 0
    last_result: Optional[OptimizationResult] = None


@dataclass(frozen=True)
class SceneSnapshot:
    """Read-only view of the scene for rendering.

    Attributes:
        start: Start configuration (cdim,).
        goal: Goal configuration (cdim,).
        waypoints: Interior waypoints (nq, cdim).
        obstacles: Obstacle rows (k, 3) of (x, y, radius).
    """
    start: Array
    goal: Array
    waypoints: Array
    obstacles: Array


class ChompSession:
    """Interactive CHOMP session with fixed start and goal.

    Example:
        >>> session = ChompSession()           # demo scene, paused
        >>> session.step()                     # request a single step
        >>> result = session.tick()            # steps once, then pauses
        >>> if session.grab(3.0, 0.5):         # pointer press on an obstacle
        ...     session.update_drag(3.5, 1.0)  # pointer drag
        ...     session.tick()                 # running while held
        ...     session.release()              # pointer release, pauses
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        optimizer: Optional[TrajectoryOptimizerBase] = None,
    ):
        """Initialize the session.

        Args:
            config: Session configuration (uses defaults if None).
            optimizer: Trajectory optimizer (created from config if None).
        """
        self.config = config or SessionConfig()
        self.state = SessionState()

        if optimizer is None:
            solver_config = self.config.solver
            self.optimizer = get_solver(
                solver_config.solver_type,
                **solver_config.to_dict()
            )
        else:
            self.optimizer = optimizer

        self.trajectory = self._seed_trajectory()
        self.obstacles = ObstacleSet(self.config.obstacles)

    @property
    def mode(self) -> DriveMode:
        return self.state.mode

    def run(self) -> None:
        """Step on every tick."""
        self._set_mode(DriveMode.RUNNING)

    def pause(self) -> None:
        """Stop stepping."""
        self._set_mode(DriveMode.PAUSED)

    def step(self) -> None:
        """Step on the next tick only."""
        self._set_mode(DriveMode.SINGLE_STEP)

    def toggle_run(self) -> None:
        """Switch between RUNNING and PAUSED."""
        if self.state.mode == DriveMode.RUNNING:
            self.pause()
        else:
            self.run()

    def tick(self) -> Optional[OptimizationResult]:
        """Advance the optimizer if the mode allows it.

        Returns:
            The step result, or None when paused.
        """
        self.state.tick_count += 1
        if self.state.mode == DriveMode.PAUSED:
            return None

        result = self.optimizer.step(self.trajectory, self.obstacles)
        self.state.step_count += 1
        self.state.last_result = result

        if self.state.mode == DriveMode.SINGLE_STEP:
            self._set_mode(DriveMode.PAUSED)
        return result

    def add_obstacle(self, x: float, y: float,
                     radius: Optional[float] = None) -> int:
        """Add an obstacle (default radius from config) and return its index."""
        if radius is None:
            radius = self.config.default_radius
        index = self.obstacles.add_obstacle(x, y, radius)
        logger.debug('added obstacle %d at (%.3f, %.3f) r=%.3f',
                      index, x, y, radius)
        return index

    def move_obstacle(self, index: int, x: float, y: float) -> None:
        """Move the center of obstacle `index`."""
        self.obstacles.move_obstacle(index, x, y)
        logger.debug('moved obstacle %d to (%.3f, %.3f)', index, x, y)

    def obstacle_at(self, px: float, py: float) -> Optional[int]:
        """Index of the first obstacle containing the pointer, if any."""
        return self.obstacles.find_at(px, py)

    def begin_drag(self, index: int,
                   pointer_offset: Tuple[float, float]) -> None:
        """Start dragging obstacle `index`.

        Args:
            index: Obstacle index.
            pointer_offset: Obstacle center minus pointer position. It is
                kept while dragging so the obstacle does not jump.

        Raises:
            IndexError: If index is out of range.
        """
        self.obstacles[index]  # Raises IndexError if out of range.
        self.state.drag = DragState(
            index=index,
            offset=(float(pointer_offset[0]), float(pointer_offset[1])),
        )

    def update_drag(self, px: float, py: float) -> bool:
        """Move the dragged obstacle with the pointer.

        Returns:
            True if an obstacle was moved.
        """
        drag = self.state.drag
        if not drag.active:
            return False
        self.move_obstacle(drag.index, px + drag.offset[0], py + drag.offset[1])
        return True

    def end_drag(self) -> None:
        """Let go of the dragged obstacle."""
        self.state.drag = DragState()

    def grab(self, px: float, py: float) -> bool:
        """Pointer press: grab the obstacle under the pointer and run.

        Returns:
            True if an obstacle was grabbed.
        """
        index = self.obstacle_at(px, py)
        if index is None:
            return False
        center = self.obstacles.centers[index]
        self.begin_drag(index, (float(center[0]) - px, float(center[1]) - py))
        self.run()
        return True

    def release(self) -> None:
        """Pointer release: drop any dragged obstacle and pause."""
        self.end_drag()
        self.pause()

    def jumble(self, seed: int = 0) -> None:
        """Scatter the waypoints uniformly over [-5, 5)."""
        self.trajectory.jumble(seed)

    def reset(self) -> None:
        """Re-seed the waypoints and clear mode and drag state."""
        self.trajectory = self._seed_trajectory()
        self.state = SessionState()

    def snapshot(self) -> SceneSnapshot:
        """Current scene for rendering."""
        return SceneSnapshot(
            start=self.trajectory.start,
            goal=self.trajectory.goal,
            waypoints=self.trajectory.waypoints,
            obstacles=self.obstacles.columns.T,
        )

    def view_bounds(
        self, margin: Optional[float] = None
    ) -> Tuple[float, float, float, float]:
        """Bounding box (xmin, ymin, xmax, ymax) of start, goal and waypoints.

        Args:
            margin: Padding on every side (config.view_margin if None).

        Raises:
            DimensionError: If the configurations are not planar.
        """
        if self.trajectory.cdim != 2:
            raise DimensionError(
                f"view bounds need cdim=2, got {self.trajectory.cdim}"
            )
        if margin is None:
            margin = self.config.view_margin
        path = self.trajectory.path
        lo = jnp.min(path, axis=0) - margin
        hi = jnp.max(path, axis=0) + margin
        return float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1])

    def _seed_trajectory(self) -> Trajectory:
        config = self.config
        if config.seed == 'straight_line':
            return Trajectory.straight_line(config.start, config.goal, config.nq)
        return Trajectory.zeros(config.start, config.goal, config.nq)

    def _set_mode(self, mode: DriveMode) -> None:
        if mode != self.state.mode:
            logger.info('drive mode %s -> %s',
                         self.state.mode.name, mode.name)
        self.state.mode = mode
