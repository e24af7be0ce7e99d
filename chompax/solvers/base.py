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

"""Base classes and shared kernels for trajectory optimizers.

Every optimizer in this package descends the same objective

    U(xi) = smoothness(xi) + lambda * obstacle(xi)

and differs only in how the gradient g is turned into an update: CHOMP
preconditions it with the inverse smoothness metric (xi -= A^-1 g / eta),
the Euclidean baseline applies it directly (xi -= alpha * g).

The obstacle set is read fresh on every call. Only the smoothness metric,
which depends on (nq, cdim, dt) alone, is memoized.
"""

from abc import ABC, abstractmethod
from functools import partial
import logging
from typing import Any, Dict, Optional, Protocol, Tuple, runtime_checkable

import jax
import jax.numpy as jnp
from jax import Array, lax

from chompax.core.obstacles import ObstacleLike, as_obstacle_columns
from chompax.core.result import OptimizationResult
from chompax.core.trajectory import Trajectory
from chompax.core.types import SolverStatus
from chompax.costs.obstacle import (
    check_workspace,
    obstacle_cost,
    obstacle_gradient,
)
from chompax.costs.smoothness import (
    SmoothnessMetric,
    get_metric,
    smoothness_cost,
    smoothness_gradient,
)
from chompax.utils.waypoints import as_configuration, as_flat_trajectory

logger = logging.getLogger(__name__)


@partial(jax.jit, static_argnames=('metric', 'potential'))
def compute_gradients(
    xi: Array,
    start: Array,
    goal: Array,
    obstacles: Array,
    margin: float,
    metric: SmoothnessMetric,
    potential: str = 'hinge',
) -> Tuple[Array, Array]:
    """Smoothness and (unweighted) obstacle gradients at xi.

    Args:
        xi: Flat trajectory (nq * cdim,).
        start: Start configuration (cdim,).
        goal: Goal configuration (cdim,).
        obstacles: Obstacle columns (3, k).
        margin: Safety margin added to every radius.
        metric: Smoothness metric for (nq, cdim, dt).
        potential: Obstacle potential name.

    Returns:
        nabla_smooth: Shape (nq * cdim,).
        nabla_obs: Shape (nq * cdim,). Zero when there are no obstacles.
    """
    nabla_smooth = smoothness_gradient(xi, start, goal, metric)
    if obstacles.shape[1] == 0:
        return nabla_smooth, jnp.zeros_like(xi)
    nabla_obs = obstacle_gradient(xi, obstacles, metric.cdim, margin, potential)
    return nabla_smooth, nabla_obs


@partial(jax.jit, static_argnames=('metric', 'potential'))
def evaluate_costs(
    xi: Array,
    start: Array,
    goal: Array,
    obstacles: Array,
    margin: float,
    metric: SmoothnessMetric,
    potential: str = 'hinge',
) -> Tuple[Array, Array]:
    """Smoothness cost and unweighted obstacle cost at xi."""
    smooth = smoothness_cost(xi, start, goal, metric)
    if obstacles.shape[1] == 0:
        return smooth, jnp.zeros_like(smooth)
    return smooth, obstacle_cost(xi, obstacles, metric.cdim, margin, potential)


@partial(
    jax.jit,
    static_argnames=('metric', 'potential', 'covariant'),
)
def _descent_loop(
    xi, start, goal, obstacles,
    step_size, obstacle_weight, margin, maxiter, tol,
    metric, potential, covariant,
):
    """Run up to maxiter descent updates while the step norm exceeds tol."""

    def body(inputs):
        """One descent update."""
        xi, _, _, iteration = inputs
        nabla_smooth, nabla_obs = compute_gradients(
            xi, start, goal, obstacles, margin, metric, potential)
        gradient = nabla_smooth + obstacle_weight * nabla_obs
        direction = metric.solve(gradient) if covariant else gradient
        step = (step_size * direction).astype(xi.dtype)
        return (xi - step,
                jnp.linalg.norm(gradient).astype(xi.dtype),
                jnp.linalg.norm(step),
                iteration + 1)

    def continuation_criterion(inputs):
        _, _, step_norm, iteration = inputs
        return jnp.logical_and(iteration < maxiter, step_norm > tol)

    return lax.while_loop(
        continuation_criterion, body,
        (xi, jnp.zeros((), xi.dtype), jnp.full((), jnp.inf, xi.dtype),
         jnp.zeros((), jnp.int32)),
    )


@runtime_checkable
class TrajectoryOptimizer(Protocol):
    """Protocol for trajectory optimization algorithms.

    Attributes:
        name: Human-readable name of the optimizer.
        covariant: Whether updates are preconditioned by the metric.
    """

    name: str
    covariant: bool

    def step(
        self,
        trajectory: Trajectory,
        obstacles: ObstacleLike = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> OptimizationResult:
        """Advance trajectory.xi by exactly one descent step."""
        ...

    def optimize(
        self,
        trajectory: Trajectory,
        obstacles: ObstacleLike = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> OptimizationResult:
        """Advance trajectory.xi by a bounded number of descent steps."""
        ...


class TrajectoryOptimizerBase(ABC):
    """Abstract base class for trajectory optimizers.

    Handles option merging, input validation, the memoized smoothness
    metric and writing the result back into the trajectory. Subclasses
    choose the step size and whether the update is covariant.
    """

    name: str = "base"
    covariant: bool = False

    def __init__(self, **options):
        """Initialize optimizer with default options.

        Args:
            **options: Solver-specific default options.
        """
        self.default_options = options

    def metric_for(self, trajectory: Trajectory, dt: float = 1.0) -> SmoothnessMetric:
        """Return the memoized smoothness metric for this trajectory size."""
        return get_metric(trajectory.nq, trajectory.cdim, float(dt))

    def step(
        self,
        trajectory: Trajectory,
        obstacles: ObstacleLike = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> OptimizationResult:
        """Advance trajectory.xi by exactly one descent step.

        Start and goal are read but never written. The obstacle set is
        read as-is for this call only.

        Args:
            trajectory: Trajectory to update in place.
            obstacles: ObstacleSet, (3, k) columns, (x, y, r) rows or None.
            options: Options overriding the defaults for this call.

        Returns:
            OptimizationResult with status STEPPED.

        Raises:
            DimensionError: If sizes are inconsistent with cdim / nq.
            SingularMetricError: If the trajectory has no waypoints.
        """
        merged_options = self._merge_options(options)
        result = self._run(trajectory, obstacles, merged_options,
                           maxiter=1, tol=-jnp.inf)
        result.status = SolverStatus.STEPPED
        return result

    def optimize(
        self,
        trajectory: Trajectory,
        obstacles: ObstacleLike = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> OptimizationResult:
        """Advance trajectory.xi by up to options['maxiter'] steps.

        Stops early once a step norm is <= options['tol']. The obstacle
        set is held fixed for the whole run.

        Returns:
            OptimizationResult with status CONVERGED or MAX_ITERATIONS.
        """
        merged_options = self._merge_options(options)
        maxiter = int(merged_options.get('maxiter', 100))
        tol = float(merged_options.get('tol', 0.0))
        result = self._run(trajectory, obstacles, merged_options,
                           maxiter=maxiter, tol=tol)
        logger.info(
            '%s finished after %d iterations: obj=%.6g step_norm=%.3g (%s)',
            self.name, result.iterations, result.obj, result.step_norm,
            result.status.name,
        )
        return result

    @abstractmethod
    def _step_size(self, options: Dict[str, Any]) -> float:
        """Scale applied to the update direction."""
        ...

    def _merge_options(self, options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        merged_options = {**self.default_options}
        if options:
            merged_options.update(options)
        return merged_options

    def _run(
        self,
        trajectory: Trajectory,
        obstacles: ObstacleLike,
        options: Dict[str, Any],
        maxiter: int,
        tol: float,
    ) -> OptimizationResult:
        """Validate inputs, run the descent loop and store the new xi."""
        start = as_configuration(trajectory.start, name="start")
        cdim = start.shape[0]
        goal = as_configuration(trajectory.goal, cdim, name="goal")
        xi = as_flat_trajectory(trajectory.xi, cdim)
        # The loop carry keeps the dtype of xi.
        start, goal = start.astype(xi.dtype), goal.astype(xi.dtype)

        dt = float(options.get('dt', 1.0))
        metric = get_metric(xi.shape[0] // cdim, cdim, dt)

        columns = as_obstacle_columns(obstacles)
        check_workspace(cdim, columns)
        columns = columns.astype(xi.dtype)

        margin = float(options.get('margin', 0.0))
        potential = options.get('potential', 'hinge')
        obstacle_weight = float(options.get('obstacle_weight', 0.1))

        new_xi, gradient_norm, step_norm, iterations = _descent_loop(
            xi, start, goal, columns,
            self._step_size(options), obstacle_weight, margin, maxiter, tol,
            metric=metric,
            potential=potential,
            covariant=self.covariant,
        )
        trajectory.xi = new_xi

        smooth, obs = evaluate_costs(
            new_xi, start, goal, columns, margin, metric, potential)
        iterations = int(iterations)
        step_norm = float(step_norm)
        if iterations > 0 and step_norm <= tol:
            status = SolverStatus.CONVERGED
        else:
            status = SolverStatus.MAX_ITERATIONS

        result = OptimizationResult(
            xi=new_xi,
            obj=float(smooth + obstacle_weight * obs),
            smoothness_cost=float(smooth),
            obstacle_cost=float(obs),
            gradient_norm=float(gradient_norm),
            step_norm=step_norm,
            iterations=iterations,
            status=status,
            info={
                'solver': self.name,
                'metric_key': metric.key,
                'num_obstacles': int(columns.shape[1]),
            },
        )
        logger.debug(
            '%s: %d update(s), obj=%.6g grad_norm=%.3g step_norm=%.3g',
            self.name, iterations, result.obj, result.gradient_norm, step_norm,
        )
        return result


def get_solver(name: str, **kwargs) -> TrajectoryOptimizerBase:
    """Factory function to create solver by name.

    Args:
        name: Solver name ('chomp', 'gradient_descent').
        **kwargs: Solver-specific options.

    Returns:
        TrajectoryOptimizer instance.

    Raises:
        ValueError: If solver name is not recognized.
    """
    from chompax.solvers.chomp import ChompOptimizer
    from chompax.solvers.gradient_descent import GradientDescentOptimizer

    _SOLVERS = {
        'chomp': ChompOptimizer,
        'gradient_descent': GradientDescentOptimizer,
    }

    name_lower = name.lower()
    if name_lower not in _SOLVERS:
        available = list(_SOLVERS.keys())
        raise ValueError(
            f"Unknown solver: {name}. Available: {available}"
        )

    return _SOLVERS[name_lower](**kwargs)
