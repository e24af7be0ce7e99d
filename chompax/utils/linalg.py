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

"""Dense linear algebra helpers for block-structured metrics.

The smoothness metric is a Kronecker product of a small banded matrix with
the identity of the configuration space, and it is symmetric positive
definite. These helpers build such matrices and solve against them through
a Cholesky factor instead of an explicit inverse.
"""

from typing import Tuple

import jax.numpy as jnp
from jax import Array, jit
from jax.scipy.linalg import cho_factor, cho_solve

CholeskyFactor = Tuple[Array, bool]


def kron_identity(M: Array, dim: int) -> Array:
    """Expand M into blocks M[i, j] * I_dim.

    Args:
        M: Matrix of shape (r, c).
        dim: Size of the identity block.

    Returns:
        Matrix of shape (r * dim, c * dim).

    Example:
        >>> K = kron_identity(jnp.array([[2., -1.], [-1., 2.]]), 2)  # (4, 4)
    """
    return jnp.kron(M, jnp.eye(dim, dtype=M.dtype))


def symmetrize(Q: Array) -> Array:
    """Symmetrize a matrix.

    Args:
        Q: Matrix of shape (n, n).

    Returns:
        Symmetric matrix (Q + Q') / 2.
    """
    return 0.5 * (Q + Q.T)


def is_positive_definite(Q: Array, tol: float = 0.0) -> bool:
    """Check if a symmetric matrix is positive definite.

    Args:
        Q: Matrix to check, shape (n, n).
        tol: All eigenvalues must exceed this value.

    Returns:
        True if Q is symmetric and all eigenvalues are > tol.
    """
    if not bool(jnp.allclose(Q, Q.T)):
        return False
    eigvals = jnp.linalg.eigvalsh(Q)
    return bool(jnp.all(eigvals > tol))


def cholesky(Q: Array) -> CholeskyFactor:
    """Lower Cholesky factor of an SPD matrix, in cho_solve form."""
    return cho_factor(symmetrize(Q), lower=True)


@jit
def solve_cholesky(factor: Array, rhs: Array) -> Array:
    """Solve Q x = rhs given the lower Cholesky factor of Q.

    Args:
        factor: Lower triangular factor of shape (n, n).
        rhs: Right-hand side of shape (n,) or (n, k).

    Returns:
        Solution x with the shape of rhs.
    """
    return cho_solve((factor, True), rhs)
