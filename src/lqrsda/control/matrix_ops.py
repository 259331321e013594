# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Dense Matrix Operations

Thin adapter over NumPy/SciPy providing the factorizations used by the
discretizer and the DARE solver:

- Backend conversion (NumPy, PyTorch, JAX <-> float64 NumPy)
- Cholesky factorization + solve for symmetric positive-definite systems
- LU factorization + solve for general square systems
- Matrix exponential
- Frobenius norm

Factorization failures are reported with the exceptions of
``lqrsda.exceptions`` rather than SciPy's warnings or generic errors.
"""

import warnings
from typing import Tuple

import numpy as np
from scipy import linalg

from lqrsda.exceptions import MatrixExponentialError, NonPositiveDefiniteRError
from lqrsda.types.backends import DEFAULT_DTYPE, VALID_BACKENDS, Backend, validate_backend
from lqrsda.types.core import ArrayLike

LUFactorization = Tuple[np.ndarray, np.ndarray]
"""Packed LU factors and pivot indices as returned by scipy.linalg.lu_factor."""


# ============================================================================
# Backend Conversion Utilities
# ============================================================================


def to_numpy(arr, backend: Backend = "numpy") -> np.ndarray:
    """
    Convert array to a float64 NumPy array for scipy operations.

    Always returns a fresh copy so callers never share memory with the
    input.

    Args:
        arr: Array in any backend
        backend: Source backend identifier

    Returns:
        NumPy array of dtype float64

    Raises:
        ValueError: If backend is not a valid backend name
    """
    validate_backend(backend)
    if isinstance(arr, np.ndarray):
        return np.array(arr, dtype=DEFAULT_DTYPE)

    if backend == "torch" or hasattr(arr, "cpu"):
        # PyTorch tensor
        return np.array(arr.detach().cpu().numpy(), dtype=DEFAULT_DTYPE)
    # JAX arrays, nested lists and scalars
    return np.array(arr, dtype=DEFAULT_DTYPE)


def from_numpy(arr: np.ndarray, backend: Backend = "numpy"):
    """
    Convert NumPy array back to target backend.

    Args:
        arr: NumPy array
        backend: Target backend

    Returns:
        Array in target backend
    """
    if backend == "numpy":
        return arr
    if backend == "torch":
        import torch

        return torch.from_numpy(np.ascontiguousarray(arr))
    if backend == "jax":
        import jax.numpy as jnp

        return jnp.array(arr)
    raise ValueError(f"Invalid backend '{backend}'. Choose from: {VALID_BACKENDS}")


# ============================================================================
# Factorizations
# ============================================================================


def cholesky_solve(A: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Solve A x = b for symmetric positive-definite A via Cholesky.

    Only the lower triangle of A is read.

    Raises
    ------
    NonPositiveDefiniteRError
        If A is not positive definite (or contains non-finite entries)
    """
    try:
        factor = linalg.cho_factor(A, lower=True, check_finite=True)
    except (linalg.LinAlgError, ValueError) as e:
        raise NonPositiveDefiniteRError(
            f"Cholesky factorization failed, matrix is not positive definite: {e}",
        ) from e
    return linalg.cho_solve(factor, b)


def lu_factor(A: np.ndarray) -> LUFactorization:
    """
    LU-factor a general square matrix with partial pivoting.

    Raises
    ------
    numpy.linalg.LinAlgError
        If A has an exactly zero pivot or non-finite entries
    """
    if not np.all(np.isfinite(A)):
        raise linalg.LinAlgError("matrix contains non-finite entries")

    with warnings.catch_warnings():
        # Exact zero pivots are detected below
        warnings.simplefilter("ignore", linalg.LinAlgWarning)
        lu, piv = linalg.lu_factor(A, check_finite=False)

    if np.any(np.diag(lu) == 0.0):
        raise linalg.LinAlgError("matrix is exactly singular (zero pivot)")
    return lu, piv


def lu_solve(factorization: LUFactorization, b: np.ndarray) -> np.ndarray:
    """Solve A x = b reusing an LU factorization of A."""
    return linalg.lu_solve(factorization, b, check_finite=False)


# ============================================================================
# Matrix Functions
# ============================================================================


def matrix_exponential(M: np.ndarray) -> np.ndarray:
    """
    Matrix exponential exp(M) via scipy's scaling-and-squaring Padé method.

    Raises
    ------
    MatrixExponentialError
        If M has non-finite entries or the result overflows
    """
    if not np.all(np.isfinite(M)):
        raise MatrixExponentialError("matrix exponential input contains non-finite entries")
    try:
        with np.errstate(over="ignore", invalid="ignore"):
            result = linalg.expm(M)
    except (linalg.LinAlgError, ValueError, OverflowError) as e:
        raise MatrixExponentialError(f"matrix exponential failed: {e}") from e
    if not np.all(np.isfinite(result)):
        raise MatrixExponentialError("matrix exponential did not produce a finite result")
    return result


def frobenius_norm(M: ArrayLike) -> float:
    """Frobenius norm sqrt(sum |m_ij|^2)."""
    return float(np.linalg.norm(M, "fro"))


__all__ = [
    "LUFactorization",
    "to_numpy",
    "from_numpy",
    "cholesky_solve",
    "lu_factor",
    "lu_solve",
    "matrix_exponential",
    "frobenius_norm",
]
