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
Discrete Algebraic Riccati Equation Solver

Solves the DARE arising in discrete-time LQR design,

    S = A'SA - (A'SB)(R + B'SB)⁻¹(B'SA) + Q,

for its stabilizing symmetric positive semi-definite solution using the
Structure-preserving Doubling Algorithm (SDA).

Works cited:

[1] E. K.-W. Chu, H.-Y. Fan, W.-W. Lin & C.-S. Wang "Structure-Preserving
    Algorithms for Periodic Discrete-Time Algebraic Riccati Equations",
    International Journal of Control, 77:8, 767-788, 2004.
    DOI: 10.1080/00207170410001714988

Algorithm
---------
With A₀ = A, G₀ = BR⁻¹B', H₀ = Q, each step computes

    W     = I + GₖHₖ
    V₁    = W⁻¹Aₖ
    V₂    = (W⁻¹Gₖ')'
    Gₖ₊₁ = Gₖ + AₖV₂Aₖ'
    Hₖ₊₁ = Hₖ + V₁'HₖAₖ
    Aₖ₊₁ = AₖV₁

Hₖ converges quadratically to S: each step doubles the horizon of the
underlying finite-horizon problem, so well-posed problems converge in far
fewer steps than the plain Riccati recursion.

Usage
-----
>>> result = solve_dare(Ad, Bd, Q, R)
>>> S = result['solution']
>>> print(result['iterations'])
"""

import warnings
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy import linalg

from lqrsda.control.matrix_ops import (
    cholesky_solve,
    frobenius_norm,
    from_numpy,
    lu_factor,
    lu_solve,
    to_numpy,
)
from lqrsda.exceptions import (
    DimensionMismatchError,
    NonConvergenceError,
    SingularIterationError,
)
from lqrsda.types.backends import Backend
from lqrsda.types.core import CostMatrix, InputMatrix, StateMatrix
from lqrsda.types.riccati import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    DareSolution,
    validate_solver_config,
)

_SYMMETRY_RTOL = 1e-8


# ============================================================================
# Validation
# ============================================================================


def _validate_dare_shapes(A: np.ndarray, B: np.ndarray, Q: np.ndarray, R: np.ndarray):
    if A.ndim != 2 or A.size == 0 or A.shape[0] != A.shape[1]:
        raise DimensionMismatchError(f"A must be a non-empty square matrix, got shape {A.shape}")
    nx = A.shape[0]
    if B.ndim != 2 or B.shape[0] != nx or B.shape[1] == 0:
        raise DimensionMismatchError(f"B must have shape ({nx}, nu) with nu > 0, got {B.shape}")
    nu = B.shape[1]
    if Q.shape != (nx, nx):
        raise DimensionMismatchError(f"Q must be ({nx}, {nx}), got {Q.shape}")
    if R.shape != (nu, nu):
        raise DimensionMismatchError(f"R must be ({nu}, {nu}), got {R.shape}")


def _warn_if_asymmetric(M: np.ndarray, name: str):
    scale = max(frobenius_norm(M), 1.0)
    if frobenius_norm(M - M.T) > _SYMMETRY_RTOL * scale:
        warnings.warn(
            f"{name} is not symmetric; the DARE is defined for symmetric weights",
            UserWarning,
            stacklevel=3,
        )


# ============================================================================
# Doubling Iteration
# ============================================================================


@dataclass
class _DoublingState:
    """Working triple (Aₖ, Gₖ, Hₖ) of the doubling recursion."""

    A: np.ndarray
    G: np.ndarray
    H: np.ndarray
    iteration: int = 0


def _doubling_step(state: _DoublingState, identity: np.ndarray) -> _DoublingState:
    """Advance the SDA recursion by one step (page 5 of [1])."""
    A_k, G_k, H_k = state.A, state.G, state.H

    # W = I + GₖHₖ
    W = identity + G_k @ H_k

    try:
        W_lu = lu_factor(W)
    except linalg.LinAlgError as e:
        raise SingularIterationError(
            f"W = I + G_k H_k is singular at iteration {state.iteration}: {e}",
            iteration=state.iteration,
        ) from e

    # Solve WV₁ = Aₖ for V₁
    V_1 = lu_solve(W_lu, A_k)

    # Solve V₂Wᵀ = Gₖ for V₂ by transposing to WV₂ᵀ = Gₖᵀ,
    # reusing the factorization of W
    V_2 = lu_solve(W_lu, G_k.T).T

    if not (np.all(np.isfinite(V_1)) and np.all(np.isfinite(V_2))):
        raise SingularIterationError(
            f"solve with W = I + G_k H_k overflowed at iteration {state.iteration}",
            iteration=state.iteration,
        )

    return _DoublingState(
        # Aₖ₊₁ = AₖV₁
        A=A_k @ V_1,
        # Gₖ₊₁ = Gₖ + AₖV₂Aₖᵀ
        G=G_k + A_k @ V_2 @ A_k.T,
        # Hₖ₊₁ = Hₖ + V₁ᵀHₖAₖ
        H=H_k + V_1.T @ H_k @ A_k,
        iteration=state.iteration + 1,
    )


def solve_dare(
    A: StateMatrix,
    B: InputMatrix,
    Q: CostMatrix,
    R: CostMatrix,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    backend: Backend = "numpy",
) -> DareSolution:
    """
    Solve the discrete algebraic Riccati equation with the SDA.

    Finds the stabilizing solution S of

        S = A'SA - (A'SB)(R + B'SB)⁻¹(B'SA) + Q

    Parameters
    ----------
    A : StateMatrix
        Discrete state matrix (nx, nx)
    B : InputMatrix
        Discrete input matrix (nx, nu)
    Q : CostMatrix
        State weight (nx, nx), symmetric positive semi-definite
    R : CostMatrix
        Input weight (nu, nu), symmetric positive definite
    tolerance : float
        Relative tolerance ε; iteration stops when
        ||Hₖ₊₁ - Hₖ||_F <= ε ||Hₖ₊₁||_F. Default 1e-10.
    max_iterations : int
        Maximum number of doubling steps. Default 100.
    backend : Backend
        Array type of the inputs and of the returned solution

    Returns
    -------
    DareSolution
        Dictionary containing:
            - solution: S (nx, nx)
            - iterations: number of doubling steps performed
            - relative_change: final relative change of H

    Raises
    ------
    DimensionMismatchError
        If matrix shapes are inconsistent
    NonPositiveDefiniteRError
        If the Cholesky factorization of R fails (raised before iterating)
    SingularIterationError
        If W = I + GₖHₖ is singular at some step
    NonConvergenceError
        If the tolerance is not met within max_iterations, or H diverges
    ValueError
        If tolerance or max_iterations is invalid

    Examples
    --------
    >>> Ad = np.array([[1, 0.1], [0, 1]])
    >>> Bd = np.array([[0.005], [0.1]])
    >>> result = solve_dare(Ad, Bd, np.diag([10, 1]), np.array([[0.1]]))
    >>> S = result['solution']
    >>> np.allclose(S, S.T)
    True

    Notes
    -----
    (A, B) should be stabilizable and (Q^½, A) detectable; otherwise H
    typically grows without bound and NonConvergenceError is raised.

    When Q = 0 the first iterate already satisfies the stopping test and
    S = 0 is returned after one step.
    """
    validate_solver_config(tolerance, max_iterations)

    A_np = to_numpy(A, backend)
    B_np = to_numpy(B, backend)
    Q_np = to_numpy(Q, backend)
    R_np = to_numpy(R, backend)

    _validate_dare_shapes(A_np, B_np, Q_np, R_np)
    _warn_if_asymmetric(Q_np, "Q")
    _warn_if_asymmetric(R_np, "R")

    identity = np.eye(A_np.shape[0])

    # G₀ = BR⁻¹Bᵀ, see equation (4) of [1]
    G_0 = B_np @ cholesky_solve(R_np, B_np.T)

    state = _DoublingState(A=A_np, G=G_0, H=Q_np)
    relative_change: Optional[float] = None

    while state.iteration < max_iterations:
        H_k = state.H
        state = _doubling_step(state, identity)
        H_k1 = state.H

        if not np.all(np.isfinite(H_k1)):
            raise NonConvergenceError(
                f"Riccati iterate diverged at iteration {state.iteration}; "
                f"check that (A, B) is stabilizable and (Q, A) detectable",
                iterations=state.iteration,
                relative_change=relative_change,
            )

        # while |Hₖ₊₁ − Hₖ| > ε |Hₖ₊₁|
        change = frobenius_norm(H_k1 - H_k)
        norm = frobenius_norm(H_k1)
        relative_change = change / norm if norm > 0 else 0.0
        if change <= tolerance * norm:
            result: DareSolution = {
                "solution": from_numpy(H_k1, backend),
                "iterations": state.iteration,
                "relative_change": float(relative_change),
            }
            return result

    raise NonConvergenceError(
        f"SDA did not converge within {max_iterations} iterations "
        f"(last relative change {relative_change:.3e}, tolerance {tolerance:.1e})",
        iterations=state.iteration,
        relative_change=relative_change,
    )


# ============================================================================
# Residual
# ============================================================================


def dare_residual(
    A: StateMatrix,
    B: InputMatrix,
    Q: CostMatrix,
    R: CostMatrix,
    S: StateMatrix,
    relative: bool = False,
    backend: Backend = "numpy",
) -> float:
    """
    Frobenius norm of the DARE residual.

        ||A'SA - S - (A'SB)(R + B'SB)⁻¹(B'SA) + Q||_F

    Parameters
    ----------
    A, B, Q, R : arrays
        Problem data as passed to :func:`solve_dare`
    S : StateMatrix
        Candidate solution (nx, nx)
    relative : bool
        If True, divide by max(1, ||S||_F)
    backend : Backend
        Array type of the inputs

    Returns
    -------
    float
        Residual norm

    Examples
    --------
    >>> S = solve_dare(Ad, Bd, Q, R)['solution']
    >>> dare_residual(Ad, Bd, Q, R, S, relative=True) < 1e-8
    True
    """
    A_np = to_numpy(A, backend)
    B_np = to_numpy(B, backend)
    Q_np = to_numpy(Q, backend)
    R_np = to_numpy(R, backend)
    S_np = to_numpy(S, backend)

    _validate_dare_shapes(A_np, B_np, Q_np, R_np)
    if S_np.shape != A_np.shape:
        raise DimensionMismatchError(f"S must be {A_np.shape}, got {S_np.shape}")

    AtSB = A_np.T @ S_np @ B_np
    residual = (
        A_np.T @ S_np @ A_np
        - S_np
        - AtSB @ linalg.solve(R_np + B_np.T @ S_np @ B_np, B_np.T @ S_np @ A_np)
        + Q_np
    )
    value = frobenius_norm(residual)
    if relative:
        value /= max(1.0, frobenius_norm(S_np))
    return value


__all__ = ["solve_dare", "dare_residual"]
