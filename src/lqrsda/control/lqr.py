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
Discrete LQR Design Functions

Pure stateless functions for discrete-time LQR design on top of the SDA
Riccati solver:

**Control Design:**
- Optimal gain from a Riccati solution
- Discrete LQR from discrete (A, B, Q, R)
- Discrete LQR from a continuous StateSpaceModel and a sample period

**System Analysis:**
- Stability analysis - eigenvalue-based, discrete-time criterion

Mathematical Background
-----------------------
LQR minimizes:
    J = Σₖ₌₀^∞ (x[k]'Qx[k] + u[k]'Ru[k])

Solution via the discrete algebraic Riccati equation:
    S = A'SA - A'SB(R + B'SB)⁻¹B'SA + Q

Optimal gain: K = (R + B'SB)⁻¹B'SA, u[k] = -Kx[k]

Stability: all |λ(A - BK)| < 1 (inside unit circle)

Usage
-----
>>> from lqrsda.control.lqr import design_lqr, analyze_stability
>>>
>>> Ad = np.array([[1, 0.1], [0, 1]])
>>> Bd = np.array([[0.005], [0.1]])
>>> result = design_lqr(Ad, Bd, np.diag([10, 1]), np.array([[0.1]]))
>>> K = result['gain']
>>> print(f"Stability margin: {result['stability_margin']:.3f}")
"""

import warnings

import numpy as np
from scipy import linalg

from lqrsda.control.dare import solve_dare
from lqrsda.control.discretization import discretize_model
from lqrsda.control.matrix_ops import from_numpy, to_numpy
from lqrsda.exceptions import DimensionMismatchError
from lqrsda.types.backends import Backend
from lqrsda.types.core import CostMatrix, GainMatrix, InputMatrix, ScalarLike, StateMatrix
from lqrsda.types.riccati import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    CostWeights,
    DiscreteLQRResult,
    LQRResult,
    StabilityInfo,
    StateSpaceModel,
)

_MARGINAL_TOLERANCE = 1e-6


# ============================================================================
# Gain Computation
# ============================================================================


def compute_lqr_gain(
    A: StateMatrix,
    B: InputMatrix,
    R: CostMatrix,
    S: StateMatrix,
    backend: Backend = "numpy",
) -> GainMatrix:
    """
    Optimal discrete feedback gain K = (R + B'SB)⁻¹B'SA.

    Computed with a linear solve, never an explicit inverse.

    Args:
        A: State matrix (nx, nx)
        B: Input matrix (nx, nu)
        R: Input weight (nu, nu)
        S: Riccati solution (nx, nx)
        backend: Computational backend

    Returns:
        Gain K of shape (nu, nx)
    """
    A_np = to_numpy(A, backend)
    B_np = to_numpy(B, backend)
    R_np = to_numpy(R, backend)
    S_np = to_numpy(S, backend)

    if S_np.shape != A_np.shape:
        raise DimensionMismatchError(f"S must be {A_np.shape}, got {S_np.shape}")
    if R_np.shape != (B_np.shape[1], B_np.shape[1]):
        raise DimensionMismatchError(
            f"R must be ({B_np.shape[1]}, {B_np.shape[1]}), got {R_np.shape}",
        )

    BtS = B_np.T @ S_np
    K = linalg.solve(R_np + BtS @ B_np, BtS @ A_np)
    return from_numpy(K, backend)


# ============================================================================
# Stability Analysis
# ============================================================================


def analyze_stability(
    A: StateMatrix,
    tolerance: float = _MARGINAL_TOLERANCE,
    backend: Backend = "numpy",
) -> StabilityInfo:
    """
    Analyze discrete-time stability via eigenvalues.

    Stable when every eigenvalue lies strictly inside the unit circle.

    Args:
        A: State or closed-loop matrix (nx, nx)
        tolerance: Band around |λ| = 1 treated as marginal
        backend: Computational backend

    Returns:
        StabilityInfo

    Examples
    --------
    >>> Ad = np.array([[0.9, 0.1], [0, 0.8]])
    >>> analyze_stability(Ad)['is_stable']
    True
    >>> analyze_stability(np.eye(2))['is_marginally_stable']
    True
    """
    A_np = to_numpy(A, backend)
    if A_np.ndim != 2 or A_np.shape[0] != A_np.shape[1]:
        raise DimensionMismatchError(f"A must be square, got shape {A_np.shape}")

    eigenvalues = np.linalg.eigvals(A_np)
    magnitudes = np.abs(eigenvalues)
    spectral_radius = float(np.max(magnitudes))

    info: StabilityInfo = {
        "eigenvalues": eigenvalues,
        "magnitudes": magnitudes,
        "spectral_radius": spectral_radius,
        "is_stable": bool(spectral_radius < 1.0 - tolerance),
        "is_marginally_stable": bool(abs(spectral_radius - 1.0) <= tolerance),
        "is_unstable": bool(spectral_radius > 1.0 + tolerance),
    }
    return info


# ============================================================================
# LQR Design
# ============================================================================


def design_lqr(
    A: StateMatrix,
    B: InputMatrix,
    Q: CostMatrix,
    R: CostMatrix,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    backend: Backend = "numpy",
) -> LQRResult:
    """
    Design a discrete-time Linear Quadratic Regulator.

    Minimizes J = Σₖ (x[k]'Qx[k] + u[k]'Ru[k]) subject to
    x[k+1] = Ax[k] + Bu[k]. The Riccati equation is solved with the
    structure-preserving doubling algorithm.

    Parameters
    ----------
    A : StateMatrix
        Discrete state matrix (nx, nx)
    B : InputMatrix
        Discrete input matrix (nx, nu)
    Q : CostMatrix
        State cost (nx, nx), Q ≥ 0
    R : CostMatrix
        Control cost (nu, nu), R > 0
    tolerance : float
        Relative convergence tolerance of the Riccati iteration
    max_iterations : int
        Iteration cap of the Riccati iteration
    backend : Backend
        Computational backend ('numpy', 'torch', 'jax'), default 'numpy'

    Returns
    -------
    LQRResult
        Dictionary containing:
            - gain: Optimal feedback gain K (nu, nx)
            - cost_to_go: Riccati solution S (nx, nx)
            - controller_eigenvalues: Eigenvalues of (A - BK)
            - stability_margin: 1 - max(|λ|) (positive = stable)
            - iterations: doubling steps used

    Raises
    ------
    DimensionMismatchError, NonPositiveDefiniteRError,
    SingularIterationError, NonConvergenceError
        Propagated from :func:`solve_dare`

    Examples
    --------
    >>> Ad = np.array([[1, 0.1], [0, 1]])
    >>> Bd = np.array([[0.005], [0.1]])
    >>> result = design_lqr(Ad, Bd, np.diag([10, 1]), np.array([[0.1]]))
    >>>
    >>> x = np.array([1.0, 0.0])
    >>> for k in range(100):
    ...     x = Ad @ x - Bd @ (result['gain'] @ x)
    """
    A_np = to_numpy(A, backend)
    B_np = to_numpy(B, backend)
    R_np = to_numpy(R, backend)

    dare = solve_dare(
        A_np,
        B_np,
        to_numpy(Q, backend),
        R_np,
        tolerance=tolerance,
        max_iterations=max_iterations,
    )
    S = dare["solution"]
    K = compute_lqr_gain(A_np, B_np, R_np, S)

    # Closed-loop system
    stability = analyze_stability(A_np - B_np @ K)
    if not stability["is_stable"]:
        warnings.warn(
            f"Closed loop is not asymptotically stable "
            f"(spectral radius {stability['spectral_radius']:.6f}); "
            f"(A, B) may not be stabilizable",
            UserWarning,
            stacklevel=2,
        )

    result: LQRResult = {
        "gain": from_numpy(K, backend),
        "cost_to_go": from_numpy(S, backend),
        "controller_eigenvalues": from_numpy(stability["eigenvalues"], backend),
        "stability_margin": float(1.0 - stability["spectral_radius"]),
        "iterations": dare["iterations"],
    }
    return result


def design_lqr_from_continuous(
    model: StateSpaceModel,
    dt: ScalarLike,
    weights: CostWeights,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> DiscreteLQRResult:
    """
    Discretize a continuous plant and design a discrete LQR for it.

    Runs the full pipeline: zero-order-hold discretization at period dt,
    SDA Riccati solve, optimal gain and closed-loop analysis. Any failure
    is raised; no partial result is returned.

    Parameters
    ----------
    model : StateSpaceModel
        Continuous plant (contA, contB)
    dt : float
        Sample period, > 0
    weights : CostWeights
        Q (nx, nx) and R (nu, nu)
    tolerance : float
        Relative convergence tolerance of the Riccati iteration
    max_iterations : int
        Iteration cap of the Riccati iteration

    Returns
    -------
    DiscreteLQRResult
        LQRResult fields plus the discrete_model used for the design

    Examples
    --------
    >>> model = drivetrain_model()
    >>> result = design_lqr_from_continuous(
    ...     model, DRIVETRAIN_DT, drivetrain_cost_weights()
    ... )
    >>> S = result['cost_to_go']
    """
    weights.check_compatible(model)
    discrete = discretize_model(model, dt)

    lqr = design_lqr(
        discrete.discA,
        discrete.discB,
        weights.Q,
        weights.R,
        tolerance=tolerance,
        max_iterations=max_iterations,
    )

    result: DiscreteLQRResult = {
        "gain": lqr["gain"],
        "cost_to_go": lqr["cost_to_go"],
        "controller_eigenvalues": lqr["controller_eigenvalues"],
        "stability_margin": lqr["stability_margin"],
        "iterations": lqr["iterations"],
        "discrete_model": discrete,
    }
    return result


__all__ = [
    "compute_lqr_gain",
    "analyze_stability",
    "design_lqr",
    "design_lqr_from_continuous",
]
