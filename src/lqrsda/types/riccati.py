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
Riccati Design Types

Problem data and result types for discrete LQR design:
- StateSpaceModel, DiscreteModel, CostWeights (input containers)
- DareSolution (DARE solver result)
- StabilityInfo, LQRResult, DiscreteLQRResult (design results)
- SolverConfig and defaults (tolerance, iteration cap)

Mathematical Background
----------------------
Continuous plant sampled with zero-order hold at period dt:
    ẋ = Ac x + Bc u   ->   x[k+1] = Ad x[k] + Bd u[k]

Discrete algebraic Riccati equation (DARE):
    S = A'SA - (A'SB)(R + B'SB)⁻¹(B'SA) + Q

Optimal gain: K = (R + B'SB)⁻¹B'SA, control law u[k] = -K x[k]

Usage
-----
>>> from lqrsda.types.riccati import StateSpaceModel, CostWeights
>>>
>>> model = StateSpaceModel(contA=np.array([[0, 1], [0, 0]]),
...                         contB=np.array([[0], [1]]))
>>> weights = CostWeights(Q=np.diag([10, 1]), R=np.array([[0.1]]))
>>> weights.check_compatible(model)
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from typing_extensions import TypedDict

from lqrsda.exceptions import DimensionMismatchError
from lqrsda.types.backends import DEFAULT_DTYPE, Backend
from lqrsda.types.core import CostMatrix, GainMatrix, InputMatrix, StateMatrix

# ============================================================================
# Solver Configuration
# ============================================================================

DEFAULT_TOLERANCE: float = 1e-10
"""
Relative convergence tolerance of the doubling iteration.

Iteration stops when ||H_{k+1} - H_k||_F <= tol * ||H_{k+1}||_F.
"""

DEFAULT_MAX_ITERATIONS: int = 100
"""
Cap on doubling steps.

Each step doubles the horizon covered by H, so well-posed problems converge
in a few dozen steps at most.
"""


class SolverConfig(TypedDict, total=False):
    """
    Solver configuration dictionary.

    Attributes
    ----------
    backend : Backend
        Array type accepted and returned ('numpy', 'torch', 'jax')
    tolerance : float
        Relative convergence tolerance, > 0
    max_iterations : int
        Maximum number of doubling steps, >= 1

    Examples
    --------
    >>> config: SolverConfig = {'tolerance': 1e-12, 'max_iterations': 50}
    """

    backend: Backend
    tolerance: float
    max_iterations: int


def validate_solver_config(tolerance: float, max_iterations: int) -> None:
    """
    Validate convergence settings.

    Raises
    ------
    ValueError
        If tolerance is not a positive finite number or max_iterations < 1
    """
    if not np.isfinite(tolerance) or tolerance <= 0:
        raise ValueError(f"tolerance must be positive and finite, got {tolerance}")
    if int(max_iterations) != max_iterations or max_iterations < 1:
        raise ValueError(f"max_iterations must be a positive integer, got {max_iterations}")


def _as_matrix(name: str, value: Any) -> np.ndarray:
    arr = np.array(value, dtype=DEFAULT_DTYPE)
    if arr.ndim != 2 or arr.size == 0:
        raise DimensionMismatchError(f"{name} must be a non-empty 2-D matrix, got shape {arr.shape}")
    return arr


# ============================================================================
# Problem Data
# ============================================================================


@dataclass(frozen=True, eq=False)
class StateSpaceModel:
    """
    Continuous-time linear plant ẋ = contA x + contB u.

    Matrices are copied to float64 on construction.

    Attributes
    ----------
    contA : StateMatrix
        Dynamics matrix (nx, nx)
    contB : InputMatrix
        Input matrix (nx, nu)

    Raises
    ------
    DimensionMismatchError
        If contA is not square or contB does not have nx rows

    Examples
    --------
    >>> model = StateSpaceModel(np.array([[0, 1], [0, 0]]), np.array([[0], [1]]))
    >>> model.nx, model.nu
    (2, 1)
    """

    contA: StateMatrix
    contB: InputMatrix

    def __post_init__(self):
        contA = _as_matrix("contA", self.contA)
        contB = _as_matrix("contB", self.contB)
        nx = contA.shape[0]
        if contA.shape != (nx, nx):
            raise DimensionMismatchError(f"contA must be square, got shape {contA.shape}")
        if contB.shape[0] != nx:
            raise DimensionMismatchError(f"contB must have {nx} rows, got {contB.shape[0]}")
        object.__setattr__(self, "contA", contA)
        object.__setattr__(self, "contB", contB)

    @property
    def nx(self) -> int:
        """Number of states."""
        return self.contA.shape[0]

    @property
    def nu(self) -> int:
        """Number of inputs."""
        return self.contB.shape[1]


@dataclass(frozen=True, eq=False)
class DiscreteModel:
    """
    Discrete-time plant x[k+1] = discA x[k] + discB u[k] sampled at dt.

    Attributes
    ----------
    discA : StateMatrix
        State transition matrix (nx, nx)
    discB : InputMatrix
        Input matrix (nx, nu)
    dt : float
        Sampling period
    """

    discA: StateMatrix
    discB: InputMatrix
    dt: float

    @property
    def nx(self) -> int:
        """Number of states."""
        return self.discA.shape[0]

    @property
    def nu(self) -> int:
        """Number of inputs."""
        return self.discB.shape[1]


@dataclass(frozen=True, eq=False)
class CostWeights:
    """
    Quadratic cost weights of the stage cost x'Qx + u'Ru.

    Q must be symmetric positive semi-definite and R symmetric positive
    definite. Only squareness is checked here; positive definiteness of R
    is established by the solver's Cholesky factorization.

    Attributes
    ----------
    Q : CostMatrix
        State weight (nx, nx)
    R : CostMatrix
        Input weight (nu, nu)
    """

    Q: CostMatrix
    R: CostMatrix

    def __post_init__(self):
        Q = _as_matrix("Q", self.Q)
        R = _as_matrix("R", self.R)
        if Q.shape[0] != Q.shape[1]:
            raise DimensionMismatchError(f"Q must be square, got shape {Q.shape}")
        if R.shape[0] != R.shape[1]:
            raise DimensionMismatchError(f"R must be square, got shape {R.shape}")
        object.__setattr__(self, "Q", Q)
        object.__setattr__(self, "R", R)

    def check_compatible(self, model: StateSpaceModel) -> None:
        """
        Check the weights against a model's dimensions.

        Raises
        ------
        DimensionMismatchError
            If Q is not (nx, nx) or R is not (nu, nu)
        """
        if self.Q.shape != (model.nx, model.nx):
            raise DimensionMismatchError(
                f"Q must be ({model.nx}, {model.nx}), got {self.Q.shape}",
            )
        if self.R.shape != (model.nu, model.nu):
            raise DimensionMismatchError(
                f"R must be ({model.nu}, {model.nu}), got {self.R.shape}",
            )


# ============================================================================
# Results
# ============================================================================


class DareSolution(TypedDict):
    """
    Discrete algebraic Riccati equation solution.

    Fields
    ------
    solution : StateMatrix
        Stabilizing solution S (nx, nx), symmetric positive semi-definite
    iterations : int
        Number of doubling steps performed
    relative_change : float
        ||H_{k+1} - H_k||_F / ||H_{k+1}||_F at the last step
        (0.0 when both iterates vanish)

    Examples
    --------
    >>> result: DareSolution = solve_dare(Ad, Bd, Q, R)
    >>> S = result['solution']
    >>> print(result['iterations'])
    """

    solution: StateMatrix
    iterations: int
    relative_change: float


class StabilityInfo(TypedDict):
    """
    Discrete-time stability analysis result.

    Stable when every eigenvalue lies strictly inside the unit circle.

    Fields
    ------
    eigenvalues : np.ndarray
        Eigenvalues of the analyzed matrix (complex)
    magnitudes : np.ndarray
        |λ| of each eigenvalue
    spectral_radius : float
        max |λ|
    is_stable : bool
        True if spectral_radius < 1
    is_marginally_stable : bool
        True if spectral_radius is within tolerance of 1
    is_unstable : bool
        True if spectral_radius > 1 beyond tolerance
    """

    eigenvalues: np.ndarray
    magnitudes: np.ndarray
    spectral_radius: float
    is_stable: bool
    is_marginally_stable: bool
    is_unstable: bool


class LQRResult(TypedDict):
    """
    Discrete Linear Quadratic Regulator design result.

    Fields
    ------
    gain : GainMatrix
        Optimal feedback gain K (nu, nx), u[k] = -K x[k]
    cost_to_go : StateMatrix
        DARE solution S (nx, nx)
    controller_eigenvalues : np.ndarray
        Eigenvalues of A - BK
    stability_margin : float
        1 - max|λ| (positive = stable)
    iterations : int
        Doubling steps used by the DARE solver

    Examples
    --------
    >>> result: LQRResult = design_lqr(Ad, Bd, Q, R)
    >>> u = -result['gain'] @ x
    >>> print(result['stability_margin'] > 0)  # True
    """

    gain: GainMatrix
    cost_to_go: StateMatrix
    controller_eigenvalues: np.ndarray
    stability_margin: float
    iterations: int


class DiscreteLQRResult(LQRResult):
    """
    LQR design from a continuous plant.

    Fields
    ------
    discrete_model : DiscreteModel
        The zero-order-hold discretization the regulator was designed for
    """

    discrete_model: DiscreteModel


__all__ = [
    "DEFAULT_TOLERANCE",
    "DEFAULT_MAX_ITERATIONS",
    "SolverConfig",
    "validate_solver_config",
    "StateSpaceModel",
    "DiscreteModel",
    "CostWeights",
    "DareSolution",
    "StabilityInfo",
    "LQRResult",
    "DiscreteLQRResult",
]
