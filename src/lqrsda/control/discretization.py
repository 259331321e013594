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
Exact Discretization of Linear Systems

Converts a continuous-time linear model to its zero-order-hold discrete
equivalent using the matrix exponential of an augmented block matrix.

Mathematical Form
-----------------
Continuous system: ẋ = Ac x + Bc u
Discrete system:   x[k+1] = Ad x[k] + Bd u[k]

With the input held constant over each sample period dt:

    M = [Ac  Bc]        exp(M dt) = [Ad  Bd]
        [ 0   0]                    [ 0   I]

This is the exact solution of the ODE at the sample instants, valid for
singular Ac as well (no inverse of Ac is ever formed).

Examples
--------
>>> A = np.array([[0.0, 1.0], [0.0, 0.0]])
>>> B = np.array([[0.0], [1.0]])
>>> Ad, Bd = discretize(A, B, dt=0.1)
>>> Ad
array([[1. , 0.1],
       [0. , 1. ]])
>>> Bd
array([[0.005],
       [0.1  ]])
"""

from typing import Tuple

import numpy as np

from lqrsda.control.matrix_ops import from_numpy, matrix_exponential, to_numpy
from lqrsda.exceptions import DimensionMismatchError
from lqrsda.types.backends import Backend
from lqrsda.types.core import InputMatrix, ScalarLike, StateMatrix
from lqrsda.types.riccati import DiscreteModel, StateSpaceModel


def _validate_dt(dt: ScalarLike) -> float:
    dt = float(dt)
    if not np.isfinite(dt) or dt <= 0:
        raise ValueError(f"Time step dt must be positive, got {dt}")
    return dt


def discretize(
    contA: StateMatrix,
    contB: InputMatrix,
    dt: ScalarLike,
    backend: Backend = "numpy",
) -> Tuple[StateMatrix, InputMatrix]:
    """
    Zero-order-hold discretization of (contA, contB) at period dt.

    Parameters
    ----------
    contA : StateMatrix
        Continuous dynamics matrix (nx, nx)
    contB : InputMatrix
        Continuous input matrix (nx, nu)
    dt : float
        Sample period, > 0
    backend : Backend
        Array type of the inputs and of the returned matrices

    Returns
    -------
    discA : StateMatrix
        Top-left (nx, nx) block of exp(M dt)
    discB : InputMatrix
        Top-right (nx, nu) block of exp(M dt)

    Raises
    ------
    ValueError
        If dt is not a positive finite number
    DimensionMismatchError
        If contA is not square or contB does not have nx rows
    MatrixExponentialError
        If the exponential of the augmented matrix cannot be computed

    Notes
    -----
    As dt -> 0, discA = I + dt contA + O(dt²) and discB = dt contB + O(dt²).
    """
    dt = _validate_dt(dt)
    A = to_numpy(contA, backend)
    B = to_numpy(contB, backend)

    if A.ndim != 2 or A.size == 0 or A.shape[0] != A.shape[1]:
        raise DimensionMismatchError(f"contA must be a non-empty square matrix, got shape {A.shape}")
    nx = A.shape[0]
    if B.ndim != 2 or B.shape[0] != nx or B.shape[1] == 0:
        raise DimensionMismatchError(f"contB must have shape ({nx}, nu) with nu > 0, got {B.shape}")
    nu = B.shape[1]

    # M = [A  B]
    #     [0  0]
    M = np.zeros((nx + nu, nx + nu))
    M[:nx, :nx] = A
    M[:nx, nx:] = B

    # ϕ = eᴹᵀ = [A_d  B_d]
    #           [ 0    I ]
    phi = matrix_exponential(M * dt)

    discA = phi[:nx, :nx].copy()
    discB = phi[:nx, nx:].copy()
    return from_numpy(discA, backend), from_numpy(discB, backend)


def discretize_model(model: StateSpaceModel, dt: ScalarLike) -> DiscreteModel:
    """
    Discretize a StateSpaceModel.

    Same computation as :func:`discretize`, packaged as a DiscreteModel.

    Examples
    --------
    >>> model = drivetrain_model()
    >>> discrete = discretize_model(model, dt=0.005)
    >>> discrete.discA.shape
    (5, 5)
    """
    discA, discB = discretize(model.contA, model.contB, dt)
    return DiscreteModel(discA=discA, discB=discB, dt=float(dt))


__all__ = ["discretize", "discretize_model"]
