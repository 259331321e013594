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
Core Types - Matrix Aliases

Semantic aliases for the dense matrices that flow through discretization
and Riccati design:
- Multi-backend array type (NumPy, PyTorch, JAX)
- State, input, cost and gain matrices

Every alias resolves to ``ArrayLike``; the names only convey the role and
shape convention of the matrix.

Usage
-----
>>> from lqrsda.types.core import StateMatrix, InputMatrix, GainMatrix
>>>
>>> def feedback(K: GainMatrix, x):
...     return -K @ x
"""

from typing import TYPE_CHECKING, Union

import numpy as np

if TYPE_CHECKING:
    import jax.numpy as jnp
    import torch


# ============================================================================
# Basic Array Types - Multi-Backend Support
# ============================================================================

ArrayLike = Union[np.ndarray, "torch.Tensor", "jnp.ndarray"]
"""
Array-like type supporting multiple backends.

Inputs of any backend are converted to float64 NumPy arrays before any
factorization; results are converted back to the requested backend.
"""

ScalarLike = Union[float, int, np.number]
"""Scalar such as a time step or tolerance."""


# ============================================================================
# Matrix Types - Semantic Naming by Role
# ============================================================================

StateMatrix = ArrayLike
"""
State matrix (nx, nx).

Uses:
- Continuous: contA (dynamics matrix of ẋ = Ax + Bu)
- Discrete: discA (state transition matrix of x[k+1] = Ax[k] + Bu[k])
- Riccati solution: S (cost-to-go)

Examples
--------
>>> Ac: StateMatrix = np.array([[0, 1], [-1, 0]])
>>> Ad: StateMatrix = expm(Ac * dt)
"""

InputMatrix = ArrayLike
"""
Input matrix B (nx, nu).

Maps the input vector to the state update:
    Continuous: ẋ = Ax + Bu
    Discrete:   x[k+1] = Ax[k] + Bu[k]

Examples
--------
>>> # Double integrator, only velocity is actuated
>>> B: InputMatrix = np.array([[0.0], [1.0]])
"""

CostMatrix = ArrayLike
"""
Cost/weight matrix for optimal control.

Defines the stage cost x'Qx + u'Ru:
- Q: state cost (nx, nx), symmetric positive semi-definite
- R: input cost (nu, nu), symmetric positive definite

Examples
--------
>>> Q: CostMatrix = np.diag([10, 1])
>>> R: CostMatrix = np.array([[0.1]])
"""

GainMatrix = ArrayLike
"""
State feedback gain K (nu, nx) for the control law u = -Kx.
"""


__all__ = [
    "ArrayLike",
    "ScalarLike",
    "StateMatrix",
    "InputMatrix",
    "CostMatrix",
    "GainMatrix",
]
