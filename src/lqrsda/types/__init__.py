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
Type definitions for discretization and Riccati design.

Modules
-------
core : matrix aliases (StateMatrix, InputMatrix, CostMatrix, GainMatrix)
backends : backend identifiers and working precision
riccati : problem data, solver configuration and result types
"""

from .backends import DEFAULT_BACKEND, DEFAULT_DTYPE, Backend, validate_backend
from .core import ArrayLike, CostMatrix, GainMatrix, InputMatrix, ScalarLike, StateMatrix
from .riccati import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    CostWeights,
    DareSolution,
    DiscreteLQRResult,
    DiscreteModel,
    LQRResult,
    SolverConfig,
    StabilityInfo,
    StateSpaceModel,
    validate_solver_config,
)

__all__ = [
    # Backends
    "Backend",
    "DEFAULT_BACKEND",
    "DEFAULT_DTYPE",
    "validate_backend",
    # Core
    "ArrayLike",
    "ScalarLike",
    "StateMatrix",
    "InputMatrix",
    "CostMatrix",
    "GainMatrix",
    # Riccati
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
