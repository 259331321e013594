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
lqrsda - Discrete LQR design via the structure-preserving doubling algorithm

Exact zero-order-hold discretization of continuous linear plants and the
stabilizing solution of the discrete algebraic Riccati equation.

Usage
-----
>>> from lqrsda import discretize, solve_dare
>>> Ad, Bd = discretize(Ac, Bc, dt=0.005)
>>> S = solve_dare(Ad, Bd, Q, R)['solution']
"""

from .control import (
    ControlSynthesis,
    analyze_stability,
    compute_lqr_gain,
    dare_residual,
    design_lqr,
    design_lqr_from_continuous,
    discretize,
    discretize_model,
    solve_dare,
)
from .exceptions import (
    DimensionMismatchError,
    MatrixExponentialError,
    NonConvergenceError,
    NonPositiveDefiniteRError,
    RiccatiError,
    SingularIterationError,
)
from .types.riccati import (
    CostWeights,
    DareSolution,
    DiscreteLQRResult,
    DiscreteModel,
    LQRResult,
    StabilityInfo,
    StateSpaceModel,
)

__version__ = "0.1.0"

__all__ = [
    # Design
    "ControlSynthesis",
    "discretize",
    "discretize_model",
    "solve_dare",
    "dare_residual",
    "compute_lqr_gain",
    "analyze_stability",
    "design_lqr",
    "design_lqr_from_continuous",
    # Types
    "StateSpaceModel",
    "DiscreteModel",
    "CostWeights",
    "DareSolution",
    "StabilityInfo",
    "LQRResult",
    "DiscreteLQRResult",
    # Errors
    "RiccatiError",
    "DimensionMismatchError",
    "MatrixExponentialError",
    "NonPositiveDefiniteRError",
    "SingularIterationError",
    "NonConvergenceError",
]
