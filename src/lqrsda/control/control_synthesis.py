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
Control Synthesis Wrapper

Thin wrapper around the discretization, Riccati and LQR functions that
carries solver configuration (backend, tolerance, iteration cap) so it does
not have to be repeated at every call.

Design Philosophy
-----------------
- Composition not inheritance
- Thin wrapper (configuration only, no caching)
- Routes to pure functions

Usage
-----
>>> synthesis = ControlSynthesis(tolerance=1e-12, max_iterations=50)
>>> Ad, Bd = synthesis.discretize(Ac, Bc, dt=0.005)
>>> S = synthesis.solve_dare(Ad, Bd, Q, R)['solution']
>>> K = synthesis.design_lqr(Ad, Bd, Q, R)['gain']
"""

from typing import Tuple

from lqrsda.control.dare import solve_dare
from lqrsda.control.discretization import discretize
from lqrsda.control.lqr import design_lqr, design_lqr_from_continuous
from lqrsda.types.backends import DEFAULT_BACKEND, Backend, validate_backend
from lqrsda.types.core import CostMatrix, InputMatrix, ScalarLike, StateMatrix
from lqrsda.types.riccati import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    CostWeights,
    DareSolution,
    DiscreteLQRResult,
    LQRResult,
    SolverConfig,
    StateSpaceModel,
    validate_solver_config,
)


class ControlSynthesis:
    """
    Control synthesis wrapper holding solver configuration.

    Attributes
    ----------
    backend : Backend
        Computational backend ('numpy', 'torch', 'jax')
    tolerance : float
        Relative convergence tolerance of the Riccati iteration
    max_iterations : int
        Iteration cap of the Riccati iteration

    Examples
    --------
    >>> synthesis = ControlSynthesis(backend='torch')
    >>> result = synthesis.design_lqr(Ad_t, Bd_t, Q_t, R_t)
    >>> K = result['gain']  # torch.Tensor
    """

    def __init__(
        self,
        backend: Backend = DEFAULT_BACKEND,
        tolerance: float = DEFAULT_TOLERANCE,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ):
        """
        Initialize control synthesis wrapper.

        Raises:
            ValueError: If backend, tolerance or max_iterations is invalid
        """
        validate_solver_config(tolerance, max_iterations)
        self.backend = validate_backend(backend)
        self.tolerance = float(tolerance)
        self.max_iterations = int(max_iterations)

    def discretize(
        self,
        contA: StateMatrix,
        contB: InputMatrix,
        dt: ScalarLike,
    ) -> Tuple[StateMatrix, InputMatrix]:
        """Zero-order-hold discretization, see :func:`discretize`."""
        return discretize(contA, contB, dt, backend=self.backend)

    def solve_dare(
        self,
        A: StateMatrix,
        B: InputMatrix,
        Q: CostMatrix,
        R: CostMatrix,
    ) -> DareSolution:
        """SDA Riccati solve with this instance's settings, see :func:`solve_dare`."""
        return solve_dare(
            A,
            B,
            Q,
            R,
            tolerance=self.tolerance,
            max_iterations=self.max_iterations,
            backend=self.backend,
        )

    def design_lqr(
        self,
        A: StateMatrix,
        B: InputMatrix,
        Q: CostMatrix,
        R: CostMatrix,
    ) -> LQRResult:
        """
        Design a discrete LQR controller.

        Routes to :func:`lqrsda.control.lqr.design_lqr` with this
        instance's backend, tolerance and iteration cap.
        """
        return design_lqr(
            A,
            B,
            Q,
            R,
            tolerance=self.tolerance,
            max_iterations=self.max_iterations,
            backend=self.backend,
        )

    def design_from_continuous(
        self,
        model: StateSpaceModel,
        dt: ScalarLike,
        weights: CostWeights,
    ) -> DiscreteLQRResult:
        """
        Discretize a continuous plant and design its LQR.

        Model and weights are float64 NumPy containers, so the result is
        always NumPy regardless of the backend setting.
        """
        return design_lqr_from_continuous(
            model,
            dt,
            weights,
            tolerance=self.tolerance,
            max_iterations=self.max_iterations,
        )

    def get_config(self) -> SolverConfig:
        """Current configuration as a SolverConfig dictionary."""
        config: SolverConfig = {
            "backend": self.backend,
            "tolerance": self.tolerance,
            "max_iterations": self.max_iterations,
        }
        return config

    def __repr__(self) -> str:
        return (
            f"ControlSynthesis(backend='{self.backend}', "
            f"tolerance={self.tolerance:.1e}, max_iterations={self.max_iterations})"
        )
