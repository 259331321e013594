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
Control design: exact discretization, SDA Riccati solver and discrete LQR.

Modules
-------
matrix_ops : factorization adapter over NumPy/SciPy
discretization : zero-order-hold discretization via the matrix exponential
dare : structure-preserving doubling algorithm for the DARE
lqr : optimal gain, stability analysis and end-to-end design
control_synthesis : configuration-carrying wrapper
"""

from .control_synthesis import ControlSynthesis
from .dare import dare_residual, solve_dare
from .discretization import discretize, discretize_model
from .lqr import analyze_stability, compute_lqr_gain, design_lqr, design_lqr_from_continuous

__all__ = [
    "ControlSynthesis",
    "discretize",
    "discretize_model",
    "solve_dare",
    "dare_residual",
    "compute_lqr_gain",
    "analyze_stability",
    "design_lqr",
    "design_lqr_from_continuous",
]
