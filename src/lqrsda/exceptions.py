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
Exceptions raised by discretization and Riccati design.

All errors derive from RiccatiError so callers can catch the whole family,
and also from the builtin class that matches their nature (ValueError for
malformed input, LinAlgError for numerical breakdown).
"""

from typing import Optional

from numpy.linalg import LinAlgError


class RiccatiError(Exception):
    """Base class for discretization and DARE solver failures"""

    pass


class DimensionMismatchError(RiccatiError, ValueError):
    """Raised when matrix shapes are inconsistent"""

    pass


class MatrixExponentialError(RiccatiError, LinAlgError):
    """Raised when the matrix exponential of the augmented system fails"""

    pass


class NonPositiveDefiniteRError(RiccatiError, LinAlgError):
    """Raised when the Cholesky factorization of the input cost R fails"""

    pass


class SingularIterationError(RiccatiError, LinAlgError):
    """
    Raised when W = I + G_k H_k cannot be factored.

    Attributes
    ----------
    iteration : int
        Zero-based index of the doubling step that broke down
    """

    def __init__(self, message: str, iteration: int):
        super().__init__(message)
        self.iteration = iteration


class NonConvergenceError(RiccatiError, RuntimeError):
    """
    Raised when the doubling iteration stops without meeting its tolerance.

    Attributes
    ----------
    iterations : int
        Number of doubling steps performed
    relative_change : float or None
        Last relative change of H, None if it could not be evaluated
    """

    def __init__(self, message: str, iterations: int, relative_change: Optional[float] = None):
        super().__init__(message)
        self.iterations = iterations
        self.relative_change = relative_change


__all__ = [
    "RiccatiError",
    "DimensionMismatchError",
    "MatrixExponentialError",
    "NonPositiveDefiniteRError",
    "SingularIterationError",
    "NonConvergenceError",
]
