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
Backend Types

Backend identifiers and defaults for array conversion at the API boundary.

All factorizations run on float64 NumPy arrays; the backend only decides
which array type is accepted on input and returned on output.

Usage
-----
>>> from lqrsda.types.backends import Backend, validate_backend
>>> backend: Backend = validate_backend('torch')
"""

from typing import Literal, Tuple

import numpy as np

# ============================================================================
# Backend Types
# ============================================================================

Backend = Literal["numpy", "torch", "jax"]
"""
Backend identifier for input/output arrays.

Valid values:
- 'numpy': NumPy arrays
- 'torch': PyTorch tensors (returned as float64 CPU tensors)
- 'jax': JAX arrays

Examples
--------
>>> backend: Backend = 'numpy'
>>> result = solve_dare(A, B, Q, R, backend=backend)
"""


# ============================================================================
# Defaults
# ============================================================================

DEFAULT_BACKEND: Backend = "numpy"
"""Default backend for all public functions."""

DEFAULT_DTYPE = np.float64
"""
Working precision.

Every computation is carried out in 64-bit floating point, whatever the
dtype of the inputs.
"""

VALID_BACKENDS: Tuple[str, ...] = ("numpy", "torch", "jax")


# ============================================================================
# Validation
# ============================================================================


def validate_backend(backend: str) -> Backend:
    """
    Validate and normalize backend string.

    Parameters
    ----------
    backend : str
        Backend name to validate

    Returns
    -------
    Backend
        Validated backend (typed)

    Raises
    ------
    ValueError
        If backend is not valid

    Examples
    --------
    >>> validate_backend('numpy')
    'numpy'
    >>> validate_backend('pytorch')  # ValueError
    """
    if backend not in VALID_BACKENDS:
        raise ValueError(f"Invalid backend '{backend}'. " f"Choose from: {VALID_BACKENDS}")
    return backend


__all__ = [
    "Backend",
    "DEFAULT_BACKEND",
    "DEFAULT_DTYPE",
    "VALID_BACKENDS",
    "validate_backend",
]
