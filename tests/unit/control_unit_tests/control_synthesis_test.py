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
Unit Tests for ControlSynthesis Wrapper

Tests the thin wrapper class that routes to the pure discretization,
Riccati and LQR functions with stored configuration.
"""

import unittest
from unittest.mock import patch

import numpy as np
from numpy.testing import assert_allclose

from lqrsda.control.control_synthesis import ControlSynthesis
from lqrsda.control.dare import solve_dare
from lqrsda.exceptions import NonConvergenceError
from lqrsda.systems.drivetrain import (
    DRIVETRAIN_DT,
    drivetrain_cost_weights,
    drivetrain_model,
)
from lqrsda.types.riccati import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE


class TestControlSynthesisInit(unittest.TestCase):
    """Test construction and configuration."""

    def test_defaults(self):
        synthesis = ControlSynthesis()

        self.assertEqual(synthesis.backend, "numpy")
        self.assertEqual(synthesis.tolerance, DEFAULT_TOLERANCE)
        self.assertEqual(synthesis.max_iterations, DEFAULT_MAX_ITERATIONS)

    def test_get_config(self):
        synthesis = ControlSynthesis(tolerance=1e-12, max_iterations=50)

        config = synthesis.get_config()

        self.assertEqual(config, {"backend": "numpy", "tolerance": 1e-12, "max_iterations": 50})

    def test_invalid_backend(self):
        with self.assertRaises(ValueError):
            ControlSynthesis(backend="tensorflow")

    def test_invalid_tolerance(self):
        with self.assertRaises(ValueError):
            ControlSynthesis(tolerance=-1.0)

    def test_invalid_max_iterations(self):
        with self.assertRaises(ValueError):
            ControlSynthesis(max_iterations=0)

    def test_repr(self):
        text = repr(ControlSynthesis(max_iterations=50))

        self.assertIn("ControlSynthesis", text)
        self.assertIn("numpy", text)
        self.assertIn("max_iterations=50", text)


class TestControlSynthesisRouting(unittest.TestCase):
    """Test that methods route to the pure functions with stored settings."""

    def setUp(self):
        self.model = drivetrain_model()
        self.weights = drivetrain_cost_weights()
        self.synthesis = ControlSynthesis(tolerance=1e-11, max_iterations=40)
        self.Ad, self.Bd = self.synthesis.discretize(self.model.contA, self.model.contB, DRIVETRAIN_DT)

    @patch("lqrsda.control.control_synthesis.solve_dare")
    def test_solve_dare_passes_settings(self, mock_solve):
        self.synthesis.solve_dare(self.Ad, self.Bd, self.weights.Q, self.weights.R)

        mock_solve.assert_called_once()
        kwargs = mock_solve.call_args.kwargs
        self.assertEqual(kwargs["tolerance"], 1e-11)
        self.assertEqual(kwargs["max_iterations"], 40)
        self.assertEqual(kwargs["backend"], "numpy")

    @patch("lqrsda.control.control_synthesis.design_lqr")
    def test_design_lqr_passes_settings(self, mock_design):
        self.synthesis.design_lqr(self.Ad, self.Bd, self.weights.Q, self.weights.R)

        kwargs = mock_design.call_args.kwargs
        self.assertEqual(kwargs["tolerance"], 1e-11)
        self.assertEqual(kwargs["max_iterations"], 40)

    def test_solve_dare_matches_function(self):
        expected = solve_dare(self.Ad, self.Bd, self.weights.Q, self.weights.R, tolerance=1e-11)

        result = self.synthesis.solve_dare(self.Ad, self.Bd, self.weights.Q, self.weights.R)

        assert_allclose(result["solution"], expected["solution"])
        self.assertEqual(result["iterations"], expected["iterations"])

    def test_iteration_cap_applied(self):
        synthesis = ControlSynthesis(max_iterations=1)

        with self.assertRaises(NonConvergenceError):
            synthesis.solve_dare(self.Ad, self.Bd, self.weights.Q, self.weights.R)

    def test_design_from_continuous(self):
        result = self.synthesis.design_from_continuous(self.model, DRIVETRAIN_DT, self.weights)

        self.assertEqual(result["gain"].shape, (2, 5))
        assert_allclose(result["discrete_model"].discA, self.Ad)
        self.assertTrue(np.all(np.abs(result["controller_eigenvalues"]) < 1.0))


if __name__ == "__main__":
    unittest.main()
