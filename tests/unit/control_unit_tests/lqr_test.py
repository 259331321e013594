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
Unit Tests for Discrete LQR Design Functions

Tests cover:
- compute_lqr_gain: formula, shapes, agreement with scipy-based design
- analyze_stability: stable, marginal and unstable classification
- design_lqr: result structure, closed-loop stability, warnings
- design_lqr_from_continuous: full drivetrain pipeline
"""

import unittest
import warnings

import numpy as np
from numpy.testing import assert_allclose
from scipy import linalg

try:
    import torch

    HAS_TORCH = True
except ImportError:
    HAS_TORCH = False

from lqrsda.control.discretization import discretize
from lqrsda.control.lqr import (
    analyze_stability,
    compute_lqr_gain,
    design_lqr,
    design_lqr_from_continuous,
)
from lqrsda.exceptions import DimensionMismatchError, NonPositiveDefiniteRError
from lqrsda.systems.drivetrain import (
    DRIVETRAIN_DT,
    drivetrain_cost_weights,
    drivetrain_model,
)
from lqrsda.types.riccati import CostWeights, DiscreteModel, StateSpaceModel


class LQRTestCase(unittest.TestCase):
    """Common test systems."""

    def setUp(self):
        dt = 0.1
        self.Ad = np.array([[1.0, dt], [0.0, 1.0]])
        self.Bd = np.array([[0.5 * dt**2], [dt]])
        self.Q = np.diag([10.0, 1.0])
        self.R = np.array([[0.1]])


# ============================================================================
# Gain Computation
# ============================================================================


class TestComputeLqrGain(LQRTestCase):
    """Test compute_lqr_gain()."""

    def test_matches_formula(self):
        S = linalg.solve_discrete_are(self.Ad, self.Bd, self.Q, self.R)
        expected = np.linalg.inv(self.R + self.Bd.T @ S @ self.Bd) @ (self.Bd.T @ S @ self.Ad)

        K = compute_lqr_gain(self.Ad, self.Bd, self.R, S)

        self.assertEqual(K.shape, (1, 2))
        assert_allclose(K, expected, rtol=1e-12)

    def test_zero_solution_gives_zero_gain(self):
        K = compute_lqr_gain(self.Ad, self.Bd, self.R, np.zeros((2, 2)))

        assert_allclose(K, np.zeros((1, 2)))

    def test_shape_mismatch(self):
        with self.assertRaises(DimensionMismatchError):
            compute_lqr_gain(self.Ad, self.Bd, self.R, np.eye(3))
        with self.assertRaises(DimensionMismatchError):
            compute_lqr_gain(self.Ad, self.Bd, np.eye(2), np.eye(2))


# ============================================================================
# Stability Analysis
# ============================================================================


class TestAnalyzeStability(unittest.TestCase):
    """Test analyze_stability()."""

    def test_stable(self):
        info = analyze_stability(np.array([[0.9, 0.1], [0.0, 0.8]]))

        self.assertTrue(info["is_stable"])
        self.assertFalse(info["is_marginally_stable"])
        self.assertFalse(info["is_unstable"])
        self.assertAlmostEqual(info["spectral_radius"], 0.9)

    def test_marginal(self):
        info = analyze_stability(np.eye(2))

        self.assertFalse(info["is_stable"])
        self.assertTrue(info["is_marginally_stable"])
        self.assertFalse(info["is_unstable"])

    def test_unstable(self):
        info = analyze_stability(np.array([[1.1, 0.0], [0.0, 0.5]]))

        self.assertFalse(info["is_stable"])
        self.assertTrue(info["is_unstable"])

    def test_complex_eigenvalues(self):
        """Magnitudes of a complex pair."""
        r, theta = 0.95, 0.4
        A = r * np.array([[np.cos(theta), -np.sin(theta)], [np.sin(theta), np.cos(theta)]])

        info = analyze_stability(A)

        assert_allclose(info["magnitudes"], [r, r], rtol=1e-12)
        self.assertTrue(np.iscomplexobj(info["eigenvalues"]))

    def test_non_square(self):
        with self.assertRaises(DimensionMismatchError):
            analyze_stability(np.ones((2, 3)))


# ============================================================================
# LQR Design
# ============================================================================


class TestDesignLqr(LQRTestCase):
    """Test design_lqr()."""

    def test_result_structure(self):
        result = design_lqr(self.Ad, self.Bd, self.Q, self.R)

        for key in ["gain", "cost_to_go", "controller_eigenvalues", "stability_margin", "iterations"]:
            self.assertIn(key, result)
        self.assertEqual(result["gain"].shape, (1, 2))
        self.assertEqual(result["cost_to_go"].shape, (2, 2))
        self.assertEqual(result["controller_eigenvalues"].shape, (2,))

    def test_matches_scipy_design(self):
        """Gain agrees with the Schur-based reference."""
        S_ref = linalg.solve_discrete_are(self.Ad, self.Bd, self.Q, self.R)
        K_ref = np.linalg.solve(self.R + self.Bd.T @ S_ref @ self.Bd, self.Bd.T @ S_ref @ self.Ad)

        result = design_lqr(self.Ad, self.Bd, self.Q, self.R)

        assert_allclose(result["cost_to_go"], S_ref, rtol=1e-7)
        assert_allclose(result["gain"], K_ref, rtol=1e-7)

    def test_closed_loop_stable(self):
        result = design_lqr(self.Ad, self.Bd, self.Q, self.R)

        self.assertGreater(result["stability_margin"], 0.0)
        self.assertTrue(np.all(np.abs(result["controller_eigenvalues"]) < 1.0))

    def test_regulates_state_to_origin(self):
        """Simulated closed loop converges."""
        K = design_lqr(self.Ad, self.Bd, self.Q, self.R)["gain"]

        x = np.array([1.0, 0.0])
        for _ in range(300):
            x = self.Ad @ x - self.Bd @ (K @ x)

        self.assertLess(np.linalg.norm(x), 1e-3)

    def test_larger_r_gives_smaller_gain(self):
        """Penalizing control more reduces the gain."""
        K_cheap = design_lqr(self.Ad, self.Bd, self.Q, np.array([[0.01]]))["gain"]
        K_expensive = design_lqr(self.Ad, self.Bd, self.Q, np.array([[10.0]]))["gain"]

        self.assertLess(np.linalg.norm(K_expensive), np.linalg.norm(K_cheap))

    def test_zero_q_warns_marginal(self):
        """Q = 0 on a marginally stable plant leaves it uncontrolled and warns."""
        with self.assertWarns(UserWarning):
            result = design_lqr(self.Ad, self.Bd, np.zeros((2, 2)), self.R)

        assert_allclose(result["gain"], np.zeros((1, 2)))

    def test_no_warning_for_stable_design(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            design_lqr(self.Ad, self.Bd, self.Q, self.R)

    def test_propagates_solver_errors(self):
        with self.assertRaises(NonPositiveDefiniteRError):
            design_lqr(self.Ad, self.Bd, self.Q, np.array([[-0.1]]))

    @unittest.skipIf(not HAS_TORCH, "PyTorch not installed")
    def test_torch_backend(self):
        result = design_lqr(
            torch.tensor(self.Ad),
            torch.tensor(self.Bd),
            torch.tensor(self.Q),
            torch.tensor(self.R),
            backend="torch",
        )

        self.assertIsInstance(result["gain"], torch.Tensor)
        self.assertIsInstance(result["cost_to_go"], torch.Tensor)
        self.assertIsInstance(result["stability_margin"], float)


class TestDesignLqrFromContinuous(unittest.TestCase):
    """Test design_lqr_from_continuous() on the drivetrain."""

    def setUp(self):
        self.model = drivetrain_model()
        self.weights = drivetrain_cost_weights()

    def test_drivetrain_pipeline(self):
        result = design_lqr_from_continuous(self.model, DRIVETRAIN_DT, self.weights)

        self.assertEqual(result["gain"].shape, (2, 5))
        self.assertEqual(result["cost_to_go"].shape, (5, 5))
        self.assertLess(result["iterations"], 20)
        self.assertGreater(result["stability_margin"], 0.0)
        self.assertIsInstance(result["discrete_model"], DiscreteModel)
        self.assertEqual(result["discrete_model"].dt, DRIVETRAIN_DT)

    def test_matches_manual_pipeline(self):
        """Same result as discretize + design_lqr."""
        Ad, Bd = discretize(self.model.contA, self.model.contB, DRIVETRAIN_DT)
        manual = design_lqr(Ad, Bd, self.weights.Q, self.weights.R)

        result = design_lqr_from_continuous(self.model, DRIVETRAIN_DT, self.weights)

        assert_allclose(result["gain"], manual["gain"])
        assert_allclose(result["cost_to_go"], manual["cost_to_go"])

    def test_incompatible_weights(self):
        weights = CostWeights(Q=np.eye(4), R=np.eye(2))

        with self.assertRaises(DimensionMismatchError):
            design_lqr_from_continuous(self.model, DRIVETRAIN_DT, weights)

    def test_invalid_dt(self):
        with self.assertRaises(ValueError):
            design_lqr_from_continuous(self.model, -1.0, self.weights)

    def test_double_integrator(self):
        model = StateSpaceModel(contA=[[0.0, 1.0], [0.0, 0.0]], contB=[[0.0], [1.0]])
        weights = CostWeights(Q=np.diag([10.0, 1.0]), R=[[0.1]])

        result = design_lqr_from_continuous(model, 0.1, weights)

        assert_allclose(result["discrete_model"].discA, [[1.0, 0.1], [0.0, 1.0]], atol=1e-14)
        self.assertGreater(result["stability_margin"], 0.0)


if __name__ == "__main__":
    unittest.main()
