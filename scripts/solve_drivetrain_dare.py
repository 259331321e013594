#!/usr/bin/env python3
"""
Solve the drivetrain DARE and report the solution and elapsed time.

Builds the differential drivetrain plant, discretizes it at the controller
period, solves the discrete algebraic Riccati equation with the SDA and
prints the solution matrix followed by the solve time in microseconds.

Usage:
    python scripts/solve_drivetrain_dare.py
"""

import sys
import time

import numpy as np

from lqrsda import RiccatiError, dare_residual, discretize, solve_dare
from lqrsda.systems import DRIVETRAIN_DT, drivetrain_cost_weights, drivetrain_model


def main() -> int:
    model = drivetrain_model(velocity=2.0)
    weights = drivetrain_cost_weights()

    try:
        A, B = discretize(model.contA, model.contB, DRIVETRAIN_DT)

        start = time.perf_counter()
        result = solve_dare(A, B, weights.Q, weights.R)
        elapsed_us = (time.perf_counter() - start) * 1e6
    except RiccatiError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1

    S = result["solution"]
    residual = dare_residual(A, B, weights.Q, weights.R, S, relative=True)

    with np.printoptions(precision=6, suppress=False, linewidth=120):
        print(S)
    print()
    print(f"iterations: {result['iterations']}")
    print(f"relative residual: {residual:.3e}")
    print(f"{elapsed_us:.0f} us")
    return 0


if __name__ == "__main__":
    sys.exit(main())
