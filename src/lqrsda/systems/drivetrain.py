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
Differential Drivetrain - LQR Benchmark Plant
==============================================

Linearized differential-drive robot used as a reference problem for the
discretizer and the Riccati solver.

State:  x = [x, y, heading, v_left, v_right]
Input:  u = [V_left, V_right] (motor voltages)

The model is linearized about straight-line motion at a forward
``velocity``, which couples heading into lateral position
(ẏ = velocity * heading). Wheel dynamics and the cross-coupling between
the two sides come from the drivetrain's identified velocity/acceleration
gains.

Examples
--------
>>> model = drivetrain_model(velocity=2.0)
>>> weights = drivetrain_cost_weights()
>>> result = design_lqr_from_continuous(model, DRIVETRAIN_DT, weights)
"""

import numpy as np

from lqrsda.types.riccati import CostWeights, StateSpaceModel

DRIVETRAIN_DT: float = 0.005
"""Controller period in seconds."""


def drivetrain_model(velocity: float = 2.0) -> StateSpaceModel:
    """
    Continuous drivetrain model linearized at forward speed ``velocity``.

    Parameters
    ----------
    velocity : float, default=2.0
        Forward speed in m/s about which the model is linearized

    Returns
    -------
    StateSpaceModel
        contA (5, 5), contB (5, 2); a new instance on every call
    """
    contA = np.array(
        [
            [0.0, 0.0, 0.0, 0.5, 0.5],
            [0.0, 0.0, 0.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, -1.1111111111111112, 1.1111111111111112],
            [0.0, 0.0, 0.0, -10.486221508345572, 5.782171664108812],
            [0.0, 0.0, 0.0, 5.782171664108812, -10.486221508345572],
        ]
    )
    contA[1, 2] = velocity

    contB = np.array(
        [
            [0.0, 0.0],
            [0.0, 0.0],
            [0.0, 0.0],
            [6.664631384780125, -5.106998986026231],
            [-5.106998986026231, 6.664631384780125],
        ]
    )
    return StateSpaceModel(contA=contA, contB=contB)


def drivetrain_cost_weights() -> CostWeights:
    """
    Bryson-style weights for the drivetrain.

    Q penalizes 1/16 m in x, 1/8 m in y, 2.5 rad heading and 0.95 m/s wheel
    speed error; R penalizes 12 V on each side.
    """
    Q = np.diag([256.0, 64.0, 0.16, 1.10803324099723, 1.10803324099723])
    R = np.diag([0.006944444444444444, 0.006944444444444444])
    return CostWeights(Q=Q, R=R)


__all__ = ["DRIVETRAIN_DT", "drivetrain_model", "drivetrain_cost_weights"]
