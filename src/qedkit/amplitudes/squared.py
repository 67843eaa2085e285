from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import sympy

from qedkit.amplitudes.wilson import OperatorKind
from qedkit.errors import AmplitudeError

if TYPE_CHECKING:
    from qedkit.amplitudes.wilson import WilsonSet

logger = logging.getLogger(__name__)


def squared_amplitude(wilsons: WilsonSet) -> sympy.Expr:
    """
    Spin-averaged squared amplitude of a fermion two-point function.

    With ``Sigma = C_p p_slash + C_m``, the spin sum is
    ``Tr[(p_slash + m) Sigma (p_slash + m) Sigma_bar]``, which gives

        |M|^2 = 2 (|C_p p^2 + m C_m|^2 + p^2 |C_m + m C_p|^2)

    after averaging over the two incoming spin states.

    Raises:
        AmplitudeError: If the Wilson set is not a fermion two-point function.
    """
    amplitude = wilsons.amplitude
    kinds = {w.op.kind for w in wilsons}
    if amplitude is None or "p^2" not in amplitude.kinematics or not kinds <= {
        OperatorKind.SCALAR, OperatorKind.SLASHED_MOMENTUM,
    }:
        raise AmplitudeError(
            f"Squared amplitudes are only available for fermion two-point functions, "
            f"not for [{', '.join(str(leg) for leg in wilsons.legs)}]."
        )

    fermion = wilsons.legs[0].name
    m = amplitude.masses[fermion]
    p_sq = amplitude.kinematics["p^2"]

    c_m = sympy.S.Zero
    c_p = sympy.S.Zero
    for wilson in wilsons:
        if wilson.op.kind is OperatorKind.SCALAR:
            c_m = wilson.coef
        else:
            c_p = wilson.coef

    a = c_p * p_sq + m * c_m
    b = c_m + m * c_p
    result = 2 * (a * sympy.conjugate(a) + p_sq * b * sympy.conjugate(b))
    logger.info(f"Squared amplitude computed for [{amplitude.process}].")
    return result
