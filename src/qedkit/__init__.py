"""
qedkit: one-loop Wilson coefficients of abelian gauge theories and numeric
library generation.
"""
from qedkit.amplitudes import (
    DiracCoupling,
    Order,
    chromo_magnetic_operator,
    get_wilson_coefficient,
    incoming,
    off_shell,
    outgoing,
)
from qedkit.codegen import Library
from qedkit.errors import AmplitudeError, LibraryBuildError, ModelError
from qedkit.model import GroupType, Model, dirac_fermion_s
from qedkit.symbolic import EvalMode, constant_s, deep_expanded, deep_hard_factored, evaluated
from qedkit.view import display, show

__version__ = "0.1.0"

__all__ = [
    "DiracCoupling", "Order", "chromo_magnetic_operator", "get_wilson_coefficient",
    "incoming", "off_shell", "outgoing",
    "Library",
    "AmplitudeError", "LibraryBuildError", "ModelError",
    "GroupType", "Model", "dirac_fermion_s",
    "EvalMode", "constant_s", "deep_expanded", "deep_hard_factored", "evaluated",
    "display", "show",
]
