"""
The SYMBOLIC layer: constants, loop functions, abbreviations and the pure
expression transforms built on sympy.
"""
from qedkit.symbolic.constants import constant_s, constant_values
from qedkit.symbolic.loop_functions import LOOP_FUNCTIONS, LoopIntegral
from qedkit.symbolic.abbreviations import abbreviate, abbreviations
from qedkit.symbolic.transforms import EvalMode, evaluated, deep_expanded, deep_hard_factored

__all__ = [
    "constant_s", "constant_values",
    "LOOP_FUNCTIONS", "LoopIntegral",
    "abbreviate", "abbreviations",
    "EvalMode", "evaluated", "deep_expanded", "deep_hard_factored",
]
