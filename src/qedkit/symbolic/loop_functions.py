"""
Symbolic Loop Functions
=======================
sympy stand-ins for the Passarino-Veltman functions of
``qedkit.numerics.loop_integrals``. They never simplify on construction and
evaluate numerically through ``evalf`` once every argument is a number.
"""
from __future__ import annotations

import sympy

from qedkit import config
from qedkit.numerics import loop_integrals


class LoopIntegral(sympy.Function):
    """Base class of all loop functions; the class name selects the numeric routine."""

    def _eval_evalf(self, prec):
        if not all(arg.is_number for arg in self.args):
            return None
        values = [complex(arg) for arg in self.args]
        numeric = getattr(loop_integrals, self.func.__name__)
        return sympy.sympify(numeric(*values, mu_sq=config.DEFAULT_MU_SQ))


class B0(LoopIntegral):
    nargs = 3


class B1(LoopIntegral):
    nargs = 3


class C0(LoopIntegral):
    nargs = 6


class C1(LoopIntegral):
    nargs = 6


class C2(LoopIntegral):
    nargs = 6


class C00(LoopIntegral):
    nargs = 6


class C11(LoopIntegral):
    nargs = 6


class C12(LoopIntegral):
    nargs = 6


class C22(LoopIntegral):
    nargs = 6


LOOP_FUNCTIONS: dict[str, type[LoopIntegral]] = {
    cls.__name__: cls for cls in (B0, B1, C0, C1, C2, C00, C11, C12, C22)
}
