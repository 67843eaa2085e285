from __future__ import annotations

import sympy

from qedkit.codegen import LibraryPrinter
from qedkit.symbolic.loop_functions import B0, C12

x, y = sympy.symbols("x y")


def test_loop_functions_call_numeric_module():
    printer = LibraryPrinter()
    assert printer.doprint(B0(x, 0, y)) == "loop.B0(x, 0, y, mu_sq)"
    assert printer.doprint(C12(x, x, 0, 0, y, y)) == "loop.C12(x, x, 0, 0, y, y, mu_sq)"


def test_custom_module_and_scale():
    printer = LibraryPrinter(loop_module="pv", scale_name="scale")
    assert printer.doprint(B0(x, 0, y)) == "pv.B0(x, 0, y, scale)"


def test_conjugate():
    z = sympy.Symbol("z")
    assert LibraryPrinter().doprint(sympy.conjugate(z)) == "numpy.conjugate(z)"
    printed = LibraryPrinter().doprint(sympy.conjugate(B0(x, 0, y)))
    assert printed == "numpy.conjugate(loop.B0(x, 0, y, mu_sq))"


def test_other_functions_use_numpy():
    assert LibraryPrinter().doprint(sympy.log(x)) == "numpy.log(x)"
