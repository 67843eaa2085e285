from __future__ import annotations

from typing import Any, Optional

from sympy.printing.numpy import NumPyPrinter

from qedkit.symbolic.loop_functions import LoopIntegral


class LibraryPrinter(NumPyPrinter):
    """
    NumPy code printer that routes loop functions to
    ``qedkit.numerics.loop_integrals``.

    Loop-function calls receive the renormalization scale as last argument.
    """

    def __init__(
        self,
        loop_module: str = "loop",
        scale_name: str = "mu_sq",
        settings: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(settings or {})
        self.loop_module = loop_module
        self.scale_name = scale_name

    def _print_Function(self, expr) -> str:
        # Printer dispatch only looks up the leaf class name (B0, C1, ...)
        if isinstance(expr, LoopIntegral):
            return self._print_loop_integral(expr)
        return super()._print_Function(expr)

    def _print_loop_integral(self, expr: LoopIntegral) -> str:
        args = [self._print(arg) for arg in expr.args] + [self.scale_name]
        return f"{self.loop_module}.{expr.func.__name__}({', '.join(args)})"

    def _print_conjugate(self, expr) -> str:
        return f"{self._module_format(self._module + '.conjugate')}({self._print(expr.args[0])})"
