from __future__ import annotations

import logging
from typing import Optional

import sympy

logger = logging.getLogger(__name__)

# Numerical values attached to named constants, used by numerical evaluation
_VALUES: dict[sympy.Symbol, float] = {}


def constant_s(name: str, value: Optional[float] = None) -> sympy.Symbol:
    """
    Create a real, positive model constant (coupling, mass, ...).

    Args:
        name: Symbol name, also used as parameter name in generated code.
        value: Optional numerical value used by ``EvalMode.NUMERICAL`` and as
            default in generated libraries.

    Returns:
        The constant. Calling twice with the same name returns the same symbol.
    """
    symbol = sympy.Symbol(name, positive=True)
    if value is not None:
        _VALUES[symbol] = float(value)
        logger.debug(f"Constant '{name}' set to {value}")
    return symbol


def constant_values() -> dict[sympy.Symbol, float]:
    """Copy of the currently registered constant values."""
    return dict(_VALUES)


def clear_constant_values() -> None:
    _VALUES.clear()
