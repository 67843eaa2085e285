"""
Expression Transforms
=====================
Pure functions on sympy expressions. None of them mutates its argument.
"""
from __future__ import annotations

import logging
from enum import Enum

import sympy

from qedkit.symbolic.abbreviations import abbreviations
from qedkit.symbolic.constants import constant_values

logger = logging.getLogger(__name__)


class EvalMode(Enum):
    ABBREVIATION = "abbreviation"
    NUMERICAL = "numerical"


def evaluated(expr: sympy.Expr, mode: EvalMode = EvalMode.ABBREVIATION) -> sympy.Expr:
    """
    Evaluate an expression.

    Args:
        expr: Expression, possibly containing abbreviations.
        mode: ``ABBREVIATION`` expands abbreviations; ``NUMERICAL`` also
            substitutes the values given to ``constant_s`` and evaluates
            numbers, loop functions included.

    Returns:
        The evaluated expression.
    """
    result = abbreviations.expand(expr)
    if mode is EvalMode.NUMERICAL:
        values = constant_values()
        missing = [s for s in result.free_symbols if s not in values]
        if missing:
            logger.debug(f"No numerical value for {sorted(s.name for s in missing)}")
        result = result.xreplace({s: sympy.Float(v) for s, v in values.items()}).evalf()
    return result


def deep_expanded(expr: sympy.Expr) -> sympy.Expr:
    """Expand products and powers, inside function arguments too."""
    return sympy.expand(sympy.sympify(expr), deep=True)


def deep_hard_factored(expr: sympy.Expr) -> sympy.Expr:
    """
    Factor an expression as far as possible, inside function arguments too.

    Not recommended on large expressions.
    """
    return sympy.factor_terms(sympy.factor(sympy.sympify(expr), deep=True))
