"""
Abbreviations
=============
Long subexpressions (typically loop-function calls) are replaced by short
named symbols so that results stay readable. The registry remembers every
definition; ``evaluated(expr, EvalMode.ABBREVIATION)`` puts them back.

The same definition is always abbreviated by the same symbol.
"""
from __future__ import annotations

import logging
from typing import Optional

import sympy

logger = logging.getLogger(__name__)


class AbbreviationRegistry:
    """
    Bidirectional map between abbreviation symbols and their definitions.
    """

    def __init__(self) -> None:
        self._definitions: dict[sympy.Symbol, sympy.Expr] = {}
        self._symbols: dict[sympy.Expr, sympy.Symbol] = {}
        self._counters: dict[str, int] = {}

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def abbreviate(self, expr: sympy.Expr, prefix: Optional[str] = None) -> sympy.Symbol:
        """
        Return the symbol standing for ``expr``, creating it if needed.

        Args:
            expr: The expression to abbreviate.
            prefix: Name prefix; defaults to the head of ``expr`` (e.g. ``B0``).
        """
        expr = sympy.sympify(expr)
        if expr in self._symbols:
            return self._symbols[expr]

        if prefix is None:
            prefix = expr.func.__name__ if isinstance(expr, sympy.Function) else "Abbr"
        index = self._counters.get(prefix, 0)
        self._counters[prefix] = index + 1

        symbol = sympy.Symbol(f"{prefix}_{index}")
        self._definitions[symbol] = expr
        self._symbols[expr] = symbol
        logger.debug(f"Abbreviation {symbol} = {expr}")
        return symbol

    def definition(self, symbol: sympy.Symbol) -> Optional[sympy.Expr]:
        return self._definitions.get(symbol)

    def used_in(self, expr: sympy.Expr) -> list[sympy.Symbol]:
        """
        Abbreviations ``expr`` depends on, directly or through other
        abbreviations, ordered so that every symbol comes after the ones its
        definition uses.
        """
        ordered: list[sympy.Symbol] = []
        seen: set[sympy.Symbol] = set()

        def visit(node: sympy.Expr) -> None:
            for symbol in sorted(node.free_symbols, key=lambda s: s.name):
                if symbol in self._definitions and symbol not in seen:
                    seen.add(symbol)
                    visit(self._definitions[symbol])
                    ordered.append(symbol)

        visit(sympy.sympify(expr))
        return ordered

    def expand(self, expr: sympy.Expr) -> sympy.Expr:
        """Replace abbreviations by their definitions, recursively."""
        expr = sympy.sympify(expr)
        while True:
            replacements = {
                s: self._definitions[s] for s in expr.free_symbols if s in self._definitions
            }
            if not replacements:
                return expr
            expr = expr.xreplace(replacements)

    def clear(self) -> None:
        self._definitions.clear()
        self._symbols.clear()
        self._counters.clear()


# Process-wide registry shared by every model
abbreviations = AbbreviationRegistry()


def abbreviate(expr: sympy.Expr, prefix: Optional[str] = None) -> sympy.Symbol:
    """Abbreviate ``expr`` in the process-wide registry."""
    return abbreviations.abbreviate(expr, prefix)
