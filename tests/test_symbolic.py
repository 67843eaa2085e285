from __future__ import annotations

import math

import pytest
import sympy

from qedkit.symbolic import (
    EvalMode,
    abbreviate,
    abbreviations,
    constant_s,
    constant_values,
    deep_expanded,
    deep_hard_factored,
    evaluated,
)
from qedkit.symbolic.loop_functions import LOOP_FUNCTIONS, B0, C0

x, y = sympy.symbols("x y")


class TestConstants:
    def test_same_name_same_symbol(self):
        assert constant_s("e") == constant_s("e")
        assert constant_s("e").is_positive

    def test_values_are_registered(self):
        m = constant_s("m", 0.105)
        assert constant_values() == {m: 0.105}
        constant_s("g")
        assert constant_s("g") not in constant_values()


class TestAbbreviations:
    def test_same_definition_same_symbol(self):
        first = abbreviate(B0(x, 0, y))
        assert abbreviate(B0(x, 0, y)) == first
        assert first.name == "B0_0"
        assert abbreviate(B0(y, 0, x)).name == "B0_1"
        assert abbreviate(x + y).name == "Abbr_0"
        assert len(abbreviations) == 3

    def test_custom_prefix(self):
        assert abbreviate(x * y, prefix="K").name == "K_0"

    def test_nested_expansion_and_order(self):
        inner = abbreviate(B0(x, 0, y))
        outer = abbreviate(inner**2 + x, prefix="Outer")
        expr = 2 * outer

        assert abbreviations.used_in(expr) == [inner, outer]
        assert abbreviations.expand(expr) == 2 * (B0(x, 0, y) ** 2 + x)
        assert inner in abbreviations
        assert abbreviations.definition(outer) == inner**2 + x

    def test_clear(self):
        abbreviate(B0(x, 0, y))
        abbreviations.clear()
        assert len(abbreviations) == 0
        assert abbreviate(B0(x, 0, y)).name == "B0_0"


class TestLoopFunctions:
    def test_registry(self):
        assert set(LOOP_FUNCTIONS) == {"B0", "B1", "C0", "C1", "C2", "C00", "C11", "C12", "C22"}

    def test_no_simplification_on_construction(self):
        assert B0(0, 1, 1).func is B0

    def test_evalf(self):
        value = complex(B0(0, 4, 4).evalf())
        assert value == pytest.approx(-math.log(4.0))

    def test_symbolic_arguments_stay_unevaluated(self):
        assert B0(x, 0, 1).evalf().has(B0)


class TestTransforms:
    def test_abbreviation_mode_expands(self):
        a = abbreviate(C0(x, x, 0, 0, x, x))
        assert evaluated(3 * a, EvalMode.ABBREVIATION) == 3 * C0(x, x, 0, 0, x, x)
        assert evaluated(3 * a) == evaluated(3 * a, EvalMode.ABBREVIATION)

    def test_numerical_mode(self):
        m = constant_s("m", 2.0)
        a = abbreviate(B0(0, m**2, m**2))
        value = evaluated(m * a, EvalMode.NUMERICAL)
        assert complex(value) == pytest.approx(-2.0 * math.log(4.0))

    def test_numerical_mode_keeps_unknown_constants(self):
        g = constant_s("g")
        assert evaluated(2 * g, EvalMode.NUMERICAL).free_symbols == {g}

    def test_deep_expanded(self):
        expr = B0((x + y) ** 2, 0, 1) * (x + 1)
        assert deep_expanded(expr) == B0(x**2 + 2 * x * y + y**2, 0, 1) * x + B0(x**2 + 2 * x * y + y**2, 0, 1)

    def test_deep_hard_factored(self):
        assert deep_hard_factored(x**2 + 2 * x + 1) == (x + 1) ** 2
        expr = x * B0(x**2 - y**2, 0, 1) + y * B0(x**2 - y**2, 0, 1)
        factored = deep_hard_factored(expr)
        assert factored.is_Mul
        assert x + y in factored.args
        assert deep_expanded(factored - expr) == 0

    def test_transforms_do_not_mutate(self):
        expr = (x + 1) ** 2
        deep_expanded(expr)
        assert expr == (x + 1) ** 2
