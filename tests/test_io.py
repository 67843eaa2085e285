from __future__ import annotations

import pytest
import sympy

from qedkit.io import IOManager
from qedkit.symbolic import constant_s
from qedkit.symbolic.loop_functions import B0, C12


def test_save_and_load_keeps_order_and_assumptions(tmp_path):
    m = constant_s("m_mu")
    s = sympy.Symbol("s_12", real=True)
    expressions = {
        "second": s * B0(s, 0, m**2),
        "first": sympy.Rational(2, 3) * C12(m**2, m**2, 0, 0, m**2, m**2) / sympy.pi,
    }
    filepath = tmp_path / "archive.h5"
    IOManager.save_expressions(filepath, expressions, metadata={"library": "demolib"})

    loaded = IOManager.load_expressions(filepath)
    assert list(loaded) == ["second", "first"]
    assert loaded == expressions
    assert next(iter(loaded["first"].atoms(C12))).func is C12
    assert constant_s("m_mu") in loaded["second"].free_symbols

    metadata = IOManager.load_metadata(filepath)
    assert metadata["library"] == "demolib"
    assert "version" in metadata


def test_large_expression_goes_to_dataset(tmp_path):
    x = sympy.Symbol("x")
    big = sympy.Add(*(sympy.Symbol(f"a_{i}") * x**i for i in range(2000)))
    filepath = tmp_path / "big.h5"
    IOManager.save_expressions(filepath, {"big": big})
    assert IOManager.load_expressions(filepath)["big"] == big


def test_not_hdf5(tmp_path):
    filepath = tmp_path / "plain.txt"
    filepath.write_text("not an archive")
    with pytest.raises(ValueError):
        IOManager.load_expressions(filepath)
