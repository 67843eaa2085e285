from __future__ import annotations

import io

import pytest

from qedkit.amplitudes import Order, incoming, off_shell, outgoing
from qedkit.view import display, render, show


def test_render_model(qed_model):
    text = render(qed_model)
    assert "U(1)_em" in text
    assert "mu" in text
    assert "[mu_bar, mu, A] : I*e * gamma^mu" in text


def test_display_writes_to_file(qed_model):
    buffer = io.StringIO()
    display(qed_model.get_feynman_rules(), file=buffer)
    assert buffer.getvalue().startswith("1 Feynman rule(s):")


def test_render_wilsons(qed_model):
    wilsons = qed_model.compute_wilson_coefficients(
        Order.ONE_LOOP, [incoming(off_shell("mu")), outgoing(off_shell("mu"))]
    )
    text = render(wilsons)
    assert "2 operator(s)" in text
    assert "Op_0 = mu_bar mu" in text
    assert "Op_1 = mu_bar p_slash mu" in text


def test_show_writes_images(tmp_path, qed_model):
    rules = show(qed_model.get_feynman_rules(), tmp_path / "rules.png")
    assert rules.exists()

    amplitude = qed_model.compute_amplitude(
        Order.ONE_LOOP, [incoming("mu"), outgoing("mu"), outgoing("A")]
    )
    vertex = show(amplitude, tmp_path / "figures" / "vertex.png")
    assert vertex.exists()

    empty = qed_model.compute_amplitude(Order.TREE_LEVEL, [incoming("mu"), outgoing("mu")])
    assert show(empty, tmp_path / "empty.png").exists()


def test_show_rejects_unknown_objects(tmp_path):
    with pytest.raises(TypeError):
        show(42, tmp_path / "nothing.png")
