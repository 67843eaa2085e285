from __future__ import annotations

import math

import numpy as np
import pytest

from qedkit.numerics import gauss, loop_integrals as loop


class TestGauss:
    def test_interval_rule(self):
        points, weights = gauss.gauss_points_weights_interval(5)
        assert np.all((points > 0.0) & (points < 1.0))
        assert weights.sum() == pytest.approx(1.0)
        # Exact for polynomials up to degree 2n - 1
        assert np.dot(weights, points**9) == pytest.approx(0.1)

    def test_simplex_rule(self):
        points, weights = gauss.gauss_points_weights_simplex(8)
        x, y = points[:, 0], points[:, 1]
        assert points.shape == (64, 2)
        assert np.all(x + y <= 1.0)
        assert weights.sum() == pytest.approx(0.5)
        assert np.dot(weights, x) == pytest.approx(1.0 / 6.0)
        assert np.dot(weights, x * y) == pytest.approx(1.0 / 24.0)

    def test_invalid_order(self):
        with pytest.raises(ValueError):
            gauss.gauss_points_weights_interval(0)


class TestTwoPoint:
    def test_zero_momentum_equal_masses(self):
        assert loop.B0(0.0, 2.0, 2.0) == pytest.approx(-math.log(2.0))
        assert loop.B0(0.0, 2.0, 2.0, mu_sq=2.0) == pytest.approx(0.0, abs=1e-12)

    def test_zero_momentum_one_massless_line(self):
        assert loop.B0(0.0, 0.0, 3.0) == pytest.approx(1.0 - math.log(3.0))

    def test_b1_equal_masses(self):
        for p_sq in (-2.0, 0.5, 7.0):
            assert loop.B1(p_sq, 1.0, 1.0) == pytest.approx(-0.5 * loop.B0(p_sq, 1.0, 1.0))

    def test_below_threshold_is_real(self):
        assert loop.B0(3.0, 1.0, 1.0).imag == 0.0

    def test_above_threshold(self):
        p_sq, m_sq = 10.0, 1.0
        beta = math.sqrt(1.0 - 4.0 * m_sq / p_sq)
        expected = complex(2.0 + beta * math.log((1.0 - beta) / (1.0 + beta)), math.pi * beta)
        value = loop.B0(p_sq, m_sq, m_sq)
        assert value.real == pytest.approx(expected.real, abs=1e-7)
        assert value.imag == pytest.approx(expected.imag, rel=1e-12)

    def test_scaleless_integral_vanishes(self):
        assert loop.B0(0.0, 0.0, 0.0) == 0.0
        assert loop.B1(0.0, 0.0, 0.0) == 0.0

    def test_complex_argument_is_rejected(self):
        with pytest.raises(ValueError):
            loop.B0(1.0 + 1.0j, 1.0, 1.0)

    def test_accepts_numpy_scalars(self):
        assert loop.B0(np.float64(0.0), np.float64(2.0), 2) == pytest.approx(-math.log(2.0))


class TestThreePoint:
    def test_constant_denominator(self):
        m_sq = 2.0
        args = (0.0, 0.0, 0.0, m_sq, m_sq, m_sq)
        assert loop.C0(*args) == pytest.approx(-0.5 / m_sq)
        assert loop.C1(*args) == pytest.approx(1.0 / (6.0 * m_sq))
        assert loop.C12(*args) == pytest.approx(-1.0 / (24.0 * m_sq))
        assert loop.C00(*args) == pytest.approx(-0.25 * math.log(m_sq))

    def test_integrable_corner_singularity(self):
        m_sq = 2.0
        assert loop.C0(0.0, 0.0, 0.0, 0.0, m_sq, m_sq) == pytest.approx(-1.0 / m_sq)

    def test_on_shell_vertex_combinations(self):
        m_sq = 0.25
        args = (m_sq, m_sq, 0.0, 0.0, m_sq, m_sq)
        c1, c2 = loop.C1(*args), loop.C2(*args)
        assert c1 == pytest.approx(c2)
        assert c1 + c2 == pytest.approx(1.0 / m_sq)
        second = loop.C11(*args) + 2.0 * loop.C12(*args) + loop.C22(*args)
        assert second == pytest.approx(-0.5 / m_sq)

    def test_results_are_complex(self):
        assert isinstance(loop.C0(1.0, 1.0, 0.0, 0.0, 1.0, 1.0), complex)

    def test_names(self):
        for name in loop.LOOP_FUNCTION_NAMES:
            assert callable(getattr(loop, name))
