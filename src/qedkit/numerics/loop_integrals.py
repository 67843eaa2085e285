"""
Passarino-Veltman Loop Functions
================================
Numerical evaluation of the one-loop scalar and tensor coefficient functions
appearing in amplitudes and in generated libraries.

Conventions
-----------
Two-point functions have denominators ``k^2 - m0^2`` and ``(k+p)^2 - m1^2``:

    B0(p^2, m0^2, m1^2) = Delta - int_0^1 dx ln(D(x) / mu^2)
    B1(p^2, m0^2, m1^2) = -Delta/2 + int_0^1 dx x ln(D(x) / mu^2)
    D(x) = x m1^2 + (1-x) m0^2 - x(1-x) p^2 - i0

Three-point functions have denominators ``k^2 - m0^2``, ``(k+p1)^2 - m1^2``
and ``(k+p2)^2 - m2^2`` and are called with
``(p1^2, p2^2, (p1-p2)^2, m0^2, m1^2, m2^2)``. In Feynman parameters (x on
the p1 line, y on the p2 line):

    C0 = -int 1/D,  C1 = int x/D,  C2 = int y/D,
    C11 = -int x^2/D,  C12 = -int xy/D,  C22 = -int y^2/D,
    C00 = Delta/4 - 1/2 int ln(D / mu^2)

All functions return the finite MS-bar part (Delta = 0). Masses and momenta
enter squared, all arguments must be real. Soft divergences (a massless line
between two on-shell legs) are not regulated: C0 is then cut off by the
quadrature and only IR-finite combinations are meaningful.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

import numpy as np
import numba as nb
from scipy import integrate

from qedkit import config
from qedkit.numerics import gauss

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

LOOP_FUNCTION_NAMES: tuple[str, ...] = ("B0", "B1", "C0", "C1", "C2", "C00", "C11", "C12", "C22")


def _real(value: complex | float) -> float:
    """Convert a kinematic argument to float, rejecting complex input."""
    value = complex(value)
    if value.imag != 0.0:
        raise ValueError(f"Complex kinematic argument {value} is not supported.")
    return value.real


# ---------------------------------------------------------------------------
# Two-point functions
# ---------------------------------------------------------------------------

def _two_point_roots(p_sq: float, m0_sq: float, m1_sq: float) -> list[float]:
    """
    Zeros of D(x) = p^2 x^2 + (m1^2 - m0^2 - p^2) x + m0^2 inside (0, 1).

    These are the points where the logarithm changes branch.
    """
    roots = np.roots([p_sq, m1_sq - m0_sq - p_sq, m0_sq])
    return sorted(
        float(r.real) for r in np.atleast_1d(roots)
        if abs(r.imag) < 1e-14 and 0.0 < r.real < 1.0
    )


def _negative_intervals(p_sq: float, m0_sq: float, m1_sq: float) -> list[tuple[float, float]]:
    """Sub-intervals of [0, 1] on which D(x) is negative."""
    edges = [0.0, *_two_point_roots(p_sq, m0_sq, m1_sq), 1.0]
    intervals = []
    for a, b in zip(edges[:-1], edges[1:]):
        mid = 0.5 * (a + b)
        if mid * m1_sq + (1.0 - mid) * m0_sq - mid * (1.0 - mid) * p_sq < 0.0:
            intervals.append((a, b))
    return intervals


@lru_cache(maxsize=4096)
def _two_point(p_sq: float, m0_sq: float, m1_sq: float, mu_sq: float) -> tuple[complex, complex]:
    """
    Compute the finite parts of (B0, B1).

    The real part is integrated adaptively with the branch points passed to
    QUADPACK; the imaginary part (-pi on the negative region of D) is exact.
    """
    if p_sq == 0.0 and m0_sq == 0.0 and m1_sq == 0.0:
        # Scaleless integral
        return 0j, 0j

    def log_delta(x: float) -> float:
        delta = x * m1_sq + (1.0 - x) * m0_sq - x * (1.0 - x) * p_sq
        return np.log(abs(delta) / mu_sq)

    breakpoints = _two_point_roots(p_sq, m0_sq, m1_sq) or None

    int_log, _ = integrate.quad(log_delta, 0.0, 1.0, points=breakpoints, limit=200)
    int_x_log, _ = integrate.quad(lambda x: x * log_delta(x), 0.0, 1.0, points=breakpoints, limit=200)

    negative = _negative_intervals(p_sq, m0_sq, m1_sq)
    length = sum(b - a for a, b in negative)
    first_moment = sum(0.5 * (b * b - a * a) for a, b in negative)

    b0 = complex(-int_log, np.pi * length)
    b1 = complex(int_x_log, -np.pi * first_moment)
    return b0, b1


def B0(p_sq, m0_sq, m1_sq, mu_sq: float = config.DEFAULT_MU_SQ) -> complex:
    """Scalar two-point function."""
    return _two_point(_real(p_sq), _real(m0_sq), _real(m1_sq), _real(mu_sq))[0]


def B1(p_sq, m0_sq, m1_sq, mu_sq: float = config.DEFAULT_MU_SQ) -> complex:
    """Vector two-point coefficient, ``B^mu = p^mu B1``."""
    return _two_point(_real(p_sq), _real(m0_sq), _real(m1_sq), _real(mu_sq))[1]


# ---------------------------------------------------------------------------
# Three-point functions
# ---------------------------------------------------------------------------

@nb.jit(cache=True)
def _triangle_kernel(
    points: npt.NDArray[np.float64],
    weights: npt.NDArray[np.float64],
    p1_sq: float,
    p2_sq: float,
    p12_sq: float,
    m0_sq: float,
    m1_sq: float,
    m2_sq: float,
    mu_sq: float,
    eta: float,
) -> npt.NDArray[np.complex128]:
    """
    Accumulate all three-point coefficients on one quadrature rule.

    Returns:
        (7, ) array ordered as C0, C1, C2, C11, C12, C22, C00.
    """
    out = np.zeros(7, dtype=np.complex128)
    for i in range(weights.size):
        x = points[i, 0]
        y = points[i, 1]
        w = weights[i]

        delta = (
            x * x * p1_sq + y * y * p2_sq + x * y * (p1_sq + p2_sq - p12_sq)
            - x * (p1_sq - m1_sq) - y * (p2_sq - m2_sq) + (1.0 - x - y) * m0_sq
        )
        inv = w / complex(delta, -eta)

        out[0] -= inv
        out[1] += x * inv
        out[2] += y * inv
        out[3] -= x * x * inv
        out[4] -= x * y * inv
        out[5] -= y * y * inv

        if delta > 0.0:
            lg = complex(np.log(delta / mu_sq), 0.0)
        elif delta < 0.0:
            lg = complex(np.log(-delta / mu_sq), -np.pi)
        else:
            lg = 0j
        out[6] -= 0.5 * w * lg
    return out


@lru_cache(maxsize=8)
def _simplex_rule(n_points: int) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    points, weights = gauss.gauss_points_weights_simplex(n_points)
    return np.ascontiguousarray(points), np.ascontiguousarray(weights)


@lru_cache(maxsize=4096)
def _three_point(
    p1_sq: float, p2_sq: float, p12_sq: float,
    m0_sq: float, m1_sq: float, m2_sq: float,
    mu_sq: float,
) -> tuple[complex, ...]:
    scale = max(abs(p1_sq), abs(p2_sq), abs(p12_sq), abs(m0_sq), abs(m1_sq), abs(m2_sq), 1e-300)
    eta = config.I0_RELATIVE_WIDTH * scale
    points, weights = _simplex_rule(config.TRIANGLE_GAUSS_POINTS)
    logger.debug(
        f"Evaluating three-point functions at "
        f"({p1_sq}, {p2_sq}, {p12_sq}; {m0_sq}, {m1_sq}, {m2_sq})"
    )
    values = _triangle_kernel(points, weights, p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq, eta)
    return tuple(complex(v) for v in values)


def _three_point_args(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq) -> tuple[float, ...]:
    return tuple(_real(a) for a in (p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq))


def C0(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq: float = config.DEFAULT_MU_SQ) -> complex:
    """Scalar three-point function."""
    return _three_point(*_three_point_args(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq))[0]


def C1(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq: float = config.DEFAULT_MU_SQ) -> complex:
    """Coefficient of ``p1^mu`` in ``C^mu``."""
    return _three_point(*_three_point_args(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq))[1]


def C2(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq: float = config.DEFAULT_MU_SQ) -> complex:
    """Coefficient of ``p2^mu`` in ``C^mu``."""
    return _three_point(*_three_point_args(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq))[2]


def C11(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq: float = config.DEFAULT_MU_SQ) -> complex:
    return _three_point(*_three_point_args(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq))[3]


def C12(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq: float = config.DEFAULT_MU_SQ) -> complex:
    return _three_point(*_three_point_args(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq))[4]


def C22(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq: float = config.DEFAULT_MU_SQ) -> complex:
    return _three_point(*_three_point_args(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq))[5]


def C00(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq: float = config.DEFAULT_MU_SQ) -> complex:
    """Coefficient of ``g^{mu,nu}`` in ``C^{mu,nu}`` (finite part)."""
    return _three_point(*_three_point_args(p1_sq, p2_sq, p12_sq, m0_sq, m1_sq, m2_sq, mu_sq))[6]
