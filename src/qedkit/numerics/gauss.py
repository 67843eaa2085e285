from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


def gauss_points_weights_interval(n_points: int) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Generate Gauss-Legendre points and weights on the unit interval [0, 1].

    Args:
        n_points: Number of integration points.

    Raises:
        ValueError: If `n_points` is smaller than 1.

    Returns:
        A tuple containing the Gauss points and weights.
    """
    if n_points < 1:
        raise ValueError(f"Unsupported number of Gauss points: {n_points}. "
                         f"'n_points' must be a positive integer.")
    points, weights = np.polynomial.legendre.leggauss(n_points)
    # Map from [-1, +1] to [0, 1]
    return 0.5 * (points + 1.0), 0.5 * weights


def gauss_points_weights_simplex(n_points: int) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Generate a product Gauss rule for the Feynman-parameter simplex.

    The simplex is the unit triangle with vertices at (0,0), (1,0), and (0,1).
    The Duffy map x = u*t, y = u*(1-t) sends the unit square onto it, with
    Jacobian u, so integrands behaving like 1/(x+y) near the origin become
    regular.

    The weights already contain the Jacobian and sum to the triangle area (1/2).

    Args:
        n_points: Number of integration points per direction.

    Returns:
        A tuple containing the (n_points**2, 2) array of (x, y) points and
        the weights.
    """
    nodes, weights = gauss_points_weights_interval(n_points)
    u, t = np.meshgrid(nodes, nodes, indexing="ij")
    wu, wt = np.meshgrid(weights, weights, indexing="ij")

    x = (u * t).ravel()
    y = (u * (1.0 - t)).ravel()
    w = (wu * wt * u).ravel()

    return np.column_stack((x, y)), w
