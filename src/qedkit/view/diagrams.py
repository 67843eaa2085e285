"""
Feynman Diagram Figures
=======================
Draws Feynman rules and the diagrams of amplitudes with matplotlib and saves
them as images. Fermions are arrowed straight lines or arcs, gauge bosons
are wavy lines.
"""
from __future__ import annotations

import logging
import math
import os
from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

import numpy as np
import matplotlib.pyplot as plt

from qedkit.amplitudes.amplitude import Amplitude, FeynmanDiagram, Topology
from qedkit.amplitudes.wilson import WilsonSet
from qedkit.model.model import FeynmanRule

if TYPE_CHECKING:
    import numpy.typing as npt
    from matplotlib.axes import Axes

    from qedkit.amplitudes.legs import Leg

logger = logging.getLogger(__name__)

Point = tuple[float, float]

WAVE_AMPLITUDE = 0.05
WAVE_LENGTH = 0.18


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def _arrow(ax: Axes, points: npt.NDArray[np.float64]) -> None:
    """Arrow head in the middle of a polyline, pointing along it."""
    mid = len(points) // 2
    ax.annotate(
        "",
        xy=tuple(points[mid + 1]),
        xytext=tuple(points[mid - 1]),
        arrowprops=dict(arrowstyle="-|>", color="k", lw=1.2, mutation_scale=14),
    )


def _fermion(ax: Axes, start: Point, end: Point) -> None:
    points = np.linspace(start, end, 21)
    ax.plot(points[:, 0], points[:, 1], "k", lw=1.5)
    _arrow(ax, points)


def _fermion_arc(ax: Axes, center: Point, radius: float, theta1: float, theta2: float) -> None:
    theta = np.linspace(theta1, theta2, 101)
    points = np.column_stack((center[0] + radius * np.cos(theta), center[1] + radius * np.sin(theta)))
    ax.plot(points[:, 0], points[:, 1], "k", lw=1.5)
    _arrow(ax, points)


def _boson(ax: Axes, start: Point, end: Point) -> None:
    p0, p1 = np.asarray(start, dtype=float), np.asarray(end, dtype=float)
    length = float(np.linalg.norm(p1 - p0))
    direction = (p1 - p0) / length
    normal = np.array([-direction[1], direction[0]])

    t = np.linspace(0.0, 1.0, 200)
    n_waves = max(2, round(length / WAVE_LENGTH))
    offset = WAVE_AMPLITUDE * np.sin(2.0 * np.pi * n_waves * t)
    points = p0 + np.outer(t, p1 - p0) + np.outer(offset, normal)
    ax.plot(points[:, 0], points[:, 1], "tab:blue", lw=1.5)


def _boson_arc(ax: Axes, center: Point, radius: float, theta1: float, theta2: float) -> None:
    theta = np.linspace(theta1, theta2, 300)
    n_waves = max(2, round(abs(theta2 - theta1) * radius / WAVE_LENGTH))
    r = radius + WAVE_AMPLITUDE * np.sin(n_waves * (theta - theta1) * 2.0 * np.pi / abs(theta2 - theta1))
    ax.plot(center[0] + r * np.cos(theta), center[1] + r * np.sin(theta), "tab:blue", lw=1.5)


def _label(ax: Axes, point: Point, text: str) -> None:
    ax.text(point[0], point[1], text, ha="center", va="center", fontsize=11)


def _vertex_dot(ax: Axes, *points: Point) -> None:
    for x, y in points:
        ax.plot(x, y, "ko", ms=4)


# ---------------------------------------------------------------------------
# Topologies
# ---------------------------------------------------------------------------

def _draw_vertex(ax: Axes, fermion_in: str, fermion_out: str, boson: str) -> None:
    v = (0.0, 0.0)
    _fermion(ax, (-1.0, -0.8), v)
    _fermion(ax, v, (-1.0, 0.8))
    _boson(ax, v, (1.0, 0.0))
    _vertex_dot(ax, v)
    _label(ax, (-1.15, -0.95), fermion_in)
    _label(ax, (-1.15, 0.95), fermion_out)
    _label(ax, (1.15, 0.0), boson)


def _draw_self_energy(ax: Axes, fermion_in: str, fermion_out: str) -> None:
    v1, v2 = (-0.7, 0.0), (0.7, 0.0)
    _fermion(ax, (-1.5, 0.0), v1)
    _fermion(ax, v1, v2)
    _fermion(ax, v2, (1.5, 0.0))
    _boson_arc(ax, (0.0, 0.0), 0.7, np.pi, 0.0)
    _vertex_dot(ax, v1, v2)
    _label(ax, (-1.5, -0.2), fermion_in)
    _label(ax, (1.5, -0.2), fermion_out)


def _draw_vertex_correction(ax: Axes, fermion_in: str, fermion_out: str, boson: str) -> None:
    v0, v1, v2 = (0.4, 0.0), (-0.5, -0.6), (-0.5, 0.6)
    _fermion(ax, (-1.3, -1.1), v1)
    _fermion(ax, v1, v0)
    _fermion(ax, v0, v2)
    _fermion(ax, v2, (-1.3, 1.1))
    _boson(ax, v1, v2)
    _boson(ax, v0, (1.3, 0.0))
    _vertex_dot(ax, v0, v1, v2)
    _label(ax, (-1.45, -1.2), fermion_in)
    _label(ax, (-1.45, 1.2), fermion_out)
    _label(ax, (1.45, 0.0), boson)


def _draw_vacuum_polarization(ax: Axes, boson_in: str, boson_out: str) -> None:
    v1, v2 = (-0.6, 0.0), (0.6, 0.0)
    _boson(ax, (-1.5, 0.0), v1)
    _fermion_arc(ax, (0.0, 0.0), 0.6, np.pi, 0.0)
    _fermion_arc(ax, (0.0, 0.0), 0.6, 0.0, -np.pi)
    _boson(ax, v2, (1.5, 0.0))
    _vertex_dot(ax, v1, v2)
    _label(ax, (-1.5, -0.25), boson_in)
    _label(ax, (1.5, -0.25), boson_out)


def _vertex_names(legs: tuple[Leg, ...]) -> tuple[str, str, str]:
    """(incoming fermion, outgoing fermion, boson) labels of a three-point process."""
    counts = Counter(leg.name for leg in legs)
    boson = next(name for name, n in counts.items() if n == 1)
    fermions = [leg for leg in legs if leg.name != boson]
    fermion_in = next((leg.name for leg in fermions if leg.is_incoming), fermions[0].name)
    fermion_out = next((leg.name for leg in fermions if not leg.is_incoming), fermions[-1].name)
    return fermion_in, fermion_out, boson


def _diagram_painter(diagram: FeynmanDiagram) -> Callable[[Axes], None]:
    legs = diagram.external
    if diagram.topology is Topology.SELF_ENERGY:
        return lambda ax: _draw_self_energy(ax, legs[0].name, legs[1].name)
    if diagram.topology is Topology.VACUUM_POLARIZATION:
        return lambda ax: _draw_vacuum_polarization(ax, legs[0].name, legs[1].name)
    names = _vertex_names(legs)
    if diagram.topology is Topology.VERTEX_CORRECTION:
        return lambda ax: _draw_vertex_correction(ax, *names)
    return lambda ax: _draw_vertex(ax, *names)


def _rule_painter(rule: FeynmanRule) -> Callable[[Axes], None]:
    bar, fermion, boson = rule.fields
    return lambda ax: _draw_vertex(ax, fermion, bar, boson)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _panels(obj: Any) -> list[tuple[str, Callable[[Axes], None]]]:
    if isinstance(obj, WilsonSet):
        obj = obj.amplitude
    if isinstance(obj, Amplitude):
        return [(f"Diagram {i}: {d.topology.value}", _diagram_painter(d)) for i, d in enumerate(obj.diagrams)]
    if isinstance(obj, (list, tuple)) and all(isinstance(r, FeynmanRule) for r in obj):
        return [(f"{rule.coupling} {rule.structure}", _rule_painter(rule)) for rule in obj]
    if obj is None:
        return []
    raise TypeError(f"Cannot draw an object of type {type(obj).__name__}.")


def show(obj: Any, filepath: str | os.PathLike) -> Path:
    """
    Draw Feynman rules, or the diagrams of an amplitude or Wilson set.

    Args:
        obj: A list of FeynmanRule, an Amplitude or a WilsonSet.
        filepath: Image file to write (format from the extension).

    Returns:
        The path of the written image.
    """
    panels = _panels(obj)
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    n_cols = min(3, max(1, len(panels)))
    n_rows = max(1, math.ceil(len(panels) / n_cols))

    plt.rcParams["figure.constrained_layout.use"] = True
    fig, axes = plt.subplots(n_rows, n_cols, figsize=(4 * n_cols, 3 * n_rows), squeeze=False)

    for ax in axes.ravel():
        ax.set_aspect("equal")
        ax.set_xlim(-1.8, 1.8)
        ax.set_ylim(-1.4, 1.4)
        ax.axis("off")

    if not panels:
        axes[0, 0].text(0.0, 0.0, "No diagram", ha="center", va="center", fontsize=12)

    for ax, (title, paint) in zip(axes.ravel(), panels):
        paint(ax)
        ax.set_title(title, fontsize=9)

    fig.savefig(filepath, dpi=120)
    plt.close(fig)
    logger.info(f"Saved {len(panels)} diagram(s) to {filepath}")
    return filepath
