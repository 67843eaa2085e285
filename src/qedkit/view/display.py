from __future__ import annotations

import sys
from typing import Any, TextIO

from qedkit.amplitudes.amplitude import Amplitude
from qedkit.amplitudes.wilson import WilsonSet
from qedkit.model.model import FeynmanRule, Model


def _render_model(model: Model) -> list[str]:
    lines = [f"Model '{model.name}'", "  Gauge groups:"]
    for group in model.gauge_groups.values():
        lines.append(f"    {group}")
    lines.append("  Particles:")
    for particle in model.particles.values():
        charges = ", ".join(f"{g}: {q}" for g, q in particle.charges.items()) or "neutral"
        lines.append(
            f"    {particle.name:<8} spin {str(particle.spin):<4} mass {str(particle.mass):<10} {charges}"
        )
    if model.refreshed:
        lines.append("  Feynman rules:")
        lines += [f"    {rule}" for rule in model.get_feynman_rules()]
    return lines


def _render_amplitude(amplitude: Amplitude) -> list[str]:
    lines = [f"Amplitude [{amplitude.process}] at {amplitude.order.name}: {len(amplitude)} diagram(s)"]
    for i, diagram in enumerate(amplitude.diagrams):
        lines.append(f"  Diagram {i}: {diagram}")
        for op, coef in diagram.contributions.items():
            lines.append(f"    ( {op} ) :")
            lines.append(f"      {coef}")
    return lines


def _render_wilsons(wilsons: WilsonSet) -> list[str]:
    process = ", ".join(str(leg) for leg in wilsons.legs)
    lines = [f"Wilson coefficients [{process}]: {len(wilsons)} operator(s)"]
    for i, wilson in enumerate(wilsons):
        lines.append(f"  Op_{i} = {wilson.op}")
        lines.append(f"  C_{i}  = {wilson.coef}")
    return lines


def render(obj: Any) -> str:
    """Text representation of a model, Feynman rules, amplitude or Wilson set."""
    if isinstance(obj, Model):
        lines = _render_model(obj)
    elif isinstance(obj, Amplitude):
        lines = _render_amplitude(obj)
    elif isinstance(obj, WilsonSet):
        lines = _render_wilsons(obj)
    elif isinstance(obj, (list, tuple)) and all(isinstance(r, FeynmanRule) for r in obj):
        lines = [f"{len(obj)} Feynman rule(s):"] + [f"  {rule}" for rule in obj]
    else:
        lines = [str(obj)]
    return "\n".join(lines)


def display(obj: Any, file: TextIO | None = None) -> None:
    """Print ``obj`` on the terminal (or ``file``)."""
    print(render(obj), file=file or sys.stdout)
    print(file=file or sys.stdout)
