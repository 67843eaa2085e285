"""
The AMPLITUDES layer: external legs, amplitudes, Wilson coefficients and the
catalogue of one-loop results for abelian gauge theories.
"""
from qedkit.amplitudes.legs import Direction, Leg, ParticleState, incoming, off_shell, outgoing
from qedkit.amplitudes.amplitude import Amplitude, FeynmanDiagram, Order, Topology
from qedkit.amplitudes.wilson import (
    DiracCoupling,
    Operator,
    OperatorKind,
    Wilson,
    WilsonSet,
    chromo_magnetic_operator,
    get_wilson_coefficient,
)

__all__ = [
    "Direction", "Leg", "ParticleState", "incoming", "outgoing", "off_shell",
    "Amplitude", "FeynmanDiagram", "Order", "Topology",
    "DiracCoupling", "Operator", "OperatorKind", "Wilson", "WilsonSet",
    "chromo_magnetic_operator", "get_wilson_coefficient",
]
