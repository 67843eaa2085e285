from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from typing import TYPE_CHECKING

import sympy

if TYPE_CHECKING:
    from qedkit.amplitudes.legs import Leg
    from qedkit.amplitudes.wilson import Operator


class Order(IntEnum):
    """Order of perturbation theory (number of loops)."""
    TREE_LEVEL = 0
    ONE_LOOP = 1


class Topology(StrEnum):
    VERTEX = "vertex"
    SELF_ENERGY = "fermion self-energy"
    VERTEX_CORRECTION = "vertex correction"
    VACUUM_POLARIZATION = "vacuum polarization"


@dataclass
class FeynmanDiagram:
    """
    One diagram and its contribution, already decomposed over operators.

    Attributes:
        topology: Shape of the diagram.
        external: External legs, in process order.
        internal: Names of the particles on internal lines.
        contributions: Coefficient of each operator structure.
    """
    topology: Topology
    external: tuple[Leg, ...]
    internal: tuple[str, ...]
    contributions: dict[Operator, sympy.Expr] = field(default_factory=dict)

    def __str__(self) -> str:
        lines = ", ".join(self.internal) if self.internal else "none"
        return f"{self.topology.value} (internal: {lines})"


@dataclass
class Amplitude:
    """
    Result of a diagrammatic calculation for a given process and order.

    Attributes:
        order: Loop order.
        legs: External legs.
        diagrams: Contributing diagrams; empty if the process has none at
            this order.
        kinematics: Invariants of the process (e.g. ``{"p^2": s_12}``).
        masses: Masses of the external particles, by name.
    """
    order: Order
    legs: tuple[Leg, ...]
    diagrams: list[FeynmanDiagram] = field(default_factory=list)
    kinematics: dict[str, sympy.Expr] = field(default_factory=dict)
    masses: dict[str, sympy.Expr] = field(default_factory=dict)

    @property
    def empty(self) -> bool:
        return not self.diagrams

    @property
    def process(self) -> str:
        return ", ".join(str(leg) for leg in self.legs)

    def __len__(self) -> int:
        return len(self.diagrams)
