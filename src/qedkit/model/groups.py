from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

import sympy

if TYPE_CHECKING:
    from qedkit.model.particles import GaugeBoson


class GroupType(StrEnum):
    U1 = "U(1)"
    SU = "SU(N)"

    @property
    def is_abelian(self) -> bool:
        return self is GroupType.U1


@dataclass
class GaugeGroup:
    """
    A gauged symmetry with its coupling constant and gauge boson.
    """
    group_type: GroupType
    name: str
    coupling: sympy.Expr
    boson: GaugeBoson | None = field(default=None, repr=False)

    def __str__(self) -> str:
        return f"{self.group_type.value}_{self.name} (coupling {self.coupling})"
