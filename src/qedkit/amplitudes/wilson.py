"""
Wilson Coefficients
===================
Decomposition of amplitudes over a basis of operator structures.

Operators are identified by their kind, their external fields and, for
dipole operators, the Dirac coupling that follows ``sigma^{mu,nu}``.
A WilsonSet keeps them in a fixed order (scalar before slashed momentum,
vector current before magnetic dipole) and never stores zero coefficients.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import TYPE_CHECKING, Iterable, Iterator, Union, overload

import sympy

from qedkit.errors import AmplitudeError
from qedkit.model.particles import DiracFermion, GaugeBoson

if TYPE_CHECKING:
    from qedkit.amplitudes.amplitude import Amplitude, FeynmanDiagram, Order
    from qedkit.amplitudes.legs import Leg
    from qedkit.model.model import Model

logger = logging.getLogger(__name__)


class OperatorKind(IntEnum):
    """Operator structures; the value fixes the order inside a WilsonSet."""
    SCALAR = 0
    SLASHED_MOMENTUM = 1
    VECTOR_CURRENT = 2
    MAGNETIC_DIPOLE = 3
    BOSON_SELF_ENERGY = 4


class DiracCoupling(StrEnum):
    S = "S"
    P = "P"
    V = "V"
    A = "A"


_DIRAC_STRUCTURES: dict[DiracCoupling, str] = {
    DiracCoupling.S: "",
    DiracCoupling.P: " gamma^5",
    DiracCoupling.V: " gamma^mu",
    DiracCoupling.A: " gamma^mu gamma^5",
}


@dataclass(frozen=True)
class Operator:
    kind: OperatorKind
    fields: tuple[str, ...]
    coupling: DiracCoupling | None = None

    def __str__(self) -> str:
        if self.kind is OperatorKind.SCALAR:
            bar, f = self.fields
            return f"{bar} {f}"
        if self.kind is OperatorKind.SLASHED_MOMENTUM:
            bar, f = self.fields
            return f"{bar} p_slash {f}"
        if self.kind is OperatorKind.VECTOR_CURRENT:
            bar, f, a = self.fields
            return f"{bar} gamma^mu {f} {a}_mu"
        if self.kind is OperatorKind.MAGNETIC_DIPOLE:
            bar, f, a = self.fields
            return f"{bar} sigma^{{mu,nu}}{_DIRAC_STRUCTURES[self.coupling]} {f} F({a})_{{mu,nu}}"
        a, b = self.fields
        return f"{a}_mu (g^{{mu,nu}} - k^mu k^nu / k^2) {b}_nu"


@dataclass(frozen=True)
class Wilson:
    """An operator with its (symbolic) coefficient."""
    op: Operator
    coef: sympy.Expr

    def __str__(self) -> str:
        return f"{self.coef} * ( {self.op} )"


class WilsonSet(Sequence):
    """
    Ordered sequence of Wilson coefficients with the process they describe.
    """

    def __init__(
        self,
        wilsons: Iterable[Wilson],
        legs: tuple[Leg, ...] = (),
        order: Order | None = None,
        amplitude: Amplitude | None = None,
    ) -> None:
        self._wilsons: list[Wilson] = sorted(wilsons, key=lambda w: (w.op.kind, w.op.fields, str(w.op.coupling)))
        self.legs = legs
        self.order = order
        self.amplitude = amplitude

    @classmethod
    def from_amplitude(cls, amplitude: Amplitude) -> WilsonSet:
        """Sum the diagram contributions operator by operator."""
        totals: dict[Operator, list[sympy.Expr]] = {}
        for diagram in amplitude.diagrams:
            for op, coef in diagram.contributions.items():
                totals.setdefault(op, []).append(coef)

        wilsons = []
        for op, terms in totals.items():
            coef = sympy.Add(*terms)
            if coef == 0:
                logger.debug(f"Dropping vanishing coefficient of {op}")
                continue
            wilsons.append(Wilson(op, coef))

        logger.info(f"Decomposed amplitude [{amplitude.process}] over {len(wilsons)} operator(s).")
        return cls(wilsons, legs=amplitude.legs, order=amplitude.order, amplitude=amplitude)

    @overload
    def __getitem__(self, index: int) -> Wilson: ...

    @overload
    def __getitem__(self, index: slice) -> list[Wilson]: ...

    def __getitem__(self, index):
        return self._wilsons[index]

    def __len__(self) -> int:
        return len(self._wilsons)

    def __iter__(self) -> Iterator[Wilson]:
        return iter(self._wilsons)

    def __repr__(self) -> str:
        return f"WilsonSet({len(self)} operator(s), process=[{', '.join(str(leg) for leg in self.legs)}])"

    @property
    def operators(self) -> list[Operator]:
        return [w.op for w in self._wilsons]

    @property
    def diagrams(self) -> list[FeynmanDiagram]:
        return list(self.amplitude.diagrams) if self.amplitude is not None else []

    def coefficient(self, op: Operator) -> sympy.Expr:
        """Coefficient of ``op``, zero if absent."""
        for wilson in self._wilsons:
            if wilson.op == op:
                return wilson.coef
        return sympy.S.Zero


def chromo_magnetic_operator(
    model: Model,
    wilsons: WilsonSet,
    coupling: DiracCoupling = DiracCoupling.S,
) -> list[Wilson]:
    """
    Build the (chromo-)magnetic dipole operator of the process of ``wilsons``.

    The operator is ``f_bar sigma^{mu,nu} [gamma^5] f F_{mu,nu}`` for the
    fermion and gauge boson among the external legs, with unit coefficient.

    Args:
        model: Model the legs refer to.
        wilsons: Wilson coefficients of a fermion-fermion-gauge boson process.
        coupling: ``DiracCoupling.S`` (magnetic) or ``DiracCoupling.P``
            (electric dipole).

    Raises:
        ValueError: For another Dirac coupling.
        AmplitudeError: If the process is not fermion-fermion-gauge boson.
    """
    if coupling not in (DiracCoupling.S, DiracCoupling.P):
        raise ValueError(f"Dipole operators take a scalar or pseudo-scalar coupling, not {coupling}.")

    fermions = []
    bosons = []
    for leg in wilsons.legs:
        particle = model.get_particle(leg.name)
        if isinstance(particle, DiracFermion):
            fermions.append(particle.name)
        elif isinstance(particle, GaugeBoson):
            bosons.append(particle.name)

    if len(fermions) != 2 or len(set(fermions)) != 1 or len(bosons) != 1:
        raise AmplitudeError(
            f"No dipole operator for process [{', '.join(str(leg) for leg in wilsons.legs)}]."
        )

    fermion = fermions[0]
    op = Operator(OperatorKind.MAGNETIC_DIPOLE, (f"{fermion}_bar", fermion, bosons[0]), coupling)
    return [Wilson(op, sympy.S.One)]


OperatorLike = Union[Operator, Wilson]


def get_wilson_coefficient(wilsons: WilsonSet, operators: OperatorLike | Iterable[OperatorLike]) -> sympy.Expr:
    """
    Coefficient of the given operator(s) in ``wilsons``.

    Operators given as Wilsons are normalized by their coefficient. Operators
    absent from the set contribute zero.
    """
    if isinstance(operators, (Operator, Wilson)):
        operators = [operators]

    total = sympy.S.Zero
    for item in operators:
        if isinstance(item, Wilson):
            op, norm = item.op, item.coef
        else:
            op, norm = item, sympy.S.One
        coef = wilsons.coefficient(op)
        if coef == 0:
            logger.info(f"Operator {op} does not appear in the Wilson set, its coefficient is zero.")
            continue
        total += coef / norm
    return total
