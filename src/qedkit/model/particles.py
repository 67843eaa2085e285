"""
Particles
=========
Particle declarations. A particle is configured (mass, charges) before being
added to a model and becomes immutable once the model is refreshed.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import sympy

from qedkit.errors import ModelError
from qedkit.utils import split_name_spec

if TYPE_CHECKING:
    from qedkit.model.groups import GaugeGroup
    from qedkit.model.model import Model

logger = logging.getLogger(__name__)


class Particle:
    """
    Base class for particles.
    """
    SPIN: sympy.Rational = sympy.S.Zero

    def __init__(self, name: str, latex_name: str | None = None, model: Model | None = None) -> None:
        self.name = name
        self.latex_name = latex_name or name
        self.model = model
        self.mass: sympy.Expr = sympy.S.Zero
        self.charges: dict[str, sympy.Rational] = {}
        self._frozen = False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', mass={self.mass})"

    @property
    def spin(self) -> sympy.Rational:
        return self.SPIN

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def _check_mutable(self) -> None:
        if self._frozen:
            raise ModelError(f"Particle '{self.name}' cannot be modified after the model has been refreshed.")

    def set_mass(self, mass: sympy.Expr | float) -> None:
        self._check_mutable()
        self.mass = sympy.sympify(mass)

    def set_group_rep(self, group_name: str, charge: int | float | str) -> None:
        """
        Set the charge of the particle under an abelian gauge group.

        Args:
            group_name: Name given to ``Model.add_gauged_group``.
            charge: Charge in units of the group coupling, stored exactly
                (``-1``, ``"2/3"``, ``0.5``).

        Raises:
            ModelError: If the particle is frozen or the group is unknown to
                the particle's model.
        """
        self._check_mutable()
        if self.model is not None and group_name not in self.model.gauge_groups:
            raise ModelError(f"Unknown gauge group '{group_name}' for particle '{self.name}'.")
        self.charges[group_name] = sympy.nsimplify(charge, rational=True)
        logger.debug(f"Particle '{self.name}' has charge {self.charges[group_name]} under '{group_name}'")

    def charge(self, group_name: str) -> sympy.Rational:
        return self.charges.get(group_name, sympy.S.Zero)

    @property
    def is_charged(self) -> bool:
        return any(q != 0 for q in self.charges.values())


class DiracFermion(Particle):
    """Massive or massless spin-1/2 Dirac fermion."""
    SPIN = sympy.Rational(1, 2)


class GaugeBoson(Particle):
    """Vector boson of an abelian gauge group. Massless and neutral."""
    SPIN = sympy.S.One

    def __init__(self, name: str, group: GaugeGroup, latex_name: str | None = None) -> None:
        super().__init__(name, latex_name)
        self.group = group

    def set_mass(self, mass: sympy.Expr | float) -> None:
        if sympy.sympify(mass) != 0:
            raise ModelError(f"Gauge boson '{self.name}' of an unbroken group must be massless.")
        super().set_mass(mass)

    def set_group_rep(self, group_name: str, charge: int | float | str) -> None:
        raise ModelError(f"Gauge boson '{self.name}' of an abelian group is neutral.")


def dirac_fermion_s(spec: str, model: Model) -> DiracFermion:
    """
    Create a Dirac fermion bound to ``model``.

    Args:
        spec: ``"name"`` or ``"name ; latex"``, e.g. ``"mu ; \\\\mu"``.
        model: Model whose gauge groups the charges will refer to.
    """
    name, latex = split_name_spec(spec)
    return DiracFermion(name, latex, model)
