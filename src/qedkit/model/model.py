"""
Model (Data Model)
==================
This module defines the central object of a calculation.

Why is this file needed?
------------------------
1. State Management: It holds the gauge groups, the particle content and the
   Feynman rules in one place.
2. Lifecycle: It enforces the order construct -> add groups -> init -> add
   particles -> refresh, so that every computation sees a finalized model.
3. Entry Point: Amplitudes, Wilson coefficients and squared amplitudes are
   requested from the model.

Classes:
    FeynmanRule: One interaction vertex.
    Model: The main container class.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

import sympy

from qedkit.errors import ModelError
from qedkit.model.groups import GaugeGroup, GroupType
from qedkit.model.particles import DiracFermion, GaugeBoson, Particle

if TYPE_CHECKING:
    from qedkit.amplitudes.amplitude import Amplitude, Order
    from qedkit.amplitudes.legs import Leg
    from qedkit.amplitudes.wilson import WilsonSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeynmanRule:
    """
    Interaction vertex: the fields meeting at the vertex, the coupling
    factor and the Lorentz/Dirac structure it multiplies.
    """
    fields: tuple[str, ...]
    coupling: sympy.Expr
    structure: str

    def __str__(self) -> str:
        return f"[{', '.join(self.fields)}] : {self.coupling} * {self.structure}"


class Model:
    """
    Class representing a gauge theory with its particle content.
    """

    def __init__(self, name: str = "Model") -> None:
        """Initialize an empty model."""
        self.name = name
        self.gauge_groups: dict[str, GaugeGroup] = {}
        self.particles: dict[str, Particle] = {}
        self._feynman_rules: list[FeynmanRule] = []

        self._initialized = False
        self._refreshed = False

    def __repr__(self) -> str:
        return f"Model(name='{self.name}', groups={list(self.gauge_groups)}, particles={list(self.particles)})"

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def refreshed(self) -> bool:
        return self._refreshed

    @property
    def fermions(self) -> list[DiracFermion]:
        return [p for p in self.particles.values() if isinstance(p, DiracFermion)]

    @property
    def gauge_bosons(self) -> list[GaugeBoson]:
        return [p for p in self.particles.values() if isinstance(p, GaugeBoson)]

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add_gauged_group(self, group_type: GroupType, name: str, coupling: sympy.Expr) -> GaugeGroup:
        """
        Register a gauge symmetry.

        Its gauge boson is created as ``A_<name>`` and joins the particle
        content on ``init()``.

        Raises:
            ModelError: After ``init()``, for a duplicate name or a
                non-abelian group.
        """
        if self._initialized:
            raise ModelError("Gauge groups must be added before Model.init().")
        if name in self.gauge_groups:
            raise ModelError(f"Gauge group '{name}' already exists.")
        if not group_type.is_abelian:
            raise ModelError(f"Group type {group_type.value} is not supported, only abelian groups are.")

        group = GaugeGroup(group_type=group_type, name=name, coupling=sympy.sympify(coupling))
        group.boson = GaugeBoson(f"A_{name}", group, latex_name=f"A_{{{name}}}")
        self.gauge_groups[name] = group
        logger.info(f"Added gauge group {group}")
        return group

    def init(self) -> None:
        """Lock the gauge sector; gauge bosons become particles of the model."""
        if self._initialized:
            raise ModelError("Model.init() has already been called.")
        for group in self.gauge_groups.values():
            self.particles[group.boson.name] = group.boson
        self._initialized = True
        logger.info(f"Model '{self.name}' initialized with {len(self.gauge_groups)} gauge group(s).")

    def rename_particle(self, old_name: str, new_name: str) -> None:
        if self._refreshed:
            raise ModelError("Particles cannot be renamed after Model.refresh().")
        particle = self.get_particle(old_name)
        if new_name in self.particles:
            raise ModelError(f"Particle '{new_name}' already exists.")
        particle.name = new_name
        self.particles = {
            (new_name if key == old_name else key): value for key, value in self.particles.items()
        }
        logger.debug(f"Renamed particle '{old_name}' to '{new_name}'")

    def add_particle(self, particle: Particle) -> None:
        """
        Add a configured particle.

        Raises:
            ModelError: Before ``init()``, after ``refresh()``, for a duplicate
                name or a charge under an unknown group.
        """
        if not self._initialized:
            raise ModelError("Model.init() must be called before adding particles.")
        if self._refreshed:
            raise ModelError("Particles cannot be added after Model.refresh().")
        if particle.name in self.particles:
            raise ModelError(f"Particle '{particle.name}' already exists.")
        unknown = [g for g in particle.charges if g not in self.gauge_groups]
        if unknown:
            raise ModelError(f"Particle '{particle.name}' is charged under unknown group(s) {unknown}.")

        particle.model = self
        self.particles[particle.name] = particle
        logger.info(f"Added particle {particle!r}")

    def refresh(self) -> None:
        """Finalize the model: freeze particles and build the Feynman rules."""
        if not self._initialized:
            raise ModelError("Model.init() must be called before Model.refresh().")
        for particle in self.particles.values():
            particle.freeze()
        self._feynman_rules = list(self._build_feynman_rules())
        self._refreshed = True
        logger.info(f"Model '{self.name}' refreshed: {len(self._feynman_rules)} Feynman rule(s).")

    def _build_feynman_rules(self) -> Iterable[FeynmanRule]:
        for fermion in self.fermions:
            for group in self.gauge_groups.values():
                charge = fermion.charge(group.name)
                if charge == 0:
                    continue
                yield FeynmanRule(
                    fields=(f"{fermion.name}_bar", fermion.name, group.boson.name),
                    coupling=-sympy.I * group.coupling * charge,
                    structure="gamma^mu",
                )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_particle(self, name: str) -> Particle:
        try:
            return self.particles[name]
        except KeyError:
            raise ModelError(f"No particle named '{name}' in model '{self.name}'.") from None

    def get_feynman_rules(self) -> list[FeynmanRule]:
        self._check_refreshed()
        return list(self._feynman_rules)

    def _check_refreshed(self) -> None:
        if not self._refreshed:
            raise ModelError("Model.refresh() must be called before any computation.")

    # ------------------------------------------------------------------
    # Computations
    # ------------------------------------------------------------------

    def compute_amplitude(self, order: Order, legs: list[Leg]) -> Amplitude:
        """
        Compute the amplitude of a process at the given order.

        Args:
            order: ``Order.TREE_LEVEL`` or ``Order.ONE_LOOP``.
            legs: External legs, built with ``incoming`` / ``outgoing``.

        Raises:
            ModelError: If the model has not been refreshed.
            AmplitudeError: If the legs are inconsistent with the model.
        """
        from qedkit.amplitudes.qed import compute_amplitude

        self._check_refreshed()
        return compute_amplitude(self, order, legs)

    def get_wilson_coefficients(self, amplitude: Amplitude) -> WilsonSet:
        """Decompose an amplitude over its operator basis."""
        from qedkit.amplitudes.wilson import WilsonSet

        self._check_refreshed()
        return WilsonSet.from_amplitude(amplitude)

    def compute_wilson_coefficients(self, order: Order, legs: list[Leg]) -> WilsonSet:
        return self.get_wilson_coefficients(self.compute_amplitude(order, legs))

    def compute_squared_amplitude(self, amplitude: Amplitude) -> sympy.Expr:
        """Spin-averaged squared amplitude (fermion two-point functions only)."""
        from qedkit.amplitudes.squared import squared_amplitude

        return squared_amplitude(self.get_wilson_coefficients(amplitude))
