"""
One-Loop Catalogue
==================
Closed-form amplitudes of abelian gauge theories with Dirac fermions, in
Feynman gauge, with MS-bar finite parts. Results are expressed through the
Passarino-Veltman functions of ``qedkit.symbolic.loop_functions``; every
loop-function call is abbreviated.

Supported processes (any order among the legs):

* fermion -> fermion                  (self-energy)
* fermion -> fermion + gauge boson    (vertex, on-shell fermions)
* gauge boson -> gauge boson          (vacuum polarization)

With ``K = g^2 Q^2 / (16 pi^2)`` for the gauge boson in the loop:

* self-energy: ``m K (4 B0 - 2)`` times ``f_bar f`` and
  ``-K (2 (B0 + B1) - 1)`` times ``f_bar p_slash f``, both at
  ``B(p^2, 0, m^2)``;
* vertex: ``-g Q F1`` times the vector current and
  ``-g Q K m (C1 + C2 + C11 + 2 C12 + C22)`` times the magnetic dipole, at
  ``C(m^2, m^2, q^2, 0, m^2, m^2)``, with
  ``F1 = K [4 C00 - 2 + (4m^2 - 2q^2)(C0 + C1 + C2) - 2m^2 (C11 + C22) - (4m^2 + 2q^2) C12]``;
* vacuum polarization (per fermion):
  ``-(4/3) K [-(k^2 + 2m^2) B0(k^2, m^2, m^2) + 2m^2 B0(0, m^2, m^2) + k^2/3]``.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

import sympy

from qedkit.amplitudes.amplitude import Amplitude, FeynmanDiagram, Order, Topology
from qedkit.amplitudes.wilson import DiracCoupling, Operator, OperatorKind
from qedkit.errors import AmplitudeError, ModelError
from qedkit.model.particles import DiracFermion, GaugeBoson
from qedkit.symbolic.abbreviations import abbreviate
from qedkit.symbolic.loop_functions import B0, B1, C0, C1, C2, C00, C11, C12, C22

if TYPE_CHECKING:
    from qedkit.amplitudes.legs import Leg
    from qedkit.model.model import Model
    from qedkit.model.particles import Particle

logger = logging.getLogger(__name__)

P_SQ = sympy.Symbol("s_12", real=True)
Q_SQ = sympy.Symbol("q_sq", real=True)
K_SQ = sympy.Symbol("k_sq", real=True)


def _loop_factor(coupling: sympy.Expr, charge: sympy.Expr) -> sympy.Expr:
    return coupling**2 * charge**2 / (16 * sympy.pi**2)


def compute_amplitude(model: Model, order: Order, legs: Iterable[Leg]) -> Amplitude:
    """
    Look up the amplitude of a process in the catalogue.

    Raises:
        AmplitudeError: Unknown particles, fermion-number violation, or a
            leg set outside the catalogue.
    """
    legs = tuple(legs)
    if not legs:
        raise AmplitudeError("A process needs at least one external leg.")

    resolved: list[tuple[Leg, Particle]] = []
    for leg in legs:
        try:
            resolved.append((leg, model.get_particle(leg.name)))
        except ModelError as e:
            raise AmplitudeError(str(e)) from e

    fermion_legs = [(leg, p) for leg, p in resolved if isinstance(p, DiracFermion)]
    boson_legs = [(leg, p) for leg, p in resolved if isinstance(p, GaugeBoson)]

    for name in {p.name for _, p in fermion_legs}:
        n_in = sum(1 for leg, p in fermion_legs if p.name == name and leg.is_incoming)
        n_out = sum(1 for leg, p in fermion_legs if p.name == name and not leg.is_incoming)
        if n_in != n_out:
            raise AmplitudeError(f"Fermion number of '{name}' is not conserved in [{', '.join(map(str, legs))}].")

    logger.info(f"Computing {order.name} amplitude for [{', '.join(map(str, legs))}]")

    if len(fermion_legs) == 2 and not boson_legs:
        amplitude = _fermion_self_energy(model, order, legs, fermion_legs)
    elif len(fermion_legs) == 2 and len(boson_legs) == 1:
        amplitude = _fermion_vertex(model, order, legs, fermion_legs, boson_legs[0])
    elif not fermion_legs and len(boson_legs) == 2:
        amplitude = _vacuum_polarization(model, order, legs, boson_legs)
    else:
        raise AmplitudeError(f"No diagram for process [{', '.join(map(str, legs))}] in the one-loop catalogue.")

    if amplitude.empty:
        logger.warning(f"No diagram contributes to [{amplitude.process}] at {order.name}.")
    else:
        logger.info(f"{len(amplitude.diagrams)} diagram(s) found.")
    return amplitude


def _fermion_self_energy(
    model: Model,
    order: Order,
    legs: tuple[Leg, ...],
    fermion_legs: list[tuple[Leg, Particle]],
) -> Amplitude:
    fermion = fermion_legs[0][1]
    m = fermion.mass
    on_shell = all(leg.on_shell for leg, _ in fermion_legs)
    p_sq = m**2 if on_shell else P_SQ

    amplitude = Amplitude(order, legs, kinematics={"p^2": p_sq}, masses={fermion.name: m})
    if order is Order.TREE_LEVEL:
        return amplitude

    scalar = Operator(OperatorKind.SCALAR, (f"{fermion.name}_bar", fermion.name))
    slashed = Operator(OperatorKind.SLASHED_MOMENTUM, (f"{fermion.name}_bar", fermion.name))

    for group in model.gauge_groups.values():
        charge = fermion.charge(group.name)
        if charge == 0:
            continue
        k = _loop_factor(group.coupling, charge)
        b0 = abbreviate(B0(p_sq, 0, m**2))
        b1 = abbreviate(B1(p_sq, 0, m**2))

        m_term = k * m * (4 * b0 - 2)
        p_term = -k * (2 * (b0 + b1) - 1)
        if on_shell:
            # Dirac equation: p_slash -> m between on-shell spinors
            contributions = {scalar: m_term + m * p_term}
        else:
            contributions = {scalar: m_term, slashed: p_term}

        amplitude.diagrams.append(FeynmanDiagram(
            topology=Topology.SELF_ENERGY,
            external=legs,
            internal=(fermion.name, group.boson.name),
            contributions=contributions,
        ))
    return amplitude


def _fermion_vertex(
    model: Model,
    order: Order,
    legs: tuple[Leg, ...],
    fermion_legs: list[tuple[Leg, Particle]],
    boson_leg: tuple[Leg, Particle],
) -> Amplitude:
    fermion = fermion_legs[0][1]
    boson_state, boson = boson_leg
    if not all(leg.on_shell for leg, _ in fermion_legs):
        raise AmplitudeError("The vertex decomposition requires on-shell fermions.")

    m = fermion.mass
    q_sq = sympy.S.Zero if boson_state.on_shell else Q_SQ
    amplitude = Amplitude(
        order, legs,
        kinematics={"p1^2": m**2, "p2^2": m**2, "q^2": q_sq},
        masses={fermion.name: m, boson.name: sympy.S.Zero},
    )

    external_group = boson.group
    external_charge = fermion.charge(external_group.name)
    if external_charge == 0:
        return amplitude
    external_factor = -external_group.coupling * external_charge

    fields = (f"{fermion.name}_bar", fermion.name, boson.name)
    vector = Operator(OperatorKind.VECTOR_CURRENT, fields, DiracCoupling.V)
    dipole = Operator(OperatorKind.MAGNETIC_DIPOLE, fields, DiracCoupling.S)

    if order is Order.TREE_LEVEL:
        amplitude.diagrams.append(FeynmanDiagram(
            topology=Topology.VERTEX,
            external=legs,
            internal=(),
            contributions={vector: external_factor},
        ))
        return amplitude

    args = (m**2, m**2, q_sq, 0, m**2, m**2)
    for group in model.gauge_groups.values():
        charge = fermion.charge(group.name)
        if charge == 0:
            continue
        k = _loop_factor(group.coupling, charge)
        c0, c1, c2, c00, c11, c12, c22 = (
            abbreviate(func(*args)) for func in (C0, C1, C2, C00, C11, C12, C22)
        )

        f1 = k * (
            4 * c00 - 2
            + (4 * m**2 - 2 * q_sq) * (c0 + c1 + c2)
            - 2 * m**2 * (c11 + c22)
            - (4 * m**2 + 2 * q_sq) * c12
        )
        magnetic = external_factor * k * m * (c1 + c2 + c11 + 2 * c12 + c22)

        amplitude.diagrams.append(FeynmanDiagram(
            topology=Topology.VERTEX_CORRECTION,
            external=legs,
            internal=(fermion.name, group.boson.name, fermion.name),
            contributions={vector: external_factor * f1, dipole: magnetic},
        ))
    return amplitude


def _vacuum_polarization(
    model: Model,
    order: Order,
    legs: tuple[Leg, ...],
    boson_legs: list[tuple[Leg, Particle]],
) -> Amplitude:
    (leg_a, boson_a), (leg_b, boson_b) = boson_legs
    k_sq = sympy.S.Zero if leg_a.on_shell and leg_b.on_shell else K_SQ
    amplitude = Amplitude(
        order, legs,
        kinematics={"k^2": k_sq},
        masses={boson_a.name: sympy.S.Zero, boson_b.name: sympy.S.Zero},
    )
    if order is Order.TREE_LEVEL:
        return amplitude

    op = Operator(OperatorKind.BOSON_SELF_ENERGY, (boson_a.name, boson_b.name))
    for fermion in model.fermions:
        charge_a = fermion.charge(boson_a.group.name)
        charge_b = fermion.charge(boson_b.group.name)
        if charge_a == 0 or charge_b == 0:
            continue
        k = boson_a.group.coupling * charge_a * boson_b.group.coupling * charge_b / (16 * sympy.pi**2)
        m = fermion.mass
        b0_k = abbreviate(B0(k_sq, m**2, m**2))
        b0_0 = abbreviate(B0(0, m**2, m**2))
        sigma = -sympy.Rational(4, 3) * k * (-(k_sq + 2 * m**2) * b0_k + 2 * m**2 * b0_0 + k_sq / 3)

        amplitude.diagrams.append(FeynmanDiagram(
            topology=Topology.VACUUM_POLARIZATION,
            external=legs,
            internal=(fermion.name, fermion.name),
            contributions={op: sigma},
        ))
    return amplitude
