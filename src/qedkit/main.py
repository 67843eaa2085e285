"""
Demo Driver
===========
Builds a toy QED model with the muon, computes its one-loop self-energy and
magnetic moment, and generates the numeric library 'demolib'.

Why is this file needed?
------------------------
It is the orchestrator of the four stages. Each stage consumes exactly what
the previous one returned:

1. Model construction (gauge group, muon, Feynman rules).
2. Muon self-energy (amplitude, Wilson coefficients, squared amplitude).
3. Muon magnetic moment (dipole Wilson coefficient).
4. Library generation from the expressions of stages 2 and 3.

The driver blocks on a newline-terminated confirmation between stages.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import sympy

from qedkit import config
from qedkit.amplitudes import (
    DiracCoupling,
    Order,
    chromo_magnetic_operator,
    get_wilson_coefficient,
    incoming,
    off_shell,
    outgoing,
)
from qedkit.codegen import Library
from qedkit.logging_config import setup_logging
from qedkit.model import GroupType, Model, dirac_fermion_s
from qedkit.symbolic import EvalMode, constant_s, deep_expanded, deep_hard_factored, evaluated
from qedkit.utils import timer
from qedkit.view import display, show

logger = logging.getLogger(__name__)

BANNER = "###############################"


@dataclass
class SelfEnergyResults:
    m_term: sympy.Expr
    p_term: sympy.Expr
    squared: sympy.Expr
    squared_evaluated: sympy.Expr
    squared_simplified: sympy.Expr


@dataclass
class MagneticMomentResults:
    moment: sympy.Expr
    evaluated: sympy.Expr
    simplified: sympy.Expr


def wait_for_user(message: str, read: Callable[[str], str] = input) -> None:
    """Print ``message`` and block until a line is read."""
    print(message)
    read("")


def _section(title: str) -> None:
    print(BANNER)
    print(f"####  {title}")
    print(BANNER)
    print()


@timer
def build_model(figures: Optional[Path] = None) -> Model:
    """Stage 1: QED with a single charged lepton, the muon."""
    model = Model("QED")
    model.add_gauged_group(GroupType.U1, "em", constant_s("e"))
    model.init()

    model.rename_particle("A_em", "A")

    muon = dirac_fermion_s("mu ; \\mu", model)
    muon.set_group_rep("em", -1)
    muon.set_mass(constant_s("m_mu"))
    model.add_particle(muon)

    model.refresh()

    display(model)
    if figures is not None:
        show(model.get_feynman_rules(), figures / "feynman_rules.png")
    return model


@timer
def compute_self_energy(model: Model, figures: Optional[Path] = None) -> SelfEnergyResults:
    """
    Stage 2: one-loop muon self-energy.

    The muon legs are off-shell so that ``p_slash`` is not reduced to the
    mass, which keeps the m-term and the p-term apart.
    """
    _section("MUON SELF-ENERGY")

    self_energy = model.compute_amplitude(
        Order.ONE_LOOP,
        [incoming(off_shell("mu")), outgoing(off_shell("mu"))],
    )
    print("AMPLITUDE RESULTS:")
    display(self_energy)
    if figures is not None:
        show(self_energy, figures / "mu_self_energy.png")

    print("WILSON COEFFICIENT RESULTS:")
    wilsons = model.get_wilson_coefficients(self_energy)
    display(wilsons)

    m_term = wilsons[0].coef
    p_term = wilsons[1].coef

    print("DECOMPOSITION OF THE TWO CONTRIBUTIONS:")
    print(f"M-term contribution: {evaluated(m_term, EvalMode.ABBREVIATION)}")
    print(f"P-term contribution: {evaluated(p_term, EvalMode.ABBREVIATION)}")
    print()

    squared = model.compute_squared_amplitude(self_energy)
    squared_evaluated = evaluated(squared, EvalMode.ABBREVIATION)
    squared_simplified = deep_hard_factored(deep_expanded(squared_evaluated))
    print("SQUARED AMPLITUDE RESULT:")
    print(f"\nM2              = {squared}")
    print(f"\nM2 [evaluated]  = {squared_evaluated}")
    print(f"\nM2 [simplified] = {squared_simplified}")

    return SelfEnergyResults(m_term, p_term, squared, squared_evaluated, squared_simplified)


@timer
def compute_magnetic_moment(model: Model, figures: Optional[Path] = None) -> MagneticMomentResults:
    """Stage 3: coefficient of the muon magnetic dipole operator at one loop."""
    _section("MUON MAGNETIC MOMENT")

    wilsons = model.compute_wilson_coefficients(
        Order.ONE_LOOP,
        [incoming("mu"), outgoing("mu"), outgoing("A")],
    )
    print("WILSON COEFFICIENTS RESULTS:")
    display(wilsons)
    if figures is not None:
        show(wilsons, figures / "mu_magnetic_vertex.png")

    # mu_bar sigma^{mu,nu} mu F_{mu,nu}
    operator = chromo_magnetic_operator(model, wilsons, DiracCoupling.S)
    moment = get_wilson_coefficient(wilsons, operator)

    moment_evaluated = evaluated(moment, EvalMode.ABBREVIATION)
    # Fine on small results only
    moment_simplified = deep_hard_factored(deep_expanded(moment_evaluated))

    print("MAGNETIC MOMENT RESULTS:")
    print(f"Muon magnetic moment              = {moment}")
    print(f"Muon magnetic moment [evaluated]  = {moment_evaluated}")
    print(f"Muon magnetic moment [simplified] = {moment_simplified}")

    return MagneticMomentResults(moment, moment_evaluated, moment_simplified)


@timer
def generate_library(
    self_energy: SelfEnergyResults,
    magnetic_moment: MagneticMomentResults,
    output_path: Optional[str | os.PathLike] = None,
) -> Library:
    """Stage 4: emit and compile the numeric library."""
    lib = Library(config.LIBRARY_NAME, output_path)
    lib.clean_existing_sources()
    lib.add_function("mu_self_e_mterm", self_energy.m_term)
    lib.add_function("mu_self_e_pterm", self_energy.p_term)
    lib.add_function("mu_self_e_squared", self_energy.squared)
    lib.add_function("mu_magnetic_vertex", magnetic_moment.moment)
    lib.add_function("mu_magnetic_vertex_eval", magnetic_moment.evaluated)
    lib.add_function("mu_magnetic_vertex_simpli", magnetic_moment.simplified)
    lib.build()
    return lib


def run(read: Callable[[str], str] = input, output_path: Optional[str | os.PathLike] = None) -> Library:
    """
    Run the four stages.

    Args:
        read: Line reader used for the confirmations between stages.
        output_path: Directory receiving the library and the figures; the
            current working directory by default.

    Returns:
        The built library.
    """
    figures = config.get_output_path(config.FIGURES_DIR, base=output_path)

    model = build_model(figures)
    wait_for_user("Press enter to launch the calculation of the muon self-energy ...", read)

    self_energy = compute_self_energy(model, figures)
    wait_for_user("\nPress enter to launch the calculation of (g-2) ...", read)

    magnetic_moment = compute_magnetic_moment(model, figures)
    wait_for_user("\nPress enter to launch the library generation ...", read)

    lib = generate_library(self_energy, magnetic_moment, output_path)
    logger.info(f"Library '{lib.name}' written to {lib.directory}")
    return lib


def main() -> None:
    setup_logging(level=logging.INFO)
    run()


if __name__ == "__main__":
    main()
