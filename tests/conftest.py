"""Pytest session setup.

Puts ``src/`` on the import path, selects a non-interactive matplotlib
backend and resets the process-wide symbolic registries between tests.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

os.environ.setdefault("MPLBACKEND", "Agg")

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC = str(REPO_ROOT / "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

import pytest  # noqa: E402

from qedkit.model import GroupType, Model, dirac_fermion_s  # noqa: E402
from qedkit.symbolic import abbreviations, constant_s  # noqa: E402
from qedkit.symbolic.constants import clear_constant_values  # noqa: E402


@pytest.fixture(autouse=True)
def clean_registries():
    abbreviations.clear()
    clear_constant_values()
    yield
    abbreviations.clear()
    clear_constant_values()


@pytest.fixture
def qed_model() -> Model:
    """QED with the muon, refreshed."""
    model = Model("QED")
    model.add_gauged_group(GroupType.U1, "em", constant_s("e"))
    model.init()
    model.rename_particle("A_em", "A")

    muon = dirac_fermion_s("mu ; \\mu", model)
    muon.set_group_rep("em", -1)
    muon.set_mass(constant_s("m_mu"))
    model.add_particle(muon)
    model.refresh()
    return model
