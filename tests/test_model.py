from __future__ import annotations

import pytest
import sympy

from qedkit.errors import ModelError
from qedkit.model import DiracFermion, GaugeBoson, GroupType, Model, dirac_fermion_s
from qedkit.symbolic import constant_s


def test_gauge_boson_joins_particles_on_init():
    model = Model()
    group = model.add_gauged_group(GroupType.U1, "em", constant_s("e"))
    assert "A_em" not in model.particles

    model.init()
    assert isinstance(model.particles["A_em"], GaugeBoson)
    assert model.particles["A_em"] is group.boson


def test_groups_are_locked_after_init():
    model = Model()
    model.add_gauged_group(GroupType.U1, "em", constant_s("e"))
    model.init()
    with pytest.raises(ModelError):
        model.add_gauged_group(GroupType.U1, "dark", constant_s("g_d"))
    with pytest.raises(ModelError):
        model.init()


def test_duplicate_and_non_abelian_groups_are_rejected():
    model = Model()
    model.add_gauged_group(GroupType.U1, "em", constant_s("e"))
    with pytest.raises(ModelError):
        model.add_gauged_group(GroupType.U1, "em", constant_s("e"))
    with pytest.raises(ModelError):
        model.add_gauged_group(GroupType.SU, "color", constant_s("g_s"))


def test_particles_need_init_first():
    model = Model()
    model.add_gauged_group(GroupType.U1, "em", constant_s("e"))
    with pytest.raises(ModelError):
        model.add_particle(DiracFermion("tau"))


def test_rename_particle_keeps_group_boson(qed_model):
    assert "A_em" not in qed_model.particles
    boson = qed_model.get_particle("A")
    assert boson.name == "A"
    assert qed_model.gauge_groups["em"].boson is boson


def test_rename_to_existing_name_fails(qed_model):
    with pytest.raises(ModelError):
        qed_model.rename_particle("A", "mu")


def test_fermion_spec_and_charges(qed_model):
    muon = qed_model.get_particle("mu")
    assert isinstance(muon, DiracFermion)
    assert muon.latex_name == "\\mu"
    assert muon.spin == sympy.Rational(1, 2)
    assert muon.charge("em") == -1
    assert muon.mass == constant_s("m_mu")
    assert muon.is_charged


def test_fractional_charge_is_exact():
    model = Model()
    model.add_gauged_group(GroupType.U1, "em", constant_s("e"))
    model.init()
    quark = dirac_fermion_s("u", model)
    quark.set_group_rep("em", "2/3")
    assert quark.charge("em") == sympy.Rational(2, 3)
    quark.set_group_rep("em", 0.5)
    assert quark.charge("em") == sympy.Rational(1, 2)


def test_unknown_group_is_rejected():
    model = Model()
    model.add_gauged_group(GroupType.U1, "em", constant_s("e"))
    model.init()
    tau = dirac_fermion_s("tau", model)
    with pytest.raises(ModelError):
        tau.set_group_rep("weak", 1)

    unbound = DiracFermion("nu")
    unbound.set_group_rep("weak", 1)
    with pytest.raises(ModelError):
        model.add_particle(unbound)


def test_particles_are_frozen_after_refresh(qed_model):
    muon = qed_model.get_particle("mu")
    with pytest.raises(ModelError):
        muon.set_mass(constant_s("m_e"))
    with pytest.raises(ModelError):
        muon.set_group_rep("em", 1)
    with pytest.raises(ModelError):
        qed_model.add_particle(DiracFermion("tau"))


def test_duplicate_particle_is_rejected():
    model = Model()
    model.add_gauged_group(GroupType.U1, "em", constant_s("e"))
    model.init()
    model.add_particle(dirac_fermion_s("mu", model))
    with pytest.raises(ModelError):
        model.add_particle(dirac_fermion_s("mu", model))


def test_gauge_boson_stays_massless_and_neutral():
    photon = Model().add_gauged_group(GroupType.U1, "x", constant_s("g")).boson
    with pytest.raises(ModelError):
        photon.set_mass(constant_s("m_x"))
    with pytest.raises(ModelError):
        photon.set_group_rep("x", 1)


def test_feynman_rules(qed_model):
    rules = qed_model.get_feynman_rules()
    assert len(rules) == 1
    rule = rules[0]
    assert rule.fields == ("mu_bar", "mu", "A")
    assert rule.coupling == sympy.I * constant_s("e")
    assert rule.structure == "gamma^mu"


def test_computations_need_refresh():
    model = Model()
    model.add_gauged_group(GroupType.U1, "em", constant_s("e"))
    model.init()
    with pytest.raises(ModelError):
        model.get_feynman_rules()
    with pytest.raises(ModelError):
        model.compute_amplitude(None, [])


def test_dirac_fermion_spec_without_latex():
    fermion = dirac_fermion_s("  tau ", Model())
    assert fermion.name == "tau"
    assert fermion.latex_name == "tau"
    with pytest.raises(ValueError):
        dirac_fermion_s(" ; \\tau", Model())


def test_rename_after_refresh_is_rejected(qed_model):
    with pytest.raises(ModelError):
        qed_model.rename_particle("A", "photon")
    assert list(qed_model.particles) == ["A", "mu"]
    assert qed_model.get_feynman_rules()[0].fields == ("mu_bar", "mu", "A")
