from __future__ import annotations

import pytest

from qedkit import main as driver
from qedkit.codegen import Library


class RecordingLibrary(Library):
    """Library that records the calls made by the driver."""

    calls: list[tuple[str, ...]] = []

    def clean_existing_sources(self) -> None:
        self.calls.append(("clean",))
        super().clean_existing_sources()

    def add_function(self, name, expr) -> None:
        self.calls.append(("add", name))
        super().add_function(name, expr)

    def build(self):
        self.calls.append(("build",))
        return super().build()


@pytest.fixture
def recording(monkeypatch):
    RecordingLibrary.calls = []
    monkeypatch.setattr(driver, "Library", RecordingLibrary)
    return RecordingLibrary.calls


class FakeInput:
    def __init__(self, events):
        self.events = events
        self.count = 0

    def __call__(self, prompt=""):
        self.count += 1
        self.events.append(("read", self.count))
        return ""


def test_run_sequence(tmp_path, recording, capsys):
    read = FakeInput(recording)
    lib = driver.run(read=read, output_path=tmp_path)

    assert read.count == 3
    assert recording == [
        ("read", 1),
        ("read", 2),
        ("read", 3),
        ("clean",),
        ("add", "mu_self_e_mterm"),
        ("add", "mu_self_e_pterm"),
        ("add", "mu_self_e_squared"),
        ("add", "mu_magnetic_vertex"),
        ("add", "mu_magnetic_vertex_eval"),
        ("add", "mu_magnetic_vertex_simpli"),
        ("build",),
    ]
    assert lib.name == "demolib"
    assert lib.directory == tmp_path / "demolib"
    assert (tmp_path / "demolib" / "mu_magnetic_vertex_simpli.py").exists()
    for figure in ("feynman_rules.png", "mu_self_energy.png", "mu_magnetic_vertex.png"):
        assert (tmp_path / "figures" / figure).exists()

    out = capsys.readouterr().out
    positions = [
        out.index("Press enter to launch the calculation of the muon self-energy"),
        out.index("MUON SELF-ENERGY"),
        out.index("M2 [simplified] ="),
        out.index("Press enter to launch the calculation of (g-2)"),
        out.index("MUON MAGNETIC MOMENT"),
        out.index("Muon magnetic moment [simplified] ="),
        out.index("Press enter to launch the library generation"),
    ]
    assert positions == sorted(positions)


def test_stage_outputs_feed_library(tmp_path, qed_model):
    self_energy = driver.compute_self_energy(qed_model)
    moment = driver.compute_magnetic_moment(qed_model)

    lib = driver.generate_library(self_energy, moment, tmp_path)
    assert lib.functions == [
        "mu_self_e_mterm",
        "mu_self_e_pterm",
        "mu_self_e_squared",
        "mu_magnetic_vertex",
        "mu_magnetic_vertex_eval",
        "mu_magnetic_vertex_simpli",
    ]
    assert lib._functions["mu_self_e_mterm"] == self_energy.m_term
    assert lib._functions["mu_magnetic_vertex_eval"] == moment.evaluated


def test_build_model_matches_fixture(qed_model):
    model = driver.build_model()
    assert list(model.particles) == list(qed_model.particles) == ["A", "mu"]
    assert model.get_feynman_rules() == qed_model.get_feynman_rules()


def test_failure_propagates(tmp_path, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(driver, "compute_magnetic_moment", broken)
    read = FakeInput([])
    with pytest.raises(RuntimeError):
        driver.run(read=read, output_path=tmp_path)
    assert read.count == 2
    assert not (tmp_path / "demolib").exists()
