"""
The MODEL layer contains the gauge groups, particles and the Model container.
It has NO knowledge of code generation or plotting.
"""
from qedkit.model.groups import GaugeGroup, GroupType
from qedkit.model.particles import DiracFermion, GaugeBoson, Particle, dirac_fermion_s
from qedkit.model.model import FeynmanRule, Model

__all__ = [
    "GaugeGroup", "GroupType",
    "Particle", "DiracFermion", "GaugeBoson", "dirac_fermion_s",
    "FeynmanRule", "Model",
]
