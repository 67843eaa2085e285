from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Direction(StrEnum):
    INCOMING = "incoming"
    OUTGOING = "outgoing"


@dataclass(frozen=True)
class ParticleState:
    """A particle name with its mass-shell condition."""
    name: str
    on_shell: bool = True


@dataclass(frozen=True)
class Leg:
    """
    External line of a process.

    Off-shell legs do not satisfy their equation of motion, which keeps
    structures such as ``p_slash`` from being reduced to masses.
    """
    name: str
    direction: Direction
    on_shell: bool = True

    @property
    def is_incoming(self) -> bool:
        return self.direction is Direction.INCOMING

    def __str__(self) -> str:
        state = self.name if self.on_shell else f"OffShell({self.name})"
        return f"{self.direction.value.capitalize()}({state})"


def off_shell(name: str) -> ParticleState:
    return ParticleState(name, on_shell=False)


def _state(particle: str | ParticleState) -> ParticleState:
    return particle if isinstance(particle, ParticleState) else ParticleState(particle)


def incoming(particle: str | ParticleState) -> Leg:
    state = _state(particle)
    return Leg(state.name, Direction.INCOMING, state.on_shell)


def outgoing(particle: str | ParticleState) -> Leg:
    state = _state(particle)
    return Leg(state.name, Direction.OUTGOING, state.on_shell)
