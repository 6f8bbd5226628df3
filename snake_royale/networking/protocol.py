"""Network protocol definitions.

Message types and their typed payloads for the broadcast channel that
every peer of a game shares. The binary format lives in serialization.py;
the transport only sees opaque frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from snake_royale.simulation.state import Direction, Modifier, RoundConfig, WorldSnapshot


class MessageType(IntEnum):
    """Broadcast message types exchanged between peers."""
    START = 1   # Host → all: round parameters, every peer builds its engine
    INPUT = 2   # Any peer → all: a player's requested direction
    STATE = 3   # Host → all: canonical snapshot after a tick
    END = 4     # Host → all: round outcome


@dataclass(frozen=True, slots=True)
class PresenceRecord:
    """One roster entry, maintained by the bus.

    joined_at is an ISO-8601 UTC string; election compares it as text, so
    every peer must format it the same way (see session.election.now_iso).
    """
    player_id: str
    display_name: str
    color: str
    joined_at: str


@dataclass(frozen=True, slots=True)
class StartMessage:
    config: RoundConfig


@dataclass(frozen=True, slots=True)
class InputMessage:
    player_id: str
    direction: Direction
    tick: int  # last tick the sender had seen


@dataclass(frozen=True, slots=True)
class StateMessage:
    snapshot: WorldSnapshot
    modifiers: Modifier

    @property
    def tick(self) -> int:
        return self.snapshot.tick


@dataclass(frozen=True, slots=True)
class EndMessage:
    winner_id: str | None
    reason: str


Message = StartMessage | InputMessage | StateMessage | EndMessage
