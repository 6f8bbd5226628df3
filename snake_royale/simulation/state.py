"""World state and value types.

The engine owns the mutable Snake and WorldState objects for a round. What
leaves the engine is always a WorldSnapshot: frozen, fully copied, safe to
hand to the network codec or the renderer.

DETERMINISM RULES:
- All coordinates are integers.
- Snakes keep the order of RoundConfig.players for the whole round.
- Food keeps insertion order; obstacles keep generation order.
- Randomness only comes from simulation.prng.Prng.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import NamedTuple


class Point(NamedTuple):
    """Grid cell coordinate."""
    x: int
    y: int


class Direction(IntEnum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @property
    def vector(self) -> tuple[int, int]:
        return _VECTORS[self]

    @property
    def opposite(self) -> Direction:
        return OPPOSITE[self]


_VECTORS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

OPPOSITE: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Order used when a direction is drawn from the PRNG.
SPAWN_DIRECTIONS: tuple[Direction, ...] = (
    Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT,
)


class Modifier(IntFlag):
    """Rule toggles for a round. Combine with |, test with `in`."""
    NONE = 0
    PORTALS = 1  # toroidal board
    FAST = 2     # faster tick rate
    DOUBLE = 4   # two replacement food cells per meal
    TOXIC = 8    # food shrinks instead of grows

    @classmethod
    def parse(cls, text: str) -> Modifier:
        """Parse "PORTALS,FAST" style lists. Empty text means no modifiers."""
        mods = cls.NONE
        for name in text.split(","):
            name = name.strip().upper()
            if name:
                mods |= cls[name]
        return mods

    def names(self) -> list[str]:
        return [m.name for m in ALL_MODIFIERS if m in self]


ALL_MODIFIERS: tuple[Modifier, ...] = (
    Modifier.PORTALS, Modifier.FAST, Modifier.DOUBLE, Modifier.TOXIC,
)


@dataclass(frozen=True, slots=True)
class PlayerInfo:
    """Who is playing: the part of a presence record that enters a round."""
    player_id: str
    display_name: str
    color: str


@dataclass(frozen=True, slots=True)
class RoundConfig:
    """Everything a peer needs to rebuild the initial world for a round."""
    seed: int
    width: int
    height: int
    modifiers: Modifier
    obstacle_ratio: float
    min_spawn_distance: int
    players: tuple[PlayerInfo, ...]

    @property
    def wraps(self) -> bool:
        return Modifier.PORTALS in self.modifiers


@dataclass(slots=True)
class Snake:
    """A live, engine-owned snake. body[0] is the head."""
    player_id: str
    display_name: str
    color: str
    direction: Direction
    body: list[Point]
    alive: bool = True
    pending_growth: int = 0

    @property
    def head(self) -> Point:
        return self.body[0]

    def snapshot(self) -> SnakeSnapshot:
        return SnakeSnapshot(
            player_id=self.player_id,
            display_name=self.display_name,
            color=self.color,
            direction=self.direction,
            alive=self.alive,
            pending_growth=self.pending_growth,
            body=tuple(self.body),
        )


@dataclass(slots=True)
class WorldState:
    """Mutable world owned by a SimulationEngine.

    Attributes:
        width, height: Board dimensions in cells.
        snakes: In RoundConfig.players order.
        food: Food cells in placement order.
        obstacles: Fixed for the round, generation order, may repeat cells.
        tick: Number of completed steps.
    """
    width: int
    height: int
    snakes: list[Snake] = field(default_factory=list)
    food: list[Point] = field(default_factory=list)
    obstacles: tuple[Point, ...] = ()
    tick: int = 0


@dataclass(frozen=True, slots=True)
class SnakeSnapshot:
    player_id: str
    display_name: str
    color: str
    direction: Direction
    alive: bool
    pending_growth: int
    body: tuple[Point, ...]

    @property
    def head(self) -> Point:
        return self.body[0]


@dataclass(frozen=True, slots=True)
class WorldSnapshot:
    """Immutable copy of the world after a tick."""
    tick: int
    width: int
    height: int
    snakes: tuple[SnakeSnapshot, ...]
    food: tuple[Point, ...]
    obstacles: tuple[Point, ...]

    def alive_snakes(self) -> list[SnakeSnapshot]:
        return [s for s in self.snakes if s.alive]

    def get_snake(self, player_id: str) -> SnakeSnapshot | None:
        for snake in self.snakes:
            if snake.player_id == player_id:
                return snake
        return None

    def digest(self) -> bytes:
        """SHA-256 over the canonical contents. Equal worlds, equal digests."""
        h = hashlib.sha256()
        h.update(self.tick.to_bytes(4, "big"))
        h.update(self.width.to_bytes(4, "big"))
        h.update(self.height.to_bytes(4, "big"))
        h.update(len(self.snakes).to_bytes(4, "big"))
        for s in self.snakes:
            pid = s.player_id.encode("utf-8")
            h.update(len(pid).to_bytes(4, "big"))
            h.update(pid)
            h.update(s.direction.to_bytes(1, "big"))
            h.update(s.alive.to_bytes(1, "big"))
            h.update(s.pending_growth.to_bytes(4, "big", signed=True))
            _hash_points(h, s.body)
        _hash_points(h, self.food)
        _hash_points(h, self.obstacles)
        return h.digest()


def _hash_points(h, points) -> None:
    h.update(len(points).to_bytes(4, "big"))
    for p in points:
        h.update(p.x.to_bytes(4, "big", signed=True))
        h.update(p.y.to_bytes(4, "big", signed=True))
