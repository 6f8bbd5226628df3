"""Safe spawn placement.

Each player gets a head cell, a heading and a reserved initial body, drawn
by rejection sampling from the round's PRNG. A candidate is accepted when:

1. the whole initial body (head plus cells behind it) is free and on the
   board (or wrapped onto it with PORTALS),
2. SPAWN_FORWARD_CLEAR cells straight ahead are free,
3. the head is at least min_spawn_distance away from every earlier head,
   measured across the wrap seam when the board is toroidal.

When no candidate is found within SPAWN_ATTEMPTS draws the player gets a
fixed fallback position instead of failing the round. The result is tagged
so callers and tests can see that it happened.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from snake_royale.config import SPAWN_ATTEMPTS, SPAWN_FORWARD_CLEAR, SPAWN_RESERVE_LENGTH
from snake_royale.simulation.prng import Prng
from snake_royale.simulation.state import SPAWN_DIRECTIONS, Direction, PlayerInfo, Point

logger = logging.getLogger(__name__)


class PlacementOutcome(Enum):
    PLACED = "placed"
    FALLBACK_USED = "fallback"


@dataclass(frozen=True, slots=True)
class SpawnResult:
    player_id: str
    direction: Direction
    body: tuple[Point, ...]  # head first
    outcome: PlacementOutcome

    @property
    def head(self) -> Point:
        return self.body[0]


class SpawnPlacer:
    """Places players one after another on a shared occupancy set.

    Cells reserved for a placed player are added to `occupied`, so later
    players can never overlap earlier ones.
    """

    def __init__(
        self,
        rng: Prng,
        width: int,
        height: int,
        occupied: set[Point],
        wraps: bool,
        min_distance: int,
    ) -> None:
        self._rng = rng
        self._width = width
        self._height = height
        self._occupied = occupied
        self._wraps = wraps
        self._min_distance_sq = min_distance * min_distance
        self._heads: list[Point] = []
        # Keep heads away from the walls so the forward run fits on the board.
        self._margin = 0 if wraps else max(2, SPAWN_FORWARD_CLEAR + 1)

    def place_all(self, players: tuple[PlayerInfo, ...]) -> list[SpawnResult]:
        return [self.place(index, player) for index, player in enumerate(players)]

    def place(self, index: int, player: PlayerInfo) -> SpawnResult:
        """Place one player. Never fails; falls back to a fixed cell."""
        found = self._search()
        if found is not None:
            direction, body = found
            outcome = PlacementOutcome.PLACED
        else:
            direction, body = self._fallback(index)
            outcome = PlacementOutcome.FALLBACK_USED
            logger.warning(
                "No safe spawn for %s after %d attempts, using fallback %s",
                player.player_id, SPAWN_ATTEMPTS, body[0],
            )
        self._occupied.update(body)
        self._heads.append(body[0])
        return SpawnResult(
            player_id=player.player_id,
            direction=direction,
            body=body,
            outcome=outcome,
        )

    def _search(self) -> tuple[Direction, tuple[Point, ...]] | None:
        span_x = max(1, self._width - self._margin * 2)
        span_y = max(1, self._height - self._margin * 2)
        for _ in range(SPAWN_ATTEMPTS):
            direction = SPAWN_DIRECTIONS[self._rng.next_int(len(SPAWN_DIRECTIONS))]
            x = self._margin + self._rng.next_int(span_x)
            y = self._margin + self._rng.next_int(span_y)
            head = self._normalize(x, y)
            if head is None:
                continue

            body = self._body_cells(head, direction)
            if body is None:
                continue
            if not self._ray_clear(head, direction):
                continue
            if not self._far_from_heads(head):
                continue
            return direction, body
        return None

    def _normalize(self, x: int, y: int) -> Point | None:
        """Wrap onto the board, or None if off the board and not wrapping."""
        if self._wraps:
            return Point(x % self._width, y % self._height)
        if 0 <= x < self._width and 0 <= y < self._height:
            return Point(x, y)
        return None

    def _body_cells(self, head: Point, direction: Direction) -> tuple[Point, ...] | None:
        """The reserved body behind `head`, or None if any cell is unusable."""
        dx, dy = direction.vector
        cells: list[Point] = []
        for i in range(SPAWN_RESERVE_LENGTH):
            cell = self._normalize(head.x - dx * i, head.y - dy * i)
            if cell is None or cell in self._occupied or cell in cells:
                return None
            cells.append(cell)
        return tuple(cells)

    def _ray_clear(self, head: Point, direction: Direction) -> bool:
        dx, dy = direction.vector
        for i in range(1, SPAWN_FORWARD_CLEAR + 1):
            cell = self._normalize(head.x + dx * i, head.y + dy * i)
            if cell is None or cell in self._occupied:
                return False
        return True

    def _far_from_heads(self, head: Point) -> bool:
        for other in self._heads:
            if distance_sq(head, other, self._width, self._height, self._wraps) < self._min_distance_sq:
                return False
        return True

    def _fallback(self, index: int) -> tuple[Direction, tuple[Point, ...]]:
        """Fixed spot: facing RIGHT, one row per player index."""
        x = min(SPAWN_RESERVE_LENGTH - 1, self._width - 1)
        y = (2 + 2 * index) % self._height
        body = tuple(Point(max(0, x - i), y) for i in range(SPAWN_RESERVE_LENGTH))
        return Direction.RIGHT, body


def distance_sq(a: Point, b: Point, width: int, height: int, wraps: bool) -> int:
    """Squared Euclidean distance, taking the short way round when wrapping."""
    dx = abs(a.x - b.x)
    dy = abs(a.y - b.y)
    if wraps:
        dx = min(dx, width - dx)
        dy = min(dy, height - dy)
    return dx * dx + dy * dy
