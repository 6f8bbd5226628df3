"""Simulation engine — advance the world by one tick.

This is the heart of the deterministic simulation. Every peer can build an
identical engine from the same RoundConfig, but only the host calls step();
everyone else renders the snapshots the host broadcasts.

step() runs these phases in order:
1. direction update (reversals ignored)
2. movement, wrapping with PORTALS
3. food, with replacement (two with DOUBLE) and TOXIC shrink
4. tail adjustment from pending growth
5. walls, obstacles, own body
6. head-on and head-into-body collisions between snakes

ALL COORDINATES ARE INTEGERS. step() never raises for gameplay input.
"""

from __future__ import annotations

from collections.abc import Mapping

from snake_royale.simulation.mapgen import generate_map, occupied_cells, place_food
from snake_royale.simulation.prng import Prng
from snake_royale.simulation.spawn import SpawnPlacer, SpawnResult
from snake_royale.simulation.state import (
    OPPOSITE,
    Direction,
    Modifier,
    Point,
    RoundConfig,
    Snake,
    WorldSnapshot,
    WorldState,
)


class SimulationEngine:
    """Owns one round's world. Mutable state never leaves the engine."""

    def __init__(
        self,
        world: WorldState,
        modifiers: Modifier = Modifier.NONE,
        rng: Prng | None = None,
        spawns: tuple[SpawnResult, ...] = (),
    ) -> None:
        self._world = world
        self._modifiers = modifiers
        self._rng = rng if rng is not None else Prng(1)
        self._obstacle_set = frozenset(world.obstacles)
        self.spawns = spawns

    @classmethod
    def from_config(cls, config: RoundConfig) -> SimulationEngine:
        """Build the initial world for a round: obstacles, food, then spawns."""
        rng = Prng(config.seed)
        board = generate_map(rng, config)
        placer = SpawnPlacer(
            rng, config.width, config.height,
            occupied=set(board.obstacles),
            wraps=config.wraps,
            min_distance=config.min_spawn_distance,
        )
        spawns = placer.place_all(config.players)

        world = WorldState(
            width=config.width,
            height=config.height,
            food=board.food,
            obstacles=board.obstacles,
        )
        for player, spawn in zip(config.players, spawns):
            world.snakes.append(Snake(
                player_id=player.player_id,
                display_name=player.display_name,
                color=player.color,
                direction=spawn.direction,
                body=list(spawn.body),
            ))
        return cls(world, config.modifiers, rng, tuple(spawns))

    @property
    def tick(self) -> int:
        return self._world.tick

    @property
    def modifiers(self) -> Modifier:
        return self._modifiers

    @property
    def wraps(self) -> bool:
        return Modifier.PORTALS in self._modifiers

    def alive_count(self) -> int:
        return sum(1 for s in self._world.snakes if s.alive)

    def snapshot(self) -> WorldSnapshot:
        """Value copy of the current world."""
        w = self._world
        return WorldSnapshot(
            tick=w.tick,
            width=w.width,
            height=w.height,
            snakes=tuple(s.snapshot() for s in w.snakes),
            food=tuple(w.food),
            obstacles=w.obstacles,
        )

    def step(self, inputs: Mapping[str, Direction] | None = None) -> WorldSnapshot:
        """Advance one tick and return the resulting snapshot.

        Args:
            inputs: Requested direction per player id. Missing players keep
                their heading; unknown ids and non-Direction values are ignored.
        """
        inputs = inputs or {}
        snakes = self._world.snakes

        for snake in snakes:
            if snake.alive:
                self._apply_input(snake, inputs.get(snake.player_id))

        for snake in snakes:
            if snake.alive:
                self._advance(snake)

        for snake in snakes:
            if snake.alive and self._hits_environment(snake):
                snake.alive = False

        self._resolve_snake_collisions()
        self._world.tick += 1
        return self.snapshot()

    def _apply_input(self, snake: Snake, wanted: object) -> None:
        if not isinstance(wanted, Direction):
            return
        if wanted != OPPOSITE[snake.direction]:
            snake.direction = wanted

    def _advance(self, snake: Snake) -> None:
        """Move the head, eat, then settle the tail."""
        w = self._world
        dx, dy = snake.direction.vector
        nx = snake.head.x + dx
        ny = snake.head.y + dy
        if self.wraps:
            nx %= w.width
            ny %= w.height
        head = Point(nx, ny)
        snake.body.insert(0, head)

        if head in w.food:
            w.food.remove(head)
            snake.pending_growth += -1 if Modifier.TOXIC in self._modifiers else 1
            self._replenish_food()

        if snake.pending_growth > 0:
            snake.pending_growth -= 1
        else:
            snake.body.pop()

        if snake.pending_growth < 0:
            if len(snake.body) > 1:
                snake.body.pop()
            snake.pending_growth += 1

    def _replenish_food(self) -> None:
        w = self._world
        blocked = occupied_cells(
            self._obstacle_set, (s.body for s in w.snakes if s.alive),
        )
        count = 2 if Modifier.DOUBLE in self._modifiers else 1
        for _ in range(count):
            place_food(self._rng, w.width, w.height, blocked, w.food, self.wraps)

    def _hits_environment(self, snake: Snake) -> bool:
        head = snake.head
        w = self._world
        if not self.wraps and not (0 <= head.x < w.width and 0 <= head.y < w.height):
            return True
        if head in self._obstacle_set:
            return True
        return head in snake.body[1:]

    def _resolve_snake_collisions(self) -> None:
        """Pairwise head/body checks among survivors, applied all at once.

        Deaths are collected first so the outcome does not depend on the
        order snakes are listed in.
        """
        alive = [s for s in self._world.snakes if s.alive]
        dead: set[int] = set()
        for i in range(len(alive)):
            a = alive[i]
            for j in range(i + 1, len(alive)):
                b = alive[j]
                if a.head == b.head:
                    dead.update((i, j))
                    continue
                if a.head in b.body:
                    dead.add(i)
                if b.head in a.body:
                    dead.add(j)
        for index in dead:
            alive[index].alive = False
