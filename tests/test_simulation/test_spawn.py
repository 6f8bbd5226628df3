"""Tests for safe spawn placement."""

from dataclasses import replace

from snake_royale.config import SPAWN_FORWARD_CLEAR, SPAWN_RESERVE_LENGTH
from snake_royale.simulation.engine import SimulationEngine
from snake_royale.simulation.prng import Prng
from snake_royale.simulation.spawn import PlacementOutcome, SpawnPlacer, distance_sq
from snake_royale.simulation.state import Direction, Modifier, PlayerInfo, Point


def _players(n: int) -> tuple[PlayerInfo, ...]:
    return tuple(PlayerInfo(f"p{i}", f"P{i}", "#ffffff") for i in range(n))


class TestDistance:
    def test_plain_distance(self):
        assert distance_sq(Point(0, 0), Point(3, 4), 100, 100, wraps=False) == 25

    def test_wrap_takes_short_way(self):
        assert distance_sq(Point(0, 0), Point(9, 0), 10, 10, wraps=True) == 1
        assert distance_sq(Point(0, 0), Point(9, 0), 10, 10, wraps=False) == 81

    def test_wrap_both_axes(self):
        assert distance_sq(Point(0, 0), Point(9, 9), 10, 10, wraps=True) == 2


class TestPlacement:
    def test_body_extends_behind_heading(self):
        placer = SpawnPlacer(Prng(42), 40, 40, set(), wraps=False, min_distance=0)
        result = placer.place(0, _players(1)[0])
        assert result.outcome is PlacementOutcome.PLACED
        assert len(result.body) == SPAWN_RESERVE_LENGTH
        dx, dy = result.direction.vector
        for i, cell in enumerate(result.body):
            assert cell == Point(result.head.x - dx * i, result.head.y - dy * i)

    def test_reserved_cells_become_occupied(self):
        occupied: set[Point] = set()
        placer = SpawnPlacer(Prng(42), 40, 40, occupied, wraps=False, min_distance=0)
        result = placer.place(0, _players(1)[0])
        assert set(result.body) <= occupied

    def test_forward_run_is_clear(self, round_config):
        engine = SimulationEngine.from_config(round_config)
        obstacles = set(engine.snapshot().obstacles)
        for spawn in engine.spawns:
            dx, dy = spawn.direction.vector
            for i in range(1, SPAWN_FORWARD_CLEAR + 1):
                cell = Point(spawn.head.x + dx * i, spawn.head.y + dy * i)
                assert cell not in obstacles
                assert 0 <= cell.x < round_config.width
                assert 0 <= cell.y < round_config.height

    def test_heads_are_separated(self, round_config):
        config = replace(round_config, players=_players(6), min_spawn_distance=8)
        engine = SimulationEngine.from_config(config)
        heads = [s.head for s in engine.spawns]
        assert all(s.outcome is PlacementOutcome.PLACED for s in engine.spawns)
        for i in range(len(heads)):
            for j in range(i + 1, len(heads)):
                assert distance_sq(heads[i], heads[j], config.width, config.height, False) >= 64

    def test_heads_are_separated_across_wrap(self, round_config):
        config = replace(
            round_config, players=_players(4), min_spawn_distance=8, modifiers=Modifier.PORTALS,
        )
        engine = SimulationEngine.from_config(config)
        heads = [s.head for s in engine.spawns]
        for i in range(len(heads)):
            for j in range(i + 1, len(heads)):
                assert distance_sq(heads[i], heads[j], config.width, config.height, True) >= 64

    def test_no_body_on_obstacle_or_other_body(self, round_config):
        for seed in range(1, 30):
            config = replace(round_config, seed=seed, players=_players(4), obstacle_ratio=0.2)
            engine = SimulationEngine.from_config(config)
            obstacles = set(engine.snapshot().obstacles)
            seen: set[Point] = set()
            for spawn in engine.spawns:
                if spawn.outcome is not PlacementOutcome.PLACED:
                    continue
                for cell in spawn.body:
                    assert cell not in obstacles
                    assert cell not in seen
                    seen.add(cell)

    def test_obstacles_generated_before_spawns(self, round_config):
        """Spawns consult the finished obstacle set; both come from one stream."""
        engine = SimulationEngine.from_config(round_config)
        snap = engine.snapshot()
        obstacle_cells = set(snap.obstacles)
        for snake in snap.snakes:
            assert not obstacle_cells & set(snake.body)


class TestFallback:
    def test_fallback_on_blocked_board(self):
        width, height = 12, 12
        occupied = {Point(x, y) for x in range(width) for y in range(height)}
        placer = SpawnPlacer(Prng(1), width, height, occupied, wraps=False, min_distance=0)
        result = placer.place(0, _players(1)[0])
        assert result.outcome is PlacementOutcome.FALLBACK_USED
        assert result.direction is Direction.RIGHT
        assert result.head == Point(SPAWN_RESERVE_LENGTH - 1, 2)

    def test_fallback_rows_differ_per_player(self):
        width, height = 12, 12
        occupied = {Point(x, y) for x in range(width) for y in range(height)}
        placer = SpawnPlacer(Prng(1), width, height, occupied, wraps=False, min_distance=0)
        a, b = placer.place_all(_players(2))
        assert a.head.y != b.head.y

    def test_impossible_separation_falls_back(self):
        placer = SpawnPlacer(Prng(3), 20, 20, set(), wraps=False, min_distance=100)
        first, second = placer.place_all(_players(2))
        assert first.outcome is PlacementOutcome.PLACED
        assert second.outcome is PlacementOutcome.FALLBACK_USED
