"""Tests for obstacle and food generation."""

import math
from dataclasses import replace

from snake_royale.config import INITIAL_FOOD
from snake_royale.simulation.mapgen import generate_map, generate_obstacles, place_food
from snake_royale.simulation.prng import Prng
from snake_royale.simulation.state import Modifier, Point


class TestObstacles:
    def test_count_is_floor_of_ratio(self):
        obstacles = generate_obstacles(Prng(3), 90, 30, 0.05)
        assert len(obstacles) == math.floor(90 * 30 * 0.05)

    def test_zero_ratio_no_obstacles(self):
        assert generate_obstacles(Prng(3), 10, 10, 0.0) == ()

    def test_obstacles_on_board(self):
        for p in generate_obstacles(Prng(11), 20, 15, 0.3):
            assert 0 <= p.x < 20
            assert 0 <= p.y < 15

    def test_duplicates_are_kept(self):
        """Draws are not deduplicated: a 2x2 board with 40 draws must repeat."""
        obstacles = generate_obstacles(Prng(5), 2, 2, 10.0)
        assert len(obstacles) == 40
        assert len(set(obstacles)) <= 4


class TestFood:
    def test_initial_food_count(self, round_config):
        board = generate_map(Prng(round_config.seed), round_config)
        assert len(board.food) == INITIAL_FOOD

    def test_food_avoids_obstacles_and_itself(self, round_config):
        board = generate_map(Prng(round_config.seed), round_config)
        assert not set(board.food) & set(board.obstacles)
        assert len(set(board.food)) == len(board.food)

    def test_same_seed_same_map(self, round_config):
        a = generate_map(Prng(round_config.seed), round_config)
        b = generate_map(Prng(round_config.seed), round_config)
        assert a == b

    def test_different_seed_different_map(self, round_config):
        a = generate_map(Prng(1), round_config)
        b = generate_map(Prng(2), round_config)
        assert a.obstacles != b.obstacles

    def test_portals_food_on_board(self, round_config):
        config = replace(round_config, modifiers=Modifier.PORTALS)
        board = generate_map(Prng(config.seed), config)
        for p in board.food:
            assert 0 <= p.x < config.width
            assert 0 <= p.y < config.height

    def test_full_board_still_terminates(self):
        """With every cell blocked the last draw is accepted anyway."""
        blocked = {Point(x, y) for x in range(3) for y in range(3)}
        food: list[Point] = []
        p = place_food(Prng(9), 3, 3, blocked, food, wraps=False)
        assert food == [p]
        assert p in blocked

    def test_place_food_skips_taken_cells(self):
        blocked = {Point(x, y) for x in range(3) for y in range(3)} - {Point(1, 1)}
        food: list[Point] = []
        p = place_food(Prng(9), 3, 3, blocked, food, wraps=False)
        assert p == Point(1, 1)
