"""Procedural board generation: obstacles and food.

Pure functions of (config, PRNG position). Every peer runs them once per
round with the same seed and gets the same board, so no world data ever
crosses the network.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from snake_royale.config import FOOD_PLACEMENT_ATTEMPTS, INITIAL_FOOD
from snake_royale.simulation.prng import Prng
from snake_royale.simulation.state import Point, RoundConfig


@dataclass(frozen=True, slots=True)
class GeneratedMap:
    obstacles: tuple[Point, ...]
    food: list[Point]


def generate_obstacles(rng: Prng, width: int, height: int, ratio: float) -> tuple[Point, ...]:
    """Draw floor(width * height * ratio) obstacle cells.

    Cells are drawn independently and never deduplicated, so two draws may
    land on the same cell and the board then holds fewer distinct obstacles
    than the count suggests.
    """
    count = math.floor(width * height * ratio)
    obstacles: list[Point] = []
    for _ in range(count):
        x = rng.next_int(width)
        y = rng.next_int(height)
        obstacles.append(Point(x, y))
    return tuple(obstacles)


def place_food(
    rng: Prng,
    width: int,
    height: int,
    blocked: set[Point],
    food: list[Point],
    wraps: bool,
) -> Point:
    """Append one food cell to `food` and return it.

    Rejection-samples cells that are neither in `blocked` nor already food.
    After FOOD_PLACEMENT_ATTEMPTS rejected draws the last draw is accepted
    even if it overlaps, so placement always terminates.
    """
    taken = set(food)
    point = Point(0, 0)
    for _ in range(FOOD_PLACEMENT_ATTEMPTS):
        x = rng.next_int(width)
        y = rng.next_int(height)
        if wraps:
            x %= width
            y %= height
        point = Point(x, y)
        if point not in blocked and point not in taken:
            break
    food.append(point)
    return point


def generate_map(rng: Prng, config: RoundConfig) -> GeneratedMap:
    """Generate obstacles, then INITIAL_FOOD food cells around them."""
    obstacles = generate_obstacles(rng, config.width, config.height, config.obstacle_ratio)
    blocked = set(obstacles)
    food: list[Point] = []
    for _ in range(INITIAL_FOOD):
        place_food(rng, config.width, config.height, blocked, food, config.wraps)
    return GeneratedMap(obstacles=obstacles, food=food)


def occupied_cells(obstacles: Iterable[Point], bodies: Iterable[Iterable[Point]]) -> set[Point]:
    """Union of obstacle cells and every given body."""
    cells = set(obstacles)
    for body in bodies:
        cells.update(body)
    return cells
