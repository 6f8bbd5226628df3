"""Game renderer — draws a WorldSnapshot and a status line.

Knows nothing about the session beyond what it is handed: the renderer
only ever sees immutable snapshots.
"""

from __future__ import annotations

import pygame

from snake_royale.config import (
    CELL_RENDER_SIZE,
    COLOR_BG,
    COLOR_DEAD,
    COLOR_FOOD,
    COLOR_GRID,
    COLOR_OBSTACLE,
    COLOR_TEXT,
)
from snake_royale.simulation.state import SnakeSnapshot, WorldSnapshot


def parse_color(text: str) -> pygame.Color:
    """Hex color string to pygame.Color, grey if unparseable."""
    try:
        return pygame.Color(text)
    except ValueError:
        return pygame.Color(*COLOR_DEAD)


class Renderer:
    """Draws the board to the screen."""

    def __init__(self, screen: pygame.Surface) -> None:
        self._screen = screen
        self._cell = CELL_RENDER_SIZE
        self._font = pygame.font.SysFont("monospace", 16)

    def draw(self, snapshot: WorldSnapshot | None, status_lines: list[str]) -> None:
        self._screen.fill(COLOR_BG)
        if snapshot is not None:
            self._draw_board(snapshot)
            board_bottom = snapshot.height * self._cell
        else:
            board_bottom = 0

        y = board_bottom + 8
        for line in status_lines:
            text = self._font.render(line, True, COLOR_TEXT)
            self._screen.blit(text, (8, y))
            y += text.get_height() + 2
        pygame.display.flip()

    def _draw_board(self, snapshot: WorldSnapshot) -> None:
        c = self._cell
        pygame.draw.rect(
            self._screen, COLOR_GRID, (0, 0, snapshot.width * c, snapshot.height * c), 1,
        )
        for p in snapshot.obstacles:
            pygame.draw.rect(self._screen, COLOR_OBSTACLE, (p.x * c, p.y * c, c, c))
        for p in snapshot.food:
            pygame.draw.circle(
                self._screen, COLOR_FOOD, (p.x * c + c // 2, p.y * c + c // 2), c // 3,
            )
        for snake in snapshot.snakes:
            self._draw_snake(snake)

    def _draw_snake(self, snake: SnakeSnapshot) -> None:
        c = self._cell
        color = parse_color(snake.color) if snake.alive else pygame.Color(*COLOR_DEAD)
        for i, p in enumerate(snake.body):
            inset = 1 if i == 0 else 3
            pygame.draw.rect(
                self._screen, color, (p.x * c + inset, p.y * c + inset, c - 2 * inset, c - 2 * inset),
            )
