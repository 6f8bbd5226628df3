"""Input handler — converts PyGame key events to directions.

Arrow keys and WASD steer; SPACE asks to start a round (the game only
honors it on the host, outside a running round).
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pygame

from snake_royale.simulation.state import Direction

KEY_TO_DIRECTION: dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_w: Direction.UP,
    pygame.K_s: Direction.DOWN,
    pygame.K_a: Direction.LEFT,
    pygame.K_d: Direction.RIGHT,
}


@dataclass(slots=True)
class FrameInput:
    """What the player asked for during one frame."""
    directions: list[Direction] = field(default_factory=list)
    start_requested: bool = False
    quit_requested: bool = False


class InputHandler:
    """Maps raw PyGame events to FrameInput."""

    def process_events(self, events: list[pygame.event.Event]) -> FrameInput:
        frame = FrameInput()
        for event in events:
            if event.type == pygame.QUIT:
                frame.quit_requested = True
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    frame.quit_requested = True
                elif event.key == pygame.K_SPACE:
                    frame.start_requested = True
                elif event.key in KEY_TO_DIRECTION:
                    frame.directions.append(KEY_TO_DIRECTION[event.key])
        return frame
