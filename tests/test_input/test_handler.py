"""Tests for InputHandler key mapping."""

import pygame

from snake_royale.input.handler import InputHandler
from snake_royale.simulation.state import Direction


def _key(key: int) -> pygame.event.Event:
    return pygame.event.Event(pygame.KEYDOWN, key=key)


class TestKeys:
    def test_arrows_and_wasd(self):
        frame = InputHandler().process_events([
            _key(pygame.K_UP), _key(pygame.K_a), _key(pygame.K_DOWN), _key(pygame.K_d),
        ])
        assert frame.directions == [Direction.UP, Direction.LEFT, Direction.DOWN, Direction.RIGHT]

    def test_space_requests_start(self):
        frame = InputHandler().process_events([_key(pygame.K_SPACE)])
        assert frame.start_requested
        assert frame.directions == []

    def test_escape_and_quit(self):
        handler = InputHandler()
        assert handler.process_events([_key(pygame.K_ESCAPE)]).quit_requested
        assert handler.process_events([pygame.event.Event(pygame.QUIT)]).quit_requested

    def test_unmapped_keys_ignored(self):
        frame = InputHandler().process_events([
            _key(pygame.K_q), pygame.event.Event(pygame.KEYUP, key=pygame.K_UP),
        ])
        assert frame.directions == []
        assert not frame.start_requested and not frame.quit_requested
