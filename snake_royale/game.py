"""Frame loop for a local window.

Polls every in-process peer, feeds key presses into the local player's
session, lets the host tick when due and draws the latest snapshot.
"""

from __future__ import annotations

import logging

import pygame

from snake_royale.config import FPS
from snake_royale.input.handler import InputHandler
from snake_royale.rendering.renderer import Renderer
from snake_royale.results import ResultsStore
from snake_royale.session.coordinator import SessionCoordinator, SessionPhase
from snake_royale.simulation.state import Modifier

logger = logging.getLogger(__name__)


class Game:
    """Window controller. Owns the renderer and the local session."""

    def __init__(
        self,
        screen: pygame.Surface,
        session: SessionCoordinator,
        bots: list[SessionCoordinator] | None = None,
        modifiers: Modifier = Modifier.NONE,
        seed: int | None = None,
        results: ResultsStore | None = None,
    ) -> None:
        self._session = session
        self._bots = bots or []
        self._modifiers = modifiers
        self._seed = seed
        self._results = results
        self._clock = pygame.time.Clock()
        self._renderer = Renderer(screen)
        self._input = InputHandler()

    def run(self) -> None:
        """Main loop. Returns when the window is closed."""
        running = True
        while running:
            frame = self._input.process_events(pygame.event.get())
            if frame.quit_requested:
                running = False
                break

            for peer in self._peers():
                peer.poll()

            if frame.start_requested:
                self._try_start()
            if self._session.phase == SessionPhase.RUNNING:
                for direction in frame.directions:
                    self._session.send_direction(direction)

            for peer in self._peers():
                peer.update()

            self._renderer.draw(self._session.snapshot, self._status_lines())
            self._clock.tick(FPS)

        for peer in self._peers():
            peer.leave()

    def _peers(self) -> list[SessionCoordinator]:
        return [self._session, *self._bots]

    def _try_start(self) -> None:
        session = self._session
        if session.phase == SessionPhase.ENDED:
            session.return_to_lobby()
        if session.phase != SessionPhase.LOBBY or not session.is_host:
            return
        config = session.start_round(self._modifiers, seed=self._seed)
        # A fixed seed only applies to the first round.
        self._seed = None
        logger.info("Started round with %d players", len(config.players))

    def _status_lines(self) -> list[str]:
        return status_lines(self._session, self._results)


def status_lines(session: SessionCoordinator, results: ResultsStore | None = None) -> list[str]:
    """Text for the status bar under the board."""
    role = "host" if session.is_host else "peer"
    mods = "+".join(session.modifiers.names()) or "none"
    lines = [f"{session.me.display_name} ({role})  phase={session.phase.name}  mods={mods}"]
    if session.config is not None:
        lines[0] += f"  seed={session.config.seed}"
    if session.snapshot is not None:
        alive = len(session.snapshot.alive_snakes())
        lines[0] += f"  tick={session.snapshot.tick}  alive={alive}"
    if session.phase == SessionPhase.RUNNING and session.remote_inputs:
        lines.append("Last input: " + ", ".join(
            f"{pid} {direction.name}" for pid, direction in sorted(session.remote_inputs.items())
        ))
    if session.phase == SessionPhase.ENDED and session.result is not None:
        result = session.result
        if result.winner_name is not None:
            lines.append(f"{result.winner_name} wins ({result.reason}). SPACE for a new round.")
        else:
            lines.append(f"Round over ({result.reason}). SPACE for a new round.")
    elif session.phase == SessionPhase.LOBBY:
        lines.append("SPACE to start" if session.is_host else "Waiting for the host to start")
    if results is not None and session.phase != SessionPhase.RUNNING:
        board = results.leaderboard()
        if board:
            lines.append("Wins: " + ", ".join(f"{name} {wins}" for name, wins in board))
    return lines
