"""Shared test fixtures for Snake Royale."""

from __future__ import annotations

import pytest

from snake_royale.networking.bus import LoopbackHub
from snake_royale.simulation.state import Modifier, PlayerInfo, RoundConfig


class FakeClock:
    """Manually advanced millisecond clock for session timers."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def players() -> tuple[PlayerInfo, ...]:
    return (
        PlayerInfo("alice", "Alice", "#e6194b"),
        PlayerInfo("bob", "Bob", "#3cb44b"),
    )


@pytest.fixture
def round_config(players) -> RoundConfig:
    """A standard two-player round with seed 42."""
    return RoundConfig(
        seed=42,
        width=90,
        height=30,
        modifiers=Modifier.NONE,
        obstacle_ratio=0.05,
        min_spawn_distance=6,
        players=players,
    )


@pytest.fixture
def hub() -> LoopbackHub:
    return LoopbackHub()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
