"""Directional input buffer.

Inputs are the ONLY way players affect the simulation. The host collects
them between ticks (from INPUT messages and from its own keyboard) and
hands one batch to SimulationEngine.step() per tick.
"""

from __future__ import annotations

from snake_royale.simulation.state import Direction


class InputBuffer:
    """Latest requested direction per player since the last drain.

    A player pressing several keys within one tick only gets the last one,
    matching what the player saw last on screen.

    Usage:
        buffer = InputBuffer()
        buffer.push("alice", Direction.UP)
        inputs = buffer.drain()  # {"alice": Direction.UP}
    """

    def __init__(self) -> None:
        self._pending: dict[str, Direction] = {}

    def push(self, player_id: str, direction: Direction) -> None:
        self._pending[player_id] = direction

    def drain(self) -> dict[str, Direction]:
        """Remove and return everything buffered so far."""
        pending, self._pending = self._pending, {}
        return pending

    def clear(self) -> None:
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)
