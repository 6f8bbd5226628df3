"""Deterministic PRNG shared by every peer.

Every random decision in the simulation (obstacles, food, spawns) is drawn
from one of these streams. Two peers that seed it identically and call it
the same number of times in the same order see exactly the same values,
which is what lets every peer rebuild the same world from a seed alone.

Never use Python's random module in simulation code.
"""

from __future__ import annotations

MASK_32 = 0xFFFFFFFF
TWO_POW_32 = 0x100000000


class Prng:
    """32-bit xorshift stream (shifts 13, 17, 5) yielding floats in [0, 1).

    A zero seed is a fixed point of the recurrence and yields 0.0 forever;
    seeds handed out by the session are always non-zero.
    """

    __slots__ = ("state",)

    def __init__(self, seed: int) -> None:
        self.state: int = seed & MASK_32

    def next_u32(self) -> int:
        """Advance the stream and return the raw 32-bit state."""
        x = self.state
        x ^= (x << 13) & MASK_32
        x ^= x >> 17
        x ^= (x << 5) & MASK_32
        self.state = x
        return x

    def next_float(self) -> float:
        """Next value in [0, 1)."""
        return self.next_u32() / TWO_POW_32

    def next_int(self, bound: int) -> int:
        """Next integer in [0, bound), computed as floor(next_float() * bound)."""
        return int(self.next_float() * bound)
