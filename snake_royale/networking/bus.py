"""Message bus interface and in-process loopback implementation.

MessageBus is the seam between the session layer and whatever pub/sub
transport carries a game's channel. The session codes against this
interface only. The transport has to provide:

- presence: each peer tracks one PresenceRecord, everyone can read the roster
- broadcast: frames reach every other subscriber in the sender's send order
  and are never echoed back to the sender

LoopbackHub provides exactly that inside one process, for local play and
for tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from itertools import count

from snake_royale.networking.protocol import PresenceRecord


class MessageBus(ABC):
    """Abstract pub/sub channel with presence tracking."""

    @abstractmethod
    def track(self, record: PresenceRecord) -> None:
        """Publish (or replace) this peer's presence record."""
        ...

    @abstractmethod
    def untrack(self) -> None:
        """Remove this peer's presence record."""
        ...

    @abstractmethod
    def roster(self) -> list[PresenceRecord]:
        """Current presence roster, in no particular order."""
        ...

    @abstractmethod
    def broadcast(self, frame: bytes) -> None:
        """Send a frame to every other subscriber. Fire-and-forget."""
        ...

    @abstractmethod
    def receive(self) -> list[bytes]:
        """Drain and return frames received since the last call, in order.

        Non-blocking.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Leave the channel."""
        ...


class LoopbackHub:
    """One in-memory channel shared by any number of LoopbackBus peers."""

    def __init__(self) -> None:
        self._buses: dict[int, LoopbackBus] = {}
        self._presence: dict[int, PresenceRecord] = {}
        self._ids = count()

    def connect(self) -> LoopbackBus:
        bus = LoopbackBus(self, next(self._ids))
        self._buses[bus.key] = bus
        return bus

    def _deliver(self, sender: int, frame: bytes) -> None:
        for key, bus in self._buses.items():
            if key != sender:
                bus._inbox.append(frame)

    def _disconnect(self, key: int) -> None:
        self._buses.pop(key, None)
        self._presence.pop(key, None)


class LoopbackBus(MessageBus):
    """A peer's handle on a LoopbackHub."""

    def __init__(self, hub: LoopbackHub, key: int) -> None:
        self._hub = hub
        self.key = key
        self._inbox: list[bytes] = []
        self._closed = False

    def track(self, record: PresenceRecord) -> None:
        if not self._closed:
            self._hub._presence[self.key] = record

    def untrack(self) -> None:
        self._hub._presence.pop(self.key, None)

    def roster(self) -> list[PresenceRecord]:
        return list(self._hub._presence.values())

    def broadcast(self, frame: bytes) -> None:
        if not self._closed:
            self._hub._deliver(self.key, frame)

    def receive(self) -> list[bytes]:
        frames, self._inbox = self._inbox, []
        return frames

    def close(self) -> None:
        self._closed = True
        self._hub._disconnect(self.key)

    def inject(self, frame: bytes) -> None:
        """Test helper: queue a frame as if another peer had sent it."""
        self._inbox.append(frame)
