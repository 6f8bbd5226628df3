"""Match results store.

The host records every finished round here. The store is a collaborator:
the session only needs insert(), the lobby screen only needs leaderboard().
InMemoryResultsStore backs local play and tests; a persistent store
implements the same interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass

from snake_royale.config import LEADERBOARD_SIZE
from snake_royale.simulation.state import Modifier, PlayerInfo


@dataclass(frozen=True, slots=True)
class MatchRecord:
    """Outcome of one round.

    Attributes:
        round_id: "<game_id>:<seed>".
        winner_id: None when nobody survived.
        winner_name: Display name of the winner, None when nobody survived.
        players: Everyone who started the round.
        modifiers: Modifiers active during the round.
    """
    round_id: str
    winner_id: str | None
    winner_name: str | None
    players: tuple[PlayerInfo, ...]
    modifiers: Modifier


class ResultsStore(ABC):
    """Append-only log of match outcomes."""

    @abstractmethod
    def insert(self, record: MatchRecord) -> None:
        ...

    @abstractmethod
    def records(self) -> list[MatchRecord]:
        """All records, oldest first."""
        ...

    def leaderboard(self, limit: int = LEADERBOARD_SIZE) -> list[tuple[str, int]]:
        """(winner_name, wins) pairs, most wins first.

        Rounds without a winner are not counted. Ties keep the order in
        which the names first won.
        """
        wins = Counter(r.winner_name for r in self.records() if r.winner_id is not None)
        return wins.most_common(limit)


class InMemoryResultsStore(ResultsStore):
    def __init__(self) -> None:
        self._records: list[MatchRecord] = []

    def insert(self, record: MatchRecord) -> None:
        self._records.append(record)

    def records(self) -> list[MatchRecord]:
        return list(self._records)
