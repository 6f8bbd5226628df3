"""Tests for the match results store and leaderboard."""

from snake_royale.results import InMemoryResultsStore, MatchRecord
from snake_royale.simulation.state import Modifier, PlayerInfo

PLAYERS = (PlayerInfo("a", "Ann", "#fff"), PlayerInfo("b", "Ben", "#000"))


def _record(seed: int, winner: str | None) -> MatchRecord:
    names = {p.player_id: p.display_name for p in PLAYERS}
    return MatchRecord(
        round_id=f"public:{seed}",
        winner_id=winner,
        winner_name=names.get(winner),
        players=PLAYERS,
        modifiers=Modifier.NONE,
    )


class TestStore:
    def test_records_oldest_first(self):
        store = InMemoryResultsStore()
        store.insert(_record(1, "a"))
        store.insert(_record(2, None))
        assert [r.round_id for r in store.records()] == ["public:1", "public:2"]

    def test_records_is_a_copy(self):
        store = InMemoryResultsStore()
        store.insert(_record(1, "a"))
        store.records().clear()
        assert len(store.records()) == 1


class TestLeaderboard:
    def test_most_wins_first(self):
        store = InMemoryResultsStore()
        for seed, winner in enumerate(["a", "b", "b", "a", "b"]):
            store.insert(_record(seed, winner))
        assert store.leaderboard() == [("Ben", 3), ("Ann", 2)]

    def test_rounds_without_winner_ignored(self):
        store = InMemoryResultsStore()
        store.insert(_record(1, None))
        store.insert(_record(2, "a"))
        store.insert(_record(3, None))
        assert store.leaderboard() == [("Ann", 1)]

    def test_limit(self):
        store = InMemoryResultsStore()
        store.insert(_record(1, "a"))
        store.insert(_record(2, "b"))
        assert len(store.leaderboard(limit=1)) == 1

    def test_empty(self):
        assert InMemoryResultsStore().leaderboard() == []
