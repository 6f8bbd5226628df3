"""Tests for host election."""

from datetime import datetime, timedelta, timezone

from snake_royale.networking.protocol import PresenceRecord
from snake_royale.session.election import elect_host, format_iso, now_iso, sort_roster


def _record(pid: str, joined_at: str) -> PresenceRecord:
    return PresenceRecord(pid, pid, "#ffffff", joined_at)


class TestElection:
    def test_earliest_join_wins(self):
        roster = [
            _record("b", "2024-01-01T00:00:01Z"),
            _record("a", "2024-01-01T00:00:00Z"),
        ]
        assert elect_host(roster) == "a"

    def test_earliest_join_wins_even_with_larger_id(self):
        roster = [
            _record("a", "2024-01-01T00:00:05Z"),
            _record("z", "2024-01-01T00:00:00Z"),
        ]
        assert elect_host(roster) == "z"

    def test_tie_broken_by_smaller_id(self):
        roster = [
            _record("b", "2024-01-01T00:00:00Z"),
            _record("a", "2024-01-01T00:00:00Z"),
        ]
        assert elect_host(roster) == "a"

    def test_empty_roster(self):
        assert elect_host([]) is None

    def test_every_order_agrees(self):
        """All peers see the roster in different orders but pick the same host."""
        records = [
            _record("c", "2024-01-01T00:00:02Z"),
            _record("b", "2024-01-01T00:00:01Z"),
            _record("d", "2024-01-01T00:00:01Z"),
        ]
        assert elect_host(records) == elect_host(list(reversed(records))) == "b"
        assert [r.player_id for r in sort_roster(records)] == ["b", "d", "c"]


class TestTimestamps:
    def test_fixed_width(self):
        moment = datetime(2024, 1, 1, 0, 0, 0, 5000, tzinfo=timezone.utc)
        assert format_iso(moment) == "2024-01-01T00:00:00.005Z"

    def test_text_order_is_time_order(self):
        base = datetime(2024, 1, 1, 23, 59, 59, 999000, tzinfo=timezone.utc)
        later = base + timedelta(milliseconds=1)
        assert format_iso(base) < format_iso(later)

    def test_other_timezones_normalized(self):
        moment = datetime(2024, 1, 1, 1, 0, 0, tzinfo=timezone(timedelta(hours=1)))
        assert format_iso(moment) == "2024-01-01T00:00:00.000Z"

    def test_now_iso_shape(self):
        stamp = now_iso()
        assert len(stamp) == len("2024-01-01T00:00:00.000Z")
        assert stamp.endswith("Z")
