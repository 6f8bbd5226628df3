"""Host election by convention.

There is no vote: every peer sorts the same roster the same way and takes
the first entry. Earliest join wins; equal timestamps fall back to the
smaller id, so all peers agree without exchanging a message.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from snake_royale.networking.protocol import PresenceRecord


def sort_roster(roster: Iterable[PresenceRecord]) -> list[PresenceRecord]:
    """Roster in election order: (joined_at, player_id) ascending."""
    return sorted(roster, key=lambda r: (r.joined_at, r.player_id))


def elect_host(roster: Iterable[PresenceRecord]) -> str | None:
    """Id of the host for this roster, or None if the roster is empty."""
    ordered = sort_roster(roster)
    return ordered[0].player_id if ordered else None


def format_iso(moment: datetime) -> str:
    """Fixed-width UTC ISO-8601 string, e.g. 2024-01-01T00:00:00.000Z.

    Fixed width keeps text order equal to time order, which is what
    elect_host relies on.
    """
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def now_iso() -> str:
    return format_iso(datetime.now(timezone.utc))
