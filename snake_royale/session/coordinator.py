"""Session state machine and host tick loop.

Manages the round lifecycle: JOINING -> LOBBY -> RUNNING -> ENDED -> LOBBY.

One peer (the host, see election.py) steps the simulation on a timer and
broadcasts a STATE after every tick. Every other peer only builds the
initial world from START and then shows whatever STATE arrives. The bus
never echoes a frame to its sender, so the host applies its own START,
INPUT and END locally right after sending them.

Host loss during a round is not recovered: no re-election happens while
RUNNING, and the round freezes for everyone else.
"""

from __future__ import annotations

import logging
import struct
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from snake_royale.config import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    DEFAULT_GAME_ID,
    DEFAULT_TICK_RATE,
    FAST_TICK_RATE,
    MIN_SPAWN_DISTANCE,
    OBSTACLE_RATIO,
    REASON_ALL_DEAD,
    REASON_LAST_STANDING,
)
from snake_royale.networking.bus import MessageBus
from snake_royale.networking.protocol import (
    EndMessage,
    InputMessage,
    Message,
    PresenceRecord,
    StartMessage,
    StateMessage,
)
from snake_royale.networking.serialization import decode_message, encode_message
from snake_royale.results import MatchRecord, ResultsStore
from snake_royale.session.election import elect_host, now_iso, sort_roster
from snake_royale.simulation.engine import SimulationEngine
from snake_royale.simulation.inputs import InputBuffer
from snake_royale.simulation.state import (
    Direction,
    Modifier,
    PlayerInfo,
    RoundConfig,
    WorldSnapshot,
)

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    JOINING = auto()
    LOBBY = auto()
    RUNNING = auto()
    ENDED = auto()


class SessionError(RuntimeError):
    """The local caller asked for something the session cannot do now."""


@dataclass(frozen=True, slots=True)
class RoundResult:
    winner_id: str | None
    winner_name: str | None
    reason: str


def tick_interval_ms(modifiers: Modifier) -> float:
    rate = FAST_TICK_RATE if Modifier.FAST in modifiers else DEFAULT_TICK_RATE
    return 1000 / rate


def new_seed() -> int:
    """Fresh non-zero u32 seed from the wall clock."""
    return (int(time.time() * 1000) & 0xFFFFFFFF) or 1


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class SessionCoordinator:
    """One peer's view of a game channel.

    Call poll() and update() once per frame: poll() handles presence and
    inbound messages, update() runs the host's tick when it is due.

    Attributes:
        phase: Current lifecycle phase.
        host_id: Elected host for the next round.
        snapshot: Latest world to render, or None before the first round.
        modifiers: Modifiers of the current (or last) round.
        result: Outcome of the last finished round.
        remote_inputs: Last direction seen per player, for display on
            peers that do not step the simulation.
    """

    def __init__(
        self,
        bus: MessageBus,
        me: PlayerInfo,
        results: ResultsStore | None = None,
        game_id: str = DEFAULT_GAME_ID,
        clock: Callable[[], float] | None = None,
        width: int = BOARD_WIDTH,
        height: int = BOARD_HEIGHT,
        obstacle_ratio: float = OBSTACLE_RATIO,
        min_spawn_distance: int = MIN_SPAWN_DISTANCE,
    ) -> None:
        self._bus = bus
        self.me = me
        self._results = results
        self.game_id = game_id
        self._clock = clock or _monotonic_ms
        self._width = width
        self._height = height
        self._obstacle_ratio = obstacle_ratio
        self._min_spawn_distance = min_spawn_distance

        self.phase = SessionPhase.JOINING
        self.host_id: str | None = None
        self._roster: list[PresenceRecord] = []

        # Current round
        self._config: RoundConfig | None = None
        self._engine: SimulationEngine | None = None
        self._stepping = False  # this peer drives the current round
        self._inputs = InputBuffer()
        self._next_tick_ms: float | None = None
        self.snapshot: WorldSnapshot | None = None
        self.modifiers = Modifier.NONE
        self.result: RoundResult | None = None
        self.remote_inputs: dict[str, Direction] = {}

    # --- Roles ---

    @property
    def is_host(self) -> bool:
        return self.host_id is not None and self.host_id == self.me.player_id

    @property
    def is_stepping(self) -> bool:
        return self._stepping

    @property
    def config(self) -> RoundConfig | None:
        return self._config

    @property
    def timer_armed(self) -> bool:
        return self._next_tick_ms is not None

    def roster(self) -> list[PresenceRecord]:
        """Known roster in election order."""
        return sort_roster(self._roster)

    # --- Presence ---

    def join(self, joined_at: str | None = None) -> None:
        """Announce this peer on the channel."""
        self._bus.track(PresenceRecord(
            player_id=self.me.player_id,
            display_name=self.me.display_name,
            color=self.me.color,
            joined_at=joined_at or now_iso(),
        ))
        self._refresh_roster()

    def leave(self) -> None:
        self._cancel_timer()
        self._bus.untrack()
        self._bus.close()

    def _refresh_roster(self) -> None:
        roster = self._bus.roster()
        if roster != self._roster:
            self._roster = roster
            self._on_roster_changed()

    def _on_roster_changed(self) -> None:
        if self.phase == SessionPhase.JOINING:
            if any(r.player_id == self.me.player_id for r in self._roster):
                self.phase = SessionPhase.LOBBY
            else:
                return
        if self.phase == SessionPhase.RUNNING:
            return
        host_id = elect_host(self._roster)
        if host_id != self.host_id:
            logger.info("Host is now %s%s", host_id, " (me)" if host_id == self.me.player_id else "")
            self.host_id = host_id

    # --- Frame hooks ---

    def poll(self) -> None:
        """Process inbound frames, then presence changes. Non-blocking.

        Frames go first so a START that arrives together with a roster
        change puts the session in RUNNING before the election could run.
        """
        for frame in self._bus.receive():
            try:
                msg = decode_message(frame)
            except (ValueError, struct.error, UnicodeDecodeError):
                logger.warning("Dropping malformed frame (%d bytes)", len(frame))
                continue
            self._handle(msg)
        self._refresh_roster()

    def update(self) -> None:
        """Run one host tick if its timer is due."""
        if self._next_tick_ms is None:
            return
        if self._clock() >= self._next_tick_ms:
            self.run_tick()

    # --- Round control ---

    def start_round(self, modifiers: Modifier = Modifier.NONE, seed: int | None = None) -> RoundConfig:
        """Host only: pick parameters, broadcast START, start ticking."""
        if self.phase == SessionPhase.RUNNING:
            raise SessionError("a round is already running")
        if not self.is_host:
            raise SessionError(f"only the host ({self.host_id}) can start a round")

        players = [PlayerInfo(r.player_id, r.display_name, r.color) for r in self.roster()]
        if not any(p.player_id == self.me.player_id for p in players):
            players.append(self.me)

        config = RoundConfig(
            seed=seed if seed is not None else new_seed(),
            width=self._width,
            height=self._height,
            modifiers=modifiers,
            obstacle_ratio=self._obstacle_ratio,
            min_spawn_distance=self._min_spawn_distance,
            players=tuple(players),
        )
        self._send(StartMessage(config))
        self._begin_round(config)
        self._stepping = True
        self._next_tick_ms = self._clock()
        return config

    def return_to_lobby(self) -> None:
        """ENDED -> LOBBY, re-running the election on the current roster."""
        if self.phase != SessionPhase.ENDED:
            return
        self.phase = SessionPhase.LOBBY
        self._on_roster_changed()

    def send_direction(self, direction: Direction) -> None:
        """Local key press: tell everyone, and buffer it if we step."""
        tick = self.snapshot.tick if self.snapshot is not None else 0
        self._send(InputMessage(self.me.player_id, direction, tick))
        if self._stepping:
            self._inputs.push(self.me.player_id, direction)

    def run_tick(self) -> WorldSnapshot:
        """One iteration of the host loop: step, broadcast, maybe end."""
        if not self._stepping or self._engine is None:
            raise SessionError("this peer is not stepping a round")
        snapshot = self._engine.step(self._inputs.drain())
        self.snapshot = snapshot
        logger.debug("Tick %d digest %s", snapshot.tick, snapshot.digest().hex()[:16])
        self._send(StateMessage(snapshot, self.modifiers))

        alive = snapshot.alive_snakes()
        if len(alive) > 1:
            self._next_tick_ms = self._clock() + tick_interval_ms(self.modifiers)
            return snapshot

        if alive:
            end = EndMessage(alive[0].player_id, REASON_LAST_STANDING)
        else:
            end = EndMessage(None, REASON_ALL_DEAD)
        self._send(end)
        self._finish(end)
        self._record(end)
        return snapshot

    # --- Internals ---

    def _send(self, msg: Message) -> None:
        self._bus.broadcast(encode_message(msg))

    def _begin_round(self, config: RoundConfig) -> None:
        """Build a fresh engine. Nothing carries over from earlier rounds."""
        self._cancel_timer()
        self._config = config
        self._engine = SimulationEngine.from_config(config)
        self._stepping = False
        self._inputs.clear()
        self.remote_inputs = {}
        self.modifiers = config.modifiers
        self.snapshot = self._engine.snapshot()
        self.result = None
        self.phase = SessionPhase.RUNNING
        logger.info(
            "Round started: seed=%d mods=%s players=%d",
            config.seed, "+".join(config.modifiers.names()) or "none", len(config.players),
        )

    def _finish(self, end: EndMessage) -> None:
        self._cancel_timer()
        self._stepping = False
        self.phase = SessionPhase.ENDED
        self.result = RoundResult(end.winner_id, self._player_name(end.winner_id), end.reason)
        logger.info("Round over: winner=%s (%s)", end.winner_id, end.reason)

    def _record(self, end: EndMessage) -> None:
        if self._results is None or self._config is None:
            return
        self._results.insert(MatchRecord(
            round_id=f"{self.game_id}:{self._config.seed}",
            winner_id=end.winner_id,
            winner_name=self._player_name(end.winner_id),
            players=self._config.players,
            modifiers=self._config.modifiers,
        ))

    def _player_name(self, player_id: str | None) -> str | None:
        if player_id is None or self._config is None:
            return None
        for p in self._config.players:
            if p.player_id == player_id:
                return p.display_name
        return player_id

    def _cancel_timer(self) -> None:
        self._next_tick_ms = None

    def _handle(self, msg: Message) -> None:
        if isinstance(msg, StartMessage):
            self._begin_round(msg.config)
        elif isinstance(msg, InputMessage):
            self._handle_input(msg)
        elif isinstance(msg, StateMessage):
            self._handle_state(msg)
        elif isinstance(msg, EndMessage):
            if not self._stepping and self.phase == SessionPhase.RUNNING:
                self._finish(msg)

    def _handle_input(self, msg: InputMessage) -> None:
        if self._stepping:
            self._inputs.push(msg.player_id, msg.direction)
        else:
            self.remote_inputs[msg.player_id] = msg.direction

    def _handle_state(self, msg: StateMessage) -> None:
        if self._stepping or self.phase != SessionPhase.RUNNING:
            return
        if self.snapshot is not None and msg.tick <= self.snapshot.tick:
            logger.debug("Dropping stale STATE for tick %d", msg.tick)
            return
        self.snapshot = msg.snapshot
        self.modifiers = msg.modifiers
