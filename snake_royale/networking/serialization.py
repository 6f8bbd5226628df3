"""Binary serialization for broadcast messages.

All encoding uses struct for a compact, deterministic binary format.
Network byte order (big-endian) throughout.

Wire format for a full frame:
    [msg_type:u8][payload_len:u32][payload:bytes]

Building blocks:
    string  = [len:u16][utf-8 bytes]
    points  = [count:u32] then [x:i32][y:i32] per point

Payloads:
    START = [seed:u32][width:u16][height:u16][modifiers:u8]
            [obstacle_ratio:f64][min_spawn_distance:u16][n_players:u16]
            per player: [id:string][name:string][color:string]
    INPUT = [id:string][direction:u8][tick:u32]
    STATE = [tick:u32][width:u16][height:u16][modifiers:u8][n_snakes:u16]
            per snake: [id:string][name:string][color:string]
                       [direction:u8][alive:u8][pending_growth:i32][body:points]
            [food:points][obstacles:points]
    END   = [has_winner:u8][winner_id:string if has_winner][reason:string]
"""

from __future__ import annotations

import struct

from snake_royale.networking.protocol import (
    EndMessage,
    InputMessage,
    Message,
    MessageType,
    StartMessage,
    StateMessage,
)
from snake_royale.simulation.state import (
    Direction,
    Modifier,
    PlayerInfo,
    Point,
    RoundConfig,
    SnakeSnapshot,
    WorldSnapshot,
)


# --- Frame ---

FRAME_HEADER = struct.Struct("!BI")  # msg_type (u8), payload_len (u32)


def encode_frame(msg_type: MessageType, payload: bytes) -> bytes:
    """Wrap a payload in a message frame."""
    return FRAME_HEADER.pack(msg_type, len(payload)) + payload


def decode_frame(data: bytes) -> tuple[MessageType, bytes]:
    """Unwrap a message frame into (type, payload).

    Raises ValueError if the data is too short, truncated, or of an
    unknown type.
    """
    if len(data) < FRAME_HEADER.size:
        raise ValueError("Frame too short")
    msg_type_raw, payload_len = FRAME_HEADER.unpack_from(data)
    msg_type = MessageType(msg_type_raw)
    payload = data[FRAME_HEADER.size:FRAME_HEADER.size + payload_len]
    if len(payload) < payload_len:
        raise ValueError("Payload truncated")
    return msg_type, payload


# --- Primitives ---

STR_LEN = struct.Struct("!H")
POINT_COUNT = struct.Struct("!I")
POINT = struct.Struct("!ii")


def _pack_str(text: str) -> bytes:
    raw = text.encode("utf-8")
    return STR_LEN.pack(len(raw)) + raw


def _unpack_str(data: bytes, offset: int) -> tuple[str, int]:
    (length,) = STR_LEN.unpack_from(data, offset)
    offset += STR_LEN.size
    raw = data[offset:offset + length]
    if len(raw) < length:
        raise ValueError("String truncated")
    return raw.decode("utf-8"), offset + length


def _pack_points(points) -> bytes:
    parts = [POINT_COUNT.pack(len(points))]
    parts.extend(POINT.pack(p.x, p.y) for p in points)
    return b"".join(parts)


def _unpack_points(data: bytes, offset: int) -> tuple[tuple[Point, ...], int]:
    (count,) = POINT_COUNT.unpack_from(data, offset)
    offset += POINT_COUNT.size
    points: list[Point] = []
    for _ in range(count):
        x, y = POINT.unpack_from(data, offset)
        offset += POINT.size
        points.append(Point(x, y))
    return tuple(points), offset


# --- START ---

START_HEADER = struct.Struct("!IHHBdHH")


def encode_start(msg: StartMessage) -> bytes:
    cfg = msg.config
    parts = [START_HEADER.pack(
        cfg.seed, cfg.width, cfg.height, cfg.modifiers,
        cfg.obstacle_ratio, cfg.min_spawn_distance, len(cfg.players),
    )]
    for p in cfg.players:
        parts.append(_pack_str(p.player_id))
        parts.append(_pack_str(p.display_name))
        parts.append(_pack_str(p.color))
    return b"".join(parts)


def decode_start(data: bytes) -> StartMessage:
    seed, width, height, mods, ratio, min_dist, n_players = START_HEADER.unpack_from(data)
    if width == 0 or height == 0:
        raise ValueError(f"Empty board {width}x{height}")
    if not 0.0 <= ratio <= 1.0:
        raise ValueError(f"Obstacle ratio out of range: {ratio}")
    offset = START_HEADER.size
    players: list[PlayerInfo] = []
    for _ in range(n_players):
        player_id, offset = _unpack_str(data, offset)
        name, offset = _unpack_str(data, offset)
        color, offset = _unpack_str(data, offset)
        players.append(PlayerInfo(player_id, name, color))
    return StartMessage(RoundConfig(
        seed=seed,
        width=width,
        height=height,
        modifiers=Modifier(mods),
        obstacle_ratio=ratio,
        min_spawn_distance=min_dist,
        players=tuple(players),
    ))


# --- INPUT ---

INPUT_TAIL = struct.Struct("!BI")  # direction (u8), tick (u32)


def encode_input(msg: InputMessage) -> bytes:
    return _pack_str(msg.player_id) + INPUT_TAIL.pack(msg.direction, msg.tick)


def decode_input(data: bytes) -> InputMessage:
    player_id, offset = _unpack_str(data, 0)
    direction, tick = INPUT_TAIL.unpack_from(data, offset)
    return InputMessage(player_id, Direction(direction), tick)


# --- STATE ---

STATE_HEADER = struct.Struct("!IHHBH")
SNAKE_FIELDS = struct.Struct("!BBi")  # direction, alive, pending_growth


def encode_state(msg: StateMessage) -> bytes:
    snap = msg.snapshot
    parts = [STATE_HEADER.pack(
        snap.tick, snap.width, snap.height, msg.modifiers, len(snap.snakes),
    )]
    for s in snap.snakes:
        parts.append(_pack_str(s.player_id))
        parts.append(_pack_str(s.display_name))
        parts.append(_pack_str(s.color))
        parts.append(SNAKE_FIELDS.pack(s.direction, s.alive, s.pending_growth))
        parts.append(_pack_points(s.body))
    parts.append(_pack_points(snap.food))
    parts.append(_pack_points(snap.obstacles))
    return b"".join(parts)


def decode_state(data: bytes) -> StateMessage:
    tick, width, height, mods, n_snakes = STATE_HEADER.unpack_from(data)
    offset = STATE_HEADER.size
    snakes: list[SnakeSnapshot] = []
    for _ in range(n_snakes):
        player_id, offset = _unpack_str(data, offset)
        name, offset = _unpack_str(data, offset)
        color, offset = _unpack_str(data, offset)
        direction, alive, pending = SNAKE_FIELDS.unpack_from(data, offset)
        offset += SNAKE_FIELDS.size
        body, offset = _unpack_points(data, offset)
        snakes.append(SnakeSnapshot(
            player_id=player_id,
            display_name=name,
            color=color,
            direction=Direction(direction),
            alive=bool(alive),
            pending_growth=pending,
            body=body,
        ))
    food, offset = _unpack_points(data, offset)
    obstacles, offset = _unpack_points(data, offset)
    snapshot = WorldSnapshot(
        tick=tick,
        width=width,
        height=height,
        snakes=tuple(snakes),
        food=food,
        obstacles=obstacles,
    )
    return StateMessage(snapshot, Modifier(mods))


# --- END ---

END_FLAG = struct.Struct("!B")


def encode_end(msg: EndMessage) -> bytes:
    if msg.winner_id is None:
        return END_FLAG.pack(0) + _pack_str(msg.reason)
    return END_FLAG.pack(1) + _pack_str(msg.winner_id) + _pack_str(msg.reason)


def decode_end(data: bytes) -> EndMessage:
    (has_winner,) = END_FLAG.unpack_from(data)
    offset = END_FLAG.size
    winner_id = None
    if has_winner:
        winner_id, offset = _unpack_str(data, offset)
    reason, offset = _unpack_str(data, offset)
    return EndMessage(winner_id, reason)


# --- Dispatch ---

_ENCODERS = {
    StartMessage: (MessageType.START, encode_start),
    InputMessage: (MessageType.INPUT, encode_input),
    StateMessage: (MessageType.STATE, encode_state),
    EndMessage: (MessageType.END, encode_end),
}

_DECODERS = {
    MessageType.START: decode_start,
    MessageType.INPUT: decode_input,
    MessageType.STATE: decode_state,
    MessageType.END: decode_end,
}


def encode_message(msg: Message) -> bytes:
    """Encode a typed message into a complete frame."""
    msg_type, encoder = _ENCODERS[type(msg)]
    return encode_frame(msg_type, encoder(msg))


def decode_message(data: bytes) -> Message:
    """Decode a complete frame into a typed message.

    Raises ValueError or struct.error on malformed input.
    """
    msg_type, payload = decode_frame(data)
    return _DECODERS[msg_type](payload)
