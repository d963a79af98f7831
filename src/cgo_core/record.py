"""Champion Go saved-game record: timestamp reader and engine hand-off mutator."""
from __future__ import annotations

import struct
from datetime import datetime, timezone
from warnings import warn

from cgo_core.errors import FormatError
from cgo_core.protocol import (
    COLOR_BLACK,
    COLOR_WHITE,
    COMPUTER_LEVEL,
    MIN_RECORD_LEN,
    MOVE_COORDS,
    MOVE_STRIDE,
    MOVES_START,
    OFF_BOARD_SIZE,
    OFF_HUMAN_COLOR,
    OFF_LEVEL,
    OFF_SAVED,
    OFF_STARTED,
    OFF_VS_COMPUTER,
    PLAYER_BLACK,
    PLAYER_WHITE,
    TIMESTAMP_FMT,
    TIMESTAMP_LEN,
    VS_COMPUTER_VALUE,
)


def _read_timestamp(body: bytes, offset: int) -> int:
    if len(body) < MIN_RECORD_LEN:
        raise FormatError(
            f"record too short: {len(body)} bytes, need at least {MIN_RECORD_LEN}"
        )
    raw = bytes(body[offset:offset + TIMESTAMP_LEN])
    try:
        (value,) = struct.unpack(TIMESTAMP_FMT, raw)
    except struct.error as exc:
        raise FormatError(f"parse {raw!r} error: {exc}") from exc
    return int(value)


def saved_date(body: bytes) -> int:
    """Return the saved timestamp (epoch seconds), the recency key of a record."""
    return _read_timestamp(body, OFF_SAVED)


def started_date(body: bytes) -> int:
    return _read_timestamp(body, OFF_STARTED)


def _wrap_i32(value: int) -> int:
    return ((int(value) + 2**31) % 2**32) - 2**31


def flip_board(body: bytearray) -> int:
    """Reflect every move through the board center, in place.

    Each coordinate c becomes (n - c + 1) mod 256 where n is the board size.
    Returns the number of strides flipped.
    """
    n = body[OFF_BOARD_SIZE]
    last = max(MOVE_COORDS)
    flipped = 0

    for i in range(MOVES_START, len(body), MOVE_STRIDE):
        if i + last >= len(body):
            warn(f"Truncated move stride at offset {i} ({len(body) - i} bytes). Left as is.")
            break
        for rel in MOVE_COORDS:
            body[i + rel] = (n - body[i + rel] + 1) & 0xFF
        flipped += 1

    return flipped


def flip_to_computer(body: bytearray, player: str = PLAYER_BLACK, now: int | None = None) -> None:
    """Relabel a local game so the engine plays the other side.

    The record is marked human vs human so the engine re-derives its move
    rather than replaying a recorded one. With player "w" the human takes
    white and the board is reflected. Both timestamps are set to `now` so
    the record sorts as most recent.
    """
    if player not in (PLAYER_BLACK, PLAYER_WHITE):
        raise ValueError(f"player must be {PLAYER_BLACK!r} or {PLAYER_WHITE!r}, got {player!r}")
    if len(body) < MIN_RECORD_LEN:
        raise FormatError(
            f"record too short: {len(body)} bytes, need at least {MIN_RECORD_LEN}"
        )

    if now is None:
        now = int(datetime.now(timezone.utc).timestamp())

    body[OFF_VS_COMPUTER] = VS_COMPUTER_VALUE

    if player == PLAYER_WHITE:
        body[OFF_HUMAN_COLOR] = COLOR_WHITE
        flip_board(body)
    else:
        body[OFF_HUMAN_COLOR] = COLOR_BLACK

    body[OFF_LEVEL] = COMPUTER_LEVEL

    stamp = struct.pack(TIMESTAMP_FMT, _wrap_i32(now))
    body[OFF_STARTED:OFF_STARTED + TIMESTAMP_LEN] = stamp
    body[OFF_SAVED:OFF_SAVED + TIMESTAMP_LEN] = stamp


def summarize(body: bytes) -> dict:
    """Decode the fields this tool knows about."""
    saved = saved_date(body)
    started = started_date(body)
    return {
        "size": len(body),
        "board_size": int(body[OFF_BOARD_SIZE]),
        "vs_computer": int(body[OFF_VS_COMPUTER]),
        "human_color": "white" if body[OFF_HUMAN_COLOR] == COLOR_WHITE else "black",
        "level": int(body[OFF_LEVEL]),
        "started": datetime.fromtimestamp(started, tz=timezone.utc),
        "saved": datetime.fromtimestamp(saved, tz=timezone.utc),
    }
