"""Champion Go saved-game protocol constants.

Single source of truth for record offsets and archive layout.
Reader, mutator and inspector must remain synchronized with this table.
"""

# Record header fields (single bytes)
OFF_VS_COMPUTER = 4    # 1 = human vs human label, engine re-derives moves
OFF_BOARD_SIZE = 8
OFF_HUMAN_COLOR = 12   # 0 = human plays black, 1 = human plays white
OFF_LEVEL = 16

# Timestamps: little-endian signed 32-bit epoch seconds
TIMESTAMP_FMT = "<i"
OFF_STARTED = 56
OFF_SAVED = 60
TIMESTAMP_LEN = 4
MIN_RECORD_LEN = OFF_SAVED + TIMESTAMP_LEN

# Move list: [?(4) | X(1) | ?(3) | Y(1) | ?(11)] = 20 bytes per move
MOVES_START = 76
MOVE_STRIDE = 20
MOVE_COORDS = (4, 8)

# Values written when handing a game to the engine
VS_COMPUTER_VALUE = 1
COLOR_BLACK = 0
COLOR_WHITE = 1
COMPUTER_LEVEL = 10

PLAYER_BLACK = "b"
PLAYER_WHITE = "w"

# Archive layout (iOS app backup)
DEFAULT_ROOT = "Container/Documents"
GAME_DIR = "game"
ONLINE_DIR = "game-online"

# Rewrite staging: spill to disk above this size
SPOOL_MAX_BYTES = 64 * 1024 * 1024  # 64 MiB

# Deflate tag with no actual compression; the app rejects anything else
STORE_LEVEL = 0


def game_prefix(root: str = DEFAULT_ROOT) -> str:
    return f"{root.rstrip('/')}/{GAME_DIR}/"


def online_prefix(root: str = DEFAULT_ROOT) -> str:
    return f"{root.rstrip('/')}/{ONLINE_DIR}/"
