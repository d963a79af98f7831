import random
import struct
import uuid
import zipfile
from datetime import datetime, timezone
from pathlib import Path

ROOT = "Container/Documents"
BOARD_SIZES = [9, 13, 19]

def build_record(board_size: int, moves: list[tuple[int, int]], saved: int, started: int | None = None,
                 human_color: int = 0, vs_computer: int = 0, level: int = 5) -> bytes:
    body = bytearray(76 + 20 * len(moves))
    body[0:4] = b"CGO1"
    body[4] = vs_computer
    body[8] = board_size
    body[12] = human_color
    body[16] = level
    body[56:60] = struct.pack("<i", saved if started is None else started)
    body[60:64] = struct.pack("<i", saved)
    for i, (x, y) in enumerate(moves):
        off = 76 + 20 * i
        body[off] = i % 2  # side to move
        body[off + 4] = x
        body[off + 8] = y
    return bytes(body)

def random_moves(board_size: int, count: int) -> list[tuple[int, int]]:
    return [(random.randint(1, board_size), random.randint(1, board_size)) for _ in range(count)]

def generate_backup(out_path: str, games: int = 3, online: int = 2) -> Path:
    now = int(datetime.now(timezone.utc).timestamp())
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    with zipfile.ZipFile(out, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("Container/", b"")
        zf.writestr(f"{ROOT}/", b"")
        zf.writestr(f"{ROOT}/game/", b"")
        for _ in range(games):
            bs = random.choice(BOARD_SIZES)
            saved = now - random.randint(60, 86400)
            zf.writestr(f"{ROOT}/game/{uuid.uuid4().hex[:8]}.dat",
                        build_record(bs, random_moves(bs, random.randint(4, 40)), saved))

        zf.writestr(f"{ROOT}/game-online/", b"")
        for _ in range(online):
            saved = now - random.randint(86400, 7 * 86400)
            zf.writestr(f"{ROOT}/game-online/{uuid.uuid4().hex[:8]}.dat",
                        build_record(19, random_moves(19, 10), saved, level=10))

        # Unrelated app state that must survive untouched.
        zf.writestr("Container/Library/Preferences/com.example.cgo.plist", b"<plist>" + b"\x00" * 512 + b"</plist>")
        zf.writestr("Manifest.plist", b"bplist00" + bytes(range(256)))

    print(f"GENERATED: {out}")
    return out

if __name__ == "__main__":
    import sys

    # Usage:
    #   python tools/make_backup.py OUT.avx [--games N] [--online N] [--seed S]

    args = [a for a in sys.argv[1:] if a]

    def pop_int(arg_list: list[str], flag: str, default: int) -> tuple[int, list[str]]:
        """Remove an integer option from an argv-style list."""
        if flag not in arg_list:
            return default, arg_list
        i = arg_list.index(flag)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{flag} requires a value")
        return int(arg_list[i + 1]), arg_list[:i] + arg_list[i + 2:]

    games, args = pop_int(args, "--games", 3)
    online, args = pop_int(args, "--online", 2)
    seed, args = pop_int(args, "--seed", -1)
    if seed >= 0:
        random.seed(seed)

    out = args[0] if len(args) > 0 else "backup.avx"
    generate_backup(out, games=games, online=online)
