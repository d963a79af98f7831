import struct
import zipfile
from pathlib import Path

import pytest

ROOT = "Container/Documents"


def build_record(board_size=19, moves=(), saved=100, started=None, human_color=0, vs_computer=0, level=3, tail=b""):
    body = bytearray(76 + 20 * len(moves))
    body[4] = vs_computer
    body[8] = board_size
    body[12] = human_color
    body[16] = level
    body[56:60] = struct.pack("<i", saved if started is None else started)
    body[60:64] = struct.pack("<i", saved)
    for i, (x, y) in enumerate(moves):
        off = 76 + 20 * i
        body[off] = 0xEE
        body[off + 4] = x
        body[off + 8] = y
        body[off + 12] = 0xDD
    return bytes(body) + tail


def write_archive(path: Path, entries) -> Path:
    """entries: (name, payload) pairs; names ending in '/' are directories."""
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, payload in entries:
            zf.writestr(name, payload)
    return path


@pytest.fixture
def backup(tmp_path):
    """A small backup with two local games and two online slots."""
    local_old = build_record(9, [(1, 1), (9, 9)], saved=50)
    local_new = build_record(19, [(3, 4), (16, 17), (10, 10)], saved=100)
    online_old = build_record(19, [(4, 4)], saved=70, level=10)
    online_new = build_record(19, [(4, 4), (5, 5)], saved=80, level=10)
    entries = [
        ("Container/", b""),
        (f"{ROOT}/", b""),
        (f"{ROOT}/game/", b""),
        (f"{ROOT}/game/a.dat", local_old),
        (f"{ROOT}/game/b.dat", local_new),
        (f"{ROOT}/game-online/", b""),
        (f"{ROOT}/game-online/x.dat", online_new),
        (f"{ROOT}/game-online/y.dat", online_old),
        ("Container/Library/Preferences/app.plist", b"<plist>" + b"\x00" * 300 + b"</plist>"),
    ]
    return write_archive(tmp_path / "backup.avx", entries)
