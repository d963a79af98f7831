import io
import json
import zipfile

import pytest
from click.testing import CliRunner

from cgo_core.errors import FormatError
from cgo_inspect.cli import main
from cgo_inspect.games import games_frame
from cgo_inspect.logic import verify_swap
from cgo_swap.archive import rewrite_archive
from conftest import ROOT, build_record, write_archive

TARGET = f"{ROOT}/game-online/x.dat"


def swapped(backup, tmp_path, payload=None):
    out = tmp_path / "out.avx"
    with open(out, "wb") as f:
        rewrite_archive(backup, TARGET, payload or build_record(saved=4242), f)
    return out


def test_verify_passes_on_rewrite(backup, tmp_path):
    out = swapped(backup, tmp_path)
    result = verify_swap(backup, out)
    assert result["status"] == "PASS"
    assert result["substituted"] == TARGET
    assert result["saved"] == 4242
    assert len(result["payload_sha256"]) == 64


def test_verify_missing_output(backup, tmp_path):
    result = verify_swap(backup, tmp_path / "absent.avx")
    assert result["errors"][0]["code"] == "E_ARCHIVE_MISSING"


def test_verify_invalid_zip(backup, tmp_path):
    out = tmp_path / "out.avx"
    out.write_bytes(b"garbage")
    assert verify_swap(backup, out)["errors"][0]["code"] == "E_ARCHIVE_INVALID"


def test_verify_dropped_entry(backup, tmp_path):
    with zipfile.ZipFile(backup) as zf:
        entries = [(i.filename, zf.read(i)) for i in zf.infolist()][:-1]
    out = write_archive(tmp_path / "out.avx", entries)
    result = verify_swap(backup, out)
    assert result["status"] == "FAIL"
    assert result["errors"][0]["code"] == "E_ENTRY_SET"
    assert result["errors"][0]["dropped"] == ["Container/Library/Preferences/app.plist"]


def test_verify_reordered_entries(backup, tmp_path):
    with zipfile.ZipFile(backup) as zf:
        entries = [(i.filename, zf.read(i)) for i in zf.infolist()]
    out = write_archive(tmp_path / "out.avx", list(reversed(entries)))
    assert verify_swap(backup, out)["errors"][0]["code"] == "E_ENTRY_ORDER"


def test_verify_changed_copy_is_payload_mismatch(backup, tmp_path):
    with zipfile.ZipFile(backup) as zf:
        entries = [(i.filename, zf.read(i)) for i in zf.infolist()]
    entries = [(n, b"tampered" if n.endswith("app.plist") else d) for n, d in entries]
    entries = [(n, build_record(saved=1) if n == TARGET else d) for n, d in entries]
    out = write_archive(tmp_path / "out.avx", entries)
    result = verify_swap(backup, out, target=TARGET)
    assert result["errors"][0]["code"] == "E_PAYLOAD_MISMATCH"
    assert result["errors"][0]["entries"] == ["Container/Library/Preferences/app.plist"]


def test_verify_unchanged_target_is_substitution_error(backup, tmp_path):
    with zipfile.ZipFile(backup) as zf:
        original = zf.read(TARGET)
    out = swapped(backup, tmp_path, payload=original)
    assert verify_swap(backup, out, target=TARGET)["errors"][0]["code"] == "E_SUBSTITUTION"
    assert verify_swap(backup, out)["errors"][0]["code"] == "E_SUBSTITUTION"


def test_verify_flags_real_compression(backup, tmp_path):
    with zipfile.ZipFile(backup) as zf:
        entries = [(i.filename, zf.read(i)) for i in zf.infolist()]
    entries = [(n, build_record(saved=1) if n == TARGET else d) for n, d in entries]
    # Default deflate level shrinks the zero-padded plist.
    out = write_archive(tmp_path / "out.avx", entries)
    result = verify_swap(backup, out)
    assert result["errors"][0]["code"] == "E_COMPRESSION"


def test_verify_short_substitute_is_record_format_error(backup, tmp_path):
    out = swapped(backup, tmp_path, payload=b"\x01" * 10)
    result = verify_swap(backup, out)
    assert result["errors"][0]["code"] == "E_RECORD_FORMAT"


def test_games_frame_lists_newest_first(backup):
    df = games_frame(backup)
    assert list(df["name"]) == [
        f"{ROOT}/game/b.dat",
        f"{ROOT}/game-online/x.dat",
        f"{ROOT}/game-online/y.dat",
        f"{ROOT}/game/a.dat",
    ]
    assert list(df["kind"]) == ["game", "online", "online", "game"]
    first = df.iloc[0]
    assert first["board_size"] == 19
    assert first["human_color"] == "black"
    assert first["saved"].timestamp() == 100


def test_games_frame_empty_archive(tmp_path):
    p = write_archive(tmp_path / "t.avx", [("Container/", b"")])
    df = games_frame(p)
    assert df.empty
    assert list(df.columns)[:2] == ["name", "kind"]


def test_games_frame_propagates_corrupt_record(tmp_path):
    p = write_archive(tmp_path / "t.avx", [(f"{ROOT}/game/a.dat", b"\x00" * 8)])
    with pytest.raises(FormatError):
        games_frame(p)


def test_cli_verify_prints_json(backup, tmp_path):
    out = swapped(backup, tmp_path)
    result = CliRunner().invoke(main, ["verify", str(backup), str(out), "--target", TARGET])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["status"] == "PASS"


def test_cli_verify_exit_code_on_failure(backup, tmp_path):
    result = CliRunner().invoke(main, ["verify", str(backup), str(tmp_path / "absent.avx")])
    assert result.exit_code == 1


def test_cli_games_table(backup):
    result = CliRunner().invoke(main, ["games", str(backup)])
    assert result.exit_code == 0, result.output
    assert "game-online/x.dat" in result.output
    assert result.output.index("game/b.dat") < result.output.index("game/a.dat")


def corrupt_deflate(out):
    raw = bytearray(out.read_bytes())
    # Level 0 deflate: a 5-byte stored-block header precedes the payload.
    pos = raw.find(b"<plist>") - 5
    raw[pos] = 0x07  # final block, reserved block type
    out.write_bytes(bytes(raw))


def test_verify_bad_deflate_stream_is_archive_invalid(backup, tmp_path):
    out = swapped(backup, tmp_path)
    corrupt_deflate(out)
    result = verify_swap(backup, out)
    assert result["status"] == "FAIL"
    assert result["errors"][0]["code"] == "E_ARCHIVE_INVALID"


def test_cli_verify_bad_deflate_stream_reports_json(backup, tmp_path):
    out = swapped(backup, tmp_path)
    corrupt_deflate(out)
    result = CliRunner().invoke(main, ["verify", str(backup), str(out)])
    assert result.exit_code == 1
    assert json.loads(result.stdout)["errors"][0]["code"] == "E_ARCHIVE_INVALID"
