"""Champion Go board swap - hand the latest local game to the engine."""
from __future__ import annotations

import io
import os
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import click

from cgo_core.protocol import DEFAULT_ROOT, PLAYER_BLACK, PLAYER_WHITE, game_prefix, online_prefix
from cgo_core.record import flip_to_computer, saved_date
from cgo_swap.archive import open_archive, rewrite_archive, scan_latest


def _fmt_date(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat().replace("+00:00", "Z")


def run(
    archive_path: Path,
    player: str = PLAYER_BLACK,
    now: int | None = None,
    root: str = DEFAULT_ROOT,
) -> bytes:
    """Build a new backup whose latest online game holds the latest local game."""
    click.echo(f"Reading backup: {archive_path}", err=True)

    # Source and target slots live in the same backup under two prefixes.
    with open_archive(archive_path) as archive:
        local_name, body = scan_latest(archive, game_prefix(root))
        online_name, _ = scan_latest(archive, online_prefix(root))

    click.echo(f"  Local game:  {local_name} (saved {_fmt_date(saved_date(body))})", err=True)
    click.echo(f"  Online slot: {online_name}", err=True)

    flip_to_computer(body, player, now)

    buf = io.BytesIO()
    count = rewrite_archive(archive_path, online_name, body, buf)

    click.echo(f"PASS: {count} entries written, human plays {'white' if player == PLAYER_WHITE else 'black'}", err=True)
    return buf.getvalue()


def _write_atomic(out_path: Path, data: bytes) -> None:
    out_path = Path(out_path)
    fd, tmp = tempfile.mkstemp(prefix=f".{out_path.name}.", dir=out_path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, out_path)
    except BaseException:
        os.unlink(tmp)
        raise


@click.command()
@click.option("-a", "--archive", "archive", required=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Input Champion Go backup archive (.avx)")
@click.option("-p", "--player", type=click.Choice([PLAYER_BLACK, PLAYER_WHITE]), default=PLAYER_BLACK,
              show_default=True, help="Color of the human player")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the new backup here instead of stdout")
@click.option("--root", default=DEFAULT_ROOT, show_default=True,
              help="Archive folder holding game/ and game-online/")
@click.option("--now", type=int, default=None, help="Timestamp to stamp into the record (epoch seconds)")
def main(archive: Path, player: str, output: Path | None, root: str, now: int | None) -> None:
    """Replace the latest engine game in a backup with the latest local game."""
    stdout = sys.stdout.buffer
    if output is None and stdout.isatty():
        raise click.UsageError("refusing to write a binary archive to a terminal; use --output or redirect stdout")

    try:
        data = run(archive, player=player, now=now, root=root)

        if output is None:
            stdout.write(data)
            stdout.flush()
        else:
            _write_atomic(output, data)
            click.echo(f"Backup written to {output}", err=True)
    except Exception as e:
        # Fail closed with a single-line reason; no output on error.
        click.echo(f"FATAL: {e}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
