import json
import sys
from pathlib import Path
import click
from cgo_core.protocol import DEFAULT_ROOT
from .games import games_frame
from .logic import verify_swap

@click.group()
def main():
    pass

@main.command("games")
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--root", default=DEFAULT_ROOT, show_default=True)
def games_cmd(archive: Path, root: str):
    try:
        df = games_frame(archive, root=root)
    except Exception as e:
        click.echo(f"FATAL: {e}", err=True)
        sys.exit(1)
    if df.empty:
        click.echo("No saved games found.")
        return
    click.echo(df.to_string(index=False))

@main.command("verify")
@click.argument("reference", type=click.Path(path_type=Path))
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--target", default=None, help="Entry expected to carry the new record")
def verify_cmd(reference: Path, output: Path, target):
    result = verify_swap(reference, output, target=target)
    click.echo(json.dumps(result, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    if result["status"] != "PASS":
        sys.exit(1)

if __name__ == "__main__":
    main()
