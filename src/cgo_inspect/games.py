"""Tabulate the saved games held in a backup."""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from cgo_core.protocol import DEFAULT_ROOT, game_prefix, online_prefix
from cgo_core.record import summarize
from cgo_swap.archive import iter_records, open_archive

COLUMNS = [
    "name",
    "kind",
    "size",
    "board_size",
    "vs_computer",
    "human_color",
    "level",
    "started",
    "saved",
]


def games_frame(archive_path: Path, root: str = DEFAULT_ROOT) -> pd.DataFrame:
    """One row per record under game/ and game-online/, newest saved first."""
    rows: list[dict] = []
    with open_archive(archive_path) as archive:
        for kind, prefix in (("game", game_prefix(root)), ("online", online_prefix(root))):
            for name, body in iter_records(archive, prefix):
                rows.append({"name": name, "kind": kind, **summarize(body)})

    if not rows:
        return pd.DataFrame(columns=COLUMNS)

    df = pd.DataFrame(rows, columns=COLUMNS)
    # Stable sort keeps archive order among equal timestamps.
    return df.sort_values("saved", ascending=False, kind="stable").reset_index(drop=True)
