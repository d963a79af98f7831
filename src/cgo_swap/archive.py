"""Backup archive scanning and reconstruction."""
from __future__ import annotations

import shutil
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from cgo_core.errors import ArchiveIOError, NotFoundError
from cgo_core.protocol import SPOOL_MAX_BYTES, STORE_LEVEL
from cgo_core.record import saved_date

# Raised by zipfile for broken structure, bad CRCs, truncated streams,
# unsupported compression methods and encrypted entries.
ZIP_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError)


@contextmanager
def open_archive(path: str | Path) -> Iterator[zipfile.ZipFile]:
    """Open a backup archive read-only, mapping zip failures to ArchiveIOError."""
    try:
        zf = zipfile.ZipFile(path, "r")
    except ZIP_ERRORS as exc:
        raise ArchiveIOError(f"cannot open archive {path}: {exc}") from exc

    with zf:
        try:
            yield zf
        except ZIP_ERRORS as exc:
            raise ArchiveIOError(f"cannot read archive {path}: {exc}") from exc


def iter_records(archive: zipfile.ZipFile, prefix: str) -> Iterator[tuple[str, bytearray]]:
    """Yield (name, payload) for every file entry under `prefix`, in stored order."""
    for info in archive.infolist():
        if not info.filename.startswith(prefix):
            continue
        if info.is_dir():
            continue
        yield info.filename, bytearray(archive.read(info))


def scan_latest(archive: zipfile.ZipFile, prefix: str) -> tuple[str, bytearray]:
    """Return the entry under `prefix` with the greatest saved timestamp.

    Ties keep the first entry in archive order. Corrupt records are not
    skipped: a FormatError means a wrong prefix or a malformed backup.
    """
    latest: str | None = None
    latest_body = bytearray()
    latest_date: int | None = None

    for name, body in iter_records(archive, prefix):
        date = saved_date(body)
        if latest_date is None or date > latest_date:
            latest = name
            latest_body = body
            latest_date = date

    if latest is None:
        raise NotFoundError(f"no saved game under {prefix!r}")
    return latest, latest_body


def read_latest(path: str | Path, prefix: str) -> tuple[str, bytearray]:
    with open_archive(path) as archive:
        return scan_latest(archive, prefix)


def _entry_info(src: zipfile.ZipInfo) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(src.filename, date_time=src.date_time)
    info.external_attr = src.external_attr
    info.compress_type = zipfile.ZIP_DEFLATED
    return info


def rewrite_archive(
    reference: str | Path,
    substitute_name: str,
    payload: bytes,
    sink: BinaryIO,
) -> int:
    """Copy `reference` into `sink`, replacing one entry's payload.

    Every entry, copied or substituted, is written deflate-tagged at level 0
    (stored blocks). The new archive is staged and finalized before anything
    reaches `sink`, so a failure leaves `sink` untouched.
    Returns the number of entries written.
    """
    count = 0
    with open_archive(reference) as zin, tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_BYTES) as spool:
        infos = zin.infolist()
        if substitute_name not in {info.filename for info in infos}:
            raise NotFoundError(f"entry {substitute_name!r} not in {reference}")

        with zipfile.ZipFile(
            spool,
            "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=STORE_LEVEL,
        ) as zout:
            for src in infos:
                if src.filename == substitute_name:
                    data = bytes(payload)
                elif src.is_dir():
                    data = b""
                else:
                    data = zin.read(src)
                zout.writestr(
                    _entry_info(src),
                    data,
                    compress_type=zipfile.ZIP_DEFLATED,
                    compresslevel=STORE_LEVEL,
                )
                count += 1

        spool.seek(0)
        shutil.copyfileobj(spool, sink)

    return count
