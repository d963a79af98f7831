import zipfile
from pathlib import Path
from cgo_core.errors import FormatError
from cgo_core.record import saved_date
from cgo_swap.archive import ZIP_ERRORS
from .const import ERRORS
from .digest import entry_digests, entry_hash, looks_stored_deflate

def _fail(errors: list) -> dict:
    return {"status":"FAIL","error_count":len(errors),"errors":errors}

def _error(code: str, **extra) -> dict:
    return {"code":code,"message":ERRORS[code],**extra}

def verify_swap(reference: Path, output: Path, target: str | None = None) -> dict:
    for p in [reference, output]:
        if not Path(p).exists():
            return _fail([_error("E_ARCHIVE_MISSING", path=str(p))])

    try:
        with zipfile.ZipFile(reference) as zref, zipfile.ZipFile(output) as zout:
            ref_names = [i.filename for i in zref.infolist()]
            out_infos = zout.infolist()
            out_names = [i.filename for i in out_infos]

            if set(ref_names) != set(out_names):
                return _fail([_error(
                    "E_ENTRY_SET",
                    added=sorted(set(out_names) - set(ref_names)),
                    dropped=sorted(set(ref_names) - set(out_names)),
                )])
            if ref_names != out_names:
                return _fail([_error("E_ENTRY_ORDER")])

            ref_digests = entry_digests(zref)
            out_digests = entry_digests(zout)
            changed = [n for n in ref_names if ref_digests[n] != out_digests[n]]

            if target is not None:
                stray = [n for n in changed if n != target]
                if stray:
                    return _fail([_error("E_PAYLOAD_MISMATCH", entries=stray)])
                if target not in changed:
                    return _fail([_error("E_SUBSTITUTION", expected=target, changed=changed)])
            elif len(changed) != 1:
                return _fail([_error("E_SUBSTITUTION", changed=changed)])
            substituted = changed[0]

            for info in out_infos:
                if not looks_stored_deflate(info):
                    return _fail([_error(
                        "E_COMPRESSION",
                        entry=info.filename,
                        compress_type=info.compress_type,
                        compress_size=info.compress_size,
                        file_size=info.file_size,
                    )])

            payload = zout.read(substituted)
    except ZIP_ERRORS as e:
        return _fail([_error("E_ARCHIVE_INVALID", detail=str(e))])

    try:
        saved = saved_date(payload)
    except FormatError as e:
        return _fail([_error("E_RECORD_FORMAT", entry=substituted, detail=str(e))])

    return {
        "status":"PASS",
        "error_count":0,
        "errors":[],
        "substituted":substituted,
        "saved":saved,
        "payload_sha256":entry_hash(substituted, payload),
    }
