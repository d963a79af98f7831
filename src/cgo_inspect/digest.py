import hashlib
import zipfile

def entry_hash(name: str, content: bytes) -> str:
    h = hashlib.sha256()
    h.update(name.encode("utf-8"))
    h.update(b"\x00")
    h.update(content)
    return h.hexdigest()

def entry_digests(zf: zipfile.ZipFile) -> dict[str, str]:
    return {info.filename: entry_hash(info.filename, zf.read(info)) for info in zf.infolist()}

def looks_stored_deflate(info: zipfile.ZipInfo) -> bool:
    # Level 0 deflate emits stored blocks, so it never shrinks the payload.
    return info.compress_type == zipfile.ZIP_DEFLATED and info.compress_size >= info.file_size
