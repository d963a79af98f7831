import sys
import zipfile
from pathlib import Path

def main():
    if len(sys.argv) != 3:
        print("Usage: truncate_game.py <archive> <entry>")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    name = sys.argv[2]

    with zipfile.ZipFile(p) as zf:
        entries = [(info, zf.read(info)) for info in zf.infolist()]
    if name not in {info.filename for info, _ in entries}:
        print(f"No entry {name} in {p}")
        raise SystemExit(2)

    # Cut the record inside its saved timestamp (offset 60) so readers must reject it.
    keep = 32
    with zipfile.ZipFile(p, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for info, data in entries:
            zf.writestr(info, data[:keep] if info.filename == name else data)
    print(f"Truncated {name} to {keep} bytes in {p}")

if __name__ == "__main__":
    main()
