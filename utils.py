import re
from pathlib import Path


def safe_png_filename(name: str) -> str:
    """
    Convert a crew name into a safe PNG filename.
    - Uses only letters/numbers/spaces/_/-
    - Collapses whitespace to underscores
    - Falls back to 'crew.png'
    """
    raw = "" if name is None else str(name)
    safe = re.sub(r"[^A-Za-z0-9 _-]+", "", raw).strip()
    safe = re.sub(r"\s+", "_", safe)
    if not safe:
        safe = "crew"
    return f"{safe}.png"


def next_free_filename(directory, filename: str) -> Path:
    """Return directory/filename, or directory/stem_1.ext, stem_2.ext ... if taken."""
    d = Path(directory)
    candidate = d / filename
    stem, suffix = candidate.stem, candidate.suffix
    n = 1
    while candidate.exists():
        candidate = d / f"{stem}_{n}{suffix}"
        n += 1
    return candidate
