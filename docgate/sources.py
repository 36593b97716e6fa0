"""Tracked sources on disk: the URL list and the backup copies of uploaded files."""

import re
import time
from pathlib import Path
from typing import List, Optional

_UNSAFE_CHARS = re.compile(r"[^\w.\-]")


def read_urls(path: Path) -> List[str]:
    path = Path(path)
    if not path.exists():
        return []
    lines = (line.strip() for line in path.read_text(encoding="utf-8").splitlines())
    return [line for line in lines if line and not line.startswith("#")]


def add_url(path: Path, url: str) -> bool:
    """Append url to the tracked list; returns False when it is already tracked."""
    path = Path(path)
    if url in read_urls(path):
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    existing = path.read_text(encoding="utf-8") if path.exists() else ""
    prefix = "" if not existing or existing.endswith("\n") else "\n"
    with path.open("a", encoding="utf-8") as f:
        f.write(f"{prefix}{url}\n")
    return True


def safe_filename(name: str, now: Optional[float] = None) -> str:
    millis = int((time.time() if now is None else now) * 1000)
    base = Path(name).name or "upload"
    return f"{millis}-{_UNSAFE_CHARS.sub('_', base)}"


def save_upload(files_dir: Path, name: str, data: bytes) -> str:
    files_dir = Path(files_dir)
    files_dir.mkdir(parents=True, exist_ok=True)
    stored_name = safe_filename(name)
    (files_dir / stored_name).write_bytes(data)
    return stored_name


def list_files(files_dir: Path) -> List[Path]:
    files_dir = Path(files_dir)
    if not files_dir.is_dir():
        return []
    return sorted(p for p in files_dir.iterdir() if p.is_file())
