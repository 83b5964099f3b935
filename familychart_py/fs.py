"""Filesystem helper utilities used by the store and the CLI.

Small helpers for JSON dataset read/write and atomic text writes.
"""
from __future__ import annotations
from pathlib import Path
import json
import tempfile
import os
from typing import Any, Optional


def ensure_dir(path: Path) -> None:
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)


def atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """Write text to path atomically using a temp file in the same dir."""
    path = Path(path)
    ensure_dir(path.parent)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            f.write(text)
        os.replace(tmp, str(path))
    finally:
        # replace failed: drop the temp file
        if Path(tmp).exists():
            Path(tmp).unlink()


def json_load(path: Path, default: Optional[Any] = None) -> Any:
    """Load JSON from `path`; `default` when the file does not exist.

    Malformed JSON raises `json.JSONDecodeError` so callers can report it.
    """
    p = Path(path)
    if not p.exists():
        return default
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)


def json_save(path: Path, obj: Any) -> None:
    p = Path(path)
    ensure_dir(p.parent)
    text = json.dumps(obj, ensure_ascii=False, indent=2)
    atomic_write_text(p, text)
