"""Filesystem utility functions."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def ensure_exists(path: Path, what: str) -> None:
    """
    Check that a path exists, raise FileNotFoundError if not.

    Args:
        path: Path to check
        what: Description of what this path represents (for error message)

    Raises:
        FileNotFoundError: If path does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Missing {what} at: {path}")


def read_text(path: Path) -> str:
    """Read a UTF-8 text file with leading/trailing whitespace removed."""
    return path.read_text(encoding="utf-8").strip()


def write_json(path: Path, data: Any) -> Path:
    """
    Write `data` as pretty-printed UTF-8 JSON, replacing the file atomically.

    The temp file lives next to the target so the final rename never crosses
    filesystems; readers see either the old or the new content.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2, default=str)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path
