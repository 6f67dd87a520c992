"""History persistence: a JSON list of HistoryEntry objects."""

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter

from domain.schemas import HistoryEntry
from infrastructure.io.fs import write_json

logger = logging.getLogger(__name__)

_HISTORY_ADAPTER = TypeAdapter(list[HistoryEntry])


def load_history(path: Path) -> list[HistoryEntry]:
    """
    Load history entries from `path`; a missing file is an empty history.

    Raises:
        ValueError: If the file is not a JSON list of history entries
    """
    if not path.exists():
        logger.debug("History file %s does not exist yet; starting empty", path)
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8") or "[]")
    except json.JSONDecodeError as e:
        raise ValueError(f"History file is not valid JSON: {path}") from e
    return _HISTORY_ADAPTER.validate_python(data)


def save_history(path: Path, entries: Iterable[HistoryEntry]) -> Path:
    """Write the full history to `path` (atomic replace)."""
    return write_json(path, [e.model_dump(mode="json") for e in entries])


def append_history(path: Path, new_entries: Iterable[HistoryEntry]) -> list[HistoryEntry]:
    """
    Append entries to the history file and return the full, updated history.

    Callers running concurrently must serialize access to the file themselves.
    """
    entries = load_history(path)
    added = list(new_entries)
    entries.extend(added)
    save_history(path, entries)
    logger.info("Appended %d entries to %s (total=%d)", len(added), path, len(entries))
    return entries
