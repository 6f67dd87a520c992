"""I/O utilities: filesystem operations, URL tables and history persistence."""

from infrastructure.io.datasets import extract_url_rows, read_table
from infrastructure.io.fs import ensure_exists, read_text, write_json
from infrastructure.io.history import append_history, load_history, save_history

__all__ = [
    "ensure_exists",
    "read_text",
    "write_json",
    "read_table",
    "extract_url_rows",
    "load_history",
    "save_history",
    "append_history",
]
