"""Dataset loading utilities (batch URL tables)."""

import logging
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)


def read_table(path: Path) -> pd.DataFrame:
    """
    Read tabular data file (Excel or CSV) based on file extension.

    Supported formats:
    - Excel: .xlsx, .xls
    - CSV: .csv

    Raises:
        ValueError: If file format is not supported
        FileNotFoundError: If file does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in [".xlsx", ".xls"]:
        return pd.read_excel(path)
    elif suffix == ".csv":
        return pd.read_csv(path)
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Supported formats: .xlsx, .xls, .csv")


def extract_url_rows(df: pd.DataFrame, url_col: str, id_col: str | None = None) -> list[tuple[str | None, str]]:
    """
    Pull (resource_id, url) pairs from a URL table, in row order.

    Blank URL cells are dropped. `resource_id` is None when no id column is configured
    or the cell is empty; the orchestrator then assigns a fresh id.

    Raises:
        KeyError: If the configured URL column is missing
    """
    if url_col not in df.columns:
        raise KeyError(f"Configured url_col='{url_col}' not found in input columns: {list(df.columns)}")

    if id_col is not None and id_col not in df.columns:
        logger.warning("Configured id_col='%s' not found; generating ids instead.", id_col)
        id_col = None

    rows: list[tuple[str | None, str]] = []
    skipped = 0
    for _, row in df.iterrows():
        raw_url = row[url_col]
        url = "" if pd.isna(raw_url) else str(raw_url).strip()
        if not url:
            skipped += 1
            continue
        resource_id: str | None = None
        if id_col is not None and not pd.isna(row[id_col]):
            resource_id = str(row[id_col]).strip() or None
        rows.append((resource_id, url))

    if skipped:
        logger.info("Skipped %d rows with an empty '%s' cell", skipped, url_col)
    return rows
