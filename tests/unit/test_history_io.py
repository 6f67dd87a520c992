import pandas as pd
import pytest

from domain.schemas import HistoryEntry
from infrastructure.io.datasets import extract_url_rows
from infrastructure.io.history import append_history, load_history, save_history


def test_missing_history_file_is_empty(tmp_path) -> None:
    assert load_history(tmp_path / "history.json") == []


def test_append_accumulates_entries(tmp_path) -> None:
    path = tmp_path / "out" / "history.json"
    append_history(path, [HistoryEntry(id="1", url="https://a.example", classification={"url_type": "Blog"})])
    entries = append_history(path, [HistoryEntry(id="2", url="https://b.example")])

    assert [e.id for e in entries] == ["1", "2"]
    assert load_history(path) == entries
    assert not list(path.parent.glob("*.tmp"))


def test_numeric_ids_from_disk_are_strings(tmp_path) -> None:
    path = tmp_path / "history.json"
    path.write_text('[{"id": 1718000000000, "url": "https://a.example", "classification": null}]', encoding="utf-8")
    assert load_history(path)[0].id == "1718000000000"


def test_invalid_history_file_raises(tmp_path) -> None:
    path = tmp_path / "history.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="not valid JSON"):
        load_history(path)


def test_save_history_overwrites(tmp_path) -> None:
    path = tmp_path / "history.json"
    save_history(path, [HistoryEntry(id="1", url="https://a.example")])
    save_history(path, [])
    assert load_history(path) == []


def test_extract_url_rows_skips_blank_urls() -> None:
    df = pd.DataFrame({"id": ["a", None, "c"], "url": [" https://a.example ", None, "https://c.example"]})
    assert extract_url_rows(df, "url", "id") == [("a", "https://a.example"), ("c", "https://c.example")]


def test_extract_url_rows_without_id_column() -> None:
    df = pd.DataFrame({"link": ["https://a.example"]})
    assert extract_url_rows(df, "link", "missing") == [(None, "https://a.example")]
    with pytest.raises(KeyError):
        extract_url_rows(df, "url")
