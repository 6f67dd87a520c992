import pytest

from domain.errors import TreeConflictError
from domain.schemas import HistoryEntry
from domain.taxonomy.tree import LeafNode, build_url_tree


def _entry(id_: str, url: str, url_type="Blog", fmt="HTML", hierarchy=("Text", "Article")) -> HistoryEntry:
    return HistoryEntry(
        id=id_,
        url=url,
        classification={
            "classification": {
                "url_type": url_type,
                "content_format": fmt,
                "content_type_hierarchy": list(hierarchy) if hierarchy is not None else None,
            },
            "confidence": "High",
            "keywords": ["a", "b", "c"],
        },
    )


def test_empty_history_gives_empty_tree() -> None:
    tree = build_url_tree([])
    assert tree.is_empty()
    assert tree.to_dict() == {}


def test_entries_without_classification_are_skipped() -> None:
    tree = build_url_tree([HistoryEntry(id="1", url="https://a.example", classification=None)])
    assert tree.is_empty()


def test_html_format_is_flattened() -> None:
    tree = build_url_tree([_entry("1", "https://a.example/post")])
    assert tree.to_dict() == {"Blog": {"Text": {"Article": [{"id": "1", "url": "https://a.example/post"}]}}}


def test_html_flattening_ignores_case_and_whitespace() -> None:
    tree = build_url_tree([_entry("1", "https://a.example", fmt="  html ")])
    assert "Text" in tree.to_dict()["Blog"]


def test_non_html_format_gets_its_own_level() -> None:
    tree = build_url_tree([_entry("1", "https://a.example/paper.pdf", url_type="Academic Paper", fmt="PDF")])
    assert tree.to_dict() == {
        "Academic Paper": {"PDF": {"Text": {"Article": [{"id": "1", "url": "https://a.example/paper.pdf"}]}}}
    }


def test_branch_labels_merge_and_keep_first_casing() -> None:
    tree = build_url_tree(
        [
            _entry("1", "https://a.example", url_type="Blog", hierarchy=("Text", "Tutorial")),
            _entry("2", "https://b.example", url_type=" blog ", hierarchy=("TEXT", "tutorial ")),
        ]
    )
    assert tree.to_dict() == {
        "Blog": {
            "Text": {
                "Tutorial": [
                    {"id": "1", "url": "https://a.example"},
                    {"id": "2", "url": "https://b.example"},
                ]
            }
        }
    }


def test_duplicate_ids_in_one_leaf_keep_first_url() -> None:
    tree = build_url_tree([_entry("1", "https://first.example"), _entry("1", "https://second.example")])
    assert tree.to_dict()["Blog"]["Text"]["Article"] == [{"id": "1", "url": "https://first.example"}]


def test_same_id_may_appear_in_different_leaves() -> None:
    tree = build_url_tree([_entry("1", "https://a.example"), _entry("1", "https://a.example", hierarchy=("Video",))])
    assert tree.count_resources() == 2


def test_missing_fields_use_sentinel_labels() -> None:
    entry = HistoryEntry(id="1", url="https://a.example", classification={"content_type_hierarchy": []})
    tree = build_url_tree([entry])
    assert tree.to_dict() == {
        "Unknown Type": {"Unknown Format": {"Unknown Category": [{"id": "1", "url": "https://a.example"}]}}
    }


def test_non_object_payload_degrades_to_sentinels() -> None:
    tree = build_url_tree([HistoryEntry(id="1", url="https://a.example", classification=["not", "an", "object"])])
    assert list(tree.to_dict()) == ["Unknown Type"]


def test_blank_hierarchy_element_becomes_unknown_category() -> None:
    tree = build_url_tree([_entry("1", "https://a.example", hierarchy=("Text", "  "))])
    assert tree.to_dict()["Blog"]["Text"] == {"Unknown Category": [{"id": "1", "url": "https://a.example"}]}


def test_rebuilding_from_same_history_gives_same_tree() -> None:
    history = [
        _entry("1", "https://a.example"),
        _entry("2", "https://b.example", fmt="PDF"),
        _entry("1", "https://a.example"),
    ]
    assert build_url_tree(history).to_dict() == build_url_tree(history).to_dict()
    assert build_url_tree(history).to_dict() == build_url_tree(history + history).to_dict()


def test_leaf_versus_branch_conflict_raises() -> None:
    history = [
        _entry("1", "https://a.example", hierarchy=("Text",)),
        _entry("2", "https://b.example", hierarchy=("text", "Article")),
    ]
    with pytest.raises(TreeConflictError) as exc_info:
        build_url_tree(history)
    assert exc_info.value.path == ["Blog", "Text"]
    assert exc_info.value.existing == "leaf"
    assert exc_info.value.requested == "internal"


def test_iter_leaves_is_depth_first_in_insertion_order() -> None:
    tree = build_url_tree(
        [
            _entry("1", "https://a.example", hierarchy=("Text", "Article")),
            _entry("2", "https://b.example", url_type="News Site", hierarchy=("Text", "Report")),
            _entry("3", "https://c.example", hierarchy=("Video",)),
        ]
    )
    paths = [path for path, _ in tree.iter_leaves()]
    assert paths == [("Blog", "Text", "Article"), ("Blog", "Video"), ("News Site", "Text", "Report")]
    assert all(isinstance(leaf, LeafNode) for _, leaf in tree.iter_leaves())
    assert tree.count_resources() == 3
    assert len(tree) == 2
