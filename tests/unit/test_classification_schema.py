from domain.schemas import Classification, HistoryEntry


def test_nested_prompt_shape_is_flattened() -> None:
    payload = {
        "classification": {
            "url_type": "News Site",
            "content_format": "HTML",
            "content_type_hierarchy": ["Text", "News Article", "Politics"],
            "primary_language": "English",
        },
        "confidence": "High",
        "keywords": ["election", "vote", "results"],
    }
    c = Classification.from_payload(payload)
    assert c.url_type == "News Site"
    assert c.content_type_hierarchy == ("Text", "News Article", "Politics")
    assert c.confidence == "High"
    assert c.has_enough_keywords


def test_flat_shape_is_accepted() -> None:
    c = Classification.from_payload({"url_type": "Blog", "content_format": "PDF", "content_type_hierarchy": ["Text"]})
    assert (c.url_type, c.content_format, c.content_type_hierarchy) == ("Blog", "PDF", ("Text",))


def test_nested_fields_win_over_top_level() -> None:
    c = Classification.from_payload({"url_type": "Flat", "classification": {"url_type": "Nested"}})
    assert c.url_type == "Nested"


def test_missing_and_blank_fields_get_sentinels() -> None:
    c = Classification.from_payload({"url_type": "   ", "content_format": None, "primary_language": ""})
    assert c.url_type == "Unknown Type"
    assert c.content_format == "Unknown Format"
    assert c.content_type_hierarchy == ("Unknown Category",)
    assert c.primary_language == "Undetermined"


def test_wrongly_typed_fields_degrade() -> None:
    c = Classification.from_payload(
        {"url_type": {"x": 1}, "content_type_hierarchy": "Text", "keywords": "python", "confidence": 7}
    )
    assert c.url_type == "Unknown Type"
    assert c.content_type_hierarchy == ("Unknown Category",)
    assert c.keywords == ()
    assert c.confidence == "Low"


def test_confidence_is_normalized() -> None:
    assert Classification.from_payload({"confidence": " medium "}).confidence == "Medium"
    assert Classification.from_payload({"confidence": "very high"}).confidence == "Low"


def test_keywords_are_trimmed_deduplicated_and_capped() -> None:
    raw = [" Python ", "python", "", None] + [f"kw{i}" for i in range(20)]
    c = Classification.from_payload({"keywords": raw})
    assert c.keywords[0] == "Python"
    assert "python" not in c.keywords
    assert len(c.keywords) == 15


def test_few_keywords_are_tolerated() -> None:
    c = Classification.from_payload({"keywords": ["one"]})
    assert c.keywords == ("one",)
    assert not c.has_enough_keywords


def test_history_entry_coerces_numeric_ids() -> None:
    entry = HistoryEntry.model_validate({"id": 1718000000000, "url": "https://a.example", "classification": None})
    assert entry.id == "1718000000000"
    assert entry.to_classification() is None
