import json

import pytest

from domain.errors import SanitizeError
from domain.sanitizer import sanitize_observation, sanitize_oracle_text
from domain.schemas import RawObservation

PAYLOAD = {
    "classification": {
        "url_type": "Blog",
        "content_format": "HTML",
        "content_type_hierarchy": ["Text", "Blog Post", "Technology"],
        "primary_language": "English",
    },
    "confidence": "High",
    "keywords": ["python", "testing", "json"],
}


@pytest.mark.parametrize("obj", [PAYLOAD, [1, 2, 3], "text", 42, 3.5, True, None, {"nested": {"a": [None]}}])
def test_fenced_compact_serialization_parses_back(obj) -> None:
    raw = "```json" + json.dumps(obj, separators=(",", ":")) + "```"
    assert sanitize_oracle_text(raw) == obj


def test_bare_json_without_fences() -> None:
    assert sanitize_oracle_text(json.dumps(PAYLOAD)) == PAYLOAD


def test_fenced_block_with_surrounding_prose() -> None:
    raw = "Here is the classification:\n\n```json\n" + json.dumps(PAYLOAD, indent=2) + "\n```\nLet me know!"
    assert sanitize_oracle_text(raw) == PAYLOAD


def test_uppercase_fence_and_whitespace_padding() -> None:
    raw = "  \n```JSON\n  {\"a\": 1}  \n```  \n"
    assert sanitize_oracle_text(raw) == {"a": 1}


def test_fence_marker_inside_payload_string() -> None:
    obj = {"note": "use ``` for code"}
    raw = "```json" + json.dumps(obj) + "```"
    assert sanitize_oracle_text(raw) == obj


def test_unterminated_fence_uses_rest_of_text() -> None:
    assert sanitize_oracle_text('```json\n{"a": 1}\n') == {"a": 1}


def test_falls_back_to_whole_text_when_fenced_content_is_invalid() -> None:
    # The "fence" sits inside a string value, so the fenced candidate is garbage
    raw = '{"snippet": "```json not json```", "ok": true}'
    assert sanitize_oracle_text(raw) == {"snippet": "```json not json```", "ok": True}


def test_prose_raises_sanitize_error() -> None:
    with pytest.raises(SanitizeError):
        sanitize_oracle_text("Sorry, I can't classify this.")


def test_error_carries_bounded_excerpt() -> None:
    raw = "x" * 1000
    with pytest.raises(SanitizeError) as exc_info:
        sanitize_oracle_text(raw)
    assert exc_info.value.excerpt == "x" * 200
    assert exc_info.value.status_code == 500


@pytest.mark.parametrize("raw", ["NaN", '{"a": Infinity}', "```json\n[-Infinity]\n```"])
def test_non_standard_constants_are_rejected(raw: str) -> None:
    with pytest.raises(SanitizeError):
        sanitize_oracle_text(raw)


@pytest.mark.parametrize("raw", ["", "   ", "```json\n```", "{'single': 'quotes'}", "{a: 1}"])
def test_relaxed_or_empty_input_is_rejected(raw: str) -> None:
    with pytest.raises(SanitizeError):
        sanitize_oracle_text(raw)


def test_valid_json_with_unexpected_shape_is_returned_as_is() -> None:
    assert sanitize_oracle_text('["not", "a", "classification"]') == ["not", "a", "classification"]


def test_sanitize_observation_uses_raw_text() -> None:
    obs = RawObservation(resource_id="r1", url="https://example.com", raw_oracle_text='```json\n{"a": 1}\n```')
    assert sanitize_observation(obs) == {"a": 1}


@pytest.mark.parametrize(
    "obj",
    [{"note": "x```1```"}, ["```", 1, "```"], {"code": "```json\n{}\n```"}, {"a": "```", "b": ["```json", "```"]}],
)
def test_backticks_inside_bare_json_strings_are_not_fences(obj) -> None:
    assert sanitize_oracle_text(json.dumps(obj)) == obj
    assert sanitize_oracle_text(json.dumps(obj, indent=2)) == obj


def test_literal_reply_with_backtick_strings() -> None:
    assert sanitize_oracle_text('{"note": "x```1```"}') == {"note": "x```1```"}
    assert sanitize_oracle_text('["```",1,"```"]') == ["```", 1, "```"]
