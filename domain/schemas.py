"""Pydantic models for oracle observations, classifications and history."""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.taxonomy.normalizer import (
    UNKNOWN_CATEGORY,
    UNKNOWN_FORMAT,
    UNKNOWN_LANGUAGE,
    UNKNOWN_TYPE,
    branch_key,
    clean_label,
)

Confidence = Literal["High", "Medium", "Low"]

DEFAULT_CONFIDENCE: Confidence = "Low"
MIN_KEYWORDS = 3
MAX_KEYWORDS = 15

_CONFIDENCE_BY_KEY: dict[str, Confidence] = {"high": "High", "medium": "Medium", "low": "Low"}


class RawObservation(BaseModel):
    """Raw oracle reply for one request; consumed by the sanitizer, then discarded."""

    resource_id: str
    url: str
    raw_oracle_text: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def _flatten_payload(payload: Any) -> dict[str, Any]:
    """Merge the prompt's nested {"classification": {...}} block with top-level fields."""
    if not isinstance(payload, Mapping):
        return {}
    flat = {k: v for k, v in payload.items() if k != "classification"}
    nested = payload.get("classification")
    if isinstance(nested, Mapping):
        flat.update(nested)
    return flat


def _clean_hierarchy(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list | tuple) or not value:
        return (UNKNOWN_CATEGORY,)
    return tuple(clean_label(v, UNKNOWN_CATEGORY) for v in value)


def _clean_confidence(value: Any) -> Confidence:
    if value is None:
        return DEFAULT_CONFIDENCE
    return _CONFIDENCE_BY_KEY.get(str(value).strip().lower(), DEFAULT_CONFIDENCE)


def _clean_keywords(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list | tuple):
        return ()
    seen: set[str] = set()
    out: list[str] = []
    for raw in value:
        if raw is None:
            continue
        kw = str(raw).strip()
        if not kw or branch_key(kw) in seen:
            continue
        seen.add(branch_key(kw))
        out.append(kw)
    return tuple(out[:MAX_KEYWORDS])


class Classification(BaseModel):
    """Validated, immutable classification of one web resource."""

    model_config = ConfigDict(frozen=True)

    url_type: str = UNKNOWN_TYPE
    content_format: str = UNKNOWN_FORMAT
    content_type_hierarchy: tuple[str, ...] = Field(default=(UNKNOWN_CATEGORY,), min_length=1)
    primary_language: str = UNKNOWN_LANGUAGE
    confidence: Confidence = DEFAULT_CONFIDENCE
    keywords: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> "Classification":
        """
        Build a Classification from a sanitized oracle payload.

        The payload is untrusted: every missing, blank or wrongly-typed field is
        replaced by its sentinel instead of being rejected.

        Examples:
            >>> Classification.from_payload({"url_type": " Blog "}).url_type
            'Blog'
            >>> Classification.from_payload(None).content_type_hierarchy
            ('Unknown Category',)
        """
        data = _flatten_payload(payload)
        return cls(
            url_type=clean_label(data.get("url_type"), UNKNOWN_TYPE),
            content_format=clean_label(data.get("content_format"), UNKNOWN_FORMAT),
            content_type_hierarchy=_clean_hierarchy(data.get("content_type_hierarchy")),
            primary_language=clean_label(data.get("primary_language"), UNKNOWN_LANGUAGE),
            confidence=_clean_confidence(data.get("confidence")),
            keywords=_clean_keywords(data.get("keywords")),
        )

    @property
    def has_enough_keywords(self) -> bool:
        return len(self.keywords) >= MIN_KEYWORDS


class ResourceRef(BaseModel):
    """Leaf-set member: a reference to one classified resource."""

    model_config = ConfigDict(frozen=True)

    id: str
    url: str


class HistoryEntry(BaseModel):
    """
    One analysed resource.

    `classification` holds the sanitized oracle payload as returned by the sanitizer;
    None marks a failed or skipped analysis and is excluded from aggregation.
    """

    id: str
    url: str
    classification: Any | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        # Ids written by older clients may be numeric timestamps
        return str(v) if isinstance(v, int) else v

    def to_classification(self) -> Classification | None:
        if self.classification is None:
            return None
        return Classification.from_payload(self.classification)
