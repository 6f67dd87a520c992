"""
Sanitize untrusted oracle text into a parsed JSON payload.

The oracle is asked for bare JSON but routinely wraps it in a ```json fenced block,
sometimes with prose around it. Decoding is an explicit fallback chain:

1. fenced block present -> decode its inner content (trimmed)
2. otherwise, or if (1) fails -> decode the whole trimmed text
3. nothing decodes -> SanitizeError

Only strict JSON is accepted. Schema conformance is NOT checked here; consumers
apply sentinel defaults (see Classification.from_payload).
"""

import json
import logging
import re
from collections.abc import Callable, Iterator
from typing import Any

from domain.errors import SanitizeError
from domain.schemas import RawObservation

logger = logging.getLogger(__name__)

# Fence markers only count at a line boundary: an opening ``` (optionally tagged json)
# starts a line, a closing ``` ends one. Backticks inside JSON strings never match.
_FENCE_OPEN = re.compile(r"^[ \t]*```[ \t]*(?:json)?[ \t]*", re.IGNORECASE | re.MULTILINE)
_FENCE_CLOSE = re.compile(r"```[ \t]*(?=\r?\n|\Z)")


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN/Infinity by default; strict JSON does not
    raise ValueError(f"Non-standard JSON constant: {name}")


def decode_strict_json(text: str) -> Any:
    """Decode `text` under strict JSON grammar (raises ValueError on failure)."""
    return json.loads(text, parse_constant=_reject_constant)


def _fenced_candidates(text: str) -> Iterator[str]:
    """
    Yield the inner content of the fenced block, trimmed.

    The first block (up to the nearest closing fence) is tried first; if the payload
    itself contains a fence marker, the span up to the last closing fence is tried
    next. An unterminated fence yields everything after the opening marker.
    """
    m = _FENCE_OPEN.search(text)
    if m is None:
        return
    body = text[m.end() :]
    closes = [c.start() for c in _FENCE_CLOSE.finditer(body)]
    if not closes:
        yield body.strip()
        return
    first_close = closes[0]
    yield body[:first_close].strip()
    last_close = closes[-1]
    if last_close != first_close:
        yield body[:last_close].strip()


def _whole_text_candidates(text: str) -> Iterator[str]:
    yield text.strip()


# Ordered extraction strategies; the first candidate that decodes wins.
EXTRACTION_CHAIN: tuple[tuple[str, Callable[[str], Iterator[str]]], ...] = (
    ("fenced", _fenced_candidates),
    ("whole_text", _whole_text_candidates),
)


def sanitize_oracle_text(raw_text: str) -> Any:
    """
    Parse raw oracle text into a JSON value.

    Args:
        raw_text: Untrusted text returned by the oracle

    Returns:
        The decoded JSON value, unchanged (any JSON type)

    Raises:
        SanitizeError: If no extraction strategy yields valid JSON; carries a
            200-character excerpt of the original text
    """
    text = raw_text if isinstance(raw_text, str) else ""

    for strategy, extract in EXTRACTION_CHAIN:
        for candidate in extract(text):
            if not candidate:
                continue
            try:
                parsed = decode_strict_json(candidate)
            except (ValueError, RecursionError) as e:
                logger.debug("Sanitizer strategy '%s' failed: %s", strategy, e)
                continue
            logger.debug("Sanitizer strategy '%s' decoded %s", strategy, type(parsed).__name__)
            return parsed

    logger.error("Failed to parse JSON from oracle response. Raw text:\n%s", text)
    raise SanitizeError(text)


def sanitize_observation(observation: RawObservation) -> Any:
    """Sanitize the oracle text carried by a RawObservation."""
    return sanitize_oracle_text(observation.raw_oracle_text)
