"""
Classification orchestrator: one URL in, exactly one outcome out.

    validate -> fetch -> extract -> truncate -> prompt -> oracle -> sanitize

The orchestrator is the only component touching external collaborators (fetcher,
extractor, oracle). Every failure is terminal for the request and is reported as a
single outcome; nothing is retried and no partial classification escapes.
"""

import json
import logging
import re
import uuid
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from opik import track
from pydantic import BaseModel, Field

from application.constants import (
    CLASSIFICATION_KEY,
    ERROR_KEY,
    FAILURE_PREFIX,
    STATUS_OK,
    URL_KEY,
    URL_PATTERN,
    VALIDATION_ERROR_PREFIX,
)
from application.inference import call_oracle
from application.prompting import build_classification_prompt, truncate_content
from domain.errors import (
    ClassifierError,
    ContentUnavailableError,
    OracleBlockedError,
    OracleTransportError,
    ValidationError,
)
from domain.sanitizer import sanitize_observation
from domain.schemas import HistoryEntry, RawObservation
from infrastructure.config.models import RunConfig
from infrastructure.observability.logging import request_log_context
from infrastructure.observability.tracing import update_current_span
from infrastructure.prompting.manager import PromptObj
from infrastructure.providers.base import ProviderAdapter
from infrastructure.web.extractor import extract_text
from infrastructure.web.fetcher import Fetcher

logger = logging.getLogger(__name__)

_URL_RE = re.compile(URL_PATTERN)

Extractor = Callable[[str], str]


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    BLOCKED = "blocked"
    FAILURE = "failure"


class ClassificationOutcome(BaseModel):
    """Terminal result of one classification request."""

    resource_id: str
    url: str
    status: OutcomeStatus
    status_code: int
    classification: Any | None = None
    error: str | None = None
    usage: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    def to_response(self) -> dict[str, Any]:
        """Client-facing body: {"classification": ...} on success, {"error": ...} otherwise."""
        if self.ok:
            return {CLASSIFICATION_KEY: self.classification}
        return {ERROR_KEY: self.error}

    def to_history_entry(self) -> HistoryEntry:
        """History record; failed and blocked requests carry no classification."""
        return HistoryEntry(
            id=self.resource_id,
            url=self.url,
            classification=self.classification if self.ok else None,
        )


def validate_url(url: Any) -> str:
    """
    Return the URL if it is an absolute http(s) URL.

    Raises:
        ValidationError: For a missing, non-string or non-http(s) URL
    """
    if not isinstance(url, str) or not _URL_RE.match(url):
        raise ValidationError("Invalid or missing URL in request body.")
    return url


def parse_classify_request(body: str | bytes | Mapping[str, Any] | None) -> str:
    """
    Parse an inbound {url} request body (JSON text or an already-decoded mapping).

    Raises:
        ValidationError: If the body is not a JSON object or the URL is invalid
    """
    if isinstance(body, str | bytes):
        try:
            body = json.loads(body)
        except ValueError as e:
            raise ValidationError(f"Request body is not valid JSON ({e}).") from e
    if not isinstance(body, Mapping):
        raise ValidationError("Invalid or missing URL in request body.")
    return validate_url(body.get(URL_KEY))


def _failure(resource_id: str, url: str, err: ClassifierError, usage: dict[str, Any]) -> ClassificationOutcome:
    if isinstance(err, OracleBlockedError):
        return ClassificationOutcome(
            resource_id=resource_id,
            url=url,
            status=OutcomeStatus.BLOCKED,
            status_code=err.status_code,
            error=str(err),
            usage=usage,
        )
    prefix = VALIDATION_ERROR_PREFIX if isinstance(err, ValidationError) else FAILURE_PREFIX
    return ClassificationOutcome(
        resource_id=resource_id,
        url=url,
        status=OutcomeStatus.FAILURE,
        status_code=err.status_code,
        error=f"{prefix}: {err}",
        usage=usage,
    )


def _run_pipeline(
    url: str,
    *,
    resource_id: str,
    cfg: RunConfig,
    adapter: ProviderAdapter,
    prompt: PromptObj,
    fetcher: Fetcher,
    extractor: Extractor,
    usage: dict[str, Any],
) -> Any:
    validate_url(url)

    fetched = fetcher.fetch(url)

    text = extractor(fetched.body)
    truncated = truncate_content(text, cfg.max_content_chars)
    if not truncated.strip():
        raise ContentUnavailableError("Could not extract meaningful text content from the URL.")

    prompt_text = build_classification_prompt(prompt, url=url, page_text=truncated)

    reply, call_usage = call_oracle(adapter, prompt_text, resource_id)
    usage.update(call_usage)

    if reply.blocked:
        raise OracleBlockedError(str(reply.block_reason), provider=adapter.display_name)
    if reply.text is None:
        raise OracleTransportError("AI response was missing the expected content.")

    observation = RawObservation(resource_id=resource_id, url=url, raw_oracle_text=reply.text)
    return sanitize_observation(observation)


@track(
    name="classification.url",
    type="general",
    metadata={"task": "url_classification"},
    capture_input=False,
)
def classify_url(
    url: str,
    *,
    cfg: RunConfig,
    adapter: ProviderAdapter,
    prompt: PromptObj,
    fetcher: Fetcher,
    extractor: Extractor = extract_text,
    resource_id: str | None = None,
) -> ClassificationOutcome:
    """
    Classify one URL end-to-end.

    Args:
        url: Target URL (validated here too, so batch rows get the same checks)
        cfg: RunConfig (content budget)
        adapter: Oracle provider adapter
        prompt: Classification prompt template
        fetcher: Origin fetcher
        extractor: Markup -> plain text function
        resource_id: Stable id for the resource; a fresh uuid when omitted

    Returns:
        Exactly one of success(classification), blocked(reason), failure(message)
    """
    resource_id = resource_id or uuid.uuid4().hex
    update_current_span(metadata={"url": url, "resource_id": resource_id})

    usage: dict[str, Any] = {}
    with request_log_context(resource_id):
        try:
            payload = _run_pipeline(
                url,
                resource_id=resource_id,
                cfg=cfg,
                adapter=adapter,
                prompt=prompt,
                fetcher=fetcher,
                extractor=extractor,
                usage=usage,
            )
        except OracleBlockedError as e:
            logger.error("%s", e)
            return _failure(resource_id, url, e, usage)
        except ClassifierError as e:
            logger.error("Classification failed (%s): %s", type(e).__name__, e)
            return _failure(resource_id, url, e, usage)
        logger.info("Classified %s", url)

    return ClassificationOutcome(
        resource_id=resource_id,
        url=url,
        status=OutcomeStatus.SUCCESS,
        status_code=STATUS_OK,
        classification=payload,
        usage=usage,
    )


def handle_classify_request(
    body: str | bytes | Mapping[str, Any] | None,
    *,
    cfg: RunConfig,
    adapter: ProviderAdapter,
    prompt: PromptObj,
    fetcher: Fetcher,
    extractor: Extractor = extract_text,
) -> ClassificationOutcome:
    """Parse an inbound request body and classify its URL; invalid bodies never touch the network."""
    resource_id = uuid.uuid4().hex
    try:
        url = parse_classify_request(body)
    except ValidationError as e:
        logger.warning("Rejected request: %s", e)
        raw_url = body.get(URL_KEY) if isinstance(body, Mapping) else None
        return _failure(resource_id, str(raw_url or ""), e, {})

    return classify_url(
        url,
        cfg=cfg,
        adapter=adapter,
        prompt=prompt,
        fetcher=fetcher,
        extractor=extractor,
        resource_id=resource_id,
    )
