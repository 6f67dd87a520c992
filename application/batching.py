"""Batch classification of a URL table."""

import logging
from collections import Counter
from collections.abc import Sequence
from typing import Any

from opik import track

from application.classify import ClassificationOutcome, Extractor, classify_url
from infrastructure.config.models import RunConfig
from infrastructure.observability.tracing import update_current_span
from infrastructure.prompting.manager import PromptObj
from infrastructure.providers.base import ProviderAdapter
from infrastructure.web.extractor import extract_text
from infrastructure.web.fetcher import Fetcher

logger = logging.getLogger(__name__)


@track(type="general", capture_input=False, capture_output=False)
def run_batch(
    rows: Sequence[tuple[str | None, str]],
    *,
    cfg: RunConfig,
    adapter: ProviderAdapter,
    prompt: PromptObj,
    fetcher: Fetcher,
    extractor: Extractor = extract_text,
) -> tuple[list[ClassificationOutcome], dict[str, int | float]]:
    """
    Classify every (resource_id, url) row in order, one independent request each.

    A failing row never stops the batch; it yields a failure outcome instead.

    Returns:
        Tuple of (outcomes in row order, usage/outcome statistics)
    """
    update_current_span(
        name=f"classification.batch.{cfg.provider.value}_{cfg.model}",
        metadata={"provider": cfg.provider, "model": cfg.model, "total_urls": len(rows)},
    )
    logger.info("Total URLs: %d", len(rows))

    outcomes: list[ClassificationOutcome] = []
    status_counts: Counter[str] = Counter()
    total_input_tokens = 0
    total_output_tokens = 0
    total_tokens = 0
    total_cost = 0.0

    for n, (resource_id, url) in enumerate(rows, start=1):
        logger.info("Processing URL %d of %d: %s", n, len(rows), url)
        outcome = classify_url(
            url,
            cfg=cfg,
            adapter=adapter,
            prompt=prompt,
            fetcher=fetcher,
            extractor=extractor,
            resource_id=resource_id,
        )
        outcomes.append(outcome)
        status_counts[outcome.status.value] += 1

        usage: dict[str, Any] = outcome.usage
        total_input_tokens += int(usage.get("input_tokens", 0))
        total_output_tokens += int(usage.get("output_tokens", 0))
        total_tokens += int(usage.get("total_tokens", 0))
        total_cost += float(usage.get("total_cost", 0.0))

    logger.info(
        "All URLs processed: success=%d, blocked=%d, failure=%d",
        status_counts["success"],
        status_counts["blocked"],
        status_counts["failure"],
    )
    logger.info(
        "Total tokens: input=%d, output=%d, total=%d; total cost=$%.6f",
        total_input_tokens,
        total_output_tokens,
        total_tokens,
        total_cost,
    )

    stats: dict[str, int | float] = {
        "total_urls": len(rows),
        "success": status_counts["success"],
        "blocked": status_counts["blocked"],
        "failure": status_counts["failure"],
        "total_input_tokens": total_input_tokens,
        "total_output_tokens": total_output_tokens,
        "total_tokens": total_tokens,
        "total_cost_usd": total_cost,
    }
    update_current_span(
        usage={
            "prompt_tokens": total_input_tokens,
            "completion_tokens": total_output_tokens,
            "total_tokens": total_tokens,
        },
        total_cost=float(total_cost),
        metadata=stats,
    )
    return outcomes, stats
