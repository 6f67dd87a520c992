"""Base adapter interface for oracle (LLM) providers."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from infrastructure.config.models import ModelPricing, Provider, RunConfig

logger = logging.getLogger(__name__)


class OracleReply(BaseModel):
    """
    What the oracle sent back for one prompt.

    Exactly one of the two is meaningful: candidate `text`, or a `block_reason`
    when the provider refused the content on policy grounds.
    """

    text: str | None = None
    block_reason: str | None = None

    @property
    def blocked(self) -> bool:
        return self.block_reason is not None


class ProviderAdapter(ABC):
    """
    Abstract base class for oracle provider adapters.
    Common interface for provider backends (OpenAI, Anthropic, Gemini, etc.).

    All concrete adapters must implement:
    - call_oracle(): send one prompt, return the reply plus usage metadata
    """

    provider: Provider
    cfg: RunConfig
    client: Any
    pricing: ModelPricing | None

    supports_token_usage: bool = True

    def __init__(
        self,
        *,
        cfg: RunConfig,
        client: Any,
        pricing: ModelPricing | None,
    ) -> None:
        self.cfg = cfg
        self.provider = cfg.provider
        self.client = client
        self.pricing = pricing

    @property
    def model(self) -> str:
        # Single source of truth (no duplicated "model: str" fields)
        return self.cfg.model

    @property
    def display_name(self) -> str:
        """Provider name used in client-facing messages."""
        return self.provider.value.capitalize()

    @staticmethod
    def _pricing_from_cfg(cfg: RunConfig, pricing_cls: type[ModelPricing]) -> ModelPricing | None:
        if not cfg.provider_model.pricing:
            logger.warning(
                "No pricing configured for %s/%s; cost tracking reports $0.00",
                cfg.provider.value,
                cfg.model,
            )
            return None
        return pricing_cls(**cfg.provider_model.pricing)

    def _usage_result(self, *, input_tokens: int, output_tokens: int, total_tokens: int | None = None) -> dict[str, Any]:
        """Token counts and estimated costs in the shape every adapter returns."""
        total = int(total_tokens if total_tokens is not None else input_tokens + output_tokens)
        input_cost = 0.0
        output_cost = 0.0
        if self.pricing is not None:
            input_cost = input_tokens * self.pricing.input_cost_per_token
            output_cost = output_tokens * self.pricing.output_cost_per_token
        return {
            "input_tokens": int(input_tokens),
            "output_tokens": int(output_tokens),
            "total_tokens": total,
            "input_cost": input_cost,
            "output_cost": output_cost,
            "total_cost": input_cost + output_cost,
        }

    @abstractmethod
    def call_oracle(
        self,
        *,
        prompt_text: str,
        request_id: str,
        extra_trace_meta: dict[str, Any] | None = None,
    ) -> tuple[OracleReply, dict[str, Any]]:
        """Send one prompt and return (reply, usage_meta).

        Args:
            prompt_text: Fully rendered prompt (URL + truncated page text)
            request_id: Request identifier for logging/tracing
            extra_trace_meta: Optional extra metadata for tracing/logging

        Returns:
            Tuple of (OracleReply, dict with token counts and costs)

        Raises:
            OracleTransportError: On any non-success response from the provider
        """

        raise NotImplementedError
