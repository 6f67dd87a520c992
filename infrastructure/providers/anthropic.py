"""Anthropic provider adapter (Messages API)."""

import logging
from typing import Any

import anthropic
from anthropic import Anthropic
from opik.integrations.anthropic import track_anthropic

from domain.errors import OracleTransportError
from infrastructure.config.models import ModelPricing, Provider, RunConfig
from infrastructure.observability.tracing import opik_usage, update_current_span

from .base import OracleReply, ProviderAdapter
from .registry import register_adapter

logger = logging.getLogger(__name__)

REFUSAL_STOP_REASON = "refusal"


class AnthropicAdapter(ProviderAdapter):
    """Adapter for the Anthropic Messages API."""

    @classmethod
    def from_cfg(cls, cfg: RunConfig) -> "AnthropicAdapter":
        if cfg.anthropic is None:
            raise ValueError("Provider=anthropic but cfg.anthropic is missing")
        client: Any = track_anthropic(Anthropic())
        pricing = cls._pricing_from_cfg(cfg, ModelPricing)
        return cls(cfg=cfg, client=client, pricing=pricing)

    def call_oracle(
        self,
        *,
        prompt_text: str,
        request_id: str,
        extra_trace_meta: dict[str, Any] | None = None,
    ) -> tuple[OracleReply, dict[str, Any]]:
        """Call the Anthropic Messages API with a single user message."""
        provider_cfg = self.cfg.anthropic
        if provider_cfg is None:
            raise ValueError("AnthropicAdapter requires cfg.anthropic")

        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": provider_cfg.max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": prompt_text}],
                }
            ],
        }
        if provider_cfg.temperature is not None:
            kwargs["temperature"] = provider_cfg.temperature
        if provider_cfg.service_tier is not None:
            kwargs["service_tier"] = provider_cfg.service_tier

        try:
            message = self.client.messages.create(**kwargs)
        except anthropic.APIError as e:
            raise OracleTransportError(f"Anthropic API Error: {e}") from e

        usage = message.usage
        input_tokens = int(getattr(usage, "input_tokens", 0) or 0)
        output_tokens = int(getattr(usage, "output_tokens", 0) or 0)
        result = self._usage_result(input_tokens=input_tokens, output_tokens=output_tokens)

        if getattr(message, "stop_reason", None) == REFUSAL_STOP_REASON:
            reply = OracleReply(block_reason=REFUSAL_STOP_REASON)
        else:
            text = "".join(
                getattr(block, "text", "") for block in message.content if getattr(block, "type", None) == "text"
            )
            reply = OracleReply(text=text or None)

        meta = {
            "request_id": request_id,
            "service_tier": provider_cfg.service_tier,
            "max_tokens": provider_cfg.max_tokens,
            "temperature": provider_cfg.temperature,
            "stop_reason": getattr(message, "stop_reason", None),
            "total_cost_usd": round(result["total_cost"], 6),
        }
        if extra_trace_meta:
            meta.update(extra_trace_meta)

        update_current_span(
            provider=self.provider.value,
            model=self.model,
            usage=opik_usage(
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                total_tokens=result["total_tokens"],
            ),
            total_cost=float(result["total_cost"]),
            metadata=meta,
        )

        logger.info(
            "Anthropic - total_tokens=%d (in=%d, out=%d), stop_reason=%s, cost=$%.6f",
            result["total_tokens"],
            input_tokens,
            output_tokens,
            getattr(message, "stop_reason", None),
            result["total_cost"],
        )
        return reply, result


register_adapter(Provider.ANTHROPIC, AnthropicAdapter)
