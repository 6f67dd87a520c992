"""OpenAI provider adapter (Responses API)."""

import logging
from typing import Any

import openai
from openai import OpenAI
from opik.integrations.openai import track_openai

from domain.errors import OracleTransportError
from infrastructure.config.models import ModelPricingOpenAI, Provider, RunConfig
from infrastructure.observability.tracing import opik_usage, update_current_span

from .base import OracleReply, ProviderAdapter
from .registry import register_adapter

logger = logging.getLogger(__name__)


def _find_refusal(response: Any) -> str | None:
    """Return the refusal message if the model declined to answer."""
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in getattr(item, "content", None) or []:
            if getattr(part, "type", None) == "refusal":
                return str(getattr(part, "refusal", "") or "refusal")
    return None


class OpenAIAdapter(ProviderAdapter):
    """Adapter for the OpenAI Responses API."""

    @classmethod
    def from_cfg(cls, cfg: RunConfig) -> "OpenAIAdapter":
        if cfg.openai is None:
            raise ValueError("Provider=openai but cfg.openai is missing")
        client: Any = track_openai(OpenAI())
        pricing = cls._pricing_from_cfg(cfg, ModelPricingOpenAI)
        return cls(cfg=cfg, client=client, pricing=pricing)

    @property
    def display_name(self) -> str:
        return "OpenAI"

    def call_oracle(
        self,
        *,
        prompt_text: str,
        request_id: str,
        extra_trace_meta: dict[str, Any] | None = None,
    ) -> tuple[OracleReply, dict[str, Any]]:
        """Call the OpenAI Responses API with a single user prompt."""
        provider_cfg = self.cfg.openai
        if provider_cfg is None:
            raise ValueError("OpenAIAdapter requires cfg.openai")

        # Unset options are omitted; some SDK versions reject explicit None values.
        kwargs: dict[str, Any] = {
            "model": self.model,
            "input": prompt_text,
        }
        if provider_cfg.service_tier is not None:
            kwargs["service_tier"] = provider_cfg.service_tier
        if provider_cfg.temperature is not None:
            kwargs["temperature"] = provider_cfg.temperature
        if provider_cfg.max_output_tokens is not None:
            kwargs["max_output_tokens"] = provider_cfg.max_output_tokens

        try:
            response = self.client.responses.create(**kwargs)
        except openai.APIError as e:
            raise OracleTransportError(f"OpenAI API Error: {e}") from e

        usage = getattr(response, "usage", None)
        input_tokens = int(getattr(usage, "input_tokens", 0) or 0)
        output_tokens = int(getattr(usage, "output_tokens", 0) or 0)
        total_tokens = int(getattr(usage, "total_tokens", input_tokens + output_tokens) or 0)

        cached_input_tokens = 0
        details = getattr(usage, "input_tokens_details", None)
        if details is not None:
            cached_input_tokens = int(getattr(details, "cached_tokens", 0) or 0)

        result = self._usage_result(input_tokens=input_tokens, output_tokens=output_tokens, total_tokens=total_tokens)
        if isinstance(self.pricing, ModelPricingOpenAI):
            uncached = max(input_tokens - cached_input_tokens, 0)
            result["input_cost"] = (
                uncached * self.pricing.input_cost_per_token
                + cached_input_tokens * self.pricing.cached_input_cost_per_token
            )
            result["total_cost"] = result["input_cost"] + result["output_cost"]

        refusal = _find_refusal(response)
        if refusal is not None:
            reply = OracleReply(block_reason=refusal)
        else:
            reply = OracleReply(text=getattr(response, "output_text", None) or None)

        meta = {
            "request_id": request_id,
            "service_tier": provider_cfg.service_tier,
            "temperature": provider_cfg.temperature,
            "openai_cached_tokens": cached_input_tokens,
            "total_cost_usd": round(result["total_cost"], 6),
            "blocked": reply.blocked,
        }
        if extra_trace_meta:
            meta.update(extra_trace_meta)

        update_current_span(
            provider=self.provider.value,
            model=self.model,
            usage=opik_usage(input_tokens=input_tokens, output_tokens=output_tokens, total_tokens=total_tokens),
            total_cost=float(result["total_cost"]),
            metadata=meta,
        )

        logger.info(
            "OpenAI - total_tokens=%d (cached=%d), cost=$%.6f",
            total_tokens,
            cached_input_tokens,
            result["total_cost"],
        )
        return reply, result


register_adapter(Provider.OPENAI, OpenAIAdapter)
