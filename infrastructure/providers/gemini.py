import logging
import os
from typing import Any

import httpx

from domain.errors import OracleTransportError
from infrastructure.config.models import ModelPricing, Provider, RunConfig
from infrastructure.observability.tracing import opik_usage, update_current_span

from .base import OracleReply, ProviderAdapter
from .registry import register_adapter

logger = logging.getLogger(__name__)

# Candidate finish reasons that mean the answer was withheld for policy reasons
_BLOCKING_FINISH_REASONS = {"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII", "RECITATION"}


def _candidate_text(data: dict[str, Any]) -> str | None:
    candidates = data.get("candidates") or []
    if not candidates:
        return None
    parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
    text = "".join(str(p.get("text", "")) for p in parts if isinstance(p, dict))
    return text or None


def _block_reason(data: dict[str, Any]) -> str | None:
    reason = (data.get("promptFeedback") or {}).get("blockReason")
    if reason:
        return str(reason)
    candidates = data.get("candidates") or []
    if candidates:
        finish = (candidates[0] or {}).get("finishReason")
        if finish in _BLOCKING_FINISH_REASONS:
            return str(finish)
    return None


class GeminiAdapter(ProviderAdapter):
    """
    Gemini backend using the generativelanguage REST API: POST /models/{model}:generateContent

    - The API key is read from the environment variable named by `api_key_env`
    - `promptFeedback.blockReason` (or a safety finish reason) is reported as a block
    - Token usage comes from `usageMetadata`
    """

    @classmethod
    def from_cfg(cls, cfg: RunConfig) -> "GeminiAdapter":
        if cfg.gemini is None:
            raise ValueError("Provider=gemini but cfg.gemini is missing")
        api_key = os.environ.get(cfg.gemini.api_key_env)
        if not api_key:
            raise ValueError(f"Server configuration error: API Key missing ({cfg.gemini.api_key_env} not set).")
        client = httpx.Client(
            base_url=cfg.gemini.base_url.rstrip("/"),
            timeout=cfg.gemini.timeout_s,
            headers={"Content-Type": "application/json", "x-goog-api-key": api_key},
        )
        pricing = cls._pricing_from_cfg(cfg, ModelPricing)
        return cls(cfg=cfg, client=client, pricing=pricing)

    def call_oracle(
        self,
        *,
        prompt_text: str,
        request_id: str,
        extra_trace_meta: dict[str, Any] | None = None,
    ) -> tuple[OracleReply, dict[str, Any]]:
        provider_cfg = self.cfg.gemini
        if provider_cfg is None:
            raise ValueError("GeminiAdapter requires cfg.gemini")

        payload: dict[str, Any] = {"contents": [{"parts": [{"text": prompt_text}]}]}
        generation_config: dict[str, Any] = {}
        if provider_cfg.temperature is not None:
            generation_config["temperature"] = provider_cfg.temperature
        if provider_cfg.max_output_tokens is not None:
            generation_config["maxOutputTokens"] = provider_cfg.max_output_tokens
        if generation_config:
            payload["generationConfig"] = generation_config

        try:
            resp = self.client.post(f"/models/{self.model}:generateContent", json=payload)
        except httpx.HTTPError as e:
            raise OracleTransportError(f"Gemini API Error: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.is_error:
            details = (data.get("error") or {}).get("message") or f"Status: {resp.status_code}"
            raise OracleTransportError(f"Gemini API Error: {details}")

        usage = data.get("usageMetadata") or {}
        input_tokens = int(usage.get("promptTokenCount", 0) or 0)
        output_tokens = int(usage.get("candidatesTokenCount", 0) or 0)
        total_tokens = int(usage.get("totalTokenCount", input_tokens + output_tokens) or 0)
        result = self._usage_result(input_tokens=input_tokens, output_tokens=output_tokens, total_tokens=total_tokens)

        text = _candidate_text(data)
        if text is not None:
            reply = OracleReply(text=text)
        else:
            reply = OracleReply(block_reason=_block_reason(data))

        meta = {
            "request_id": request_id,
            "temperature": provider_cfg.temperature,
            "block_reason": reply.block_reason,
            "total_cost_usd": round(result["total_cost"], 6),
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
            "Gemini - total_tokens=%d (in=%d, out=%d), cost=$%.6f",
            total_tokens,
            input_tokens,
            output_tokens,
            result["total_cost"],
        )
        return reply, result


register_adapter(Provider.GEMINI, GeminiAdapter)
