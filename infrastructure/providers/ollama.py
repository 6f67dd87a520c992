import logging
from typing import Any

import httpx

from domain.errors import OracleTransportError
from infrastructure.config.models import Provider, RunConfig
from infrastructure.observability.tracing import opik_usage, update_current_span

from .base import OracleReply, ProviderAdapter
from .registry import register_adapter

logger = logging.getLogger(__name__)


class OllamaAdapter(ProviderAdapter):
    """
    Ollama backend using Ollama's native Chat API: POST /api/chat

    - Requests JSON mode via `format: "json"`; the reply still goes through the sanitizer
    - Token usage comes from `prompt_eval_count` and `eval_count`
    - Cost is treated as $0.00 (local inference)
    """

    @classmethod
    def from_cfg(cls, cfg: RunConfig) -> "OllamaAdapter":
        if cfg.ollama is None:
            raise ValueError("Provider=ollama but cfg.ollama is missing")
        client = httpx.Client(
            base_url=cfg.ollama.base_url.rstrip("/"),
            timeout=cfg.ollama.timeout_s,
            headers={"Content-Type": "application/json"},
        )
        # No per-token pricing for local inference
        return cls(cfg=cfg, client=client, pricing=None)

    def call_oracle(
        self,
        *,
        prompt_text: str,
        request_id: str,
        extra_trace_meta: dict[str, Any] | None = None,
    ) -> tuple[OracleReply, dict[str, Any]]:
        provider_cfg = self.cfg.ollama
        if provider_cfg is None:
            raise ValueError("OllamaAdapter requires cfg.ollama")

        # Ollama "options" are optional; only send non-None values
        options: dict[str, Any] = {}
        for k in ("temperature", "seed", "num_ctx", "top_p", "top_k", "num_predict"):
            v = getattr(provider_cfg, k, None)
            if v is not None:
                options[k] = v

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt_text}],
            "stream": False,
            "format": "json",
        }
        if options:
            payload["options"] = options
        if provider_cfg.keep_alive is not None:
            payload["keep_alive"] = provider_cfg.keep_alive
        if provider_cfg.think is not None:
            payload["think"] = provider_cfg.think

        try:
            resp = self.client.post("/api/chat", json=payload)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise OracleTransportError(f"Ollama API Error: Status: {e.response.status_code} {e.response.text}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise OracleTransportError(f"Ollama API Error: {e}") from e

        if not isinstance(data, dict):
            raise OracleTransportError(f"Ollama API Error: expected a JSON object, got {type(data).__name__}")

        raw_text = ((data.get("message") or {}).get("content")) or None

        input_tokens = int(data.get("prompt_eval_count", 0) or 0)
        output_tokens = int(data.get("eval_count", 0) or 0)
        result = self._usage_result(input_tokens=input_tokens, output_tokens=output_tokens)

        meta = {
            "request_id": request_id,
            "base_url": provider_cfg.base_url,
            "keep_alive": provider_cfg.keep_alive,
            "think": provider_cfg.think,
            "ollama_options": options,
            "total_cost_usd": 0.0,
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
            total_cost=0.0,
            metadata=meta,
        )

        logger.info(
            "Ollama - total_tokens=%d (in=%d, out=%d), cost=$%.6f",
            result["total_tokens"],
            input_tokens,
            output_tokens,
            0.0,
        )
        return OracleReply(text=raw_text), result


register_adapter(Provider.OLLAMA, OllamaAdapter)
