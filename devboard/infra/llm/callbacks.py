from __future__ import annotations

import time
from typing import Any, Optional, Tuple

from langchain_core.callbacks import AsyncCallbackHandler
from langchain_core.outputs import LLMResult

from devboard.infra.observability.metrics import observe_llm_usage


def token_usage(response: LLMResult) -> Tuple[int, int]:
    """(prompt, completion) token counts, 0 when the provider reports none."""
    # OpenAI fills llm_output; Gemini and streamed calls only set usage_metadata
    usage = (response.llm_output or {}).get("token_usage") or {}
    if usage:
        return int(usage.get("prompt_tokens") or 0), int(usage.get("completion_tokens") or 0)

    prompt = completion = 0
    for generations in response.generations:
        for generation in generations:
            metadata = getattr(getattr(generation, "message", None), "usage_metadata", None) or {}
            prompt += int(metadata.get("input_tokens") or 0)
            completion += int(metadata.get("output_tokens") or 0)
    return prompt, completion


class PrometheusLLMCallback(AsyncCallbackHandler):
    """Records latency and token usage of one model call under an op label."""

    def __init__(self, op: str) -> None:
        self.op = op
        self._t0: Optional[float] = None

    def _latency(self) -> float:
        now = time.monotonic()
        return now - (self._t0 or now)

    async def on_chat_model_start(self, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._t0 = time.monotonic()

    async def on_llm_end(self, response: LLMResult, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        prompt, completion = token_usage(response)
        observe_llm_usage(self.op, prompt, completion, self._latency())

    async def on_llm_error(self, error: BaseException, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        observe_llm_usage(self.op, None, None, self._latency())
