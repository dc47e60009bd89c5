"""Helpers shared by pipeline step implementations."""

import asyncio
from typing import Optional

from devboard.core.ports import LLMClientPort


class StepTimeoutError(Exception):
    pass


async def call_model(
    llm: LLMClientPort,
    prompt: str,
    *,
    op: str,
    timeout: Optional[float] = None,
    system_prompt: Optional[str] = None,
) -> str:
    """Single model round trip, bounded by ``timeout`` seconds when given."""
    messages = llm.create_messages(prompt, system_prompt)
    call = llm.invoke_text(messages, op=op)
    if timeout is None:
        return await call
    try:
        return await asyncio.wait_for(call, timeout)
    except asyncio.TimeoutError:
        raise StepTimeoutError(f"timed out after {timeout:g}s") from None


def failure_message(label: str, exc: BaseException) -> str:
    """Stage-labeled error text, e.g. ``Analysis failed: rate limited``."""
    return f"{label} failed: {str(exc) or 'Unknown error'}"
