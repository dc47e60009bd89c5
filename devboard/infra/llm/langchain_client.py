"""
Infrastructure LLM client for LangChain chat models.

This client only moves messages in and text out. Prompts live with the
pipelines that own them.
"""

from typing import Any, AsyncIterator, List

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from devboard.core.ports import LLMClientPort
from devboard.infra.config.logging_config import get_logger
from devboard.infra.config.settings import Settings
from devboard.infra.llm.callbacks import PrometheusLLMCallback


PROVIDERS = {"openai", "gemini"}


def _content_text(content: Any) -> str:
    # Gemini may return content as a list of typed parts
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return ""


def build_chat_model(settings: Settings) -> BaseChatModel:
    """Construct the provider chat model selected by ``LLM_PROVIDER``."""
    provider = (settings.llm_provider or "openai").strip().lower()
    if provider not in PROVIDERS:
        raise ValueError(f"Unsupported LLM provider: {settings.llm_provider}")

    if provider == "gemini":
        return ChatGoogleGenerativeAI(
            model=settings.gemini_model,
            google_api_key=settings.gemini_api_key,
            temperature=settings.llm_temperature,
            max_output_tokens=settings.llm_max_tokens,
        )

    llm_kwargs = {
        "model": settings.openai_model,
        "api_key": settings.openai_api_key,
        "temperature": settings.llm_temperature,
        "max_tokens": settings.llm_max_tokens,
        "timeout": settings.llm_timeout_sec,
        "max_retries": 0,
    }
    # OpenAI-compatible servers
    if settings.openai_base_url:
        llm_kwargs["base_url"] = settings.openai_base_url
    return ChatOpenAI(**llm_kwargs)


class LangChainClient(LLMClientPort):
    """
    Infrastructure-layer LLM client providing invoke and stream.

    Safe to share across concurrent requests: it holds no per-call state.
    """

    def __init__(self, llm: BaseChatModel):
        self.llm = llm
        self._text_parser = StrOutputParser()
        self._log = get_logger("infra.llm")

    @classmethod
    def from_settings(cls, settings: Settings) -> "LangChainClient":
        return cls(build_chat_model(settings))

    async def invoke_text(self, messages: List[BaseMessage], *, op: str = "default") -> str:
        """
        Invoke LLM with messages and return text response.

        Args:
            messages: List of LangChain message objects
            op: Operation label used for metrics and logs

        Returns:
            Raw text response from LLM
        """
        response = await self.llm.ainvoke(
            messages, config={"callbacks": [PrometheusLLMCallback(op)]}
        )
        text = self._text_parser.invoke(response)
        self._log.info("llm.invoke.text", op=op, chars=len(text))
        return text

    async def stream_text(
        self, messages: List[BaseMessage], *, op: str = "default"
    ) -> AsyncIterator[str]:
        """
        Stream text response from LLM (for real-time generation).

        Yields:
            Chunks of text as they arrive from LLM
        """
        async for chunk in self.llm.astream(
            messages, config={"callbacks": [PrometheusLLMCallback(op)]}
        ):
            text = _content_text(getattr(chunk, "content", None))
            if text:
                yield text
        self._log.info("llm.stream.end", op=op)
