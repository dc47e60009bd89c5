"""
Ports for external collaborators consumed by the generation pipelines.

The pipelines depend only on these contracts; concrete clients live in
``devboard.infra`` and are injected at the API boundary.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator, List, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage


class LLMClientPort(ABC):
    """Abstract interface for generative model calls."""

    @abstractmethod
    async def invoke_text(self, messages: List[BaseMessage], *, op: str = "default") -> str:
        """Run one completion and return the full response text."""

    @abstractmethod
    def stream_text(
        self, messages: List[BaseMessage], *, op: str = "default"
    ) -> AsyncIterator[str]:
        """Yield response text fragments as the model produces them."""

    def create_messages(
        self, user_prompt: str, system_prompt: Optional[str] = None
    ) -> List[BaseMessage]:
        messages: List[BaseMessage] = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=user_prompt))
        return messages
