"""
Mock LLM client for local development without an API key.
"""

import re
from typing import AsyncIterator, List

from langchain_core.messages import BaseMessage

from devboard.core.ports import LLMClientPort


_USERNAME = re.compile(r'username "([^"]+)"')


class MockLLMClient(LLMClientPort):
    """Mock LLM client that returns canned responses per operation."""

    async def invoke_text(self, messages: List[BaseMessage], *, op: str = "default") -> str:
        prompt = str(messages[-1].content) if messages else ""
        match = _USERNAME.search(prompt)
        username = match.group(1) if match else "developer"

        if op.endswith("analyze") or op.endswith("parse"):
            return f"Mock analysis for {username}: add an intro, skills and stats."
        if op.endswith("generate_code"):
            return (
                "export default function Portfolio() {\n"
                "  return <main><h1>Portfolio</h1></main>\n"
                "}\n"
            )
        return (
            f"# Hi, I'm {username}! 👋\n\n"
            "## About Me\n\nMock README generated without a model.\n\n"
            "## 🚀 Skills & Technologies\n\n- Python\n- TypeScript\n"
        )

    async def stream_text(
        self, messages: List[BaseMessage], *, op: str = "default"
    ) -> AsyncIterator[str]:
        text = await self.invoke_text(messages, op=op)
        for piece in re.findall(r"\s*\S+\s*", text):
            yield piece
