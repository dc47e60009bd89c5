"""
README generation pipeline: analyze -> generate -> review.

Each step catches model failures and records a stage-labeled ``error``; the
conditional edges end the run on the first error.
"""

from typing import Any, Dict, Optional

from devboard.core.markdown import remove_fenced_blocks, strip_code_fences
from devboard.core.pipeline.executor import (
    END,
    CompiledPipeline,
    StepGraph,
    continue_unless_error,
)
from devboard.core.pipeline.state import ReadmeState
from devboard.core.pipeline.steps import call_model, failure_message
from devboard.core.ports import LLMClientPort
from devboard.core.readme import prompts
from devboard.infra.config.logging_config import get_logger

logger = get_logger("pipeline.readme")


class ReadmeWorkflow:
    """Step implementations bound to one model client."""

    def __init__(self, llm: LLMClientPort, timeout: Optional[float] = None):
        self.llm = llm
        self.timeout = timeout

    async def analyze(self, state: ReadmeState) -> Dict[str, Any]:
        try:
            analysis = await call_model(
                self.llm, prompts.analysis_prompt(state), op="readme.analyze", timeout=self.timeout
            )
        except Exception as exc:
            logger.warning("readme.analyze.failed", username=state.username, error=str(exc))
            return {"error": failure_message("Analysis", exc)}
        return {"analysis": analysis}

    async def generate(self, state: ReadmeState) -> Dict[str, Any]:
        if state.error:
            return {"error": state.error}
        try:
            raw = await call_model(
                self.llm, prompts.generation_prompt(state), op="readme.generate", timeout=self.timeout
            )
        except Exception as exc:
            logger.warning("readme.generate.failed", username=state.username, error=str(exc))
            return {"error": failure_message("Generation", exc)}
        return {"generated_content": strip_code_fences(raw)}

    async def review(self, state: ReadmeState) -> Dict[str, Any]:
        if state.error:
            return {"error": state.error}
        try:
            raw = await call_model(
                self.llm, prompts.review_prompt(state), op="readme.review", timeout=self.timeout
            )
        except Exception as exc:
            logger.warning("readme.review.failed", username=state.username, error=str(exc))
            return {"error": failure_message("Review", exc)}

        content = strip_code_fences(raw)
        if "```" in content:
            logger.info("readme.review.fences_remaining", username=state.username)
            content = remove_fenced_blocks(content)
        return {"final_content": content}


def build_readme_graph(
    llm: LLMClientPort, timeout: Optional[float] = None
) -> CompiledPipeline[ReadmeState]:
    workflow = ReadmeWorkflow(llm, timeout)
    graph: StepGraph[ReadmeState] = StepGraph("readme")
    graph.add_step("analyze", workflow.analyze)
    graph.add_step("generate", workflow.generate)
    graph.add_step("review", workflow.review)
    graph.set_entry_point("analyze")
    graph.add_conditional_edges(
        "analyze", continue_unless_error, {"continue": "generate", "end": END}
    )
    graph.add_conditional_edges(
        "generate", continue_unless_error, {"continue": "review", "end": END}
    )
    graph.add_edge("review", END)
    return graph.compile()
