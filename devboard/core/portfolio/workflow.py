"""
Portfolio generation pipeline: parse_content -> generate_code.

The router in front of ``generate_code`` keeps it from running at all once
parsing has failed. Model output is passed through untouched.
"""

from typing import Any, Dict, Optional

from devboard.core.pipeline.executor import (
    END,
    CompiledPipeline,
    StepGraph,
    continue_unless_error,
)
from devboard.core.pipeline.state import PortfolioState
from devboard.core.pipeline.steps import call_model, failure_message
from devboard.core.portfolio import prompts
from devboard.core.ports import LLMClientPort
from devboard.infra.config.logging_config import get_logger

logger = get_logger("pipeline.portfolio")


class PortfolioWorkflow:
    def __init__(self, llm: LLMClientPort, timeout: Optional[float] = None):
        self.llm = llm
        self.timeout = timeout

    async def parse_content(self, state: PortfolioState) -> Dict[str, Any]:
        try:
            parsed = await call_model(
                self.llm, prompts.parse_prompt(state), op="portfolio.parse", timeout=self.timeout
            )
        except Exception as exc:
            logger.warning("portfolio.parse.failed", error=str(exc))
            return {"error": failure_message("Parsing", exc), "current_step": "error"}
        return {"parsed_data": parsed, "current_step": "generating", "progress": 50}

    async def generate_code(self, state: PortfolioState) -> Dict[str, Any]:
        try:
            code = await call_model(
                self.llm,
                prompts.code_prompt(state),
                op="portfolio.generate_code",
                timeout=self.timeout,
            )
        except Exception as exc:
            logger.warning("portfolio.generate_code.failed", error=str(exc))
            return {"error": failure_message("Code generation", exc), "current_step": "error"}
        return {"portfolio_code": code, "current_step": "complete", "progress": 100}


def build_portfolio_graph(
    llm: LLMClientPort, timeout: Optional[float] = None
) -> CompiledPipeline[PortfolioState]:
    workflow = PortfolioWorkflow(llm, timeout)
    graph: StepGraph[PortfolioState] = StepGraph("portfolio")
    graph.add_step("parse_content", workflow.parse_content)
    graph.add_step("generate_code", workflow.generate_code)
    graph.set_entry_point("parse_content")
    graph.add_conditional_edges(
        "parse_content", continue_unless_error, {"continue": "generate_code", "end": END}
    )
    graph.add_edge("generate_code", END)
    return graph.compile()
