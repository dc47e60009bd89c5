"""
Portfolio generation endpoint.
"""

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from devboard.api.dependencies import CurrentSubject, LLMClientDep, SettingsDep, StreamPacingDep
from devboard.api.schemas import PortfolioGenerateRequest
from devboard.api.sse import event_stream_response, result_text
from devboard.core.pipeline.state import PortfolioState
from devboard.core.portfolio.workflow import build_portfolio_graph
from devboard.core.streaming import simulated_stream
from devboard.infra.config.logging_config import get_logger

router = APIRouter(prefix="/portfolio", tags=["portfolio"])
log = get_logger("api.portfolio")


@router.post("/generate")
async def generate_portfolio(
    body: PortfolioGenerateRequest,
    request: Request,
    subject: CurrentSubject,
    llm: LLMClientDep,
    pacing: StreamPacingDep,
    settings: SettingsDep,
) -> StreamingResponse:
    """Parse the resume text, generate a React portfolio component, stream it over SSE."""
    state = PortfolioState(
        content=body.content,
        custom_message=body.custom_message or "",
        style=body.style.value,
    )
    pipeline = build_portfolio_graph(llm, timeout=settings.llm_timeout_sec)
    log.info("portfolio.generate.start", style=state.style, content_chars=len(state.content))

    async def produce() -> str:
        result = await pipeline.run(state, should_stop=request.is_disconnected)
        log.info(
            "portfolio.generate.finished",
            current_step=result.current_step,
            error=result.error,
            cancelled=result.cancelled,
        )
        return result_text(result, result.portfolio_code)

    return event_stream_response(
        simulated_stream(produce, pacing, is_disconnected=request.is_disconnected)
    )
