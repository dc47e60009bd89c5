"""
README generation endpoint.
"""

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from devboard.api.dependencies import CurrentSubject, LLMClientDep, SettingsDep, StreamPacingDep
from devboard.api.schemas import ReadmeGenerateRequest
from devboard.api.sse import event_stream_response, result_text
from devboard.core.pipeline.state import ReadmeState
from devboard.core.readme.workflow import build_readme_graph
from devboard.core.streaming import simulated_stream
from devboard.infra.config.logging_config import get_logger

router = APIRouter(prefix="/readme", tags=["readme"])
log = get_logger("api.readme")


@router.post("/generate")
async def generate_readme(
    body: ReadmeGenerateRequest,
    request: Request,
    subject: CurrentSubject,
    llm: LLMClientDep,
    pacing: StreamPacingDep,
    settings: SettingsDep,
) -> StreamingResponse:
    """Run analyze -> generate -> review and stream the final README over SSE."""
    state = ReadmeState.start(
        username=body.username,
        current_content=body.current_content,
        is_new=body.is_new,
        personal_info=body.personal_info.to_domain() if body.personal_info else None,
    )
    pipeline = build_readme_graph(llm, timeout=settings.llm_timeout_sec)
    log.info("readme.generate.start", username=state.username, is_new=state.is_new)

    async def produce() -> str:
        result = await pipeline.run(state, should_stop=request.is_disconnected)
        log.info(
            "readme.generate.finished",
            username=result.username,
            error=result.error,
            cancelled=result.cancelled,
        )
        return result_text(result, result.final_content)

    return event_stream_response(
        simulated_stream(produce, pacing, is_disconnected=request.is_disconnected)
    )
