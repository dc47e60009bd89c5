"""
Direct chat completion endpoint with live token relay.
"""

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from devboard.api.dependencies import CurrentSubject, LLMClientDep
from devboard.api.schemas import LLMGenerateRequest
from devboard.api.sse import event_stream_response
from devboard.core.streaming import relay_stream
from devboard.infra.config.logging_config import get_logger

router = APIRouter(prefix="/llm", tags=["llm"])
log = get_logger("api.llm")


@router.post("/generate")
async def generate_text(
    body: LLMGenerateRequest,
    request: Request,
    subject: CurrentSubject,
    llm: LLMClientDep,
) -> StreamingResponse:
    messages = llm.create_messages(body.prompt, body.system_prompt)
    log.info("llm.generate.start", prompt_chars=len(body.prompt), system=bool(body.system_prompt))
    fragments = llm.stream_text(messages, op="llm.generate")
    return event_stream_response(relay_stream(fragments, is_disconnected=request.is_disconnected))
