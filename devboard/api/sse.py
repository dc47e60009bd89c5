"""
Helpers shared by the streaming endpoints.
"""

from typing import AsyncIterator, Optional

from fastapi.responses import StreamingResponse

from devboard.core.pipeline.state import PipelineState
from devboard.core.streaming import GenerationCancelled, GenerationFailed

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def event_stream_response(frames: AsyncIterator[str]) -> StreamingResponse:
    """Wrap pre-framed SSE strings in a streaming response."""

    async def event_generator():
        async for frame in frames:
            yield frame.encode("utf-8")

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


def result_text(state: PipelineState, text: Optional[str]) -> str:
    """Final text of a finished run, or the matching stream exception."""
    if state.cancelled:
        raise GenerationCancelled()
    if state.error:
        raise GenerationFailed(state.error)
    return text or ""
