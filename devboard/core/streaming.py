"""
Server-sent-event adapter for generation results.

Every run yields zero or more ``content`` events followed by exactly one
terminal ``complete`` or ``error`` event. Two modes:

- simulated: a fully materialized result is sliced into fixed-size chunks
  with a fixed delay between them
- relay: fragments from a live model stream are forwarded as they arrive
"""

from __future__ import annotations

import asyncio
import json
from contextlib import aclosing
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable, Iterator, Optional, Union

from devboard.infra.config.logging_config import get_logger
from devboard.infra.config.settings import Settings
from devboard.infra.observability.metrics import STREAM_CHUNKS, STREAM_DISCONNECTS

logger = get_logger("streaming")

DisconnectProbe = Callable[[], Awaitable[bool]]


class GenerationFailed(Exception):
    """A run finished with a pipeline error; the message goes to the caller as is."""


class GenerationCancelled(Exception):
    """A run stopped because the caller went away."""


class StreamClosedError(RuntimeError):
    pass


@dataclass(frozen=True)
class ContentChunk:
    text: str

    def payload(self) -> dict:
        return {"type": "content", "content": self.text}


@dataclass(frozen=True)
class Complete:
    final_text: str

    def payload(self) -> dict:
        return {"type": "complete", "finalContent": self.final_text}


@dataclass(frozen=True)
class Error:
    message: str

    def payload(self) -> dict:
        return {"type": "error", "error": self.message}


StreamEvent = Union[ContentChunk, Complete, Error]


def sse_event(payload: dict) -> str:
    """SSE 'data:' frame with a JSON payload."""
    return "data: " + json.dumps(payload, ensure_ascii=False) + "\n\n"


class StreamState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    CLOSED = "closed"


class EventStream:
    """Per-run event sequencer enforcing chunk* then one terminal event."""

    def __init__(self) -> None:
        self.state = StreamState.IDLE

    def emit(self, event: StreamEvent) -> str:
        if self.state is StreamState.CLOSED:
            raise StreamClosedError(f"cannot emit {type(event).__name__} after terminal event")
        if isinstance(event, ContentChunk):
            self.state = StreamState.STREAMING
        else:
            self.state = StreamState.CLOSED
        return sse_event(event.payload())

    def close(self) -> None:
        self.state = StreamState.CLOSED


@dataclass(frozen=True)
class StreamPacing:
    chunk_size: int = 10
    delay: float = 0.05

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        if self.delay < 0:
            raise ValueError("delay must not be negative")

    @classmethod
    def from_settings(cls, settings: Settings) -> "StreamPacing":
        return cls(
            chunk_size=settings.stream_chunk_size,
            delay=settings.stream_chunk_delay_ms / 1000.0,
        )


def slice_text(text: str, size: int) -> Iterator[str]:
    for start in range(0, len(text), size):
        yield text[start : start + size]


def _error_message(exc: BaseException) -> str:
    return str(exc) or "Unknown error"


async def _gone(is_disconnected: Optional[DisconnectProbe]) -> bool:
    return is_disconnected is not None and await is_disconnected()


async def simulated_stream(
    produce: Callable[[], Awaitable[str]],
    pacing: StreamPacing,
    is_disconnected: Optional[DisconnectProbe] = None,
) -> AsyncIterator[str]:
    """Await the full result, then replay it as paced content chunks.

    ``produce`` raises :class:`GenerationFailed` for pipeline errors and
    :class:`GenerationCancelled` when the caller disconnected mid-run.
    """
    stream = EventStream()
    try:
        final = await produce()
    except GenerationCancelled:
        stream.close()
        return
    except GenerationFailed as exc:
        yield stream.emit(Error(_error_message(exc)))
        return
    except Exception as exc:
        logger.exception("stream.produce.failed")
        yield stream.emit(Error(_error_message(exc)))
        return

    try:
        for index, piece in enumerate(slice_text(final, pacing.chunk_size)):
            if index and pacing.delay:
                await asyncio.sleep(pacing.delay)
            if await _gone(is_disconnected):
                STREAM_DISCONNECTS.labels(mode="simulated").inc()
                logger.info("stream.disconnected", sent_chunks=index)
                stream.close()
                return
            yield stream.emit(ContentChunk(piece))
            STREAM_CHUNKS.labels(mode="simulated").inc()
    except asyncio.CancelledError:
        STREAM_DISCONNECTS.labels(mode="simulated").inc()
        raise
    except Exception as exc:
        logger.warning("stream.simulated.failed", error=str(exc))
        yield stream.emit(Error(_error_message(exc)))
        return

    yield stream.emit(Complete(final))


async def relay_stream(
    fragments: AsyncIterator[str],
    is_disconnected: Optional[DisconnectProbe] = None,
) -> AsyncIterator[str]:
    """Forward live model fragments as content chunks, then complete."""
    stream = EventStream()
    received: list[str] = []
    try:
        async with aclosing(fragments) as source:
            async for fragment in source:
                if not fragment:
                    continue
                if await _gone(is_disconnected):
                    STREAM_DISCONNECTS.labels(mode="relay").inc()
                    logger.info("stream.disconnected", sent_chunks=len(received))
                    stream.close()
                    return
                received.append(fragment)
                yield stream.emit(ContentChunk(fragment))
                STREAM_CHUNKS.labels(mode="relay").inc()
    except asyncio.CancelledError:
        STREAM_DISCONNECTS.labels(mode="relay").inc()
        raise
    except Exception as exc:
        logger.warning("stream.relay.failed", error=str(exc))
        yield stream.emit(Error(_error_message(exc)))
        return

    yield stream.emit(Complete("".join(received)))
