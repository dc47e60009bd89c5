from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Pipeline metrics
PIPELINE_RUNS = Counter(
    "devboard_pipeline_runs_total", "Pipeline runs started", ["pipeline"]
)
PIPELINE_ERRORS = Counter(
    "devboard_pipeline_errors_total", "Pipeline runs ending in error", ["pipeline", "step"]
)
STEP_DURATION_SECONDS = Histogram(
    "devboard_step_duration_seconds",
    "Pipeline step duration seconds",
    ["pipeline", "step"],
)

# Stream metrics
STREAM_CHUNKS = Counter(
    "devboard_stream_chunks_total", "Content chunks written to SSE streams", ["mode"]
)
STREAM_DISCONNECTS = Counter(
    "devboard_stream_disconnects_total", "Streams abandoned by the caller", ["mode"]
)

# LLM-level metrics
LLM_TOKENS_PROMPT = Counter(
    "devboard_llm_prompt_tokens_total", "Prompt tokens used", ["op"]
)
LLM_TOKENS_COMPLETION = Counter(
    "devboard_llm_completion_tokens_total", "Completion tokens used", ["op"]
)
LLM_LATENCY_SECONDS = Histogram(
    "devboard_llm_latency_seconds", "LLM call latency seconds", ["op"]
)


metrics_router = APIRouter()


@metrics_router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def observe_step(pipeline: str, step: str, seconds: float) -> None:
    STEP_DURATION_SECONDS.labels(pipeline=pipeline, step=step).observe(max(0.0, seconds))


def observe_llm_usage(
    op: str,
    prompt_toks: int | None,
    completion_toks: int | None,
    latency_sec: float | None,
) -> None:
    op = op or "unknown"
    if prompt_toks:
        LLM_TOKENS_PROMPT.labels(op=op).inc(prompt_toks)
    if completion_toks:
        LLM_TOKENS_COMPLETION.labels(op=op).inc(completion_toks)
    if latency_sec is not None:
        LLM_LATENCY_SECONDS.labels(op=op).observe(max(0.0, float(latency_sec)))
