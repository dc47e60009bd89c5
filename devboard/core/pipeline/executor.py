"""
Step graph definition and executor.

A pipeline is a fixed, acyclic graph of named async steps. Each step reads the
current state and returns a partial update; the executor merges the update,
then follows the step's outgoing edge (plain or conditional) until it reaches
``END``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Mapping, Optional, TypeVar, Union

from devboard.core.pipeline.state import PipelineState
from devboard.infra.config.logging_config import get_logger
from devboard.infra.observability.metrics import PIPELINE_ERRORS, PIPELINE_RUNS, observe_step

S = TypeVar("S", bound=PipelineState)

END = "__end__"

Step = Callable[[S], Awaitable[Dict[str, Any]]]
Router = Callable[[S], str]
StopProbe = Callable[[], Awaitable[bool]]
StepHook = Callable[[str, S], Awaitable[None]]

logger = get_logger("pipeline.executor")


class PipelineDefinitionError(Exception):
    """Raised when a graph is malformed or routes to an undeclared target."""


def continue_unless_error(state: PipelineState) -> str:
    """Binary router: stop the run as soon as any step has recorded an error."""
    return "end" if state.error else "continue"


@dataclass(frozen=True)
class _ConditionalEdge:
    router: Router
    targets: Mapping[str, str]


Edge = Union[str, _ConditionalEdge]


class StepGraph(Generic[S]):
    """Builder for a pipeline; ``compile()`` validates it and returns a runner."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._steps: Dict[str, Step] = {}
        self._edges: Dict[str, Edge] = {}
        self._entry: Optional[str] = None

    def add_step(self, name: str, step: Step) -> "StepGraph[S]":
        if name == END or name in self._steps:
            raise PipelineDefinitionError(f"Duplicate or reserved step name: {name}")
        self._steps[name] = step
        return self

    def set_entry_point(self, name: str) -> "StepGraph[S]":
        self._entry = name
        return self

    def add_edge(self, source: str, target: str) -> "StepGraph[S]":
        self._set_edge(source, target)
        return self

    def add_conditional_edges(
        self, source: str, router: Router, targets: Mapping[str, str]
    ) -> "StepGraph[S]":
        self._set_edge(source, _ConditionalEdge(router, dict(targets)))
        return self

    def _set_edge(self, source: str, edge: Edge) -> None:
        if source in self._edges:
            raise PipelineDefinitionError(f"Step {source!r} already has an outgoing edge")
        self._edges[source] = edge

    def compile(self) -> "CompiledPipeline[S]":
        if self._entry is None:
            raise PipelineDefinitionError(f"{self.name}: entry point not set")
        if self._entry not in self._steps:
            raise PipelineDefinitionError(f"{self.name}: unknown entry point {self._entry!r}")

        for source, edge in self._edges.items():
            if source not in self._steps:
                raise PipelineDefinitionError(f"{self.name}: edge from unknown step {source!r}")
            targets = [edge] if isinstance(edge, str) else list(edge.targets.values())
            for target in targets:
                if target != END and target not in self._steps:
                    raise PipelineDefinitionError(
                        f"{self.name}: edge {source!r} -> unknown step {target!r}"
                    )

        missing = [name for name in self._steps if name not in self._edges]
        if missing:
            raise PipelineDefinitionError(f"{self.name}: steps without outgoing edge: {missing}")

        self._check_acyclic()
        return CompiledPipeline(self.name, self._entry, dict(self._steps), dict(self._edges))

    def _check_acyclic(self) -> None:
        visiting: set[str] = set()
        done: set[str] = set()

        def successors(name: str) -> list[str]:
            edge = self._edges[name]
            targets = [edge] if isinstance(edge, str) else list(edge.targets.values())
            return [t for t in targets if t != END]

        def visit(name: str) -> None:
            if name in done:
                return
            if name in visiting:
                raise PipelineDefinitionError(f"{self.name}: cycle through step {name!r}")
            visiting.add(name)
            for nxt in successors(name):
                visit(nxt)
            visiting.discard(name)
            done.add(name)

        for name in self._steps:
            visit(name)


class CompiledPipeline(Generic[S]):
    """Runs a validated step graph against one state."""

    def __init__(
        self,
        name: str,
        entry: str,
        steps: Dict[str, Step],
        edges: Dict[str, Edge],
    ) -> None:
        self.name = name
        self.entry = entry
        self.steps = steps
        self.edges = edges

    def next_step(self, current: str, state: S) -> str:
        edge = self.edges[current]
        if isinstance(edge, str):
            return edge
        key = edge.router(state)
        try:
            return edge.targets[key]
        except KeyError:
            raise PipelineDefinitionError(
                f"{self.name}: router for {current!r} returned undeclared target {key!r}"
            ) from None

    async def run(
        self,
        state: S,
        *,
        should_stop: Optional[StopProbe] = None,
        on_step: Optional[StepHook] = None,
    ) -> S:
        """Execute from the entry step and return the final merged state.

        Never raises for step, hook or routing defects: those end the run with
        ``error`` set. ``should_stop`` is polled before every step; a probe
        that raises counts as a stop request.
        """
        PIPELINE_RUNS.labels(pipeline=self.name).inc()
        log = logger.bind(pipeline=self.name)
        current = self.entry
        executed: set[str] = set()

        while current != END:
            if await self._stop_requested(should_stop, log):
                log.info("pipeline.cancelled", before_step=current)
                return state.model_copy(update={"cancelled": True})
            if current in executed:
                # unreachable for compiled acyclic graphs
                return self._fail(state, current, "step re-entered")
            executed.add(current)

            t0 = time.monotonic()
            try:
                update = await self.steps[current](state)
            except Exception as exc:
                log.exception("pipeline.step.crashed", step=current)
                return self._fail(state, current, str(exc) or type(exc).__name__)
            finally:
                observe_step(self.name, current, time.monotonic() - t0)

            state = state.model_copy(update=update or {})
            log.info("pipeline.step.done", step=current, error=bool(state.error))
            if on_step is not None:
                try:
                    await on_step(current, state)
                except Exception as exc:
                    log.exception("pipeline.hook.failed", step=current)
                    return self._fail(state, current, f"step hook failed: {exc}")

            try:
                nxt = self.next_step(current, state)
            except PipelineDefinitionError as exc:
                log.error("pipeline.route.invalid", step=current, error=str(exc))
                return self._fail(state, current, str(exc))

            if state.error and nxt == END:
                PIPELINE_ERRORS.labels(pipeline=self.name, step=current).inc()
            current = nxt

        return state

    @staticmethod
    async def _stop_requested(should_stop: Optional[StopProbe], log) -> bool:
        if should_stop is None:
            return False
        try:
            return bool(await should_stop())
        except Exception:
            log.warning("pipeline.stop_probe.failed", exc_info=True)
            return True

    def _fail(self, state: S, step: str, reason: str) -> S:
        PIPELINE_ERRORS.labels(pipeline=self.name, step=step).inc()
        if state.error:
            return state
        return state.model_copy(update={"error": f"Unexpected failure in {step}: {reason}"})
