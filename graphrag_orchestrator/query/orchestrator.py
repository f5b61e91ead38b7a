"""
GraphRAG Orchestrator

Orchestrates the question-answering pipeline:
    1. Linking: Resolve query text to seed entities
    2. Expanding: Multi-hop graph expansion from the seeds
    3. Retrieving: Hybrid search filtered to the expanded entities
    4. Generating: Cited answer synthesis from retrieved chunks
    5. Completed: Response and trace assembly

States advance strictly in that order (Idle -> ... -> Completed), once each,
with no retries or branches. Every stage degrades to a safe default on
collaborator failure, so a request always completes with a fully built
response unless it is cancelled, rejected as invalid, or hits an unexpected
error.

Error surface:
    - InvalidRequestError: missing/blank query, raised before any stage runs
    - asyncio.CancelledError: propagated unchanged from whichever stage is running
    - OrchestrationError: anything unexpected, wrapping the original exception

Concurrency:
    Per-request state lives in a _PipelineRun created inside run(). The
    Orchestrator itself only holds collaborators and configuration, so one
    instance can serve many concurrent requests.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from graphrag_orchestrator.config.settings import OrchestratorConfig
from graphrag_orchestrator.errors import InvalidRequestError, OrchestrationError
from graphrag_orchestrator.query.answer_generator import AnswerGenerator
from graphrag_orchestrator.query.entity_linker import EntityLinker
from graphrag_orchestrator.query.filters import build_entity_filter
from graphrag_orchestrator.query.graph_expander import GraphExpander
from graphrag_orchestrator.query.retriever import Retriever
from graphrag_orchestrator.query.types import (
    PIPELINE_ORDER,
    PipelineResult,
    PipelineStage,
    StageOutcome,
)
from graphrag_orchestrator.types.requests import AskRequest, AskResponse, Trace
from graphrag_orchestrator.types.results import GraphContext

if TYPE_CHECKING:
    from graphrag_orchestrator.providers.base import (
        EntityStore,
        GraphStore,
        LLMProvider,
        SearchIndex,
    )

logger = logging.getLogger(__name__)


class _PipelineRun:
    """Per-request state machine: current state, visited states, stage outcomes."""

    def __init__(self) -> None:
        self.state = PipelineStage.IDLE
        self.states: list[PipelineStage] = [PipelineStage.IDLE]
        self.outcomes: list[StageOutcome] = []
        self.timing: dict[str, int] = {}

    def advance(self, to: PipelineStage) -> None:
        position = PIPELINE_ORDER.index(self.state) + 1
        if position >= len(PIPELINE_ORDER) or PIPELINE_ORDER[position] != to:
            raise RuntimeError(f"Illegal pipeline transition {self.state.value} -> {to.value}")
        self.state = to
        self.states.append(to)

    def record(self, outcome: StageOutcome) -> None:
        self.outcomes.append(outcome)
        self.timing[outcome.stage.value] = outcome.elapsed_ms
        if outcome.degraded:
            logger.warning(f"Stage {outcome.stage.value} degraded: {outcome.error}")


class Orchestrator:
    """
    GraphRAG question-answering pipeline.

    Composes entity linking, graph expansion, retrieval and answer
    generation over the supplied collaborators.
    """

    def __init__(
        self,
        entity_store: "EntityStore",
        graph_store: "GraphStore",
        search_index: "SearchIndex",
        llm: "LLMProvider",
        config: OrchestratorConfig | None = None,
    ) -> None:
        """
        Initialize orchestrator with collaborators and configuration.

        Args:
            entity_store: Entity lookup for linking
            graph_store: Relation lookup for expansion
            search_index: Hybrid chunk search
            llm: LLM provider for answer generation
            config: Optional configuration (defaults read from environment).
                Copied on construction; build a new Orchestrator to change it.
        """
        self._config = (config or OrchestratorConfig()).with_overrides()

        # Initialize components
        self.linker = EntityLinker(entity_store)
        self.expander = GraphExpander(graph_store, concurrency=self._config.expansion_concurrency)
        self.retriever = Retriever(search_index)
        self.generator = AnswerGenerator(
            llm,
            model=self._config.llm_model,
            temperature=self._config.answer_temperature,
            max_tokens=self._config.answer_max_tokens,
        )

    @property
    def config(self) -> OrchestratorConfig:
        """A copy of the configuration in effect (changes to it are not applied)."""
        return self._config.with_overrides()

    async def process_query(self, request: AskRequest | dict[str, Any]) -> AskResponse:
        """
        Answer a request.

        Args:
            request: AskRequest or its wire-format dict

        Returns:
            AskResponse (possibly degraded, never partially built)

        Raises:
            InvalidRequestError: Missing or blank query
            OrchestrationError: Unexpected failure
            asyncio.CancelledError: The request was cancelled
        """
        result = await self.run(request)
        return result.response

    async def run(self, request: AskRequest | dict[str, Any]) -> PipelineResult:
        """
        Execute the pipeline and return the response with stage diagnostics.

        Raises:
            InvalidRequestError: Missing or blank query
            OrchestrationError: Unexpected failure
            asyncio.CancelledError: The request was cancelled
        """
        request = self._validate(request)

        logger.info(
            f"Processing query for user {request.user.id} "
            f"in conversation {request.conversation_id}"
        )

        run = _PipelineRun()
        try:
            response = await self._execute(request, run)
        except asyncio.CancelledError:
            logger.info(f"Query cancelled during {run.state.value}")
            raise
        except Exception as e:
            logger.error(f"Unexpected error during {run.state.value}: {e}")
            raise OrchestrationError() from e

        logger.info(
            f"Query processed with {len(response.citations)} citations "
            f"in {sum(run.timing.values())}ms"
        )
        return PipelineResult(
            response=response,
            stages=run.outcomes,
            states=run.states,
            timing=run.timing,
        )

    async def _execute(self, request: AskRequest, run: _PipelineRun) -> AskResponse:
        query = request.query
        config = self._config

        # Phase 1: Linking
        run.advance(PipelineStage.LINKING)
        linked = await self.linker.link(query)
        run.record(linked)

        # Phase 2: Expanding
        run.advance(PipelineStage.EXPANDING)
        expansion = await self.expander.expand(linked.value, max_hops=config.max_hops)
        run.record(expansion)

        # Phase 3: Retrieving
        run.advance(PipelineStage.RETRIEVING)
        chunks = await self.retriever.retrieve(
            query, expansion.value.expanded_entity_ids, top_k=config.top_k
        )
        run.record(chunks)

        # Phase 4: Generating
        run.advance(PipelineStage.GENERATING)
        graph_context = (
            GraphContext.from_expansion(expansion.value)
            if config.include_graph_context
            else None
        )
        answer = await self.generator.generate(query, chunks.value, graph_context)
        run.record(answer)

        # Phase 5: Completed
        run.advance(PipelineStage.COMPLETED)
        trace = self.build_trace(linked.value, expansion.value.expanded_entity_ids)

        return AskResponse(
            answer=answer.value.answer,
            citations=answer.value.citations,
            trace=trace if config.include_trace else None,
        )

    @staticmethod
    def build_trace(linked_ids: set[str], expanded_ids: set[str]) -> Trace:
        """
        Snapshot linked/expanded ids and the applied search filter.

        The filter comes from the same builder the Retriever uses, so it is
        byte-identical to what was sent to the index ("" when unfiltered).
        """
        return Trace(
            linked_entities=sorted(linked_ids),
            expanded_entity_ids=sorted(expanded_ids),
            search_filter=build_entity_filter(expanded_ids) or "",
        )

    @staticmethod
    def _validate(request: AskRequest | dict[str, Any]) -> AskRequest:
        if isinstance(request, dict):
            try:
                request = AskRequest.model_validate(request)
            except ValidationError as e:
                raise InvalidRequestError(f"Invalid request: {e}") from e
        if not isinstance(request, AskRequest):
            raise InvalidRequestError(f"Unsupported request type: {type(request).__name__}")
        if not request.query or not request.query.strip():
            raise InvalidRequestError("Query is required")
        return request


async def ask(
    orchestrator: Orchestrator,
    query: str,
    *,
    user_id: str = "anonymous",
    conversation_id: str = "",
    tenant_id: str = "default",
    locale: str = "en-US",
) -> AskResponse:
    """
    Convenience wrapper building an AskRequest from plain arguments.

    Example:
        >>> response = await ask(orchestrator, "Which team owns the billing service?")
        >>> print(response.answer)
    """
    request = AskRequest(
        user={"id": user_id},
        conversation_id=conversation_id,
        query=query,
        context={"tenant_id": tenant_id, "locale": locale},
    )
    return await orchestrator.process_query(request)
