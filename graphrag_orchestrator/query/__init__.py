"""
GraphRAG Query Pipeline

Question answering over a knowledge graph and a chunk index.

Modules:
    orchestrator: Pipeline orchestrator (stage sequencing, trace assembly)
    entity_linker: Query text -> seed entity ids
    graph_expander: Bounded multi-hop BFS with evidence collection
    retriever: Entity-filtered hybrid retrieval
    answer_generator: Cited answer generation
    filters: Shared entity filter construction
    types: Stage outcome and pipeline result models

Pipeline Phases:
    1. Linking: Text-match query against entity names
    2. Expanding: Grow the entity set across relationship hops
    3. Retrieving: Hybrid search restricted to expanded entities
    4. Generating: LLM answer with one citation per retrieved chunk
    5. Completed: Response with trace {linkedEntities, expandedEntityIds, searchFilter}

Example:
    >>> from graphrag_orchestrator.query import Orchestrator
    >>> orchestrator = Orchestrator(store, store, store, llm)
    >>> response = await orchestrator.process_query(request)
    >>> print(response.answer)
    >>> print(response.trace.search_filter)
"""

from graphrag_orchestrator.query.answer_generator import (
    ANSWER_SYSTEM_PROMPT,
    APOLOGY_ANSWER,
    AnswerGenerator,
)
from graphrag_orchestrator.query.entity_linker import EntityLinker
from graphrag_orchestrator.query.filters import build_entity_filter, parse_entity_filter
from graphrag_orchestrator.query.graph_expander import GraphExpander
from graphrag_orchestrator.query.orchestrator import Orchestrator, ask
from graphrag_orchestrator.query.retriever import Retriever
from graphrag_orchestrator.query.types import (
    PipelineResult,
    PipelineStage,
    StageOutcome,
    StageStatus,
)

__all__ = [
    # Main pipeline
    "Orchestrator",
    "ask",
    # Components
    "EntityLinker",
    "GraphExpander",
    "Retriever",
    "AnswerGenerator",
    # Filters
    "build_entity_filter",
    "parse_entity_filter",
    # Result types
    "PipelineResult",
    "PipelineStage",
    "StageOutcome",
    "StageStatus",
    # Constants
    "ANSWER_SYSTEM_PROMPT",
    "APOLOGY_ANSWER",
]
