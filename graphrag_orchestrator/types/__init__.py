"""
Type Definitions

Pydantic models for all data structures.

Graph Models (owned by the graph store):
    - Entity, Relation

Retrieval Models:
    - Chunk, SearchResult, GraphExpansionResult, GraphContext

Generation Models:
    - Citation, AnswerResult

Request/Response Models:
    - AskRequest, UserInfo, ContextInfo, AskResponse, Trace
"""

from graphrag_orchestrator.types.chunks import Chunk
from graphrag_orchestrator.types.entities import Entity, Relation
from graphrag_orchestrator.types.requests import (
    AskRequest,
    AskResponse,
    ContextInfo,
    Trace,
    UserInfo,
)
from graphrag_orchestrator.types.results import (
    AnswerResult,
    Citation,
    GraphContext,
    GraphExpansionResult,
    SearchResult,
)

__all__ = [
    # Graph
    "Entity",
    "Relation",
    # Retrieval
    "Chunk",
    "SearchResult",
    "GraphExpansionResult",
    "GraphContext",
    # Generation
    "Citation",
    "AnswerResult",
    # Request/Response
    "AskRequest",
    "AskResponse",
    "ContextInfo",
    "Trace",
    "UserInfo",
]
