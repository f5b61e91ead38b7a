"""
GraphRAG Orchestrator - Knowledge Graph Question Answering

Answers natural-language questions by combining entity linking, bounded
knowledge-graph expansion, entity-filtered hybrid retrieval and LLM answer
generation into one traced pipeline.

Example:
    >>> from graphrag_orchestrator import Orchestrator, InMemoryKnowledgeStore
    >>> store = InMemoryKnowledgeStore(entities, relations, chunks)
    >>> orchestrator = Orchestrator(store, store, store, llm)
    >>> response = await orchestrator.process_query(request)
    >>> print(response.answer)
    >>> print(response.trace.expanded_entity_ids)

Main Classes:
    Orchestrator: Pipeline entry point
    OrchestratorConfig: Configuration management
    InMemoryKnowledgeStore: Reference knowledge-base backend
"""

__version__ = "0.1.0"

# Public API - lazy imports keep `import graphrag_orchestrator` cheap
def __getattr__(name: str):
    """Lazy import public API components."""

    if name == "Orchestrator":
        from graphrag_orchestrator.query.orchestrator import Orchestrator
        return Orchestrator

    if name == "ask":
        from graphrag_orchestrator.query.orchestrator import ask
        return ask

    if name == "OrchestratorConfig":
        from graphrag_orchestrator.config.settings import OrchestratorConfig
        return OrchestratorConfig

    if name == "InMemoryKnowledgeStore":
        from graphrag_orchestrator.storage.memory import InMemoryKnowledgeStore
        return InMemoryKnowledgeStore

    # Errors
    if name in ("GraphRAGError", "InvalidRequestError", "OrchestrationError", "MalformedResponseError"):
        from graphrag_orchestrator import errors
        return getattr(errors, name)

    # Types
    if name in (
        "Entity", "Relation", "Chunk", "SearchResult", "GraphExpansionResult",
        "Citation", "AnswerResult", "AskRequest", "AskResponse", "Trace",
    ):
        from graphrag_orchestrator import types
        return getattr(types, name)

    raise AttributeError(f"module 'graphrag_orchestrator' has no attribute {name!r}")


__all__ = [
    # Main classes
    "Orchestrator",
    "OrchestratorConfig",
    "InMemoryKnowledgeStore",

    # Convenience functions
    "ask",

    # Errors
    "GraphRAGError",
    "InvalidRequestError",
    "OrchestrationError",
    "MalformedResponseError",

    # Types
    "Entity",
    "Relation",
    "Chunk",
    "SearchResult",
    "GraphExpansionResult",
    "Citation",
    "AnswerResult",
    "AskRequest",
    "AskResponse",
    "Trace",

    # Version
    "__version__",
]
