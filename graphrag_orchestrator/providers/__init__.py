"""
Collaborator Providers

Provider-agnostic interfaces for the external systems the pipeline calls.

Modules:
    base: Abstract collaborator interfaces

Interfaces:
    - EntityStore: name-substring entity lookup
    - GraphStore: relation adjacency lookup
    - SearchIndex: hybrid ranked chunk search
    - LLMProvider: chat completion

Design:
    - All collaborators implement abstract interfaces
    - Concrete network clients are supplied by the host application
    - storage.memory.InMemoryKnowledgeStore is a reference implementation of
      the three knowledge-base interfaces

Example:
    >>> from graphrag_orchestrator.providers import GraphStore, LLMProvider
"""

from graphrag_orchestrator.providers.base import (
    EntityStore,
    GraphStore,
    LLMProvider,
    SearchIndex,
)

__all__ = ["EntityStore", "GraphStore", "SearchIndex", "LLMProvider"]
