"""
Abstract Collaborator Interfaces

Contracts the pipeline consumes. Concrete clients (document database,
search service, LLM endpoint) live outside this package and implement these.

    EntityStore.find_by_name_substring(query) -> [entity_id]
    GraphStore.neighbors_of(entity_id)        -> [Relation | relation dict]
    SearchIndex.search(query, filter, top_k)  -> [result dict]
    LLMProvider.generate(prompt, system=...)  -> str

All methods are coroutines. Implementations should let
asyncio.CancelledError propagate so a cancelled request unwinds immediately.
"""

from abc import ABC, abstractmethod
from typing import Any

from graphrag_orchestrator.types.entities import Relation


class EntityStore(ABC):
    """Lookup of entities by display name."""

    @abstractmethod
    async def find_by_name_substring(self, query: str) -> list[str]:
        """
        Return ids of entities whose name occurs in the query text.

        Matching is case-insensitive containment of the entity's display
        name inside ``query``.
        """
        ...


class GraphStore(ABC):
    """Adjacency lookup over the relation graph."""

    @abstractmethod
    async def neighbors_of(self, entity_id: str) -> list[Relation | dict[str, Any]]:
        """
        Return every relation where ``entity_id`` is source or target.

        Dict records need at least ``sourceEntityId`` and ``targetEntityId``;
        ``evidenceChunkIds`` defaults to empty.
        """
        ...


class SearchIndex(ABC):
    """Hybrid (lexical + vector) ranked retrieval over chunks."""

    @abstractmethod
    async def search(
        self,
        query_text: str,
        filter: str | None,
        top_k: int,
    ) -> list[dict[str, Any]]:
        """
        Search chunks, optionally restricted by an entity filter expression.

        Result dict: {id, content, title, url, score}. ``filter=None`` means
        an unrestricted corpus-wide search.
        """
        ...


class LLMProvider(ABC):
    """Abstract interface for chat completion providers."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 1024,
        model: str | None = None,
    ) -> str:
        """
        Generate a completion.

        ``model`` selects the model for this call; None means the
        provider's default (``model_name``).
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Default model name."""
        ...
