"""
In-Memory Knowledge Store

Reference implementation of EntityStore, GraphStore and SearchIndex backed
by plain dicts. Suitable for tests, demos and small embedded knowledge bases.

Search scoring is lexical term overlap between the query and each chunk's
title + content (fraction of query terms present). Entity filters produced
by build_entity_filter() are honoured; chunks with a zero score are dropped.

Example:
    >>> store = InMemoryKnowledgeStore()
    >>> store.add_entity(Entity(id="svc-billing", name="Billing Service", type="service"))
    >>> store.add_relation(Relation(
    ...     id="r1", source_entity_id="svc-billing", target_entity_id="team-payments",
    ...     relation_type="OWNED_BY", evidence_chunk_ids=["c1"],
    ... ))
    >>> orchestrator = Orchestrator(store, store, store, llm)
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from graphrag_orchestrator.providers.base import EntityStore, GraphStore, SearchIndex
from graphrag_orchestrator.query.filters import parse_entity_filter
from graphrag_orchestrator.types.chunks import Chunk
from graphrag_orchestrator.types.entities import Entity, Relation

_TOKEN_PATTERN = re.compile(r"\w+")


def _terms(text: str) -> set[str]:
    return set(_TOKEN_PATTERN.findall(text.lower()))


class InMemoryKnowledgeStore(EntityStore, GraphStore, SearchIndex):
    """Entities, relations and chunks held in process memory."""

    def __init__(
        self,
        entities: Iterable[Entity] = (),
        relations: Iterable[Relation] = (),
        chunks: Iterable[Chunk] = (),
    ) -> None:
        self._entities: dict[str, Entity] = {}
        self._relations: dict[str, Relation] = {}
        self._adjacency: dict[str, list[str]] = {}
        self._chunks: dict[str, Chunk] = {}

        self.add_entities(entities)
        self.add_relations(relations)
        self.add_chunks(chunks)

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def add_entity(self, entity: Entity) -> None:
        self._entities[entity.id] = entity

    def add_entities(self, entities: Iterable[Entity]) -> None:
        for entity in entities:
            self.add_entity(entity)

    def add_relation(self, relation: Relation) -> None:
        key = relation.key
        if key in self._relations:
            return
        self._relations[key] = relation
        for endpoint in {relation.source_entity_id, relation.target_entity_id}:
            self._adjacency.setdefault(endpoint, []).append(key)

    def add_relations(self, relations: Iterable[Relation]) -> None:
        for relation in relations:
            self.add_relation(relation)

    def add_chunk(self, chunk: Chunk) -> None:
        self._chunks[chunk.id] = chunk

    def add_chunks(self, chunks: Iterable[Chunk]) -> None:
        for chunk in chunks:
            self.add_chunk(chunk)

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    def get_entity(self, entity_id: str) -> Entity | None:
        return self._entities.get(entity_id)

    def get_chunk(self, chunk_id: str) -> Chunk | None:
        return self._chunks.get(chunk_id)

    def count_entities(self) -> int:
        return len(self._entities)

    def count_relations(self) -> int:
        return len(self._relations)

    def count_chunks(self) -> int:
        return len(self._chunks)

    # -------------------------------------------------------------------------
    # Collaborator Interfaces
    # -------------------------------------------------------------------------

    async def find_by_name_substring(self, query: str) -> list[str]:
        """Ids of entities whose name occurs in ``query`` (case-insensitive)."""
        haystack = query.lower()
        return [
            entity.id
            for entity in self._entities.values()
            if entity.name and entity.name.lower() in haystack
        ]

    async def neighbors_of(self, entity_id: str) -> list[Relation | dict[str, Any]]:
        """Relations with ``entity_id`` as either endpoint."""
        return [self._relations[key] for key in self._adjacency.get(entity_id, [])]

    async def search(
        self,
        query_text: str,
        filter: str | None,
        top_k: int,
    ) -> list[dict[str, Any]]:
        """
        Rank chunks by query-term overlap.

        Raises:
            ValueError: If ``filter`` is not an entity filter expression
        """
        allowed = parse_entity_filter(filter)
        query_terms = _terms(query_text)
        if not query_terms or top_k <= 0:
            return []

        scored: list[tuple[float, int, Chunk]] = []
        for position, chunk in enumerate(self._chunks.values()):
            if allowed is not None and not allowed.intersection(chunk.entity_ids):
                continue
            overlap = len(query_terms & _terms(f"{chunk.title} {chunk.content}"))
            if overlap:
                scored.append((overlap / len(query_terms), position, chunk))

        scored.sort(key=lambda item: (-item[0], item[1]))

        return [
            {
                "id": chunk.id,
                "content": chunk.content,
                "title": chunk.title,
                "url": chunk.url,
                "score": score,
            }
            for score, _, chunk in scored[:top_k]
        ]
