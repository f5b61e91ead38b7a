"""
Result Types

Intermediate results passed between pipeline stages.

Retrieval Models:
    - SearchResult: One ranked chunk from the search index
    - GraphExpansionResult: Entity set and evidence grown by graph expansion
    - GraphContext: Optional textual summary of the expanded subgraph

Generation Models:
    - Citation: Source reference for one retrieved chunk
    - AnswerResult: Generated answer with citations
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from graphrag_orchestrator.types.entities import Relation

# -----------------------------------------------------------------------------
# Retrieval Models
# -----------------------------------------------------------------------------


class SearchResult(BaseModel):
    """
    A ranked chunk returned by hybrid retrieval.

    List position is retrieval rank (descending relevance) and becomes the
    citation index in the generated answer.
    """

    chunk_id: str
    content: str = ""
    title: str = ""
    url: str = ""
    score: float = 0.0


class GraphExpansionResult(BaseModel):
    """
    Result of bounded multi-hop expansion from seed entities.

    Attributes:
        expanded_entity_ids: Seeds plus every entity discovered within the hop budget
        evidence_chunk_ids: Evidence chunk ids from every relation touched
        relations: Distinct relations touched, for building graph context
    """

    expanded_entity_ids: set[str] = Field(default_factory=set)
    evidence_chunk_ids: set[str] = Field(default_factory=set)
    relations: list[Relation] = Field(default_factory=list)

    @classmethod
    def seeds_only(cls, seeds: set[str]) -> GraphExpansionResult:
        """The zero-hop result: seeds, no evidence."""
        return cls(expanded_entity_ids=set(seeds))

    def sorted_entity_ids(self) -> list[str]:
        """Expanded ids in canonical (sorted) order."""
        return sorted(self.expanded_entity_ids)


class GraphContext(BaseModel):
    """Entities and relationships appended to the generation prompt."""

    entity_list: list[str] = Field(default_factory=list)
    relationship_list: list[str] = Field(default_factory=list)

    @classmethod
    def from_expansion(cls, expansion: GraphExpansionResult) -> GraphContext:
        return cls(
            entity_list=expansion.sorted_entity_ids(),
            relationship_list=[r.describe() for r in expansion.relations],
        )

    def to_prompt_text(self) -> str:
        return (
            f"\n\nRelated Entities: {', '.join(self.entity_list)}\n"
            f"Relationships: {', '.join(self.relationship_list)}"
        )


# -----------------------------------------------------------------------------
# Generation Models
# -----------------------------------------------------------------------------


class Citation(BaseModel):
    """Source reference for one retrieved chunk."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    url: str
    chunk_id: str = Field(..., alias="chunkId")

    @classmethod
    def from_search_result(cls, result: SearchResult) -> Citation:
        return cls(title=result.title, url=result.url, chunk_id=result.chunk_id)


class AnswerResult(BaseModel):
    """
    Generated answer plus citations.

    Citations are one per retrieved chunk, in retrieval order. They are not
    checked against the [n] markers the model actually wrote.
    """

    answer: str
    citations: list[Citation] = Field(default_factory=list)
