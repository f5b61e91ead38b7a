"""
Graph Types

Entities and relations as served by the graph store collaborator.

Storage Models (owned by the graph store, read-only for the pipeline):
    - Entity: A named node in the knowledge graph
    - Relation: An edge between two entities carrying evidence chunk references

The pipeline never mutates these; it only reads entity ids and relation
endpoints/evidence during expansion.
"""

from pydantic import BaseModel, ConfigDict, Field


class Entity(BaseModel):
    """
    A node in the knowledge graph (a service, team, process, ...).

    Attributes:
        id: Unique identifier (identity)
        name: Display name, matched against query text during entity linking
        type: Entity classification
        aliases: Alternative names (descriptive only)
        metadata: Free-form string metadata (descriptive only)
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    type: str = ""
    aliases: list[str] = []
    metadata: dict[str, str] = {}


class Relation(BaseModel):
    """
    An edge between two entities.

    Traversal treats every relation as undirected: both endpoints are
    explored regardless of which one is the source.

    Graph stores are only required to return endpoints and evidence, so
    ``id`` and ``relation_type`` may be empty.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    source_entity_id: str = Field(..., alias="sourceEntityId")
    target_entity_id: str = Field(..., alias="targetEntityId")
    relation_type: str = Field(default="", alias="relationType")
    evidence_chunk_ids: list[str] = Field(default_factory=list, alias="evidenceChunkIds")

    @property
    def key(self) -> str:
        """Dedup key: the relation id, or the typed endpoint triple when unset."""
        if self.id:
            return self.id
        return f"{self.source_entity_id}|{self.relation_type}|{self.target_entity_id}"

    def describe(self) -> str:
        """Render as ``source -[TYPE]-> target`` for prompt context."""
        label = self.relation_type or "RELATED_TO"
        return f"{self.source_entity_id} -[{label}]-> {self.target_entity_id}"
