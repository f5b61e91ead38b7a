"""
Chunk Types

A chunk is the unit of retrieval: a document fragment tagged with the
entities it mentions. Chunks are produced by the search index at query time
and are never persisted by the pipeline.
"""

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """
    A retrievable document fragment.

    Attributes:
        id: Chunk identifier (becomes the citation chunk id)
        content: Text content
        title: Parent document title
        url: Source URL
        entity_ids: Entities mentioned in this chunk (used for filtered search)
        content_vector: Optional embedding for vector search
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    content: str
    title: str = ""
    url: str = ""
    entity_ids: list[str] = Field(default_factory=list, alias="entityIds")
    content_vector: list[float] | None = Field(default=None, alias="contentVector")
