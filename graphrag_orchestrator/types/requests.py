"""
Request/Response Types

Schema exposed by the orchestrator to its transport adapters. Field names
serialize to camelCase on the wire.

    Request:  { user: { id }, conversationId, query,
                context: { tenantId, locale } }
    Response: { answer, citations: [ { title, url, chunkId } ],
                trace?: { linkedEntities, expandedEntityIds, searchFilter } }
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from graphrag_orchestrator.types.results import Citation


class UserInfo(BaseModel):
    """Caller identity."""

    id: str


class ContextInfo(BaseModel):
    """Tenant and locale of the request."""

    model_config = ConfigDict(populate_by_name=True)

    tenant_id: str = Field(..., alias="tenantId")
    locale: str


class AskRequest(BaseModel):
    """A question submitted to the pipeline."""

    model_config = ConfigDict(populate_by_name=True)

    user: UserInfo
    conversation_id: str = Field(..., alias="conversationId")
    query: str
    context: ContextInfo


class Trace(BaseModel):
    """
    Diagnostic snapshot of intermediate pipeline state.

    Built once at the end of a request and frozen. Id lists are sorted so the
    trace is identical for identical set contents.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    linked_entities: list[str] = Field(default_factory=list, alias="linkedEntities")
    expanded_entity_ids: list[str] = Field(default_factory=list, alias="expandedEntityIds")
    search_filter: str = Field(default="", alias="searchFilter")


class AskResponse(BaseModel):
    """Answer, citations and (optionally) the trace."""

    model_config = ConfigDict(populate_by_name=True)

    answer: str
    citations: list[Citation] = Field(default_factory=list)
    trace: Trace | None = None

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase names, omitting an absent trace."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def without_trace(self) -> AskResponse:
        """Copy with the trace stripped, for end-user facing adapters."""
        return self.model_copy(update={"trace": None})
