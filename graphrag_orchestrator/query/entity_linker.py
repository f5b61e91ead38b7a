"""
Entity Linker

Resolves free-text queries to seed entity ids.

Linking is a plain text-match boundary: the entity store returns every
entity whose display name occurs (case-insensitively) in the query. No NER
or LLM extraction happens here.

Failure policy:
    Any store failure (timeout, connection error, malformed response) is a
    soft failure: logged, and an empty seed set is returned. Linking never
    aborts the pipeline.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from graphrag_orchestrator.errors import MalformedResponseError
from graphrag_orchestrator.query.types import PipelineStage, StageOutcome, StageStatus

if TYPE_CHECKING:
    from graphrag_orchestrator.providers.base import EntityStore

logger = logging.getLogger(__name__)


class EntityLinker:
    """Links query text to knowledge graph entities via the entity store."""

    def __init__(self, entity_store: "EntityStore") -> None:
        self.entity_store = entity_store

    async def link(self, query: str) -> StageOutcome[set[str]]:
        """
        Link a query to entity ids.

        Args:
            query: Free-text user query

        Returns:
            StageOutcome whose value is the deduplicated set of matched ids
        """
        start = time.perf_counter_ns()

        if not query or not query.strip():
            return StageOutcome(
                stage=PipelineStage.LINKING,
                status=StageStatus.SKIPPED,
                value=set(),
            )

        try:
            entity_ids = await self.entity_store.find_by_name_substring(query)
            linked = self._validate(entity_ids)
        except Exception as e:
            logger.error(f"Error linking entities: {e}")
            return StageOutcome(
                stage=PipelineStage.LINKING,
                status=StageStatus.DEGRADED,
                value=set(),
                error=str(e),
                elapsed_ms=(time.perf_counter_ns() - start) // 1_000_000,
            )

        logger.info(f"Linked {len(linked)} entities from query")
        return StageOutcome(
            stage=PipelineStage.LINKING,
            value=linked,
            elapsed_ms=(time.perf_counter_ns() - start) // 1_000_000,
        )

    @staticmethod
    def _validate(entity_ids: object) -> set[str]:
        if not isinstance(entity_ids, (list, tuple, set, frozenset)):
            raise MalformedResponseError(
                f"Entity store returned {type(entity_ids).__name__}, expected a list of ids"
            )
        linked: set[str] = set()
        for entity_id in entity_ids:
            if not isinstance(entity_id, str):
                raise MalformedResponseError(f"Entity id is not a string: {entity_id!r}")
            linked.add(entity_id)
        return linked
