"""
Retriever

Policy wrapper around the hybrid search index.

Builds the entity filter from the expanded entity set and delegates ranking
to the index. An empty entity set means an unfiltered, corpus-wide search
(never a filter that matches nothing).

Failure policy:
    Index failures are soft: logged, and an empty result list is returned.
    Downstream stages must tolerate zero chunks.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from graphrag_orchestrator.errors import MalformedResponseError
from graphrag_orchestrator.query.filters import build_entity_filter
from graphrag_orchestrator.query.types import PipelineStage, StageOutcome, StageStatus
from graphrag_orchestrator.types.results import SearchResult

if TYPE_CHECKING:
    from graphrag_orchestrator.providers.base import SearchIndex

logger = logging.getLogger(__name__)


class Retriever:
    """Entity-filtered hybrid retrieval."""

    def __init__(self, search_index: "SearchIndex") -> None:
        self.search_index = search_index

    async def retrieve(
        self,
        query: str,
        entity_ids: Iterable[str],
        top_k: int = 5,
    ) -> StageOutcome[list[SearchResult]]:
        """
        Retrieve chunks mentioning any of the given entities.

        Args:
            query: Search text
            entity_ids: Entities to restrict results to (empty = no restriction)
            top_k: Maximum results

        Returns:
            StageOutcome whose value is ranked by descending score, capped at top_k
        """
        start = time.perf_counter_ns()
        entity_ids = set(entity_ids)
        search_filter = build_entity_filter(entity_ids)

        if top_k <= 0:
            return StageOutcome(stage=PipelineStage.RETRIEVING, status=StageStatus.SKIPPED, value=[])

        try:
            rows = await self.search_index.search(query, search_filter, top_k)
            results = self._to_results(rows)
        except Exception as e:
            logger.error(f"Error retrieving chunks: {e}")
            return StageOutcome(
                stage=PipelineStage.RETRIEVING,
                status=StageStatus.DEGRADED,
                value=[],
                error=str(e),
                elapsed_ms=(time.perf_counter_ns() - start) // 1_000_000,
            )

        # Stable sort keeps the index's order among equal scores
        results.sort(key=lambda r: r.score, reverse=True)
        results = results[:top_k]

        logger.info(
            f"Retrieved {len(results)} chunks for query with {len(entity_ids)} entity filters"
        )
        return StageOutcome(
            stage=PipelineStage.RETRIEVING,
            value=results,
            elapsed_ms=(time.perf_counter_ns() - start) // 1_000_000,
        )

    @staticmethod
    def _to_results(rows: Any) -> list[SearchResult]:
        """Map index rows to SearchResult, accepting ``id`` or ``chunk_id`` keys."""
        if not isinstance(rows, list):
            raise MalformedResponseError(
                f"Search index returned {type(rows).__name__}, expected a list of rows"
            )

        results: list[SearchResult] = []
        for row in rows:
            if not isinstance(row, dict):
                raise MalformedResponseError(f"Unrecognized search row: {row!r}")
            chunk_id = row.get("id") or row.get("chunk_id") or row.get("chunkId")
            if not chunk_id:
                raise MalformedResponseError(f"Search row has no id: {row!r}")
            results.append(SearchResult(
                chunk_id=str(chunk_id),
                content=str(row.get("content") or ""),
                title=str(row.get("title") or ""),
                url=str(row.get("url") or ""),
                score=float(row.get("score") or 0.0),
            ))
        return results
