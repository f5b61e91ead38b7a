"""
Graph Expander

Bounded multi-hop breadth-first expansion from seed entities.

Algorithm:
    visited  := seeds
    frontier := seeds
    evidence := {}
    repeat up to max_hops times, while frontier is non-empty:
        fetch all relations touching each frontier entity (either endpoint)
        for each relation:
            evidence |= relation.evidence_chunk_ids     (always)
            each endpoint not in visited -> visited, next frontier
        frontier := next frontier

Evidence is collected for every relation touched, including relations whose
endpoints were both already visited. Only entity discovery depends on
novelty.

Concurrency:
    Relation queries for the entities of one frontier are independent and run
    concurrently (bounded by a semaphore). Their results are merged after the
    whole hop has been fetched, in sorted frontier order, so the outcome does
    not depend on completion order.

Failure policy (all-or-nothing):
    If any relation query fails, the whole expansion is abandoned. Pending
    sibling queries are cancelled, partial state is discarded, and the
    result is the seed set with no evidence. Cancellation of the caller is
    never converted into a fallback; it propagates.

Complexity: O(hops x |frontier| x avg-degree), bounded by the number of
entities reachable within max_hops.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from graphrag_orchestrator.errors import MalformedResponseError
from graphrag_orchestrator.query.types import PipelineStage, StageOutcome, StageStatus
from graphrag_orchestrator.types.entities import Relation
from graphrag_orchestrator.types.results import GraphExpansionResult

if TYPE_CHECKING:
    from graphrag_orchestrator.providers.base import GraphStore

logger = logging.getLogger(__name__)


class GraphExpander:
    """
    Grows an entity set across relationship hops.

    Holds no per-call state: every expand() call allocates its own working
    sets, so one instance can serve concurrent requests.
    """

    def __init__(self, graph_store: "GraphStore", concurrency: int = 8) -> None:
        """
        Initialize expander.

        Args:
            graph_store: Relation adjacency lookup
            concurrency: Max relation queries in flight within one hop
        """
        self.graph_store = graph_store
        self.concurrency = max(1, concurrency)

    async def expand(
        self,
        seeds: set[str],
        max_hops: int = 2,
    ) -> StageOutcome[GraphExpansionResult]:
        """
        Expand seeds across up to ``max_hops`` relationship hops.

        Args:
            seeds: Seed entity ids (from entity linking)
            max_hops: Hop budget; values <= 0 return the seeds unchanged

        Returns:
            StageOutcome whose value always contains every seed
        """
        start = time.perf_counter_ns()
        seeds = set(seeds)

        if max_hops <= 0 or not seeds:
            return StageOutcome(
                stage=PipelineStage.EXPANDING,
                status=StageStatus.SKIPPED,
                value=GraphExpansionResult.seeds_only(seeds),
            )

        try:
            result, hops = await self._bfs(seeds, max_hops)
        except Exception as e:
            logger.error(f"Error expanding graph, falling back to {len(seeds)} seed entities: {e}")
            return StageOutcome(
                stage=PipelineStage.EXPANDING,
                status=StageStatus.DEGRADED,
                value=GraphExpansionResult.seeds_only(seeds),
                error=str(e),
                elapsed_ms=(time.perf_counter_ns() - start) // 1_000_000,
            )

        logger.info(
            f"Expanded {len(seeds)} entities to {len(result.expanded_entity_ids)} entities "
            f"with {len(result.evidence_chunk_ids)} evidence chunks in {hops} hops"
        )
        return StageOutcome(
            stage=PipelineStage.EXPANDING,
            value=result,
            elapsed_ms=(time.perf_counter_ns() - start) // 1_000_000,
        )

    async def _bfs(self, seeds: set[str], max_hops: int) -> tuple[GraphExpansionResult, int]:
        """Run the traversal. Raises on the first relation-query failure."""
        visited: set[str] = set(seeds)
        evidence: set[str] = set()
        relations: dict[str, Relation] = {}
        frontier: set[str] = set(seeds)
        semaphore = asyncio.Semaphore(self.concurrency)

        hops = 0
        for hop in range(max_hops):
            if not frontier:
                break
            hops = hop + 1

            ordered = sorted(frontier)
            neighbor_lists = await self._fetch_hop(ordered, semaphore)

            next_frontier: set[str] = set()
            for neighbors in neighbor_lists:
                for relation in neighbors:
                    evidence.update(relation.evidence_chunk_ids)
                    relations.setdefault(relation.key, relation)
                    for endpoint in (relation.source_entity_id, relation.target_entity_id):
                        if endpoint not in visited:
                            visited.add(endpoint)
                            next_frontier.add(endpoint)

            logger.debug(
                f"Hop {hop + 1}: {len(ordered)} frontier entities, "
                f"{len(next_frontier)} newly discovered"
            )
            frontier = next_frontier

        return (
            GraphExpansionResult(
                expanded_entity_ids=visited,
                evidence_chunk_ids=evidence,
                relations=list(relations.values()),
            ),
            hops,
        )

    async def _fetch_hop(
        self,
        entity_ids: list[str],
        semaphore: asyncio.Semaphore,
    ) -> list[list[Relation]]:
        """
        Fetch relations for every frontier entity concurrently.

        Results are returned in ``entity_ids`` order. On the first failure the
        remaining sibling queries are cancelled before the error propagates.
        """

        async def fetch_with_semaphore(entity_id: str) -> list[Relation]:
            async with semaphore:
                return await self._neighbors(entity_id)

        tasks = [asyncio.create_task(fetch_with_semaphore(eid)) for eid in entity_ids]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _neighbors(self, entity_id: str) -> list[Relation]:
        """Fetch and normalize relations touching one entity."""
        records = await self.graph_store.neighbors_of(entity_id)
        if not isinstance(records, list):
            raise MalformedResponseError(
                f"Graph store returned {type(records).__name__} for {entity_id!r}, expected a list"
            )
        return [self._to_relation(record) for record in records]

    @staticmethod
    def _to_relation(record: Relation | dict[str, Any]) -> Relation:
        if isinstance(record, Relation):
            return record
        if not isinstance(record, dict):
            raise MalformedResponseError(f"Unrecognized relation record: {record!r}")
        # Null evidence means "no evidence", not a malformed record
        data = {k: v for k, v in record.items() if v is not None}
        try:
            return Relation.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError(f"Invalid relation record: {e}") from e
