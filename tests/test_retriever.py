"""Tests for Retriever."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from graphrag_orchestrator.query.filters import build_entity_filter
from graphrag_orchestrator.query.retriever import Retriever
from graphrag_orchestrator.query.types import PipelineStage, StageStatus


def row(chunk_id: str, score: float, **extra) -> dict:
    return {
        "id": chunk_id,
        "content": f"content of {chunk_id}",
        "title": f"Doc {chunk_id}",
        "url": f"https://kb.example.com/{chunk_id}",
        "score": score,
        **extra,
    }


@pytest.fixture
def mock_search_index() -> MagicMock:
    """Create a mock search index."""
    index = MagicMock()
    index.search = AsyncMock(return_value=[row("c1", 0.9), row("c2", 0.5)])
    return index


class TestFilterApplication:
    """Test how entity ids become the search filter."""

    @pytest.mark.asyncio
    async def test_empty_entity_set_searches_unfiltered(self, mock_search_index):
        retriever = Retriever(mock_search_index)

        await retriever.retrieve("billing outage", set(), top_k=5)

        mock_search_index.search.assert_awaited_once_with("billing outage", None, 5)

    @pytest.mark.asyncio
    async def test_entity_set_becomes_filter(self, mock_search_index):
        retriever = Retriever(mock_search_index)

        await retriever.retrieve("billing outage", {"team-b", "svc-a"}, top_k=3)

        mock_search_index.search.assert_awaited_once_with(
            "billing outage",
            "entityIds/any(e: e eq 'svc-a' or e eq 'team-b')",
            3,
        )

    @pytest.mark.asyncio
    async def test_filter_matches_shared_builder(self, mock_search_index):
        retriever = Retriever(mock_search_index)
        ids = ["C", "A", "B"]

        await retriever.retrieve("q", ids, top_k=5)

        sent_filter = mock_search_index.search.call_args.args[1]
        assert sent_filter == build_entity_filter(ids)


class TestRanking:
    """Test result mapping, ordering and capping."""

    @pytest.mark.asyncio
    async def test_results_mapped(self, mock_search_index):
        retriever = Retriever(mock_search_index)

        outcome = await retriever.retrieve("q", {"A"}, top_k=5)

        assert outcome.status == StageStatus.OK
        assert outcome.stage == PipelineStage.RETRIEVING
        first = outcome.value[0]
        assert first.chunk_id == "c1"
        assert first.title == "Doc c1"
        assert first.url == "https://kb.example.com/c1"
        assert first.score == 0.9

    @pytest.mark.asyncio
    async def test_sorted_descending_and_capped(self, mock_search_index):
        mock_search_index.search.return_value = [
            row("c1", 0.2),
            row("c2", 0.9),
            row("c3", 0.5),
            row("c4", 0.7),
        ]
        retriever = Retriever(mock_search_index)

        outcome = await retriever.retrieve("q", {"A"}, top_k=3)

        assert [r.chunk_id for r in outcome.value] == ["c2", "c4", "c3"]

    @pytest.mark.asyncio
    async def test_equal_scores_keep_index_order(self, mock_search_index):
        mock_search_index.search.return_value = [row("c1", 0.5), row("c2", 0.5), row("c3", 0.5)]
        retriever = Retriever(mock_search_index)

        outcome = await retriever.retrieve("q", set(), top_k=5)

        assert [r.chunk_id for r in outcome.value] == ["c1", "c2", "c3"]

    @pytest.mark.asyncio
    async def test_chunk_id_key_accepted(self, mock_search_index):
        mock_search_index.search.return_value = [
            {"chunk_id": "c9", "content": "text", "score": 0.4},
            {"chunkId": "c10", "content": "text", "score": 0.3},
        ]
        retriever = Retriever(mock_search_index)

        outcome = await retriever.retrieve("q", set(), top_k=5)

        assert [r.chunk_id for r in outcome.value] == ["c9", "c10"]
        assert outcome.value[0].title == ""
        assert outcome.value[0].url == ""

    @pytest.mark.asyncio
    async def test_zero_top_k_skips_search(self, mock_search_index):
        retriever = Retriever(mock_search_index)

        outcome = await retriever.retrieve("q", {"A"}, top_k=0)

        assert outcome.status == StageStatus.SKIPPED
        assert outcome.value == []
        mock_search_index.search.assert_not_called()


class TestFailurePolicy:
    """Test soft failure handling."""

    @pytest.mark.asyncio
    async def test_search_failure_returns_empty(self, mock_search_index):
        mock_search_index.search.side_effect = TimeoutError("search timed out")
        retriever = Retriever(mock_search_index)

        outcome = await retriever.retrieve("q", {"A"}, top_k=5)

        assert outcome.status == StageStatus.DEGRADED
        assert outcome.value == []
        assert "search timed out" in outcome.error

    @pytest.mark.asyncio
    async def test_non_list_response_degrades(self, mock_search_index):
        mock_search_index.search.return_value = {"value": []}
        retriever = Retriever(mock_search_index)

        outcome = await retriever.retrieve("q", {"A"}, top_k=5)

        assert outcome.status == StageStatus.DEGRADED
        assert outcome.value == []

    @pytest.mark.asyncio
    async def test_row_without_id_degrades(self, mock_search_index):
        mock_search_index.search.return_value = [{"content": "orphan", "score": 1.0}]
        retriever = Retriever(mock_search_index)

        outcome = await retriever.retrieve("q", {"A"}, top_k=5)

        assert outcome.status == StageStatus.DEGRADED
        assert "no id" in outcome.error

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, mock_search_index):
        mock_search_index.search.side_effect = asyncio.CancelledError()
        retriever = Retriever(mock_search_index)

        with pytest.raises(asyncio.CancelledError):
            await retriever.retrieve("q", {"A"}, top_k=5)
