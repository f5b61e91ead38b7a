"""
Answer Generator

Generates a cited answer from retrieved chunks.

Prompt Layout:
    [1] {title}
    {content}
    Source: {url}

    [2] ...
    (optional) Related Entities: ... / Relationships: ...

Chunk position in the context block is the citation index minus one, and
the citation list mirrors the chunk order exactly. Citations are emitted for
every chunk whether or not the model referenced it.

Failure policy:
    Any generation failure (provider error, malformed completion) yields a
    fixed apology and no citations. Errors are never propagated.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from graphrag_orchestrator.errors import MalformedResponseError
from graphrag_orchestrator.query.types import PipelineStage, StageOutcome, StageStatus
from graphrag_orchestrator.types.results import (
    AnswerResult,
    Citation,
    GraphContext,
    SearchResult,
)

if TYPE_CHECKING:
    from graphrag_orchestrator.providers.base import LLMProvider

logger = logging.getLogger(__name__)


APOLOGY_ANSWER = "I apologize, but I encountered an error while generating the answer."


ANSWER_SYSTEM_PROMPT = """You are an expert assistant that answers questions based on the provided context.
Use the context below to answer the user's question accurately and concisely.
Always cite your sources using [1], [2], etc. format matching the context numbering.
If the context doesn't contain enough information to answer the question, say so."""


class AnswerGenerator:
    """Builds numbered context, calls the LLM, and attaches citations."""

    def __init__(
        self,
        llm_provider: "LLMProvider",
        *,
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 1024,
    ) -> None:
        """
        Initialize generator.

        Args:
            llm_provider: LLM provider for generation
            model: Model requested per call (None = provider default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens in the answer
        """
        self.llm = llm_provider
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def model_name(self) -> str:
        """Model answering requests: the configured one, else the provider's default."""
        return self.model or self.llm.model_name

    async def generate(
        self,
        query: str,
        chunks: list[SearchResult],
        graph_context: GraphContext | None = None,
    ) -> StageOutcome[AnswerResult]:
        """
        Generate an answer for a query from retrieved chunks.

        Args:
            query: The user's question
            chunks: Retrieved chunks in rank order
            graph_context: Optional expanded-subgraph summary for the prompt

        Returns:
            StageOutcome whose value is the answer and its citations
        """
        start = time.perf_counter_ns()

        # Nothing retrieved: no grounded answer is possible
        if not chunks:
            logger.info("No chunks retrieved, skipping answer generation")
            return StageOutcome(
                stage=PipelineStage.GENERATING,
                status=StageStatus.SKIPPED,
                value=AnswerResult(answer=APOLOGY_ANSWER),
                error="no context chunks",
            )

        prompt = self.build_prompt(query, chunks, graph_context)

        try:
            completion = await self.llm.generate(
                prompt,
                system=ANSWER_SYSTEM_PROMPT,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                model=self.model,
            )
            answer = self._extract_answer(completion)
        except Exception as e:
            logger.error(f"Error generating answer: {e}")
            return StageOutcome(
                stage=PipelineStage.GENERATING,
                status=StageStatus.DEGRADED,
                value=AnswerResult(answer=APOLOGY_ANSWER),
                error=str(e),
                elapsed_ms=(time.perf_counter_ns() - start) // 1_000_000,
            )

        citations = [Citation.from_search_result(chunk) for chunk in chunks]
        logger.info(
            f"Generated answer with {len(citations)} citations using {self.model_name}"
        )

        return StageOutcome(
            stage=PipelineStage.GENERATING,
            value=AnswerResult(answer=answer, citations=citations),
            elapsed_ms=(time.perf_counter_ns() - start) // 1_000_000,
        )

    @staticmethod
    def build_context(chunks: list[SearchResult]) -> str:
        """Number chunks from 1 in rank order."""
        return "\n\n".join(
            f"[{idx}] {chunk.title}\n{chunk.content}\nSource: {chunk.url}"
            for idx, chunk in enumerate(chunks, start=1)
        )

    def build_prompt(
        self,
        query: str,
        chunks: list[SearchResult],
        graph_context: GraphContext | None = None,
    ) -> str:
        context = self.build_context(chunks)
        graph_info = graph_context.to_prompt_text() if graph_context is not None else ""

        return f"""Context:
{context}{graph_info}

Question: {query}

Please provide a comprehensive answer with citations."""

    @staticmethod
    def _extract_answer(completion: object) -> str:
        if not isinstance(completion, str):
            raise MalformedResponseError(
                f"LLM returned {type(completion).__name__}, expected text"
            )
        if not completion.strip():
            raise MalformedResponseError("LLM returned an empty completion")
        return completion.strip()
