"""
Entity Filter Expressions

The single place where the retrieval filter string is built. The Retriever
applies it and the Orchestrator copies it into the trace, so both must call
build_entity_filter() rather than formatting the expression themselves.

Format (OData collection predicate):
    entityIds/any(e: e eq 'svc-a' or e eq 'team-b')

Ids are sorted before serializing so equal sets always produce identical
strings, and single quotes are escaped by doubling.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

FILTER_FIELD = "entityIds"

_FILTER_PATTERN = re.compile(rf"^{FILTER_FIELD}/any\(e: (?P<body>.*)\)$", re.DOTALL)
_TERM_PATTERN = re.compile(r"e eq '((?:[^']|'')*)'")


def _quote(entity_id: str) -> str:
    return "'" + entity_id.replace("'", "''") + "'"


def build_entity_filter(entity_ids: Iterable[str]) -> str | None:
    """
    Build the "chunk mentions any of these entities" predicate.

    Args:
        entity_ids: Entity ids to match (any iterable; order is irrelevant)

    Returns:
        Filter expression, or None when there are no ids (unfiltered search)
    """
    ids = sorted(set(entity_ids))
    if not ids:
        return None
    terms = " or ".join(f"e eq {_quote(i)}" for i in ids)
    return f"{FILTER_FIELD}/any(e: {terms})"


def parse_entity_filter(expression: str | None) -> set[str] | None:
    """
    Inverse of build_entity_filter().

    Returns:
        The entity ids in the expression, or None for an empty/absent filter

    Raises:
        ValueError: If the expression is not an entity filter
    """
    if not expression:
        return None
    match = _FILTER_PATTERN.match(expression.strip())
    if match is None:
        raise ValueError(f"Unsupported filter expression: {expression!r}")
    return {term.replace("''", "'") for term in _TERM_PATTERN.findall(match.group("body"))}
