"""search_components / get_related_components tools."""

from __future__ import annotations

import logging

from blazorseek.errors import ToolError
from blazorseek.indexer.component_indexer import ComponentIndexer
from blazorseek.models import ComponentInfo, RelationshipType, SearchFields
from blazorseek.tools.component_detail import require_component, require_name

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 50


def format_results(results: list[tuple[ComponentInfo, int]], query: str) -> str:
    """Format scored search results as a numbered list."""
    if not results:
        return f"No components found for '{query}'."

    lines = [f"Search results for '{query}' ({len(results)} result(s)):", ""]
    for i, (c, score) in enumerate(results, 1):
        category = f" [{c.category}]" if c.category else ""
        lines.append(f"  {i}. **{c.name}**{category} (score {score})")
        lines.append(f"     {c.summary}")
    return "\n".join(lines) + "\n"


def search_components(
    indexer: ComponentIndexer,
    query: str,
    fields: str | None = None,
    max_results: int | None = 10,
) -> str:
    """Scored free-text search over names, descriptions, parameters and examples.

    Args:
        query: Text to look for (case-insensitive substring).
        fields: Comma separated subset of name, description, parameters,
            examples (default: all).
        max_results: 1..MAX_SEARCH_RESULTS.
    """
    query = require_name(query, "query")
    max_results = 10 if max_results is None else max_results
    if not 1 <= max_results <= MAX_SEARCH_RESULTS:
        raise ToolError(f"max_results must be between 1 and {MAX_SEARCH_RESULTS}.")
    try:
        search_fields = SearchFields.parse(fields)
    except ValueError as e:
        raise ToolError(str(e)) from e

    results = indexer.search_components_scored(query, search_fields, max_results)
    logger.debug("search %r (%s): %d result(s)", query, search_fields, len(results))
    return format_results(results, query)


def get_related_components(
    indexer: ComponentIndexer,
    component_name: str,
    relationship: str | None = "all",
) -> str:
    try:
        relationship_type = RelationshipType.parse(relationship)
    except ValueError as e:
        raise ToolError(str(e)) from e
    c = require_component(indexer, component_name)

    related = indexer.get_related_components(c.name, relationship_type)
    if not related:
        return f"No related components found for {c.name} ({relationship_type.value})."

    linked = {name.lower() for name in c.related_components}
    lines = [f"# Components related to {c.name} ({relationship_type.value})", ""]
    for r in related:
        notes = []
        if r.name.lower() in linked:
            notes.append("linked")
        if c.category and r.category and r.category.lower() == c.category.lower():
            notes.append("same category")
        if c.base_type and c.base_type.lower() == r.name.lower():
            notes.append("base type")
        if r.base_type and r.base_type.lower() == c.name.lower():
            notes.append("derives from it")
        suffix = f" ({', '.join(notes)})" if notes else ""
        lines.append(f"- **{r.name}**{suffix} — {r.summary}")
    return "\n".join(lines) + "\n"
