"""Additive relevance scoring for component search."""

from __future__ import annotations

from blazorseek.models import ComponentInfo, SearchFields

EXACT_NAME_SCORE = 100
NAME_SCORE = 50
SUMMARY_SCORE = 30
DESCRIPTION_SCORE = 20
PARAMETER_NAME_SCORE = 10
PARAMETER_DESCRIPTION_SCORE = 5
EXAMPLE_NAME_SCORE = 5


def _contains(text: str | None, query: str) -> bool:
    return text is not None and query in text.lower()


def calculate_search_score(component: ComponentInfo, query: str, fields: SearchFields) -> int:
    """Score one component against a query (matched case-insensitively).

    Zero means no match.
    """
    query = query.lower()
    score = 0

    if SearchFields.NAME in fields and _contains(component.name, query):
        score += EXACT_NAME_SCORE if component.name.lower() == query else NAME_SCORE

    if SearchFields.DESCRIPTION in fields:
        if _contains(component.summary, query):
            score += SUMMARY_SCORE
        if _contains(component.description, query):
            score += DESCRIPTION_SCORE

    if SearchFields.PARAMETERS in fields:
        for param in component.parameters:
            if _contains(param.name, query):
                score += PARAMETER_NAME_SCORE
            if _contains(param.description, query):
                score += PARAMETER_DESCRIPTION_SCORE

    if SearchFields.EXAMPLES in fields:
        for example in component.examples:
            if _contains(example.name, query):
                score += EXAMPLE_NAME_SCORE

    return score


def rank_components(
    components: list[ComponentInfo], query: str, fields: SearchFields, max_results: int
) -> list[tuple[ComponentInfo, int]]:
    """Matching components with scores, best first; ties keep input order."""
    scored = [(c, calculate_search_score(c, query, fields)) for c in components]
    matches = [pair for pair in scored if pair[1] > 0]
    matches.sort(key=lambda pair: pair[1], reverse=True)
    return matches[:max_results]
