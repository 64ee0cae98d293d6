"""Example tools — list and fetch a component's demo examples."""

from __future__ import annotations

from blazorseek.errors import ToolError
from blazorseek.indexer.component_indexer import ComponentIndexer
from blazorseek.models import ComponentExample
from blazorseek.tools.component_detail import format_example, require_component, require_name

MIN_EXAMPLES = 1
MAX_EXAMPLES = 20
DEFAULT_EXAMPLES = 5


def _matches(example: ComponentExample, needle: str) -> bool:
    haystacks = [example.name, example.description, example.razor_markup, example.csharp_code]
    haystacks.extend(example.features)
    return any(h and needle in h.lower() for h in haystacks)


def get_component_examples(
    indexer: ComponentIndexer,
    component_name: str,
    max_examples: int | None = DEFAULT_EXAMPLES,
    filter: str | None = None,
) -> str:
    """Up to ``max_examples`` examples, optionally only those mentioning ``filter``."""
    require_name(component_name, "component_name")
    max_examples = DEFAULT_EXAMPLES if max_examples is None else max_examples
    if not MIN_EXAMPLES <= max_examples <= MAX_EXAMPLES:
        raise ToolError(f"max_examples must be between {MIN_EXAMPLES} and {MAX_EXAMPLES}.")
    c = require_component(indexer, component_name)

    examples = list(c.examples)
    if filter and filter.strip():
        needle = filter.strip().lower()
        examples = [e for e in examples if _matches(e, needle)]
        if not examples:
            return f"No examples for {c.name} match '{filter.strip()}'."
    if not examples:
        return f"No examples available for {c.name}."

    shown = examples[:max_examples]
    lines = [f"# {c.name} Examples ({len(shown)} of {len(examples)})", ""]
    for example in shown:
        lines.extend(format_example(example, heading="##"))
    return "\n".join(lines).rstrip() + "\n"


def get_example_by_name(
    indexer: ComponentIndexer,
    component_name: str,
    example_name: str,
) -> str:
    """One example by name: exact (case-insensitive) match first, then substring."""
    wanted = require_name(example_name, "example_name").lower()
    c = require_component(indexer, component_name)

    match = next((e for e in c.examples if e.name.lower() == wanted), None)
    if match is None:
        match = next((e for e in c.examples if wanted in e.name.lower()), None)
    if match is None:
        available = ", ".join(e.name for e in c.examples) or "none"
        raise ToolError(
            f"Example '{example_name.strip()}' not found for {c.name}. Available examples: {available}."
        )

    lines = [f"# {c.name}: {match.name}", f"*Source:* {match.source_file}", ""]
    lines.extend(format_example(match, heading="##")[1:])
    return "\n".join(lines).rstrip() + "\n"
