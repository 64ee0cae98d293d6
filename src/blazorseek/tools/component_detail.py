"""Component listing and detail tools — render index entries as markdown."""

from __future__ import annotations

import logging

from blazorseek.errors import ToolError
from blazorseek.indexer.component_indexer import ComponentIndexer
from blazorseek.models import ComponentExample, ComponentInfo, ComponentParameter

logger = logging.getLogger(__name__)

_BOOL_TYPES = {"bool", "Boolean", "System.Boolean"}


def require_name(value: str | None, arg: str) -> str:
    if value is None or not str(value).strip():
        raise ToolError(f"{arg} is required.")
    return str(value).strip()


def require_component(indexer: ComponentIndexer, component_name: str | None) -> ComponentInfo:
    """Resolve a component or raise a ToolError pointing at list_components."""
    name = require_name(component_name, "component_name")
    component = indexer.get_component(name)
    if component is None:
        raise ToolError(
            f"Component '{name}' not found. Use list_components to see available components."
        )
    return component


def _cell(text: str | None) -> str:
    if not text:
        return ""
    return text.replace("|", "\\|").replace("\n", " ")


def usage_hint(param: ComponentParameter) -> str | None:
    """Razor attribute syntax for bool and enum-like parameters."""
    base = param.type.rstrip("?").strip()
    if base in _BOOL_TYPES:
        return f'{param.name}="true" or {param.name}="false"'
    default = param.default_value or ""
    if default.startswith(f"{base}.") and default != "null":
        return f'{param.name}="{default}"'
    if base.startswith("Bit") and "<" not in base and not base.endswith(("Options", "Item", "Args")):
        return f'{param.name}="{base}.<Value>"'
    return None


def format_example(example: ComponentExample, heading: str = "###") -> list[str]:
    lines = [f"{heading} {example.name}"]
    if example.description:
        lines.append(example.description)
    if example.features:
        lines.append(f"*Features:* {', '.join(example.features)}")
    if example.razor_markup:
        lines.extend(["", "```razor", example.razor_markup, "```"])
    if example.csharp_code:
        lines.extend(["", "```csharp", example.csharp_code, "```"])
    lines.append("")
    return lines


def list_components(indexer: ComponentIndexer, category: str | None = None) -> str:
    """All indexed components grouped by category, optionally for one category."""
    if category and category.strip():
        components = indexer.get_components_by_category(category)
        if not components:
            return f"No components found in category '{category.strip()}'. Use list_categories to see categories."
    else:
        components = indexer.get_all_components()
        if not components:
            return "No components are indexed."

    groups: dict[str, list[ComponentInfo]] = {}
    for c in components:
        groups.setdefault(c.category or "Uncategorized", []).append(c)

    lines = [f"# Bit BlazorUI components ({len(components)})", ""]
    for group in sorted(groups):
        lines.append(f"## {group}")
        for c in sorted(groups[group], key=lambda c: c.name.lower()):
            lines.append(f"- **{c.name}** — {c.summary}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def list_categories(indexer: ComponentIndexer) -> str:
    categories = indexer.get_categories()
    lines = ["# Component categories", ""]
    for cat in categories:
        indexed = len(indexer.get_components_by_category(cat.name))
        lines.append(f"- **{cat.title}** ({indexed} indexed) — {cat.description}")
    return "\n".join(lines) + "\n"


def get_component_detail(
    indexer: ComponentIndexer,
    component_name: str,
    include_api: bool | None = False,
    include_examples: bool | None = True,
) -> str:
    """Full description of one component. None flags fall back to their defaults."""
    include_api = False if include_api is None else include_api
    include_examples = True if include_examples is None else include_examples
    c = require_component(indexer, component_name)

    lines = [f"# {c.name}", "", c.summary, ""]
    lines.append(f"**Namespace:** {c.namespace}")
    if c.category:
        lines.append(f"**Category:** {c.category}")
    if c.base_type:
        lines.append(f"**Base type:** {c.base_type}")
    if c.documentation_url:
        lines.append(f"**Documentation:** {c.documentation_url}")
    if c.source_url:
        lines.append(f"**Source:** {c.source_url}")
    lines.append("")

    if c.description:
        lines.extend(["## Description", c.description, ""])

    if c.parameters:
        lines.extend(["## Parameters", "", "| Name | Type | Default | Description |", "|---|---|---|---|"])
        for p in c.parameters:
            flags = []
            if p.is_required:
                flags.append("required")
            if p.is_cascading:
                flags.append("cascading")
            suffix = f" ({', '.join(flags)})" if flags else ""
            lines.append(
                f"| {p.name}{suffix} | `{_cell(p.type)}` | {_cell(p.default_value)} | {_cell(p.description)} |"
            )
        lines.append("")

    if c.events:
        lines.append("## Events")
        for e in c.events:
            callback = f"EventCallback<{e.event_args_type}>" if e.event_args_type else "EventCallback"
            desc = f" — {e.description}" if e.description else ""
            lines.append(f"- `{e.name}` ({callback}){desc}")
        lines.append("")

    if c.methods:
        lines.append("## Methods")
        for m in c.methods:
            params = ", ".join(f"{p.type} {p.name}" for p in m.parameters)
            desc = f" — {m.description}" if m.description else ""
            lines.append(f"- `{m.return_type} {m.name}({params})`{desc}")
        lines.append("")

    if include_api:
        ref = indexer.get_api_reference(c.name)
        if ref is not None and ref.members:
            lines.extend(["## API Reference", "", "| Member | Kind | Type |", "|---|---|---|"])
            for member in ref.members:
                lines.append(f"| {member.name} | {member.member_type} | `{_cell(member.return_type)}` |")
            lines.append("")

    if include_examples and c.examples:
        lines.append("## Examples")
        lines.append("")
        for example in c.examples:
            lines.extend(format_example(example))

    if c.related_components:
        lines.append("## Related Components")
        lines.extend(f"- {name}" for name in c.related_components)
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def get_component_parameters(
    indexer: ComponentIndexer,
    component_name: str,
    filter: str | None = None,
) -> str:
    """Parameters of a component with Razor usage hints.

    ``filter`` matches a parameter's name, type or category (case-insensitive).
    """
    c = require_component(indexer, component_name)
    params = list(c.parameters)
    if filter and filter.strip():
        needle = filter.strip().lower()
        params = [
            p for p in params
            if needle in p.name.lower() or needle in p.type.lower()
            or (p.category and needle in p.category.lower())
        ]

    if not params:
        if filter:
            return f"{c.name} has no parameters matching '{filter.strip()}'."
        return f"{c.name} has no parameters."

    lines = [f"# {c.name} parameters ({len(params)})", ""]
    for p in params:
        lines.append(f"### {p.name}")
        lines.append(f"- **Type:** `{p.type}`")
        if p.default_value:
            lines.append(f"- **Default:** `{p.default_value}`")
        if p.is_required:
            lines.append("- **Required**")
        if p.is_cascading:
            lines.append("- **Cascading parameter**")
        if p.category:
            lines.append(f"- **Category:** {p.category}")
        if p.description:
            lines.append(f"- {p.description}")
        hint = usage_hint(p)
        if hint:
            lines.append(f"- **Usage:** `{hint}`")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def get_api_reference(indexer: ComponentIndexer, type_name: str) -> str:
    name = require_name(type_name, "type_name")
    ref = indexer.get_api_reference(name)
    if ref is None:
        raise ToolError(f"Type '{name}' not found. Use list_components to see available components.")

    lines = [f"# {ref.type_name} API", "", f"**Namespace:** {ref.namespace}"]
    if ref.base_type:
        lines.append(f"**Base type:** {ref.base_type}")
    if ref.summary:
        lines.extend(["", ref.summary])
    lines.append("")

    for kind, title in (("Property", "Properties"), ("Event", "Events"), ("Method", "Methods")):
        members = [m for m in ref.members if m.member_type == kind]
        if not members:
            continue
        lines.append(f"## {title}")
        for m in members:
            signature = f"({m.parameter_signature or ''})" if kind == "Method" else ""
            desc = f" — {m.description}" if m.description else ""
            lines.append(f"- `{m.return_type} {m.name}{signature}`{desc}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"
