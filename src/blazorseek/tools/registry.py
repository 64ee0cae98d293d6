"""Tool registry: explicit table of the query tools exposed over RPC."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import ConfigDict, ValidationError, validate_call

from blazorseek.errors import ToolError
from blazorseek.indexer.component_indexer import ComponentIndexer
from blazorseek.tools import component_detail, component_examples, search_components

logger = logging.getLogger(__name__)

MAX_RESULT_CHARS = 20000

# JSON arguments are taken as given: "5" is not an integer
_STRICT = ConfigDict(strict=True)


class UnknownToolError(LookupError):
    """No tool is registered under the requested name."""


@dataclass
class ToolDef:
    """Definition of a callable tool."""

    fn: Callable[..., str]
    validated: Callable[..., str]
    schema: dict
    description: str


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in e['loc']) or 'arguments'}: {e['msg']}" for e in error.errors()
    )


class ToolRegistry:
    """Registry of tools available to the RPC layer."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDef] = {}

    def register(self, name: str, fn: Callable[..., str], schema: dict, description: str) -> None:
        self._tools[name] = ToolDef(
            fn=fn, validated=validate_call(fn, config=_STRICT), schema=schema, description=description,
        )

    def execute(self, name: str, args: dict | None = None) -> str:
        """Execute a tool by name.

        Raises UnknownToolError for unregistered names and ToolError for
        arguments that do not fit the tool. Errors raised by the tool itself
        (ToolError, IndexNotBuiltError) propagate unchanged.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(f"Unknown tool: {name}")
        args = args or {}
        logger.debug("tool exec: %s(%s)", name, args)
        t0 = time.perf_counter()
        try:
            result = tool.validated(**args)
        except ValidationError as e:
            raise ToolError(f"Invalid arguments for {name}: {_describe(e)}") from e

        if len(result) > MAX_RESULT_CHARS:
            logger.debug("truncating %s result from %d to %d chars", name, len(result), MAX_RESULT_CHARS)
            result = result[:MAX_RESULT_CHARS] + "\n... (truncated)"

        logger.debug("tool done: %s -> %d chars (%.3fs)", name, len(result), time.perf_counter() - t0)
        return result

    def get_declarations(self) -> list[dict]:
        return [
            {"name": name, "description": t.description, "parameters_json_schema": t.schema}
            for name, t in self._tools.items()
        ]

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools.keys())


def _schema(properties: dict, required: list[str] | None = None) -> dict:
    schema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


_COMPONENT_NAME = {
    "type": "string",
    "description": "Component name, with or without the Bit prefix (e.g. 'BitButton' or 'Button').",
}


def build_tool_registry(indexer: ComponentIndexer) -> ToolRegistry:
    """Create a ToolRegistry with every component tool bound to ``indexer``."""
    registry = ToolRegistry()

    def _list_components(category: str | None = None) -> str:
        return component_detail.list_components(indexer, category=category)

    registry.register(
        "list_components",
        _list_components,
        schema=_schema({
            "category": {"type": "string", "description": "Only list components in this category."},
        }),
        description="Lists all indexed Bit BlazorUI components, grouped by category.",
    )

    def _list_categories() -> str:
        return component_detail.list_categories(indexer)

    registry.register(
        "list_categories",
        _list_categories,
        schema=_schema({}),
        description="Lists the component categories with their descriptions.",
    )

    def _get_component_detail(
        component_name: str, include_api: bool | None = False, include_examples: bool | None = True
    ) -> str:
        return component_detail.get_component_detail(
            indexer, component_name, include_api=include_api, include_examples=include_examples,
        )

    registry.register(
        "get_component_detail",
        _get_component_detail,
        schema=_schema({
            "component_name": _COMPONENT_NAME,
            "include_api": {"type": "boolean", "description": "Append the flat API member table."},
            "include_examples": {"type": "boolean", "description": "Include code examples (default true)."},
        }, required=["component_name"]),
        description="Returns summary, parameters, events, methods and examples of one component.",
    )

    def _get_component_parameters(component_name: str, filter: str | None = None) -> str:
        return component_detail.get_component_parameters(indexer, component_name, filter=filter)

    registry.register(
        "get_component_parameters",
        _get_component_parameters,
        schema=_schema({
            "component_name": _COMPONENT_NAME,
            "filter": {"type": "string", "description": "Only parameters whose name, type or category contains this."},
        }, required=["component_name"]),
        description="Lists a component's parameters with types, defaults and Razor usage hints.",
    )

    def _search_components(query: str, fields: str | None = None, max_results: int | None = 10) -> str:
        return search_components.search_components(indexer, query, fields=fields, max_results=max_results)

    registry.register(
        "search_components",
        _search_components,
        schema=_schema({
            "query": {"type": "string", "description": "Text to search for."},
            "fields": {
                "type": "string",
                "description": "Comma separated subset of: name, description, parameters, examples.",
            },
            "max_results": {"type": "integer", "minimum": 1, "maximum": search_components.MAX_SEARCH_RESULTS},
        }, required=["query"]),
        description="Searches components by name, description, parameters and examples; best matches first.",
    )

    def _get_component_examples(
        component_name: str, max_examples: int | None = component_examples.DEFAULT_EXAMPLES,
        filter: str | None = None,
    ) -> str:
        return component_examples.get_component_examples(
            indexer, component_name, max_examples=max_examples, filter=filter,
        )

    registry.register(
        "get_component_examples",
        _get_component_examples,
        schema=_schema({
            "component_name": _COMPONENT_NAME,
            "max_examples": {
                "type": "integer",
                "minimum": component_examples.MIN_EXAMPLES,
                "maximum": component_examples.MAX_EXAMPLES,
            },
            "filter": {"type": "string", "description": "Only examples mentioning this text."},
        }, required=["component_name"]),
        description="Returns Razor and C# code examples for a component.",
    )

    def _get_example_by_name(component_name: str, example_name: str) -> str:
        return component_examples.get_example_by_name(indexer, component_name, example_name)

    registry.register(
        "get_example_by_name",
        _get_example_by_name,
        schema=_schema({
            "component_name": _COMPONENT_NAME,
            "example_name": {"type": "string", "description": "Example name, e.g. 'Example 2'."},
        }, required=["component_name", "example_name"]),
        description="Returns one named example of a component.",
    )

    def _get_api_reference(type_name: str) -> str:
        return component_detail.get_api_reference(indexer, type_name)

    registry.register(
        "get_api_reference",
        _get_api_reference,
        schema=_schema({"type_name": _COMPONENT_NAME}, required=["type_name"]),
        description="Returns the flat API reference (properties, events, methods) of a component type.",
    )

    def _get_related_components(component_name: str, relationship: str | None = "all") -> str:
        return search_components.get_related_components(indexer, component_name, relationship=relationship)

    registry.register(
        "get_related_components",
        _get_related_components,
        schema=_schema({
            "component_name": _COMPONENT_NAME,
            "relationship": {"type": "string", "enum": ["all", "sibling", "parent", "child"]},
        }, required=["component_name"]),
        description="Finds linked, same-category, parent and derived components.",
    )

    return registry
