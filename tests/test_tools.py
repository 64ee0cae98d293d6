"""Tests for the component query tools and the tool registry."""

from __future__ import annotations

import pytest

from blazorseek.errors import IndexNotBuiltError, ToolError
from blazorseek.indexer.component_indexer import ComponentIndexer
from blazorseek.indexer.pipeline import DOCS_ROOT
from blazorseek.models import ComponentEvent, ComponentMethod, MethodParameter, RazorDocResult
from blazorseek.tools import component_detail, component_examples, search_components
from blazorseek.tools.registry import MAX_RESULT_CHARS, ToolRegistry, UnknownToolError, build_tool_registry
from tests.helpers import (
    FakeCategoryMapper,
    FakeDocParser,
    FakeExampleExtractor,
    FakeRepository,
    FakeSourceParser,
    make_component_dir,
    make_example,
    param,
    parse_result,
    write_file,
)


def _button():
    return parse_result(
        "BitButton",
        base_type="BitComponentBase",
        summary="Buttons trigger actions.",
        parameters=(
            param("IsEnabled", "bool", default_value="true", description="Whether it is enabled."),
            param("Variant", "BitVariant?", description="The visual variant."),
            param("ButtonSize", "BitSize", default_value="BitSize.Medium"),
            param("Text", "string?", is_required=True),
            param("Dir", "BitDir?", is_cascading=True),
        ),
        events=(ComponentEvent("OnClick", "MouseEventArgs", "Raised on click."),),
        methods=(ComponentMethod("FocusAsync", "Task", parameters=(MethodParameter("preventScroll", "bool"),),
                                 is_async=True),),
    )


def _build_indexer(tmp_path, related=("BitTextField",)):
    repo = tmp_path / "repo"
    for category, name in (("Buttons", "Button"), ("Buttons", "ToggleButton"), ("Inputs", "TextField")):
        make_component_dir(repo, category, name)
    write_file(repo / DOCS_ROOT / "BitButtonDemo.razor")

    results = {
        "Button": _button(),
        "ToggleButton": parse_result("BitToggleButton", base_type="BitButton", summary="A toggle."),
        "TextField": parse_result("BitTextField", summary="Text input.", parameters=(param("Placeholder"),)),
    }
    docs = {
        "BitButtonDemo.razor": RazorDocResult(
            file_path="BitButtonDemo.razor", component_name="BitButton",
            description="Long button docs.", related_components=related,
        ),
    }
    examples = {
        "BitButton": [
            make_example("Example 1", razor_markup='<BitButton Variant="BitVariant.Fill" />',
                         features=("Variant", "Variants")),
            make_example("Example 2", razor_markup="<BitButton>Plain</BitButton>",
                         csharp_code="private void Go() { }"),
            make_example("Icon Example 1", razor_markup='<BitButton IconName="Add" />'),
        ],
    }
    idx = ComponentIndexer(
        FakeRepository(repo),
        source_parser=FakeSourceParser(results),
        doc_parser=FakeDocParser(docs),
        example_extractor=FakeExampleExtractor(examples),
        category_mapper=FakeCategoryMapper({"BitButton": "Buttons", "BitToggleButton": "Buttons",
                                            "BitTextField": "Inputs"}),
        max_workers=2,
    )
    idx.build_index()
    return idx


@pytest.fixture
def indexer(tmp_path):
    return _build_indexer(tmp_path)


@pytest.fixture
def registry(indexer):
    return build_tool_registry(indexer)


# ── Listing ──


class TestListComponents:
    def test_grouped_by_category(self, indexer):
        text = component_detail.list_components(indexer)
        assert text.startswith("# Bit BlazorUI components (3)")
        assert text.index("## Buttons") < text.index("## Inputs")
        assert "- **BitButton** — Buttons trigger actions." in text

    def test_single_category(self, indexer):
        text = component_detail.list_components(indexer, category="inputs")
        assert "BitTextField" in text
        assert "BitButton" not in text

    def test_unknown_category(self, indexer):
        assert "No components found in category 'Nope'" in component_detail.list_components(indexer, "Nope")

    def test_list_categories(self, indexer):
        text = component_detail.list_categories(indexer)
        assert "**Buttons** (2 indexed)" in text
        assert "**Inputs** (1 indexed)" in text


# ── Detail ──


class TestComponentDetail:
    def test_sections(self, indexer):
        text = component_detail.get_component_detail(indexer, "Button")
        assert text.startswith("# BitButton\n")
        assert "**Category:** Buttons" in text
        assert "**Base type:** BitComponentBase" in text
        assert "## Description\nLong button docs." in text
        assert "| Text (required) | `string?` |" in text
        assert "| Dir (cascading) |" in text
        assert "- `OnClick` (EventCallback<MouseEventArgs>) — Raised on click." in text
        assert "- `Task FocusAsync(bool preventScroll)`" in text
        assert "## Examples" in text
        assert "## Related Components\n- BitTextField" in text
        assert "## API Reference" not in text

    def test_flags(self, indexer):
        text = component_detail.get_component_detail(indexer, "BitButton", include_api=True, include_examples=False)
        assert "## API Reference" in text
        assert "| OnClick | Event | `EventCallback<MouseEventArgs>` |" in text
        assert "## Examples" not in text

    def test_none_flags_use_defaults(self, indexer):
        text = component_detail.get_component_detail(indexer, "BitButton", include_api=None, include_examples=None)
        assert "## Examples" in text
        assert "## API Reference" not in text

    def test_unknown_component(self, indexer):
        with pytest.raises(ToolError, match="Use list_components"):
            component_detail.get_component_detail(indexer, "BitNope")

    def test_blank_name(self, indexer):
        with pytest.raises(ToolError, match="component_name is required"):
            component_detail.get_component_detail(indexer, "  ")


class TestComponentParameters:
    def test_usage_hints(self, indexer):
        text = component_detail.get_component_parameters(indexer, "BitButton")
        assert '- **Usage:** `IsEnabled="true" or IsEnabled="false"`' in text
        assert '- **Usage:** `ButtonSize="BitSize.Medium"`' in text
        assert '- **Usage:** `Variant="BitVariant.<Value>"`' in text
        assert "- **Required**" in text
        assert "- **Cascading parameter**" in text

    def test_filter(self, indexer):
        text = component_detail.get_component_parameters(indexer, "BitButton", filter="bit")
        assert text.startswith("# BitButton parameters (3)")
        assert "### IsEnabled" not in text

    def test_filter_no_match(self, indexer):
        assert "no parameters matching 'zzz'" in component_detail.get_component_parameters(
            indexer, "BitButton", filter="zzz")

    def test_no_parameters(self, indexer):
        assert component_detail.get_component_parameters(indexer, "BitToggleButton") == (
            "BitToggleButton has no parameters."
        )


class TestApiReference:
    def test_grouped_members(self, indexer):
        text = component_detail.get_api_reference(indexer, "Button")
        assert text.startswith("# BitButton API")
        assert "## Properties" in text
        assert "- `Task FocusAsync(bool preventScroll)`" in text
        assert "- `EventCallback<MouseEventArgs> OnClick` — Raised on click." in text

    def test_unknown(self, indexer):
        with pytest.raises(ToolError, match="Type 'BitNope' not found"):
            component_detail.get_api_reference(indexer, "BitNope")


# ── Search / related ──


class TestSearchTool:
    def test_results(self, indexer):
        text = search_components.search_components(indexer, "button")
        lines = text.splitlines()
        assert lines[0] == "Search results for 'button' (2 result(s)):"
        assert "1. **BitButton** [Buttons]" in text

    def test_fields(self, indexer):
        text = search_components.search_components(indexer, "placeholder", fields="parameters")
        assert "**BitTextField**" in text
        assert "No components found" in search_components.search_components(indexer, "placeholder", fields="name")

    def test_invalid_fields(self, indexer):
        with pytest.raises(ToolError, match="Unknown search field"):
            search_components.search_components(indexer, "x", fields="colour")

    @pytest.mark.parametrize("max_results", [0, 51])
    def test_max_results_bounds(self, indexer, max_results):
        with pytest.raises(ToolError):
            search_components.search_components(indexer, "button", max_results=max_results)

    def test_blank_query(self, indexer):
        with pytest.raises(ToolError):
            search_components.search_components(indexer, " ")


class TestRelatedTool:
    def test_all(self, indexer):
        text = search_components.get_related_components(indexer, "Button")
        assert text.startswith("# Components related to BitButton (all)")
        assert "- **BitTextField** (linked)" in text
        assert "- **BitToggleButton** (same category, derives from it)" in text

    def test_linked_note_ignores_case(self, tmp_path):
        idx = _build_indexer(tmp_path, related=("bittextfield",))
        text = search_components.get_related_components(idx, "BitButton")
        assert "- **BitTextField** (linked)" in text

    def test_parent(self, indexer):
        text = search_components.get_related_components(indexer, "BitToggleButton", relationship="parent")
        assert "- **BitButton** (same category, base type)" in text

    def test_none_found(self, indexer):
        text = search_components.get_related_components(indexer, "BitTextField", relationship="child")
        assert text == "No related components found for BitTextField (child)."

    def test_invalid_relationship(self, indexer):
        with pytest.raises(ToolError, match="Unknown relationship"):
            search_components.get_related_components(indexer, "BitButton", relationship="cousin")


# ── Examples ──


class TestExampleTools:
    def test_default_limit(self, indexer):
        text = component_examples.get_component_examples(indexer, "BitButton")
        assert text.startswith("# BitButton Examples (3 of 3)")
        assert "```razor" in text
        assert "```csharp\nprivate void Go() { }\n```" in text
        assert "*Features:* Variant, Variants" in text

    def test_max_examples(self, indexer):
        text = component_examples.get_component_examples(indexer, "BitButton", max_examples=1)
        assert text.startswith("# BitButton Examples (1 of 3)")
        assert "## Example 2" not in text

    @pytest.mark.parametrize("max_examples", [0, 21])
    def test_bounds(self, indexer, max_examples):
        with pytest.raises(ToolError, match="between 1 and 20"):
            component_examples.get_component_examples(indexer, "BitButton", max_examples=max_examples)

    def test_filter(self, indexer):
        text = component_examples.get_component_examples(indexer, "BitButton", filter="iconname")
        assert text.startswith("# BitButton Examples (1 of 1)")
        assert "## Icon Example 1" in text

    def test_no_examples(self, indexer):
        assert component_examples.get_component_examples(indexer, "BitTextField") == (
            "No examples available for BitTextField."
        )

    def test_by_name_exact_before_substring(self, indexer):
        text = component_examples.get_example_by_name(indexer, "BitButton", "example 1")
        assert text.startswith("# BitButton: Example 1\n")

    def test_by_name_substring(self, indexer):
        text = component_examples.get_example_by_name(indexer, "BitButton", "icon")
        assert text.startswith("# BitButton: Icon Example 1\n")

    def test_by_name_missing(self, indexer):
        with pytest.raises(ToolError, match="Available examples: Example 1, Example 2, Icon Example 1"):
            component_examples.get_example_by_name(indexer, "BitButton", "Example 9")


# ── Registry ──


class TestRegistry:
    def test_all_tools_registered(self, registry):
        assert registry.tool_names == [
            "list_components", "list_categories", "get_component_detail", "get_component_parameters",
            "search_components", "get_component_examples", "get_example_by_name",
            "get_api_reference", "get_related_components",
        ]

    def test_declarations(self, registry):
        decl = {d["name"]: d for d in registry.get_declarations()}
        schema = decl["get_component_examples"]["parameters_json_schema"]
        assert schema["required"] == ["component_name"]
        assert schema["properties"]["max_examples"]["maximum"] == 20

    def test_execute(self, registry):
        assert registry.execute("get_component_detail", {"component_name": "button"}).startswith("# BitButton")

    def test_unknown_tool(self, registry):
        with pytest.raises(UnknownToolError):
            registry.execute("drop_tables", {})

    def test_bad_arguments(self, registry):
        with pytest.raises(ToolError, match="Invalid arguments for search_components"):
            registry.execute("search_components", {"q": "button"})

    @pytest.mark.parametrize("args", [
        {"query": "button", "max_results": "5"},
        {"query": 42},
        {"component_name": "BitButton"},
    ])
    def test_wrong_argument_types(self, registry, args):
        with pytest.raises(ToolError, match="Invalid arguments for search_components"):
            registry.execute("search_components", args)

    def test_wrong_flag_type(self, registry):
        with pytest.raises(ToolError, match="include_api"):
            registry.execute("get_component_detail", {"component_name": "BitButton", "include_api": "yes"})

    def test_null_optional_argument(self, registry):
        assert "BitButton" in registry.execute("search_components", {"query": "button", "max_results": None})

    def test_truncates_long_results(self):
        registry = ToolRegistry()
        registry.register("big", lambda: "x" * (MAX_RESULT_CHARS + 10), schema={}, description="big")
        result = registry.execute("big")
        assert result.endswith("... (truncated)")
        assert len(result) < MAX_RESULT_CHARS + 20

    def test_index_not_built_propagates(self, tmp_path):
        idx = ComponentIndexer(FakeRepository(tmp_path), category_mapper=FakeCategoryMapper({}))
        with pytest.raises(IndexNotBuiltError):
            build_tool_registry(idx).execute("list_components")
