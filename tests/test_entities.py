"""Tests for entity building: ComponentInfo and ApiReference from parse results."""

from __future__ import annotations

from blazorseek.indexer.entities import (
    build_api_reference,
    build_component_info,
    documentation_url,
    source_url,
)
from blazorseek.models import ComponentEvent, ComponentMethod, MethodParameter
from tests.helpers import param, parse_result

REL = "src/BlazorUI/Bit.BlazorUI/Components/Buttons/Button"


class TestUrls:
    def test_documentation_url_uses_dir_name(self):
        assert documentation_url(REL, "https://docs.example/components") == "https://docs.example/components/button"

    def test_documentation_url_backslashes(self):
        assert documentation_url("Components\\Inputs\\TextField\\", "https://d/") == "https://d/textfield"

    def test_source_url(self):
        assert source_url(REL, "https://github.com/org/repo/tree/main/") == (
            "https://github.com/org/repo/tree/main/" + REL
        )


class TestBuildComponentInfo:
    def test_fields(self):
        result = parse_result(
            "BitButton", base_type="BitComponentBase",
            summary="A button.", remarks="Longer text.",
            parameters=(param("Text"),),
        )
        info = build_component_info(result, "Buttons", REL)
        assert info.name == "BitButton"
        assert info.namespace == "Bit.BlazorUI"
        assert info.summary == "A button."
        assert info.description == "Longer text."
        assert info.category == "Buttons"
        assert info.base_type == "BitComponentBase"
        assert info.parameters == (param("Text"),)
        assert info.examples == ()
        assert info.related_components == ()
        assert info.documentation_url.endswith("/button")
        assert info.source_url.endswith(REL)

    def test_defaults(self):
        info = build_component_info(parse_result("BitSpacer", namespace=None), None, "Components/Spacer")
        assert info.summary == "BitSpacer component"
        assert info.namespace == "Bit.BlazorUI"
        assert info.description is None
        assert info.category is None

    def test_deterministic(self):
        result = parse_result("BitButton", summary="A button.")
        assert build_component_info(result, "Buttons", REL) == build_component_info(result, "Buttons", REL)


class TestBuildApiReference:
    def test_members_in_order(self):
        result = parse_result(
            "BitButton",
            parameters=(param("Text", description="Label"),),
            events=(ComponentEvent("OnClick", "MouseEventArgs"), ComponentEvent("OnHover")),
            methods=(
                ComponentMethod("FocusAsync", "Task", parameters=(
                    MethodParameter("preventScroll", "bool"), MethodParameter("delay", "int"),
                )),
                ComponentMethod("Reset", "void"),
            ),
        )
        ref = build_api_reference(result)
        assert ref.type_name == "BitButton"
        assert [(m.name, m.member_type, m.return_type) for m in ref.members] == [
            ("Text", "Property", "string"),
            ("OnClick", "Event", "EventCallback<MouseEventArgs>"),
            ("OnHover", "Event", "EventCallback"),
            ("FocusAsync", "Method", "Task"),
            ("Reset", "Method", "void"),
        ]
        assert ref.members[0].description == "Label"
        assert ref.members[3].parameter_signature == "bool preventScroll, int delay"
        assert ref.members[4].parameter_signature is None

    def test_empty(self):
        ref = build_api_reference(parse_result("BitEmpty"))
        assert ref.members == ()
        assert ref.namespace == "Bit.BlazorUI"
