"""Component metadata entities produced by the indexer and served by the tools."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ComponentParameter:
    name: str
    type: str
    description: str | None = None
    default_value: str | None = None
    is_required: bool = False
    is_cascading: bool = False
    category: str | None = None


@dataclass(frozen=True)
class ComponentEvent:
    name: str
    event_args_type: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class MethodParameter:
    name: str
    type: str


@dataclass(frozen=True)
class ComponentMethod:
    name: str
    return_type: str
    description: str | None = None
    parameters: tuple[MethodParameter, ...] = ()
    is_async: bool = False


@dataclass(frozen=True)
class ComponentExample:
    name: str
    description: str | None
    razor_markup: str | None
    csharp_code: str | None
    source_file: str
    features: tuple[str, ...] = ()


@dataclass(frozen=True)
class ComponentInfo:
    """Everything known about one component.

    Instances are never mutated. Enrichment builds a new value with
    ``dataclasses.replace`` and swaps it into the store.
    """

    name: str
    namespace: str
    summary: str
    description: str | None = None
    category: str | None = None
    base_type: str | None = None
    parameters: tuple[ComponentParameter, ...] = ()
    events: tuple[ComponentEvent, ...] = ()
    methods: tuple[ComponentMethod, ...] = ()
    examples: tuple[ComponentExample, ...] = ()
    related_components: tuple[str, ...] = ()
    documentation_url: str | None = None
    source_url: str | None = None


@dataclass(frozen=True)
class ApiMember:
    name: str
    member_type: str  # "Property", "Event" or "Method"
    return_type: str
    description: str | None = None
    parameter_signature: str | None = None


@dataclass(frozen=True)
class ApiReference:
    type_name: str
    namespace: str
    summary: str | None = None
    base_type: str | None = None
    members: tuple[ApiMember, ...] = ()


@dataclass(frozen=True)
class ComponentCategory:
    name: str
    title: str
    description: str
    component_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class ComponentParseResult:
    """Raw output of the C# source parser for one component file."""

    class_name: str
    file_path: str
    namespace: str | None = None
    summary: str | None = None
    remarks: str | None = None
    base_type: str | None = None
    parameters: tuple[ComponentParameter, ...] = ()
    events: tuple[ComponentEvent, ...] = ()
    methods: tuple[ComponentMethod, ...] = ()


@dataclass(frozen=True)
class DocumentationSection:
    title: str
    content: str | None = None
    has_example: bool = False


@dataclass(frozen=True)
class RazorDocResult:
    file_path: str
    component_name: str | None = None
    title: str | None = None
    description: str | None = None
    sections: tuple[DocumentationSection, ...] = ()
    related_components: tuple[str, ...] = field(default=())
    usage_notes: tuple[str, ...] = ()


class SearchFields(enum.Flag):
    NAME = enum.auto()
    DESCRIPTION = enum.auto()
    PARAMETERS = enum.auto()
    EXAMPLES = enum.auto()
    ALL = NAME | DESCRIPTION | PARAMETERS | EXAMPLES

    @classmethod
    def parse(cls, value: str | None) -> SearchFields:
        """Parse a comma separated list such as ``"name,parameters"``."""
        if not value or not value.strip():
            return cls.ALL
        result = None
        for part in value.split(","):
            key = part.strip().upper()
            if not key:
                continue
            try:
                flag = cls[key]
            except KeyError:
                raise ValueError(
                    f"Unknown search field {part.strip()!r}. "
                    f"Use any of: name, description, parameters, examples, all"
                ) from None
            result = flag if result is None else result | flag
        return result if result is not None else cls.ALL


class RelationshipType(enum.Enum):
    ALL = "all"
    SIBLING = "sibling"
    PARENT = "parent"
    CHILD = "child"

    @classmethod
    def parse(cls, value: str | None) -> RelationshipType:
        if not value or not value.strip():
            return cls.ALL
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown relationship type {value!r}. Use one of: all, sibling, parent, child"
            ) from None
