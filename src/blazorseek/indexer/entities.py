"""Turn parser output into the canonical ComponentInfo / ApiReference entities.

Pure functions: no I/O, no clock. The same parse result and path always
produce equal entities.
"""

from __future__ import annotations

from blazorseek import config
from blazorseek.models import (
    ApiMember,
    ApiReference,
    ComponentInfo,
    ComponentParseResult,
)

DEFAULT_NAMESPACE = "Bit.BlazorUI"


def documentation_url(source_relative_path: str, base_url: str | None = None) -> str:
    """Docs page URL from the component directory name (``.../Button`` -> ``.../button``)."""
    dir_name = source_relative_path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    base = (base_url if base_url is not None else config.DOCS_BASE_URL).rstrip("/")
    return f"{base}/{dir_name.lower()}"


def source_url(source_relative_path: str, base_url: str | None = None) -> str:
    rel = source_relative_path.replace("\\", "/").strip("/")
    base = (base_url if base_url is not None else config.SOURCE_BASE_URL).rstrip("/")
    return f"{base}/{rel}"


def build_component_info(
    parse_result: ComponentParseResult,
    category: str | None,
    source_relative_path: str,
) -> ComponentInfo:
    name = parse_result.class_name
    return ComponentInfo(
        name=name,
        namespace=parse_result.namespace or DEFAULT_NAMESPACE,
        summary=parse_result.summary or f"{name} component",
        description=parse_result.remarks,
        category=category,
        base_type=parse_result.base_type,
        parameters=parse_result.parameters,
        events=parse_result.events,
        methods=parse_result.methods,
        examples=(),
        related_components=(),
        documentation_url=documentation_url(source_relative_path),
        source_url=source_url(source_relative_path),
    )


def build_api_reference(parse_result: ComponentParseResult) -> ApiReference:
    """Flatten parameters, events and methods into one member list."""
    members: list[ApiMember] = []

    for param in parse_result.parameters:
        members.append(ApiMember(
            name=param.name,
            member_type="Property",
            return_type=param.type,
            description=param.description,
        ))

    for event in parse_result.events:
        return_type = (
            f"EventCallback<{event.event_args_type}>" if event.event_args_type else "EventCallback"
        )
        members.append(ApiMember(
            name=event.name,
            member_type="Event",
            return_type=return_type,
            description=event.description,
        ))

    for method in parse_result.methods:
        signature = ", ".join(f"{p.type} {p.name}" for p in method.parameters) or None
        members.append(ApiMember(
            name=method.name,
            member_type="Method",
            return_type=method.return_type,
            description=method.description,
            parameter_signature=signature,
        ))

    return ApiReference(
        type_name=parse_result.class_name,
        namespace=parse_result.namespace or DEFAULT_NAMESPACE,
        summary=parse_result.summary,
        base_type=parse_result.base_type,
        members=tuple(members),
    )
