"""Tree-sitter C# parser — extract component classes, parameters, events and methods."""

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path

import tree_sitter_c_sharp as ts_csharp
from tree_sitter import Language, Node, Parser

from blazorseek.errors import check_cancelled
from blazorseek.models import (
    ComponentEvent,
    ComponentMethod,
    ComponentParameter,
    ComponentParseResult,
    MethodParameter,
)

logger = logging.getLogger(__name__)

CSHARP_LANGUAGE = Language(ts_csharp.language())

_PARAMETER_ATTRS = {"Parameter", "CascadingParameter"}
_EVENT_CALLBACK_RE = re.compile(r"^EventCallback(?:\s*<\s*(.+?)\s*>)?\??$")
_NAMESPACE_NODES = ("file_scoped_namespace_declaration", "namespace_declaration")

# ── XML doc comment helpers ──

_SUMMARY_RE = re.compile(r"<summary>(.*?)</summary>", re.DOTALL)
_REMARKS_RE = re.compile(r"<remarks>(.*?)</remarks>", re.DOTALL)
_CREF_RE = re.compile(r"<(?:see|seealso)\s+(?:cref|langword|href)\s*=\s*\"(?:[A-Z]:)?([^\"]+)\"\s*/>")
_PARAMREF_RE = re.compile(r"<(?:paramref|typeparamref)\s+name\s*=\s*\"([^\"]+)\"\s*/>")
_TAG_RE = re.compile(r"</?[a-zA-Z][^>]*>")
_WS_RE = re.compile(r"\s+")


def _clean_doc_text(text: str) -> str | None:
    text = _CREF_RE.sub(lambda m: m.group(1), text)
    text = _PARAMREF_RE.sub(lambda m: m.group(1), text)
    text = _TAG_RE.sub("", text)
    text = _WS_RE.sub(" ", text).strip()
    return text or None


def _doc_comment(node: Node) -> str:
    """Collect the ``///`` lines directly above a declaration."""
    lines: list[str] = []
    sibling = node.prev_named_sibling
    while sibling is not None and sibling.type == "comment":
        text = _text(sibling)
        if not text.startswith("///"):
            break
        lines.append(text)
        sibling = sibling.prev_named_sibling
    lines.reverse()
    out = []
    for raw in lines:
        for line in raw.splitlines():
            line = line.strip()
            if line.startswith("///"):
                line = line[3:]
            out.append(line)
    return "\n".join(out)


def _doc_section(doc: str, pattern: re.Pattern) -> str | None:
    m = pattern.search(doc)
    return _clean_doc_text(m.group(1)) if m else None


# ── Node helpers ──


def _text(node: Node | None) -> str:
    if node is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def _modifiers(node: Node) -> set[str]:
    return {_text(c).strip() for c in node.children if c.type == "modifier"}


def _attribute_names(node: Node) -> set[str]:
    names: set[str] = set()
    for attr_list in (c for c in node.children if c.type == "attribute_list"):
        for attr in (c for c in attr_list.named_children if c.type == "attribute"):
            name = _text(attr.child_by_field_name("name")) or _text(attr.named_children[0])
            name = name.rsplit(".", 1)[-1]
            if name.endswith("Attribute"):
                name = name[: -len("Attribute")]
            names.add(name)
    return names


def _initializer(node: Node) -> str | None:
    """Text of the ``= value`` part of a property declaration, if any."""
    seen_eq = False
    for child in node.children:
        if seen_eq and child.is_named:
            return _text(child).strip()
        if child.type == "=":
            seen_eq = True
    return None


def _base_type(class_node: Node) -> str | None:
    for child in class_node.children:
        if child.type == "base_list":
            for base in child.named_children:
                if base.type == "primary_constructor_base_type":
                    base = base.named_children[0]
                return _text(base).strip()
    return None


def _walk(node: Node):
    yield node
    for child in node.children:
        yield from _walk(child)


class ComponentSourceParser:
    """Parses a component's C# code-behind into a ComponentParseResult.

    Thread-safe: a fresh tree-sitter Parser is used per call because parser
    objects must not be shared across threads.
    """

    def parse_component_file(
        self, path: Path, cancel: threading.Event | None = None
    ) -> ComponentParseResult | None:
        check_cancelled(cancel)
        path = Path(path)
        if not path.exists():
            logger.warning("Component file not found: %s", path)
            return None
        source = path.read_bytes()
        return self.parse_source(source, str(path))

    def parse_source(self, source: str | bytes, file_path: str) -> ComponentParseResult | None:
        if isinstance(source, str):
            source = source.encode("utf-8")
        tree = Parser(CSHARP_LANGUAGE).parse(source)
        root = tree.root_node

        namespace = None
        for node in _walk(root):
            if node.type in _NAMESPACE_NODES:
                namespace = _text(node.child_by_field_name("name")).strip() or None
                break

        class_node = self._find_component_class(root, file_path)
        if class_node is None:
            logger.debug("No public class found in %s", file_path)
            return None

        doc = _doc_comment(class_node)
        parameters, events, methods = self._extract_members(class_node)
        return ComponentParseResult(
            class_name=_text(class_node.child_by_field_name("name")),
            file_path=file_path,
            namespace=namespace,
            summary=_doc_section(doc, _SUMMARY_RE),
            remarks=_doc_section(doc, _REMARKS_RE),
            base_type=_base_type(class_node),
            parameters=tuple(parameters),
            events=tuple(events),
            methods=tuple(methods),
        )

    @staticmethod
    def _find_component_class(root: Node, file_path: str) -> Node | None:
        """Pick the public class named after the file, else the first public class."""
        stem = Path(file_path).name.split(".", 1)[0]
        first = None
        for node in _walk(root):
            if node.type != "class_declaration" or "public" not in _modifiers(node):
                continue
            if node.parent is not None and node.parent.type == "declaration_list" \
                    and node.parent.parent is not None \
                    and node.parent.parent.type == "class_declaration":
                continue  # nested type
            if _text(node.child_by_field_name("name")) == stem:
                return node
            if first is None:
                first = node
        return first

    def _extract_members(
        self, class_node: Node
    ) -> tuple[list[ComponentParameter], list[ComponentEvent], list[ComponentMethod]]:
        parameters: list[ComponentParameter] = []
        events: list[ComponentEvent] = []
        methods: list[ComponentMethod] = []

        body = class_node.child_by_field_name("body")
        if body is None:
            return parameters, events, methods

        for member in body.named_children:
            if member.type == "property_declaration":
                self._property(member, parameters, events)
            elif member.type == "method_declaration":
                method = self._method(member)
                if method is not None:
                    methods.append(method)
        return parameters, events, methods

    @staticmethod
    def _property(
        node: Node, parameters: list[ComponentParameter], events: list[ComponentEvent]
    ) -> None:
        attrs = _attribute_names(node)
        if not attrs & _PARAMETER_ATTRS:
            return
        name = _text(node.child_by_field_name("name"))
        type_text = _WS_RE.sub(" ", _text(node.child_by_field_name("type"))).strip()
        description = _doc_section(_doc_comment(node), _SUMMARY_RE)

        callback = _EVENT_CALLBACK_RE.match(type_text)
        if callback and "CascadingParameter" not in attrs:
            events.append(ComponentEvent(
                name=name,
                event_args_type=callback.group(1),
                description=description,
            ))
            return

        parameters.append(ComponentParameter(
            name=name,
            type=type_text,
            description=description,
            default_value=_initializer(node),
            is_required="EditorRequired" in attrs,
            is_cascading="CascadingParameter" in attrs,
        ))

    @staticmethod
    def _method(node: Node) -> ComponentMethod | None:
        modifiers = _modifiers(node)
        if "public" not in modifiers or "override" in modifiers:
            return None
        returns = node.child_by_field_name("returns") or node.child_by_field_name("type")
        return_type = _WS_RE.sub(" ", _text(returns)).strip()

        params: list[MethodParameter] = []
        param_list = node.child_by_field_name("parameters")
        if param_list is not None:
            for p in param_list.named_children:
                if p.type != "parameter":
                    continue
                params.append(MethodParameter(
                    name=_text(p.child_by_field_name("name")),
                    type=_WS_RE.sub(" ", _text(p.child_by_field_name("type"))).strip(),
                ))

        return ComponentMethod(
            name=_text(node.child_by_field_name("name")),
            return_type=return_type,
            description=_doc_section(_doc_comment(node), _SUMMARY_RE),
            parameters=tuple(params),
            is_async="async" in modifiers or return_type.startswith(("Task", "ValueTask")),
        )
