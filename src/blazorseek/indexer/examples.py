"""Extract code examples from ``*Demo.razor.samples.cs`` demo sample files.

Sample files hold one verbatim string constant per example::

    private readonly string example1RazorCode = @"<BitButton>...</BitButton>";
    private readonly string example1CsharpCode = @"private void OnClick() { }";

Razor and C# constants sharing a number form one example.
"""

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path

from blazorseek.errors import check_cancelled
from blazorseek.indexer.categories import strip_prefix
from blazorseek.models import ComponentExample

logger = logging.getLogger(__name__)

DEMO_COMPONENTS_DIR = Path(
    "src", "BlazorUI", "Demo", "Client", "Bit.BlazorUI.Demo.Client.Core", "Pages", "Components"
)
SAMPLES_SUFFIX = "Demo.razor.samples.cs"
MAX_FEATURES = 5

_RAZOR_FIELD_RE = re.compile(
    r"private\s+readonly\s+string\s+example(\d+)RazorCode\s*=\s*@\"(.*?)\";", re.DOTALL
)
_CSHARP_FIELD_RE = re.compile(
    r"private\s+readonly\s+string\s+example(\d+)CsharpCode\s*=\s*@\"(.*?)\";", re.DOTALL
)
_PAGE_RE = re.compile(r"@page\s+\"[^\"]*\"\s*\n?")
_USING_RE = re.compile(r"@using\s+[^\n]+\n?")
_INJECT_RE = re.compile(r"@inject\s+[^\n]+\n?")
_NAMESPACE_RE = re.compile(r"@namespace\s+[^\n]+\n?")
_BLANK_LINES_RE = re.compile(r"\n{3,}")
_ATTRIBUTE_RE = re.compile(r"(\w+)=\"[^\"]*\"")
_PASCAL_RE = re.compile(r"(?<!^)([A-Z])")


def _unescape_verbatim(text: str) -> str:
    # C# verbatim strings escape a quote by doubling it
    return text.replace('""', '"')


def _clean_markup(markup: str) -> str:
    markup = _PAGE_RE.sub("", markup)
    markup = _USING_RE.sub("", markup)
    markup = _INJECT_RE.sub("", markup)
    markup = _NAMESPACE_RE.sub("", markup)
    markup = _BLANK_LINES_RE.sub("\n\n", markup)
    return markup.strip()


def pascal_case_to_spaces(text: str) -> str:
    return _PASCAL_RE.sub(r" \1", text).strip() if text else text


def extract_features(content: str) -> tuple[str, ...]:
    """Short tags describing what an example shows, at most MAX_FEATURES."""
    features: list[str] = []
    seen: set[str] = set()

    def add(tag: str) -> None:
        if tag.lower() not in seen:
            seen.add(tag.lower())
            features.append(tag)

    for m in _ATTRIBUTE_RE.finditer(content):
        add(m.group(1))
    if "@bind" in content.lower():
        add("Two-way binding")
    if "EventCallback" in content or "@on" in content:
        add("Event handling")
    if "Variant=" in content:
        add("Variants")
    if "Color=" in content:
        add("Colors")
    if "Size=" in content:
        add("Sizes")
    return tuple(features[:MAX_FEATURES])


def _name_prefix(samples_file: Path, component_name: str) -> str:
    """Variant sample files (``_BitButtonGroupItemDemo``) prefix example names.

    For ``BitButtonGroup`` that file yields ``"Item Example 1"`` and so on.
    """
    stem = samples_file.name[: -len(SAMPLES_SUFFIX)] if samples_file.name.endswith(SAMPLES_SUFFIX) \
        else samples_file.name.split(".", 1)[0]
    stem = stem.lstrip("_")
    if stem.lower().startswith(component_name.lower()):
        extra = stem[len(component_name):]
        if extra:
            return pascal_case_to_spaces(extra) + " "
    return ""


class ExampleExtractor:
    """Finds and parses the demo samples file of a component."""

    def extract_examples(
        self, root_path: Path, component_name: str, cancel: threading.Event | None = None
    ) -> list[ComponentExample]:
        """All examples for a component; empty when none exist."""
        if not component_name or not component_name.strip():
            raise ValueError("component_name must not be empty")
        check_cancelled(cancel)

        components_dir = Path(root_path) / DEMO_COMPONENTS_DIR
        if not components_dir.is_dir():
            logger.debug("No demo components folder at %s", components_dir)
            return []

        pattern = f"Bit{strip_prefix(component_name)}{SAMPLES_SUFFIX}"
        try:
            samples_files = sorted(components_dir.rglob(pattern))
        except OSError as e:
            logger.warning("Error scanning %s: %s", components_dir, e)
            return []

        if not samples_files:
            logger.debug("No samples file found for %s", component_name)
            return []

        check_cancelled(cancel)
        try:
            examples = self.parse_samples_file(samples_files[0], component_name, cancel)
        except OSError as e:
            logger.warning("Error reading samples file %s: %s", samples_files[0], e)
            return []

        logger.debug("Found %d examples for %s", len(examples), component_name)
        return examples

    def parse_samples_file(
        self, path: Path, component_name: str, cancel: threading.Event | None = None
    ) -> list[ComponentExample]:
        path = Path(path)
        if not path.exists():
            return []
        content = path.read_text(encoding="utf-8", errors="replace")

        razor = {int(m.group(1)): _unescape_verbatim(m.group(2)) for m in _RAZOR_FIELD_RE.finditer(content)}
        csharp = {int(m.group(1)): _unescape_verbatim(m.group(2)) for m in _CSHARP_FIELD_RE.finditer(content)}
        prefix = _name_prefix(path, component_name)

        examples: list[ComponentExample] = []
        for number in sorted(razor.keys() | csharp.keys()):
            check_cancelled(cancel)
            markup = razor.get(number)
            if markup is not None and markup.strip():
                markup = _clean_markup(markup)
            code = csharp.get(number)
            examples.append(ComponentExample(
                name=f"{prefix}Example {number}",
                description=None,
                razor_markup=markup,
                csharp_code=code.strip() if code else code,
                source_file=path.name,
                features=extract_features(f"{markup or ''}\n{code or ''}"),
            ))
        return examples
