"""Shared test helpers — synthetic repository files and fake indexer collaborators."""

from __future__ import annotations

import threading
from pathlib import Path

from blazorseek.errors import check_cancelled
from blazorseek.indexer.pipeline import COMPONENT_ROOTS
from blazorseek.models import (
    ComponentCategory,
    ComponentExample,
    ComponentInfo,
    ComponentParameter,
    ComponentParseResult,
    RazorDocResult,
)


def write_file(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def make_component_dir(repo: Path, *parts: str, class_name: str | None = None) -> Path:
    """Create ``Components/<parts...>/<class_name>.razor.cs`` under the first component root."""
    d = repo / COMPONENT_ROOTS[0] / Path(*parts)
    name = class_name or f"Bit{parts[-1]}"
    write_file(d / f"{name}.razor.cs", f"public class {name} {{ }}\n")
    return d


def make_component(name: str, **kwargs) -> ComponentInfo:
    kwargs.setdefault("namespace", "Bit.BlazorUI")
    kwargs.setdefault("summary", f"{name} component")
    return ComponentInfo(name=name, **kwargs)


def make_example(name: str = "Example 1", **kwargs) -> ComponentExample:
    kwargs.setdefault("description", None)
    kwargs.setdefault("razor_markup", "<BitButton>Hi</BitButton>")
    kwargs.setdefault("csharp_code", None)
    kwargs.setdefault("source_file", "BitButtonDemo.razor.samples.cs")
    return ComponentExample(name=name, **kwargs)


class FakeRepository:
    """Repository collaborator pointing at a local directory.

    ``gate`` (if given) blocks ensure_repository until it is set, which lets
    tests hold a build in flight.
    """

    def __init__(self, path: Path, available: bool = True, gate: threading.Event | None = None):
        self.path = path
        self.available = available
        self.gate = gate
        self.entered = threading.Event()
        self.calls = 0
        self._lock = threading.Lock()

    @property
    def is_available(self) -> bool:
        return self.available

    @property
    def repository_path(self) -> Path | None:
        return self.path if self.available else None

    def ensure_repository(self, cancel=None) -> bool:
        with self._lock:
            self.calls += 1
        self.entered.set()
        if self.gate is not None:
            while not self.gate.wait(0.01):
                check_cancelled(cancel)
        return self.available


class FakeSourceParser:
    """Parses by directory name: ``results`` maps a directory name to a parse result.

    A directory listed in ``failures`` raises that exception instead.
    """

    def __init__(self, results: dict[str, ComponentParseResult], failures: dict[str, Exception] | None = None):
        self.results = results
        self.failures = failures or {}
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def parse_component_file(self, path, cancel=None):
        check_cancelled(cancel)
        dir_name = Path(path).parent.name
        with self._lock:
            self.calls.append(dir_name)
        if dir_name in self.failures:
            raise self.failures[dir_name]
        return self.results.get(dir_name)


class FakeDocParser:
    def __init__(self, docs: dict[str, RazorDocResult] | None = None, on_call=None):
        self.docs = docs or {}
        self.on_call = on_call
        self.calls = 0

    def parse_documentation_file(self, path, cancel=None):
        check_cancelled(cancel)
        self.calls += 1
        if self.on_call is not None:
            self.on_call(path)
        return self.docs.get(Path(path).name)


class FakeExampleExtractor:
    def __init__(self, examples: dict[str, list[ComponentExample]] | None = None, on_call=None,
                 failures: dict[str, Exception] | None = None):
        self.examples = examples or {}
        self.on_call = on_call
        self.failures = failures or {}
        self.calls: list[str] = []

    def extract_examples(self, root_path, component_name, cancel=None):
        check_cancelled(cancel)
        self.calls.append(component_name)
        if self.on_call is not None:
            self.on_call(component_name)
        if component_name in self.failures:
            raise self.failures[component_name]
        return list(self.examples.get(component_name, []))


class FakeCategoryMapper:
    """Explicit name -> category table; unknown names infer to ``fallback``."""

    def __init__(self, mapping: dict[str, str], fallback: str = "Misc"):
        self.mapping = {k.lower(): v for k, v in mapping.items()}
        self.fallback = fallback
        self.initialize_calls = 0

    def initialize(self, repository_path=None):
        self.initialize_calls += 1

    def get_categories(self):
        names = sorted(set(self.mapping.values()))
        return [ComponentCategory(name=n, title=n, description=f"{n} components") for n in names]

    def get_category_name(self, component_name):
        return self.mapping.get(component_name.lower())

    def infer_category_from_name(self, component_name):
        return self.fallback


def parse_result(name: str, base_type: str | None = None, **kwargs) -> ComponentParseResult:
    kwargs.setdefault("file_path", f"{name}.razor.cs")
    kwargs.setdefault("namespace", "Bit.BlazorUI")
    return ComponentParseResult(class_name=name, base_type=base_type, **kwargs)


def param(name: str, type: str = "string", **kwargs) -> ComponentParameter:
    return ComponentParameter(name=name, type=type, **kwargs)
