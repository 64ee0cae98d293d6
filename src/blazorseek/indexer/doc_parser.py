"""Regex extraction of titles, sections and cross links from ``*Demo.razor`` pages."""

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path

from blazorseek.errors import check_cancelled
from blazorseek.models import DocumentationSection, RazorDocResult

logger = logging.getLogger(__name__)

_TITLE_RE = re.compile(r"Title\s*=\s*\"([^\"]+)\"", re.IGNORECASE)
_SUBTITLE_RE = re.compile(r"SubTitle\s*=\s*\"([^\"]+)\"", re.IGNORECASE)
_HEADER_TEXT_RE = re.compile(r"<BitText[^>]*>\s*([^<]+?)\s*</BitText>")
_SECTION_RE = re.compile(
    r"<DocsPageSection\s+Title\s*=\s*\"([^\"]+)\"[^>]*>(.*?)</DocsPageSection>", re.DOTALL
)
_COMPONENT_TAG_RE = re.compile(r"<[A-Z][^>]*>.*?</[A-Z][^>]*>|<[A-Z][^/]*/>", re.DOTALL)
_CODE_BLOCK_RE = re.compile(r"<code>.*?</code>|@\{.*?\}", re.DOTALL)
_DIRECTIVE_RE = re.compile(r"@[a-zA-Z]+(\.[a-zA-Z]+)*")
_WS_RE = re.compile(r"\s+")
_COMPONENT_LINK_RE = re.compile(r"href\s*=\s*\"/components/([^\"]+)\"", re.IGNORECASE)
_COMPONENT_REF_RE = re.compile(r"<(Bit[A-Z][a-zA-Z]+)")
_MESSAGE_BAR_RE = re.compile(r"<BitMessageBar[^>]*>(.*?)</BitMessageBar>", re.DOTALL)

_DEMO_SUFFIX = "Demo"


def component_name_from_path(file_path: str | Path) -> str | None:
    """``.../BitButtonDemo.razor`` -> ``BitButton``; None for non-demo pages."""
    stem = Path(file_path).name.split(".", 1)[0]
    if stem.endswith(_DEMO_SUFFIX) and len(stem) > len(_DEMO_SUFFIX):
        return stem[: -len(_DEMO_SUFFIX)]
    return None


def _text_content(markup: str) -> str:
    text = _COMPONENT_TAG_RE.sub("", markup)
    text = _CODE_BLOCK_RE.sub("", text)
    text = _DIRECTIVE_RE.sub("", text)
    return _WS_RE.sub(" ", text).strip()


class RazorDocParser:
    """Parses demo documentation pages for component descriptions."""

    def parse_documentation_file(
        self, path: Path, cancel: threading.Event | None = None
    ) -> RazorDocResult | None:
        check_cancelled(cancel)
        path = Path(path)
        if not path.exists():
            logger.warning("Documentation file not found: %s", path)
            return None
        content = path.read_text(encoding="utf-8", errors="replace")
        return self.parse_documentation(content, str(path))

    def parse_documentation(self, content: str, file_path: str) -> RazorDocResult:
        if not file_path or not file_path.strip():
            raise ValueError("file_path must not be empty")
        component_name = component_name_from_path(file_path)
        return RazorDocResult(
            file_path=file_path,
            component_name=component_name,
            title=self._page_title(content),
            description=self._subtitle(content),
            sections=tuple(self._sections(content)),
            related_components=tuple(self._related_components(content, component_name)),
            usage_notes=tuple(self._usage_notes(content)),
        )

    @staticmethod
    def _page_title(content: str) -> str | None:
        m = _TITLE_RE.search(content)
        return m.group(1) if m else None

    @staticmethod
    def _subtitle(content: str) -> str | None:
        m = _SUBTITLE_RE.search(content)
        if m:
            return m.group(1)
        m = _HEADER_TEXT_RE.search(content)
        return m.group(1) if m else None

    @staticmethod
    def _sections(content: str) -> list[DocumentationSection]:
        sections = []
        for m in _SECTION_RE.finditer(content):
            body = m.group(2)
            sections.append(DocumentationSection(
                title=m.group(1),
                content=_text_content(body),
                has_example="SectionSource" in body or "Example" in body,
            ))
        return sections

    @staticmethod
    def _related_components(content: str, own_name: str | None) -> list[str]:
        """Linked demo pages and referenced ``<BitXxx`` tags, first occurrence wins."""
        related: list[str] = []
        seen: set[str] = {own_name.lower()} if own_name else set()

        def add(name: str) -> None:
            if name.lower() not in seen:
                seen.add(name.lower())
                related.append(name)

        for m in _COMPONENT_LINK_RE.finditer(content):
            name = component_name_from_path(m.group(1))
            if name:
                add(name)
        for m in _COMPONENT_REF_RE.finditer(content):
            add(m.group(1))
        return related

    @staticmethod
    def _usage_notes(content: str) -> list[str]:
        notes = []
        for m in _MESSAGE_BAR_RE.finditer(content):
            text = _text_content(m.group(1))
            if text:
                notes.append(text)
        return notes
