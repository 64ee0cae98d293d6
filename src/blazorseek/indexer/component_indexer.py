"""Builds and queries the in-memory Bit BlazorUI component index.

The build runs in three sequential phases over the repository checkout:

1. components — every component directory is parsed concurrently and turned
   into a ComponentInfo plus an ApiReference;
2. documentation — ``*Demo.razor`` pages add descriptions and related links;
3. examples — demo sample files add code examples.

Phases 2 and 3 only replace entities that phase 1 produced. Failures on a
single file, directory or component are logged and skipped; only an
unavailable repository and cancellation abort a build.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from blazorseek import config
from blazorseek.errors import (
    BuildCancelledError,
    IndexNotBuiltError,
    RepositoryUnavailableError,
    check_cancelled,
)
from blazorseek.indexer.categories import COMPONENT_PREFIX, CategoryMapper
from blazorseek.indexer.doc_parser import RazorDocParser
from blazorseek.indexer.entities import build_api_reference, build_component_info
from blazorseek.indexer.examples import ExampleExtractor
from blazorseek.indexer.pipeline import (
    find_component_dirs,
    find_documentation_files,
    find_main_component_file,
)
from blazorseek.indexer.scoring import rank_components
from blazorseek.indexer.source_parser import ComponentSourceParser
from blazorseek.models import (
    ApiReference,
    ComponentCategory,
    ComponentExample,
    ComponentInfo,
    RelationshipType,
    SearchFields,
)
from blazorseek.storage.component_store import ComponentStore

logger = logging.getLogger(__name__)

MAX_RELATED = 10
_POLL_INTERVAL_S = 0.05

ProgressCallback = Callable[[dict], None]


class ComponentIndexer:
    """Indexes component metadata and answers queries against it.

    Collaborators are duck-typed:

    - ``repository``: ``ensure_repository(cancel) -> bool``, ``is_available``,
      ``repository_path``
    - ``source_parser``: ``parse_component_file(path, cancel)``
    - ``doc_parser``: ``parse_documentation_file(path, cancel)``
    - ``example_extractor``: ``extract_examples(root_path, name, cancel)``
    - ``category_mapper``: see CategoryMapper

    ``build_index`` holds a single build lock for its whole run. Queries never
    take that lock and may observe a store that is still being filled.
    """

    def __init__(
        self,
        repository: Any,
        source_parser: Any | None = None,
        doc_parser: Any | None = None,
        example_extractor: Any | None = None,
        category_mapper: Any | None = None,
        store: ComponentStore | None = None,
        max_workers: int | None = None,
    ) -> None:
        self._repository = repository
        self._source_parser = source_parser or ComponentSourceParser()
        self._doc_parser = doc_parser or RazorDocParser()
        self._example_extractor = example_extractor or ExampleExtractor()
        self._category_mapper = category_mapper or CategoryMapper()
        self._store = store or ComponentStore()
        self._max_workers = max_workers or config.INDEX_WORKERS

        self._build_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._is_indexed = False
        self._last_indexed: datetime | None = None
        self._building = False
        self._generation = 0
        self._last_summary: dict = {}

    # ── State ──

    @property
    def is_indexed(self) -> bool:
        return self._is_indexed

    @property
    def last_indexed(self) -> datetime | None:
        return self._last_indexed

    @property
    def is_building(self) -> bool:
        return self._building

    @property
    def component_count(self) -> int:
        return self._store.count()

    # ── Build ──

    def build_index(
        self,
        cancel: threading.Event | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> dict:
        """Run the full three-phase build.

        A caller arriving while another build is running waits for it. If
        that build succeeds its summary is returned and no second build runs;
        if it fails, this caller runs its own attempt.

        Raises RepositoryUnavailableError or BuildCancelledError; any other
        error from the repository step also propagates. ``is_indexed`` is only
        set once all phases completed.
        """
        observed_generation = self._generation
        self._acquire_build_lock(cancel)
        try:
            # A build completed since this call started: it ran concurrently
            if self._generation != observed_generation:
                logger.info("Index build finished while waiting, reusing its result")
                return dict(self._last_summary)

            self._building = True
            summary = self._run_build(cancel, on_progress)
            with self._state_lock:
                self._is_indexed = True
                self._last_indexed = datetime.now(timezone.utc)
                self._generation += 1
                self._last_summary = summary
            return dict(summary)
        finally:
            self._building = False
            self._build_lock.release()

    def _acquire_build_lock(self, cancel: threading.Event | None) -> None:
        check_cancelled(cancel)
        if cancel is None:
            self._build_lock.acquire()
            return
        while not self._build_lock.acquire(timeout=_POLL_INTERVAL_S):
            check_cancelled(cancel)

    def _run_build(self, cancel: threading.Event | None, on_progress: ProgressCallback | None) -> dict:
        logger.info("Starting index build...")
        t0 = time.perf_counter()

        _emit(on_progress, {"step": "repository", "status": "syncing"})
        available = self._repository.ensure_repository(cancel)
        check_cancelled(cancel)
        if not available or not self._repository.is_available:
            raise RepositoryUnavailableError("Repository is not available for indexing")
        repo_path = Path(self._repository.repository_path)
        _emit(on_progress, {"step": "repository", "status": "done", "path": str(repo_path)})

        self._category_mapper.initialize(repo_path)

        components, component_errors = self._index_components(repo_path, cancel, on_progress)
        documented, doc_errors = self._index_documentation(repo_path, cancel, on_progress)
        with_examples, example_errors = self._index_examples(repo_path, cancel, on_progress)

        elapsed = time.perf_counter() - t0
        summary = {
            "components": components,
            "documented": documented,
            "with_examples": with_examples,
            "errors": component_errors + doc_errors + example_errors,
            "elapsed_s": round(elapsed, 3),
        }
        logger.info(
            "Index build completed in %.2fs. Indexed %d components (%d documented, %d with examples, %d errors)",
            elapsed, components, documented, with_examples, summary["errors"],
        )
        return summary

    # Phase 1

    def _index_components(
        self, repo_path: Path, cancel: threading.Event | None, on_progress: ProgressCallback | None
    ) -> tuple[int, int]:
        dirs = find_component_dirs(repo_path)
        total = len(dirs)
        indexed: list[str] = []
        errors = 0
        done = 0

        executor = ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="indexer")
        try:
            pending: set[Future] = set()
            for d in dirs:
                check_cancelled(cancel)
                pending.add(executor.submit(self._index_component_dir, repo_path, d, cancel))

            while pending:
                finished, pending = wait(pending, timeout=_POLL_INTERVAL_S, return_when=FIRST_COMPLETED)
                for fut in finished:
                    name, failed = fut.result()
                    done += 1
                    if name:
                        indexed.append(name)
                    if failed:
                        errors += 1
                    _emit(on_progress, {
                        "step": "components", "current": done, "total": total, "component": name,
                    })
                check_cancelled(cancel)
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        removed = self._store.retain_components(indexed)
        if removed:
            logger.info("Removed %d components no longer present in the repository", removed)
        logger.info("Indexed %d components from %d directories", len(indexed), total)
        return len(indexed), errors

    def _index_component_dir(
        self, repo_path: Path, component_dir: Path, cancel: threading.Event | None
    ) -> tuple[str | None, bool]:
        """Parse and store one component. Returns (name or None, failed)."""
        dir_name = component_dir.name
        try:
            check_cancelled(cancel)
            main_file = find_main_component_file(component_dir)
            if main_file is None:
                logger.debug("No main component file found in: %s", dir_name)
                return None, False

            parse_result = self._source_parser.parse_component_file(main_file, cancel)
            if parse_result is None:
                return None, False

            name = parse_result.class_name
            category = (
                self._category_mapper.get_category_name(name)
                or self._category_mapper.infer_category_from_name(name)
            )
            relative = component_dir.relative_to(repo_path).as_posix()

            self._store.put_component(build_component_info(parse_result, category, relative))
            self._store.put_api_reference(build_api_reference(parse_result))
            logger.debug("Indexed component: %s", name)
            return name, False
        except BuildCancelledError:
            raise
        except OSError as e:
            logger.warning("I/O error indexing component in %s: %s", dir_name, e)
        except Exception:
            logger.warning("Failed to index component in %s", dir_name, exc_info=True)
        return None, True

    # Phase 2

    def _index_documentation(
        self, repo_path: Path, cancel: threading.Event | None, on_progress: ProgressCallback | None
    ) -> tuple[int, int]:
        doc_files = find_documentation_files(repo_path)
        total = len(doc_files)
        documented = 0
        errors = 0

        for i, doc_file in enumerate(doc_files, 1):
            check_cancelled(cancel)
            _emit(on_progress, {"step": "documentation", "current": i, "total": total, "file": doc_file.name})
            try:
                doc = self._doc_parser.parse_documentation_file(doc_file, cancel)
                if doc is None or not doc.component_name:
                    continue
                component = self._store.get_component(doc.component_name)
                if component is None:
                    continue
                self._store.put_component(replace(
                    component,
                    description=doc.description if doc.description is not None else component.description,
                    related_components=tuple(doc.related_components),
                ))
                documented += 1
            except BuildCancelledError:
                raise
            except OSError as e:
                errors += 1
                logger.warning("I/O error parsing documentation file %s: %s", doc_file, e)
            except Exception:
                errors += 1
                logger.warning("Failed to parse documentation file %s", doc_file, exc_info=True)

        logger.info("Enriched %d components from %d documentation files", documented, total)
        return documented, errors

    # Phase 3

    def _index_examples(
        self, repo_path: Path, cancel: threading.Event | None, on_progress: ProgressCallback | None
    ) -> tuple[int, int]:
        components = self._store.all_components()
        total = len(components)
        with_examples = 0
        errors = 0

        for i, component in enumerate(components, 1):
            check_cancelled(cancel)
            _emit(on_progress, {"step": "examples", "current": i, "total": total, "component": component.name})
            try:
                examples = self._example_extractor.extract_examples(repo_path, component.name, cancel)
                if examples:
                    self._store.put_component(replace(component, examples=tuple(examples)))
                    with_examples += 1
            except BuildCancelledError:
                raise
            except OSError as e:
                errors += 1
                logger.warning("I/O error extracting examples for %s: %s", component.name, e)
            except Exception:
                errors += 1
                logger.warning("Failed to extract examples for %s", component.name, exc_info=True)

        logger.info("Attached examples to %d of %d components", with_examples, total)
        return with_examples, errors

    # ── Queries ──

    def _ensure_indexed(self) -> None:
        if not self._is_indexed:
            raise IndexNotBuiltError()

    def _resolve(self, name: str) -> ComponentInfo | None:
        """Exact (case-insensitive) lookup, then retry with the library prefix."""
        if not name or not name.strip():
            return None
        name = name.strip()
        component = self._store.get_component(name)
        if component is None and not name.lower().startswith(COMPONENT_PREFIX.lower()):
            component = self._store.get_component(COMPONENT_PREFIX + name)
        return component

    def get_all_components(self) -> list[ComponentInfo]:
        self._ensure_indexed()
        return self._store.all_components()

    def get_component(self, name: str) -> ComponentInfo | None:
        self._ensure_indexed()
        return self._resolve(name)

    def get_categories(self) -> list[ComponentCategory]:
        self._ensure_indexed()
        return self._category_mapper.get_categories()

    def get_components_by_category(self, category: str) -> list[ComponentInfo]:
        self._ensure_indexed()
        wanted = category.strip().lower()
        return [
            c for c in self._store.all_components()
            if c.category is not None and c.category.lower() == wanted
        ]

    def search_components_scored(
        self,
        query: str,
        fields: SearchFields = SearchFields.ALL,
        max_results: int = 10,
    ) -> list[tuple[ComponentInfo, int]]:
        """Like search_components, keeping each result's score."""
        self._ensure_indexed()
        if not query or not query.strip() or max_results <= 0:
            return []
        return rank_components(self._store.all_components(), query.strip(), fields, max_results)

    def search_components(
        self,
        query: str,
        fields: SearchFields = SearchFields.ALL,
        max_results: int = 10,
    ) -> list[ComponentInfo]:
        return [c for c, _score in self.search_components_scored(query, fields, max_results)]

    def get_examples(self, name: str) -> list[ComponentExample]:
        self._ensure_indexed()
        component = self._resolve(name)
        return list(component.examples) if component else []

    def get_api_reference(self, type_name: str) -> ApiReference | None:
        self._ensure_indexed()
        if not type_name or not type_name.strip():
            return None
        type_name = type_name.strip()
        reference = self._store.get_api_reference(type_name)
        if reference is None and not type_name.lower().startswith(COMPONENT_PREFIX.lower()):
            reference = self._store.get_api_reference(COMPONENT_PREFIX + type_name)
        return reference

    def get_related_components(
        self,
        name: str,
        relationship: RelationshipType = RelationshipType.ALL,
    ) -> list[ComponentInfo]:
        """Explicit links, then siblings, parent and children; at most MAX_RELATED.

        Names that do not resolve to an indexed component are dropped.
        """
        self._ensure_indexed()
        component = self._resolve(name)
        if component is None:
            return []

        own = component.name.lower()
        candidates: list[str] = []
        seen = {own}

        def add(candidate: str) -> None:
            if candidate.lower() not in seen:
                seen.add(candidate.lower())
                candidates.append(candidate)

        for related in component.related_components:
            add(related)

        snapshot = self._store.all_components()

        if relationship in (RelationshipType.ALL, RelationshipType.SIBLING) and component.category:
            category = component.category.lower()
            for other in snapshot:
                if other.category is not None and other.category.lower() == category:
                    add(other.name)

        if relationship in (RelationshipType.ALL, RelationshipType.PARENT) and component.base_type:
            if self._store.has_component(component.base_type):
                add(component.base_type)

        if relationship in (RelationshipType.ALL, RelationshipType.CHILD):
            for other in snapshot:
                if other.base_type is not None and other.base_type.lower() == own:
                    add(other.name)

        resolved = []
        for candidate in candidates:
            found = self._store.get_component(candidate)
            if found is not None:
                resolved.append(found)
                if len(resolved) == MAX_RELATED:
                    break
        return resolved


def _emit(on_progress: ProgressCallback | None, event: dict) -> None:
    if on_progress is not None:
        on_progress(event)


def create_component_indexer(repository: Any | None = None) -> ComponentIndexer:
    """Indexer wired to the configured repository and the default parsers."""
    if repository is None:
        from blazorseek.repository import GitRepositoryService

        repository = GitRepositoryService()
    return ComponentIndexer(repository)
