"""In-memory, thread-safe storage for indexed components and API references."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Iterable

from blazorseek.models import ApiReference, ComponentInfo


def _key(name: str) -> str:
    return name.lower()


class ComponentStore:
    """Two case-insensitive maps guarded by a single lock.

    Values are frozen dataclasses, so a ``put`` swaps a whole entity and
    readers never see a half-updated one. ``all_components`` returns a copy
    in insertion order; replacing an existing key keeps its position.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._components: dict[str, ComponentInfo] = {}
        self._api_references: dict[str, ApiReference] = {}

    # ── Components ──

    def put_component(self, component: ComponentInfo) -> None:
        key = _key(component.name)
        with self._lock:
            existing = self._components.get(key)
            if existing is not None and existing.name != component.name:
                # Canonical casing is whatever was written first
                component = replace(component, name=existing.name)
            self._components[key] = component

    def get_component(self, name: str) -> ComponentInfo | None:
        with self._lock:
            return self._components.get(_key(name))

    def has_component(self, name: str) -> bool:
        with self._lock:
            return _key(name) in self._components

    def all_components(self) -> list[ComponentInfo]:
        with self._lock:
            return list(self._components.values())

    def component_names(self) -> list[str]:
        with self._lock:
            return [c.name for c in self._components.values()]

    def retain_components(self, names: Iterable[str]) -> int:
        """Drop components (and their API references) not in ``names``.

        Returns the number of components removed.
        """
        keep = {_key(n) for n in names}
        with self._lock:
            stale = [k for k in self._components if k not in keep]
            for k in stale:
                del self._components[k]
                self._api_references.pop(k, None)
            return len(stale)

    # ── API references ──

    def put_api_reference(self, reference: ApiReference) -> None:
        with self._lock:
            self._api_references[_key(reference.type_name)] = reference

    def get_api_reference(self, type_name: str) -> ApiReference | None:
        with self._lock:
            return self._api_references.get(_key(type_name))

    # ── Housekeeping ──

    def count(self) -> int:
        with self._lock:
            return len(self._components)

    def clear(self) -> None:
        with self._lock:
            self._components.clear()
            self._api_references.clear()
