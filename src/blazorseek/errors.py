"""Exceptions shared by the indexer, its collaborators and the tool layer."""

from __future__ import annotations

import threading


class IndexNotBuiltError(RuntimeError):
    """A query was issued before the first successful index build."""

    def __init__(self, message: str = "Index has not been built. Call build_index() first.") -> None:
        super().__init__(message)


class RepositoryUnavailableError(RuntimeError):
    """The component library repository could not be made available."""


class BuildCancelledError(Exception):
    """The build (or a collaborator call inside it) observed cancellation."""


def check_cancelled(cancel: threading.Event | None) -> None:
    """Raise BuildCancelledError if the cancel event is set."""
    if cancel is not None and cancel.is_set():
        raise BuildCancelledError("Index build was cancelled")


class ToolError(ValueError):
    """Invalid tool input, or the requested component does not exist."""
