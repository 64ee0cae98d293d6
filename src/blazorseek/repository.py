"""Keeps a local checkout of the component library repository available."""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path

from blazorseek import config
from blazorseek.git_utils import GitError, clone_repo, get_head_sha, is_git_repo, pull_remote

logger = logging.getLogger(__name__)

GIT_TIMEOUT_S = 600.0


class GitRepositoryService:
    """Clones or updates the upstream repository on demand.

    With ``sync=False`` the service only checks that ``repo_path`` exists,
    which is how a pre-existing checkout (``REPO_PATH``) is used.
    """

    def __init__(
        self,
        repo_path: Path | None = None,
        url: str | None = None,
        branch: str | None = None,
        shallow: bool | None = None,
        sync: bool | None = None,
    ) -> None:
        self._repo_path = repo_path if repo_path is not None else config.get_repo_path()
        self._url = url or config.REPO_URL
        self._branch = branch if branch is not None else config.REPO_BRANCH
        self._shallow = config.GIT_SHALLOW if shallow is None else shallow
        self._sync = (not config.uses_local_checkout()) if sync is None else sync
        self._lock = threading.Lock()
        self._available = False
        self.head_sha: str | None = None

    @property
    def is_available(self) -> bool:
        return self._available

    @property
    def repository_path(self) -> Path | None:
        return self._repo_path if self._available else None

    def ensure_repository(self, cancel: threading.Event | None = None) -> bool:
        """Make sure the checkout exists and is current. Returns availability."""
        with self._lock:
            if cancel is not None and cancel.is_set():
                return self._available
            t0 = time.perf_counter()
            try:
                if not self._sync:
                    self._available = self._repo_path.is_dir()
                    if not self._available:
                        logger.error("Repository path %s does not exist", self._repo_path)
                    return self._available

                if is_git_repo(self._repo_path):
                    logger.info("Updating repository at %s", self._repo_path)
                    try:
                        pull_remote(self._repo_path, branch=self._branch, timeout=GIT_TIMEOUT_S)
                    except GitError as e:
                        # A stale checkout is still indexable
                        logger.warning("Pull failed, using existing checkout: %s", e)
                else:
                    logger.info("Cloning %s into %s", self._url, self._repo_path)
                    clone_repo(
                        self._url, self._repo_path, shallow=self._shallow,
                        branch=self._branch or None, timeout=GIT_TIMEOUT_S,
                    )
                self.head_sha = get_head_sha(self._repo_path)
                self._available = True
                logger.info(
                    "Repository ready at %s (HEAD %s, %.2fs)",
                    self._repo_path, self.head_sha[:12], time.perf_counter() - t0,
                )
            except GitError as e:
                logger.error("Repository unavailable: %s", e)
                self._available = False
            return self._available
