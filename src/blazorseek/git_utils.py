"""Git utilities for repository management."""

from __future__ import annotations

import subprocess
from pathlib import Path


class GitError(Exception):
    """Raised when a git operation fails."""


def _run_git(args: list[str], cwd: Path | None = None, timeout: float | None = None) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            text=True,
            cwd=cwd,
            check=True,
            timeout=timeout,
        )
        return result.stdout.strip()
    except subprocess.CalledProcessError as e:
        raise GitError(f"git {' '.join(args)} failed: {e.stderr.strip()}") from e
    except subprocess.TimeoutExpired as e:
        raise GitError(f"git {' '.join(args)} timed out after {timeout}s") from e
    except FileNotFoundError:
        raise GitError("git is not installed or not in PATH")


def is_git_repo(path: Path) -> bool:
    """True if path is the root of a git working tree."""
    return (path / ".git").exists()


def get_head_sha(repo_path: Path) -> str:
    """Return the full SHA of HEAD."""
    return _run_git(["rev-parse", "HEAD"], cwd=repo_path)


def pull_remote(
    repo_path: Path, remote: str = "origin", branch: str | None = None,
    timeout: float | None = None,
) -> None:
    """Fast-forward the working tree from the given remote."""
    args = ["pull", "--ff-only", remote]
    if branch:
        args.append(branch)
    _run_git(args, cwd=repo_path, timeout=timeout)


def clone_repo(
    url: str, dest: Path, shallow: bool = True, branch: str | None = None,
    timeout: float | None = None,
) -> None:
    """Clone a repository to the given destination."""
    args = ["clone"]
    if shallow:
        args.extend(["--depth", "1"])
    if branch:
        args.extend(["--branch", branch])
    args.extend([url, str(dest)])
    dest.parent.mkdir(parents=True, exist_ok=True)
    _run_git(args, timeout=timeout)
