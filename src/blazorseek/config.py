"""Configuration loaded from environment variables."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Upstream repository
REPO_URL: str = os.getenv("REPO_URL", "https://github.com/bitfoundation/bitplatform.git")
REPO_BRANCH: str = os.getenv("REPO_BRANCH", "develop")
GIT_SHALLOW: bool = _bool("GIT_SHALLOW", "true")

# Paths
REPO_PATH: Path = Path(os.getenv("REPO_PATH", ""))
DATA_DIR: Path = Path(os.getenv("DATA_DIR", "./data"))

# Indexing
INDEX_WORKERS: int = int(os.getenv("INDEX_WORKERS", "8"))
INDEX_ON_STARTUP: bool = _bool("INDEX_ON_STARTUP", "true")

# Public URLs used for documentation / source links
DOCS_BASE_URL: str = os.getenv("DOCS_BASE_URL", "https://blazorui.bitplatform.dev/components")
SOURCE_BASE_URL: str = os.getenv(
    "SOURCE_BASE_URL", "https://github.com/bitfoundation/bitplatform/tree/main"
)

# Server
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Derived paths
REPOS_DIR: Path = DATA_DIR / "repos"


def get_repo_path() -> Path:
    """Return the local filesystem path of the component library checkout.

    An explicit REPO_PATH wins (used as-is, never synced). Otherwise the
    clone lives under REPOS_DIR, named after the repository URL.
    """
    if REPO_PATH and REPO_PATH != Path(""):
        return REPO_PATH
    name = REPO_URL.rstrip("/").rsplit("/", 1)[-1]
    if name.endswith(".git"):
        name = name[:-4]
    return REPOS_DIR / (name or "repo")


def uses_local_checkout() -> bool:
    """True when REPO_PATH points at a checkout we must not clone or pull."""
    return bool(REPO_PATH and REPO_PATH != Path(""))
