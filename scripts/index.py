#!/usr/bin/env python3
"""CLI: Index the Bit BlazorUI repository and optionally query the result."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
import time
from pathlib import Path

# Ensure the package is importable when running as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from blazorseek import config
from blazorseek.errors import BuildCancelledError, RepositoryUnavailableError, ToolError
from blazorseek.indexer.component_indexer import create_component_indexer
from blazorseek.indexer.pipeline import find_component_dirs, find_documentation_files
from blazorseek.repository import GitRepositoryService
from blazorseek.tools.registry import UnknownToolError, build_tool_registry


def main() -> None:
    parser = argparse.ArgumentParser(description="Index the Bit BlazorUI component library")
    parser.add_argument(
        "--repo-path",
        type=Path,
        default=None,
        help="Use an existing checkout instead of cloning (default: REPO_PATH or data/repos)",
    )
    parser.add_argument(
        "--no-sync",
        action="store_true",
        help="Do not clone or pull; the checkout must already exist",
    )
    parser.add_argument(
        "--search",
        type=str,
        default=None,
        help="Run a component search after indexing and print the result",
    )
    parser.add_argument(
        "--tool",
        type=str,
        default=None,
        help="Run a tool after indexing (e.g. get_component_detail)",
    )
    parser.add_argument(
        "--args",
        type=str,
        default="{}",
        help='JSON object of tool arguments (e.g. \'{"component_name": "BitButton"}\')',
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report which files would be indexed",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    sync = False if (args.no_sync or args.repo_path is not None) else None
    repository = GitRepositoryService(repo_path=args.repo_path, sync=sync)

    # ── Dry run: report what would happen, then exit ──
    if args.dry_run:
        if not repository.ensure_repository():
            print("Error: repository is not available.", file=sys.stderr)
            sys.exit(1)
        repo_path = repository.repository_path
        print(f"Repository: {repo_path}")
        print(f"[components]     {len(find_component_dirs(repo_path))} component directories")
        print(f"[documentation]  {len(find_documentation_files(repo_path))} demo pages")
        return

    # ── Real run ──
    indexer = create_component_indexer(repository)
    cancel = threading.Event()
    start = time.time()
    try:
        summary = indexer.build_index(cancel=cancel)
    except KeyboardInterrupt:
        cancel.set()
        print("\nCancelled.", file=sys.stderr)
        sys.exit(130)
    except BuildCancelledError:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(130)
    except RepositoryUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"\nIndex build complete:")
    print(f"  Components indexed: {summary['components']}")
    print(f"  With documentation: {summary['documented']}")
    print(f"  With examples: {summary['with_examples']}")
    print(f"  Errors: {summary['errors']}")
    print(f"\nDone in {time.time() - start:.1f}s")

    if args.search is None and args.tool is None:
        return

    registry = build_tool_registry(indexer)
    if args.search is not None:
        tool, tool_args = "search_components", {"query": args.search}
    else:
        tool = args.tool
        try:
            tool_args = json.loads(args.args)
        except json.JSONDecodeError as e:
            print(f"Error: --args is not valid JSON: {e}", file=sys.stderr)
            sys.exit(1)

    try:
        print()
        print(registry.execute(tool, tool_args))
    except (UnknownToolError, ToolError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
