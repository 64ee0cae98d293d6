"""Background task manager for index builds."""

from __future__ import annotations

import logging
import threading
import traceback
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable

from blazorseek.errors import BuildCancelledError

logger = logging.getLogger(__name__)

MAX_PROGRESS_EVENTS = 200


class TaskManager:
    """Runs index builds in the background and records their progress.

    Exclusive tasks (index builds) are restricted to one at a time. Every
    task gets a cancel event; ``fn`` receives it as ``cancel=`` and a
    progress callback as ``on_progress=``.
    """

    def __init__(self, max_workers: int = 2) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="task")
        self._tasks: dict[str, dict[str, Any]] = {}
        self._cancel_events: dict[str, threading.Event] = {}
        self._lock = threading.Lock()

    def submit(
        self, name: str, fn: Callable, task_id: str | None = None,
        kind: str = "exclusive", **kwargs,
    ) -> str:
        """Submit a task for background execution.

        Args:
            name: Human-readable task name (e.g. "index").
            fn: Callable to execute; called as ``fn(cancel=..., on_progress=..., **kwargs)``.
            task_id: Optional pre-generated task ID. If None, one is generated.
            kind: "exclusive" tasks refuse to start while another exclusive
                  task is running. "concurrent" tasks always run.
            **kwargs: Extra arguments passed to fn.

        Returns:
            Task ID (UUID string).

        Raises:
            RuntimeError: If kind="exclusive" and an exclusive task is running.
        """
        with self._lock:
            if kind == "exclusive":
                for t in self._tasks.values():
                    if t["status"] == "running" and t.get("kind") == "exclusive":
                        raise RuntimeError("An exclusive task is already running")

            if task_id is None:
                task_id = str(uuid.uuid4())
            cancel = threading.Event()
            self._cancel_events[task_id] = cancel
            self._tasks[task_id] = {
                "id": task_id,
                "name": name,
                "kind": kind,
                "status": "running",
                "started_at": datetime.now(timezone.utc).isoformat(),
                "finished_at": None,
                "progress_events": [],
                "result": None,
                "error": None,
            }

        def _on_progress(event: dict) -> None:
            self.push_progress(task_id, event)

        def _run():
            try:
                result = fn(cancel=cancel, on_progress=_on_progress, **kwargs)
                self._finish(task_id, "completed", result=result)
            except BuildCancelledError:
                logger.info("Task %s (%s) cancelled", task_id, name)
                self._finish(task_id, "cancelled")
            except Exception:
                logger.exception("Task %s (%s) failed", task_id, name)
                self._finish(task_id, "failed", error=traceback.format_exc())

        self._executor.submit(_run)
        return task_id

    def _finish(self, task_id: str, status: str, result: Any = None, error: str | None = None) -> None:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return
            task["status"] = status
            task["result"] = result
            task["error"] = error
            task["finished_at"] = datetime.now(timezone.utc).isoformat()

    def get_status(self, task_id: str) -> dict | None:
        """Get task status and metadata."""
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None
            snapshot = dict(task)
            snapshot["progress_events"] = list(task["progress_events"])
            return snapshot

    def list_tasks(self) -> list[dict]:
        with self._lock:
            return [
                {k: v for k, v in t.items() if k != "progress_events"}
                for t in self._tasks.values()
            ]

    def has_running_exclusive_task(self) -> bool:
        with self._lock:
            return any(
                t["status"] == "running" and t.get("kind") == "exclusive"
                for t in self._tasks.values()
            )

    def cancel(self, task_id: str) -> bool:
        """Signal a running task to stop. Returns False if it is unknown or finished."""
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None or task["status"] != "running":
                return False
            self._cancel_events[task_id].set()
            return True

    def push_progress(self, task_id: str, event: dict) -> None:
        """Record a progress event, keeping only the most recent ones."""
        with self._lock:
            task = self._tasks.get(task_id)
            if task:
                events = task["progress_events"]
                events.append(event)
                if len(events) > MAX_PROGRESS_EVENTS:
                    del events[: len(events) - MAX_PROGRESS_EVENTS]

    def shutdown(self, cancel_running: bool = True) -> None:
        if cancel_running:
            with self._lock:
                for event in self._cancel_events.values():
                    event.set()
        self._executor.shutdown(wait=True)
