"""FastAPI server exposing the component query tools and index management."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from blazorseek import config
from blazorseek.api.task_manager import TaskManager
from blazorseek.errors import IndexNotBuiltError, ToolError
from blazorseek.indexer.component_indexer import ComponentIndexer, create_component_indexer
from blazorseek.tools.registry import ToolRegistry, UnknownToolError, build_tool_registry

# Configure logging on import, before anything else logs
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)

_task_manager = TaskManager()

# Lazy-initialized on first request or startup
_indexer: ComponentIndexer | None = None
_registry: ToolRegistry | None = None


def _get_indexer() -> ComponentIndexer:
    global _indexer
    if _indexer is None:
        _indexer = create_component_indexer()
    return _indexer


def _get_registry() -> ToolRegistry:
    global _registry
    if _registry is None:
        _registry = build_tool_registry(_get_indexer())
    return _registry


def _submit_build() -> str:
    indexer = _get_indexer()

    def _run(cancel=None, on_progress=None):
        return indexer.build_index(cancel=cancel, on_progress=on_progress)

    return _task_manager.submit("index", _run)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.INDEX_ON_STARTUP:
        task_id = _submit_build()
        logger.info("Initial index build started (task %s)", task_id)
    yield
    _task_manager.shutdown(cancel_running=True)


app = FastAPI(title="blazorseek", description="Bit BlazorUI component documentation service", lifespan=lifespan)


class ToolCallRequest(BaseModel):
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolCallResponse(BaseModel):
    tool: str
    result: str


@app.get("/health")
def health():
    indexer = _get_indexer()
    last = indexer.last_indexed
    return {
        "status": "ok" if indexer.is_indexed else "indexing",
        "indexed": indexer.is_indexed,
        "building": indexer.is_building,
        "last_indexed": last.isoformat() if last else None,
        "components": indexer.component_count,
    }


@app.get("/tools")
def list_tools():
    return _get_registry().get_declarations()


@app.post("/tools/{name}", response_model=ToolCallResponse)
def call_tool(name: str, req: ToolCallRequest = ToolCallRequest()):
    logger.info("POST /tools/%s args=%r", name, req.arguments)
    t0 = time.perf_counter()
    try:
        result = _get_registry().execute(name, req.arguments)
    except UnknownToolError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ToolError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except IndexNotBuiltError as e:
        raise HTTPException(status_code=503, detail=str(e))
    logger.info("Tool %s complete: %d chars, %.3fs", name, len(result), time.perf_counter() - t0)
    return ToolCallResponse(tool=name, result=result)


@app.post("/index")
def start_index():
    """Trigger a full index rebuild in the background."""
    if _task_manager.has_running_exclusive_task():
        raise HTTPException(status_code=409, detail="An index build is already running")
    try:
        task_id = _submit_build()
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"task_id": task_id, "name": "index", "status": "running"}


@app.get("/index/tasks")
def list_index_tasks():
    return _task_manager.list_tasks()


@app.get("/index/tasks/{task_id}")
def get_index_task(task_id: str):
    status = _task_manager.get_status(task_id)
    if status is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return status


@app.post("/index/tasks/{task_id}/cancel")
def cancel_index_task(task_id: str):
    if not _task_manager.cancel(task_id):
        raise HTTPException(status_code=404, detail="No running task with that id")
    return {"task_id": task_id, "status": "cancelling"}


def main() -> None:
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())
