"""FastAPI application entry point."""

import logging
import re
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import PlainTextResponse, Response

from brain import __version__
from brain.auth import require_credentials
from brain.config import Settings, get_settings
from brain.decoding import decode_json_body
from brain.errors import BrainError, InvalidTaskId, UnsupportedMethod
from brain.models import Task, TaskCreate, TaskPatch
from brain.store import TaskStore

logger = logging.getLogger(__name__)

GREETING = "Welcome to Brain!"

_TASK_ID = re.compile(r"[+-]?[0-9]+")

app = FastAPI(
    title="Brain",
    description="Create, read, update and delete tasks stored one file per task.",
    version=__version__,
    dependencies=[Depends(require_credentials)],
)


@app.exception_handler(BrainError)
async def brain_error_handler(request: Request, exc: BrainError) -> PlainTextResponse:
    """Report taxonomy errors as plain text with their status code."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@lru_cache()
def _store_for(directory: Path) -> TaskStore:
    store = TaskStore(directory)
    store.ensure_directory()
    return store


def get_store(settings: Settings = Depends(get_settings)) -> TaskStore:
    """Return the store for the configured directory, creating the directory once."""
    return _store_for(settings.tasks_dir)


async def raw_body(request: Request) -> bytes:
    """Read the whole request body undecoded."""
    return await request.body()


def parse_task_id(task_id: str) -> int:
    """Parse the ``{task_id}`` path segment."""
    if not _TASK_ID.fullmatch(task_id):
        raise InvalidTaskId(task_id)
    return int(task_id)


@app.get("/", response_class=PlainTextResponse, tags=["System"])
def welcome() -> str:
    """Greeting."""
    return GREETING


@app.post("/tasks", response_model=Task, tags=["Tasks"])
def create_task(
    body: bytes = Depends(raw_body),
    store: TaskStore = Depends(get_store),
) -> Task:
    """Create a new task."""
    return store.create(decode_json_body(body, TaskCreate))


@app.get("/tasks", response_model=list[Task], tags=["Tasks"])
def list_tasks(q: str | None = None, store: TaskStore = Depends(get_store)) -> list[Task]:
    """List tasks, optionally only those whose title contains ``q``."""
    return store.list_all(q)


@app.get("/tasks/{task_id}", tags=["Tasks"])
def show_task(
    task_id: int = Depends(parse_task_id),
    store: TaskStore = Depends(get_store),
) -> Response:
    """Return a task's stored JSON."""
    return Response(content=store.get_raw(task_id), media_type="application/json")


@app.put("/tasks/{task_id}", response_model=Task, tags=["Tasks"])
def update_task(
    task_id: int = Depends(parse_task_id),
    body: bytes = Depends(raw_body),
    store: TaskStore = Depends(get_store),
) -> Task:
    """Update the fields present in the body, leaving the rest unchanged."""
    return store.update(task_id, decode_json_body(body, TaskPatch))


@app.delete("/tasks/{task_id}", tags=["Tasks"])
def delete_task(
    task_id: int = Depends(parse_task_id),
    store: TaskStore = Depends(get_store),
) -> Response:
    """Delete a task."""
    store.delete(task_id)
    return Response(status_code=status.HTTP_200_OK)


def _unsupported(route: str):
    def handler(request: Request) -> None:
        raise UnsupportedMethod(request.method, route)

    return handler


# Every other method on a known route answers 501
for _path, _route, _methods in (
    ("/", "/", ["HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]),
    ("/tasks", "/tasks", ["HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"]),
    ("/tasks/{task_id}", "/tasks/", ["HEAD", "POST", "PATCH", "OPTIONS"]),
):
    app.add_api_route(_path, _unsupported(_route), methods=_methods, include_in_schema=False)
