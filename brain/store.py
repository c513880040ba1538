"""File-per-task storage.

Each task lives in ``<tasks_dir>/<Id>.json``. Listing a directory stands in for
an index. The highest id ever issued is kept in ``<tasks_dir>/.last_id`` so ids
are never reused, even after the newest task is deleted.
"""

import logging
import threading
from collections.abc import Iterator
from pathlib import Path

from pydantic import ValidationError

from brain.errors import CorruptFilename, CorruptRecord, NotFound, StorageError
from brain.models import Task, TaskCreate, TaskPatch

logger = logging.getLogger(__name__)

LAST_ID_FILE = ".last_id"


class TaskStore:
    """Task persistence over a single directory."""

    def __init__(self, directory: Path) -> None:
        """Use ``directory`` for task files. Call ``ensure_directory`` before serving."""
        self.directory = Path(directory)
        self._allocate_lock = threading.Lock()

    def ensure_directory(self) -> None:
        """Create the task directory if it does not exist yet."""
        self.directory.mkdir(mode=0o750, parents=True, exist_ok=True)

    def path_for(self, task_id: int) -> Path:
        """Return the file a task with ``task_id`` is stored in."""
        return self.directory / f"{task_id}.json"

    def next_id(self) -> int:
        """Return the id the next created task will get."""
        highest = max((task_id for task_id, _ in self._task_files()), default=0)
        return max(highest, self._last_issued_id()) + 1

    def create(self, data: TaskCreate) -> Task:
        """Assign the next id to ``data``, write it and return the stored task."""
        with self._allocate_lock:
            task = Task(Id=self.next_id(), Title=data.Title, Completed=data.Completed)
            self._write_text(self.directory / LAST_ID_FILE, str(task.Id))
            self._write(task)
        logger.info("Created task %d", task.Id)
        return task

    def get_raw(self, task_id: int) -> bytes:
        """Return the stored JSON of a task exactly as it is on disk."""
        path = self.path_for(task_id)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFound(task_id) from exc
        except OSError as exc:
            raise StorageError(f"An error occurred while reading task {task_id}, {exc}") from exc

    def get(self, task_id: int) -> Task:
        """Return the task with ``task_id``."""
        return self._parse(self.path_for(task_id).name, self.get_raw(task_id))

    def list_all(self, query: str | None = None) -> list[Task]:
        """Return all tasks ordered by id, keeping only titles containing ``query``."""
        tasks = []
        for _, path in sorted(self._task_files()):
            try:
                raw = path.read_bytes()
            except OSError as exc:
                raise StorageError(f"An error occurred while retrieving tasks, {exc}") from exc
            task = self._parse(path.name, raw)
            if query and query not in task.Title:
                continue
            tasks.append(task)
        return tasks

    def update(self, task_id: int, patch: TaskPatch) -> Task:
        """Overwrite the fields present in ``patch`` and return the updated task.

        A failed write is reported as ``StorageError``; the file is left as the
        last successful write produced it.
        """
        task = self.get(task_id).model_copy(update=patch.changes())
        self._write(task)
        logger.info("Updated task %d", task_id)
        return task

    def delete(self, task_id: int) -> None:
        """Remove the task with ``task_id``."""
        try:
            self.path_for(task_id).unlink()
        except FileNotFoundError as exc:
            raise NotFound(task_id) from exc
        except OSError as exc:
            raise StorageError(
                f"An error occurred while deleting task with ID {task_id}: {exc}"
            ) from exc
        logger.info("Deleted task %d", task_id)

    def _task_files(self) -> Iterator[tuple[int, Path]]:
        try:
            entries = list(self.directory.iterdir())
        except OSError as exc:
            raise StorageError(f"An error occurred while retrieving tasks, {exc}") from exc
        for path in entries:
            if path.name.startswith(".") or not path.is_file():
                continue
            stem = path.name.split(".", 1)[0]
            if not (stem.isascii() and stem.isdigit()):
                raise CorruptFilename(path.name)
            yield int(stem), path

    def _last_issued_id(self) -> int:
        path = self.directory / LAST_ID_FILE
        try:
            content = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return 0
        except OSError as exc:
            raise StorageError(f"An error occurred while reading {path.name}, {exc}") from exc
        if not (content.isascii() and content.isdigit()):
            raise CorruptRecord(path.name)
        return int(content)

    def _parse(self, filename: str, raw: bytes) -> Task:
        try:
            return Task.model_validate_json(raw)
        except ValidationError as exc:
            raise CorruptRecord(filename) from exc

    def _write(self, task: Task) -> None:
        self._write_text(self.path_for(task.Id), task.model_dump_json())

    def _write_text(self, path: Path, content: str) -> None:
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"An error occurred while saving your task, {exc}") from exc
