"""CSV rendering of the task table."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable

from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Task
from ..repositories import TaskRepository
from ..schemas import TaskRead

logger = logging.getLogger(__name__)

EXPORT_COLUMNS: tuple[str, ...] = (
    "id",
    "title",
    "description",
    "status",
    "created_at",
    "user_id",
)


def render_tasks_csv(tasks: Iterable[Task]) -> str:
    """Return ``tasks`` as CSV text with a header row.

    Values are quoted as needed so commas, quotes and newlines in titles or
    descriptions survive a round trip. An unassigned task has an empty
    ``user_id`` cell.
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for task in tasks:
        row = TaskRead.model_validate(task).model_dump(mode="json")
        writer.writerow({column: row[column] for column in EXPORT_COLUMNS})
    return buffer.getvalue()


class TaskExportService:
    def __init__(self, session: AsyncSession) -> None:
        self._repository = TaskRepository(session)

    async def export_csv(self) -> str:
        tasks = await self._repository.list()
        logger.info("Exporting tasks", extra={"task_count": len(tasks)})
        return render_tasks_csv(tasks)


__all__ = ["EXPORT_COLUMNS", "TaskExportService", "render_tasks_csv"]
