"""Routes handling task CRUD, assignment, search, statistics and export."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, Request, Response, status

from ...deps import ExportServiceDependency, SettingsDependency, TaskServiceDependency
from ...models import TaskStatus
from ...schemas import TaskAssignment, TaskCreate, TaskDetail, TaskRead, TaskStatistics, TaskUpdate, TaskWithUser
from ._payloads import parse_replacement

router = APIRouter(prefix="/tasks", tags=["tasks"])

StatusQuery = Annotated[
    TaskStatus | None,
    Query(description="Filter results to tasks matching the supplied status."),
]
KeywordQuery = Annotated[
    str | None,
    Query(description="Substring matched against title and description."),
]
AssignedToQuery = Annotated[
    int | None,
    Query(description="Accepted for compatibility; does not filter results."),
]
CreatedAfterQuery = Annotated[
    datetime | None,
    Query(description="Only tasks created at or after this instant."),
]


@router.get("", response_model=list[TaskWithUser], summary="List tasks")
async def list_tasks(
    service: TaskServiceDependency,
    status: StatusQuery = None,
) -> list[TaskWithUser]:
    tasks = await service.list_tasks(status=status)
    return [TaskWithUser.model_validate(task) for task in tasks]


@router.get("/stats", response_model=TaskStatistics, summary="Aggregate task statistics")
async def get_task_statistics(service: TaskServiceDependency) -> TaskStatistics:
    return await service.get_statistics()


@router.get("/search", response_model=list[TaskRead], summary="Search tasks")
async def search_tasks(
    service: TaskServiceDependency,
    keyword: KeywordQuery = None,
    assigned_to: AssignedToQuery = None,
    created_after: CreatedAfterQuery = None,
) -> list[TaskRead]:
    tasks = await service.search_tasks(
        keyword=keyword,
        assigned_to=assigned_to,
        created_after=created_after,
    )
    return [TaskRead.model_validate(task) for task in tasks]


@router.get(
    "/export",
    response_class=Response,
    summary="Download all tasks as CSV",
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_tasks(
    service: ExportServiceDependency,
    settings: SettingsDependency,
) -> Response:
    content = await service.export_csv()
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{settings.export_filename}"'},
    )


@router.post(
    "/assign/{task_id}/{user_id}",
    response_model=TaskAssignment,
    summary="Assign a task to a user",
)
async def assign_task(
    task_id: int,
    user_id: int,
    service: TaskServiceDependency,
) -> TaskAssignment:
    task = await service.assign_task(task_id, user_id)
    return TaskAssignment(task=TaskRead.model_validate(task))


@router.get("/{task_id}", response_model=TaskDetail, summary="Retrieve a task by id")
async def get_task(task_id: int, service: TaskServiceDependency) -> TaskDetail:
    return TaskDetail.model_validate(await service.get_task(task_id))


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
async def create_task(
    payload: TaskCreate,
    request: Request,
    response: Response,
    service: TaskServiceDependency,
) -> TaskRead:
    task = await service.create_task(
        title=payload.title,
        description=payload.description,
        status=payload.status,
        user_id=payload.user_id,
    )
    response.headers["Location"] = str(request.url_for("get_task", task_id=task.id))
    return TaskRead.model_validate(task)


@router.put(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Replace a task",
)
async def update_task(
    task_id: int,
    body: Annotated[dict[str, Any], Body()],
    service: TaskServiceDependency,
) -> Response:
    payload = parse_replacement("task", task_id, body, TaskUpdate)
    await service.update_task(
        task_id,
        payload_id=payload.id,
        title=payload.title,
        description=payload.description,
        status=payload.status,
        user_id=payload.user_id,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a task and its comments",
)
async def delete_task(task_id: int, service: TaskServiceDependency) -> Response:
    await service.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
