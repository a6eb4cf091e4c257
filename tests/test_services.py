from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlmodel.ext.asyncio.session import AsyncSession

from task_tracker.errors import ConflictError, MismatchError, NotFoundError, ValidationError
from task_tracker.models import TaskStatus
from task_tracker.services import CommentService, TaskExportService, TaskService, UserService

pytestmark = pytest.mark.asyncio


async def test_user_service_crud_flow(session: AsyncSession) -> None:
    service = UserService(session)

    created = await service.create_user(name="Alice")
    assert created.id is not None
    assert created.version == 1

    updated = await service.update_user(created.id, payload_id=created.id, name="Alicia")
    assert updated.name == "Alicia"
    assert updated.version == 2

    users = await service.list_users()
    assert [user.id for user in users] == [created.id]

    await service.delete_user(created.id)
    with pytest.raises(NotFoundError):
        await service.get_user(created.id)


async def test_user_update_mismatch_happens_before_any_lookup(session: AsyncSession) -> None:
    service = UserService(session)

    with pytest.raises(MismatchError):
        await service.update_user(1, payload_id=2, name="")


async def test_user_update_distinguishes_conflict_from_missing(session: AsyncSession) -> None:
    service = UserService(session)
    user = await service.create_user(name="Alice")

    with pytest.raises(ConflictError):
        await service.update_user(user.id, payload_id=user.id, name="Bob", version=5)
    with pytest.raises(NotFoundError):
        await service.update_user(999, payload_id=999, name="Bob", version=1)


async def test_task_validation_collects_every_violation(session: AsyncSession) -> None:
    service = TaskService(session)

    with pytest.raises(ValidationError) as excinfo:
        await service.create_task(title="", description=None, status="Archivée")

    assert {error.field for error in excinfo.value.errors} == {"title", "description", "status"}
    assert await service.list_tasks() == []


async def test_task_status_filter_is_exact(session: AsyncSession) -> None:
    service = TaskService(session)
    for index, task_status in enumerate(
        [TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, TaskStatus.IN_PROGRESS]
    ):
        await service.create_task(title=f"Task {index}", description="Body", status=task_status)

    in_progress = await service.list_tasks(status=TaskStatus.IN_PROGRESS)

    assert len(in_progress) == 2
    assert {task.status for task in in_progress} == {TaskStatus.IN_PROGRESS}


async def test_assign_to_missing_user_leaves_task_unchanged(session: AsyncSession) -> None:
    users = UserService(session)
    tasks = TaskService(session)
    owner = await users.create_user(name="Owner")
    task = await tasks.create_task(title="Keep", description="Owner stays", status="En attente", user_id=owner.id)

    with pytest.raises(NotFoundError) as excinfo:
        await tasks.assign_task(task.id, 4242)

    assert excinfo.value.entity == "user"
    assert excinfo.value.identifier == 4242
    reloaded = await tasks.get_task(task.id)
    assert reloaded.user_id == owner.id


async def test_statistics_include_users_without_tasks(session: AsyncSession) -> None:
    users = UserService(session)
    tasks = TaskService(session)
    busy = await users.create_user(name="Busy")
    idle = await users.create_user(name="Idle")
    await tasks.create_task(title="A", description="a", status=TaskStatus.PENDING, user_id=busy.id)
    await tasks.create_task(title="B", description="b", status=TaskStatus.PENDING, user_id=busy.id)
    await tasks.create_task(title="C", description="c", status=TaskStatus.COMPLETED)

    stats = await tasks.get_statistics()

    assert stats.total_tasks == 3
    assert stats.tasks_by_status == {"En attente": 2, "Terminée": 1}
    assert {(entry.user_id, entry.task_count) for entry in stats.tasks_by_user} == {
        (busy.id, 2),
        (idle.id, 0),
    }


async def test_comment_requires_existing_task(session: AsyncSession) -> None:
    users = UserService(session)
    comments = CommentService(session)
    author = await users.create_user(name="Author")

    with pytest.raises(NotFoundError) as excinfo:
        await comments.create_comment(content="Hello", task_id=12, user_id=author.id)

    assert excinfo.value.entity == "task"
    assert excinfo.value.identifier == 12


async def test_comment_keeps_supplied_timestamp(session: AsyncSession) -> None:
    users = UserService(session)
    tasks = TaskService(session)
    comments = CommentService(session)
    author = await users.create_user(name="Author")
    task = await tasks.create_task(title="T", description="D", status=TaskStatus.PENDING)
    supplied = datetime(2024, 12, 2, 21, 52, 6, tzinfo=timezone.utc)

    comment = await comments.create_comment(
        content="Backdated note",
        task_id=task.id,
        user_id=author.id,
        created_at=supplied,
    )

    stored = comment.created_at
    if stored.tzinfo is None:
        stored = stored.replace(tzinfo=timezone.utc)
    assert stored == supplied


async def test_export_service_renders_header_and_rows(session: AsyncSession) -> None:
    tasks = TaskService(session)
    await tasks.create_task(title="Export me", description="Row body", status=TaskStatus.IN_PROGRESS)

    content = await TaskExportService(session).export_csv()

    lines = content.strip().splitlines()
    assert lines[0] == "id,title,description,status,created_at,user_id"
    assert len(lines) == 2
    assert ",Export me,Row body,En cours," in lines[1]
    assert lines[1].endswith(",")
