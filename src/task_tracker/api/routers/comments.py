"""Comment endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from ...deps import CommentServiceDependency
from ...schemas import CommentCreate, CommentRead

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post(
    "",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a task",
)
async def create_comment(
    payload: CommentCreate,
    request: Request,
    response: Response,
    service: CommentServiceDependency,
) -> CommentRead:
    comment = await service.create_comment(
        content=payload.content,
        task_id=payload.task_id,
        user_id=payload.user_id,
        created_at=payload.created_at,
    )
    response.headers["Location"] = str(request.url_for("get_comment", comment_id=comment.id))
    return CommentRead.model_validate(comment)


@router.get(
    "/task/{task_id}",
    response_model=list[CommentRead],
    summary="List the comments on a task",
)
async def list_comments_for_task(task_id: int, service: CommentServiceDependency) -> list[CommentRead]:
    comments = await service.list_comments_for_task(task_id)
    return [CommentRead.model_validate(comment) for comment in comments]


@router.get("/{comment_id}", response_model=CommentRead, summary="Retrieve a comment by id")
async def get_comment(comment_id: int, service: CommentServiceDependency) -> CommentRead:
    return CommentRead.model_validate(await service.get_comment(comment_id))


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a comment",
)
async def delete_comment(comment_id: int, service: CommentServiceDependency) -> Response:
    await service.delete_comment(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
