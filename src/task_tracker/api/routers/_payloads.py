"""Body parsing shared by the full-replacement ``PUT`` endpoints."""

from __future__ import annotations

from typing import Any, TypeVar

import pydantic
from fastapi.exceptions import RequestValidationError

from ...errors import MismatchError

SchemaT = TypeVar("SchemaT", bound=pydantic.BaseModel)


def _payload_identifier(body: dict[str, Any]) -> int | None:
    raw = body.get("id")
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def parse_replacement(
    entity: str,
    path_id: int,
    body: dict[str, Any],
    schema: type[SchemaT],
) -> SchemaT:
    """Validate ``body`` against ``schema`` once its ``id`` matches ``path_id``.

    The identifier comparison comes first: a body whose ``id`` is missing,
    not an integer, or different from the path is rejected with 400 even
    when other fields are also invalid.
    """
    if _payload_identifier(body) != path_id:
        raise MismatchError(entity, path_id, body.get("id"))
    try:
        return schema.model_validate(body)
    except pydantic.ValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in exc.errors()]
        ) from exc
