"""Application errors and their translation into HTTP responses."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Mapping

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER, bind_request_id, reset_request_id
from .schemas.system import ErrorResponse, FieldError

logger = logging.getLogger(__name__)


class ApplicationError(Exception):
    """Base class for domain-specific errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "application_error",
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details


class ValidationError(ApplicationError):
    """One or more field constraints were violated; carries every violation."""

    def __init__(
        self,
        errors: Sequence[FieldError],
        *,
        message: str = "Validation failed.",
    ) -> None:
        self.errors = list(errors)
        super().__init__(
            message,
            code="validation_error",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"errors": [error.model_dump() for error in self.errors]},
        )


class NotFoundError(ApplicationError):
    """A referenced entity does not exist."""

    def __init__(self, entity: str, identifier: Any) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(
            f"{entity.capitalize()} not found.",
            code="not_found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"entity": entity, "id": identifier},
        )


class ConflictError(ApplicationError):
    """The stored row changed between read and write."""

    def __init__(self, entity: str, identifier: Any) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(
            f"{entity.capitalize()} was modified concurrently.",
            code="conflict",
            status_code=status.HTTP_409_CONFLICT,
            details={"entity": entity, "id": identifier},
        )


class MismatchError(ApplicationError):
    """Path identifier and payload identifier disagree."""

    def __init__(self, entity: str, path_id: Any, payload_id: Any) -> None:
        super().__init__(
            f"{entity.capitalize()} ID mismatch.",
            code="id_mismatch",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"entity": entity, "path_id": path_id, "payload_id": payload_id},
        )


def field_errors_from_pydantic(errors: Sequence[Mapping[str, Any]]) -> list[FieldError]:
    """Flatten pydantic error dictionaries into one entry per violated field."""

    collected: list[FieldError] = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        collected.append(
            FieldError(
                field=".".join(location) or "__root__",
                message=str(error.get("msg", "Invalid value.")),
                type=str(error.get("type", "value_error")),
            )
        )
    return collected


@dataclass(frozen=True, slots=True)
class _ErrorReply:
    """What a failed request answers with, and how loudly it is logged."""

    status_code: int
    code: str
    message: str
    details: Any | None = None
    headers: Mapping[str, str] | None = None
    log_level: int = logging.WARNING


def _reply_for_application_error(exc: ApplicationError) -> _ErrorReply:
    return _ErrorReply(exc.status_code, exc.code, exc.message, exc.details)


def _reply_for_request_validation(exc: RequestValidationError) -> _ErrorReply:
    errors = field_errors_from_pydantic(exc.errors())
    return _ErrorReply(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed.",
        {"errors": [error.model_dump() for error in errors]},
    )


def _reply_for_integrity_error(exc: IntegrityError) -> _ErrorReply:
    # Driver messages name tables and constraints; they stay in the log only.
    return _ErrorReply(
        status.HTTP_409_CONFLICT,
        "db_integrity_error",
        "Database integrity violation.",
        log_level=logging.ERROR,
    )


def _reply_for_http_exception(exc: StarletteHTTPException) -> _ErrorReply:
    code = "not_found" if exc.status_code == status.HTTP_404_NOT_FOUND else "http_error"
    if isinstance(exc.detail, str):
        message, details = exc.detail, None
    else:
        message, details = HTTPStatus(exc.status_code).phrase, exc.detail
    return _ErrorReply(exc.status_code, code, message, details, headers=exc.headers or None)


def _reply_for_unexpected_error(exc: Exception) -> _ErrorReply:
    return _ErrorReply(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "server_error",
        "Internal server error.",
        log_level=logging.ERROR,
    )


_REPLY_BUILDERS: tuple[tuple[type[Exception], Callable[[Any], _ErrorReply]], ...] = (
    (ApplicationError, _reply_for_application_error),
    (RequestValidationError, _reply_for_request_validation),
    (IntegrityError, _reply_for_integrity_error),
    (StarletteHTTPException, _reply_for_http_exception),
    (Exception, _reply_for_unexpected_error),
)


def _render(reply: _ErrorReply, request_id: str | None) -> JSONResponse:
    details = reply.details
    if request_id:
        if details is None:
            details = {"request_id": request_id}
        elif isinstance(details, dict):
            details = {**details, "request_id": details.get("request_id", request_id)}
        else:
            details = {"request_id": request_id, "detail": details}
    body = ErrorResponse(code=reply.code, message=reply.message, details=details)
    response = JSONResponse(status_code=reply.status_code, content=body.model_dump(mode="json"))
    if reply.headers:
        response.headers.update(reply.headers)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


def _envelope_handler(
    build_reply: Callable[[Any], _ErrorReply],
) -> Callable[[Request, Exception], Awaitable[JSONResponse]]:
    async def _handle(request: Request, exc: Exception) -> JSONResponse:
        # The middleware has already reset its binding when the 500 handler runs.
        request_id = getattr(request.state, "request_id", None)
        token = bind_request_id(request_id) if request_id else None
        try:
            reply = build_reply(exc)
            logger.log(
                reply.log_level,
                "Request failed with %s",
                reply.code,
                extra={"code": reply.code, "status_code": reply.status_code, "path": request.url.path},
                exc_info=exc if reply.log_level >= logging.ERROR else None,
            )
            return _render(reply, request_id)
        finally:
            if token is not None:
                reset_request_id(token)

    return _handle


def register_exception_handlers(app: FastAPI) -> None:
    """Answer every failure with the ``{code, message, details}`` envelope."""

    for exc_type, build_reply in _REPLY_BUILDERS:
        app.add_exception_handler(exc_type, _envelope_handler(build_reply))


__all__ = [
    "ApplicationError",
    "ConflictError",
    "MismatchError",
    "NotFoundError",
    "ValidationError",
    "field_errors_from_pydantic",
    "register_exception_handlers",
]
