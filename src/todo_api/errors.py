from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .ids import RecordId

logger = logging.getLogger(__name__)

MSG_INVALID_ID = "The id is invalid"
MSG_INVALID_BODY = "The body is invalid"
# Detail FastAPI uses when a request body cannot be read or decoded
BODY_PARSE_ERROR = "There was an error parsing the body"


class StorageError(Exception):
    """Raised by repositories when the underlying store fails."""


class RecordNotFound(StorageError):
    """Raised when an operation addressed by id matched no record."""


# PUBLIC_INTERFACE
class ApiError(Exception):
    """
    An error to be returned to the client as `{"message": ..., "error": ...}`.

    `error` is optional detail (a driver message or validation errors) and is
    omitted from the body when not set.
    """

    def __init__(self, status_code: int, message: str, error: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error

    def to_content(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"message": self.message}
        if self.error is not None:
            content["error"] = self.error
        return content


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_content()))


def _body_error(request: Request, error: Any) -> ApiError:
    # A malformed {todo_id} path parameter is reported before any body error,
    # since FastAPI may reject a body before path parameters are looked at.
    todo_id = request.path_params.get("todo_id")
    if todo_id is not None and not RecordId.is_valid(todo_id):
        return ApiError(status.HTTP_400_BAD_REQUEST, MSG_INVALID_ID)
    return ApiError(status.HTTP_400_BAD_REQUEST, MSG_INVALID_BODY, error)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Report request validation failures with the same message shape as the
    handlers.
    """
    err = _body_error(request, exc.errors())
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, err.message)
    return await api_error_handler(request, err)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Render framework HTTP errors (unknown route, wrong method, unreadable
    body) as `{"message": ...}`.
    """
    if exc.status_code == status.HTTP_400_BAD_REQUEST and exc.detail == BODY_PARSE_ERROR:
        err = _body_error(request, exc.detail)
    else:
        err = ApiError(exc.status_code, str(exc.detail))
    return JSONResponse(
        status_code=err.status_code,
        content=jsonable_encoder(err.to_content()),
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
