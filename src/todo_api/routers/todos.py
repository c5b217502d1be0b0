from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path, status

from ..errors import MSG_INVALID_ID, ApiError, StorageError
from ..ids import InvalidRecordId, RecordId
from ..mappers import new_record, record_to_view
from ..repositories import Repository, get_repository
from ..schemas import MessageResponse, TodoCreated, TodoList, TodoPayload

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/todo",
    tags=["todos"],
)


def _record_id(todo_id: str = Path(..., description="Identifier of the todo item (24 hex characters)")) -> RecordId:
    """
    Dependency parsing the `{todo_id}` path parameter into a RecordId.
    """
    try:
        return RecordId.parse(todo_id)
    except InvalidRecordId:
        raise ApiError(status.HTTP_400_BAD_REQUEST, MSG_INVALID_ID)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=TodoList,
    summary="List Todos",
    description="Return every stored todo item in storage order.",
    responses={
        200: {"description": "List retrieved successfully"},
        500: {"model": MessageResponse, "description": "Storage failure"},
    },
)
def list_todos(repo: Repository = Depends(get_repository)) -> TodoList:
    """
    List all todos.
    """
    try:
        records = repo.find_all()
    except StorageError as e:
        logger.error("Failed to fetch todos: %s", e)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch todo", str(e))
    return TodoList(data=[record_to_view(r) for r in records])


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new, not yet completed, todo item and return its identifier.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"model": MessageResponse, "description": "Invalid body or empty title"},
        500: {"model": MessageResponse, "description": "Storage failure"},
    },
)
def create_todo(payload: TodoPayload, repo: Repository = Depends(get_repository)) -> TodoCreated:
    """
    Create a new Todo. `completed` in the body is ignored.
    """
    if payload.title == "":
        raise ApiError(status.HTTP_400_BAD_REQUEST, "The title is required")

    record = new_record(payload)
    try:
        repo.insert(record)
    except StorageError as e:
        logger.error("Failed to save todo: %s", e)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save todo")

    logger.info("Created todo %s", record["id"])
    return TodoCreated(message="todo created successfully", todo_id=str(record["id"]))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    summary="Update Todo",
    description=(
        "Set the title and completion flag of a todo item. An identifier that matches "
        "no item is not reported as an error."
    ),
    responses={
        200: {"description": "Todo updated"},
        400: {"model": MessageResponse, "description": "Invalid id, invalid body or empty title"},
        500: {"model": MessageResponse, "description": "Storage failure"},
    },
)
def update_todo(
    payload: TodoPayload,
    record_id: RecordId = Depends(_record_id),
    repo: Repository = Depends(get_repository),
) -> MessageResponse:
    """
    Update title and completed of an existing Todo.
    """
    if payload.title == "":
        raise ApiError(status.HTTP_400_BAD_REQUEST, "The title field is required")

    try:
        repo.update(record_id, payload.title, payload.completed)
    except StorageError as e:
        logger.error("Failed to update todo %s: %s", record_id, e)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update todo")

    logger.info("Updated todo %s", record_id)
    return MessageResponse(message="Todo updated successfully")


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    summary="Delete Todo",
    description="Delete a todo item by identifier.",
    responses={
        200: {"description": "Todo deleted"},
        400: {"model": MessageResponse, "description": "Invalid id, or nothing was deleted"},
    },
)
def delete_todo(
    record_id: RecordId = Depends(_record_id),
    repo: Repository = Depends(get_repository),
) -> MessageResponse:
    """
    Delete a Todo. A missing record and a storage failure are both reported as 400.
    """
    try:
        repo.delete(record_id)
    except StorageError as e:
        logger.warning("Failed to delete todo %s: %s", record_id, e)
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Failed to delete todo", str(e))

    logger.info("Deleted todo %s", record_id)
    return MessageResponse(message="Todo deleted successfully")
