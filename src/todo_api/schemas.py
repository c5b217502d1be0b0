from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# PUBLIC_INTERFACE
class TodoPayload(BaseModel):
    """
    Request body for creating or updating a Todo item.

    `title` defaults to an empty string so a missing title is reported by the
    handlers with their own message instead of a validation error.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk",
                "completed": False,
            }
        }
    )

    title: str = Field(default="", description="Title of the todo item; must not be empty")
    completed: bool = Field(default=False, description="Completion status flag (ignored on create)")

    @field_validator("title", mode="before")
    @classmethod
    def null_title_is_empty(cls, v: Any) -> Any:
        """
        Treat an explicit null title like a missing one.
        """
        return "" if v is None else v


# PUBLIC_INTERFACE
class TodoView(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "5f1b0c8e9d3e2a0001a1b2c3",
                "title": "Buy milk",
                "completed": False,
                "createdAt": "2025-01-25T10:15:30.123000Z",
            }
        },
    )

    id: str = Field(..., description="Unique identifier of the todo item (hex string)")
    title: str = Field(..., description="Title of the todo item")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp")


class TodoList(BaseModel):
    data: List[TodoView] = Field(..., description="All stored todo items")


class MessageResponse(BaseModel):
    message: str
    error: Optional[Any] = None


class TodoCreated(BaseModel):
    message: str = Field(..., description="Confirmation message")
    todo_id: str = Field(..., description="Identifier of the created todo item")
