from __future__ import annotations

from datetime import datetime
from typing import TypedDict

from .ids import RecordId


# PUBLIC_INTERFACE
class TodoRecord(TypedDict):
    """
    Storage-side representation of a Todo item.

    Fields:
    - id: Identifier assigned at creation, never changed or reused
    - title: Non-empty title
    - completed: Completion flag, False on creation
    - created_at: Creation timestamp (UTC), written once
    """

    id: RecordId
    title: str
    completed: bool
    created_at: datetime
