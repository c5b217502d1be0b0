"""
Conversions between the three shapes a todo takes: the MongoDB document,
the storage record and the wire view.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

from .ids import RecordId
from .models import TodoRecord
from .schemas import TodoPayload, TodoView


def ceil_to_millisecond(value: datetime) -> datetime:
    """
    Round up to a whole millisecond, the precision BSON dates are stored at,
    so a stored timestamp never reads back earlier than the moment it was taken.
    """
    remainder = value.microsecond % 1000
    return value + timedelta(microseconds=1000 - remainder) if remainder else value


# PUBLIC_INTERFACE
def new_record(payload: TodoPayload, now: Optional[datetime] = None) -> TodoRecord:
    """
    Build the record for a newly created todo. `completed` in the payload is
    ignored; new todos always start out open.
    """
    return {
        "id": RecordId.new(),
        "title": payload.title,
        "completed": False,
        "created_at": ceil_to_millisecond(now or datetime.now(timezone.utc)),
    }


# PUBLIC_INTERFACE
def record_to_view(record: TodoRecord) -> TodoView:
    """Render a storage record for the wire, with the id as a hex string."""
    return TodoView(
        id=str(record["id"]),
        title=record["title"],
        completed=record["completed"],
        created_at=record["created_at"],
    )


def record_to_document(record: TodoRecord) -> Dict[str, Any]:
    return {
        "_id": record["id"].object_id,
        "title": record["title"],
        "completed": record["completed"],
        "createdAt": record["created_at"],
    }


def document_to_record(doc: Mapping[str, Any]) -> TodoRecord:
    created_at = doc.get("createdAt")
    # pymongo hands back naive datetimes in UTC unless tz_aware is set
    if isinstance(created_at, datetime) and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return {
        "id": RecordId(doc["_id"]),
        "title": str(doc.get("title", "")),
        "completed": bool(doc.get("completed", False)),
        "created_at": created_at,  # type: ignore[typeddict-item]
    }
