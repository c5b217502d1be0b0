from __future__ import annotations

from typing import Any

from bson import ObjectId
from bson.errors import InvalidId


class InvalidRecordId(ValueError):
    """Raised when a string is not a well-formed record identifier."""


# PUBLIC_INTERFACE
class RecordId:
    """
    Opaque identifier of a stored todo.

    Backed by a BSON ObjectId so the same value can be handed to MongoDB
    directly, but handlers only ever deal with `RecordId` and its canonical
    string form (24 lowercase hex characters).
    """

    __slots__ = ("_oid",)

    def __init__(self, oid: ObjectId) -> None:
        self._oid = oid

    @classmethod
    def new(cls) -> "RecordId":
        """Generate a fresh, unique identifier."""
        return cls(ObjectId())

    @staticmethod
    def is_valid(value: Any) -> bool:
        """Return True if `value` is the string form of a record identifier."""
        return isinstance(value, str) and ObjectId.is_valid(value.strip())

    @classmethod
    def parse(cls, value: str) -> "RecordId":
        """
        Parse the canonical string form. Surrounding whitespace is ignored.

        Raises:
            InvalidRecordId: if the value is not 24 hex characters.
        """
        if not isinstance(value, str):
            raise InvalidRecordId(f"{value!r} is not a valid record id")
        try:
            return cls(ObjectId(value.strip()))
        except (InvalidId, TypeError) as e:
            raise InvalidRecordId(f"{value!r} is not a valid record id") from e

    @property
    def object_id(self) -> ObjectId:
        return self._oid

    def __str__(self) -> str:
        return str(self._oid)

    def __repr__(self) -> str:
        return f"RecordId('{self._oid}')"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RecordId):
            return self._oid == other._oid
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._oid)
