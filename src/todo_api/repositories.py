from __future__ import annotations

from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict, List

from fastapi import Request

from .errors import RecordNotFound, StorageError
from .ids import RecordId
from .models import TodoRecord
from .settings import Settings


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def find_all(self) -> List[TodoRecord]:
        """Return every stored record in the store's natural order."""

    @abstractmethod
    def insert(self, record: TodoRecord) -> None:
        """Persist a new record. Raise StorageError on failure."""

    @abstractmethod
    def update(self, record_id: RecordId, title: str, completed: bool) -> None:
        """
        Set title and completed on the record with the given id. Updating an
        id that matches nothing is not an error.
        """

    @abstractmethod
    def delete(self, record_id: RecordId) -> None:
        """Remove the record with the given id. Raise RecordNotFound if none matched."""

    def close(self) -> None:
        """Release any resources held by the backend."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and local runs.
    Records are returned in insertion order.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[RecordId, TodoRecord] = {}

    def find_all(self) -> List[TodoRecord]:
        with self._lock:
            # Return copies to avoid external mutation
            return [t.copy() for t in self._items.values()]

    def insert(self, record: TodoRecord) -> None:
        with self._lock:
            if record["id"] in self._items:
                raise StorageError(f"duplicate id {record['id']}")
            self._items[record["id"]] = record.copy()

    def update(self, record_id: RecordId, title: str, completed: bool) -> None:
        with self._lock:
            existing = self._items.get(record_id)
            if existing is None:
                return
            existing["title"] = title
            existing["completed"] = completed

    def delete(self, record_id: RecordId) -> None:
        with self._lock:
            if self._items.pop(record_id, None) is None:
                raise RecordNotFound(f"no todo with id {record_id}")


# PUBLIC_INTERFACE
def build_repository(settings: Settings) -> Repository:
    """
    Create the repository configured by settings.
    - mongo: MongoRepository against settings.host_address
    - memory: InMemoryRepository
    """
    if settings.persistence_backend == "memory":
        return InMemoryRepository()
    from .db import MongoRepository

    return MongoRepository.connect(
        settings.host_address,
        settings.database_name,
        settings.collection_name,
    )


# PUBLIC_INTERFACE
def get_repository(request: Request) -> Repository:
    """FastAPI dependency returning the repository owned by the application."""
    return request.app.state.repository
