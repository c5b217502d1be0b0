from __future__ import annotations

import logging
from typing import List, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .errors import RecordNotFound, StorageError
from .ids import RecordId
from .mappers import document_to_record, record_to_document
from .models import TodoRecord
from .repositories import Repository

logger = logging.getLogger(__name__)


class MongoRepository(Repository):
    """
    MongoDB repository implementing the Repository interface over a single
    collection. The client is shared by all requests; pymongo pools
    connections and is safe to use from several threads.
    """

    def __init__(self, collection: Collection, client: Optional[MongoClient] = None) -> None:
        self._collection = collection
        self._client = client

    @classmethod
    def connect(cls, host_address: str, database_name: str, collection_name: str) -> "MongoRepository":
        """
        Open a client against `host_address` (``host:port`` or a full
        ``mongodb://`` URI). pymongo connects lazily, so an unreachable server
        surfaces on the first operation rather than here.
        """
        logger.info("Connecting to MongoDB at %s (db=%s, collection=%s)", host_address, database_name, collection_name)
        client: MongoClient = MongoClient(host_address)
        return cls(client[database_name][collection_name], client=client)

    def find_all(self) -> List[TodoRecord]:
        try:
            return [document_to_record(doc) for doc in self._collection.find({})]
        except PyMongoError as e:
            raise StorageError(str(e)) from e

    def insert(self, record: TodoRecord) -> None:
        try:
            self._collection.insert_one(record_to_document(record))
        except PyMongoError as e:
            raise StorageError(str(e)) from e

    def update(self, record_id: RecordId, title: str, completed: bool) -> None:
        try:
            self._collection.update_one(
                {"_id": record_id.object_id},
                {"$set": {"title": title, "completed": completed}},
            )
        except PyMongoError as e:
            raise StorageError(str(e)) from e

    def delete(self, record_id: RecordId) -> None:
        try:
            result = self._collection.delete_one({"_id": record_id.object_id})
        except PyMongoError as e:
            raise StorageError(str(e)) from e
        if result.deleted_count == 0:
            raise RecordNotFound("not found")

    def close(self) -> None:
        if self._client is not None:
            logger.info("Closing MongoDB client")
            self._client.close()
