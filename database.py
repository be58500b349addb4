"""
Document store access.

A single Database object owns the MongoClient for the lifetime of the
process. It is created once by the application factory and handed to the
services; nothing reaches for a module-level connection.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from bson.errors import InvalidDocument
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, PyMongoError
from pymongo.server_api import ServerApi

from errors import StoreError, StoreUnavailable
from logging_config import get_logger
from settings import Settings

logger = get_logger(__name__)


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Translate driver failures into client-safe store errors carrying `message`."""
    try:
        yield
    except ConnectionFailure as exc:
        logger.error("store_unavailable", operation=message, error=str(exc))
        raise StoreUnavailable(message) from exc
    except (PyMongoError, InvalidDocument, OverflowError) as exc:
        logger.error("store_error", operation=message, error=str(exc))
        raise StoreError(message) from exc


def serialize(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Make a stored document JSON friendly (ObjectId -> hex string)."""
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


class Database:
    def __init__(self, client: MongoClient, name: str):
        self.client = client
        self.name = name
        self.db = client[name]

    @classmethod
    def connect(cls, settings: Settings) -> "Database":
        client = MongoClient(
            settings.mongo_uri,
            server_api=ServerApi("1"),
            serverSelectionTimeoutMS=settings.db_timeout_ms,
        )
        logger.info("database_client_created", host=settings.db_host, database=settings.db_name)
        return cls(client, settings.db_name)

    def __getitem__(self, collection_name: str) -> Collection:
        return self.db[collection_name]

    def create_document(self, collection_name: str, data: Dict[str, Any]) -> str:
        """Insert one document stamped with createdAt and return its id as a string."""
        doc = dict(data)
        doc["createdAt"] = datetime.now(timezone.utc)
        result = self.db[collection_name].insert_one(doc)
        return str(result.inserted_id)

    def get_documents(self, collection_name: str, filter_dict: Optional[Dict[str, Any]] = None,
                      sort: Optional[Sequence[Tuple[str, int]]] = None) -> List[Dict[str, Any]]:
        cursor = self.db[collection_name].find(filter_dict or {})
        if sort:
            cursor = cursor.sort(list(sort))
        return [serialize(doc) for doc in cursor]

    def close(self) -> None:
        self.client.close()
