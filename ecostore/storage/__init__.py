"""Storage backends for EcoStore."""

from .base import CacheKey, DocumentStore, Mutation, RemoteDocuments
from .json_file import AsyncJsonStore, JsonStore
from .locks import KeyedLock
from .operations import Operation
from .paths import NOT_FOUND
from .sqlalchemy import AsyncSQLAlchemyStorage, SQLAlchemyDocumentStore

__all__ = [
    "CacheKey",
    "DocumentStore",
    "Mutation",
    "RemoteDocuments",
    "AsyncJsonStore",
    "JsonStore",
    "KeyedLock",
    "Operation",
    "NOT_FOUND",
    "AsyncSQLAlchemyStorage",
    "SQLAlchemyDocumentStore",
]
