"""SQLAlchemy backend acting as the remote document database."""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Sequence

from sqlalchemy import JSON, DateTime, String, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..domain.exceptions import InvalidPathError
from . import operations
from .base import CacheKey, Mutation, RemoteDocuments
from .operations import Operation

logger = logging.getLogger(__name__)

_WHOLE = "document"


class Base(DeclarativeBase):
    pass


class DocumentTable(Base):
    __tablename__ = "ecostore_documents"

    kind: Mapped[str] = mapped_column(String(32), primary_key=True)
    guild_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    member_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[Any] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class AsyncSQLAlchemyStorage:
    """Owns the async engine and hands out document stores bound to it."""

    def __init__(self, dsn: str, *, echo: bool = False) -> None:
        self._engine = create_async_engine(dsn, echo=echo, future=True)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

    async def init_models(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    def document_store(self) -> "SQLAlchemyDocumentStore":
        return SQLAlchemyDocumentStore(self._session_factory)


class SQLAlchemyDocumentStore(RemoteDocuments):
    """One JSON document per ``(kind, guild_id, member_id)`` row."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch_document(self, kind: str, key: CacheKey) -> Any:
        async with self._session_factory() as session:
            row = await session.get(DocumentTable, (kind, *key))
            return row.data if row is not None else None

    async def mutate_document(
        self,
        kind: str,
        key: CacheKey,
        inner_path: str | None,
        operation: Operation,
        operand: Any = None,
    ) -> Mutation:
        """Apply one operator inside a transaction and return the committed document."""
        identity = (kind, *key)
        async with self._session_factory() as session:
            async with session.begin():
                row = await session.get(DocumentTable, identity, with_for_update=True)
                current = copy.deepcopy(row.data) if row is not None else None
                document, result = _apply(current, inner_path, operation, operand)
                now = datetime.now(timezone.utc)
                if operation is Operation.DELETE and not result:
                    pass
                elif inner_path is None and operation is Operation.DELETE:
                    await session.delete(row)
                elif row is None:
                    session.add(
                        DocumentTable(
                            kind=kind,
                            guild_id=key[0],
                            member_id=key[1],
                            data=document,
                            updated_at=now,
                        )
                    )
                else:
                    row.data = document
                    row.updated_at = now
            stored = await session.get(DocumentTable, identity, populate_existing=True)
        logger.debug("Remote %s on %s %s (%s)", operation.value, kind, key, inner_path)
        return Mutation(document=stored.data if stored is not None else None, result=result)

    async def dump(self, guild_id: str | None = None) -> Sequence[tuple[str, CacheKey, Any]]:
        """Return every stored row, or only the rows of ``guild_id``."""
        query = select(DocumentTable)
        if guild_id is not None:
            query = query.where(DocumentTable.guild_id == guild_id)
        async with self._session_factory() as session:
            rows = (await session.execute(query)).scalars().all()
            return [(row.kind, (row.guild_id, row.member_id), row.data) for row in rows]


def _apply(
    document: Any, inner_path: str | None, operation: Operation, operand: Any
) -> tuple[Any, Any]:
    if inner_path is None:
        root = {} if document is None else {_WHOLE: document}
        result = operations.apply(root, _WHOLE, operation, operand)
        return root.get(_WHOLE), result
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise InvalidPathError(
            inner_path, f"Cannot address '{inner_path}' inside a {type(document).__name__}"
        )
    result = operations.apply(document, inner_path, operation, operand)
    return document, result
