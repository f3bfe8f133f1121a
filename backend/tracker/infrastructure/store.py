"""Record Store — transactional CRUD over the embedded SQLite store, generic per kind.

Invariants:
    - One StoreConnection per process, shared by every request (injected, never global)
    - create/update/delete each run in their own transaction: committed whole or rolled back
    - update/delete are single guarded statements: zero matched rows is a miss,
      so a record deleted concurrently is never reported as updated or deleted
    - list_all is a fresh scan per call; no cursor state survives the call
    - All SQLAlchemy exceptions leave as StoreFailureError, OSError as IOFailureError
    - Schema definition is idempotent; a stored table with a different column
      set is a conflict, never silently altered

Design Decisions:
    - SQLite via aiosqlite: single-file embedded store, transactional, async
      (ADR: single process, single writer)
    - RecordStore is parameterized by ResourceKind instead of being subclassed
      per kind: one CRUD protocol, independent schemas
    - expire_on_commit=False: rows stay readable after the transaction closes
    - asyncio.Lock around schema definition: concurrent first writes of a kind
      must not race on CREATE TABLE
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from functools import partial
from pathlib import Path
from typing import Any, AsyncGenerator, Callable, Generic

from sqlalchemy import Table, delete, inspect, select, text, update
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from tracker.core.errors import (
    InvalidInputError, IOFailureError, StoreFailureError,
)
from tracker.core.identifiers import RecordRef
from tracker.resources import R, ResourceKind

logger = logging.getLogger(__name__)


def store_error_message(exc: SQLAlchemyError) -> str:
    """The store's own error text, without SQLAlchemy's statement dump."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


def _define_table(sync_conn: Connection, table: Table) -> bool:
    """Create table if missing. Returns True when it was created."""
    inspector = inspect(sync_conn)
    if not inspector.has_table(table.name):
        table.create(sync_conn)
        return True
    stored = {col["name"] for col in inspector.get_columns(table.name)}
    expected = {col.name for col in table.columns}
    if stored != expected:
        raise StoreFailureError(
            f"schema conflict for '{table.name}': stored columns "
            f"{sorted(stored)} do not match {sorted(expected)}",
            "define",
        )
    return False


class StoreConnection:
    """Shared handle to the embedded store: engine, session factory, schema registry."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._defined: set[str] = set()
        self._present: set[str] = set()
        self._schema_lock = asyncio.Lock()

    @asynccontextmanager
    async def _translate_errors(self, operation: str) -> AsyncGenerator[None, None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.debug(f"Store {operation} rolled back: {e}")
            raise StoreFailureError(
                store_error_message(e), operation, cause=e,
            ) from e
        except OSError as e:
            logger.debug(f"Store {operation} hit I/O error: {e}")
            raise IOFailureError(operation, cause=e) from e

    @asynccontextmanager
    async def transaction(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        """One begin/commit scope. Rolls back on any exception."""
        async with self._translate_errors(operation):
            async with self._session_factory() as session:
                async with session.begin():
                    yield session

    async def run_sync(self, fn: Callable[[Connection], Any], operation: str) -> Any:
        """Run fn against a raw connection inside one transaction."""
        async with self._translate_errors(operation):
            async with self.engine.begin() as conn:
                return await conn.run_sync(fn)

    async def define(self, table: Table) -> None:
        """Register a table's schema with the store (idempotent)."""
        if table.name in self._defined:
            return
        async with self._schema_lock:
            if table.name in self._defined:
                return
            created = await self.run_sync(partial(_define_table, table=table), "define")
            self._defined.add(table.name)
        if created:
            logger.info(f"Defined schema '{table.name}'")

    async def is_defined(self, table_name: str) -> bool:
        if table_name in self._defined or table_name in self._present:
            return True
        exists = await self.run_sync(
            lambda conn: inspect(conn).has_table(table_name), "scan",
        )
        if exists:
            self._present.add(table_name)
        return exists

    async def health_check(self) -> bool:
        """Check store connectivity (for readiness probes)."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Store health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()


def open_store(path: str, create: bool = True) -> StoreConnection:
    """Open the store file at path, creating it (and its directory) if allowed."""
    store_file = Path(path).expanduser()
    if not create and not store_file.exists():
        raise IOFailureError(
            "open", cause=FileNotFoundError(f"no store at {store_file}"),
        )
    try:
        store_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IOFailureError("open", cause=e) from e
    engine = create_async_engine(f"sqlite+aiosqlite:///{store_file}", echo=False)
    logger.info(f"Opened store at {store_file}")
    return StoreConnection(engine)


class RecordStore(Generic[R]):
    """CRUD for one resource kind over a shared StoreConnection."""

    def __init__(self, connection: StoreConnection, kind: ResourceKind[R]):
        self.connection = connection
        self.kind = kind

    @property
    def _table(self) -> Table:
        return self.kind.model.__table__

    def parse_ref(self, raw: str) -> RecordRef:
        """Decode an identifier issued for this kind."""
        ref = RecordRef.parse(raw)
        if ref.kind != self.kind.label:
            raise InvalidInputError(
                f"Identifier '{raw}' refers to a {ref.kind} record, "
                f"not a {self.kind.label} record",
            )
        return ref

    def _resolve(self, ref: RecordRef | str) -> RecordRef:
        return self.parse_ref(ref if isinstance(ref, str) else str(ref))

    def _to_record(self, row: Any) -> R:
        fields = self.kind.record_type.model_fields
        return self.kind.record_type.model_validate(
            {name: getattr(row, name) for name in fields},
        )

    async def ensure_schema(self) -> None:
        await self.connection.define(self._table)

    async def create(self, record: R) -> RecordRef:
        """Insert record in its own transaction; return its identifier."""
        async with self.connection.transaction("insert") as session:
            row = self.kind.model(**record.model_dump())
            session.add(row)
            await session.flush()
            key = row.id
        ref = RecordRef(self.kind.label, key)
        logger.debug(f"Inserted {ref}", extra={"resource": self.kind.name})
        return ref

    async def list_all(self) -> list[tuple[RecordRef, R]]:
        """Scan every stored record of this kind. Order is store-defined."""
        if not await self.connection.is_defined(self._table.name):
            return []
        async with self.connection.transaction("scan") as session:
            result = await session.execute(select(self.kind.model))
            rows = result.scalars().all()
        return [
            (RecordRef(self.kind.label, row.id), self._to_record(row))
            for row in rows
        ]

    async def update(self, ref: RecordRef | str, record: R) -> None:
        """Replace the record at ref in its own transaction."""
        ref = self._resolve(ref)
        model = self.kind.model
        async with self.connection.transaction("update") as session:
            result = await session.execute(
                update(model)
                .where(model.id == ref.key)
                .values(**record.model_dump()),
            )
            if result.rowcount == 0:
                raise StoreFailureError(f"record '{ref}' not found", "update")
        logger.debug(f"Updated {ref}", extra={"resource": self.kind.name})

    async def delete(self, ref: RecordRef | str) -> None:
        """Remove the record at ref in its own transaction."""
        ref = self._resolve(ref)
        model = self.kind.model
        async with self.connection.transaction("delete") as session:
            result = await session.execute(delete(model).where(model.id == ref.key))
            if result.rowcount == 0:
                raise StoreFailureError(f"record '{ref}' not found", "delete")
        logger.debug(f"Deleted {ref}", extra={"resource": self.kind.name})
