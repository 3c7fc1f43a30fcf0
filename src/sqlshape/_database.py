from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TypeVar, overload

import sqlalchemy.engine
import sqlalchemy.orm

from ._active import activate, active, deactivate
from ._config import ConnectionConfig
from ._connect import open_connection
from ._dbapi import DBAPIConnection, DBAPICursor, Params
from ._driver import driver_for
from ._escape import ParamType, escape, quote_identifier
from ._hydrate import FieldHydrator, Hydrator
from ._query import ColumnSelector, LegacyResult, Query, Row
from ._template import Template

logger = logging.getLogger("sqlshape")

T = TypeVar("T")


def _driver_connection(
    conn: DBAPIConnection | sqlalchemy.engine.Connection | sqlalchemy.orm.Session,
) -> DBAPIConnection:
    if isinstance(conn, sqlalchemy.orm.Session):
        conn = conn.connection()
    if isinstance(conn, sqlalchemy.engine.Connection):
        return conn.connection.driver_connection  # type: ignore[return-value]
    return conn


class Database:
    """Query shortcuts over one DB-API connection.

    ``Database(conn)`` borrows a connection the caller already holds (a
    DB-API connection, or a SQLAlchemy ``Connection``/``Session`` whose
    driver connection is used). :meth:`connect` opens and owns one. Unless
    ``register=False``, a new facade becomes the process-wide active one
    (see :mod:`sqlshape._active`).
    """

    def __init__(
        self,
        conn: DBAPIConnection | sqlalchemy.engine.Connection | sqlalchemy.orm.Session,
        *,
        hydrator: Hydrator | None = None,
        register: bool = True,
        owns_connection: bool = False,
    ) -> None:
        self._conn = _driver_connection(conn)
        self._hydrator = hydrator or FieldHydrator()
        self._owns_connection = owns_connection
        self._closed = False
        self._last_insert_id: Any | None = None
        if register:
            activate(self)

    @classmethod
    def connect(
        cls,
        target: str | ConnectionConfig,
        username: str | None = None,
        password: str | None = None,
        *,
        apply_defaults: bool = True,
        options: dict[str, Any] | None = None,
        hydrator: Hydrator | None = None,
        register: bool = True,
    ) -> Database:
        """Open a connection and wrap it.

        A :class:`ConnectionConfig` ``target`` is used as is and the other
        connection arguments are ignored. Raises
        :class:`~sqlshape.DatabaseConnectionError` when the session cannot
        be opened.
        """
        if isinstance(target, ConnectionConfig):
            config = target
        else:
            config = ConnectionConfig(
                target=target,
                username=username,
                password=password,
                apply_defaults=apply_defaults,
                options=options or {},
            )
        return cls(
            open_connection(config),
            hydrator=hydrator,
            register=register,
            owns_connection=True,
        )

    @property
    def connection(self) -> DBAPIConnection:
        return self._conn

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if active() is self:
            deactivate()
        if self._owns_connection:
            self._conn.close()
            logger.info("closed: %s", driver_for(self._conn).name)

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<Database {driver_for(self._conn).name}>"

    def escape(self, value: object, type_hint: ParamType = ParamType.STR) -> str:
        return escape(self._conn, value, type_hint)

    def encode(self, value: object) -> str:
        """OpenCart alias: ``escape(str(value))``."""
        return escape(self._conn, str(value))

    def quote_identifier(self, name: str) -> str:
        return quote_identifier(self._conn, name)

    def last_insert_id(self) -> Any | None:
        """Row id of the latest row inserted through this facade, else None.

        Statements that insert nothing leave it unchanged. PostgreSQL
        reports no row ids for tables without OIDs, so use ``RETURNING``
        there.
        """
        return self._last_insert_id

    def _record(self, cursor: DBAPICursor) -> None:
        # sqlite reports 0 for statements on a session that never inserted
        rowid = getattr(cursor, "lastrowid", None)
        if rowid is not None and rowid != 0:
            self._last_insert_id = rowid

    def _query(self, sql: Template | str, params: Params = ()) -> Query:
        return Query(sql, params, self._record)

    def execute(self, sql: Template | str, params: Params = ()) -> DBAPICursor:
        return self._query(sql, params).cursor(self._conn)

    def execute_rows(self, sql: Template | str, params: Params = ()) -> int:
        return self._query(sql, params).execute_rows(self._conn)

    def query(self, sql: Template | str) -> LegacyResult:
        return self._query(sql).fetch_legacy(self._conn)

    @overload
    def query_all(
        self, sql: Template | str, params: Params = (), into: None = None
    ) -> list[Row]: ...
    @overload
    def query_all(
        self, sql: Template | str, params: Params, into: type[T]
    ) -> list[T]: ...
    @overload
    def query_all(
        self, sql: Template | str, params: Params = (), *, into: type[T]
    ) -> list[T]: ...
    def query_all(
        self,
        sql: Template | str,
        params: Params = (),
        into: type[T] | None = None,
    ) -> list[Row] | list[T]:
        return self._query(sql, params).fetch_all(self._conn, into, self._hydrator)

    def query_column(
        self, sql: Template | str, params: Params = (), column: ColumnSelector = 0
    ) -> list[Any]:
        return self._query(sql, params).fetch_column(self._conn, column)

    def query_key_pair(
        self,
        sql: Template | str,
        params: Params = (),
        key: ColumnSelector = 0,
        value: ColumnSelector = 1,
    ) -> dict[Any, Any]:
        return self._query(sql, params).fetch_key_pair(self._conn, key, value)

    @overload
    def query_one(
        self, sql: Template | str, params: Params = (), into: None = None
    ) -> Row | None: ...
    @overload
    def query_one(
        self, sql: Template | str, params: Params, into: type[T]
    ) -> T | None: ...
    @overload
    def query_one(
        self, sql: Template | str, params: Params = (), *, into: type[T]
    ) -> T | None: ...
    def query_one(
        self,
        sql: Template | str,
        params: Params = (),
        into: type[T] | None = None,
    ) -> Row | T | None:
        return self._query(sql, params).fetch_one(self._conn, into, self._hydrator)

    def query_scalar(
        self, sql: Template | str, params: Params = (), column: ColumnSelector = 0
    ) -> Any | None:
        return self._query(sql, params).fetch_scalar(self._conn, column)

    def query_count(self, sql: Template | str, params: Params = ()) -> int:
        return self._query(sql, params).fetch_count(self._conn)


@contextmanager
def connect(
    target: str | ConnectionConfig,
    username: str | None = None,
    password: str | None = None,
    *,
    apply_defaults: bool = True,
    options: dict[str, Any] | None = None,
    hydrator: Hydrator | None = None,
) -> Iterator[Database]:
    database = Database.connect(
        target,
        username,
        password,
        apply_defaults=apply_defaults,
        options=options,
        hydrator=hydrator,
    )
    try:
        yield database
    finally:
        database.close()
