from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias, TypeVar, overload

from ._driver import Driver, driver_for
from ._errors import (
    ColumnOutOfRangeError,
    ExecutionError,
    InvalidShapeError,
    SqlShapeError,
)
from ._hydrate import FieldHydrator, Hydrator
from ._template import Template, render

if TYPE_CHECKING:
    from ._dbapi import DBAPIConnection, DBAPICursor, Params

logger = logging.getLogger("sqlshape")

T = TypeVar("T")

ColumnSelector: TypeAlias = int | str
Row: TypeAlias = dict[str, Any]

DEFAULT_HYDRATOR: Hydrator = FieldHydrator()


@dataclass(frozen=True)
class LegacyResult:
    """OpenCart-style result: ``rows``, first ``row`` and ``num_rows``."""

    rows: list[Row]
    row: Row | None
    num_rows: int
    affected_rows: int = field(default=-1, compare=False)

    @classmethod
    def from_rows(cls, rows: list[Row], affected_rows: int = -1) -> LegacyResult:
        return cls(
            rows=rows,
            row=rows[0] if rows else None,
            num_rows=len(rows),
            affected_rows=affected_rows,
        )


def _columns(cursor: DBAPICursor) -> list[str]:
    if cursor.description is None:
        return []
    return [desc[0] for desc in cursor.description]


def _column_index(cols: list[str], column: ColumnSelector) -> int:
    if isinstance(column, str):
        if column in cols:
            return cols.index(column)
    # bool is an int, but True is not a column position
    elif not isinstance(column, bool) and 0 <= column < len(cols):
        return column
    raise ColumnOutOfRangeError(column, cols)


def _shape_row(
    cols: list[str],
    row: Sequence[Any],
    into: type[T] | None,
    hydrator: Hydrator,
) -> Row | T:
    mapping = dict(zip(cols, row, strict=True))
    if into is None:
        return mapping
    return hydrator.hydrate(mapping, into)


@contextmanager
def _driver_errors(driver: Driver, sql: str) -> Iterator[None]:
    try:
        yield
    except SqlShapeError:
        raise
    except driver.errors as err:
        logger.warning("ERR: %s - %s", err, " ".join(sql.split()))
        raise ExecutionError(sql, err) from err


def _close_after_error(cursor: DBAPICursor, driver: Driver) -> None:
    # never replaces the error already propagating
    try:
        cursor.close()
    except driver.errors as err:
        logger.warning("cursor close failed: %s", err)


def _execute(
    conn: DBAPIConnection, driver: Driver, sql: str, params: Params
) -> DBAPICursor:
    logger.debug("execute: %s", " ".join(sql.split()))
    with _driver_errors(driver, sql):
        cursor = conn.cursor()
        try:
            cursor.execute(sql, params) if params else cursor.execute(sql)
        except BaseException:
            _close_after_error(cursor, driver)
            raise
    return cursor


@dataclass(frozen=True)
class Query:
    """SQL text (or a t-string) plus its bound parameters.

    Each ``fetch_*`` method runs the query on ``conn``, shapes the result
    and closes the cursor before returning, also when shaping raises.
    Driver errors raised while rows are fetched become
    :class:`~sqlshape.ExecutionError`, the same as errors from executing.
    Statements without result columns (DDL, INSERT, UPDATE, DELETE) shape
    to an empty result.

    ``on_execute`` is called with every cursor that executed successfully,
    before any row is read.
    """

    sql: Template | str
    params: Params = ()
    on_execute: Callable[[DBAPICursor], object] | None = field(
        default=None, compare=False, repr=False
    )

    def compile(self, paramstyle: str) -> tuple[str, Params]:
        if isinstance(self.sql, Template):
            if self.params:
                msg = "t-string queries take their parameters from interpolations"
                raise TypeError(msg)
            return render(self.sql, paramstyle)
        return self.sql, self.params

    def _run(self, conn: DBAPIConnection) -> tuple[Driver, str, DBAPICursor]:
        driver = driver_for(conn)
        sql, params = self.compile(driver.paramstyle)
        cursor = _execute(conn, driver, sql, params)
        if self.on_execute is not None:
            try:
                self.on_execute(cursor)
            except BaseException:
                _close_after_error(cursor, driver)
                raise
        return driver, sql, cursor

    @contextmanager
    def _shaping(self, conn: DBAPIConnection) -> Iterator[DBAPICursor]:
        driver, sql, cursor = self._run(conn)
        with _driver_errors(driver, sql):
            try:
                yield cursor
            except BaseException:
                _close_after_error(cursor, driver)
                raise
            cursor.close()

    def cursor(self, conn: DBAPIConnection) -> DBAPICursor:
        """Execute and hand the open cursor to the caller, who must close it."""
        return self._run(conn)[2]

    def execute_rows(self, conn: DBAPIConnection) -> int:
        with self._shaping(conn) as cursor:
            return int(cursor.rowcount)

    def fetch_legacy(self, conn: DBAPIConnection) -> LegacyResult:
        with self._shaping(conn) as cursor:
            cols = _columns(cursor)
            # no columns means no rows, whatever rowcount says
            rows = [dict(zip(cols, row)) for row in cursor.fetchall()] if cols else []
            return LegacyResult.from_rows(rows, affected_rows=cursor.rowcount)

    @overload
    def fetch_all(
        self, conn: DBAPIConnection, into: None = None, hydrator: Hydrator = ...
    ) -> list[Row]: ...
    @overload
    def fetch_all(
        self, conn: DBAPIConnection, into: type[T], hydrator: Hydrator = ...
    ) -> list[T]: ...
    def fetch_all(
        self,
        conn: DBAPIConnection,
        into: type[T] | None = None,
        hydrator: Hydrator = DEFAULT_HYDRATOR,
    ) -> list[Row] | list[T]:
        with self._shaping(conn) as cursor:
            cols = _columns(cursor)
            if not cols:
                return []
            return [
                _shape_row(cols, row, into, hydrator) for row in cursor.fetchall()
            ]  # type: ignore[return-value]

    def fetch_column(
        self, conn: DBAPIConnection, column: ColumnSelector = 0
    ) -> list[Any]:
        with self._shaping(conn) as cursor:
            cols = _columns(cursor)
            if not cols:
                return []
            index = _column_index(cols, column)
            return [row[index] for row in cursor.fetchall()]

    def fetch_key_pair(
        self,
        conn: DBAPIConnection,
        key: ColumnSelector = 0,
        value: ColumnSelector = 1,
    ) -> dict[Any, Any]:
        with self._shaping(conn) as cursor:
            cols = _columns(cursor)
            if not cols:
                return {}
            if len(cols) < 2:
                raise InvalidShapeError(expected=2, actual=len(cols))
            key_index = _column_index(cols, key)
            value_index = _column_index(cols, value)
            return {row[key_index]: row[value_index] for row in cursor.fetchall()}

    @overload
    def fetch_one(
        self, conn: DBAPIConnection, into: None = None, hydrator: Hydrator = ...
    ) -> Row | None: ...
    @overload
    def fetch_one(
        self, conn: DBAPIConnection, into: type[T], hydrator: Hydrator = ...
    ) -> T | None: ...
    def fetch_one(
        self,
        conn: DBAPIConnection,
        into: type[T] | None = None,
        hydrator: Hydrator = DEFAULT_HYDRATOR,
    ) -> Row | T | None:
        with self._shaping(conn) as cursor:
            cols = _columns(cursor)
            if not cols:
                return None
            row = cursor.fetchone()
            if row is None:
                return None
            return _shape_row(cols, row, into, hydrator)

    def fetch_scalar(
        self, conn: DBAPIConnection, column: ColumnSelector = 0
    ) -> Any | None:
        with self._shaping(conn) as cursor:
            cols = _columns(cursor)
            if not cols:
                return None
            index = _column_index(cols, column)
            row = cursor.fetchone()
            # a falsy value in a matched row is still a value
            if row is None:
                return None
            return row[index]

    def fetch_count(self, conn: DBAPIConnection) -> int:
        sql, params = self.compile(driver_for(conn).paramstyle)
        count = Query(
            f"SELECT COUNT(*) FROM ({sql}) AS T", params, self.on_execute
        ).fetch_scalar(conn, 0)
        return 0 if count is None else int(count)
