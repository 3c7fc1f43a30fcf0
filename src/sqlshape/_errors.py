from __future__ import annotations

from collections.abc import Sequence


class SqlShapeError(Exception):
    """Base for all sqlshape errors."""


class DatabaseConnectionError(SqlShapeError, ConnectionError):
    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"cannot connect to {target}: {reason}")


class ExecutionError(SqlShapeError):
    def __init__(self, sql: str, error: BaseException) -> None:
        self.sql = sql
        self.error = error
        super().__init__(f"{type(error).__name__}: {error} [sql: {sql}]")


class ColumnOutOfRangeError(SqlShapeError):
    def __init__(self, column: int | str, available: Sequence[str]) -> None:
        self.column = column
        self.available = list(available)
        super().__init__(
            f"column {column!r} not in result columns {self.available}"
        )


class InvalidShapeError(SqlShapeError):
    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"expected at least {expected} column(s), got {actual}"
        )


class NotInitializedError(SqlShapeError):
    def __init__(self) -> None:
        super().__init__("no active Database; construct or activate one first")


class HydrationError(SqlShapeError):
    def __init__(self, target: type, column: str, reason: str) -> None:
        self.target = target
        self.column = column
        super().__init__(f"{target.__name__}: column {column!r} {reason}")
