from collections.abc import Mapping, Sequence
from typing import Any, Protocol, TypeAlias

Params: TypeAlias = Sequence[Any] | Mapping[str, Any]


# What Database and Query touch on a PEP 249 driver: a cursor per statement,
# column names from ``description``, ``rowcount`` for execute_rows and
# legacy results, ``lastrowid`` for last_insert_id, and close on both.
# Typed after typeshed's _typeshed/dbapi.pyi.
class DBAPICursor(Protocol):
    @property
    def description(self) -> Sequence[Sequence[Any]] | None: ...
    @property
    def rowcount(self) -> int: ...
    @property
    def lastrowid(self) -> Any | None: ...
    def execute(self, operation: str, parameters: Params = ..., /) -> object: ...
    def fetchone(self) -> Sequence[Any] | None: ...
    def fetchall(self) -> Sequence[Sequence[Any]]: ...
    def close(self) -> object: ...


class DBAPIConnection(Protocol):
    def cursor(self) -> DBAPICursor: ...
    def close(self) -> object: ...
