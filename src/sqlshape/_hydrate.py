from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Protocol, TypeVar

from ._errors import HydrationError

T = TypeVar("T")


class Hydrator(Protocol):
    def hydrate(self, row: Mapping[str, Any], target: type[T]) -> T: ...


def _declared_fields(target: type) -> dict[str, bool] | None:
    """Field name -> required, or None when the target declares no fields."""
    if dataclasses.is_dataclass(target):
        return {
            field.name: field.default is dataclasses.MISSING
            and field.default_factory is dataclasses.MISSING
            for field in dataclasses.fields(target)
            if field.init
        }
    if hasattr(target, "model_fields"):
        return {
            name: field.is_required()
            for name, field in target.model_fields.items()
        }
    return None


class FieldHydrator:
    """Build ``target(**row)``.

    Dataclasses and pydantic models must declare a field for every column,
    matched by exact name, and every required field must be present in the
    row. Other classes get the row as keyword arguments unchecked.
    """

    def hydrate(self, row: Mapping[str, Any], target: type[T]) -> T:
        declared = _declared_fields(target)
        if declared is not None:
            for column in row:
                if column not in declared:
                    raise HydrationError(target, column, "has no matching field")
            for name, required in declared.items():
                if required and name not in row:
                    raise HydrationError(target, name, "is required but not selected")
        return target(**row)
