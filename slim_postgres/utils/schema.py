"""Conversion of result rows into caller-supplied schema types."""

from collections.abc import Sequence
from typing import Any, Optional, overload

import msgspec

from slim_postgres.typing import DictRow, SchemaT

__all__ = ("to_schema",)


@overload
def to_schema(data: "Sequence[DictRow]", schema_type: None = None) -> "list[DictRow]": ...


@overload
def to_schema(data: "Sequence[DictRow]", schema_type: "type[SchemaT]") -> "list[SchemaT]": ...


def to_schema(data: "Sequence[DictRow]", schema_type: "Optional[type[Any]]" = None) -> "list[Any]":
    """Convert dictionary rows into ``schema_type`` instances.

    Anything ``msgspec.convert`` understands works as a target: msgspec
    ``Struct`` classes, dataclasses, attrs classes and ``TypedDict`` types.
    Column names that the target does not declare are ignored.

    Args:
        data: Rows keyed by column name.
        schema_type: Target type. ``None`` returns the rows unchanged.

    Returns:
        The converted rows.
    """
    if schema_type is None:
        return list(data)
    return msgspec.convert(data, type=list[schema_type], strict=False)  # type: ignore[valid-type]
