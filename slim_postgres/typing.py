from collections.abc import Mapping
from typing import Any

from typing_extensions import TypeAlias, TypeVar

__all__ = ("DictRow", "NamedParameters", "SchemaT")

NamedParameters: TypeAlias = Mapping[str, Any]
"""Values keyed by the ``@name`` tokens of a SQL template."""
DictRow: TypeAlias = dict[str, Any]
"""A result row keyed by column name."""
SchemaT = TypeVar("SchemaT", default=DictRow)
"""Type a result row is converted to."""
