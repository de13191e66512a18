"""Named parameter preparation.

Rewrites ``@name`` placeholders into the positional markers understood by the
driver (``$1``, ``$2``, ...) and collects the values in placeholder order.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, Optional

from slim_postgres.exceptions import MissingParameterError

if TYPE_CHECKING:
    from slim_postgres.typing import NamedParameters

__all__ = (
    "DEFAULT_PLACEHOLDER_PREFIX",
    "NAMED_PARAMETER_REGEX",
    "ParameterPreparer",
    "PreparedStatement",
    "prepare",
)

DEFAULT_PLACEHOLDER_PREFIX: Final[str] = "$"

# Digits are not part of the identifier: ``@id2`` is the token ``@id`` followed by ``2``.
NAMED_PARAMETER_REGEX: Final[re.Pattern[str]] = re.compile(r"@([A-Za-z_]+)")


@dataclass(frozen=True)
class PreparedStatement:
    """SQL rewritten to positional placeholders with its ordered values.

    ``values`` is ``None`` when the template contained no named parameters.
    """

    sql: str
    values: "Optional[tuple[Any, ...]]" = None

    @property
    def parameters(self) -> "tuple[Any, ...]":
        """Positional values ready to be splatted into a driver call.

        Returns:
            The values, or an empty tuple when there are none.
        """
        return self.values or ()


class ParameterPreparer:
    """Translate ``@name`` SQL into positional-parameter SQL.

    Every occurrence of a token consumes its own positional slot, so a name
    used twice produces two placeholders and two copies of the value.
    """

    __slots__ = ("placeholder_prefix",)

    def __init__(self, placeholder_prefix: str = DEFAULT_PLACEHOLDER_PREFIX) -> None:
        self.placeholder_prefix = placeholder_prefix

    def __repr__(self) -> str:
        return f"{type(self).__name__}(placeholder_prefix={self.placeholder_prefix!r})"

    def set_placeholder_prefix(self, placeholder_prefix: str) -> None:
        """Change the positional marker, e.g. ``"?"`` or ``":"`` for other dialects.

        Args:
            placeholder_prefix: Text emitted in front of the 1-based index.
        """
        self.placeholder_prefix = placeholder_prefix

    def placeholder(self, index: int) -> str:
        """Render the positional marker for a 1-based ``index``."""
        return f"{self.placeholder_prefix}{index}"

    def prepare(self, sql: str, parameters: "Optional[NamedParameters]" = None) -> PreparedStatement:
        """Rewrite ``sql`` and collect the values for its named parameters.

        Args:
            sql: SQL template containing zero or more ``@name`` tokens.
            parameters: Mapping of token names (without ``@``) to values.

        Raises:
            MissingParameterError: A token has no entry in ``parameters``.

        Returns:
            The rewritten SQL and the values in placeholder order.
        """
        values: list[Any] = []
        lookup: Mapping[str, Any] = parameters if parameters is not None else {}

        def _replace(match: "re.Match[str]") -> str:
            name = match.group(1)
            if name not in lookup:
                raise MissingParameterError(match.group(0), sql)
            values.append(lookup[name])
            return self.placeholder(len(values))

        prepared_sql = NAMED_PARAMETER_REGEX.sub(_replace, sql)
        return PreparedStatement(sql=prepared_sql, values=tuple(values) if values else None)


_default_preparer: Final[ParameterPreparer] = ParameterPreparer()


def prepare(sql: str, parameters: "Optional[NamedParameters]" = None) -> PreparedStatement:
    """Prepare ``sql`` with the default ``$``-style preparer."""
    return _default_preparer.prepare(sql, parameters)
