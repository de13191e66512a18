"""Text helpers for building SQL."""

__all__ = ("quote_identifier",)


def quote_identifier(identifier: str) -> str:
    """Quote a table or column name for PostgreSQL.

    Wraps the name in double quotes and doubles any embedded double quote.
    This only keeps the identifier structurally valid; it is not a defence
    against untrusted input.

    Args:
        identifier: The raw identifier.

    Returns:
        The quoted identifier.
    """
    return '"{}"'.format(identifier.replace('"', '""'))
