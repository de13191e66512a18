import pytest

from slim_postgres.utils.text import quote_identifier


@pytest.mark.parametrize(
    ("identifier", "expected"),
    [
        ("users", '"users"'),
        ("User Table", '"User Table"'),
        ('a"b', '"a""b"'),
        ('"', '""""'),
        ("", '""'),
    ],
    ids=["plain", "space", "embedded_quote", "only_quote", "empty"],
)
def test_quote_identifier(identifier: str, expected: str) -> None:
    assert quote_identifier(identifier) == expected
