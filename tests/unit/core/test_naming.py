"""Tests for canonical catalog names."""

import pytest

from pubsync.core.naming import ILLEGAL_CATALOG_CHARACTERS, canonical_name


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Notepad++ (x64)", "Notepad++ x64"),
        ("Acme.Viewer: 2.1", "AcmeViewer 21"),
        ("a\\b/c;d:e#f.g*h?i=j<k>l[m]n(o)p", "abcdefghijklmnop"),
        ("Plain Name", "Plain Name"),
        ("().", ""),
    ],
)
def test_canonical_name(raw: str, expected: str) -> None:
    assert canonical_name(raw) == expected


def test_every_illegal_character_is_removed() -> None:
    result = canonical_name(f"x{ILLEGAL_CATALOG_CHARACTERS}y")

    assert result == "xy"
