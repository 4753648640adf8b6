"""Catalog naming utilities.

Pure functions (no I/O) that map raw application and shortcut names onto
the names the published-application catalog accepts.
"""

import re

# Characters the catalog rejects in published application names.
ILLEGAL_CATALOG_CHARACTERS = "\\/;:#.*?=<>[]()"

_ILLEGAL_PATTERN = re.compile("[" + re.escape(ILLEGAL_CATALOG_CHARACTERS) + "]")


def canonical_name(name: str) -> str:
    """Derive the catalog name for an application.

    Removes every character in ILLEGAL_CATALOG_CHARACTERS and keeps everything
    else, including spaces and letter case, so distinct shortcut names stay
    distinct.

    Examples:
        >>> canonical_name("Notepad++ (x64)")
        "Notepad++ x64"
        >>> canonical_name("Acme.Viewer: 2.1")
        "AcmeViewer 21"
    """
    return _ILLEGAL_PATTERN.sub("", name)
