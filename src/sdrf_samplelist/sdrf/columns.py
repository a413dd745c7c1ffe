"""
SDRF column-name helpers.

SDRF headers follow the ``category[key]`` convention, e.g.
``characteristics[organism]`` or ``comment[data file]``.  Plain columns such
as ``source name`` have no category.
"""

import re
from dataclasses import dataclass
from typing import Optional

from sdrf_samplelist.config import COLUMN_CATEGORIES

_BRACKETED = re.compile(r"^\s*([^\[\]]+?)\s*\[\s*(.*?)\s*\]\s*$")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ColumnName:
    """A parsed SDRF column header."""

    raw: str
    category: Optional[str]
    key: str

    @property
    def normalized(self) -> str:
        """Lower-case form used for rule lookups."""
        if self.category is None:
            return self.key.lower()
        category = self.category.lower()
        if category == "characteristic":
            category = "characteristics"
        return f"{category}[{self.key.lower()}]"


def normalize_header(name: str) -> str:
    """
    Tidy a header cell without changing its meaning.

    Collapses runs of whitespace and trims it around the bracketed
    qualifier, so ``comment[ data file ]`` becomes ``comment[data file]``.
    """
    name = _WHITESPACE.sub(" ", name.strip())
    match = _BRACKETED.match(name)
    if match:
        return f"{match.group(1)}[{match.group(2)}]"
    return name


def parse_column(name: str) -> ColumnName:
    """
    Split a column header into its category and bracketed key.

    Unknown categories (``foo[bar]``) and plain headers are both treated as
    uncategorised, with the whole header as the key.
    """
    name = normalize_header(name)
    match = _BRACKETED.match(name)
    if match and match.group(1).lower() in COLUMN_CATEGORIES:
        return ColumnName(raw=name, category=match.group(1), key=match.group(2))
    return ColumnName(raw=name, category=None, key=name)
