"""
ColumnClassifier - Decide how each SDRF column is written to the sample list.

Classification is a table lookup rather than inline branching, so the
CV-versus-user-param policy can be tested and swapped on its own:

1. exact rules, keyed by normalised column name
2. prefix rules, in order
3. the default strategy

The first match wins.  Every column resolves to some strategy; columns
nobody knows about fall back to a ``userParam`` so no information is lost.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from sdrf_samplelist.config import (
    COLUMN_CATEGORIES,
    IGNORED_COLUMNS,
    SAMPLE_CV_TERMS,
    SDRF_COLUMNS,
)
from sdrf_samplelist.model import CVParam, Param, UserParam
from sdrf_samplelist.sdrf.columns import parse_column
from sdrf_samplelist.sdrf.ontology import TMT_LABEL_TERMS, cv_ref_of, get_value_term

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodeAsCvParam:
    """Write the cell as a cvParam with a fixed term; the cell is the value."""

    accession: str
    cv_ref: str
    name: str

    def encode(self, column: str, value: str) -> Param:
        return CVParam(accession=self.accession, cv_ref=self.cv_ref, name=self.name, value=value)


@dataclass(frozen=True)
class EncodeAsUserParam:
    """Write the cell verbatim as a userParam, named after the column unless ``name`` is set."""

    name: Optional[str] = None

    def encode(self, column: str, value: str) -> Param:
        return UserParam(name=self.name or column, value=value)


@dataclass(frozen=True)
class EncodeByValueTerm:
    """
    Write a cvParam whose term is chosen by the cell value.

    Values without a term in ``terms`` are written as a userParam instead.
    """

    terms: Mapping[str, Dict[str, str]]

    def encode(self, column: str, value: str) -> Param:
        term = get_value_term(value, self.terms)
        if term is None:
            logger.debug(f"No CV term for {column}={value!r}, writing userParam")
            return UserParam(name=column, value=value)
        return CVParam(
            accession=term["accession"],
            cv_ref=cv_ref_of(term["accession"]),
            name=term["name"],
        )


@dataclass(frozen=True)
class Ignore:
    """Do not write the column."""

    def encode(self, column: str, value: str) -> Optional[Param]:
        return None


EncodingStrategy = Union[EncodeAsCvParam, EncodeAsUserParam, EncodeByValueTerm, Ignore]


@dataclass(frozen=True)
class ClassificationTable:
    """
    Read-only rule set for :class:`ColumnClassifier`.

    Attributes:
        exact: normalised column name → strategy
        prefixes: ordered ``(normalised prefix, strategy)`` pairs
        default: strategy for anything else
    """

    exact: Mapping[str, EncodingStrategy] = field(default_factory=dict)
    prefixes: Tuple[Tuple[str, EncodingStrategy], ...] = ()
    default: EncodingStrategy = EncodeAsUserParam()

    def __post_init__(self):
        exact = {parse_column(k).normalized: v for k, v in self.exact.items()}
        object.__setattr__(self, "exact", MappingProxyType(exact))
        object.__setattr__(
            self, "prefixes", tuple((p.lower(), s) for p, s in self.prefixes)
        )


def default_classification_table() -> ClassificationTable:
    """Build the classification table from the ontology catalog in ``config``."""
    exact: Dict[str, EncodingStrategy] = {}

    for column, term in SAMPLE_CV_TERMS.items():
        exact[column] = EncodeAsCvParam(
            accession=term["accession"],
            cv_ref=cv_ref_of(term["accession"]),
            name=term["name"],
        )

    exact[SDRF_COLUMNS["label"]] = EncodeByValueTerm(terms=TMT_LABEL_TERMS)

    for column in IGNORED_COLUMNS:
        exact[column] = Ignore()

    # The singular "characteristic[" spelling normalises to the plural
    prefixes = tuple(
        (f"{category}[", EncodeAsUserParam())
        for category in COLUMN_CATEGORIES
        if category != "characteristic"
    )

    return ClassificationTable(exact=exact, prefixes=prefixes, default=EncodeAsUserParam())


class ColumnClassifier:
    """
    Maps SDRF column names to an :data:`EncodingStrategy`.
    """

    def __init__(self, table: Optional[ClassificationTable] = None):
        """
        Args:
            table: Rules to apply (default: :func:`default_classification_table`)
        """
        self.table = table if table is not None else default_classification_table()

    def classify(self, column: str) -> EncodingStrategy:
        """
        Classify a column name.

        Args:
            column: The SDRF column header

        Returns:
            The strategy used to encode the column's cells
        """
        parsed = parse_column(column)
        key = parsed.normalized

        strategy = self.table.exact.get(key)
        if strategy is not None:
            return strategy

        for prefix, strategy in self.table.prefixes:
            if key.startswith(prefix):
                return strategy

        return self.table.default

    def encode(self, column: str, value: str) -> Optional[Param]:
        """Encode one cell, or return None if the column is ignored."""
        return self.classify(column).encode(parse_column(column).raw, value)
