"""
SDRFReader - Read and parse SDRF files into an immutable table.
"""

import csv
import logging
import re
from dataclasses import dataclass, field
from io import StringIO
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

import pandas as pd

from sdrf_samplelist.config import SDRF_COLUMNS
from sdrf_samplelist.exceptions import MalformedSdrf
from sdrf_samplelist.sdrf.columns import normalize_header, parse_column

logger = logging.getLogger(__name__)


def _column_key(name: str) -> str:
    return parse_column(name).normalized


@dataclass(frozen=True)
class SDRFRow:
    """
    One SDRF data row.

    Values are kept by header position so repeated columns (several
    ``comment[modification parameters]``, for instance) stay distinct.
    """

    number: int
    columns: Tuple[str, ...]
    values: Tuple[str, ...]

    def items(self) -> Iterator[Tuple[str, str]]:
        return zip(self.columns, self.values)

    def get_all(self, column: str) -> List[str]:
        """All values of a (possibly repeated) column, in header order."""
        key = _column_key(column)
        return [v for c, v in self.items() if _column_key(c) == key]

    def get(self, column: str, default: Optional[str] = None) -> Optional[str]:
        """First value of ``column``, or ``default`` if the column is absent."""
        values = self.get_all(column)
        return values[0] if values else default


@dataclass(frozen=True)
class SDRFTable:
    """An SDRF file: header, rows, and ``#key=value`` metadata lines."""

    columns: Tuple[str, ...]
    rows: Tuple[SDRFRow, ...]
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[SDRFRow]:
        return iter(self.rows)

    def has_column(self, column: str) -> bool:
        key = _column_key(column)
        return any(_column_key(c) == key for c in self.columns)

    def column_values(self, column: str) -> List[str]:
        """First value of ``column`` for every row."""
        return [row.get(column, "") for row in self.rows]

    @classmethod
    def from_records(cls, columns: List[str], records: List[List[str]]) -> "SDRFTable":
        """
        Build a table from in-memory records.

        Raises:
            MalformedSdrf: if a record length differs from the header length
        """
        header = tuple(normalize_header(c) for c in columns)
        rows = []
        for number, record in enumerate(records, 1):
            if len(record) != len(header):
                raise MalformedSdrf(
                    f"Row {number} has {len(record)} fields but the header has {len(header)}",
                    row=number,
                )
            rows.append(SDRFRow(number=number, columns=header, values=tuple(record)))
        return cls(columns=header, rows=tuple(rows))


class SDRFReader:
    """
    Reads SDRF files, preserving the original column order and any
    duplicated column names.
    """

    def __init__(self, sdrf_path: Path):
        """
        Initialize SDRF reader.

        Args:
            sdrf_path: Path to the SDRF file
        """
        self.sdrf_path = Path(sdrf_path)
        self._table: Optional[SDRFTable] = None
        self._metadata: Dict[str, str] = {}

    def read(self) -> SDRFTable:
        """
        Read the SDRF file.

        Returns:
            SDRFTable with the file contents

        Raises:
            MalformedSdrf: if the file has no header or a row's field count
                differs from the header's
        """
        logger.info(f"Reading SDRF file: {self.sdrf_path}")

        metadata_lines = []
        data_lines = []

        # utf-8-sig drops the byte-order mark spreadsheet exports put before the header
        with open(self.sdrf_path, "r", encoding="utf-8-sig") as f:
            for line in f:
                if line.startswith("#"):
                    metadata_lines.append(line.strip())
                elif line.strip():
                    data_lines.append(line)

        # Parse metadata
        for meta_line in metadata_lines:
            if "=" in meta_line:
                key, value = meta_line.lstrip("#").split("=", 1)
                self._metadata[key.strip()] = value.strip()

        if not data_lines:
            raise MalformedSdrf(f"SDRF file {self.sdrf_path} has no header line")

        header = [normalize_header(c) for c in data_lines[0].rstrip("\r\n").split("\t")]

        # pandas pads short rows with NaN and only complains about long ones,
        # so check the field counts up front
        for number, line in enumerate(data_lines[1:], 1):
            n_fields = len(line.rstrip("\r\n").split("\t"))
            if n_fields != len(header):
                raise MalformedSdrf(
                    f"{self.sdrf_path.name}: row {number} has {n_fields} fields "
                    f"but the header has {len(header)}",
                    row=number,
                )

        # Read with pandas; duplicate headers get .1, .2 suffixes there, which
        # is why rows are rebuilt against the original header by position
        df = pd.read_csv(
            StringIO("".join(data_lines)),
            sep="\t",
            dtype=str,
            header=0,
            keep_default_na=False,
            quoting=csv.QUOTE_NONE,
        ).fillna("")

        columns = tuple(header)
        rows = tuple(
            SDRFRow(number=number, columns=columns, values=tuple(str(v) for v in values))
            for number, values in enumerate(df.itertuples(index=False, name=None), 1)
        )

        self._table = SDRFTable(columns=columns, rows=rows, metadata=dict(self._metadata))
        logger.info(f"Loaded SDRF with {len(rows)} rows and {len(columns)} columns")
        return self._table

    @property
    def table(self) -> SDRFTable:
        """Get the table, reading the file if necessary."""
        if self._table is None:
            self.read()
        return self._table

    @property
    def metadata(self) -> Dict[str, str]:
        return dict(self._metadata)

    def get_data_files(self) -> List[str]:
        """Get the distinct data files referenced in the SDRF, in order of appearance."""
        data_file_col = SDRF_COLUMNS["data_file"]
        if not self.table.has_column(data_file_col):
            return []
        return list(dict.fromkeys(self.table.column_values(data_file_col)))

    @staticmethod
    def parse_ontology_value(value: str) -> Dict[str, Optional[str]]:
        """
        Parse ontology-formatted value.

        Format: NT={term name};AC={accession}
        Example: NT=TMT126;AC=PRIDE:0000285

        Args:
            value: The raw ontology string

        Returns:
            Dictionary with 'name', 'accession', and 'raw' keys
        """
        result = {"name": None, "accession": None, "raw": value}

        if not value or pd.isna(value):
            return result

        value = str(value).strip()

        # Parse NT=...
        nt_match = re.search(r"NT=([^;]+)", value, re.IGNORECASE)
        if nt_match:
            result["name"] = nt_match.group(1).strip()

        # Parse AC=...
        ac_match = re.search(r"AC=([^;]+)", value, re.IGNORECASE)
        if ac_match:
            result["accession"] = ac_match.group(1).strip()

        # If no NT/AC format, use the raw value as name
        if result["name"] is None and result["accession"] is None:
            result["name"] = value

        return result
