"""
Row selection: find the SDRF rows describing one raw data file.
"""

import logging
from typing import List

from sdrf_samplelist.config import DATA_FILE_EXTENSIONS, SDRF_COLUMNS
from sdrf_samplelist.exceptions import MalformedSdrf, NoMatchingRows
from sdrf_samplelist.sdrf.reader import SDRFRow, SDRFTable

logger = logging.getLogger(__name__)


def normalize_data_file(name: str) -> str:
    """
    Reduce a data file reference to the stem used for matching.

    Strips directories (``/`` or ``\\``), a trailing ``.gz``, and one known
    data file extension, so ``C:\\data\\run1.raw``, ``run1.mzML`` and
    ``run1`` all become ``run1``.
    """
    name = name.strip().replace("\\", "/").rstrip("/")
    name = name.rsplit("/", 1)[-1]

    if name.lower().endswith(".gz"):
        name = name[:-3]

    lower = name.lower()
    for ext in DATA_FILE_EXTENSIONS:
        if lower.endswith(ext) and len(name) > len(ext):
            return name[: -len(ext)]
    return name


def select_rows(table: SDRFTable, data_file: str) -> List[SDRFRow]:
    """
    Select the rows whose ``comment[data file]`` matches ``data_file``.

    Args:
        table: The SDRF table
        data_file: Target file name; directories and extensions are ignored

    Returns:
        Matching rows in table order

    Raises:
        ValueError: if ``data_file`` is empty
        MalformedSdrf: if the table has no ``comment[data file]`` column
        NoMatchingRows: if no row matches
    """
    if not data_file or not data_file.strip():
        raise ValueError("Target data file must not be empty")

    data_file_col = SDRF_COLUMNS["data_file"]
    if not table.has_column(data_file_col):
        raise MalformedSdrf(f"SDRF has no '{data_file_col}' column", column=data_file_col)

    target = normalize_data_file(data_file)
    rows = [row for row in table if normalize_data_file(row.get(data_file_col, "")) == target]

    if not rows:
        raise NoMatchingRows(data_file)

    logger.info(f"Selected {len(rows)}/{len(table)} SDRF rows for data file {data_file}")
    return rows
