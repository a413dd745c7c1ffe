"""
SampleGrouper - Partition selected SDRF rows into samples.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from sdrf_samplelist.config import DEFAULT_IDENTITY_COLUMNS
from sdrf_samplelist.sdrf.reader import SDRFRow

logger = logging.getLogger(__name__)


class SampleGrouper:
    """
    Groups rows that describe the same sample.

    The grouping key is the tuple of values of the identity columns present
    in the rows.  With the default identity (``source name``, ``assay name``)
    every multiplexed channel of a TMT run stays a separate sample.  Rows
    whose identity columns are missing or all blank are one sample each.
    """

    def __init__(self, identity_columns: Optional[Sequence[str]] = None):
        """
        Args:
            identity_columns: Columns whose values identify a sample
                (default: ``DEFAULT_IDENTITY_COLUMNS``)
        """
        if identity_columns is None:
            identity_columns = DEFAULT_IDENTITY_COLUMNS
        self.identity_columns: Tuple[str, ...] = tuple(identity_columns)

    def identity_of(self, row: SDRFRow) -> Optional[Tuple[str, ...]]:
        """
        The grouping key of a row.

        None when the row has no identity column or all of them are blank.
        """
        key = tuple(
            row.get(c) for c in self.identity_columns if row.get(c) is not None
        )
        if not any(v.strip() for v in key):
            return None
        return key

    def group(self, rows: Sequence[SDRFRow]) -> List[List[SDRFRow]]:
        """
        Partition rows into samples.

        Args:
            rows: Selected rows, in table order

        Returns:
            Groups ordered by first appearance; every row is in exactly one group
        """
        groups: Dict[object, List[SDRFRow]] = {}

        for row in rows:
            key = self.identity_of(row)
            if key is None:
                key = ("__row__", row.number)
            groups.setdefault(key, []).append(row)

        result = list(groups.values())
        logger.info(
            f"Grouped {len(rows)} rows into {len(result)} samples "
            f"by {', '.join(self.identity_columns) or 'row'}"
        )
        return result
