"""
SampleEncoder - Turn a group of SDRF rows into a :class:`Sample`.
"""

import logging
from typing import List, Optional, Sequence

from sdrf_samplelist.config import NAME_COLUMNS
from sdrf_samplelist.model import Param, Sample, SampleList
from sdrf_samplelist.sdrf.classifier import ColumnClassifier
from sdrf_samplelist.sdrf.reader import SDRFRow

logger = logging.getLogger(__name__)


class SampleEncoder:
    """
    Encodes sample groups using a :class:`ColumnClassifier`.

    Parameters are emitted column by column in header order, and within a
    column row by row, so the same SDRF always produces the same output.
    Repeated columns (two ``comment[modification parameters]``, say) sit at
    different header positions and each yield their own parameter.  Empty
    cells are skipped.
    """

    def __init__(
        self,
        classifier: Optional[ColumnClassifier] = None,
        name_columns: Optional[Sequence[str]] = None,
    ):
        """
        Args:
            classifier: Column classifier (default: the built-in rule table)
            name_columns: Columns tried, in order, for the sample display name
        """
        self.classifier = classifier if classifier is not None else ColumnClassifier()
        self.name_columns = tuple(name_columns) if name_columns is not None else NAME_COLUMNS

    def sample_name(self, group: Sequence[SDRFRow], sample_id: str) -> str:
        """First non-empty name column value of the group, else the sample id."""
        for column in self.name_columns:
            for row in group:
                value = row.get(column)
                if value:
                    return value
        return sample_id

    def encode_params(self, group: Sequence[SDRFRow]) -> List[Param]:
        if not group:
            return []

        columns = group[0].columns
        params: List[Param] = []
        for position, column in enumerate(columns):
            strategy = self.classifier.classify(column)
            for row in group:
                value = row.values[position]
                if value == "":
                    continue
                param = strategy.encode(column, value)
                if param is not None:
                    params.append(param)
        return params

    def encode(self, group: Sequence[SDRFRow], index: int) -> Sample:
        """
        Encode one sample group.

        Args:
            group: Rows of the sample
            index: 1-based position of the group

        Returns:
            Sample with id ``sample_<index>``
        """
        sample_id = f"sample_{index}"
        name = self.sample_name(group, sample_id)
        params = self.encode_params(group)
        logger.debug(f"Encoded {sample_id} ({name}) with {len(params)} params")
        return Sample(id=sample_id, name=name, params=tuple(params))

    def encode_all(self, groups: Sequence[Sequence[SDRFRow]]) -> SampleList:
        """Encode every group into a :class:`SampleList`."""
        return SampleList(samples=tuple(self.encode(g, i) for i, g in enumerate(groups, 1)))
