"""
SampleListAnnotator - Main orchestration class for writing SDRF samples into mzML.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List, Optional, Sequence

from sdrf_samplelist.exceptions import MalformedMzml, NoMatchingRows
from sdrf_samplelist.model import SampleList
from sdrf_samplelist.mzml.header import read_header
from sdrf_samplelist.mzml.index import write_document
from sdrf_samplelist.mzml.sample_list import SampleListBuilder
from sdrf_samplelist.sdrf.classifier import ColumnClassifier
from sdrf_samplelist.sdrf.encoder import SampleEncoder
from sdrf_samplelist.sdrf.grouper import SampleGrouper
from sdrf_samplelist.sdrf.reader import SDRFReader, SDRFTable
from sdrf_samplelist.sdrf.selector import select_rows

logger = logging.getLogger(__name__)


@dataclass
class AnnotationResult:
    """Result of annotating one mzML document."""

    data_file: str
    sample_list: SampleList
    source_files: List[str]
    indexed: bool = False

    @property
    def num_samples(self) -> int:
        return self.sample_list.count


class SampleListAnnotator:
    """
    Orchestrates the annotation workflow.

    Workflow:
    1. Read the SDRF table
    2. Read the mzML header and pick the target data file
    3. Select the SDRF rows for that file
    4. Group rows into samples and encode them
    5. Splice the sampleList into the header
    6. Write the header and copy the rest of the document
    """

    def __init__(
        self,
        sdrf_file: Optional[Path] = None,
        data_file: Optional[str] = None,
        identity_columns: Optional[Sequence[str]] = None,
        classifier: Optional[ColumnClassifier] = None,
        allow_empty: bool = False,
        table: Optional[SDRFTable] = None,
    ):
        """
        Initialize the annotator.

        Args:
            sdrf_file: Path to the SDRF file (ignored when ``table`` is given)
            data_file: Target data file; defaults to the first sourceFile of the mzML
            identity_columns: Columns identifying a sample (default: source name, assay name)
            classifier: Column classifier (default: built-in rule table)
            allow_empty: Write an empty sampleList instead of failing when no
                SDRF row matches the data file
            table: Pre-loaded SDRF table
        """
        if sdrf_file is None and table is None:
            raise ValueError("Either sdrf_file or table is required")
        self.sdrf_file = Path(sdrf_file) if sdrf_file is not None else None
        self.data_file = data_file
        self.allow_empty = allow_empty
        self.grouper = SampleGrouper(identity_columns)
        self.encoder = SampleEncoder(classifier)
        self.builder = SampleListBuilder()
        self._table = table

    @property
    def table(self) -> SDRFTable:
        if self._table is None:
            self._table = SDRFReader(self.sdrf_file).read()
        return self._table

    def build_sample_list(self, data_file: str) -> SampleList:
        """
        Build the sample list for one data file.

        Raises:
            NoMatchingRows: if no SDRF row references ``data_file`` and
                ``allow_empty`` is not set
        """
        try:
            rows = select_rows(self.table, data_file)
        except NoMatchingRows:
            if not self.allow_empty:
                raise
            logger.warning(f"No SDRF rows for {data_file}; writing an empty sampleList")
            return SampleList()

        groups = self.grouper.group(rows)
        sample_list = self.encoder.encode_all(groups)
        logger.info(f"Found {sample_list.count} samples for {data_file}")
        return sample_list

    def annotate(self, instream: BinaryIO, outstream: BinaryIO) -> AnnotationResult:
        """
        Annotate an mzML stream.

        Nothing is written to ``outstream`` until the new header has been
        built, so a failure leaves the output empty.

        Args:
            instream: Binary mzML input
            outstream: Binary mzML output

        Returns:
            AnnotationResult describing what was written
        """
        # Load the SDRF first so a malformed table fails before reading stdin
        table = self.table

        header = read_header(instream)

        data_file = self.data_file
        if not data_file:
            if not header.source_files:
                raise MalformedMzml(
                    "mzML has no sourceFile to take the data file name from; pass it explicitly"
                )
            data_file = header.source_files[0]
        logger.info(f"Extracting samples associated with {data_file}")

        sample_list = self.build_sample_list(data_file)
        new_header = self.builder.splice(header, sample_list)

        write_document(header, new_header, outstream)
        logger.info(f"Wrote mzML with {sample_list.count} samples from {len(table)} SDRF rows")

        return AnnotationResult(
            data_file=data_file,
            sample_list=sample_list,
            source_files=list(header.source_files),
            indexed=header.is_indexed,
        )
