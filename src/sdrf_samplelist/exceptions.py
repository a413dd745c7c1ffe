"""
Error kinds raised while building a sample list.

Every error aborts the run before any output is written.
"""


class SampleListError(Exception):
    """Base class for all annotator errors."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class MalformedSdrf(SampleListError):
    """The SDRF header and a data row disagree, or a required column is missing."""

    def __init__(self, message: str, row: int = None, column: str = None):
        super().__init__(message)
        self.row = row
        self.column = column


class NoMatchingRows(SampleListError):
    """No SDRF row references the target data file."""

    def __init__(self, data_file: str):
        super().__init__(f"No SDRF rows reference data file '{data_file}'")
        self.data_file = data_file


class MalformedMzml(SampleListError):
    """The input document is not parseable mzML or lacks expected structure."""


class SchemaPositionError(SampleListError):
    """The sampleList element cannot be placed at a schema-valid position."""
