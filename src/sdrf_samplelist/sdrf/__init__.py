"""SDRF reading, row selection, grouping, and column encoding."""

from sdrf_samplelist.sdrf.reader import SDRFReader, SDRFRow, SDRFTable
from sdrf_samplelist.sdrf.classifier import ClassificationTable, ColumnClassifier
from sdrf_samplelist.sdrf.selector import select_rows
from sdrf_samplelist.sdrf.grouper import SampleGrouper
from sdrf_samplelist.sdrf.encoder import SampleEncoder

__all__ = [
    "SDRFReader",
    "SDRFRow",
    "SDRFTable",
    "ClassificationTable",
    "ColumnClassifier",
    "select_rows",
    "SampleGrouper",
    "SampleEncoder",
]
