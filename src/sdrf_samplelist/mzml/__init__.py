"""mzML header reading, sample list splicing, and body copying."""

from sdrf_samplelist.mzml.header import MzMLHeader, read_header
from sdrf_samplelist.mzml.index import write_document
from sdrf_samplelist.mzml.sample_list import SampleListBuilder

__all__ = ["MzMLHeader", "read_header", "SampleListBuilder", "write_document"]
