"""
SDRF sample list - Write SDRF sample metadata into mzML files.

Reads an mzML document and an SDRF file, selects the SDRF rows describing
the raw file the mzML was converted from, and writes them to the mzML
``sampleList`` as cvParam and userParam elements.
"""

__version__ = "0.1.0"
__author__ = "PRIDE Team"

from sdrf_samplelist.core.annotator import AnnotationResult, SampleListAnnotator

__all__ = ["SampleListAnnotator", "AnnotationResult", "__version__"]
