"""
Configuration constants and defaults for the SDRF sample list annotator.

Ontology catalog
~~~~~~~~~~~~~~~~
SDRF columns that have an established controlled-vocabulary term are written
to the mzML ``sampleList`` as ``cvParam`` elements; every other column becomes
a ``userParam`` named after the raw column header.

The canonical ontology sources are:

* **PSI-MS** – mass spectrometry ontology
  https://www.ebi.ac.uk/ols4/ontologies/ms
* **EFO** – Experimental Factor Ontology
  https://www.ebi.ac.uk/ols4/ontologies/efo
* **OBI**, **BFO**, **HANCESTRO** – used for a handful of sample attributes
* **PRIDE** – PRIDE controlled vocabulary
  https://www.ebi.ac.uk/ols4/ontologies/pride

All tables are exposed read-only; build a custom
:class:`~sdrf_samplelist.sdrf.classifier.ClassificationTable` to use
different mappings.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Tuple

# =============================================================================
# SDRF column names
# =============================================================================

SDRF_COLUMNS: Mapping[str, str] = MappingProxyType({
    "source_name": "source name",
    "assay_name": "assay name",
    "data_file": "comment[data file]",
    "label": "comment[label]",
    "instrument": "comment[instrument]",
    "modification": "comment[modification parameters]",
    "cleavage_agent": "comment[cleavage agent details]",
})

# Bracketed column categories recognised by the classifier.  The singular
# spelling ``characteristic[...]`` shows up in the wild and is accepted.
COLUMN_CATEGORIES: Tuple[str, ...] = (
    "characteristics",
    "characteristic",
    "comment",
    "factor value",
)

# Default sample identity: one sample per distinct source/assay combination.
DEFAULT_IDENTITY_COLUMNS: Tuple[str, ...] = (
    SDRF_COLUMNS["source_name"],
    SDRF_COLUMNS["assay_name"],
)

# Columns that supply the sample display name, in order of preference.
NAME_COLUMNS: Tuple[str, ...] = (
    SDRF_COLUMNS["source_name"],
    SDRF_COLUMNS["assay_name"],
)

# Columns consumed by selection or naming and therefore not re-emitted as params.
IGNORED_COLUMNS: Tuple[str, ...] = (
    SDRF_COLUMNS["data_file"],
    SDRF_COLUMNS["source_name"],
)

# Data file extensions stripped before comparing ``comment[data file]`` values
# with the target file.  Compressed files lose ``.gz`` first.
DATA_FILE_EXTENSIONS: Tuple[str, ...] = (
    ".raw",
    ".mzml",
    ".mzxml",
    ".d",
    ".wiff",
    ".wiff2",
    ".mgf",
)

# =============================================================================
# Sample attribute ontology
# =============================================================================
# Maps normalised (lower-case) SDRF column names → the CV term written as a
# cvParam.  ``name`` is the canonical parameter name used in the output.

SAMPLE_CV_TERMS: Mapping[str, Dict[str, str]] = MappingProxyType({
    "characteristics[organism]":             {"name": "organism",             "accession": "OBI:0100026"},
    "characteristics[organism part]":        {"name": "organism part",        "accession": "EFO:0000635"},
    "characteristics[developmental stage]":  {"name": "developmental stage",  "accession": "EFO:0000399"},
    "characteristics[ancestry category]":    {"name": "ancestry category",    "accession": "HANCESTRO:0004"},
    "characteristics[cell type]":            {"name": "cell type",            "accession": "EFO:0000324"},
    "characteristics[material type]":        {"name": "material type",        "accession": "BFO:0000040"},
    "characteristics[age]":                  {"name": "age",                  "accession": "EFO:0000246"},
    "characteristics[disease]":              {"name": "disease",              "accession": "EFO:0000408"},
    "characteristics[time]":                 {"name": "time",                 "accession": "EFO:0000721"},
    "factor value[time]":                    {"name": "time",                 "accession": "EFO:0000721"},
    "technology type":                       {"name": "technology type",      "accession": "EFO:0005521"},
    "characteristics[biological replicate]": {"name": "biological replicate", "accession": "EFO:0002091"},
    "comment[technical replicate]":          {"name": "technical replicate",  "accession": "MS:1001808"},
    "comment[fraction identifier]":          {"name": "fraction identifier",  "accession": "MS:1000858"},
    "comment[file uri]":                     {"name": "file uri",             "accession": "PRIDE:0000577"},
})

# =============================================================================
# mzML layout
# =============================================================================

MZML_NAMESPACE = "http://psi.hupo.org/ms/mzml"

# Schema order of the mzML children that surround ``sampleList``.  The sample
# list goes after the first group and before the first element of the second.
MZML_ELEMENTS_BEFORE_SAMPLE_LIST: Tuple[str, ...] = (
    "cvList",
    "fileDescription",
    "referenceableParamGroupList",
)
MZML_ELEMENTS_AFTER_SAMPLE_LIST: Tuple[str, ...] = (
    "softwareList",
    "instrumentConfigurationList",
    "dataProcessingList",
    "run",
)

# Indentation used when the input document gives no hint
DEFAULT_INDENT = "  "

# Chunk size for copying the spectral payload through
COPY_CHUNK_SIZE = 1 << 20
