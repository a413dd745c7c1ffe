"""
Pytest configuration and fixtures for SDRF sample list tests.
"""

import hashlib
import logging
import re
from pathlib import Path

import pytest

from sdrf_samplelist.sdrf.reader import SDRFTable
from sdrf_samplelist.utils.logging import HANDLER_NAME, PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def reset_package_logging():
    """Drop the handler a CLI run installed so later tests do not write to its stream."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# Path to test fixtures
FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Return path to test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sample_sdrf_path(fixtures_dir):
    """Return path to the label-free SDRF file."""
    return fixtures_dir / "sample_sdrf.tsv"


@pytest.fixture
def tmt_sdrf_path(fixtures_dir):
    """Return path to the TMT SDRF file."""
    return fixtures_dir / "tmt_sdrf.tsv"


@pytest.fixture
def small_mzml_path(fixtures_dir):
    """Return path to a small, non-indexed mzML file for sample1.raw."""
    return fixtures_dir / "small.mzML"


@pytest.fixture
def small_mzml(small_mzml_path):
    return small_mzml_path.read_bytes()


@pytest.fixture
def scenario_table():
    """Two assays of one data file, both Homo sapiens."""
    return SDRFTable.from_records(
        ["assay name", "characteristics[organism]", "comment[data file]"],
        [
            ["run 1", "Homo sapiens", "run1.raw"],
            ["run 2", "Homo sapiens", "run1.raw"],
        ],
    )


def build_indexed_mzml(mzml: bytes) -> bytes:
    """Wrap a plain mzML document in an indexedmzML with valid offsets and checksum."""
    decl, body = mzml.split(b"\n", 1)
    doc = (
        decl
        + b"\n"
        + b'<indexedmzML xmlns="http://psi.hupo.org/ms/mzml" '
        + b'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">\n'
        + body
    )

    spectra = [
        (m.group(1), m.start())
        for m in re.finditer(rb'<spectrum id="([^"]+)"', doc)
    ]
    index_list_offset = len(doc)
    doc += b'<indexList count="1">\n  <index name="spectrum">\n'
    for id_ref, offset in spectra:
        doc += b'    <offset idRef="' + id_ref + b'">' + str(offset).encode() + b"</offset>\n"
    doc += b"  </index>\n</indexList>\n"
    doc += b"<indexListOffset>" + str(index_list_offset).encode() + b"</indexListOffset>\n"
    doc += b"<fileChecksum>"
    digest = hashlib.sha1(doc).hexdigest().encode()
    return doc + digest + b"</fileChecksum>\n</indexedmzML>\n"


def check_index(doc: bytes) -> None:
    """Assert every index offset points at its element and the checksum matches."""
    for id_ref, offset in re.findall(rb'<offset idRef="([^"]+)">(\d+)</offset>', doc):
        assert doc[int(offset):].startswith(b'<spectrum id="' + id_ref + b'"')

    list_offset = int(re.search(rb"<indexListOffset>(\d+)</indexListOffset>", doc).group(1))
    assert doc[list_offset:].startswith(b"<indexList ")

    marker = doc.index(b"<fileChecksum>") + len(b"<fileChecksum>")
    checksum = re.search(rb"<fileChecksum>([0-9a-f]+)</fileChecksum>", doc).group(1)
    assert hashlib.sha1(doc[:marker]).hexdigest().encode() == checksum


@pytest.fixture
def indexed_mzml(small_mzml):
    """Return an indexedmzML version of small.mzML."""
    return build_indexed_mzml(small_mzml)


@pytest.fixture
def index_checker():
    """Return the index consistency check."""
    return check_index
