"""
Copy the mzML body after the header, keeping an ``indexedmzML`` index valid.

Offsets in an index point at spectra and chromatograms, all of which follow
the header.  When the header grows or shrinks by ``delta`` bytes every
offset moves by ``delta`` and the SHA-1 ``fileChecksum`` must be recomputed.
"""

import hashlib
import logging
import re
import shutil
from itertools import chain
from typing import BinaryIO, Iterable, Iterator

from sdrf_samplelist.config import COPY_CHUNK_SIZE
from sdrf_samplelist.mzml.header import MzMLHeader

logger = logging.getLogger(__name__)

_PREFIX = rb"(?:[\w.-]+:)?"
_INDEX_LIST_START = re.compile(rb"<" + _PREFIX + rb"indexList[\s>]")
_OFFSET = re.compile(rb"(<" + _PREFIX + rb"offset\b[^>]*>\s*)(\d+)(\s*</)")
_INDEX_LIST_OFFSET = re.compile(rb"(<" + _PREFIX + rb"indexListOffset\s*>\s*)(\d+)(\s*</)")
_FILE_CHECKSUM = re.compile(rb"(<" + _PREFIX + rb"fileChecksum\s*>)([^<]*)(</)")

# Longest prefix of "<prefix:indexList" that could be cut by a chunk boundary
_MARKER_OVERLAP = 64


def _chunks(header: MzMLHeader, chunk_size: int) -> Iterator[bytes]:
    head = [header.remainder] if header.remainder else []
    if header.stream is None:
        return iter(head)
    return chain(head, iter(lambda: header.stream.read(chunk_size), b""))


def shift_offsets(tail: bytes, delta: int) -> bytes:
    """Add ``delta`` to every ``offset`` and to ``indexListOffset`` in ``tail``."""

    def shift(match: "re.Match[bytes]") -> bytes:
        return match.group(1) + str(int(match.group(2)) + delta).encode("ascii") + match.group(3)

    tail = _OFFSET.sub(shift, tail)
    return _INDEX_LIST_OFFSET.sub(shift, tail)


class IndexedBodyWriter:
    """
    Writes the header and body of an ``indexedmzML`` document.

    The body is copied in chunks while a running SHA-1 is kept; only the
    index section at the very end is held in memory and rewritten.
    """

    def __init__(self, outstream: BinaryIO, delta: int):
        self.outstream = outstream
        self.delta = delta
        self._sha1 = hashlib.sha1()

    def _emit(self, data: bytes) -> None:
        if data:
            self._sha1.update(data)
            self.outstream.write(data)

    def write(self, new_header: bytes, chunks: Iterable[bytes]) -> None:
        self._emit(new_header)

        pending = b""
        tail = None
        for chunk in chunks:
            if tail is not None:
                tail += chunk
                continue
            pending += chunk
            match = _INDEX_LIST_START.search(pending)
            if match is not None:
                self._emit(pending[: match.start()])
                tail = pending[match.start():]
                pending = b""
            elif len(pending) > _MARKER_OVERLAP:
                self._emit(pending[:-_MARKER_OVERLAP])
                pending = pending[-_MARKER_OVERLAP:]

        if tail is None:
            logger.warning("indexedmzML has no <indexList>; copying without index update")
            self._emit(pending)
            return

        self._write_tail(tail)

    def _write_tail(self, tail: bytes) -> None:
        tail = shift_offsets(tail, self.delta)

        match = _FILE_CHECKSUM.search(tail)
        if match is None:
            self._emit(tail)
            return

        # The checksum covers everything up to and including <fileChecksum>
        self._emit(tail[: match.end(1)])
        digest = self._sha1.hexdigest().encode("ascii")
        self.outstream.write(digest + tail[match.start(3):])
        logger.info(f"Shifted index offsets by {self.delta} bytes, new checksum {digest.decode()}")


def write_document(
    header: MzMLHeader,
    new_header: bytes,
    outstream: BinaryIO,
    chunk_size: int = COPY_CHUNK_SIZE,
) -> None:
    """
    Write the spliced header followed by the rest of the input document.

    Args:
        header: The header read from the input, holding the unread stream
        new_header: Header bytes with the sample list in place
        outstream: Binary output stream
        chunk_size: Bytes per copy
    """
    delta = len(new_header) - len(header.data)

    if header.is_indexed and new_header != header.data:
        IndexedBodyWriter(outstream, delta).write(new_header, _chunks(header, chunk_size))
        return

    outstream.write(new_header)
    outstream.write(header.remainder)
    if header.stream is not None:
        shutil.copyfileobj(header.stream, outstream, chunk_size)
