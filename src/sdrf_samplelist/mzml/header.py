"""
MzMLHeader - Read the metadata header of an mzML stream.

Only the bytes before the ``<run>`` start tag are buffered; the spectral
payload that follows is left in the stream for the writer to copy through.
"""

import logging
import re
from typing import BinaryIO, List, Optional, Tuple

from lxml import etree

from sdrf_samplelist.config import COPY_CHUNK_SIZE
from sdrf_samplelist.exceptions import MalformedMzml, SchemaPositionError

logger = logging.getLogger(__name__)

_PREFIX = rb"(?:[\w.-]+:)?"
_RUN_START = re.compile(rb"<" + _PREFIX + rb"run[\s>/]")
_ENCODING = re.compile(rb"""^\s*<\?xml[^>]*encoding=["']([\w.-]+)["']""")
_MZML_PREFIX = re.compile(rb"<([\w.-]+:)?mzML(?=[\s/>])")


def _start_tag(name: str) -> "re.Pattern[bytes]":
    # Quoted attribute values may contain '>'
    return re.compile(
        rb"<" + _PREFIX + re.escape(name.encode()) + rb"""(?=[\s/>])(?:[^>"']|"[^"]*"|'[^']*')*>"""
    )


def _end_tag(name: str) -> "re.Pattern[bytes]":
    return re.compile(rb"</" + _PREFIX + re.escape(name.encode()) + rb"\s*>")


def _local_name(tag) -> str:
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).localname


class MzMLHeader:
    """
    The leading part of an mzML document, up to (not including) ``<run``.

    Attributes:
        data: Header bytes
        remainder: Bytes already read from the stream past the header
        stream: The input stream, positioned after ``remainder``
        source_files: ``name`` of each ``sourceFile`` in ``fileDescription``
        root_tag: Local name of the document element
    """

    def __init__(self, data: bytes, remainder: bytes = b"", stream: Optional[BinaryIO] = None):
        self.data = bytes(data)
        self.remainder = bytes(remainder)
        self.stream = stream
        self.source_files: List[str] = []
        self.root_tag: Optional[str] = None
        self._has_mzml = False
        self._parse()

    def _parse(self) -> None:
        if not self.data.strip():
            raise MalformedMzml("Input document is empty")

        parser = etree.XMLPullParser(events=("start", "end"))
        try:
            parser.feed(self.data)
            events = list(parser.read_events())
        except etree.XMLSyntaxError as e:
            raise MalformedMzml(f"Input is not well-formed XML: {e}") from e

        stack: List[str] = []
        for event, element in events:
            name = _local_name(element.tag)
            if event == "start":
                if self.root_tag is None:
                    self.root_tag = name
                if name == "mzML":
                    self._has_mzml = True
                stack.append(name)
            else:
                stack.pop()
                if name == "sourceFile" and "sourceFileList" in stack:
                    file_name = element.get("name")
                    if file_name:
                        self.source_files.append(file_name)

        if not self._has_mzml:
            raise MalformedMzml(
                f"No mzML element found (document element is <{self.root_tag or '?'}>)"
            )

        logger.debug(f"Read {len(self.data)} header bytes, source files: {self.source_files}")

    @property
    def is_indexed(self) -> bool:
        return self.root_tag == "indexedmzML"

    @property
    def newline(self) -> bytes:
        return b"\r\n" if b"\r\n" in self.data else b"\n"

    @property
    def prefix(self) -> bytes:
        """Namespace prefix of the mzML element including the colon, or empty."""
        match = _MZML_PREFIX.search(self.data)
        if match is None or match.group(1) is None:
            return b""
        return match.group(1)

    @property
    def encoding(self) -> str:
        match = _ENCODING.match(self.data)
        return match.group(1).decode("ascii") if match else "utf-8"

    def start_of(self, name: str) -> Optional[int]:
        """Offset of the first ``<name`` start tag, or None."""
        if name == "run" and self.remainder:
            return len(self.data)
        match = _start_tag(name).search(self.data)
        return match.start() if match else None

    def element_span(self, name: str) -> Optional[Tuple[int, int]]:
        """
        ``(start, end)`` offsets of the first ``name`` element, end exclusive.

        Raises:
            SchemaPositionError: if the element is opened but never closed
        """
        match = _start_tag(name).search(self.data)
        if match is None:
            return None
        if match.group(0).endswith(b"/>"):
            return match.start(), match.end()
        end = _end_tag(name).search(self.data, match.end())
        if end is None:
            raise SchemaPositionError(f"<{name}> is not closed before <run>; document truncated?")
        return match.start(), end.end()

    def line_indent(self, offset: int) -> Optional[bytes]:
        """
        Whitespace between the preceding newline and ``offset``.

        Returns None when ``offset`` does not start its own line.
        """
        line_start = self.data.rfind(b"\n", 0, offset) + 1
        prefix = self.data[line_start:offset]
        if prefix.strip():
            return None
        return prefix

    def indent_unit(self) -> Optional[bytes]:
        """One level of indentation, judged from ``mzML`` and its first child."""
        root = self.start_of("mzML")
        child = self.start_of("cvList")
        if root is None or child is None:
            return None
        outer = self.line_indent(root)
        inner = self.line_indent(child)
        if outer is None or inner is None or not inner.startswith(outer) or inner == outer:
            return None
        return inner[len(outer):]


def read_header(stream: BinaryIO, chunk_size: int = COPY_CHUNK_SIZE) -> MzMLHeader:
    """
    Read an mzML stream up to its ``<run`` start tag.

    Args:
        stream: Binary input stream
        chunk_size: Bytes per read

    Returns:
        MzMLHeader holding the header, the over-read bytes, and the stream

    Raises:
        MalformedMzml: if the header is not well-formed XML, has no mzML element,
            or the input ends before <run>
    """
    buffer = bytearray()
    search_from = 0

    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            # Report unparseable input as such before complaining about <run>
            MzMLHeader(bytes(buffer))
            raise MalformedMzml(
                f"Input ended after {len(buffer)} bytes without a <run> element; document truncated?"
            )

        buffer += chunk
        # Overlap the previous chunk in case the tag straddles the boundary
        match = _RUN_START.search(buffer, max(0, search_from - 16))
        if match is not None:
            return MzMLHeader(bytes(buffer[: match.start()]), bytes(buffer[match.start():]), stream)
        search_from = len(buffer)
