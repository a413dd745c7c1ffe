"""
SampleListBuilder - Build the mzML ``sampleList`` and splice it into a header.
"""

import logging
import re
from typing import Optional

from lxml import etree

from sdrf_samplelist.config import (
    DEFAULT_INDENT,
    MZML_ELEMENTS_AFTER_SAMPLE_LIST,
    MZML_ELEMENTS_BEFORE_SAMPLE_LIST,
)
from sdrf_samplelist.exceptions import SchemaPositionError
from sdrf_samplelist.model import CVParam, SampleList, UserParam
from sdrf_samplelist.mzml.header import MzMLHeader

logger = logging.getLogger(__name__)

# Start and end tags of the rendered element; attribute values never hold a raw "<"
_TAG_OPEN = re.compile(r"<(/?)(?=[A-Za-z])")


class SampleListBuilder:
    """
    Renders a :class:`SampleList` as mzML and places it in the document.

    The element is inserted after ``fileDescription`` (and
    ``referenceableParamGroupList`` when present) and before the first of
    ``softwareList``, ``instrumentConfigurationList``, ``dataProcessingList``
    or ``run``.  An existing ``sampleList`` is replaced in place.  No other
    byte of the header changes.
    """

    def build_element(self, sample_list: SampleList) -> etree._Element:
        """Build the ``sampleList`` element tree."""
        root = etree.Element("sampleList", count=str(sample_list.count))
        for sample in sample_list:
            sample_el = etree.SubElement(root, "sample", id=sample.id, name=sample.name)
            for param in sample.params:
                if isinstance(param, CVParam):
                    etree.SubElement(
                        sample_el,
                        "cvParam",
                        cvRef=param.cv_ref,
                        accession=param.accession,
                        name=param.name,
                        value=param.value,
                    )
                elif isinstance(param, UserParam):
                    etree.SubElement(sample_el, "userParam", name=param.name, value=param.value)
                else:
                    raise TypeError(f"Unsupported parameter type: {type(param).__name__}")
        return root

    def render(
        self,
        sample_list: SampleList,
        indent: Optional[str] = DEFAULT_INDENT,
        base_indent: str = "",
        newline: str = "\n",
        prefix: str = "",
    ) -> str:
        """
        Serialise the sample list.

        Args:
            sample_list: Samples to write
            indent: One indentation level, or None for a single-line element
            base_indent: Indentation of the ``sampleList`` line itself, applied
                to every following line
            newline: Line separator
            prefix: Namespace prefix (with colon) for every tag, matching a
                document whose mzML element is written as ``<ms:mzML>``

        Returns:
            The element text, without leading indentation or trailing newline
        """
        element = self.build_element(sample_list)
        if indent is not None:
            etree.indent(element, space=indent)
        text = etree.tostring(element, encoding="unicode")

        if prefix:
            text = _TAG_OPEN.sub(lambda m: f"<{m.group(1)}{prefix}", text)
        if indent is None:
            return text
        return text.replace("\n", newline + base_indent)

    def splice(self, header: MzMLHeader, sample_list: SampleList) -> bytes:
        """
        Return the header bytes with the sample list in place.

        Raises:
            SchemaPositionError: if the document's element order leaves no
                valid place for ``sampleList``
        """
        data = header.data

        if header.element_span("fileDescription") is None:
            raise SchemaPositionError("mzML header has no <fileDescription>; cannot place <sampleList>")

        # sampleList must follow every element that precedes it in the schema
        lower_bound = 0
        for name in MZML_ELEMENTS_BEFORE_SAMPLE_LIST:
            span = header.element_span(name)
            if span is not None:
                lower_bound = max(lower_bound, span[1])

        existing = header.element_span("sampleList")
        if existing is not None:
            start, end = existing
            if start < lower_bound:
                raise SchemaPositionError(
                    "Existing <sampleList> precedes <fileDescription> or <referenceableParamGroupList>"
                )
            logger.info(f"Replacing existing sampleList with {sample_list.count} samples")
            return data[:start] + self._render_at(header, start, sample_list) + data[end:]

        starts = [header.start_of(name) for name in MZML_ELEMENTS_AFTER_SAMPLE_LIST]
        starts = [s for s in starts if s is not None]
        if not starts:
            raise SchemaPositionError(
                "No element found to place <sampleList> before "
                f"(expected one of {', '.join(MZML_ELEMENTS_AFTER_SAMPLE_LIST)})"
            )
        anchor = min(starts)
        if anchor < lower_bound:
            raise SchemaPositionError(
                "mzML elements are out of schema order: "
                "<fileDescription> must precede the software and instrument lists"
            )

        text = self._render_at(header, anchor, sample_list)
        indent = header.line_indent(anchor)
        if indent is not None:
            text += header.newline + indent
        logger.info(f"Inserting sampleList with {sample_list.count} samples")
        return data[:anchor] + text + data[anchor:]

    def _render_at(self, header: MzMLHeader, offset: int, sample_list: SampleList) -> bytes:
        """Render for the layout found at ``offset`` in the header."""
        encoding = header.encoding
        prefix = header.prefix.decode(encoding)
        base = header.line_indent(offset)
        if base is None:
            text = self.render(sample_list, indent=None, prefix=prefix)
        else:
            unit = header.indent_unit()
            text = self.render(
                sample_list,
                indent=unit.decode(encoding) if unit else DEFAULT_INDENT,
                base_indent=base.decode(encoding),
                newline=header.newline.decode(encoding),
                prefix=prefix,
            )
        return text.encode(encoding, "xmlcharrefreplace")
