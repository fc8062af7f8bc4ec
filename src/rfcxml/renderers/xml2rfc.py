#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/rfcxml/renderers/xml2rfc.py
"""xml2rfc v2 rendering.

This module provides the Xml2RfcRenderer class which turns the walker's
callbacks into xml2rfc version 2 XML (RFC 2629). Sections are nested
``<section>`` elements, so the renderer keeps track of which sections are
open, which document matter (``<front>``, ``<middle>``, ``<back>``) output
belongs to, which attributes wait for the next block, and which documents
were cited. That state lives in a RenderState owned by the renderer; create
one renderer per document.

In standalone mode the output is a complete document. Otherwise only the
inner block content is produced, for embedding in a larger document.

"""

from __future__ import annotations

import calendar
import html
import logging
from typing import Optional

from rfcxml.ast.nodes import TitleBlock
from rfcxml.constants import (
    COMMENT_SOURCE_SCAN_WINDOW,
    INFORMATIVE_REFERENCES_TITLE,
    NORMATIVE_REFERENCES_TITLE,
    RFC_DOCTYPE,
    XML_DECLARATION,
)
from rfcxml.exceptions import RenderingError
from rfcxml.options.xml2rfc import Xml2RfcRendererOptions
from rfcxml.renderers.base import (
    AttributeSet,
    BaseRenderer,
    CitationKind,
    ContentProducer,
    LinkKind,
    ListFlags,
    MatterPhase,
    OutputBuffer,
    TableAlignment,
)
from rfcxml.renderers.state import (
    CitationCollator,
    MatterTransition,
    RenderState,
    merge_attributes,
    reference_filename,
)
from rfcxml.utils.escape import escape_xml, strip_markup

logger = logging.getLogger(__name__)

_MATTER_TAGS = {
    MatterPhase.FRONT: "front",
    MatterPhase.MAIN: "middle",
    MatterPhase.BACK: "back",
}

_REMOTE_PREFIXES = ("http://", "https://")

_XML_PREDEFINED_ENTITIES = frozenset({"&amp;", "&lt;", "&gt;", "&quot;", "&apos;"})


def render_attributes(attributes: dict[str, str]) -> str:
    """Render attributes as a string to append to an opening tag.

    Examples
    --------
        >>> render_attributes({"anchor": "intro", "title": "A & B"})
        ' anchor="intro" title="A &amp; B"'

    Values are raw text and are escaped here.

    """
    return "".join(f' {name}="{escape_xml(value)}"' for name, value in attributes.items())


def split_comment_source(payload: str) -> tuple[Optional[str], str]:
    """Split an editorial comment into its source label and text.

    The source is the text before the first colon, if that colon is within
    the first 20 characters; one leading space is dropped from it. A colon
    at the very start gives no source and is dropped.

    Parameters
    ----------
    payload : str
        Comment text, optionally still wrapped in ``<!--`` and ``-->``

    Returns
    -------
    tuple of (str or None, str)
        Source label (None when there is none) and the remaining text

    Examples
    --------
        >>> split_comment_source(" rfc1234: some note text")
        ('rfc1234', ' some note text')
        >>> split_comment_source("no label here")
        (None, 'no label here')

    """
    text = payload
    end = text.find("-->")
    if end > 0:
        text = text[:end]
    if text.startswith("<!--"):
        text = text[4:]

    colon = text.find(":", 0, COMMENT_SOURCE_SCAN_WINDOW)
    if colon < 0:
        return None, text
    if colon == 0:
        return None, text[1:]

    source = text[:colon]
    if source.startswith(" "):
        source = source[1:]
    return source, text[colon + 1 :]


class Xml2RfcRenderer(BaseRenderer):
    """Render walker callbacks to xml2rfc v2 XML.

    Parameters
    ----------
    options : Xml2RfcRendererOptions or None, default = None
        xml2rfc rendering options

    Examples
    --------
    Basic usage:

        >>> from rfcxml.ast import Document, Heading, Text
        >>> from rfcxml.options import Xml2RfcRendererOptions
        >>> from rfcxml.renderers.xml2rfc import Xml2RfcRenderer
        >>> doc = Document(children=[Heading(level=1, content=[Text(content="Introduction")])])
        >>> renderer = Xml2RfcRenderer(Xml2RfcRendererOptions(standalone=False))
        >>> xml = renderer.render_to_string(doc)

    """

    def __init__(self, options: Xml2RfcRendererOptions | None = None):
        """Initialize the xml2rfc renderer with options."""
        BaseRenderer._validate_options_type(options, Xml2RfcRendererOptions, "xml2rfc")
        options = options or Xml2RfcRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: Xml2RfcRendererOptions = options
        self.state = RenderState(
            citations=CitationCollator(order=options.citation_order, conflict=options.citation_conflict)
        )

    @property
    def standalone(self) -> bool:
        """Whether document-level containers are emitted."""
        return self.options.standalone

    def render_to_string(self, doc) -> str:  # type: ignore[no-untyped-def]
        """Render a document and optionally check that it is well-formed.

        Raises
        ------
        RenderingError
            If ``validate_output`` is set and the standalone result is not
            well-formed XML

        """
        result = super().render_to_string(doc)
        if self.options.validate_output and self.standalone:
            self._check_well_formed(result)
        return result

    @staticmethod
    def _check_well_formed(xml_text: str) -> None:
        from defusedxml import ElementTree
        from defusedxml.common import DefusedXmlException

        try:
            ElementTree.fromstring(xml_text.encode("utf-8"))
        except (ElementTree.ParseError, DefusedXmlException) as e:
            raise RenderingError(
                f"Rendered document is not well-formed XML: {e}", rendering_stage="validation", original_error=e
            ) from e

    # ------------------------------------------------------------------
    # Block attributes
    # ------------------------------------------------------------------

    def set_attributes(self, *attributes: AttributeSet) -> None:
        """Queue attributes for the next block-level element."""
        for attribute_set in attributes:
            self.state.attributes.enqueue(attribute_set)

    def drain_attributes(self) -> list[AttributeSet]:
        """Take and clear every queued attribute set."""
        return self.state.attributes.drain_all()

    def _block_attributes(self, **own: str) -> str:
        """Drain the attribute queue and render it with the block's own attributes."""
        return render_attributes(merge_attributes(own, *self.drain_attributes()))

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def _ensure_root(self, out: OutputBuffer) -> None:
        """Open ``<rfc>`` and ``<front>`` if no title block did so yet."""
        if not self.standalone or self.state.root_open:
            return
        logger.debug("No title block before content; opening document root without metadata")
        out.write("<rfc>\n<front>\n")
        self.state.root_open = True

    def _close_sections(self, out: OutputBuffer, count: int) -> None:
        out.write("</section>\n" * count)

    def _flush_sections(self, out: OutputBuffer) -> None:
        self._close_sections(out, self.state.sections.flush_all())

    def _advance_matter(self, out: OutputBuffer, phase: MatterPhase) -> None:
        """Close open sections and move to ``phase``, emitting the container switch."""
        self._flush_sections(out)
        transition: Optional[MatterTransition] = self.state.matter.advance_to(phase)
        if transition is None or not self.standalone:
            return
        self._ensure_root(out)
        out.write(f"</{_MATTER_TAGS[transition.previous]}>\n")
        out.write(f"\n<{_MATTER_TAGS[transition.current]}>\n")

    # ------------------------------------------------------------------
    # Document level
    # ------------------------------------------------------------------

    def document_header(self, out: OutputBuffer) -> None:
        """Write the XML declaration and DOCTYPE."""
        if not self.standalone:
            return
        out.write(XML_DECLARATION)
        out.write(RFC_DOCTYPE)

    def document_footer(self, out: OutputBuffer) -> None:
        """Close open sections, the current matter and the root."""
        self._flush_sections(out)
        discarded = self.state.attributes.discard()
        if discarded:
            logger.debug("Discarded %d attribute set(s) with no block to attach to", discarded)
        if not self.standalone:
            return
        self._ensure_root(out)
        out.write(f"\n</{_MATTER_TAGS[self.state.matter.phase]}>\n")
        out.write("</rfc>\n")

    def title_block(self, out: OutputBuffer, block: TitleBlock) -> None:
        """Open the document root and front matter and write the title metadata.

        In fragment mode the block is recorded but nothing is written.
        """
        if self.state.title_block is not None or self.state.root_open:
            logger.warning("Ignoring title block %r: document header already written", block.title)
            return
        self.state.title_block = block
        if not self.standalone:
            return
        self.state.root_open = True

        rfc_attributes = render_attributes(
            {
                "ipr": block.ipr,
                "category": block.category,
                "docName": block.doc_name,
            }
        )
        out.write(f"<rfc{rfc_attributes}>\n")
        out.write("<front>\n")
        out.write(f"<title{render_attributes({'abbrev': block.abbrev})}>")
        out.write(escape_xml(block.title) + "</title>\n\n")

        for author in block.authors:
            author_attributes = render_attributes(
                {
                    "initials": author.initials,
                    "surname": author.surname,
                    "fullname": author.fullname,
                }
            )
            out.write(f"<author{author_attributes}>\n")
            out.write(f"<organization>{escape_xml(author.organization)}</organization>\n")
            out.write("<address>\n")
            out.write(f"<email>{escape_xml(author.email)}</email>\n")
            out.write("</address>\n")
            out.write("</author>\n")

        date_attributes: dict[str, str] = {}
        if block.date is not None:
            date_attributes = {
                "year": str(block.date.year),
                "month": calendar.month_name[block.date.month],
                "day": str(block.date.day),
            }
        out.write(f"<date{render_attributes(date_attributes)}/>\n\n")

        out.write(f"<area>{escape_xml(block.area)}</area>\n")
        out.write(f"<workgroup>{escape_xml(block.workgroup)}</workgroup>\n")
        for keyword in block.keywords:
            out.write(f"<keyword>{escape_xml(keyword)}</keyword>\n")
        out.write("\n")

    def document_matter(self, out: OutputBuffer, matter: MatterPhase) -> None:
        """Switch document matter; open sections are always closed first."""
        self._advance_matter(out, matter)

    def references(self, out: OutputBuffer) -> None:
        """Emit informative and normative reference sections.

        Always moves the document to back matter, closing open sections.
        No reference section is written when no citation was recorded.
        """
        if not self.standalone:
            return

        self._advance_matter(out, MatterPhase.BACK)
        citations = self.state.citations
        if len(citations) == 0:
            return

        groups = (
            (INFORMATIVE_REFERENCES_TITLE, citations.group(CitationKind.INFORMATIVE)),
            (NORMATIVE_REFERENCES_TITLE, citations.group(CitationKind.NORMATIVE)),
        )
        for title, records in groups:
            if not records:
                continue
            out.write(f'<references title="{title}">\n')
            for record in records:
                filename = record.filename or reference_filename(record.target_id, self.options.reference_prefix)
                out.write(f'\t<?rfc include="{escape_xml(filename)}"?>\n')
            out.write("</references>\n")
        citations.clear()

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def heading(self, out: OutputBuffer, content: ContentProducer, level: int, anchor: str) -> None:
        """Close sections at this level or deeper and open a new section."""
        self._ensure_root(out)
        self._close_sections(out, self.state.sections.open_heading(level))
        pending = self.drain_attributes()

        title = OutputBuffer()
        content(title)
        own = {"anchor": anchor, "title": html.unescape(strip_markup(title.getvalue()))}
        attributes = render_attributes(merge_attributes(own, *pending))
        out.write(f"\n<section{attributes}>\n")

    def paragraph(self, out: OutputBuffer, content: ContentProducer, flags: ListFlags = ListFlags.NONE) -> None:
        """Render a ``<t>`` paragraph; bare content inside definition lists."""
        attributes = self._block_attributes()
        body = OutputBuffer()
        if not content(body):
            return

        self._ensure_root(out)
        if flags & ListFlags.DEFINITION:
            out.extend(body)
            return
        out.write(f"<t{attributes}>")
        out.extend(body)
        out.write("</t>\n")

    def list_block(
        self, out: OutputBuffer, content: ContentProducer, flags: ListFlags = ListFlags.NONE, start: int = 1
    ) -> None:
        """Render a ``<list>``; an empty list produces no output at all."""
        extra: dict[str, str] = {}
        if flags & ListFlags.ORDERED:
            style = "numbers"
            if start > 1:
                extra["start"] = str(start)
        elif flags & ListFlags.DEFINITION:
            style = "hanging"
        else:
            style = "symbols"
        attributes = render_attributes(merge_attributes({"style": style}, *self.drain_attributes(), extra))

        body = OutputBuffer()
        if not content(body):
            return

        self._ensure_root(out)
        inside_list = bool(flags & ListFlags.INSIDE_LIST)
        if not inside_list:
            out.write("<t>\n")
        out.write(f"<list{attributes}>\n")
        out.extend(body)
        if flags & ListFlags.DEFINITION and not flags & ListFlags.ORDERED:
            out.write("</t>\n")
        out.write("</list>\n")
        if not inside_list:
            out.write("</t>\n")

    def list_item(self, out: OutputBuffer, text: str, flags: ListFlags = ListFlags.NONE) -> None:
        """Render an item, a hanging-label term, or a definition."""
        if flags & ListFlags.TERM:
            if not flags & ListFlags.BEGINNING_OF_LIST:
                out.write("</t>\n")
            out.write(f"<t{render_attributes({'hangText': html.unescape(strip_markup(text))})}>\n")
            return
        if flags & ListFlags.DEFINITION:
            out.write(text)
            return
        out.write(f"<t>{text}</t>\n")

    def block_code(self, out: OutputBuffer, text: str, language: str = "", caption: str = "") -> None:
        """Render code as ``<figure><artwork>``."""
        own: dict[str, str] = {}
        if caption:
            own["title"] = caption
        attributes = self._block_attributes(**own)
        artwork = render_attributes({"type": language}) if language else ""
        self._ensure_root(out)
        out.write(f"\n<figure{attributes}><artwork{artwork}>\n")
        out.write(escape_xml(text))
        out.write("</artwork></figure>\n")

    def block_quote(self, out: OutputBuffer, text: str) -> None:
        """Render a quote as an indented, unmarked list."""
        attributes = render_attributes(merge_attributes({"style": "empty"}, *self.drain_attributes()))
        self._ensure_root(out)
        out.write(f"<t><list{attributes}>\n")
        out.write(text)
        out.write("</list></t>\n")

    def abstract(self, out: OutputBuffer, text: str) -> None:
        """Render ``<abstract>``."""
        attributes = self._block_attributes()
        self._ensure_root(out)
        out.write(f"<abstract{attributes}>\n")
        out.write(text)
        out.write("</abstract>\n")

    def aside(self, out: OutputBuffer, text: str) -> None:
        """Asides have no v2 element; render them like quotes."""
        self.block_quote(out, text)

    def note(self, out: OutputBuffer, text: str) -> None:
        """Notes inside the text render like quotes."""
        self.block_quote(out, text)

    def comment(self, out: OutputBuffer, payload: str) -> None:
        """Render an editorial comment as ``<cref>``."""
        source, text = split_comment_source(payload)
        self._ensure_root(out)
        if source:
            out.write(f'<t><cref source="{escape_xml(source)}">')
        else:
            out.write("<t><cref>\n")
        out.write(escape_xml(text))
        out.write("</cref></t>\n")

    def block_html(self, out: OutputBuffer, text: str) -> None:
        """Raw HTML has no xml2rfc counterpart."""
        logger.debug("Dropping raw HTML block")

    def hrule(self, out: OutputBuffer) -> None:
        """Horizontal rules have no xml2rfc counterpart."""

    def table(self, out: OutputBuffer, header: str, body: str, caption: str = "") -> None:
        """Render ``<texttable>`` around the rendered header and rows."""
        own: dict[str, str] = {}
        if caption:
            own["title"] = caption
        attributes = self._block_attributes(**own)
        self._ensure_root(out)
        out.write(f"<texttable{attributes}>\n")
        out.write(header)
        out.write(body)
        out.write("</texttable>\n")

    def table_row(self, out: OutputBuffer, text: str) -> None:
        """Rows are plain runs of cells."""
        out.write(text)
        out.write("\n")

    def table_header_cell(self, out: OutputBuffer, text: str, align: TableAlignment) -> None:
        """Render ``<ttcol>``; alignment defaults to center."""
        if align in (TableAlignment.LEFT, TableAlignment.RIGHT):
            alignment = align.value
        else:
            alignment = TableAlignment.CENTER.value
        out.write(f'<ttcol align="{alignment}">')
        out.write(text)
        out.write("</ttcol>\n")

    def table_cell(self, out: OutputBuffer, text: str, align: TableAlignment) -> None:
        """Render ``<c>``. Body cells carry no alignment."""
        out.write("<c>")
        out.write(text)
        out.write("</c>")

    # ------------------------------------------------------------------
    # Inline
    # ------------------------------------------------------------------

    def citation(
        self,
        out: OutputBuffer,
        target: str,
        title: str = "",
        kind: CitationKind = CitationKind.INFORMATIVE,
        filename: str | None = None,
    ) -> None:
        """Render ``<xref>`` and record the cited document."""
        self.state.citations.record(target, kind, filename)
        out.write(f'<xref target="{escape_xml(target)}"/>')

    def index(self, out: OutputBuffer, primary: str, secondary: str = "") -> None:
        """Render ``<iref>``."""
        attributes = {"item": primary}
        if secondary:
            attributes["subitem"] = secondary
        out.write(f"<iref{render_attributes(attributes)}/>")

    def auto_link(self, out: OutputBuffer, link: str, kind: LinkKind = LinkKind.NORMAL) -> None:
        """Render ``<eref>``; email addresses get a mailto: target."""
        target = f"mailto:{link}" if kind is LinkKind.EMAIL and not link.startswith("mailto:") else link
        out.write(f'<eref target="{escape_xml(target)}"/>')

    def code_span(self, out: OutputBuffer, text: str) -> None:
        """Render ``<spanx style="verb">``."""
        out.write(f'<spanx style="verb">{escape_xml(text)}</spanx>')

    def emphasis(self, out: OutputBuffer, text: str) -> None:
        """Render ``<spanx style="emph">``."""
        out.write(f'<spanx style="emph">{text}</spanx>')

    def double_emphasis(self, out: OutputBuffer, text: str) -> None:
        """Render ``<spanx style="strong">``."""
        out.write(f'<spanx style="strong">{text}</spanx>')

    def triple_emphasis(self, out: OutputBuffer, text: str) -> None:
        """Render strong around emph."""
        out.write(f'<spanx style="strong"><spanx style="emph">{text}</spanx></spanx>')

    def strikethrough(self, out: OutputBuffer, text: str) -> None:
        """xml2rfc v2 cannot strike text out; the text is kept."""
        out.write(text)

    def image(self, out: OutputBuffer, link: str, title: str = "", alt: str = "") -> None:
        """Render remote images as ``<eref>``; local ones leave their alt text.

        Images consume the attribute queue like blocks do.
        """
        self.drain_attributes()
        if link.startswith(_REMOTE_PREFIXES):
            out.write(f'<eref target="{escape_xml(link)}">{escape_xml(alt)}</eref>')
        else:
            out.write(escape_xml(alt))

    def line_break(self, out: OutputBuffer) -> None:
        """Render ``<vspace/>``."""
        out.write("\n<vspace/>\n")

    def link(self, out: OutputBuffer, link: str, title: str = "", content: str = "") -> None:
        """Render ``<xref>`` for anchors and ``<eref>`` for URIs."""
        if "://" in link or link.startswith("mailto:"):
            out.write(f'<eref target="{escape_xml(link)}">{content}</eref>')
            return
        target = link[1:] if link.startswith("#") else link
        out.write(f'<xref target="{escape_xml(target)}"/>')

    def raw_html_tag(self, out: OutputBuffer, tag: str) -> None:
        """Inline raw HTML has no xml2rfc counterpart."""

    def entity(self, out: OutputBuffer, entity: str) -> None:
        """Write the entity as a numeric character reference.

        XML predefined and numeric references are copied unchanged, and so is
        anything that is not a known HTML entity.
        """
        if entity.startswith("&#") or entity in _XML_PREDEFINED_ENTITIES:
            out.write(entity)
            return
        text = html.unescape(entity)
        if text == entity:
            out.write(entity)
            return
        out.write("".join(f"&#{ord(char)};" for char in text))

    def normal_text(self, out: OutputBuffer, text: str) -> None:
        """Render escaped text."""
        out.write(escape_xml(text))


__all__ = ["Xml2RfcRenderer", "render_attributes", "split_comment_source"]
