#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/rfcxml/ast/walker.py
"""Document walker driving callback renderers.

The walker visits a Document once, in document order, and turns every node
into calls on a BaseRenderer. It owns the output buffer and hands the
renderer whatever buffer the current content belongs to: the document
buffer for top-level blocks, a scratch buffer for item text, table cells or
inline runs that are rendered before their container.

Block attributes from ``metadata["attributes"]`` are queued right before
the callback of the block they belong to. Blocks whose children are
rendered first (quotes, abstracts, tables) queue theirs only after the
children are done, so a nested paragraph cannot take them.

"""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING, Iterable, Mapping, Optional

from rfcxml.ast.nodes import (
    Abstract,
    Aside,
    AutoLink,
    BlockQuote,
    Citation,
    Code,
    CodeBlock,
    Comment,
    DefinitionDescription,
    DefinitionList,
    DefinitionTerm,
    Document,
    DocumentMatter,
    Emphasis,
    Entity,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    IndexEntry,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Note,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    TitleBlock,
)
from rfcxml.ast.visitors import NodeVisitor
from rfcxml.renderers.base import (
    CitationKind,
    ContentProducer,
    LinkKind,
    ListFlags,
    MatterPhase,
    OutputBuffer,
    TableAlignment,
)
from rfcxml.utils.text import slugify

if TYPE_CHECKING:
    from rfcxml.renderers.base import BaseRenderer

logger = logging.getLogger(__name__)

_MATTER_PHASES = {
    "front": MatterPhase.FRONT,
    "main": MatterPhase.MAIN,
    "back": MatterPhase.BACK,
}

_ALIGNMENTS = {
    "left": TableAlignment.LEFT,
    "right": TableAlignment.RIGHT,
    "center": TableAlignment.CENTER,
}


class DocumentWalker(NodeVisitor):
    """Walk a document and drive a callback renderer.

    Parameters
    ----------
    renderer : BaseRenderer
        Renderer receiving the callbacks. It keeps state for exactly one
        document, so a walker and its renderer are used for one walk.

    Examples
    --------
        >>> from rfcxml.ast import Document, Paragraph, Text
        >>> from rfcxml.renderers.xml2rfc import Xml2RfcRenderer
        >>> from rfcxml.options import Xml2RfcRendererOptions
        >>> renderer = Xml2RfcRenderer(Xml2RfcRendererOptions(standalone=False))
        >>> DocumentWalker(renderer).walk(Document(children=[Paragraph(content=[Text(content="Hi")])]))
        '<t>Hi</t>\\n'

    """

    def __init__(self, renderer: BaseRenderer):
        """Initialize the walker for one renderer."""
        self.renderer = renderer
        self._output = OutputBuffer()
        self._seen_anchors: set[str] = set()
        self._list_depth = 0
        self._list_flags = ListFlags.NONE
        self._in_definition = False
        self._in_header_row = False
        self._alignments: list[Optional[str]] = []
        self._cell_index = 0
        self._first_term = False

    def walk(self, doc: Document) -> str:
        """Render a document and return the renderer's output.

        Parameters
        ----------
        doc : Document
            Document to render

        Returns
        -------
        str
            Rendered output

        """
        self._output = OutputBuffer()
        doc.accept(self)
        return self._output.getvalue()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _render_into(self, out: OutputBuffer, nodes: Iterable[Node]) -> bool:
        """Render nodes into ``out``; returns whether anything was written."""
        saved_output = self._output
        self._output = out
        before = len(out)
        try:
            for node in nodes:
                node.accept(self)
        finally:
            self._output = saved_output
        return len(out) > before

    def _render_to_string(self, nodes: Iterable[Node]) -> str:
        scratch = OutputBuffer()
        self._render_into(scratch, nodes)
        return scratch.getvalue()

    def _producer(self, nodes: list[Node]) -> ContentProducer:
        def produce(out: OutputBuffer) -> bool:
            return self._render_into(out, nodes)

        return produce

    def _queue_attributes(self, node: Node) -> None:
        attributes = node.metadata.get("attributes") if node.metadata else None
        if not attributes:
            return
        if isinstance(attributes, Mapping):
            self.renderer.set_attributes(attributes)
        else:
            self.renderer.set_attributes(*attributes)

    def _anchor_for(self, node: Heading) -> str:
        if node.identifier:
            if node.identifier in self._seen_anchors:
                logger.warning("Duplicate heading anchor: %s", node.identifier)
            self._seen_anchors.add(node.identifier)
            return node.identifier
        return slugify(_plain_text(node.content), seen_slugs=self._seen_anchors)

    # ------------------------------------------------------------------
    # Document level
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        """Render header, title block, body, references and footer."""
        out = self._output
        self.renderer.document_header(out)

        has_title_child = any(isinstance(child, TitleBlock) for child in node.children)
        title_data = node.metadata.get("title_block") if node.metadata else None
        if title_data and not has_title_child:
            title = title_data if isinstance(title_data, TitleBlock) else TitleBlock.from_dict(title_data)
            title.accept(self)

        for child in node.children:
            child.accept(self)

        self.renderer.references(out)
        self.renderer.document_footer(out)

    def visit_title_block(self, node: TitleBlock) -> None:
        """Render the title metadata."""
        self.renderer.title_block(self._output, node)

    def visit_document_matter(self, node: DocumentMatter) -> None:
        """Switch document matter."""
        self.renderer.document_matter(self._output, _MATTER_PHASES[node.matter])

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def visit_heading(self, node: Heading) -> None:
        """Open a section for the heading."""
        anchor = self._anchor_for(node)
        self._queue_attributes(node)
        self.renderer.heading(self._output, self._producer(node.content), node.level, anchor)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a paragraph."""
        flags = ListFlags.DEFINITION if self._in_definition else ListFlags.NONE
        self._queue_attributes(node)
        self.renderer.paragraph(self._output, self._producer(node.content), flags)

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a code block."""
        self._queue_attributes(node)
        self.renderer.block_code(self._output, node.content, node.language or "", node.caption or "")

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a block quote."""
        text = self._render_to_string(node.children)
        self._queue_attributes(node)
        self.renderer.block_quote(self._output, text)

    def visit_abstract(self, node: Abstract) -> None:
        """Render the abstract."""
        text = self._render_to_string(node.children)
        self._queue_attributes(node)
        self.renderer.abstract(self._output, text)

    def visit_aside(self, node: Aside) -> None:
        """Render an aside."""
        text = self._render_to_string(node.children)
        self._queue_attributes(node)
        self.renderer.aside(self._output, text)

    def visit_note(self, node: Note) -> None:
        """Render a note."""
        text = self._render_to_string(node.children)
        self._queue_attributes(node)
        self.renderer.note(self._output, text)

    def visit_comment(self, node: Comment) -> None:
        """Render an editorial comment."""
        self.renderer.comment(self._output, node.content)

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Pass a raw HTML block to the renderer."""
        self.renderer.block_html(self._output, node.content)

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Pass a horizontal rule to the renderer."""
        self.renderer.hrule(self._output)

    def visit_list(self, node: List) -> None:
        """Render an ordered or unordered list.

        Items are rendered by the content producer, so a list without any
        item text never reaches the output.
        """
        flags = ListFlags.ORDERED if node.ordered else ListFlags.NONE
        if self._list_depth > 0:
            flags |= ListFlags.INSIDE_LIST

        def produce(out: OutputBuffer) -> bool:
            saved_flags = self._list_flags
            self._list_flags = ListFlags.ORDERED if node.ordered else ListFlags.NONE
            self._list_depth += 1
            try:
                return self._render_into(out, node.items)
            finally:
                self._list_depth -= 1
                self._list_flags = saved_flags

        self._queue_attributes(node)
        self.renderer.list_block(self._output, produce, flags, node.start)

    def visit_list_item(self, node: ListItem) -> None:
        """Render one list item.

        Paragraphs in an item are rendered as bare inline text, separated
        by line breaks; other blocks render normally inside the item.
        """
        scratch = OutputBuffer()
        previous_was_text = False
        for child in node.children:
            if isinstance(child, Paragraph):
                if previous_was_text:
                    self.renderer.line_break(scratch)
                self._render_into(scratch, child.content)
                previous_was_text = True
            else:
                self._render_into(scratch, [child])
                previous_was_text = False

        text = scratch.getvalue()
        if not text:
            logger.debug("Skipping empty list item")
            return
        self.renderer.list_item(self._output, text, self._list_flags)

    def visit_definition_list(self, node: DefinitionList) -> None:
        """Render a definition list as a hanging list."""
        flags = ListFlags.DEFINITION
        if self._list_depth > 0:
            flags |= ListFlags.INSIDE_LIST

        def produce(out: OutputBuffer) -> bool:
            saved_output, saved_first_term = self._output, self._first_term
            self._output = out
            self._list_depth += 1
            self._first_term = True
            before = len(out)
            try:
                for term, descriptions in node.items:
                    term.accept(self)
                    for description in descriptions:
                        description.accept(self)
            finally:
                self._list_depth -= 1
                self._output, self._first_term = saved_output, saved_first_term
            return len(out) > before

        self._queue_attributes(node)
        self.renderer.list_block(self._output, produce, flags)

    def visit_definition_term(self, node: DefinitionTerm) -> None:
        """Render a term as the hanging label of its definitions."""
        flags = ListFlags.DEFINITION | ListFlags.TERM
        if self._first_term:
            flags |= ListFlags.BEGINNING_OF_LIST
            self._first_term = False
        self.renderer.list_item(self._output, self._render_to_string(node.content), flags)

    def visit_definition_description(self, node: DefinitionDescription) -> None:
        """Render a definition."""
        saved = self._in_definition
        self._in_definition = True
        try:
            text = self._render_to_string(node.content)
        finally:
            self._in_definition = saved
        self.renderer.list_item(self._output, text, ListFlags.DEFINITION)

    def visit_table(self, node: Table) -> None:
        """Render a table from its independently rendered header and rows."""
        header_row = node.header
        body_rows = node.rows
        if header_row is None and body_rows and body_rows[0].is_header:
            header_row, body_rows = body_rows[0], body_rows[1:]

        saved_alignments = self._alignments
        self._alignments = list(node.alignments)
        try:
            header = ""
            if header_row is not None:
                self._in_header_row = True
                try:
                    header = self._render_to_string([header_row])
                finally:
                    self._in_header_row = False
            body = self._render_to_string(body_rows)
        finally:
            self._alignments = saved_alignments

        self._queue_attributes(node)
        self.renderer.table(self._output, header, body, node.caption or "")

    def visit_table_row(self, node: TableRow) -> None:
        """Render a row from its cells."""
        self._cell_index = 0
        cells = self._render_to_string(node.cells)
        self.renderer.table_row(self._output, cells)

    def visit_table_cell(self, node: TableCell) -> None:
        """Render a header or body cell."""
        index = self._cell_index
        self._cell_index += 1
        alignment = node.alignment
        if alignment is None and index < len(self._alignments):
            alignment = self._alignments[index]
        align = _ALIGNMENTS.get(alignment or "", TableAlignment.NONE)

        text = self._render_to_string(node.content)
        if self._in_header_row:
            self.renderer.table_header_cell(self._output, text, align)
        else:
            self.renderer.table_cell(self._output, text, align)

    # ------------------------------------------------------------------
    # Inline
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        """Render plain text."""
        self.renderer.normal_text(self._output, node.content)

    def visit_entity(self, node: Entity) -> None:
        """Render an entity reference."""
        self.renderer.entity(self._output, node.content)

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render emphasis."""
        self.renderer.emphasis(self._output, self._render_to_string(node.content))

    def visit_strong(self, node: Strong) -> None:
        """Render strong emphasis; strong around a lone emphasis is triple emphasis."""
        if len(node.content) == 1 and isinstance(node.content[0], Emphasis):
            self.renderer.triple_emphasis(self._output, self._render_to_string(node.content[0].content))
            return
        self.renderer.double_emphasis(self._output, self._render_to_string(node.content))

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Render struck-through text."""
        self.renderer.strikethrough(self._output, self._render_to_string(node.content))

    def visit_code(self, node: Code) -> None:
        """Render inline code."""
        self.renderer.code_span(self._output, node.content)

    def visit_link(self, node: Link) -> None:
        """Render a link."""
        content = self._render_to_string(node.content)
        self.renderer.link(self._output, node.url, node.title or "", content)

    def visit_auto_link(self, node: AutoLink) -> None:
        """Render a bare URL or email address."""
        kind = LinkKind.EMAIL if node.email else LinkKind.NORMAL
        self.renderer.auto_link(self._output, node.url, kind)

    def visit_image(self, node: Image) -> None:
        """Render an image."""
        self.renderer.image(self._output, node.url, node.title or "", node.alt_text)

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a hard line break."""
        self.renderer.line_break(self._output)

    def visit_html_inline(self, node: HTMLInline) -> None:
        """Pass inline HTML to the renderer."""
        self.renderer.raw_html_tag(self._output, node.content)

    def visit_citation(self, node: Citation) -> None:
        """Render a citation."""
        self.renderer.citation(self._output, node.target, node.title or "", CitationKind(node.kind), node.filename)

    def visit_index_entry(self, node: IndexEntry) -> None:
        """Render an index entry."""
        self.renderer.index(self._output, node.primary, node.secondary)


def _plain_text(nodes: Iterable[Node]) -> str:
    """Collect the character data of inline nodes without rendering them."""
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, (Text, Code)):
            parts.append(node.content)
        elif isinstance(node, Entity):
            parts.append(html.unescape(node.content))
        elif isinstance(node, Citation):
            parts.append(node.target)
        elif isinstance(node, Image):
            parts.append(node.alt_text)
        elif isinstance(node, AutoLink):
            parts.append(node.url)
        elif isinstance(node, (Emphasis, Strong, Strikethrough, Link)):
            parts.append(_plain_text(node.content))
    return " ".join("".join(parts).split())


__all__ = ["DocumentWalker"]
