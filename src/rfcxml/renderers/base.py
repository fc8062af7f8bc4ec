#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/rfcxml/renderers/base.py
"""Base classes for callback renderers.

This module defines the callback interface that the document walker drives.
The walker visits the AST once, in document order, and calls exactly one
renderer method per structural event. Renderers write into an OutputBuffer
supplied with each call and keep whatever state they need on the instance,
so one renderer instance renders exactly one document.

Nested content that decides whether a block is emitted at all (headings,
paragraphs, lists) is handed over as a ContentProducer: a callable that
renders into the buffer it is given and reports whether it produced
anything.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum, IntEnum, IntFlag
from pathlib import Path
from typing import IO, TYPE_CHECKING, Mapping, Protocol, Union

from rfcxml.exceptions import InvalidOptionsError
from rfcxml.options.base import BaseRendererOptions
from rfcxml.utils.io_utils import write_content

if TYPE_CHECKING:
    from rfcxml.ast.nodes import Document, TitleBlock


class OutputBuffer:
    """Append-only text sink used by renderers.

    Examples
    --------
        >>> out = OutputBuffer()
        >>> out.write("<t>")
        >>> len(out)
        3
        >>> out.getvalue()
        '<t>'

    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._length = 0

    def write(self, text: str) -> None:
        """Append text to the buffer."""
        if text:
            self._parts.append(text)
            self._length += len(text)

    def extend(self, other: OutputBuffer) -> None:
        """Append everything written to another buffer."""
        self._parts.extend(other._parts)
        self._length += other._length

    def getvalue(self) -> str:
        """Return the buffer contents as one string."""
        return "".join(self._parts)

    def __len__(self) -> int:
        return self._length

    def __repr__(self) -> str:
        return f"OutputBuffer(length={self._length})"


class ContentProducer(Protocol):
    """Lazily rendered nested content.

    Called by the renderer with the buffer to render into; returns whether
    any content was produced.
    """

    def __call__(self, out: OutputBuffer) -> bool: ...


class ListFlags(IntFlag):
    """Flags describing the list context of a list, item or paragraph."""

    NONE = 0
    ORDERED = 1
    DEFINITION = 2
    TERM = 4
    INSIDE_LIST = 8
    BEGINNING_OF_LIST = 16


class TableAlignment(Enum):
    """Column alignment of a table header cell."""

    NONE = "none"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class LinkKind(Enum):
    """Kind of an autolink."""

    NORMAL = "normal"
    EMAIL = "email"


class MatterPhase(IntEnum):
    """Document matter, ordered as it appears in a document."""

    FRONT = 0
    MAIN = 1
    BACK = 2


class CitationKind(Enum):
    """Reference group a citation belongs to."""

    INFORMATIVE = "informative"
    NORMATIVE = "normative"


AttributeSet = Mapping[str, str]


class BaseRenderer(ABC):
    """Abstract base class for callback renderers.

    Subclasses implement every callback. The walker calls them in document
    order; ``render`` and ``render_to_string`` run the walker over a
    Document with this renderer.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------

    def render_to_string(self, doc: Document) -> str:
        """Render a document to a string.

        Parameters
        ----------
        doc : Document
            AST Document node to render

        Returns
        -------
        str
            Rendered document

        """
        from rfcxml.ast.walker import DocumentWalker

        return DocumentWalker(self).walk(doc)

    def render(self, doc: Document, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render a document and write it to a file or stream.

        Parameters
        ----------
        doc : Document
            AST Document node to render
        output : str, Path, IO[bytes] or IO[str]
            Output destination

        Raises
        ------
        OutputWriteError
            If the output file cannot be written

        """
        self.write_text_output(self.render_to_string(doc), output)

    @staticmethod
    def write_text_output(text: str, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Write text output to a file path or IO stream."""
        write_content(text, output)

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                renderer_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    # ------------------------------------------------------------------
    # Block attributes
    # ------------------------------------------------------------------

    @abstractmethod
    def set_attributes(self, *attributes: AttributeSet) -> None:
        """Queue attributes for the next block-level element."""

    @abstractmethod
    def drain_attributes(self) -> list[AttributeSet]:
        """Take and clear every queued attribute set."""

    # ------------------------------------------------------------------
    # Document level
    # ------------------------------------------------------------------

    @abstractmethod
    def document_header(self, out: OutputBuffer) -> None:
        """Start the document."""

    @abstractmethod
    def document_footer(self, out: OutputBuffer) -> None:
        """Finish the document, closing everything still open."""

    @abstractmethod
    def title_block(self, out: OutputBuffer, block: TitleBlock) -> None:
        """Render the title metadata."""

    @abstractmethod
    def document_matter(self, out: OutputBuffer, matter: MatterPhase) -> None:
        """Switch to front, main or back matter."""

    @abstractmethod
    def references(self, out: OutputBuffer) -> None:
        """Emit the reference sections for every recorded citation."""

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    @abstractmethod
    def heading(self, out: OutputBuffer, content: ContentProducer, level: int, anchor: str) -> None:
        """Open a section at the given outline level."""

    @abstractmethod
    def paragraph(self, out: OutputBuffer, content: ContentProducer, flags: ListFlags = ListFlags.NONE) -> None:
        """Render a paragraph; nothing is emitted when content is empty."""

    @abstractmethod
    def list_block(
        self, out: OutputBuffer, content: ContentProducer, flags: ListFlags = ListFlags.NONE, start: int = 1
    ) -> None:
        """Render a list; nothing is emitted when content is empty."""

    @abstractmethod
    def list_item(self, out: OutputBuffer, text: str, flags: ListFlags = ListFlags.NONE) -> None:
        """Render one list item, definition term or definition."""

    @abstractmethod
    def block_code(self, out: OutputBuffer, text: str, language: str = "", caption: str = "") -> None:
        """Render a code block."""

    @abstractmethod
    def block_quote(self, out: OutputBuffer, text: str) -> None:
        """Render a block quote around already rendered content."""

    @abstractmethod
    def abstract(self, out: OutputBuffer, text: str) -> None:
        """Render the document abstract."""

    @abstractmethod
    def aside(self, out: OutputBuffer, text: str) -> None:
        """Render an aside."""

    @abstractmethod
    def note(self, out: OutputBuffer, text: str) -> None:
        """Render a note."""

    @abstractmethod
    def comment(self, out: OutputBuffer, payload: str) -> None:
        """Render an editorial comment."""

    @abstractmethod
    def block_html(self, out: OutputBuffer, text: str) -> None:
        """Render a raw HTML block."""

    @abstractmethod
    def hrule(self, out: OutputBuffer) -> None:
        """Render a horizontal rule."""

    @abstractmethod
    def table(self, out: OutputBuffer, header: str, body: str, caption: str = "") -> None:
        """Render a table from its rendered header and body rows."""

    @abstractmethod
    def table_row(self, out: OutputBuffer, text: str) -> None:
        """Render a table row from its rendered cells."""

    @abstractmethod
    def table_header_cell(self, out: OutputBuffer, text: str, align: TableAlignment) -> None:
        """Render a header cell."""

    @abstractmethod
    def table_cell(self, out: OutputBuffer, text: str, align: TableAlignment) -> None:
        """Render a body cell."""

    # ------------------------------------------------------------------
    # Inline
    # ------------------------------------------------------------------

    @abstractmethod
    def citation(
        self,
        out: OutputBuffer,
        target: str,
        title: str = "",
        kind: CitationKind = CitationKind.INFORMATIVE,
        filename: str | None = None,
    ) -> None:
        """Render a citation and record it for the reference sections."""

    @abstractmethod
    def index(self, out: OutputBuffer, primary: str, secondary: str = "") -> None:
        """Render an index entry."""

    @abstractmethod
    def auto_link(self, out: OutputBuffer, link: str, kind: LinkKind = LinkKind.NORMAL) -> None:
        """Render a bare URL or email address."""

    @abstractmethod
    def code_span(self, out: OutputBuffer, text: str) -> None:
        """Render inline code."""

    @abstractmethod
    def emphasis(self, out: OutputBuffer, text: str) -> None:
        """Render emphasized content."""

    @abstractmethod
    def double_emphasis(self, out: OutputBuffer, text: str) -> None:
        """Render strongly emphasized content."""

    @abstractmethod
    def triple_emphasis(self, out: OutputBuffer, text: str) -> None:
        """Render content that is both strong and emphasized."""

    @abstractmethod
    def strikethrough(self, out: OutputBuffer, text: str) -> None:
        """Render struck-through content."""

    @abstractmethod
    def image(self, out: OutputBuffer, link: str, title: str = "", alt: str = "") -> None:
        """Render an image."""

    @abstractmethod
    def line_break(self, out: OutputBuffer) -> None:
        """Render a hard line break."""

    @abstractmethod
    def link(self, out: OutputBuffer, link: str, title: str = "", content: str = "") -> None:
        """Render a link around already rendered content."""

    @abstractmethod
    def raw_html_tag(self, out: OutputBuffer, tag: str) -> None:
        """Render inline raw HTML."""

    @abstractmethod
    def entity(self, out: OutputBuffer, entity: str) -> None:
        """Render a character entity reference."""

    @abstractmethod
    def normal_text(self, out: OutputBuffer, text: str) -> None:
        """Render plain text."""


__all__ = [
    "AttributeSet",
    "BaseRenderer",
    "CitationKind",
    "ContentProducer",
    "LinkKind",
    "ListFlags",
    "MatterPhase",
    "OutputBuffer",
    "TableAlignment",
]
