#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/rfcxml/ast/nodes.py
"""AST node classes for document representation.

This module defines the node hierarchy handed to the document walker. The
tree is what a lightweight-markup parser produces for an Internet-Draft or
RFC source: ordinary block and inline elements plus the RFC-specific ones
(title metadata, document matter markers, abstract, notes, asides,
citations and index entries).

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.

Block-level nodes:
    - Document, TitleBlock, DocumentMatter, Heading, Paragraph
    - CodeBlock, BlockQuote, Abstract, Aside, Note, Comment
    - List, ListItem, DefinitionList, DefinitionTerm, DefinitionDescription
    - Table, TableRow, TableCell, ThematicBreak, HTMLBlock

Inline nodes:
    - Text, Entity, Emphasis, Strong, Strikethrough, Code
    - Link, AutoLink, Image, LineBreak, HTMLInline
    - Citation, IndexEntry

Block attributes (anchor, style hints) are carried in
``metadata["attributes"]`` as a mapping or a list of mappings; the walker
queues them for the renderer just before the block is rendered.

"""

from __future__ import annotations

import datetime
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

Alignment = Literal["left", "center", "right"]
MatterKind = Literal["front", "main", "back"]
CitationKindName = Literal["informative", "normative"]


class Node(ABC):
    """Base class for all AST nodes.

    Parameters
    ----------
    metadata : dict, default = empty dict
        Arbitrary metadata associated with this node

    """

    metadata: dict[str, Any]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Title metadata
# ============================================================================


@dataclass
class Author:
    """Author entry of the title block.

    Parameters
    ----------
    initials : str
        Initials, e.g. ``"R."``
    surname : str
        Family name
    fullname : str
        Full name as printed in the document header
    organization : str
        Affiliation
    email : str
        Contact address

    """

    initials: str = ""
    surname: str = ""
    fullname: str = ""
    organization: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Author:
        """Build an author from a mapping with case-insensitive keys.

        The email may be given directly or nested as ``address.email``.
        """
        values = {str(k).lower(): v for k, v in data.items()}
        email = values.get("email", "")
        address = values.get("address")
        if not email and isinstance(address, Mapping):
            email = {str(k).lower(): v for k, v in address.items()}.get("email", "")
        return cls(
            initials=str(values.get("initials", "")),
            surname=str(values.get("surname", "")),
            fullname=str(values.get("fullname", "")),
            organization=str(values.get("organization", "")),
            email=str(email),
        )


def _coerce_date(value: Any) -> Optional[datetime.date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value)[:10])
    except ValueError as e:
        raise ValueError(f"Invalid title block date: {value!r}") from e


@dataclass
class TitleBlock(Node):
    """Document title metadata.

    Rendered once, at the start of the front matter. The renderer keeps the
    first title block it sees and ignores later ones.

    Parameters
    ----------
    title : str
        Document title
    abbrev : str, default = ""
        Abbreviated title for running headers
    doc_name : str, default = ""
        Draft name, e.g. ``"draft-ietf-foo-bar-00"``
    ipr : str, default = ""
        IPR statement identifier, e.g. ``"trust200902"``
    category : str, default = ""
        Document category (``std``, ``info``, ``bcp``, ...)
    authors : list of Author, default = empty list
        Document authors
    date : datetime.date or None, default = None
        Publication date
    area : str, default = ""
        IETF area
    workgroup : str, default = ""
        Working group name
    keywords : list of str, default = empty list
        Keywords for the document header

    """

    title: str = ""
    abbrev: str = ""
    doc_name: str = ""
    ipr: str = ""
    category: str = ""
    authors: list[Author] = field(default_factory=list)
    date: Optional[datetime.date] = None
    area: str = ""
    workgroup: str = ""
    keywords: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TitleBlock:
        """Build a title block from a mapping.

        Keys are matched case-insensitively, so both the TOML spelling
        (``Title``, ``DocName``, ``[[author]]``) and snake_case spelling
        (``doc_name``, ``authors``) are accepted.

        Parameters
        ----------
        data : Mapping
            Title metadata

        Returns
        -------
        TitleBlock
            The parsed title block

        Raises
        ------
        ValueError
            If the date cannot be interpreted

        """
        values = {str(k).lower().replace("_", ""): v for k, v in data.items()}
        raw_authors = values.get("author", values.get("authors", [])) or []
        if isinstance(raw_authors, Mapping):
            raw_authors = [raw_authors]
        raw_keywords = values.get("keyword", values.get("keywords", [])) or []
        if isinstance(raw_keywords, str):
            raw_keywords = [raw_keywords]
        return cls(
            title=str(values.get("title", "")),
            abbrev=str(values.get("abbrev", "")),
            doc_name=str(values.get("docname", "")),
            ipr=str(values.get("ipr", "")),
            category=str(values.get("category", "")),
            authors=[a if isinstance(a, Author) else Author.from_dict(a) for a in raw_authors],
            date=_coerce_date(values.get("date")),
            area=str(values.get("area", "")),
            workgroup=str(values.get("workgroup", "")),
            keywords=[str(k) for k in raw_keywords],
            metadata=dict(values.get("metadata") or {}),
        )

    @classmethod
    def from_toml(cls, text: str) -> TitleBlock:
        """Parse a TOML title block.

        Lines starting with ``%`` (the title block marker used in the markup
        source) have the marker stripped before parsing.

        Raises
        ------
        ValueError
            If the TOML is invalid (``tomllib.TOMLDecodeError`` is a ValueError)

        """
        lines = [line[1:].lstrip() if line.startswith("%") else line for line in text.splitlines()]
        return cls.from_dict(tomllib.loads("\n".join(lines)))

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this title block."""
        return visitor.visit_title_block(self)


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing all other nodes.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata. A ``"title_block"`` entry (mapping or
        TitleBlock) is used when no TitleBlock child is present.

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_document method

        Returns
        -------
        Any
            Result from visitor.visit_document(self)

        """
        return visitor.visit_document(self)


@dataclass
class DocumentMatter(Node):
    """Marker switching the document to front, main or back matter.

    Parameters
    ----------
    matter : {"front", "main", "back"}
        The matter that starts at this point

    """

    matter: MatterKind
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the matter name."""
        if self.matter not in ("front", "main", "back"):
            raise ValueError(f"Document matter must be 'front', 'main' or 'back', got {self.matter!r}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this matter marker."""
        return visitor.visit_document_matter(self)


@dataclass
class Heading(Node):
    """Heading node.

    Parameters
    ----------
    level : int
        Nesting depth in the document outline (1 is top level)
    content : list of Node, default = empty list
        Inline nodes representing heading text
    identifier : str or None, default = None
        Explicit anchor; when None the walker derives one from the text

    """

    level: int
    content: list[Node] = field(default_factory=list)
    identifier: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate heading level is positive."""
        if self.level < 1:
            raise ValueError(f"Heading level must be >= 1, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this heading.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_heading method

        Returns
        -------
        Any
            Result from visitor.visit_heading(self)

        """
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph."""
        return visitor.visit_paragraph(self)


@dataclass
class CodeBlock(Node):
    """Code block node rendered as artwork.

    Parameters
    ----------
    content : str
        Code content (not parsed as markup)
    language : str or None, default = None
        Language of the code, emitted as the artwork type
    caption : str or None, default = None
        Caption, emitted as the figure title

    """

    content: str
    language: Optional[str] = None
    caption: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code block."""
        return visitor.visit_code_block(self)


@dataclass
class BlockQuote(Node):
    """Block quote node containing other block elements."""

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block quote."""
        return visitor.visit_block_quote(self)


@dataclass
class Abstract(Node):
    """Document abstract, placed in the front matter."""

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this abstract."""
        return visitor.visit_abstract(self)


@dataclass
class Aside(Node):
    """Aside block (side remark) containing other block elements."""

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this aside."""
        return visitor.visit_aside(self)


@dataclass
class Note(Node):
    """Note block containing other block elements."""

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this note."""
        return visitor.visit_note(self)


@dataclass
class Comment(Node):
    """Editorial comment rendered as an annotation.

    Parameters
    ----------
    content : str
        Comment payload. A leading ``"name:"`` within the first 20
        characters names the source of the comment.

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this comment."""
        return visitor.visit_comment(self)


@dataclass
class HTMLBlock(Node):
    """Raw HTML block. Has no xml2rfc counterpart and renders to nothing."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this HTML block."""
        return visitor.visit_html_block(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break node (horizontal rule)."""

    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this thematic break."""
        return visitor.visit_thematic_break(self)


@dataclass
class List(Node):
    """List node (ordered or unordered).

    Parameters
    ----------
    ordered : bool
        True for ordered lists, False for unordered
    items : list of ListItem, default = empty list
        List items
    start : int, default = 1
        Starting number for ordered lists

    """

    ordered: bool
    items: list[ListItem] = field(default_factory=list)
    start: int = 1
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """List item node containing paragraphs or nested lists."""

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list item."""
        return visitor.visit_list_item(self)


@dataclass
class DefinitionTerm(Node):
    """Term of a definition list, rendered as a hanging label."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this term."""
        return visitor.visit_definition_term(self)


@dataclass
class DefinitionDescription(Node):
    """Description of a definition list term."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this description."""
        return visitor.visit_definition_description(self)


@dataclass
class DefinitionList(Node):
    """Definition list node.

    Parameters
    ----------
    items : list of (DefinitionTerm, list of DefinitionDescription)
        Terms with their descriptions, in document order

    """

    items: list[tuple[DefinitionTerm, list[DefinitionDescription]]] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this definition list."""
        return visitor.visit_definition_list(self)


@dataclass
class TableCell(Node):
    """Table cell node with optional alignment."""

    content: list[Node] = field(default_factory=list)
    alignment: Alignment | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table cell."""
        return visitor.visit_table_cell(self)


@dataclass
class TableRow(Node):
    """Table row node containing cells."""

    cells: list[TableCell] = field(default_factory=list)
    is_header: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table row."""
        return visitor.visit_table_row(self)


@dataclass
class Table(Node):
    """Table node with optional header and alignment.

    Parameters
    ----------
    rows : list of TableRow, default = empty list
        Table rows (excluding header)
    header : TableRow or None, default = None
        Optional header row
    alignments : list, default = empty list
        Column alignments ('left', 'center', 'right', or None)
    caption : str or None, default = None
        Optional table caption

    """

    rows: list[TableRow] = field(default_factory=list)
    header: Optional[TableRow] = None
    alignments: list[Alignment | None] = field(default_factory=list)
    caption: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table."""
        return visitor.visit_table(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text node."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text."""
        return visitor.visit_text(self)


@dataclass
class Entity(Node):
    """Character entity reference, copied to the output unchanged.

    Parameters
    ----------
    content : str
        Entity including delimiters, e.g. ``"&nbsp;"`` or ``"&#x2014;"``

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this entity."""
        return visitor.visit_entity(self)


@dataclass
class Emphasis(Node):
    """Emphasis node."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this emphasis."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Node):
    """Strong emphasis node."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strong emphasis."""
        return visitor.visit_strong(self)


@dataclass
class Strikethrough(Node):
    """Strikethrough node; xml2rfc v2 has no markup for it."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strikethrough."""
        return visitor.visit_strikethrough(self)


@dataclass
class Code(Node):
    """Inline code span."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code span."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Hyperlink node.

    Parameters
    ----------
    url : str
        Link target. ``#anchor`` targets are cross references.
    content : list of Node, default = empty list
        Link text
    title : str or None, default = None
        Link title

    """

    url: str
    content: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link."""
        return visitor.visit_link(self)


@dataclass
class AutoLink(Node):
    """Bare URL or email address found in the text."""

    url: str
    email: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this autolink."""
        return visitor.visit_auto_link(self)


@dataclass
class Image(Node):
    """Image node."""

    url: str = ""
    alt_text: str = ""
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this image."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Hard line break."""

    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this line break."""
        return visitor.visit_line_break(self)


@dataclass
class HTMLInline(Node):
    """Inline raw HTML; renders to nothing."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline HTML."""
        return visitor.visit_html_inline(self)


@dataclass
class Citation(Node):
    """Citation of an external document.

    Parameters
    ----------
    target : str
        Target identifier, e.g. ``"RFC2119"`` or ``"I-D.ietf-foo-bar"``
    kind : {"informative", "normative"}, default = "informative"
        Reference group the cited document belongs to
    title : str or None, default = None
        Optional display title
    filename : str or None, default = None
        Reference file to include; derived from the target when None

    """

    target: str
    kind: CitationKindName = "informative"
    title: Optional[str] = None
    filename: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the citation kind."""
        if self.kind not in ("informative", "normative"):
            raise ValueError(f"Citation kind must be 'informative' or 'normative', got {self.kind!r}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this citation."""
        return visitor.visit_citation(self)


@dataclass
class IndexEntry(Node):
    """Index entry with an optional sub-item."""

    primary: str
    secondary: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this index entry."""
        return visitor.visit_index_entry(self)
