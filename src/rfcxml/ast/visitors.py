#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/rfcxml/ast/visitors.py
"""Visitor pattern implementation for AST traversal.

This module provides the visitor base class used to traverse the document
tree. The document walker is the main visitor; tests and tools can
implement their own by subclassing NodeVisitor.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

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


class NodeVisitor(ABC):
    """Abstract base class for AST node visitors.

    Subclasses implement one visit_* method per node type. Every node's
    ``accept`` dispatches to the matching method.

    """

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node."""
        pass

    @abstractmethod
    def visit_title_block(self, node: TitleBlock) -> Any:
        """Visit a TitleBlock node."""
        pass

    @abstractmethod
    def visit_document_matter(self, node: DocumentMatter) -> Any:
        """Visit a DocumentMatter node."""
        pass

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""
        pass

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""
        pass

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock node."""
        pass

    @abstractmethod
    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote node."""
        pass

    @abstractmethod
    def visit_abstract(self, node: Abstract) -> Any:
        """Visit an Abstract node."""
        pass

    @abstractmethod
    def visit_aside(self, node: Aside) -> Any:
        """Visit an Aside node."""
        pass

    @abstractmethod
    def visit_note(self, node: Note) -> Any:
        """Visit a Note node."""
        pass

    @abstractmethod
    def visit_comment(self, node: Comment) -> Any:
        """Visit a Comment node."""
        pass

    @abstractmethod
    def visit_html_block(self, node: HTMLBlock) -> Any:
        """Visit a HTMLBlock node."""
        pass

    @abstractmethod
    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        """Visit a ThematicBreak node."""
        pass

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node."""
        pass

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""
        pass

    @abstractmethod
    def visit_definition_list(self, node: DefinitionList) -> Any:
        """Visit a DefinitionList node."""
        pass

    @abstractmethod
    def visit_definition_term(self, node: DefinitionTerm) -> Any:
        """Visit a DefinitionTerm node."""
        pass

    @abstractmethod
    def visit_definition_description(self, node: DefinitionDescription) -> Any:
        """Visit a DefinitionDescription node."""
        pass

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""
        pass

    @abstractmethod
    def visit_table_row(self, node: TableRow) -> Any:
        """Visit a TableRow node."""
        pass

    @abstractmethod
    def visit_table_cell(self, node: TableCell) -> Any:
        """Visit a TableCell node."""
        pass

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""
        pass

    @abstractmethod
    def visit_entity(self, node: Entity) -> Any:
        """Visit an Entity node."""
        pass

    @abstractmethod
    def visit_emphasis(self, node: Emphasis) -> Any:
        """Visit an Emphasis node."""
        pass

    @abstractmethod
    def visit_strong(self, node: Strong) -> Any:
        """Visit a Strong node."""
        pass

    @abstractmethod
    def visit_strikethrough(self, node: Strikethrough) -> Any:
        """Visit a Strikethrough node."""
        pass

    @abstractmethod
    def visit_code(self, node: Code) -> Any:
        """Visit a Code node."""
        pass

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link node."""
        pass

    @abstractmethod
    def visit_auto_link(self, node: AutoLink) -> Any:
        """Visit an AutoLink node."""
        pass

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        """Visit an Image node."""
        pass

    @abstractmethod
    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak node."""
        pass

    @abstractmethod
    def visit_html_inline(self, node: HTMLInline) -> Any:
        """Visit a HTMLInline node."""
        pass

    @abstractmethod
    def visit_citation(self, node: Citation) -> Any:
        """Visit a Citation node."""
        pass

    @abstractmethod
    def visit_index_entry(self, node: IndexEntry) -> Any:
        """Visit an IndexEntry node."""
        pass
