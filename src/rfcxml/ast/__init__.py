#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/rfcxml/ast/__init__.py
"""Abstract Syntax Tree (AST) module for RFC document representation.

The AST is the input of the xml2rfc renderer. A markup parser (outside this
package) produces it, usually serialized as JSON; the document walker
visits it in document order and drives a callback renderer.

The module consists of several components:

- nodes: AST node classes representing document structure
- visitors: Visitor pattern implementation for AST traversal
- serialization: JSON serialization and deserialization of AST structures
- walker: The visitor that drives callback renderers

Examples
--------
Basic usage:

    >>> from rfcxml.ast import Document, Heading, Paragraph, Text
    >>> from rfcxml.renderers import Xml2RfcRenderer
    >>>
    >>> doc = Document(children=[
    ...     Heading(level=1, content=[Text(content="Introduction")]),
    ...     Paragraph(content=[Text(content="Hello world")])
    ... ])
    >>> xml = Xml2RfcRenderer().render_to_string(doc)

"""

from __future__ import annotations

from rfcxml.ast.nodes import (
    Abstract,
    Alignment,
    Aside,
    Author,
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
from rfcxml.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast
from rfcxml.ast.visitors import NodeVisitor

__all__ = [
    "Abstract",
    "Alignment",
    "Aside",
    "Author",
    "AutoLink",
    "BlockQuote",
    "Citation",
    "Code",
    "CodeBlock",
    "Comment",
    "DefinitionDescription",
    "DefinitionList",
    "DefinitionTerm",
    "Document",
    "DocumentMatter",
    "Emphasis",
    "Entity",
    "Heading",
    "HTMLBlock",
    "HTMLInline",
    "Image",
    "IndexEntry",
    "LineBreak",
    "Link",
    "List",
    "ListItem",
    "Node",
    "NodeVisitor",
    "Note",
    "Paragraph",
    "Strikethrough",
    "Strong",
    "Table",
    "TableCell",
    "TableRow",
    "Text",
    "ThematicBreak",
    "TitleBlock",
    "ast_to_dict",
    "ast_to_json",
    "dict_to_ast",
    "json_to_ast",
]
