#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/rfcxml/ast/serialization.py
"""JSON serialization and deserialization for AST nodes.

The walker consumes documents that an upstream parser produced; this module
is the exchange format between the two. Every node is a JSON object with a
``node_type`` tag naming its class and one member per dataclass field.

Examples
--------
Serialize an AST to JSON:

    >>> from rfcxml.ast import Document, Heading, Text
    >>> doc = Document(children=[Heading(level=1, content=[Text(content="Introduction")])])
    >>> json_str = ast_to_json(doc, indent=2)

Load it back:

    >>> doc = json_to_ast(json_str)
    >>> doc.children[0].level
    1

"""

from __future__ import annotations

import dataclasses
import datetime
import json
import logging
from typing import Any

from rfcxml.ast.nodes import (
    Abstract,
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
from rfcxml.exceptions import ParsingError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_NODE_CLASSES: dict[str, type[Node]] = {
    cls.__name__: cls
    for cls in (
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
}


def _serialize_value(value: Any) -> Any:
    if isinstance(value, Node):
        return ast_to_dict(value)
    if isinstance(value, Author):
        return dataclasses.asdict(value)
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    return value


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert an AST node to a JSON-compatible dictionary.

    Parameters
    ----------
    node : Node
        The node to convert

    Returns
    -------
    dict
        Dictionary with a ``node_type`` entry and one entry per field

    """
    result: dict[str, Any] = {"node_type": type(node).__name__}
    for f in dataclasses.fields(node):  # type: ignore[arg-type]
        value = getattr(node, f.name)
        if f.name == "metadata" and not value:
            continue
        result[f.name] = _serialize_value(value)
    return result


def _deserialize_children(items: Any, owner: str, field_name: str) -> list[Node]:
    if not isinstance(items, list):
        raise ParsingError(f"{owner}.{field_name} must be a list, got {type(items).__name__}", parsing_stage="ast")
    return [dict_to_ast(item) for item in items]


def _deserialize_definition_items(items: Any) -> list[tuple[DefinitionTerm, list[DefinitionDescription]]]:
    result: list[tuple[DefinitionTerm, list[DefinitionDescription]]] = []
    for entry in items or []:
        if not isinstance(entry, (list, tuple)) or len(entry) != 2:
            raise ParsingError("DefinitionList items must be [term, [descriptions]] pairs", parsing_stage="ast")
        term = dict_to_ast(entry[0])
        descriptions = [dict_to_ast(d) for d in entry[1]]
        if not isinstance(term, DefinitionTerm) or not all(
            isinstance(d, DefinitionDescription) for d in descriptions
        ):
            raise ParsingError(
                "DefinitionList items must hold DefinitionTerm/DefinitionDescription nodes", parsing_stage="ast"
            )
        result.append((term, descriptions))  # type: ignore[arg-type]
    return result


def dict_to_ast(data: dict[str, Any]) -> Node:
    """Convert a dictionary representation back to an AST node.

    Parameters
    ----------
    data : dict
        Dictionary representation of a node

    Returns
    -------
    Node
        Reconstructed AST node

    Raises
    ------
    ParsingError
        If the node type is unknown or a field is missing or invalid

    Examples
    --------
    >>> node = dict_to_ast({"node_type": "Text", "content": "Hello"})
    >>> node.content
    'Hello'

    """
    if not isinstance(data, dict):
        raise ParsingError(f"Expected a node object, got {type(data).__name__}", parsing_stage="ast")

    node_type = data.get("node_type")
    if not node_type:
        raise ParsingError("Dictionary must contain 'node_type' field", parsing_stage="ast")

    cls = _NODE_CLASSES.get(node_type)
    if cls is None:
        raise ParsingError(f"Unknown node type: {node_type}", parsing_stage="ast")

    known = {f.name for f in dataclasses.fields(cls)}  # type: ignore[arg-type]
    unknown = set(data) - known - {"node_type"}
    if unknown:
        logger.debug("Ignoring unknown fields on %s: %s", node_type, ", ".join(sorted(unknown)))

    kwargs: dict[str, Any] = {}
    for name in known & set(data):
        value = data[name]
        if name in ("children", "content", "items", "rows", "cells") and isinstance(value, list):
            if cls is DefinitionList:
                value = _deserialize_definition_items(value)
            elif value and isinstance(value[0], dict) and "node_type" in value[0]:
                value = _deserialize_children(value, node_type, name)
        elif name == "header" and value is not None:
            value = dict_to_ast(value)
        elif name == "authors":
            value = [Author.from_dict(a) for a in value or []]
        kwargs[name] = value

    if cls is TitleBlock:
        try:
            return TitleBlock.from_dict(kwargs)
        except ValueError as e:
            raise ParsingError(str(e), parsing_stage="ast", original_error=e) from e

    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise ParsingError(f"Invalid {node_type} node: {e}", parsing_stage="ast", original_error=e) from e


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize an AST node to a JSON string with a schema version.

    Parameters
    ----------
    node : Node
        The AST node to serialize
    indent : int or None, default = None
        Number of spaces for indentation (None for compact format)

    Returns
    -------
    str
        JSON text: ``{"schema_version": 1, "node_type": ..., ...}``

    """
    return json.dumps({"schema_version": SCHEMA_VERSION, **ast_to_dict(node)}, indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str) -> Node:
    """Deserialize a JSON string to an AST node.

    A missing ``schema_version`` is read as version 1.

    Parameters
    ----------
    json_str : str
        JSON string representation

    Returns
    -------
    Node
        Reconstructed AST node

    Raises
    ------
    ParsingError
        If the JSON is malformed, has an unsupported schema version or
        describes an invalid tree

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ParsingError(f"Invalid JSON: {e}", parsing_stage="json", original_error=e) from e

    if not isinstance(data, dict):
        raise ParsingError("JSON document must be an object", parsing_stage="json")

    schema_version = data.pop("schema_version", SCHEMA_VERSION)
    if schema_version != SCHEMA_VERSION:
        raise ParsingError(
            f"Unsupported schema version: {schema_version}. "
            f"This version of rfcxml supports schema version {SCHEMA_VERSION} only.",
            parsing_stage="json",
        )

    return dict_to_ast(data)


__all__ = [
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
]
