"""rfcxml - render RFC and Internet-Draft documents to xml2rfc v2 XML.

rfcxml is the rendering backend of a markup-to-RFC pipeline. A parser
produces a document AST; the document walker visits it in order and drives
a callback renderer that emits xml2rfc version 2 XML (RFC 2629) with
properly nested sections, front/middle/back matter and grouped reference
sections.

Key Features
------------
- Section nesting derived from a flat sequence of headings
- Front, main and back matter entered strictly in order
- Block attributes (anchors, styles) attached to the next block
- Citations collected into informative and normative references
- Standalone documents or embeddable fragments

Examples
--------
Render a serialized AST:

    >>> from rfcxml import render
    >>> xml = render("draft.json")

Render an AST built in Python:

    >>> from rfcxml.ast import Document, Heading, Paragraph, Text
    >>> doc = Document(children=[
    ...     Heading(level=1, content=[Text(content="Introduction")]),
    ...     Paragraph(content=[Text(content="Hello world")]),
    ... ])
    >>> xml = render(doc, standalone=False)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

__version__ = "0.1.0"

from rfcxml.api import load_document, render
from rfcxml.exceptions import (
    InvalidOptionsError,
    OutputWriteError,
    ParsingError,
    RenderingError,
    RfcXmlError,
    ValidationError,
)
from rfcxml.options import Xml2RfcRendererOptions
from rfcxml.renderers import Xml2RfcRenderer

__all__ = [
    "__version__",
    "render",
    "load_document",
    "Xml2RfcRenderer",
    "Xml2RfcRendererOptions",
    "RfcXmlError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "RenderingError",
    "OutputWriteError",
]
