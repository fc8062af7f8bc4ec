#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/rfcxml/renderers/__init__.py
"""Callback renderers for RFC documents.

This package provides the callback interface driven by the document walker
and its xml2rfc v2 implementation:

- BaseRenderer: Abstract callback interface
- Xml2RfcRenderer: Render to xml2rfc version 2 XML (RFC 2629)

Examples
--------
Render a fragment for embedding in a larger document:

    >>> from rfcxml.ast import Document, Heading, Text
    >>> from rfcxml.renderers import Xml2RfcRenderer
    >>> from rfcxml.options import Xml2RfcRendererOptions
    >>> doc = Document(children=[
    ...     Heading(level=1, content=[Text(content="Title")])
    ... ])
    >>> renderer = Xml2RfcRenderer(Xml2RfcRendererOptions(standalone=False))
    >>> xml = renderer.render_to_string(doc)

"""

from rfcxml.renderers.base import BaseRenderer, OutputBuffer
from rfcxml.renderers.state import RenderState
from rfcxml.renderers.xml2rfc import Xml2RfcRenderer

__all__ = [
    "BaseRenderer",
    "OutputBuffer",
    "RenderState",
    "Xml2RfcRenderer",
]
