#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for rfcxml renderers.

Each renderer has its own frozen options dataclass. Options are immutable;
use ``create_updated`` to derive a modified copy.
"""

from __future__ import annotations

from rfcxml.options.base import BaseRendererOptions, CloneFrozenMixin
from rfcxml.options.xml2rfc import Xml2RfcRendererOptions

__all__ = [
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "Xml2RfcRendererOptions",
]
