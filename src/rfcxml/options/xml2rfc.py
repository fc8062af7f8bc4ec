#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for xml2rfc v2 rendering.

This module defines the options controlling document-level output of the
xml2rfc renderer and the policies applied to collected citations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import get_args

from rfcxml.constants import (
    DEFAULT_CITATION_CONFLICT,
    DEFAULT_CITATION_ORDER,
    DEFAULT_REFERENCE_PREFIX,
    DEFAULT_STANDALONE,
    DEFAULT_VALIDATE_OUTPUT,
    CitationConflictPolicy,
    CitationOrder,
)
from rfcxml.options.base import BaseRendererOptions


# src/rfcxml/options/xml2rfc.py
@dataclass(frozen=True)
class Xml2RfcRendererOptions(BaseRendererOptions):
    """Configuration options for rendering AST to xml2rfc v2 XML.

    Parameters
    ----------
    standalone : bool, default True
        Generate a complete document: XML prolog, ``<rfc>`` root, title
        metadata, front/middle/back containers and reference sections.
        If False, only inner block content is produced so the result can be
        embedded in a larger document.
    citation_order : {"insertion", "sorted"}, default "insertion"
        Order of entries inside each reference section:
        - "insertion": order in which targets were first cited
        - "sorted": sorted by target identifier
    citation_conflict : {"last", "first"}, default "last"
        Which kind wins when the same target is cited both informatively and
        normatively:
        - "last": the most recent citation decides
        - "first": the first citation decides
    reference_prefix : str, default "reference."
        Prefix for reference filenames derived from target identifiers.
    validate_output : bool, default False
        Parse standalone output with defusedxml after rendering and raise
        RenderingError when it is not well-formed.

    """

    standalone: bool = field(
        default=DEFAULT_STANDALONE,
        metadata={
            "help": "Emit a complete xml2rfc document (use --fragment for embeddable content)",
            "importance": "core",
        },
    )
    citation_order: CitationOrder = field(
        default=DEFAULT_CITATION_ORDER,
        metadata={
            "help": "Order of references inside each reference section",
            "choices": ["insertion", "sorted"],
            "importance": "core",
        },
    )
    citation_conflict: CitationConflictPolicy = field(
        default=DEFAULT_CITATION_CONFLICT,
        metadata={
            "help": "Which kind wins when a target is cited both informatively and normatively",
            "choices": ["last", "first"],
            "importance": "advanced",
        },
    )
    reference_prefix: str = field(
        default=DEFAULT_REFERENCE_PREFIX,
        metadata={
            "help": "Prefix for reference filenames derived from citation targets",
            "importance": "advanced",
        },
    )
    validate_output: bool = field(
        default=DEFAULT_VALIDATE_OUTPUT,
        metadata={
            "help": "Check that standalone output is well-formed XML",
            "importance": "advanced",
        },
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If a policy field holds an unknown value.

        """
        super().__post_init__()
        if self.citation_order not in get_args(CitationOrder):
            raise ValueError(f"citation_order must be one of {get_args(CitationOrder)}, got {self.citation_order!r}")
        if self.citation_conflict not in get_args(CitationConflictPolicy):
            raise ValueError(
                f"citation_conflict must be one of {get_args(CitationConflictPolicy)}, "
                f"got {self.citation_conflict!r}"
            )
