"""Pytest configuration and shared fixtures for the rfcxml test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import logging
from typing import Callable, Generator

import pytest

from rfcxml.ast import (
    Abstract,
    Citation,
    Document,
    DocumentMatter,
    Heading,
    Paragraph,
    Text,
    TitleBlock,
)
from rfcxml.options import Xml2RfcRendererOptions
from rfcxml.renderers.base import OutputBuffer
from rfcxml.renderers.xml2rfc import Xml2RfcRenderer

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=50)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    import os

    settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo CLI logging setup so caplog sees package records in every test."""
    yield
    package_logger = logging.getLogger("rfcxml")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


def make_producer(text: str) -> Callable[[OutputBuffer], bool]:
    """Build a content producer that writes fixed text."""

    def produce(out: OutputBuffer) -> bool:
        out.write(text)
        return bool(text)

    return produce


@pytest.fixture
def producer() -> Callable[[str], Callable[[OutputBuffer], bool]]:
    """Provide a factory for fixed-text content producers."""
    return make_producer


@pytest.fixture
def standalone_renderer() -> Xml2RfcRenderer:
    """Provide a renderer producing complete documents."""
    return Xml2RfcRenderer(Xml2RfcRendererOptions())


@pytest.fixture
def fragment_renderer() -> Xml2RfcRenderer:
    """Provide a renderer producing embeddable fragments."""
    return Xml2RfcRenderer(Xml2RfcRendererOptions(standalone=False))


@pytest.fixture
def sample_title_block() -> TitleBlock:
    """Provide title metadata for a small Internet-Draft."""
    return TitleBlock.from_dict(
        {
            "Title": "Example Protocol",
            "abbrev": "Example",
            "docName": "draft-example-protocol-00",
            "ipr": "trust200902",
            "category": "std",
            "date": "2024-03-05",
            "area": "Internet",
            "workgroup": "Example Working Group",
            "keyword": ["example", "protocol"],
            "author": [
                {
                    "initials": "J.",
                    "surname": "Doe",
                    "fullname": "Jane Doe",
                    "organization": "Example Org",
                    "address": {"email": "jane@example.org"},
                }
            ],
        }
    )


@pytest.fixture
def sample_document(sample_title_block: TitleBlock) -> Document:
    """Provide a document using front, main and back matter with citations.

    Returns
    -------
    Document
        Title block, abstract, two sections in main matter and an appendix.

    """
    return Document(
        children=[
            sample_title_block,
            Abstract(children=[Paragraph(content=[Text(content="This document describes an example.")])]),
            DocumentMatter(matter="main"),
            Heading(level=1, content=[Text(content="Introduction")]),
            Paragraph(
                content=[
                    Text(content="Key words are defined in "),
                    Citation(target="RFC2119", kind="normative"),
                    Text(content="."),
                ]
            ),
            Heading(level=2, content=[Text(content="Terminology")]),
            Paragraph(content=[Text(content="See "), Citation(target="I-D.ietf-foo-bar")]),
            Heading(level=1, content=[Text(content="Security Considerations")]),
            Paragraph(content=[Text(content="None.")]),
            DocumentMatter(matter="back"),
            Heading(level=1, content=[Text(content="Acknowledgements")]),
            Paragraph(content=[Text(content="Thanks.")]),
        ]
    )
