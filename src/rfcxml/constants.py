#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for rfcxml.

This module centralizes the hardcoded values used across the rfcxml library:
literal types for option fields, xml2rfc v2 vocabulary defaults, and the
configuration file names searched by the command-line interface.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Rendering Defaults - Default option values for the xml2rfc renderer
3. xml2rfc v2 Vocabulary - Fixed strings of the output format
4. Configuration - Config discovery and environment variables
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

CitationOrder = Literal["insertion", "sorted"]
CitationConflictPolicy = Literal["last", "first"]

# =============================================================================
# Rendering Defaults
# =============================================================================

DEFAULT_STANDALONE = True
DEFAULT_CITATION_ORDER: CitationOrder = "insertion"
DEFAULT_CITATION_CONFLICT: CitationConflictPolicy = "last"
DEFAULT_REFERENCE_PREFIX = "reference."
DEFAULT_VALIDATE_OUTPUT = False

# Number of leading characters scanned for the "source:" label of a comment
COMMENT_SOURCE_SCAN_WINDOW = 20

# =============================================================================
# xml2rfc v2 Vocabulary
# =============================================================================

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
RFC_DOCTYPE = "<!DOCTYPE rfc SYSTEM 'rfc2629.dtd' [ ]>\n"

INFORMATIVE_REFERENCES_TITLE = "Informative References"
NORMATIVE_REFERENCES_TITLE = "Normative References"

# =============================================================================
# Configuration
# =============================================================================

CONFIG_FILENAMES = [".rfcxml.toml", ".rfcxml.yaml", ".rfcxml.yml", ".rfcxml.json"]
PYPROJECT_TOOL_SECTION = "rfcxml"
CONFIG_ENV_VAR = "RFCXML_CONFIG"

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
EXIT_RENDERING_ERROR = 7
