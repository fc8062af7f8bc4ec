#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Command-line interface for rfcxml.

Renders a serialized document AST (JSON) to xml2rfc version 2 XML.

Examples
--------
Render to standard output::

    $ rfcxml draft.json

Write a file with references sorted by target::

    $ rfcxml draft.json -o draft.xml --citation-order sorted

Render an embeddable fragment::

    $ rfcxml section.json --fragment

Options may also come from ``.rfcxml.toml``, ``.rfcxml.yaml``,
``.rfcxml.json`` or ``[tool.rfcxml]`` in ``pyproject.toml``, or from the
file named by the ``RFCXML_CONFIG`` environment variable. Command-line
flags override configuration files.

"""

import argparse
import logging
import os
import sys
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

from rfcxml.constants import (
    CONFIG_ENV_VAR,
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_PARSING_ERROR,
    EXIT_RENDERING_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
)
from rfcxml.exceptions import OutputWriteError, ParsingError, RenderingError, ValidationError
from rfcxml.logging_utils import configure_logging
from rfcxml.options.xml2rfc import Xml2RfcRendererOptions

logger = logging.getLogger(__name__)


def _option_help(name: str) -> str:
    for f in fields(Xml2RfcRendererOptions):
        if f.name == name:
            return f.metadata.get("help", "")
    return ""


def _option_choices(name: str) -> Optional[list[str]]:
    for f in fields(Xml2RfcRendererOptions):
        if f.name == name:
            return f.metadata.get("choices")
    return None


def get_version() -> str:
    """Get the version of the rfcxml package."""
    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("rfcxml")
    except PackageNotFoundError:
        return "unknown"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="rfcxml",
        description="Render a document AST (JSON) to xml2rfc v2 XML.",
    )
    parser.add_argument("input", help="Path to a JSON document AST, or '-' to read standard input")
    parser.add_argument("-o", "--out", metavar="PATH", help="Output file (default: standard output)")

    rendering = parser.add_argument_group("rendering options")
    rendering.add_argument(
        "--fragment",
        dest="standalone",
        action="store_false",
        default=None,
        help="Emit only inner block content, without prolog, root, title metadata or references",
    )
    rendering.add_argument(
        "--citation-order",
        choices=_option_choices("citation_order"),
        help=_option_help("citation_order"),
    )
    rendering.add_argument(
        "--citation-conflict",
        choices=_option_choices("citation_conflict"),
        help=_option_help("citation_conflict"),
    )
    rendering.add_argument("--reference-prefix", metavar="PREFIX", help=_option_help("reference_prefix"))
    rendering.add_argument(
        "--validate",
        dest="validate_output",
        action="store_true",
        default=None,
        help=_option_help("validate_output"),
    )

    parser.add_argument(
        "--config",
        help="Path to configuration file (TOML, YAML or JSON). If not specified, searches for .rfcxml.toml, "
        ".rfcxml.yaml, .rfcxml.yml, .rfcxml.json or [tool.rfcxml] in pyproject.toml from the current "
        "directory upwards, then in the home directory.",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        dest="no_config",
        help=f"Disable loading of configuration files. Ignores auto-discovered configs, {CONFIG_ENV_VAR} "
        "and any --config flag.",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        help="Write log messages to specified file in addition to console output",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable trace mode with very verbose logging and per-stage timing information",
    )
    parser.add_argument("--version", "-V", action="version", version=f"rfcxml {get_version()}")
    return parser


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, (ValidationError, argparse.ArgumentTypeError)):
        return EXIT_VALIDATION_ERROR
    if isinstance(exception, (OutputWriteError, OSError)):
        return EXIT_FILE_ERROR
    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR
    if isinstance(exception, RenderingError):
        return EXIT_RENDERING_ERROR
    return EXIT_ERROR


def build_options(parsed_args: argparse.Namespace) -> Xml2RfcRendererOptions:
    """Combine defaults, configuration file and command-line flags.

    Raises
    ------
    argparse.ArgumentTypeError
        If the configuration file cannot be loaded or holds invalid values

    """
    from rfcxml.config import load_config_with_priority, options_from_config

    config: Dict[str, Any] = {}
    if not parsed_args.no_config:
        config = load_config_with_priority(parsed_args.config, os.environ.get(CONFIG_ENV_VAR))
    options = options_from_config(config)

    overrides = {
        name: getattr(parsed_args, name)
        for name in Xml2RfcRendererOptions.field_names()
        if getattr(parsed_args, name, None) is not None
    }
    if overrides:
        logger.debug("Command-line overrides: %s", overrides)
        options = options.create_updated(**overrides)
    return options


def main(args: list[str] | None = None) -> int:
    """Execute the rfcxml command line."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(parsed_args.log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    try:
        options = build_options(parsed_args)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    from rfcxml.api import render

    if parsed_args.input == "-":
        source: Any = sys.stdin.read()
    else:
        source = Path(parsed_args.input)
        if not source.is_file():
            print(f"Error: Input file does not exist: {source}", file=sys.stderr)
            return EXIT_FILE_ERROR

    try:
        if parsed_args.out:
            render(source, output=parsed_args.out, options=options)
        else:
            sys.stdout.write(render(source, options=options) or "")
    except Exception as e:
        exit_code = get_exit_code_for_exception(e)
        if exit_code == EXIT_ERROR:
            logger.exception("Unexpected error")
        print(f"Error: {e}", file=sys.stderr)
        return exit_code

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
