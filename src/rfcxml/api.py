"""The exported API function for rendering documents to xml2rfc XML."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/rfcxml/api.py
import logging
from pathlib import Path
from typing import IO, Any, Mapping, Optional, Union

from rfcxml.ast.nodes import Document
from rfcxml.ast.serialization import dict_to_ast, json_to_ast
from rfcxml.exceptions import ParsingError
from rfcxml.options.xml2rfc import Xml2RfcRendererOptions
from rfcxml.renderers.xml2rfc import Xml2RfcRenderer
from rfcxml.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

DocumentSource = Union[Document, Mapping[str, Any], str, Path]


def load_document(source: DocumentSource) -> Document:
    """Load a Document from any supported source.

    Parameters
    ----------
    source : Document, dict, str or Path
        A Document is returned unchanged; a dict is deserialized; a string
        starting with ``{`` is parsed as JSON; any other string or Path is
        read as a JSON file.

    Returns
    -------
    Document
        The loaded document

    Raises
    ------
    ParsingError
        If the source cannot be loaded or is not a document

    """
    if isinstance(source, Document):
        return source

    if isinstance(source, Mapping):
        node = dict_to_ast(dict(source))
    elif isinstance(source, str) and source.lstrip().startswith("{"):
        node = json_to_ast(source)
    elif isinstance(source, (str, Path)):
        path = Path(source)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ParsingError(f"Cannot read document {path}: {e}", parsing_stage="read", original_error=e) from e
        with debug_timer(logger, f"Loading ({path.name})"):
            node = json_to_ast(text)
    else:
        raise ParsingError(f"Unsupported document source type: {type(source).__name__}", parsing_stage="input")

    if not isinstance(node, Document):
        raise ParsingError(f"Expected a Document at the root, got {type(node).__name__}", parsing_stage="validation")
    return node


def render(
    source: DocumentSource,
    output: Union[str, Path, IO[bytes], IO[str], None] = None,
    options: Optional[Xml2RfcRendererOptions] = None,
    **kwargs: Any,
) -> Union[str, None]:
    """Render a document to xml2rfc v2 XML.

    Parameters
    ----------
    source : Document, dict, str or Path
        Document to render, see :func:`load_document`
    output : str, Path, IO or None, default None
        Where to write the result. If None, the XML is returned as a string.
    options : Xml2RfcRendererOptions, optional
        Rendering options
    **kwargs
        Individual option overrides, applied on top of ``options``

    Returns
    -------
    str or None
        The XML when ``output`` is None, otherwise None

    Raises
    ------
    ParsingError
        If the source cannot be loaded
    RenderingError
        If output validation fails
    OutputWriteError
        If the output file cannot be written

    Examples
    --------
    >>> xml = render("draft.json")
    >>> render("draft.json", output="draft.xml", citation_order="sorted")

    """
    document = load_document(source)

    final_options = options or Xml2RfcRendererOptions()
    if kwargs:
        valid = {k: v for k, v in kwargs.items() if k in Xml2RfcRendererOptions.field_names()}
        missing = [k for k in kwargs if k not in valid]
        if missing:
            logger.debug(f"Skipping unknown renderer options: {missing}")
        final_options = final_options.create_updated(**valid)

    renderer = Xml2RfcRenderer(final_options)
    with debug_timer(logger, "Rendering (xml2rfc)"):
        if output is None:
            return renderer.render_to_string(document)
        renderer.render(document, output)
    return None


__all__ = ["load_document", "render"]
