#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/rfcxml/utils/escape.py
"""XML escaping utilities for xml2rfc output.

Text content and attribute values both go through :func:`html.escape` with
quoting enabled, so escaped text can be moved into an attribute value
without a second pass.

"""

from __future__ import annotations

import html
import re

_TAG_PATTERN = re.compile(r"<[^<>]*>")


def escape_xml(text: str) -> str:
    """Escape text for use as XML character data or an attribute value.

    Parameters
    ----------
    text : str
        Raw text

    Returns
    -------
    str
        Text with ``&``, ``<``, ``>``, ``"`` and ``'`` replaced by entities

    Examples
    --------
        >>> escape_xml('a < b & "c"')
        'a &lt; b &amp; &quot;c&quot;'

    """
    if not text:
        return text
    return html.escape(text, quote=True)


def strip_markup(fragment: str) -> str:
    """Remove element tags from an already escaped XML fragment.

    Used where rendered inline content has to land in an attribute value
    (section titles, hanging labels). Entities in the fragment are kept.

    Parameters
    ----------
    fragment : str
        Escaped XML fragment, possibly containing inline elements

    Returns
    -------
    str
        The fragment's character data with newlines collapsed to spaces

    Examples
    --------
        >>> strip_markup('Use <spanx style="verb">x &lt; y</spanx>')
        'Use x &lt; y'

    """
    text = _TAG_PATTERN.sub("", fragment)
    return " ".join(text.split())


__all__ = ["escape_xml", "strip_markup"]
