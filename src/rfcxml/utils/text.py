#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/rfcxml/utils/text.py
"""Text helpers for anchors and reference filenames."""

from __future__ import annotations

import re
import unicodedata
from typing import Set


def slugify(text: str, *, seen_slugs: Set[str] | None = None, max_length: int = 100, separator: str = "-") -> str:
    """Create an anchor-safe slug from text with collision avoidance.

    Parameters
    ----------
    text : str
        Text to slugify (e.g., heading text)
    seen_slugs : Set[str] or None, default = None
        Previously generated slugs. When given, a numeric suffix (-2, -3, ...)
        is appended on collision and the result is added to the set.
    max_length : int, default = 100
        Maximum length of the slug before collision suffixes
    separator : str, default = "-"
        The separator between words in the slug

    Returns
    -------
    str
        Slug, unique if seen_slugs is provided

    Examples
    --------
        >>> slugify("Security Considerations")
        'security-considerations'
        >>> slugify("Café résumé")
        'cafe-resume'

    """
    normalized = unicodedata.normalize("NFD", text)
    normalized = "".join(char for char in normalized if unicodedata.category(char) != "Mn")

    slug = normalized.lower()
    slug = re.sub(r"[\s_]+", separator, slug)

    replace_pattern = "^a-z0-9\\-" + "\\" + separator
    slug = re.sub(rf"[{replace_pattern}]", "", slug)
    slug = re.sub(rf"{re.escape(separator)}+", separator, slug)
    slug = slug.strip(separator)

    # xml2rfc anchors are XML IDs and cannot start with a digit
    if not slug:
        slug = "section"
    elif slug[0].isdigit():
        slug = f"section{separator}{slug}"

    if len(slug) > max_length:
        slug = slug[:max_length].rstrip(separator)

    if seen_slugs is not None:
        if slug not in seen_slugs:
            seen_slugs.add(slug)
            return slug
        counter = 2
        while f"{slug}{separator}{counter}" in seen_slugs:
            counter += 1
        unique = f"{slug}{separator}{counter}"
        seen_slugs.add(unique)
        return unique

    return slug


__all__ = ["slugify"]
