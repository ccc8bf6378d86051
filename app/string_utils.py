#!/usr/bin/env python3
"""Utility helpers for turning localization keys into display text."""

import re

__all__ = [
    "format_localizer_key",
    "is_xml_compatible",
]

# Characters an XML 1.0 document cannot hold, not even escaped
XML_INCOMPATIBLE_CHARS = re.compile(
    "[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]"
)


def format_localizer_key(key: str) -> str:
    """
    Format a PascalCase/camelCase key into human-readable text.

    Every uppercase character after the first position is lowercased and
    preceded by a space. Keys that are empty or already contain whitespace
    are treated as readable text and returned unchanged.

    Examples:
      - "FirstName"        -> "First name"
      - "ID"               -> "I d"
      - "Already readable" -> "Already readable"

    Args:
        key: The localization key

    Returns:
        The display text for the key
    """
    if not key or any(ch.isspace() for ch in key):
        return key

    segments = []
    for index, ch in enumerate(key):
        if index > 0 and ch.isupper():
            segments.append(" ")
            segments.append(ch.lower())
        else:
            segments.append(ch)

    return "".join(segments)


def is_xml_compatible(text: str) -> bool:
    """Return True if text can be stored in a .resx name or value."""
    return XML_INCOMPATIBLE_CHARS.search(text) is None
