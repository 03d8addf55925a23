"""Shared utilities for backend formatters."""

from __future__ import annotations

import re

# Anything that is not a letter or digit separates words (Unicode aware)
_SEPARATOR_RE = re.compile(r"[\W_]+")


class FormatError(Exception):
    """An IR entity has no legal spelling in the target language.

    Raised for conditions fixed by the IR or configuration, so generation
    cannot continue. entity names the offender in IR vocabulary.
    """

    def __init__(self, msg: str, entity: str):
        self.msg: str = msg
        self.entity: str = entity
        super().__init__(f"{entity}: {msg}")


def _is_boundary(prev: str, cur: str, nxt: str) -> bool:
    if cur.isupper() and (prev.islower() or prev.isdigit()):
        return True
    # Last capital of an acronym starts the next word: "HTTPServer"
    return prev.isupper() and cur.isupper() and nxt.islower()


def split_words(name: str) -> list[str]:
    """Split an identifier into words on separators and case boundaries.

    "HTTPServer" -> ["HTTP", "Server"], "get_utf8_len" -> ["get", "utf8", "len"]
    Non-ASCII letters are kept: "größe" -> ["größe"].
    """
    words: list[str] = []
    for chunk in _SEPARATOR_RE.split(name):
        start = 0
        for i in range(1, len(chunk)):
            nxt = chunk[i + 1] if i + 1 < len(chunk) else ""
            if _is_boundary(chunk[i - 1], chunk[i], nxt):
                words.append(chunk[start:i])
                start = i
        if chunk:
            words.append(chunk[start:])
    return words


def upper_first(s: str) -> str:
    """Uppercase the first character of a string, leaving the rest alone."""
    return (s[0].upper() + s[1:]) if s else ""


def to_snake(name: str) -> str:
    """Convert any casing to snake_case."""
    return "_".join(w.lower() for w in split_words(name))


def to_upper_camel(name: str) -> str:
    """Convert any casing to UpperCamelCase. Acronyms become "Http"."""
    return "".join(w.capitalize() for w in split_words(name))


def escape_reserved(name: str, reserved: frozenset[str]) -> str:
    """Append an underscore to names that collide with a reserved word."""
    if name in reserved:
        return name + "_"
    return name
