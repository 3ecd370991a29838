"""Accent decomposition notation: ``〔cafe'〕`` → ``café``."""

from __future__ import annotations

import string
import unicodedata
from types import MappingProxyType
from typing import Mapping

ACCENT_MARKS = frozenset("'`^~:&_,/@")

_COMBINING_MARKS = {
    "'": "\u0301",  # acute
    "`": "\u0300",  # grave
    "^": "\u0302",  # circumflex
    "~": "\u0303",  # tilde
    ":": "\u0308",  # diaeresis
    "_": "\u0304",  # macron
    ",": "\u0327",  # cedilla
    "&": "\u030a",  # ring above
}

# Sequences that are not a letter plus a combining mark.
_SPECIAL_SEQUENCES = {
    "AE&": "Æ",
    "ae&": "æ",
    "OE&": "Œ",
    "oe&": "œ",
    "s&": "ß",
    "O/": "Ø",
    "o/": "ø",
    "L/": "Ł",
    "l/": "ł",
    "D/": "Đ",
    "d/": "đ",
    "!@": "¡",
    "?@": "¿",
}

# Latin-1 Supplement and Latin Extended-A only.
_MAX_COMPOSED = 0x017F


def _build_accent_table() -> Mapping[str, str]:
    table: dict[str, str] = {}
    for base in string.ascii_letters:
        for mark, combining in _COMBINING_MARKS.items():
            composed = unicodedata.normalize("NFC", base + combining)
            if len(composed) == 1 and ord(composed) <= _MAX_COMPOSED:
                table[base + mark] = composed
    table.update(_SPECIAL_SEQUENCES)
    return MappingProxyType(table)


ACCENT_TABLE = _build_accent_table()


def lookup_accent(sequence: str) -> str | None:
    return ACCENT_TABLE.get(sequence)


def has_accent_mark(text: str) -> bool:
    return any(ch in ACCENT_MARKS for ch in text)


def split_accents(text: str) -> list[tuple[str, bool]]:
    """Split *text* into ``(segment, is_accent)`` pairs.

    Three-character ligatures are tried before two-character sequences;
    anything that matches neither is kept as plain text.
    """
    parts: list[tuple[str, bool]] = []
    buffer: list[str] = []
    i = 0
    while i < len(text):
        matched = None
        for width in (3, 2):
            candidate = text[i:i + width]
            if len(candidate) == width and candidate[-1] in ACCENT_MARKS:
                matched = lookup_accent(candidate)
                if matched is not None:
                    break
        if matched is None:
            buffer.append(text[i])
            i += 1
            continue
        if buffer:
            parts.append(("".join(buffer), False))
            buffer = []
        parts.append((matched, True))
        i += width
    if buffer:
        parts.append(("".join(buffer), False))
    return parts


def convert_accent(text: str) -> str:
    return "".join(segment for segment, _ in split_accents(text))
