"""Tests for the gaiji and accent lookup tables.

Covers:
- Explicit U+XXXX code points (and invalid ones)
- JIS X 0213 men-ku-ten codes
- Description table lookups and the geta fallback
- Accent sequences, ligatures and unknown sequences
"""

from __future__ import annotations

from aozorize.parser.accent import ACCENT_TABLE, convert_accent, lookup_accent, split_accents
from aozorize.parser.gaiji import (
    GAIJI_TABLE,
    GETA,
    description_name,
    explicit_codepoint,
    jis_to_unicode,
    lookup_gaiji,
    resolve_gaiji,
)


# ---------------------------------------------------------------------------
# Gaiji
# ---------------------------------------------------------------------------

def test_explicit_codepoint_wins() -> None:
    assert resolve_gaiji("「丸印」、U+25CB") == "○"
    # The code point beats the description table.
    assert resolve_gaiji("「丸印」、U+25CF") == "●"


def test_invalid_codepoint_falls_back_to_table() -> None:
    assert explicit_codepoint("U+D800") is None
    assert explicit_codepoint("U+110000") is None
    assert resolve_gaiji("「丸印」、U+D800") == "○"


def test_astral_codepoint() -> None:
    assert resolve_gaiji("「口＋八」、U+20B9F") == "\U00020B9F"


def test_jis_code_resolution() -> None:
    assert jis_to_unicode(1, 16, 1) == "亜"
    assert jis_to_unicode(1, 4, 2) == "あ"
    assert resolve_gaiji("「亜」、第3水準1-16-01") == "亜"


def test_jis_code_can_yield_two_codepoints() -> None:
    assert jis_to_unicode(1, 5, 87) == "カ゚"


def test_jis_code_out_of_range() -> None:
    assert jis_to_unicode(1, 95, 1) is None
    assert jis_to_unicode(3, 1, 1) is None


def test_description_table() -> None:
    assert lookup_gaiji("丸印") == "○"
    assert lookup_gaiji("丸3") == "③"
    assert lookup_gaiji("ローマ数字4") == "Ⅳ"
    assert resolve_gaiji("「二の字点」") == "〻"


def test_unknown_description_is_geta() -> None:
    assert resolve_gaiji("「未知の字」") == GETA
    assert resolve_gaiji("") == GETA


def test_description_name() -> None:
    assert description_name("「ます記号」、1-2-22") == "ます記号"
    assert description_name("ます記号、U+303C") == "ます記号"


def test_gaiji_table_is_read_only() -> None:
    try:
        GAIJI_TABLE["新"] = "x"  # type: ignore[index]
    except TypeError:
        pass
    else:
        raise AssertionError("gaiji table accepted a write")


# ---------------------------------------------------------------------------
# Accents
# ---------------------------------------------------------------------------

def test_accent_composition() -> None:
    assert convert_accent("cafe'") == "café"
    assert convert_accent("nai:ve") == "naïve"
    assert convert_accent("e^tre") == "être"
    assert convert_accent("Espan~a") == "España"
    assert convert_accent("c,a") == "ça"


def test_accent_ligatures() -> None:
    assert convert_accent("AE&sop") == "Æsop"
    assert convert_accent("oe&uvre") == "œuvre"
    assert convert_accent("s&") == "ß"
    assert convert_accent("?@Que") == "¿Que"


def test_unknown_accent_sequence() -> None:
    assert lookup_accent("q'") is None
    assert split_accents("q'") == [("q'", False)]


def test_split_accents() -> None:
    assert split_accents("cafe'") == [("caf", False), ("é", True)]


def test_accent_table_only_latin() -> None:
    assert all(ord(value) <= 0x017F for value in ACCENT_TABLE.values())
