"""Gaiji (characters outside the base repertoire) lookup and resolution.

A gaiji escape reads ``※［＃「description」、U+XXXX］``. Resolution order:

1. an explicit ``U+XXXX`` code point,
2. a JIS X 0213 men-ku-ten code such as ``第3水準1-85-25``,
3. the description table,
4. the geta mark (〓).
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Mapping

logger = logging.getLogger(__name__)

GETA = "〓"

_UNICODE_RE = re.compile(r"[Uu]\+([0-9A-Fa-f]{4,6})(?![0-9A-Fa-f])")
_JIS_RE = re.compile(r"(?<!\d)([12])-(\d{1,2})-(\d{1,2})(?!\d)")
_QUOTED_RE = re.compile(r"「([^」]*)」")

_NAMED_GAIJI = {
    "丸印": "○",
    "白丸": "○",
    "黒丸": "●",
    "二重丸": "◎",
    "白三角": "△",
    "黒三角": "▲",
    "白四角": "□",
    "黒四角": "■",
    "米印": "※",
    "ゲタ記号": GETA,
    "二の字点": "〻",
    "ます記号": "〼",
    "歌記号": "〽",
    "より": "ゟ",
    "コト": "ヿ",
    "感嘆符二つ": "‼",
    "疑問符二つ": "⁇",
    "感嘆符疑問符": "⁉",
    "疑問符感嘆符": "⁈",
    "濁点付き平仮名う": "ゔ",
    "濁点付き片仮名ワ": "ヷ",
    "濁点付き片仮名ヰ": "ヸ",
    "濁点付き片仮名ヱ": "ヹ",
    "濁点付き片仮名ヲ": "ヺ",
    "小書き片仮名ク": "ㇰ",
    "小書き片仮名シ": "ㇱ",
    "小書き片仮名ト": "ㇳ",
    "小書き片仮名ヒ": "ㇶ",
    "小書き片仮名フ": "ㇷ",
    "小書き片仮名ム": "ㇺ",
    "小書き片仮名ラ": "ㇻ",
    "小書き片仮名リ": "ㇼ",
    "小書き片仮名ル": "ㇽ",
}


def _build_gaiji_table() -> Mapping[str, str]:
    table = dict(_NAMED_GAIJI)
    for n in range(1, 21):
        table[f"丸{n}"] = chr(0x2460 + n - 1)
    for n in range(1, 13):
        table[f"ローマ数字{n}"] = chr(0x2160 + n - 1)
        table[f"小文字ローマ数字{n}"] = chr(0x2170 + n - 1)
    return MappingProxyType(table)


GAIJI_TABLE = _build_gaiji_table()


def lookup_gaiji(description: str) -> str | None:
    """Look up a bare description (``丸印``) in the gaiji table."""
    return GAIJI_TABLE.get(description.strip())


def explicit_codepoint(body: str) -> str | None:
    """Return the character named by a ``U+XXXX`` literal, if valid."""
    match = _UNICODE_RE.search(body)
    if not match:
        return None
    value = int(match.group(1), 16)
    if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
        logger.debug("ignoring out-of-range code point in %r", body)
        return None
    return chr(value)


def jis_to_unicode(plane: int, row: int, cell: int) -> str | None:
    """Map a JIS X 0213 men-ku-ten triple to text via EUC-JIS-2004."""
    if plane not in (1, 2) or not (1 <= row <= 94 and 1 <= cell <= 94):
        return None
    raw = bytes((row + 0xA0, cell + 0xA0))
    if plane == 2:
        raw = b"\x8f" + raw
    try:
        decoded = raw.decode("euc_jis_2004")
    except UnicodeDecodeError:
        return None
    return decoded or None


def jis_code(body: str) -> tuple[int, int, int] | None:
    match = _JIS_RE.search(body)
    if not match:
        return None
    plane, row, cell = (int(part) for part in match.groups())
    return plane, row, cell


def description_name(body: str) -> str:
    """Extract the description proper from a gaiji escape body."""
    match = _QUOTED_RE.search(body)
    if match:
        return match.group(1)
    return body.split("、", 1)[0]


def resolve_gaiji(body: str) -> str:
    """Resolve the body of a gaiji escape; never fails."""
    char = explicit_codepoint(body)
    if char is not None:
        return char

    code = jis_code(body)
    if code is not None:
        char = jis_to_unicode(*code)
        if char is not None:
            return char

    char = lookup_gaiji(description_name(body))
    if char is not None:
        return char

    logger.debug("unresolved gaiji %r, substituting geta", body)
    return GETA
