"""Interpretation of annotation commands (the text inside ``［＃…］``)."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .base import BlockKind, HeadingLevel, HeadingStyle, SizeKind, StyleKind, left_variant

STYLE_KEYWORDS: dict[str, StyleKind] = {
    "傍点": StyleKind.SESAME_DOT,
    "白ゴマ傍点": StyleKind.WHITE_SESAME_DOT,
    "丸傍点": StyleKind.BLACK_CIRCLE,
    "白丸傍点": StyleKind.WHITE_CIRCLE,
    "黒三角傍点": StyleKind.BLACK_TRIANGLE,
    "白三角傍点": StyleKind.WHITE_TRIANGLE,
    "二重丸傍点": StyleKind.BULLSEYE,
    "蛇の目傍点": StyleKind.FISHEYE,
    "ばつ傍点": StyleKind.SALTIRE,
    "傍線": StyleKind.UNDERLINE_SOLID,
    "二重傍線": StyleKind.UNDERLINE_DOUBLE,
    "鎖線": StyleKind.UNDERLINE_DOTTED,
    "破線": StyleKind.UNDERLINE_DASHED,
    "波線": StyleKind.UNDERLINE_WAVE,
    "太字": StyleKind.BOLD,
    "斜体": StyleKind.ITALIC,
    "下付き小文字": StyleKind.SUBSCRIPT,
    "行左小書き": StyleKind.SUBSCRIPT,
    "上付き小文字": StyleKind.SUPERSCRIPT,
    "行右小書き": StyleKind.SUPERSCRIPT,
}

FRAME_KEYWORDS: dict[str, StyleKind] = {
    "罫囲み": StyleKind.KEIGAKOMI,
    "横組み": StyleKind.YOKOGUMI,
    "キャプション": StyleKind.CAPTION,
    "割り注": StyleKind.WARICHU,
}

# Checked in order: "字下げ" wins over the rest of a combined command.
_BLOCK_KEYWORDS: tuple[tuple[str, BlockKind], ...] = (
    ("字下げ", BlockKind.JISAGE),
    ("地付き", BlockKind.CHITSUKI),
    ("字上げ", BlockKind.CHITSUKI),
    ("字詰め", BlockKind.JIZUME),
    ("罫囲み", BlockKind.KEIGAKOMI),
    ("横組み", BlockKind.YOKOGUMI),
    ("太字", BlockKind.FUTOJI),
    ("斜体", BlockKind.SHATAI),
    ("大きな文字", BlockKind.DAI),
    ("小さな文字", BlockKind.SHO),
    ("キャプション", BlockKind.CAPTION),
    ("割り注", BlockKind.WARIGAKI),
)

_SIZE_KINDS = {"大きな": SizeKind.LARGER, "小さな": SizeKind.SMALLER}
_HEADING_LEVELS = {"大": HeadingLevel.LARGE, "中": HeadingLevel.MEDIUM, "小": HeadingLevel.SMALL}
_HEADING_STYLES = {"同行": HeadingStyle.DOGYO, "窓": HeadingStyle.MADO}

_LEFT = "左に"
_LEFT_RUBY_RE = re.compile(r"「(.+?)」の左に「(.+)」のルビ")
_NOTE_RUBY_RE = re.compile(r"「(.+?)」に「(.+)」の(?:注記|傍記)")
_ANNOTATION_END_RE = re.compile(r"(左に)?「(.+)」の注記付き終わり")
_REFERENCE_RE = re.compile(r"「(.+)」(?:に|は|の)(.+)")
_HEADING_RE = re.compile(r"(同行|窓)?([大中小])見出し")
_FONT_SIZE_RE = re.compile(r"(.*?)(?:段階)?(大きな|小さな)文字")
_CHITSUKI_RE = re.compile(r"地から(.+)字上げ")
_KAERITEN_RE = re.compile(r"[一二三四上中下甲乙丙丁天地人]?レ?")
_OKURIGANA_RE = re.compile(r"（(.+)）")
_DIGITS_RE = re.compile(r"[0-9０-９]+")
_KANJI_NUMERAL_RE = re.compile(r"[〇一二三四五六七八九十]+")
_KANJI_DIGITS = {ch: n for n, ch in enumerate("〇一二三四五六七八九")}


# ---------------------------------------------------------------------------
# Directive variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class InlineStyle:
    kind: StyleKind
    target: str


@dataclass(frozen=True, slots=True)
class StyleStart:
    kind: StyleKind


@dataclass(frozen=True, slots=True)
class StyleEnd:
    kind: StyleKind


@dataclass(frozen=True, slots=True)
class FontSizeRef:
    kind: SizeKind
    step: int
    target: str


@dataclass(frozen=True, slots=True)
class FontSizeStart:
    kind: SizeKind
    step: int


@dataclass(frozen=True, slots=True)
class FontSizeEnd:
    kind: SizeKind


@dataclass(frozen=True, slots=True)
class RubyRef:
    """Ruby attached by a command: left ruby, 注記 or 傍記."""

    target: str
    reading: str
    left: bool = False


@dataclass(frozen=True, slots=True)
class AnnotationStart:
    left: bool = False


@dataclass(frozen=True, slots=True)
class AnnotationEnd:
    reading: str
    left: bool = False


@dataclass(frozen=True, slots=True)
class HeadingRef:
    level: HeadingLevel
    target: str
    style: HeadingStyle = HeadingStyle.NORMAL


@dataclass(frozen=True, slots=True)
class HeadingStart:
    level: HeadingLevel
    style: HeadingStyle = HeadingStyle.NORMAL


@dataclass(frozen=True, slots=True)
class HeadingEnd:
    level: HeadingLevel


@dataclass(frozen=True, slots=True)
class BlockStart:
    level: int
    kind: BlockKind = BlockKind.JISAGE
    wrap: int = 0


@dataclass(frozen=True, slots=True)
class BlockEnd:
    kind: BlockKind = BlockKind.JISAGE


@dataclass(frozen=True, slots=True)
class LineIndent:
    level: int


@dataclass(frozen=True, slots=True)
class LineChitsuki:
    width: int


@dataclass(frozen=True, slots=True)
class TcyStart:
    pass


@dataclass(frozen=True, slots=True)
class TcyEnd:
    pass


@dataclass(frozen=True, slots=True)
class TcyRef:
    target: str


@dataclass(frozen=True, slots=True)
class KaeritenMark:
    text: str


@dataclass(frozen=True, slots=True)
class OkuriganaMark:
    text: str


@dataclass(frozen=True, slots=True)
class Unrecognized:
    text: str


Directive = (
    InlineStyle
    | StyleStart
    | StyleEnd
    | FontSizeRef
    | FontSizeStart
    | FontSizeEnd
    | RubyRef
    | AnnotationStart
    | AnnotationEnd
    | HeadingRef
    | HeadingStart
    | HeadingEnd
    | BlockStart
    | BlockEnd
    | LineIndent
    | LineChitsuki
    | TcyStart
    | TcyEnd
    | TcyRef
    | KaeritenMark
    | OkuriganaMark
    | Unrecognized
)


# ---------------------------------------------------------------------------
# Interpretation
# ---------------------------------------------------------------------------

def interpret(raw_command_text: str) -> Directive:
    """Map command text to a directive; unknown forms become Unrecognized."""
    content = raw_command_text.strip()

    match = _LEFT_RUBY_RE.fullmatch(content)
    if match:
        return RubyRef(match.group(1), match.group(2), left=True)
    match = _NOTE_RUBY_RE.fullmatch(content)
    if match:
        return RubyRef(match.group(1), match.group(2))

    if content in ("注記付き", _LEFT + "注記付き"):
        return AnnotationStart(left=content.startswith(_LEFT))
    match = _ANNOTATION_END_RE.fullmatch(content)
    if match:
        return AnnotationEnd(match.group(2), left=match.group(1) is not None)

    reference = _interpret_reference(content)
    if reference is not None:
        return reference

    if content.startswith("ここから"):
        return _interpret_block_start(content[len("ここから"):], content)

    if content.startswith("ここで") and content.endswith("終わり"):
        return _interpret_block_end(content[len("ここで"):-len("終わり")], content)

    if content.endswith("終わり"):
        return _interpret_range_end(content[:-len("終わり")], content)

    if content.endswith("字下げ"):
        level = parse_number(content[:-len("字下げ")])
        if level is not None:
            return LineIndent(level)

    if content == "地付き":
        return LineChitsuki(0)
    match = _CHITSUKI_RE.fullmatch(content)
    if match:
        width = parse_number(match.group(1))
        if width is not None:
            return LineChitsuki(width)

    if content == "縦中横":
        return TcyStart()

    style = _style_keyword(content)
    if style is not None:
        return StyleStart(style)
    if content in FRAME_KEYWORDS:
        return StyleStart(FRAME_KEYWORDS[content])

    match = _FONT_SIZE_RE.fullmatch(content)
    if match:
        return FontSizeStart(_SIZE_KINDS[match.group(2)], _font_step(match.group(1)))

    match = _HEADING_RE.fullmatch(content)
    if match:
        return HeadingStart(_HEADING_LEVELS[match.group(2)], _heading_style(match.group(1)))

    if content and _KAERITEN_RE.fullmatch(content):
        return KaeritenMark(content)

    match = _OKURIGANA_RE.fullmatch(content)
    if match:
        return OkuriganaMark(match.group(1))

    return Unrecognized(content)


def _interpret_reference(content: str) -> Directive | None:
    """``「X」に傍点`` / ``「X」の左に傍線`` / ``「X」は中見出し`` / ``「X」は縦中横``."""
    match = _REFERENCE_RE.fullmatch(content)
    if not match:
        return None
    target, command = match.group(1), match.group(2)

    style = _style_keyword(command)
    if style is not None:
        return InlineStyle(style, target)

    heading = _HEADING_RE.fullmatch(command)
    if heading:
        return HeadingRef(_HEADING_LEVELS[heading.group(2)], target, _heading_style(heading.group(1)))

    size = _FONT_SIZE_RE.fullmatch(command)
    if size:
        return FontSizeRef(_SIZE_KINDS[size.group(2)], _font_step(size.group(1)), target)

    if command == "縦中横":
        return TcyRef(target)

    if command in FRAME_KEYWORDS:
        return InlineStyle(FRAME_KEYWORDS[command], target)

    return None


def _interpret_block_start(rest: str, content: str) -> Directive:
    if "折り返して" in rest:
        first, _, following = rest.partition("折り返して")
        level = 0 if "天付き" in first else parse_number(first) or 0
        return BlockStart(level, BlockKind.BURASAGE, wrap=parse_number(following) or 0)

    kind = _block_keyword(rest)
    if kind is BlockKind.JISAGE:
        level = parse_number(rest)
        if level is None:
            level = 0 if "天付き" in rest else 1
        return BlockStart(level)
    if kind is BlockKind.CHITSUKI:
        if "地付き" in rest:
            return BlockStart(0, kind)
        return BlockStart(parse_number(rest) or 0, kind)
    if kind in (BlockKind.DAI, BlockKind.SHO):
        return BlockStart(parse_number(rest) or 1, kind)
    if kind is not None:
        return BlockStart(parse_number(rest) or 0, kind)
    return Unrecognized(content)


def _interpret_block_end(rest: str, content: str) -> Directive:
    kind = _block_keyword(rest)
    if kind is None:
        return Unrecognized(content)
    return BlockEnd(kind)


def _interpret_range_end(name: str, content: str) -> Directive:
    if name == "縦中横":
        return TcyEnd()
    style = _style_keyword(name)
    if style is not None:
        return StyleEnd(style)
    if name in FRAME_KEYWORDS:
        return StyleEnd(FRAME_KEYWORDS[name])
    match = _FONT_SIZE_RE.fullmatch(name)
    if match:
        return FontSizeEnd(_SIZE_KINDS[match.group(2)])
    match = _HEADING_RE.fullmatch(name)
    if match:
        return HeadingEnd(_HEADING_LEVELS[match.group(2)])
    return Unrecognized(content)


def _style_keyword(text: str) -> StyleKind | None:
    """Style named by *text*, accepting the ``左に`` prefix for left-side forms."""
    if text in STYLE_KEYWORDS:
        return STYLE_KEYWORDS[text]
    if text.startswith(_LEFT) and text[len(_LEFT):] in STYLE_KEYWORDS:
        return left_variant(STYLE_KEYWORDS[text[len(_LEFT):]])
    return None


def _block_keyword(text: str) -> BlockKind | None:
    for keyword, kind in _BLOCK_KEYWORDS:
        if keyword in text:
            return kind
    return None


def _font_step(prefix: str) -> int:
    return parse_number(prefix) or 1


def _heading_style(prefix: str | None) -> HeadingStyle:
    return _HEADING_STYLES.get(prefix or "", HeadingStyle.NORMAL)


def parse_number(text: str) -> int | None:
    """First number in *text*: ASCII, full-width or kanji numerals."""
    match = _DIGITS_RE.search(text)
    if match:
        return int(match.group(0))
    match = _KANJI_NUMERAL_RE.search(text)
    if match:
        return _kanji_to_int(match.group(0))
    return None


def _kanji_to_int(numeral: str) -> int:
    if "十" not in numeral:
        value = 0
        for ch in numeral:
            value = value * 10 + _KANJI_DIGITS[ch]
        return value
    tens, _, ones = numeral.partition("十")
    tens_value = _kanji_to_int(tens) if tens else 1
    ones_value = _kanji_to_int(ones) if ones else 0
    return tens_value * 10 + ones_value
