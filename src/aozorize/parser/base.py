"""Core intermediate representation (IR) for converted texts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StyleKind(Enum):
    """Inline decoration; the value doubles as the HTML class name."""

    SESAME_DOT = "sesame_dot"
    WHITE_SESAME_DOT = "white_sesame_dot"
    BLACK_CIRCLE = "black_circle"
    WHITE_CIRCLE = "white_circle"
    BLACK_TRIANGLE = "black_up-pointing_triangle"
    WHITE_TRIANGLE = "white_up-pointing_triangle"
    BULLSEYE = "bullseye"
    FISHEYE = "fisheye"
    SALTIRE = "saltire"
    UNDERLINE_SOLID = "underline_solid"
    UNDERLINE_DOUBLE = "underline_double"
    UNDERLINE_DOTTED = "underline_dotted"
    UNDERLINE_DASHED = "underline_dashed"
    UNDERLINE_WAVE = "underline_wave"
    BOLD = "futoji"
    ITALIC = "shatai"
    SUBSCRIPT = "subscript"
    SUPERSCRIPT = "superscript"
    # left-side emphasis
    SESAME_DOT_AFTER = "sesame_dot_after"
    WHITE_SESAME_DOT_AFTER = "white_sesame_dot_after"
    BLACK_CIRCLE_AFTER = "black_circle_after"
    WHITE_CIRCLE_AFTER = "white_circle_after"
    BLACK_TRIANGLE_AFTER = "black_up-pointing_triangle_after"
    WHITE_TRIANGLE_AFTER = "white_up-pointing_triangle_after"
    BULLSEYE_AFTER = "bullseye_after"
    FISHEYE_AFTER = "fisheye_after"
    SALTIRE_AFTER = "saltire_after"
    OVERLINE_SOLID = "overline_solid"
    OVERLINE_DOUBLE = "overline_double"
    OVERLINE_DOTTED = "overline_dotted"
    OVERLINE_DASHED = "overline_dashed"
    OVERLINE_WAVE = "overline_wave"
    # inline frames
    KEIGAKOMI = "keigakomi"
    YOKOGUMI = "yokogumi"
    CAPTION = "caption"
    WARICHU = "warichu"


_LEFT_VARIANTS = {
    StyleKind.SESAME_DOT: StyleKind.SESAME_DOT_AFTER,
    StyleKind.WHITE_SESAME_DOT: StyleKind.WHITE_SESAME_DOT_AFTER,
    StyleKind.BLACK_CIRCLE: StyleKind.BLACK_CIRCLE_AFTER,
    StyleKind.WHITE_CIRCLE: StyleKind.WHITE_CIRCLE_AFTER,
    StyleKind.BLACK_TRIANGLE: StyleKind.BLACK_TRIANGLE_AFTER,
    StyleKind.WHITE_TRIANGLE: StyleKind.WHITE_TRIANGLE_AFTER,
    StyleKind.BULLSEYE: StyleKind.BULLSEYE_AFTER,
    StyleKind.FISHEYE: StyleKind.FISHEYE_AFTER,
    StyleKind.SALTIRE: StyleKind.SALTIRE_AFTER,
    StyleKind.UNDERLINE_SOLID: StyleKind.OVERLINE_SOLID,
    StyleKind.UNDERLINE_DOUBLE: StyleKind.OVERLINE_DOUBLE,
    StyleKind.UNDERLINE_DOTTED: StyleKind.OVERLINE_DOTTED,
    StyleKind.UNDERLINE_DASHED: StyleKind.OVERLINE_DASHED,
    StyleKind.UNDERLINE_WAVE: StyleKind.OVERLINE_WAVE,
}


def left_variant(kind: StyleKind) -> StyleKind:
    """The left-side form of *kind*; kinds without one map to themselves."""
    return _LEFT_VARIANTS.get(kind, kind)


class SizeKind(Enum):
    LARGER = "dai"
    SMALLER = "sho"


class BlockKind(Enum):
    JISAGE = "jisage"
    CHITSUKI = "chitsuki"
    JIZUME = "jizume"
    KEIGAKOMI = "keigakomi"
    YOKOGUMI = "yokogumi"
    FUTOJI = "futoji"
    SHATAI = "shatai"
    DAI = "dai"
    SHO = "sho"
    CAPTION = "caption"
    WARIGAKI = "warigaki"
    BURASAGE = "burasage"


class HeadingLevel(Enum):
    LARGE = "o"
    MEDIUM = "naka"
    SMALL = "ko"


class HeadingStyle(Enum):
    NORMAL = "normal"
    DOGYO = "dogyo"
    MADO = "mado"


# ---------------------------------------------------------------------------
# Inline nodes
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Text:
    text: str


@dataclass(slots=True)
class Ruby:
    base: str
    reading: str
    left: bool = False


@dataclass(slots=True)
class Styled:
    kind: StyleKind
    children: list[InlineNode] = field(default_factory=list)


@dataclass(slots=True)
class FontSize:
    kind: SizeKind
    step: int
    children: list[InlineNode] = field(default_factory=list)


@dataclass(slots=True)
class Gaiji:
    """A resolved external character.

    ``char`` is usually one code point; JIS X 0213 combining entries such as
    カ゚ resolve to two.
    """

    char: str
    description: str = ""

    @property
    def codepoints(self) -> tuple[int, ...]:
        return tuple(ord(c) for c in self.char)


@dataclass(slots=True)
class AccentChar:
    char: str


@dataclass(slots=True)
class Tcy:
    text: str


@dataclass(slots=True)
class Kaeriten:
    text: str


@dataclass(slots=True)
class Okurigana:
    text: str


@dataclass(slots=True)
class LineBreak:
    pass


InlineNode = Text | Ruby | Styled | FontSize | Gaiji | AccentChar | Tcy | Kaeriten | Okurigana | LineBreak


# ---------------------------------------------------------------------------
# Block nodes
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Paragraph:
    children: list[InlineNode] = field(default_factory=list)


@dataclass(slots=True)
class Heading:
    level: HeadingLevel
    children: list[InlineNode] = field(default_factory=list)
    style: HeadingStyle = HeadingStyle.NORMAL


@dataclass(slots=True)
class IndentBlock:
    level: int
    children: list[BlockNode] = field(default_factory=list)


@dataclass(slots=True)
class ChitsukiBlock:
    width: int
    children: list[BlockNode] = field(default_factory=list)


@dataclass(slots=True)
class DecoratedBlock:
    """A ``ここから…`` scope other than indentation or chitsuki.

    ``level`` is the width for 字詰め, the step for font sizes and the
    first-line indent for hanging indents; ``wrap`` is the indent of the
    following lines of a hanging indent.
    """

    kind: BlockKind
    children: list[BlockNode] = field(default_factory=list)
    level: int = 0
    wrap: int = 0


BlockNode = Paragraph | Heading | IndentBlock | ChitsukiBlock | DecoratedBlock


@dataclass(frozen=True, slots=True)
class Document:
    blocks: tuple[BlockNode, ...] = ()
    warnings: tuple[str, ...] = ()


def inline_text(node: InlineNode) -> str:
    """Return the visible text of *node*: ruby bases only, annotations dropped."""
    if isinstance(node, Text):
        return node.text
    if isinstance(node, Ruby):
        return node.base
    if isinstance(node, (Styled, FontSize)):
        return "".join(inline_text(child) for child in node.children)
    if isinstance(node, (Gaiji, AccentChar)):
        return node.char
    if isinstance(node, Tcy):
        return node.text
    if isinstance(node, LineBreak):
        return "\n"
    return ""
