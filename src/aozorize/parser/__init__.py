"""Parser package."""

from .base import (
    AccentChar,
    BlockKind,
    ChitsukiBlock,
    DecoratedBlock,
    Document,
    FontSize,
    Gaiji,
    Heading,
    HeadingLevel,
    HeadingStyle,
    IndentBlock,
    Kaeriten,
    LineBreak,
    Okurigana,
    Paragraph,
    Ruby,
    SizeKind,
    Styled,
    StyleKind,
    Tcy,
    Text,
)
from .builder import DocumentBuilder, parse
from .ruby import CharClass, RubyBasePolicy

__all__ = [
    "AccentChar",
    "BlockKind",
    "ChitsukiBlock",
    "DecoratedBlock",
    "Document",
    "FontSize",
    "Gaiji",
    "Heading",
    "HeadingLevel",
    "HeadingStyle",
    "IndentBlock",
    "Kaeriten",
    "LineBreak",
    "Okurigana",
    "Paragraph",
    "Ruby",
    "SizeKind",
    "Styled",
    "StyleKind",
    "Tcy",
    "Text",
    "DocumentBuilder",
    "parse",
    "CharClass",
    "RubyBasePolicy",
]
