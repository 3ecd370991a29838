"""Ruby base inference for ``base《reading》`` without an explicit ``｜``."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CharClass(Enum):
    HIRAGANA = "hiragana"
    KATAKANA = "katakana"
    ZENKAKU = "zenkaku"
    HANKAKU = "hankaku"
    KANJI = "kanji"
    HANKAKU_TERMINATE = "hankaku_terminate"
    OTHER = "other"


_KANJI_EXTRAS = frozenset("々※〆〇ヶ")
_KATAKANA_EXTRAS = frozenset("ーヽヾヴ")
_ZENKAKU_EXTRAS = frozenset("−＆’，．")
_HANKAKU_EXTRAS = frozenset("#-&',")
_HANKAKU_TERMINATORS = frozenset('.;"?!)')


def classify(ch: str) -> CharClass:
    if "ぁ" <= ch <= "ん" or ch in "ゝゞ":
        return CharClass.HIRAGANA
    if "ァ" <= ch <= "ン" or ch in _KATAKANA_EXTRAS:
        return CharClass.KATAKANA
    if (
        "０" <= ch <= "９"
        or "Ａ" <= ch <= "Ｚ"
        or "ａ" <= ch <= "ｚ"
        or "Α" <= ch <= "Ω"
        or "α" <= ch <= "ω"
        or "А" <= ch <= "я"
        or ch in _ZENKAKU_EXTRAS
    ):
        return CharClass.ZENKAKU
    if ch.isascii() and (ch.isalnum() or ch in _HANKAKU_EXTRAS):
        return CharClass.HANKAKU
    if "\u4e00" <= ch <= "\u9fff" or "\u3400" <= ch <= "\u4dbf" or ch in _KANJI_EXTRAS:
        return CharClass.KANJI
    if ch in _HANKAKU_TERMINATORS:
        return CharClass.HANKAKU_TERMINATE
    return CharClass.OTHER


@dataclass(frozen=True, slots=True)
class RubyBasePolicy:
    """Which characters may form an implicit ruby base.

    By default any contiguous run of kanji and katakana qualifies. With
    ``same_class`` set, the run is further limited to the class of the
    character nearest the ruby marker.
    """

    classes: frozenset[CharClass] = field(
        default_factory=lambda: frozenset({CharClass.KANJI, CharClass.KATAKANA})
    )
    same_class: bool = False

    @classmethod
    def same_class_run(cls) -> RubyBasePolicy:
        return cls(
            classes=frozenset(c for c in CharClass if c is not CharClass.OTHER),
            same_class=True,
        )

    def admits(self, char_class: CharClass, run_class: CharClass | None = None) -> bool:
        if char_class not in self.classes:
            return False
        return not self.same_class or run_class is None or char_class is run_class


DEFAULT_POLICY = RubyBasePolicy()


def trailing_run(
    text: str,
    policy: RubyBasePolicy = DEFAULT_POLICY,
    run_class: CharClass | None = None,
) -> tuple[str, CharClass | None]:
    """Return the longest admissible suffix of *text* and the run's class."""
    start = len(text)
    while start > 0:
        char_class = classify(text[start - 1])
        if not policy.admits(char_class, run_class):
            break
        run_class = run_class or char_class
        start -= 1
    return text[start:], run_class


def infer_base(preceding_text: str, policy: RubyBasePolicy = DEFAULT_POLICY) -> str:
    """Infer the ruby base from the text just before a ``《``.

    >>> infer_base("吾輩")
    '吾輩'
    >>> infer_base("私の東京")
    '東京'
    """
    return trailing_run(preceding_text, policy)[0]
