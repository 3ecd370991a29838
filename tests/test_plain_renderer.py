from __future__ import annotations

import pytest

from aozorize import parse, render_plain
from aozorize.parser.base import BlockKind, DecoratedBlock, Document, IndentBlock, Paragraph, Text


def test_explicit_ruby_keeps_base() -> None:
    assert render_plain(parse("｜東京《とうきょう》")) == "東京"


def test_implicit_ruby_keeps_base() -> None:
    assert render_plain(parse("吾輩《わがはい》は猫である")) == "吾輩は猫である"


def test_gaiji_resolved() -> None:
    assert render_plain(parse("※［＃「丸印」、U+25CB］")) == "○"
    assert render_plain(parse("※［＃「どこにもない字」］")) == "〓"


def test_style_command_removed() -> None:
    assert render_plain(parse("猫である［＃「である」に傍点］")) == "猫である"


def test_accent_composed() -> None:
    assert render_plain(parse("〔cafe'〕")) == "café"


def test_markup_inside_accent_escape() -> None:
    assert render_plain(parse("〔e'［＃x］〕")) == "é"
    assert render_plain(parse("〔※［＃「丸印」、U+25CB］'〕")) == "○'"


def test_annotations_dropped() -> None:
    text = "［＃３字下げ］学［＃レ］而［＃（シテ）］［＃縦中横］12［＃縦中横終わり］［＃改ページ］"
    assert render_plain(parse(text)) == "学而12"


def test_blocks_one_per_line() -> None:
    text = "\n".join([
        "第一章［＃「第一章」は大見出し］",
        "",
        "［＃ここから２字下げ］",
        "一行目",
        "二行目",
        "［＃ここで字下げ終わり］",
        "",
        "［＃地付き］署名",
    ])
    assert render_plain(parse(text)) == "第一章\n一行目\n二行目\n署名"


def test_nested_auto_close_loses_nothing() -> None:
    text = "［＃ここから２字下げ］\n外\n［＃ここから４字下げ］\n内\n［＃ここで字下げ終わり］\n後"
    assert render_plain(parse(text)) == "外\n内\n後"


def test_decorations_keep_their_text() -> None:
    text = "\n".join([
        "猫［＃「猫」の左に傍点］と犬［＃「犬」は罫囲み］",
        "本文［＃割り注］注［＃割り注終わり］大［＃「大」は大きな文字］",
        "東京［＃「東京」の左に「とうきょう」のルビ］",
        "［＃ここから２字下げ、折り返して３字下げ］",
        "項目",
        "［＃ここで字下げ終わり］",
        "［＃ここから太字］",
        "強調",
        "［＃ここで太字終わり］",
    ])
    assert render_plain(parse(text)) == "猫と犬\n本文注大\n東京\n項目\n強調"


def test_hand_built_document() -> None:
    doc = Document(blocks=(IndentBlock(1, [Paragraph([Text("a")]), Paragraph([Text("b")])]),))
    assert render_plain(doc) == "a\nb"
    doc = Document(blocks=(DecoratedBlock(BlockKind.CAPTION, [Paragraph([Text("c")])]),))
    assert render_plain(doc) == "c"


def test_empty_document() -> None:
    assert render_plain(parse("")) == ""


@pytest.mark.parametrize(
    "text",
    [
        "吾輩《わがはい》は猫である。名前はまだ無い。",
        "｜東京《とうきょう》と｜京都《きょうと》\n\n［＃２字下げ］※［＃「丸印」、U+25CB］印",
        "猫［＃「猫」に傍点］\n　\n［＃ここから２字下げ］\n〔cafe'〕\n",
        "｜東京《",
        "漢《かん》《よみ》",
        "［＃太字］重要",
        "〔e'［＃x］〕と〔※［＃「丸印」、U+25CB］'〕",
        "〔cafe'［＃「cafe」に傍点］〕",
        "［＃注記付き］銘々［＃「めいめい」の注記付き終わり］\n［＃ここから罫囲み］\n囲み\n［＃ここで罫囲み終わり］",
    ],
)
def test_strip_is_idempotent(text: str) -> None:
    once = render_plain(parse(text))
    assert render_plain(parse(once)) == once
