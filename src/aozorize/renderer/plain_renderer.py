"""Render a Document as plain text: ruby readings and annotations removed."""

from __future__ import annotations

from aozorize.parser.base import (
    BlockNode,
    ChitsukiBlock,
    DecoratedBlock,
    Document,
    Heading,
    IndentBlock,
    Paragraph,
    inline_text,
)


def render_plain(document: Document) -> str:
    """Return the text of *document*, one source line per output line.

    Whitespace-only lines are omitted so that converting the output again
    yields the same text.
    """
    lines: list[str] = []
    for block in document.blocks:
        _collect_lines(block, lines)
    return "\n".join(line for line in lines if line.strip())


def _collect_lines(block: BlockNode, lines: list[str]) -> None:
    if isinstance(block, (Paragraph, Heading)):
        text = "".join(inline_text(node) for node in block.children)
        lines.extend(text.split("\n"))
    elif isinstance(block, (IndentBlock, ChitsukiBlock, DecoratedBlock)):
        for child in block.children:
            _collect_lines(child, lines)
