"""Render a Document into a standalone HTML page."""

from __future__ import annotations

import html
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from aozorize.parser.base import (
    AccentChar,
    BlockKind,
    BlockNode,
    ChitsukiBlock,
    DecoratedBlock,
    Document,
    FontSize,
    Gaiji,
    Heading,
    HeadingLevel,
    HeadingStyle,
    IndentBlock,
    InlineNode,
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

_HEADING_TAGS = {
    HeadingLevel.LARGE: "h3",
    HeadingLevel.MEDIUM: "h4",
    HeadingLevel.SMALL: "h5",
}

_STYLE_TAGS = {
    StyleKind.BOLD: "span",
    StyleKind.ITALIC: "span",
    StyleKind.SUBSCRIPT: "sub",
    StyleKind.SUPERSCRIPT: "sup",
    StyleKind.KEIGAKOMI: "span",
    StyleKind.YOKOGUMI: "span",
    StyleKind.CAPTION: "span",
    StyleKind.WARICHU: "span",
}

_FONT_SIZES = {
    SizeKind.LARGER: ("large", "x-large", "xx-large"),
    SizeKind.SMALLER: ("small", "x-small", "xx-small"),
}

# Block kinds rendered as a div carrying only a class.
_PLAIN_DIVS = {
    BlockKind.YOKOGUMI: "yokogumi",
    BlockKind.FUTOJI: "futoji",
    BlockKind.SHATAI: "shatai",
    BlockKind.CAPTION: "caption",
    BlockKind.WARIGAKI: "warichu",
}


@dataclass(frozen=True, slots=True)
class HTMLOptions:
    title: str | None = None
    gaiji_image_dir: str | Path | None = None
    css_files: tuple[str, ...] = ()
    charset: str = "utf-8"


class HTMLRenderer:
    """Render the Document tree through the page template."""

    def __init__(self, template_path: Path | None = None) -> None:
        if template_path is None:
            template_path = Path(__file__).resolve().parent.parent / "template" / "aozora.html"

        loader = FileSystemLoader(str(template_path.parent))
        self._env = Environment(loader=loader, autoescape=True, trim_blocks=True, lstrip_blocks=True)
        self._template_name = template_path.name

    def render(self, document: Document, options: HTMLOptions | None = None) -> str:
        options = options or HTMLOptions()
        body = "\n".join(self._render_block(block, options) for block in document.blocks)

        template = self._env.get_template(self._template_name)
        return template.render(
            page_title=options.title or "",
            css_files=list(options.css_files),
            charset=options.charset,
            body=body,
        )

    def _render_block(self, block: BlockNode, options: HTMLOptions) -> str:
        if isinstance(block, Paragraph):
            return f"<p>{self._render_inlines(block.children, options)}</p>"

        if isinstance(block, Heading):
            tag = _HEADING_TAGS[block.level]
            css_class = f"{block.level.value}-midashi"
            if block.style is not HeadingStyle.NORMAL:
                css_class = f"{block.style.value}-{css_class}"
            return f'<{tag} class="{css_class}">{self._render_inlines(block.children, options)}</{tag}>'

        if isinstance(block, IndentBlock):
            inner = "\n".join(self._render_block(child, options) for child in block.children)
            return f'<div class="jisage_{block.level}" style="margin-left: {block.level}em">\n{inner}\n</div>'

        if isinstance(block, ChitsukiBlock):
            inner = "\n".join(self._render_block(child, options) for child in block.children)
            return (
                f'<div class="chitsuki_{block.width}" '
                f'style="text-align:right; margin-right: {block.width}em">\n{inner}\n</div>'
            )

        if isinstance(block, DecoratedBlock):
            return self._render_decorated(block, options)

        return ""

    def _render_decorated(self, block: DecoratedBlock, options: HTMLOptions) -> str:
        if block.kind is BlockKind.BURASAGE:
            return self._render_hanging(block, options)

        if block.kind is BlockKind.JIZUME and not block.level:
            opening = '<div class="jizume">'
        elif block.kind is BlockKind.JIZUME:
            opening = f'<div class="jizume_{block.level}" style="width: {block.level}em">'
        elif block.kind is BlockKind.KEIGAKOMI:
            opening = '<div class="keigakomi" style="border: solid 1px">'
        elif block.kind in (BlockKind.DAI, BlockKind.SHO):
            size = SizeKind.LARGER if block.kind is BlockKind.DAI else SizeKind.SMALLER
            opening = f"<div {_font_size_attributes(size, block.level)}>"
        else:
            opening = f'<div class="{_PLAIN_DIVS[block.kind]}">'
        inner = "\n".join(self._render_block(child, options) for child in block.children)
        return f"{opening}\n{inner}\n</div>"

    def _render_hanging(self, block: DecoratedBlock, options: HTMLOptions) -> str:
        """Hanging indent: every source line gets its own wrapper."""
        style = f"margin-left: {block.wrap}em; text-indent: {block.level - block.wrap}em;"
        rows: list[str] = []
        for child in block.children:
            if not isinstance(child, Paragraph):
                rows.append(self._render_block(child, options))
                continue
            for line in _split_lines(child.children):
                rows.append(f'<div class="burasage" style="{style}">{self._render_inlines(line, options)}</div>')
        return "\n".join(rows)

    def _render_inlines(self, nodes: list[InlineNode], options: HTMLOptions) -> str:
        parts: list[str] = []
        for index, node in enumerate(nodes):
            if isinstance(node, Styled) and node.kind is StyleKind.WARICHU:
                parts.append(self._render_warichu(nodes, index, options))
            else:
                parts.append(self._render_inline(node, options))
        return "".join(parts)

    def _render_warichu(self, nodes: list[InlineNode], index: int, options: HTMLOptions) -> str:
        """Warichu is parenthesised unless the source already brackets it."""
        before = nodes[index - 1] if index > 0 else None
        after = nodes[index + 1] if index + 1 < len(nodes) else None
        opening = "" if isinstance(before, Text) and before.text.endswith("（") else "（"
        closing = "" if isinstance(after, Text) and after.text.startswith("）") else "）"
        inner = self._render_inlines(nodes[index].children, options)
        return f'<span class="warichu">{opening}{inner}{closing}</span>'

    def _render_inline(self, node: InlineNode, options: HTMLOptions) -> str:
        if isinstance(node, Text):
            return html.escape(node.text)

        if isinstance(node, Ruby):
            opening = '<ruby class="leftrb">' if node.left else "<ruby>"
            return (
                f"{opening}<rb>{html.escape(node.base)}</rb><rp>（</rp>"
                f"<rt>{html.escape(node.reading)}</rt><rp>）</rp></ruby>"
            )

        if isinstance(node, Styled):
            tag = _STYLE_TAGS.get(node.kind, "em")
            return f'<{tag} class="{node.kind.value}">{self._render_inlines(node.children, options)}</{tag}>'

        if isinstance(node, FontSize):
            inner = self._render_inlines(node.children, options)
            return f"<span {_font_size_attributes(node.kind, node.step)}>{inner}</span>"

        if isinstance(node, Gaiji):
            if options.gaiji_image_dir is None:
                return html.escape(node.char)
            return _render_gaiji_image(node, str(options.gaiji_image_dir))

        if isinstance(node, AccentChar):
            return html.escape(node.char)

        if isinstance(node, Tcy):
            return f'<span class="tcy">{html.escape(node.text)}</span>'

        if isinstance(node, Kaeriten):
            return f'<sub class="kaeriten">{html.escape(node.text)}</sub>'

        if isinstance(node, Okurigana):
            return f'<sup class="okurigana">{html.escape(node.text)}</sup>'

        if isinstance(node, LineBreak):
            return "<br />\n"

        return ""


def render_html(document: Document, options: HTMLOptions | None = None) -> str:
    return HTMLRenderer().render(document, options)


def _render_gaiji_image(node: Gaiji, image_dir: str) -> str:
    name = "-".join(f"u{cp:04x}" for cp in node.codepoints)
    src = f"{image_dir.rstrip('/')}/{name}.png"
    alt = f"※({node.description or node.char})"
    return f'<img src="{html.escape(src)}" alt="{html.escape(alt)}" class="gaiji" />'


def _font_size_attributes(kind: SizeKind, step: int) -> str:
    sizes = _FONT_SIZES[kind]
    size = sizes[min(max(step, 1), len(sizes)) - 1]
    return f'class="{kind.value}{step}" style="font-size: {size};"'


def _split_lines(nodes: list[InlineNode]) -> list[list[InlineNode]]:
    lines: list[list[InlineNode]] = [[]]
    for node in nodes:
        if isinstance(node, LineBreak):
            lines.append([])
        else:
            lines[-1].append(node)
    return lines
