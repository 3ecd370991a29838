"""Assemble tokens and directives into a Document tree.

Block scopes opened by ``ここから…`` commands live on an explicit stack of
frames; frame 0 is the document root. Paragraph text accumulates in a buffer
that is flushed on blank lines and block boundaries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from .base import (
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
    Tcy,
    Text,
    inline_text,
)
from .directives import (
    AnnotationEnd,
    AnnotationStart,
    BlockEnd,
    BlockStart,
    Directive,
    FontSizeEnd,
    FontSizeRef,
    FontSizeStart,
    HeadingEnd,
    HeadingRef,
    HeadingStart,
    InlineStyle,
    KaeritenMark,
    LineChitsuki,
    LineIndent,
    OkuriganaMark,
    RubyRef,
    StyleEnd,
    StyleStart,
    TcyEnd,
    TcyRef,
    TcyStart,
    Unrecognized,
    interpret,
)
from .gaiji import GETA
from .ruby import DEFAULT_POLICY, RubyBasePolicy
from .tokenizer import (
    AccentEscape,
    AnnotationCommand,
    GaijiEscape,
    PlainText,
    RubyClose,
    RubyOpen,
    flatten_markup,
    tokenize,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Frame:
    kind: BlockKind | None
    level: int = 0
    wrap: int = 0
    children: list[BlockNode] = field(default_factory=list)


@dataclass(slots=True)
class _Line:
    """Inline content of the source line being processed."""

    nodes: list[InlineNode] = field(default_factory=list)
    ruby_start: int | None = None
    marks: list[tuple[object, int]] = field(default_factory=list)
    heading: tuple[HeadingLevel, HeadingStyle] | None = None
    indent: int | None = None
    chitsuki: int | None = None

    def append_text(self, text: str) -> None:
        """Append text, never merging across a pending ruby or range start."""
        at = len(self.nodes)
        if self.ruby_start == at or any(index == at for _, index in self.marks):
            if text:
                self.nodes.append(Text(text))
        else:
            _append_text(self.nodes, text)


@dataclass(slots=True)
class ParserState:
    frames: list[_Frame] = field(default_factory=lambda: [_Frame(kind=None)])
    paragraph: list[InlineNode] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        logger.debug(message)
        self.warnings.append(message)


class DocumentBuilder:
    """Build a Document from canonical text; holds configuration only."""

    def __init__(self, ruby_policy: RubyBasePolicy | None = None) -> None:
        self.ruby_policy = ruby_policy or DEFAULT_POLICY

    def build(self, text: str) -> Document:
        state = ParserState()
        for number, line in enumerate(text.splitlines(), start=1):
            self._feed_line(state, line, number)
        self._flush_paragraph(state)
        while len(state.frames) > 1:
            state.warn(f"auto-closed {state.frames[-1].kind.value} block at end of input")
            self._close_top(state)
        return Document(blocks=tuple(state.frames[0].children), warnings=tuple(state.warnings))

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    def _feed_line(self, state: ParserState, raw: str, number: int) -> None:
        if not raw.strip():
            self._flush_paragraph(state)
            return

        line = _Line()
        for token in tokenize(raw, self.ruby_policy):
            if isinstance(token, PlainText):
                line.append_text(token.text)
            elif isinstance(token, RubyOpen):
                line.ruby_start = len(line.nodes)
            elif isinstance(token, RubyClose):
                self._close_ruby(state, line, token.reading, number)
            elif isinstance(token, GaijiEscape):
                if token.char == GETA:
                    state.warn(f"line {number}: unresolved gaiji {token.description!r}")
                line.nodes.append(Gaiji(token.char, token.description))
            elif isinstance(token, AccentEscape):
                for segment, is_accent in token.parts:
                    if is_accent:
                        line.nodes.append(AccentChar(segment))
                    else:
                        line.append_text(segment)
            elif isinstance(token, AnnotationCommand):
                line = self._apply(state, line, interpret(token.text), number)
        self._end_line(state, line)

    def _close_ruby(self, state: ParserState, line: _Line, reading: str, number: int) -> None:
        start = line.ruby_start if line.ruby_start is not None else len(line.nodes)
        base = "".join(inline_text(node) for node in line.nodes[start:])
        if not base:
            state.warn(f"line {number}: ruby {reading!r} has no base")
        del line.nodes[start:]
        line.nodes.append(Ruby(base=base, reading=reading))
        line.ruby_start = None

    def _end_line(self, state: ParserState, line: _Line) -> None:
        if not line.nodes:
            return
        if line.heading is None and line.indent is None and line.chitsuki is None:
            if state.paragraph:
                state.paragraph.append(LineBreak())
            state.paragraph.extend(line.nodes)
            return

        self._flush_paragraph(state)
        block: BlockNode
        if line.heading is not None:
            level, style = line.heading
            block = Heading(level=level, children=line.nodes, style=style)
        else:
            block = Paragraph(children=line.nodes)
        if line.indent is not None:
            block = IndentBlock(level=line.indent, children=[block])
        if line.chitsuki is not None:
            block = ChitsukiBlock(width=line.chitsuki, children=[block])
        state.frames[-1].children.append(block)

    # ------------------------------------------------------------------
    # Directives
    # ------------------------------------------------------------------

    def _apply(self, state: ParserState, line: _Line, directive: Directive, number: int) -> _Line:
        if isinstance(directive, InlineStyle):
            kind = directive.kind
            if not self._wrap_target(state, line, directive.target, lambda nodes: Styled(kind, nodes)):
                state.warn(f"line {number}: style target {directive.target!r} not found")
        elif isinstance(directive, TcyRef):
            wrapped = self._wrap_target(
                state, line, directive.target, lambda nodes: Tcy("".join(inline_text(n) for n in nodes))
            )
            if not wrapped:
                state.warn(f"line {number}: tate-chu-yoko target {directive.target!r} not found")
        elif isinstance(directive, FontSizeRef):
            size, step = directive.kind, directive.step
            if not self._wrap_target(state, line, directive.target, lambda nodes: FontSize(size, step, nodes)):
                state.warn(f"line {number}: font size target {directive.target!r} not found")
        elif isinstance(directive, RubyRef):
            reading = flatten_markup(directive.reading, self.ruby_policy)
            left = directive.left
            wrapped = self._wrap_target(
                state, line, directive.target, lambda nodes: _ruby_over(nodes, reading, left)
            )
            if not wrapped:
                state.warn(f"line {number}: ruby target {directive.target!r} not found")
        elif isinstance(directive, HeadingRef):
            if _find_span(line.nodes, directive.target) is None:
                state.warn(f"line {number}: heading target {directive.target!r} not found")
            else:
                line.heading = (directive.level, directive.style)
        elif isinstance(directive, BlockStart):
            self._end_line(state, line)
            self._flush_paragraph(state)
            state.frames.append(_Frame(kind=directive.kind, level=directive.level, wrap=directive.wrap))
            return _Line()
        elif isinstance(directive, BlockEnd):
            self._end_line(state, line)
            self._flush_paragraph(state)
            self._pop_block(state, directive.kind, number)
            return _Line()
        elif isinstance(directive, LineIndent):
            line.indent = directive.level
        elif isinstance(directive, LineChitsuki):
            line.chitsuki = directive.width
        elif isinstance(directive, TcyStart):
            line.marks.append(("tcy", len(line.nodes)))
        elif isinstance(directive, StyleStart):
            line.marks.append((directive.kind, len(line.nodes)))
        elif isinstance(directive, HeadingStart):
            line.marks.append((directive.level, len(line.nodes)))
            line.heading = (directive.level, directive.style)
        elif isinstance(directive, TcyEnd):
            start = _pop_mark(line, "tcy")
            if start is None:
                state.warn(f"line {number}: stray tate-chu-yoko end")
            else:
                text = "".join(inline_text(node) for node in line.nodes[start:])
                _collapse(line, start, len(line.nodes), Tcy(text))
        elif isinstance(directive, StyleEnd):
            start = _pop_mark(line, directive.kind)
            if start is None:
                state.warn(f"line {number}: stray {directive.kind.value} end")
            else:
                _collapse(line, start, len(line.nodes), Styled(directive.kind, line.nodes[start:]))
        elif isinstance(directive, FontSizeStart):
            line.marks.append(((directive.kind, directive.step), len(line.nodes)))
        elif isinstance(directive, FontSizeEnd):
            mark = _pop_size_mark(line, directive.kind)
            if mark is None:
                state.warn(f"line {number}: stray font size end")
            else:
                start, step = mark
                _collapse(line, start, len(line.nodes), FontSize(directive.kind, step, line.nodes[start:]))
        elif isinstance(directive, AnnotationStart):
            line.marks.append((("annotation", directive.left), len(line.nodes)))
        elif isinstance(directive, AnnotationEnd):
            start = _pop_mark(line, ("annotation", directive.left))
            if start is None:
                state.warn(f"line {number}: stray annotation end")
            else:
                reading = flatten_markup(directive.reading, self.ruby_policy)
                _collapse(line, start, len(line.nodes), _ruby_over(line.nodes[start:], reading, directive.left))
        elif isinstance(directive, HeadingEnd):
            if _pop_mark(line, directive.level) is None:
                state.warn(f"line {number}: stray heading end")
        elif isinstance(directive, KaeritenMark):
            line.nodes.append(Kaeriten(directive.text))
        elif isinstance(directive, OkuriganaMark):
            line.nodes.append(Okurigana(directive.text))
        elif isinstance(directive, Unrecognized):
            state.warn(f"line {number}: dropped annotation {directive.text!r}")
        return line

    def _wrap_target(
        self,
        state: ParserState,
        line: _Line,
        target: str,
        make: Callable[[list[InlineNode]], InlineNode],
    ) -> bool:
        """Wrap the nearest preceding occurrence of *target*.

        The current line is searched first, then the paragraph buffer.
        """
        span = _find_span(line.nodes, target)
        if span is not None:
            start = _split_at(line.nodes, span[0])
            end = _split_at(line.nodes, span[1])
            _collapse(line, start, end, make(line.nodes[start:end]))
            return True

        span = _find_span(state.paragraph, target)
        if span is not None:
            nodes = state.paragraph
            start = _split_at(nodes, span[0])
            end = _split_at(nodes, span[1])
            nodes[start:end] = [make(nodes[start:end])]
            return True
        return False

    # ------------------------------------------------------------------
    # Block stack
    # ------------------------------------------------------------------

    def _flush_paragraph(self, state: ParserState) -> None:
        if state.paragraph:
            state.frames[-1].children.append(Paragraph(children=state.paragraph))
            state.paragraph = []

    def _pop_block(self, state: ParserState, kind: BlockKind, number: int) -> None:
        for index in range(len(state.frames) - 1, 0, -1):
            if _closes(kind, state.frames[index].kind):
                break
        else:
            state.warn(f"line {number}: discarded unmatched {kind.value} end")
            return
        while len(state.frames) > index + 1:
            state.warn(f"line {number}: auto-closed {state.frames[-1].kind.value} block")
            self._close_top(state)
        self._close_top(state)

    def _close_top(self, state: ParserState) -> None:
        frame = state.frames.pop()
        parent = state.frames[-1]
        if not frame.children:
            return
        if frame.kind is BlockKind.CHITSUKI:
            parent.children.append(ChitsukiBlock(width=frame.level, children=frame.children))
        elif frame.kind is not BlockKind.JISAGE:
            parent.children.append(
                DecoratedBlock(kind=frame.kind, children=frame.children, level=frame.level, wrap=frame.wrap)
            )
        elif frame.level > 0:
            parent.children.append(IndentBlock(level=frame.level, children=frame.children))
        else:
            parent.children.extend(frame.children)


def parse(canonical_text: str, *, ruby_policy: RubyBasePolicy | None = None) -> Document:
    """Parse annotated text into a Document. Never raises on malformed markup."""
    return DocumentBuilder(ruby_policy=ruby_policy).build(canonical_text)


# ---------------------------------------------------------------------------
# Inline helpers
# ---------------------------------------------------------------------------

def _append_text(nodes: list[InlineNode], text: str) -> None:
    if not text:
        return
    if nodes and isinstance(nodes[-1], Text):
        nodes[-1] = Text(nodes[-1].text + text)
    else:
        nodes.append(Text(text))


def _locate(nodes: list[InlineNode], pos: int) -> tuple[int, int]:
    """Return (node index, offset within node) for text position *pos*."""
    start = 0
    for index, node in enumerate(nodes):
        length = len(inline_text(node))
        if pos < start + length:
            return index, pos - start
        start += length
    return len(nodes), 0


def _splittable(nodes: list[InlineNode], pos: int) -> bool:
    index, offset = _locate(nodes, pos)
    return offset == 0 or isinstance(nodes[index], Text)


def _find_span(nodes: list[InlineNode], target: str) -> tuple[int, int] | None:
    """Nearest (last) occurrence of *target* whose edges fall on splittable points."""
    if not target:
        return None
    joined = "".join(inline_text(node) for node in nodes)
    end = len(joined)
    while True:
        pos = joined.rfind(target, 0, end)
        if pos == -1:
            return None
        if _splittable(nodes, pos) and _splittable(nodes, pos + len(target)):
            return pos, pos + len(target)
        end = pos + len(target) - 1


def _split_at(nodes: list[InlineNode], pos: int) -> int:
    """Split a Text node at *pos* if needed; return the index starting there."""
    index, offset = _locate(nodes, pos)
    if offset:
        text = nodes[index].text
        nodes[index:index + 1] = [Text(text[:offset]), Text(text[offset:])]
        return index + 1
    return index


def _collapse(line: _Line, start: int, end: int, node: InlineNode) -> None:
    """Replace ``line.nodes[start:end]`` by *node*, keeping pending indexes valid."""
    removed = end - start - 1
    line.nodes[start:end] = [node]

    def shift(index: int) -> int:
        if index >= end:
            return index - removed
        return min(index, start)

    if line.ruby_start is not None:
        line.ruby_start = shift(line.ruby_start)
    line.marks = [(key, shift(index)) for key, index in line.marks]


def _pop_mark(line: _Line, key: object) -> int | None:
    for position in range(len(line.marks) - 1, -1, -1):
        mark_key, index = line.marks[position]
        if mark_key == key:
            del line.marks[position:]
            return index
    return None


def _pop_size_mark(line: _Line, kind: SizeKind) -> tuple[int, int] | None:
    """Pop the latest font size start of *kind*; return (index, step)."""
    for position in range(len(line.marks) - 1, -1, -1):
        key, index = line.marks[position]
        if isinstance(key, tuple) and key[0] is kind:
            del line.marks[position:]
            return index, key[1]
    return None


def _ruby_over(nodes: list[InlineNode], reading: str, left: bool) -> Ruby:
    return Ruby(base="".join(inline_text(node) for node in nodes), reading=reading, left=left)


def _closes(end: BlockKind, frame: BlockKind | None) -> bool:
    """An indent end also closes a hanging indent."""
    return frame is end or (end is BlockKind.JISAGE and frame is BlockKind.BURASAGE)
