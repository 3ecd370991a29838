"""Line tokenizer for the bracket notation.

Markers recognised inside a line:

- ``｜`` explicit ruby base, ``《…》`` ruby reading
- ``※［＃…］`` gaiji escape
- ``〔…〕`` accent decomposition (only when it holds an accent mark); markup
  inside it is flattened first
- ``［＃…］`` annotation command

Gaiji and accent escapes are resolved here; annotation commands are passed on
untouched.
"""

from __future__ import annotations

from dataclasses import dataclass

from .accent import has_accent_mark, split_accents
from .gaiji import resolve_gaiji
from .ruby import DEFAULT_POLICY, CharClass, RubyBasePolicy, trailing_run

RUBY_PREFIX = "｜"
RUBY_BEGIN = "《"
RUBY_END = "》"
COMMAND_BEGIN = "［"
COMMAND_END = "］"
IGETA = "＃"
GAIJI_MARK = "※"
ACCENT_BEGIN = "〔"
ACCENT_END = "〕"

_SPECIAL = frozenset((RUBY_PREFIX, RUBY_BEGIN, GAIJI_MARK, COMMAND_BEGIN, ACCENT_BEGIN))


@dataclass(frozen=True, slots=True)
class PlainText:
    text: str


@dataclass(frozen=True, slots=True)
class RubyOpen:
    pass


@dataclass(frozen=True, slots=True)
class RubyClose:
    reading: str


@dataclass(frozen=True, slots=True)
class GaijiEscape:
    char: str
    description: str


@dataclass(frozen=True, slots=True)
class AccentEscape:
    parts: tuple[tuple[str, bool], ...]


@dataclass(frozen=True, slots=True)
class AnnotationCommand:
    text: str


Token = PlainText | RubyOpen | RubyClose | GaijiEscape | AccentEscape | AnnotationCommand


def tokenize(line: str, policy: RubyBasePolicy = DEFAULT_POLICY) -> list[Token]:
    """Scan one line into tokens. Pure; malformed markers degrade to text."""
    tokens: list[Token] = []
    buffer: list[str] = []
    explicit_open = False
    i = 0

    def flush() -> None:
        if buffer:
            tokens.append(PlainText("".join(buffer)))
            buffer.clear()

    while i < len(line):
        ch = line[i]
        if ch not in _SPECIAL:
            buffer.append(ch)
            i += 1
            continue

        if ch == RUBY_PREFIX:
            begin = line.find(RUBY_BEGIN, i + 1)
            if begin == -1 or line.find(RUBY_END, begin + 1) == -1:
                buffer.append(ch)
                i += 1
                continue
            flush()
            tokens.append(RubyOpen())
            explicit_open = True
            i += 1
            continue

        if ch == RUBY_BEGIN:
            close = line.find(RUBY_END, i + 1)
            if close == -1:
                buffer.append(ch)
                i += 1
                continue
            flush()
            if not explicit_open:
                _open_implicit_ruby(tokens, policy)
            tokens.append(RubyClose(flatten_markup(line[i + 1:close], policy)))
            explicit_open = False
            i = close + 1
            continue

        if ch == GAIJI_MARK and line.startswith(COMMAND_BEGIN + IGETA, i + 1):
            close = _balanced_close(line, i + 3)
            if close == -1:
                buffer.append(ch)
                i += 1
                continue
            flush()
            body = line[i + 3:close]
            tokens.append(GaijiEscape(resolve_gaiji(body), body))
            i = close + 1
            continue

        if ch == COMMAND_BEGIN and line.startswith(IGETA, i + 1):
            close = _balanced_close(line, i + 2)
            if close == -1:
                buffer.append(ch)
                i += 1
                continue
            flush()
            tokens.append(AnnotationCommand(line[i + 2:close]))
            i = close + 1
            continue

        if ch == ACCENT_BEGIN:
            close = line.find(ACCENT_END, i + 1)
            inner = flatten_markup(line[i + 1:close], policy) if close != -1 else ""
            if close == -1 or not has_accent_mark(inner):
                buffer.append(ch)
                i += 1
                continue
            parts = split_accents(inner)
            if any(is_accent for _, is_accent in parts):
                flush()
                tokens.append(AccentEscape(tuple(parts)))
            else:
                buffer.append(inner)
            i = close + 1
            continue

        buffer.append(ch)
        i += 1

    flush()
    return tokens


def _balanced_close(line: str, start: int) -> int:
    """Index of the ``］`` closing a command body starting at *start*, or -1."""
    depth = 1
    for index in range(start, len(line)):
        ch = line[index]
        if ch == COMMAND_BEGIN:
            depth += 1
        elif ch == COMMAND_END:
            depth -= 1
            if depth == 0:
                return index
    return -1


def _open_implicit_ruby(tokens: list[Token], policy: RubyBasePolicy) -> None:
    """Insert a RubyOpen before the inferred base at the end of *tokens*.

    Gaiji count as kanji. A previous ruby, command or accent escape ends the
    scan. Nothing is inserted when no base characters precede the marker.
    """
    run_class: CharClass | None = None
    index = len(tokens)
    while index > 0:
        token = tokens[index - 1]
        if isinstance(token, GaijiEscape):
            if not policy.admits(CharClass.KANJI, run_class):
                break
            run_class = run_class or CharClass.KANJI
            index -= 1
            continue
        if not isinstance(token, PlainText):
            break
        span, run_class = trailing_run(token.text, policy, run_class)
        if not span:
            break
        if len(span) < len(token.text):
            tokens[index - 1] = PlainText(token.text[:-len(span)])
            tokens.insert(index, PlainText(span))
            break
        index -= 1

    if index < len(tokens):
        tokens.insert(index, RubyOpen())


def flatten_markup(text: str, policy: RubyBasePolicy) -> str:
    """Reduce marked-up text to the characters it stands for.

    Commands are dropped and ruby keeps only its base.
    """
    parts: list[str] = []
    for token in tokenize(text, policy):
        if isinstance(token, PlainText):
            parts.append(token.text)
        elif isinstance(token, GaijiEscape):
            parts.append(token.char)
        elif isinstance(token, AccentEscape):
            parts.extend(segment for segment, _ in token.parts)
    return "".join(parts)
