"""Input handling around the converter: decoding, zip archives, body extraction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from zipfile import BadZipFile, ZipFile

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"
_ZIP_MAGIC = b"PK\x03\x04"
_COLOPHON_PREFIX = "底本："
_BODY_END = "［＃本文終わり］"
_LEGEND_RULE = "---"


@dataclass(slots=True)
class HeaderInfo:
    title: str | None = None
    original_title: str | None = None
    subtitle: str | None = None
    author: str | None = None
    translator: str | None = None
    editor: str | None = None

    def html_title(self) -> str:
        parts = [self.author, self.translator, self.editor, self.title, self.original_title, self.subtitle]
        return " ".join(part for part in parts if part)


def decode_text(data: bytes) -> str:
    """Decode UTF-8 (with or without BOM), falling back to Shift_JIS."""
    if data.startswith(_UTF8_BOM):
        data = data[len(_UTF8_BOM):]
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("input is not UTF-8, decoding as Shift_JIS")
        return data.decode("cp932", errors="replace")


def is_zip(data: bytes) -> bool:
    return data.startswith(_ZIP_MAGIC)


def read_zip_text(path: Path) -> bytes:
    """Return the raw bytes of the first ``.txt`` member of a zip archive."""
    try:
        with ZipFile(path) as zf:
            for info in zf.infolist():
                if not info.is_dir() and info.filename.lower().endswith(".txt"):
                    logger.debug("reading %s from %s", info.filename, path)
                    return zf.read(info)
    except BadZipFile as exc:
        raise ValueError(f"Not a readable zip archive: {path}") from exc
    raise ValueError(f"No .txt file found in archive: {path}")


def extract_header(lines: list[str]) -> HeaderInfo:
    """Interpret the lines before the first blank line as title/author."""
    header: list[str] = []
    for line in lines:
        if not line:
            break
        header.append(line)

    info = HeaderInfo()
    if not header:
        return info
    info.title = header[0]
    if len(header) == 1:
        return info

    rest = header[1:]
    _assign_person(info, rest[-1])
    middle = rest[:-1]
    if middle and info.author is None:
        info.author = middle.pop()
    if middle and _is_original_title(middle[0]):
        info.original_title = middle.pop(0)
    if middle:
        info.subtitle = middle[0]
    return info


def split_body(text: str) -> tuple[HeaderInfo, str]:
    """Separate the header, legend and colophon from the body text."""
    lines = text.splitlines()
    info = extract_header(lines)

    body: list[str] = []
    section = "header"
    for line in lines:
        if section == "header":
            if not line:
                section = "after_header"
        elif section == "after_header":
            if line.startswith(_LEGEND_RULE):
                section = "legend"
            elif line:
                if line.startswith(_COLOPHON_PREFIX):
                    break
                body.append(line)
                section = "body"
        elif section == "legend":
            if line.startswith(_LEGEND_RULE):
                section = "body"
        else:
            if line.startswith(_COLOPHON_PREFIX) or line == _BODY_END:
                break
            body.append(line)

    return info, "\n".join(body)


def _assign_person(info: HeaderInfo, line: str) -> None:
    if line.endswith(("校訂", "編", "編集")):
        info.editor = line
    elif line.endswith("訳"):
        info.translator = line
    else:
        info.author = line


def _is_original_title(line: str) -> bool:
    return all(
        ch.isascii() or "\u3000" <= ch <= "\u303f" or "\uff00" <= ch <= "\uffef" for ch in line
    )
