"""aozorize CLI entrypoint."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from aozorize.parser.builder import parse
from aozorize.parser.ruby import RubyBasePolicy
from aozorize.renderer.html_renderer import HTMLOptions, HTMLRenderer
from aozorize.renderer.plain_renderer import render_plain
from aozorize.source import decode_text, is_zip, read_zip_text, split_body

_INPUT = click.argument(
    "input_path", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
_OUTPUT = click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Output path (default: stdout)")
_ZIP = click.option("--zip", "from_zip", is_flag=True, help="Read the first .txt file of a zip archive")
_RUBY = click.option(
    "--ruby-base",
    type=click.Choice(["kanji-katakana", "same-class"], case_sensitive=False),
    default="kanji-katakana",
    show_default=True,
    help="Rule for inferring an implicit ruby base",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--verbose", "-v", is_flag=True, help="Log recovered markup problems")
def main(verbose: bool) -> None:
    """Convert Aozora Bunko annotated text to plain text or HTML."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@_INPUT
@_OUTPUT
@_ZIP
@_RUBY
@click.option("--no-extract", is_flag=True, help="Convert the whole input, keeping header and colophon")
def strip(input_path: Path | None, output: Path | None, from_zip: bool, ruby_base: str, no_extract: bool) -> None:
    """Strip ruby and annotations, leaving plain text."""
    text = _load_text(input_path, from_zip)
    if not no_extract:
        _, text = split_body(text)

    document = parse(text, ruby_policy=_ruby_policy(ruby_base))
    plain = render_plain(document)
    _write(output, (plain + "\n" if plain else "").encode("utf-8"))
    _report(document.warnings)


@main.command()
@_INPUT
@_OUTPUT
@_ZIP
@_RUBY
@click.option("--title", type=str, default=None, help="Override document title")
@click.option("--gaiji-dir", type=str, default=None, help="Render gaiji as images from this directory")
@click.option("--css", "css_files", multiple=True, help="Stylesheet to link (repeatable)")
@click.option(
    "--encoding",
    type=click.Choice(["utf-8", "shift_jis"], case_sensitive=False),
    default="utf-8",
    show_default=True,
    help="Output encoding",
)
def html(
    input_path: Path | None,
    output: Path | None,
    from_zip: bool,
    ruby_base: str,
    title: str | None,
    gaiji_dir: str | None,
    css_files: tuple[str, ...],
    encoding: str,
) -> None:
    """Convert annotated text into an HTML page."""
    header, body = split_body(_load_text(input_path, from_zip))
    document = parse(body, ruby_policy=_ruby_policy(ruby_base))

    encoding = encoding.lower()
    options = HTMLOptions(
        title=title or header.html_title() or None,
        gaiji_image_dir=gaiji_dir,
        css_files=css_files,
        charset="Shift_JIS" if encoding == "shift_jis" else "utf-8",
    )
    page = HTMLRenderer().render(document, options)
    codec = "cp932" if encoding == "shift_jis" else "utf-8"
    _write(output, page.encode(codec, errors="xmlcharrefreplace"))
    _report(document.warnings)


def _load_text(input_path: Path | None, from_zip: bool) -> str:
    try:
        if from_zip:
            if input_path is None:
                raise click.ClickException("--zip requires an input file")
            return decode_text(read_zip_text(input_path))
        data = input_path.read_bytes() if input_path is not None else sys.stdin.buffer.read()
    except (OSError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    if is_zip(data):
        raise click.ClickException("Input looks like a zip archive; pass --zip")
    return decode_text(data)


def _ruby_policy(name: str) -> RubyBasePolicy:
    if name.lower() == "same-class":
        return RubyBasePolicy.same_class_run()
    return RubyBasePolicy()


def _write(output: Path | None, data: bytes) -> None:
    if output is None:
        sys.stdout.flush()
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)
    click.echo(f"Rendered: {output}", err=True)


def _report(warnings: tuple[str, ...]) -> None:
    if warnings:
        click.echo(f"{len(warnings)} markup problem(s) recovered", err=True)


if __name__ == "__main__":  # pragma: no cover
    main()
