"""Tests for the command line interface."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest
from click.testing import CliRunner

from aozorize.cli import main

SAMPLE = "吾輩は猫である\n夏目漱石\n\n　吾輩《わがはい》は猫である。\n名前はまだ無い。\n\n底本：「夏目漱石全集」\n"


def _write_sample(tmp_path: Path, encoding: str = "utf-8") -> Path:
    path = tmp_path / "neko.txt"
    path.write_bytes(SAMPLE.encode(encoding))
    return path


# ---------------------------------------------------------------------------
# strip
# ---------------------------------------------------------------------------

def test_strip_file(tmp_path: Path) -> None:
    result = CliRunner().invoke(main, ["strip", str(_write_sample(tmp_path))])

    assert result.exit_code == 0, result.output
    assert "　吾輩は猫である。\n名前はまだ無い。\n" in result.output
    assert "夏目漱石" not in result.output
    assert "底本" not in result.output


def test_strip_shift_jis_input(tmp_path: Path) -> None:
    result = CliRunner().invoke(main, ["strip", str(_write_sample(tmp_path, "cp932"))])

    assert result.exit_code == 0, result.output
    assert "吾輩は猫である。" in result.output


def test_strip_stdin_without_extraction() -> None:
    result = CliRunner().invoke(main, ["strip", "--no-extract"], input="｜東京《とうきょう》\n")

    assert result.exit_code == 0, result.output
    assert result.output.startswith("東京\n")


def test_strip_stdout_is_bytes_without_deprecation(recwarn: pytest.WarningsRecorder) -> None:
    result = CliRunner().invoke(main, ["strip", "--no-extract"], input="本文\n")

    assert result.exit_code == 0, result.output
    assert result.stdout_bytes == "本文\n".encode("utf-8")
    assert not [w for w in recwarn if issubclass(w.category, DeprecationWarning) and "aozorize" in w.filename]


def test_strip_to_output_file(tmp_path: Path) -> None:
    out = tmp_path / "out" / "neko.txt"
    result = CliRunner().invoke(main, ["strip", str(_write_sample(tmp_path)), "-o", str(out)])

    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8") == "　吾輩は猫である。\n名前はまだ無い。\n"


def test_strip_ruby_base_option() -> None:
    result = CliRunner().invoke(
        main,
        ["strip", "--no-extract", "--ruby-base", "same-class"],
        input="カタカナ漢字《かんじ》\n",
    )

    assert result.exit_code == 0, result.output
    assert result.output.startswith("カタカナ漢字\n")


def test_strip_reports_recovered_problems() -> None:
    result = CliRunner().invoke(main, ["strip", "--no-extract"], input="本文［＃ここで字下げ終わり］\n")

    assert result.exit_code == 0
    assert "1 markup problem(s) recovered" in result.output


# ---------------------------------------------------------------------------
# html
# ---------------------------------------------------------------------------

def test_html_default_title_from_header(tmp_path: Path) -> None:
    out = tmp_path / "neko.html"
    result = CliRunner().invoke(main, ["html", str(_write_sample(tmp_path)), "-o", str(out)])

    assert result.exit_code == 0, result.output
    html = out.read_text(encoding="utf-8")
    assert "<title>夏目漱石 吾輩は猫である</title>" in html
    assert "<rb>吾輩</rb>" in html
    assert "底本" not in html


def test_html_options(tmp_path: Path) -> None:
    out = tmp_path / "neko.html"
    args = [
        "html",
        str(_write_sample(tmp_path)),
        "-o",
        str(out),
        "--title",
        "猫",
        "--css",
        "a.css",
        "--css",
        "b.css",
    ]
    result = CliRunner().invoke(main, args)

    assert result.exit_code == 0, result.output
    html = out.read_text(encoding="utf-8")
    assert "<title>猫</title>" in html
    assert 'href="a.css"' in html
    assert 'href="b.css"' in html


def test_html_shift_jis_output(tmp_path: Path) -> None:
    source = tmp_path / "in.txt"
    source.write_text("題\n著者\n\n※［＃「丸1」］と〔cafe'〕と𠮟\n", encoding="utf-8")
    out = tmp_path / "out.html"

    result = CliRunner().invoke(main, ["html", str(source), "-o", str(out), "--encoding", "shift_jis"])

    assert result.exit_code == 0, result.output
    html = out.read_bytes().decode("cp932")
    assert '<meta charset="Shift_JIS" />' in html
    assert "①" in html
    assert "&#233;" in html
    assert "&#134047;" in html


def test_html_gaiji_dir(tmp_path: Path) -> None:
    source = tmp_path / "in.txt"
    source.write_text("題\n\n※［＃「丸印」、U+25CB］\n", encoding="utf-8")

    result = CliRunner().invoke(main, ["html", str(source), "--gaiji-dir", "gaiji"])

    assert result.exit_code == 0, result.output
    assert 'src="gaiji/u25cb.png"' in result.output


# ---------------------------------------------------------------------------
# zip input and errors
# ---------------------------------------------------------------------------

def test_zip_input(tmp_path: Path) -> None:
    archive = tmp_path / "neko.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("neko.txt", SAMPLE.encode("cp932"))

    result = CliRunner().invoke(main, ["strip", "--zip", str(archive)])

    assert result.exit_code == 0, result.output
    assert "名前はまだ無い。" in result.output


def test_zip_without_flag_is_rejected(tmp_path: Path) -> None:
    archive = tmp_path / "neko.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("neko.txt", SAMPLE)

    result = CliRunner().invoke(main, ["strip", str(archive)])

    assert result.exit_code == 1
    assert "--zip" in result.output


def test_zip_flag_requires_path() -> None:
    result = CliRunner().invoke(main, ["strip", "--zip"], input="")

    assert result.exit_code == 1
    assert "requires an input file" in result.output


def test_bad_zip_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "broken.zip"
    path.write_bytes(b"not a zip")

    result = CliRunner().invoke(main, ["html", "--zip", str(path)])

    assert result.exit_code == 1
    assert "Not a readable zip archive" in result.output


def test_verbose_flag(tmp_path: Path) -> None:
    result = CliRunner().invoke(main, ["-v", "strip", str(_write_sample(tmp_path))])

    assert result.exit_code == 0, result.output
