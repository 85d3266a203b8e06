"""
Unit tests for the Click-based CLI.

Commands are invoked through Click's test runner against books written to
a temporary directory.
"""

import zipfile

import pytest
from click.testing import CliRunner

from inkwell import __version__
from inkwell.cli.commands import cli


@pytest.fixture
def runner(monkeypatch, tmp_path):
    """Create a Click CLI test runner, isolated from INKWELL_* settings."""
    monkeypatch.chdir(tmp_path)
    for name in ("INKWELL_OUTPUT_DIR", "INKWELL_DEFAULT_FORMATS", "INKWELL_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


@pytest.fixture
def chapter_file(tmp_path):
    path = tmp_path / "single" / "chapter.md"
    path.parent.mkdir()
    path.write_text("# Lonely chapter\n\nJust one.\n", encoding="utf-8")
    return path


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_no_command_shows_help(self, runner):
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "render" in result.output

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Render Markdown books" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_options(self, runner):
        result = runner.invoke(cli, ["options"])
        assert result.exit_code == 0
        assert "Book options" in result.output
        assert "author" in result.output


class TestRenderCommand:
    """Test the render command."""

    def test_render_html(self, runner, book_dir):
        result = runner.invoke(cli, ["render", str(book_dir / "book.book"), "-f", "html"])
        assert result.exit_code == 0, result.output
        assert "✓" in result.output
        html = (book_dir / "out" / "book.html").read_text(encoding="utf-8")
        assert "A Test Book" in html

    def test_render_shows_book_information(self, runner, book_dir):
        result = runner.invoke(cli, ["render", str(book_dir / "book.book"), "-f", "html"])
        assert result.exit_code == 0, result.output
        assert "Book Information" in result.output
        assert "Jane Doe" in result.output

    def test_render_formats_from_book_file(self, runner, book_dir):
        result = runner.invoke(cli, ["render", str(book_dir / "book.book")])
        assert result.exit_code == 0, result.output
        assert (book_dir / "out" / "book.html").exists()

    def test_render_several_formats(self, runner, book_dir):
        result = runner.invoke(
            cli, ["render", str(book_dir / "book.book"), "-f", "epub", "-f", "tex", "-f", "odt"]
        )
        assert result.exit_code == 0, result.output
        assert zipfile.is_zipfile(book_dir / "book.epub")
        assert zipfile.is_zipfile(book_dir / "book.odt")
        assert "\\begin{document}" in (book_dir / "book.tex").read_text(encoding="utf-8")

    def test_output_file(self, runner, book_dir, tmp_path):
        target = tmp_path / "dist" / "my.epub"
        result = runner.invoke(
            cli, ["render", str(book_dir / "book.book"), "-f", "epub", "-o", str(target)]
        )
        assert result.exit_code == 0, result.output
        assert zipfile.is_zipfile(target)

    def test_output_dir_from_settings(self, runner, book_dir, tmp_path, monkeypatch):
        output_dir = tmp_path / "dist" / "books"
        monkeypatch.setenv("INKWELL_OUTPUT_DIR", str(output_dir))
        result = runner.invoke(cli, ["render", str(book_dir / "book.book"), "-f", "epub"])
        assert result.exit_code == 0, result.output
        assert zipfile.is_zipfile(output_dir / "book.epub")

    def test_render_html_directory(self, runner, book_dir):
        result = runner.invoke(cli, ["render", str(book_dir / "book.book"), "-f", "html.dir"])
        assert result.exit_code == 0, result.output
        assert (book_dir / "book_html" / "index.html").is_file()
        assert (book_dir / "book_html" / "chapter_001.html").is_file()

    def test_output_requires_one_format(self, runner, book_dir, tmp_path):
        result = runner.invoke(
            cli, ["render", str(book_dir / "book.book"), "-o", str(tmp_path / "x.html")]
        )
        assert result.exit_code == 2
        assert "--output requires exactly one --format" in result.output

    def test_set_overrides_book_file(self, runner, book_dir):
        result = runner.invoke(
            cli,
            ["render", str(book_dir / "book.book"), "-f", "html", "--set", "title", "From CLI"],
        )
        assert result.exit_code == 0, result.output
        assert "From CLI" in (book_dir / "out" / "book.html").read_text(encoding="utf-8")

    def test_single_file(self, runner, chapter_file):
        result = runner.invoke(cli, ["render", "--single", str(chapter_file), "-f", "html"])
        assert result.exit_code == 0, result.output
        html = (chapter_file.parent / "chapter.html").read_text(encoding="utf-8")
        assert "1. Lonely chapter" in html

    def test_single_file_uses_default_formats(self, runner, chapter_file, monkeypatch):
        monkeypatch.setenv("INKWELL_DEFAULT_FORMATS", '["tex"]')
        result = runner.invoke(cli, ["render", "-s", str(chapter_file)])
        assert result.exit_code == 0, result.output
        assert (chapter_file.parent / "chapter.tex").exists()

    def test_quiet(self, runner, book_dir):
        result = runner.invoke(cli, ["render", str(book_dir / "book.book"), "-f", "html", "-q"])
        assert result.exit_code == 0
        assert "✓" not in result.output
        assert "Book Information" not in result.output

    def test_unknown_format_is_rejected(self, runner, book_dir):
        result = runner.invoke(cli, ["render", str(book_dir / "book.book"), "-f", "pdf"])
        assert result.exit_code == 2

    def test_missing_book_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["render", str(tmp_path / "nope.book")])
        assert result.exit_code == 2


class TestRenderErrors:
    """Test exit codes and the run report on errors."""

    def test_missing_chapter_exits_with_error(self, runner, tmp_path):
        book_file = tmp_path / "book.book"
        book_file.write_text("title: Broken\n\n+ missing.md\n", encoding="utf-8")
        result = runner.invoke(cli, ["render", str(book_file), "-f", "html"])
        assert result.exit_code == 1
        assert not (tmp_path / "book.html").exists()

    def test_failed_format_exits_with_error(self, runner, tmp_path):
        (tmp_path / "a.md").write_text("# A\n\n![x](missing.png)\n", encoding="utf-8")
        book_file = tmp_path / "book.book"
        book_file.write_text("title: Partial\n\n+ a.md\n", encoding="utf-8")
        result = runner.invoke(cli, ["render", str(book_file), "-f", "html", "-f", "epub"])
        assert result.exit_code == 1
        # The other format is still rendered
        assert (tmp_path / "book.html").exists()
        assert not (tmp_path / "book.epub").exists()

    def test_output_dir_created_before_rendering(self, runner, tmp_path, monkeypatch):
        output_dir = tmp_path / "dist"
        monkeypatch.setenv("INKWELL_OUTPUT_DIR", str(output_dir))
        book_file = tmp_path / "book.book"
        book_file.write_text("title: Broken\n\n+ missing.md\n", encoding="utf-8")
        result = runner.invoke(cli, ["render", str(book_file), "-f", "html"])
        assert result.exit_code == 1
        assert output_dir.is_dir()

    def test_output_dir_is_a_file(self, runner, book_dir, tmp_path, monkeypatch):
        blocker = tmp_path / "dist"
        blocker.write_text("", encoding="utf-8")
        monkeypatch.setenv("INKWELL_OUTPUT_DIR", str(blocker / "books"))
        result = runner.invoke(cli, ["render", str(book_dir / "book.book"), "-f", "html"])
        assert result.exit_code == 1
        assert "could not create output directory" in result.output

    def test_warnings_do_not_fail_the_run(self, runner, tmp_path):
        (tmp_path / "a.md").write_text("# A\n\n[x](nowhere.md)\n", encoding="utf-8")
        book_file = tmp_path / "book.book"
        book_file.write_text("title: Warned\n\n+ a.md\n", encoding="utf-8")
        result = runner.invoke(cli, ["render", str(book_file), "-f", "tex"])
        assert result.exit_code == 0, result.output
        assert "Run report" in result.output

    def test_invalid_option_value(self, runner, book_dir):
        result = runner.invoke(
            cli,
            ["render", str(book_dir / "book.book"), "--set", "rendering.num_depth", "deep"],
        )
        assert result.exit_code == 1
