"""Unit tests for Book: loading, chapters, offsets and rendering to files."""

import logging

import pytest

from inkwell.book.book import Book
from inkwell.models.number import Number
from inkwell.models.token import Header, Image, Link, Paragraph, Str
from inkwell.parser.cleaner import Cleaner, French
from inkwell.utils.exceptions import (
    BookFileNotFoundError,
    ConfigParseError,
    InvalidOptionKeyError,
    InvalidOptionTypeError,
    InvalidUtf8Error,
    ParseError,
    RenderError,
)


class TestLoadFile:
    """Test loading a complete book file."""

    def test_chapters_and_options(self, book_dir, logger):
        book = Book(logger=logger).load_file(book_dir / "book.book")

        assert book.root == book_dir
        assert book.options.get_str("title") == "A Test Book"
        assert book.options.get_str("author") == "Jane Doe"
        assert [c.filename for c in book.chapters] == [
            "preface.md",
            "chapters/one.md",
            "chapters/two.md",
        ]
        assert [c.number for c in book.chapters] == [
            Number.unnumbered(),
            Number.default(),
            Number.default(),
        ]
        assert book.chapters[1].content[0] == Header(1, [Str("Getting started")])

    def test_urls_are_offset_to_the_book_root(self, book_dir, logger):
        book = Book(logger=logger).load_file(book_dir / "book.book")
        two = book.chapters[2].content
        assert two[1] == Paragraph([Image("chapters/images/figure.png", "", [Str("A figure")])])
        link = two[2].children[1]
        assert isinstance(link, Link)
        assert link.url == "chapters/one.md"

    def test_overrides_win_over_the_file(self, book_dir, logger):
        book = Book(logger=logger).load_file(book_dir / "book.book", [("title", "Other")])
        assert book.options.get_str("title") == "Other"

    def test_missing_book_file(self, tmp_path, logger):
        with pytest.raises(BookFileNotFoundError):
            Book(logger=logger).load_file(tmp_path / "nope.book")

    def test_invalid_utf8_book_file(self, tmp_path, logger):
        path = tmp_path / "bad.book"
        path.write_bytes(b"title: \xff\xfe\n")
        with pytest.raises(InvalidUtf8Error):
            Book(logger=logger).load_file(path)

    def test_missing_chapter(self, tmp_path, logger):
        path = tmp_path / "book.book"
        path.write_text("title: x\n\n+ missing.md\n", encoding="utf-8")
        with pytest.raises(BookFileNotFoundError, match="missing.md"):
            Book(logger=logger).load_file(path)

    def test_header_dates_and_words_are_text(self, book):
        book.read_config("title: T\ndate: 2024-05-01\nsubtitle: yes\ninput.clean: no\n")
        assert book.options.get_str("date") == "2024-05-01"
        assert book.options.get_str("subtitle") == "yes"
        assert book.options.get_bool("input.clean") is False

    def test_header_value_of_wrong_type(self, book):
        with pytest.raises(InvalidOptionTypeError):
            book.read_config("rendering.num_depth: [1, 2]\n")

    def test_unknown_option_in_header(self, tmp_path, logger):
        path = tmp_path / "book.book"
        path.write_text("colour: blue\n", encoding="utf-8")
        with pytest.raises(InvalidOptionKeyError):
            Book(logger=logger).load_file(path)

    def test_invalid_chapter_line(self, tmp_path, logger):
        path = tmp_path / "book.book"
        path.write_text("title: x\n\n+ a b.md\n", encoding="utf-8")
        with pytest.raises(ConfigParseError) as exc_info:
            Book(logger=logger).load_file(path)
        assert exc_info.value.line == 3
        assert exc_info.value.source == str(path)


class TestChapters:
    """Test adding chapters from sources and files."""

    def test_add_chapter_from_source(self, book):
        chapter = book.add_chapter_from_source(Number.specified(4), "# Four\n", "four.md")
        assert book.chapters == [chapter]
        assert chapter.number == Number.specified(4)
        assert chapter.has_title()

    def test_bytes_source(self, book):
        chapter = book.add_chapter_from_source(Number.default(), "# Café".encode())
        assert chapter.content == [Header(1, [Str("Café")])]

    def test_invalid_utf8_source(self, book):
        with pytest.raises(InvalidUtf8Error):
            book.add_chapter_from_source(Number.default(), b"\xff\xfe", "bad.md")

    def test_parse_error_names_the_file(self, book):
        with pytest.raises(ParseError) as exc_info:
            book.add_chapter_from_source(Number.default(), "<div>x</div>\n", "raw.md")
        assert exc_info.value.source == "raw.md"

    def test_french_cleaning_follows_lang(self, book):
        book.set_option("lang", "fr")
        assert isinstance(book.cleaner, French)
        chapter = book.add_chapter_from_source(Number.default(), "Bonjour !")
        assert chapter.content == [Paragraph([Str("Bonjour\u202f!")])]

    def test_cleaning_can_be_disabled(self, book):
        book.set_options([("lang", "fr"), ("input.clean", "false")])
        assert type(book.cleaner) is Cleaner


class TestSubchapters:
    """Test subchapters, whose headers are pushed down."""

    def test_headers_are_shifted(self, book):
        (book.root / "a.md").write_text("# A\n", encoding="utf-8")
        (book.root / "b.md").write_text("# B\n\n## C\n\nText\n", encoding="utf-8")
        book.read_config("+ a.md\n-- b.md\n")

        sub = book.chapters[1]
        assert sub.is_subchapter()
        assert sub.level == 1
        assert sub.number == Number.default()
        assert [t.level for t in sub.content if isinstance(t, Header)] == [2, 3]

    def test_subchapter_continues_numbering(self, book):
        (book.root / "a.md").write_text("# A\n", encoding="utf-8")
        (book.root / "b.md").write_text("# B\n", encoding="utf-8")
        book.read_config("rendering.num_depth: 2\n\n+ a.md\n-- b.md\n")
        html = book.render_format("html")
        assert '<h1 id = "link-1">1. A</h1>' in html
        assert '<h2 id = "link-2">1.1. B</h2>' in html

    def test_first_subchapter_is_hidden(self, book):
        (book.root / "b.md").write_text("# B\n", encoding="utf-8")
        book.read_config("-- b.md\n")
        assert book.chapters[0].number == Number.hidden()

    def test_shift_out_of_range(self, book):
        (book.root / "a.md").write_text("# A\n", encoding="utf-8")
        (book.root / "b.md").write_text("###### Deep\n", encoding="utf-8")
        with pytest.raises(ParseError, match="7 instead of"):
            book.read_config("+ a.md\n-- b.md\n")


class TestOffsets:
    """Test which offset applies to links and images."""

    SOURCE = "[next](next.md) ![fig](fig.png)"

    def urls(self, book):
        chapter = book.add_chapter_from_source(Number.default(), self.SOURCE, "part/ch.md")
        link, _space, image = chapter.content[0].children
        return link.url, image.url

    def test_chapter_directory(self, book):
        assert self.urls(book) == ("part/next.md", "part/fig.png")

    def test_base_path_overrides_everything(self, book):
        book.set_options(
            [("resources.base_path", "assets"), ("resources.base_path.images", "pics")]
        )
        assert self.urls(book) == ("assets/next.md", "assets/fig.png")

    def test_separate_link_and_image_paths(self, book):
        book.set_option("resources.base_path.images", "pics")
        assert self.urls(book) == ("part/next.md", "pics/fig.png")

    def test_chapter_above_the_book_warns(self, book, caplog):
        with caplog.at_level(logging.WARNING, logger="inkwell.tests"):
            book.add_chapter_from_source(Number.default(), "# A\n", "../a.md")
        assert "directory above the book file" in caplog.text


class TestRendering:
    """Test output paths and rendering to files."""

    def test_formats(self, book_dir, logger):
        book = Book(logger=logger).load_file(book_dir / "book.book")
        assert book.formats() == ["html"]
        book.set_option("output", "tex epub")
        assert book.formats() == ["tex", "epub", "html"]

    def test_output_path(self, book_dir, logger):
        book = Book(logger=logger).load_file(book_dir / "book.book")
        assert book.output_path("html") == book_dir / "out" / "book.html"
        assert book.output_path("epub") == book_dir / "book.epub"
        assert book.output_path("html.dir") == book_dir / "book_html"
        book.set_option("output.base_path", "dist")
        assert book.output_path("epub") == book_dir / "dist" / "book.epub"

    def test_render_all(self, book_dir, logger):
        book = Book(logger=logger).load_file(book_dir / "book.book")
        assert book.render_all() == {}
        html = (book_dir / "out" / "book.html").read_text(encoding="utf-8")
        assert "A Test Book" in html
        assert "1. Getting started" in html

    def test_render_format_to_explicit_path(self, two_chapter_book, tmp_path):
        path = two_chapter_book.render_format_to_file("tex", tmp_path / "build" / "b.tex")
        assert path == tmp_path / "build" / "b.tex"
        assert "\\chapter{Alpha}" in path.read_text(encoding="utf-8")

    def test_unknown_format(self, book):
        with pytest.raises(RenderError, match="unknown format 'pdf'"):
            book.render_format("pdf")

    def test_failed_format_does_not_stop_the_others(self, book, caplog):
        book.set_option("output", "epub html")
        book.add_chapter_from_source(Number.default(), "# A\n\n![x](missing.png)\n", "a.md")
        with caplog.at_level(logging.ERROR, logger="inkwell.tests"):
            failures = book.render_all()
        assert list(failures) == ["epub"]
        assert isinstance(failures["epub"], BookFileNotFoundError)
        assert "Error rendering epub" in caplog.text
        assert (book.root / "book.html").exists()
        assert not (book.root / "book.epub").exists()

    def test_nothing_to_render_warns(self, book, caplog):
        with caplog.at_level(logging.WARNING, logger="inkwell.tests"):
            assert book.render_all() == {}
        assert "No output format specified" in caplog.text
