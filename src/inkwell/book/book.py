"""
Book orchestration.

A ``Book`` owns the options, the parsed chapters and the logger of one
manuscript, and hands them to the renderers. Renderers only read the
book, so several formats can be rendered from the same instance.
"""

import logging
import posixpath
import shutil
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

from ..models.chapter import Chapter
from ..models.number import Number
from ..models.options import BookOptions
from ..models.token import Header, Token
from ..parser.cleaner import Cleaner, cleaner_for
from ..parser.markdown import Parser
from ..render.epub import EpubRenderer
from ..render.html import HtmlRenderer
from ..render.html_dir import HtmlDirRenderer
from ..render.latex import LatexRenderer
from ..render.odt import OdtRenderer
from ..utils.exceptions import (
    BookFileNotFoundError,
    InkwellError,
    InvalidHeaderLevelError,
    InvalidUtf8Error,
    ParseError,
    RenderError,
)
from .chapter_list import parse_chapter_list, parse_yaml_header, split_config
from .resources import add_offset


RENDERERS: dict[str, Callable[["Book"], Any]] = {
    "html": HtmlRenderer,
    "epub": EpubRenderer,
    "tex": LatexRenderer,
    "odt": OdtRenderer,
    "html.dir": HtmlDirRenderer,
}

# Appended to the book file stem when no output path is set
SUFFIXES = {"html": ".html", "epub": ".epub", "tex": ".tex", "odt": ".odt", "html.dir": "_html"}

# Options that change how chapter text is cleaned
CLEANER_OPTIONS = frozenset({"lang", "input.clean", "input.clean.nb_char"})


class Book:
    """
    A book: options plus an ordered list of parsed chapters.

    Args:
        root: Book root directory; chapter files, images and path options
            are relative to it
        logger: Logger receiving the warnings of this book; defaults to
            ``logging.getLogger("inkwell.book")``

    Example:
        book = Book("manuscript")
        book.load_file("manuscript/book.book")
        book.render_all()
    """

    def __init__(self, root: Path | str = ".", logger: logging.Logger | None = None):
        self.root = Path(root)
        self.logger = logger or logging.getLogger("inkwell.book")
        self.options = BookOptions(self.root, self.logger)
        self.chapters: list[Chapter] = []
        self.source: str | None = None
        self.cleaner: Cleaner = self._select_cleaner()

    # --------------------------------------------------------------- options

    def _select_cleaner(self) -> Cleaner:
        return cleaner_for(
            self.options.get_str("lang"),
            enabled=self.options.get_bool("input.clean"),
            nb_char=self.options.get_char("input.clean.nb_char"),
        )

    def set_option(self, key: str, value: Any) -> "Book":
        """
        Set one option; strings are parsed according to the option type.

        Raises:
            InvalidOptionKeyError: If the key is unknown
            InvalidOptionTypeError: If the value does not fit the option type
        """
        return self.set_options([(key, value)])

    def set_options(self, pairs: Iterable[tuple[str, Any]]) -> "Book":
        """Set options in order, later values replacing earlier ones."""
        pairs = list(pairs)
        self.options.set_many(pairs)
        keys = {self.options.resolve_key(key) for key, _value in pairs}
        if keys & CLEANER_OPTIONS:
            self.cleaner = self._select_cleaner()
        return self

    def _set_root(self, root: Path) -> None:
        self.root = root
        self.options.root = root

    # -------------------------------------------------------------- chapters

    def _read_chapter(self, file: str) -> bytes:
        path = self.root / file
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise BookFileNotFoundError(
                f"book chapter '{path}' could not be found", source=self.source
            ) from None
        except OSError as e:
            raise BookFileNotFoundError(
                f"book chapter '{path}' could not be read: {e}", source=self.source
            ) from e

    def _offsets(self, filename: str) -> tuple[str, str]:
        offset = posixpath.dirname(filename.replace("\\", "/"))
        if offset.startswith(".."):
            self.logger.warning(
                f"Book contains chapter '{filename}' in a directory above the book file, "
                "this might cause problems"
            )
        base = self.options.get_or("resources.base_path")
        if base is not None:
            return base, base
        link_offset = self.options.get_or("resources.base_path.links", offset)
        image_offset = self.options.get_or("resources.base_path.images", offset)
        return link_offset, image_offset

    def parse_chapter(self, source: str | bytes, filename: str = "") -> list[Token]:
        """
        Parse the source of a chapter and offset its links and images.

        Args:
            source: Markdown text, or UTF-8 encoded bytes
            filename: Chapter file, relative to the book root (empty when
                the chapter does not come from a file)

        Returns:
            The chapter tokens

        Raises:
            InvalidUtf8Error: If ``source`` is not valid UTF-8
            ParseError: If the Markdown uses an unsupported construct
        """
        if isinstance(source, bytes):
            try:
                source = source.decode("utf-8")
            except UnicodeDecodeError as e:
                raise InvalidUtf8Error(
                    f"file contains invalid UTF-8: {e}", source=filename or None
                ) from e

        tokens = Parser(self.cleaner, filename).parse(source)
        if filename:
            link_offset, image_offset = self._offsets(filename)
            add_offset(link_offset, image_offset, tokens)
        return tokens

    def add_chapter_from_source(
        self, number: Number, source: str | bytes, filename: str = ""
    ) -> Chapter:
        """
        Add a chapter from its Markdown source.

        Args:
            number: Numbering mode of the chapter
            source: Markdown text, or UTF-8 encoded bytes
            filename: Name the chapter is known by (for links and messages)

        Returns:
            The new chapter
        """
        content = self.parse_chapter(source, filename)
        chapter = Chapter(number=number, filename=filename, content=content)
        self.chapters.append(chapter)
        return chapter

    def add_chapter(self, number: Number, file: str) -> Chapter:
        """
        Add a chapter from a file.

        Args:
            number: Numbering mode of the chapter
            file: Chapter file, relative to the book root

        Returns:
            The new chapter

        Raises:
            BookFileNotFoundError: If the file does not exist
            InvalidUtf8Error: If the file is not valid UTF-8
            ParseError: If the Markdown uses an unsupported construct
        """
        self.logger.debug(f"Parsing chapter: {file}...")
        return self.add_chapter_from_source(number, self._read_chapter(file), file)

    def add_subchapter(self, level: int, file: str) -> Chapter:
        """
        Add a file whose headers are pushed down ``level`` levels.

        The subchapter continues the numbering of the chapter before it.

        Raises:
            ParseError: If a shifted header level leaves the 1..6 range
        """
        self.logger.debug(f"Parsing subchapter: {file}...")
        number = self.chapters[-1].number if self.chapters else Number.hidden()
        tokens = self.parse_chapter(self._read_chapter(file), file)
        shifted: list[Token] = []
        for token in tokens:
            if isinstance(token, Header):
                try:
                    token = Header(token.level + level, token.children)
                except InvalidHeaderLevelError as e:
                    raise ParseError(
                        f"this subchapter contains a heading that, when adjusted, "
                        f"is not in the right range ({token.level + level} instead of [1-6])",
                        source=file,
                    ) from e
            shifted.append(token)
        chapter = Chapter(number=number, filename=file, content=shifted, level=level)
        self.chapters.append(chapter)
        return chapter

    # ---------------------------------------------------------- book file

    def read_config(self, text: str, overrides: Iterable[tuple[str, Any]] = ()) -> "Book":
        """
        Read a book configuration: YAML options, then the chapter list.

        Args:
            text: Content of the book file
            overrides: Options applied after the YAML header and before
                the chapters are parsed (e.g. from the command line)

        Raises:
            ConfigParseError: If the header or the chapter list is malformed
        """
        header, lines = split_config(text)
        options = parse_yaml_header(header, self.source)
        self.set_options(options.items())
        self.set_options(overrides)

        for entry in parse_chapter_list(lines, self.source):
            if entry.kind == "subchapter":
                self.add_subchapter(entry.level, entry.filename)
            else:
                self.add_chapter(entry.number, entry.filename)
        return self

    def load_file(self, path: Path | str, overrides: Iterable[tuple[str, Any]] = ()) -> "Book":
        """
        Load a book file; the book root becomes the file's directory.

        Raises:
            BookFileNotFoundError: If the book file does not exist
            InvalidUtf8Error: If the book file is not valid UTF-8
            ConfigParseError: If the book file is malformed
        """
        path = Path(path)
        self.source = str(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise BookFileNotFoundError(f"book file '{path}' could not be read: {e}") from e
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidUtf8Error(
                f"book file contains invalid UTF-8: {e}", source=str(path)
            ) from e
        self._set_root(path.parent)
        return self.read_config(text, overrides)

    # ------------------------------------------------------------- rendering

    def formats(self) -> list[str]:
        """Formats to render: those listed in ``output`` and those with an output file."""
        formats = list(self.options.get_or("output", []))
        for name in RENDERERS:
            if self.options.get_or(f"output.{name}") and name not in formats:
                formats.append(name)
        return formats

    def output_path(self, fmt: str) -> Path:
        """Return the file (or directory, for ``html.dir``) a format is written to."""
        filename = self.options.get_or(f"output.{fmt}")
        if not filename:
            stem = Path(self.source).stem if self.source else "book"
            filename = stem + SUFFIXES.get(fmt, "." + fmt)
        return self.root / self.options.get_relative_path("output.base_path") / filename

    def render_format(self, fmt: str) -> str | bytes | dict[str, bytes]:
        """
        Render the book in one format.

        Args:
            fmt: Format name (html, epub, tex, odt or html.dir)

        Returns:
            The rendered document: text for HTML and LaTeX, bytes for
            EPUB and ODT, and file names mapped to contents for html.dir

        Raises:
            RenderError: If the format is unknown or rendering fails
        """
        if fmt not in RENDERERS:
            raise RenderError(f"unknown format '{fmt}' (known: {', '.join(RENDERERS)})")
        self.logger.debug(f"Attempting to generate {fmt}...")
        return RENDERERS[fmt](self).render_book()

    def render_format_to_file(self, fmt: str, path: Path | str | None = None) -> Path:
        """
        Render one format and write it to a file.

        The document is fully rendered before the file is opened, so a
        failed rendering leaves no partial file behind. ``html.dir`` is
        written to a directory instead, replacing any previous one.

        Returns:
            The written file or directory

        Raises:
            RenderError: If rendering or writing fails
        """
        content = self.render_format(fmt)
        path = Path(path) if path is not None else self.output_path(fmt)
        if isinstance(content, Mapping):
            self._write_directory(path, content)
        else:
            data = content.encode("utf-8") if isinstance(content, str) else content
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(data)
            except OSError as e:
                raise RenderError(f"could not write '{path}': {e}") from e
        self.logger.info(f"Successfully generated {fmt}: {path}")
        return path

    def _write_directory(self, path: Path, files: Mapping[str, bytes]) -> None:
        if path.is_file():
            raise RenderError(f"'{path}' already exists and is not a directory")
        if path.is_dir():
            if self.root.resolve().is_relative_to(path.resolve()):
                raise RenderError(f"refusing to replace '{path}', it contains the book")
            self.logger.warning(f"'{path}' already exists, deleting it")
        try:
            if path.is_dir():
                shutil.rmtree(path)
            for name, data in files.items():
                target = path / name
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(data)
        except OSError as e:
            raise RenderError(f"could not write '{path}': {e}") from e

    def render_all(self) -> dict[str, Exception]:
        """
        Render every configured format.

        A failing format is logged and does not stop the others.

        Returns:
            Failed formats mapped to their error (empty when all succeeded)
        """
        failures: dict[str, Exception] = {}
        formats = self.formats()
        if not formats:
            self.logger.warning("No output format specified, nothing to render")
        for fmt in formats:
            try:
                self.render_format_to_file(fmt)
            except InkwellError as e:
                self.logger.error(f"Error rendering {fmt}: {e}")
                failures[fmt] = e
        return failures
