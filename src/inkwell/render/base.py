"""
Shared rendering core.

All renderers walk the same token tree and must agree on chapter numbering.
``NumberingState`` holds that cross-format state, and ``Renderer`` provides
the common walk: token hooks are asked first, then the per-kind
``render_<kind>`` method of the concrete renderer is called.

A hook is a callable ``(renderer, token) -> str | None``; returning a string
replaces the default rendering of that token, returning ``None`` lets the
renderer handle it. Format variants (e.g. EPUB chapters rendered by the HTML
renderer) are built by adding hooks rather than by subclassing.
"""

import logging
import re
from collections.abc import Callable, Sequence
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..models.chapter import Chapter
from ..models.number import Number
from ..models.token import Header, Token, text_of
from ..utils.exceptions import MissingRequiredHeaderError


if TYPE_CHECKING:
    from ..book.book import Book


TokenHook = Callable[["Renderer", Token], str | None]

MAX_LEVEL = 6

_PLACEHOLDER = re.compile(r"(\{number\}|\{title\})")


@lru_cache(maxsize=2)
def template_env(latex: bool = False) -> Environment:
    """
    Jinja2 environment loading the templates shipped with the renderers.

    LaTeX templates use '<< >>' and '<% %>' delimiters, since braces and
    '#' are everywhere in TeX source, and are never autoescaped.
    """
    templates_dir = Path(__file__).parent / "templates"
    if latex:
        return Environment(
            loader=FileSystemLoader(str(templates_dir)),
            block_start_string="<%",
            block_end_string="%>",
            variable_start_string="<<",
            variable_end_string=">>",
            comment_start_string="<#",
            comment_end_string="#>",
            autoescape=False,
            keep_trailing_newline=True,
        )
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml", "xhtml", "j2")),
        keep_trailing_newline=True,
    )


def fill_template(
    template: str, number: str, title: str, escape: Callable[[str], str] = str
) -> str:
    """
    Substitute ``{number}`` and ``{title}`` in a numbering template.

    Args:
        template: Template text, e.g. ``"{number}. {title}"``
        number: Displayed number
        title: Already rendered title (inserted as is)
        escape: Escaping applied to the literal parts of the template

    Returns:
        The filled template
    """
    parts = []
    for piece in _PLACEHOLDER.split(template):
        if piece == "{number}":
            parts.append(escape(number))
        elif piece == "{title}":
            parts.append(title)
        else:
            parts.append(escape(piece))
    return "".join(parts)


class NumberingState:
    """
    Chapter and section counters shared by every renderer.

    ``current_chapter`` is the number the next numbered chapter receives.
    ``current_numbering`` is the deepest header level numbered in the
    current chapter (0 when the chapter is not numbered).

    Args:
        num_depth: Book-wide numbering depth (``rendering.num_depth``)
        template: Chapter title template (``rendering.chapter.template``)
        fallback: Title of numbered chapters lacking a level-1 header
    """

    def __init__(
        self,
        num_depth: int = 1,
        template: str = "{number}. {title}",
        fallback: str = "Chapter {number}",
    ):
        self.num_depth = num_depth
        self.template = template
        self.fallback = fallback
        self.current_chapter = 1
        self.current_numbering = 0
        self.number: Number | None = None
        self.hidden = False
        self.chapter_number: int | None = None
        self.sections = [0] * (MAX_LEVEL - 1)

    def start_chapter(self, number: Number) -> None:
        """Reset per-chapter state from the chapter's numbering mode."""
        self.number = number
        self.hidden = False
        self.chapter_number = None
        self.sections = [0] * (MAX_LEVEL - 1)
        if number.kind == "unnumbered":
            self.current_numbering = 0
        elif number.kind == "default":
            self.current_numbering = self.num_depth
        elif number.kind == "specified":
            assert number.value is not None
            self.current_numbering = max(self.num_depth, 1)
            self.current_chapter = number.value
        else:
            self.current_numbering = 0
            self.hidden = True

    def is_numbered(self, level: int) -> bool:
        return self.current_numbering >= level

    def allocate(self, level: int) -> str | None:
        """
        Allocate the number of a header.

        Args:
            level: Header level

        Returns:
            The displayed number (``"2"`` for a chapter, ``"2.1"`` for a
            section), or None when this level is not numbered
        """
        if not self.is_numbered(level):
            return None
        if level == 1:
            self.chapter_number = self.current_chapter
            self.current_chapter += 1
            self.sections = [0] * (MAX_LEVEL - 1)
            return str(self.chapter_number)
        index = level - 2
        self.sections[index] += 1
        for i in range(index + 1, len(self.sections)):
            self.sections[i] = 0
        numbers = [self.chapter_number or 0, *self.sections[: index + 1]]
        return ".".join(str(n) for n in numbers)

    def format(
        self, level: int, label: str | None, title: str, escape: Callable[[str], str] = str
    ) -> str:
        """Combine an allocated number and a rendered title."""
        if label is None:
            return title
        if level == 1:
            return fill_template(self.template, label, title, escape)
        return f"{escape(label)}. {title}"

    def fallback_title(self, label: str, escape: Callable[[str], str] = str) -> str:
        return fill_template(self.fallback, label, "", escape)

    def header(self, level: int, title: str, escape: Callable[[str], str] = str) -> str:
        """Allocate the number of a header and return its displayed title."""
        return self.format(level, self.allocate(level), title, escape)


class Renderer:
    """
    Base of all renderers: the shared walk over a book's chapters.

    Subclasses implement ``escape_text`` and one ``render_<kind>`` method per
    token kind they support (``render_paragraph``, ``render_header``...).
    Token kinds without a method are skipped with a warning.

    Args:
        book: Book to render; only read, never modified
        hooks: Token hooks consulted before the default rendering
    """

    format_name = "generic"

    def __init__(self, book: "Book", hooks: Sequence[TokenHook] = ()):
        self.book = book
        self.options = book.options
        self.logger: logging.Logger = book.logger
        self.hooks: list[TokenHook] = list(hooks)
        self.numbering = NumberingState(
            num_depth=self.options.get_i32("rendering.num_depth"),
            template=self.options.get_str("rendering.chapter.template"),
            fallback=self.options.get_str("rendering.chapter.fallback"),
        )
        self.verbatim = False
        self.chapter_index = 0
        self.source_file = ""

    def add_hook(self, hook: TokenHook) -> None:
        self.hooks.append(hook)

    def escape_text(self, text: str) -> str:
        raise NotImplementedError

    # ----------------------------------------------------------------- walk

    def render_token(self, token: Token) -> str:
        for hook in self.hooks:
            result = hook(self, token)
            if result is not None:
                return result
        method = getattr(self, f"render_{token.kind}", None)
        if method is None:
            self.warn(f"{token.kind} elements are not supported by the {self.format_name} renderer")
            return ""
        return method(token)

    def render_vec(self, tokens: Sequence[Token]) -> str:
        return "".join(self.render_token(token) for token in tokens)

    def render_verbatim(self, tokens: Sequence[Token]) -> str:
        """Render tokens with the verbatim flag set (code)."""
        self.verbatim = True
        try:
            return self.render_vec(tokens)
        finally:
            self.verbatim = False

    def warn(self, message: str) -> None:
        if self.source_file:
            message = f"{self.source_file}: {message}"
        self.logger.warning(message)

    # ------------------------------------------------------------- chapters

    def chapter_tokens(self, chapter: Chapter) -> list[Token]:
        """
        Start a chapter and return the tokens to render for it.

        A numbered chapter without a level-1 header gets a synthetic empty
        one, rendered with the fallback title, unless
        ``rendering.chapter.require_title`` is set.

        Raises:
            MissingRequiredHeaderError: If a title is required and missing
        """
        if chapter.is_subchapter():
            # Continues the numbering of the chapter it belongs to
            return chapter.content
        self.numbering.start_chapter(chapter.number)
        if self.numbering.is_numbered(1) and not chapter.has_title():
            if self.options.get_bool("rendering.chapter.require_title"):
                raise MissingRequiredHeaderError(
                    "numbered chapter has no level-1 header", source=chapter.filename or None
                )
            return [Header(1, []), *chapter.content]
        return chapter.content

    def render_chapter(self, index: int, chapter: Chapter) -> str:
        self.chapter_index = index
        self.source_file = chapter.filename
        return self.render_vec(self.chapter_tokens(chapter))

    def header_parts(self, header: Header) -> tuple[str | None, str, str]:
        """
        Allocate the number of a header and build its titles.

        Returns:
            ``(label, title, plain_title)``: the allocated number (or None),
            the rendered title with its number, and the same title as plain
            text for metadata such as EPUB navigation labels
        """
        label = self.numbering.allocate(header.level)
        if header.level == 1 and not header.children and label is not None:
            return (
                label,
                self.numbering.fallback_title(label, self.escape_text),
                self.numbering.fallback_title(label),
            )
        title = self.render_vec(header.children)
        return (
            label,
            self.numbering.format(header.level, label, title, self.escape_text),
            self.numbering.format(header.level, label, text_of(header.children)),
        )
