"""
Multi-file HTML renderer.

Writes one page per chapter (``chapter_NNN.html``) plus an ``index.html``
with the title page, into a directory. Links to chapter files point to
the matching page, images are copied under ``images/``, and every page
links to a shared ``stylesheet.css``.
"""

from typing import TYPE_CHECKING

from jinja2 import TemplateError
from markupsafe import Markup

from ..models.chapter import Chapter
from ..models.token import Header, text_of
from ..utils.exceptions import BookFileNotFoundError, RenderError
from .base import template_env
from .epub import map_image_hook
from .escape import escape_attribute, escape_html
from .html import HtmlRenderer


if TYPE_CHECKING:
    from ..book.book import Book


INDEX_PAGE = "index.html"
STYLESHEET = "stylesheet.css"


def page_filename(index: int) -> str:
    return f"chapter_{index:03}.html"


class HtmlDirRenderer:
    """
    Renders a book to a directory of HTML pages.

    Args:
        book: Book to render
    """

    format_name = "HTML directory"

    def __init__(self, book: "Book"):
        self.book = book
        self.options = book.options
        self.logger = book.logger
        self.html = HtmlRenderer(book, hooks=[map_image_hook], anchors=True)
        self.html.handler.map_images = True

    def render_chapters(self) -> list[tuple[str, str, str]]:
        """
        Render every chapter to the body of its own page.

        Returns:
            ``(title, plain_title, body)`` for each chapter, ``title`` being HTML
        """
        html = self.html
        for i, chapter in enumerate(self.book.chapters):
            if chapter.filename:
                html.handler.add_link(chapter.filename, page_filename(i))

        pages = []
        for i, chapter in enumerate(self.book.chapters):
            html.filename = page_filename(i)
            toc_size = len(html.toc.elements)
            body = html.render_chapter(i, chapter)
            pages.append((*self._chapter_titles(chapter, toc_size), body))
        return pages

    def _chapter_titles(self, chapter: Chapter, toc_size: int) -> tuple[str, str]:
        # Entry the chapter just added to the TOC, if any
        html = self.html
        if len(html.toc.elements) > toc_size:
            return html.toc.elements[toc_size].title, html.plain_toc.elements[toc_size].title
        if not chapter.number.is_hidden():
            for token in chapter.content:
                if isinstance(token, Header) and token.level == 1:
                    return html.render_vec(token.children), text_of(token.children)
        title = self.options.get_str("title")
        return escape_html(title), title

    @staticmethod
    def _nav_link(css_class: str, href: str, label: str) -> str:
        return f'<p class = "{css_class}">\n  <a href = "{href}">\n    {label}\n  </a>\n</p>\n'

    def _index_content(self, toc: str, first_title: str | None) -> str:
        parts = []
        cover = self.options.get_or("cover")
        if cover:
            parts.append(
                '<div id = "cover">\n'
                f'  <img class = "cover" alt = "{escape_attribute(self.options.get_str("title"))}"'
                f' src = "{escape_attribute(self.html.handler.map_image(cover))}" />\n'
                "</div>\n"
            )
        if toc and self.options.get_bool("rendering.inline_toc"):
            name = escape_html(self.options.get_str("rendering.inline_toc.name"))
            parts.append(f'<h1>{name}</h1>\n<div id = "toc">\n{toc}\n</div>\n')
        if first_title is not None:
            parts.append(self._nav_link("next_chapter", page_filename(0), f"{first_title} »"))
        return "".join(parts)

    def render_book(self) -> dict[str, bytes]:
        """
        Render the whole book as a set of files.

        Returns:
            File names, relative to the output directory, mapped to their
            content

        Raises:
            RenderError: If a template or the stylesheet cannot be used
            BookFileNotFoundError: If an image or the cover is missing
        """
        pages = self.render_chapters()
        self.html.source_file = ""
        toc = "" if self.html.toc.is_empty() else self.html.toc.render()
        options = self.options
        book_title = options.get_str("title")
        context = {
            "lang": options.get_str("lang"),
            "title": book_title,
            "subtitle": options.get_or("subtitle"),
            "author": options.get_str("author"),
            "description": options.get_or("description"),
            "stylesheet": STYLESHEET,
            "header": Markup(options.get_or("html.header", "")),
            "footer": Markup(options.get_or("html.footer", "")),
            "toc_name": options.get_str("rendering.inline_toc.name"),
            "toc": Markup(toc),
        }

        files: dict[str, bytes] = {}
        try:
            template = template_env().get_template("html_dir.page.html.j2")
            for i, (_title, plain_title, body) in enumerate(pages):
                prev_link = next_link = ""
                if i > 0:
                    prev_link = self._nav_link(
                        "prev_chapter", page_filename(i - 1), f"« {pages[i - 1][0]}"
                    )
                if i + 1 < len(pages):
                    next_link = self._nav_link(
                        "next_chapter", page_filename(i + 1), f"{pages[i + 1][0]} »"
                    )
                page = template.render(
                    context,
                    page_title=f"{book_title} – {plain_title}",
                    is_index=False,
                    prev_chapter=Markup(prev_link),
                    next_chapter=Markup(next_link),
                    content=Markup(body),
                )
                files[page_filename(i)] = page.encode("utf-8")

            first_title = pages[0][0] if pages else None
            index = template.render(
                context,
                page_title=book_title,
                is_index=True,
                prev_chapter="",
                next_chapter="",
                content=Markup(self._index_content(toc, first_title)),
            )
        except TemplateError as e:
            raise RenderError(f"could not render HTML template: {e}") from e
        files[INDEX_PAGE] = index.encode("utf-8")
        files[STYLESHEET] = self.html.stylesheet().encode("utf-8")

        for source, destination in self.html.handler.images():
            path = self.book.root / source
            try:
                files[destination] = path.read_bytes()
            except OSError as e:
                raise BookFileNotFoundError(f"image file '{source}' could not be read: {e}") from e
        return files
