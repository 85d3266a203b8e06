"""
EPUB renderer.

Chapters are rendered by the HTML renderer with two hooks added: images are
mapped into the package (``images/image_N.ext``) and links to chapter
files point to the matching ``chapter_NNN.xhtml`` page. Packaging itself is
done by ``EPUBBuilder``.
"""

from typing import TYPE_CHECKING

from ..epub.builder import COVER_PAGE, TITLE_PAGE, EPUBBuilder, EpubChapter
from ..models.chapter import Chapter
from ..models.metadata import BookMetadata
from ..models.token import Header, Image, Token, text_of
from .base import Renderer
from .escape import escape_attribute
from .html import HtmlRenderer
from .toc import Toc


if TYPE_CHECKING:
    from ..book.book import Book


def chapter_filename(index: int) -> str:
    return f"chapter_{index:03}.xhtml"


def map_image_hook(renderer: Renderer, token: Token) -> str | None:
    """Render images with their destination inside the package."""
    if not isinstance(token, Image) or not isinstance(renderer, HtmlRenderer):
        return None
    url = renderer.handler.map_image(token.url)
    return (
        f'<img src = "{escape_attribute(url)}" title = "{escape_attribute(token.title)}"'
        f' alt = "{escape_attribute(text_of(token.children))}" />'
    )


class EpubRenderer:
    """
    Renders a book to an EPUB archive.

    Args:
        book: Book to render
    """

    format_name = "EPUB"

    def __init__(self, book: "Book"):
        self.book = book
        self.options = book.options
        self.logger = book.logger
        self.html = HtmlRenderer(book, hooks=[map_image_hook], anchors=True)
        self.html.escape_nb = self.options.get_bool("epub.escape_nb_spaces")
        self.html.handler.map_images = True

    def render_chapters(self) -> list[EpubChapter]:
        """Render every chapter to the body of its own XHTML page."""
        html = self.html
        for i, chapter in enumerate(self.book.chapters):
            if chapter.filename:
                html.handler.add_link(chapter.filename, chapter_filename(i))

        chapters = []
        for i, chapter in enumerate(self.book.chapters):
            filename = chapter_filename(i)
            html.filename = filename
            toc_size = len(html.plain_toc.elements)
            body = html.render_chapter(i, chapter)
            title = self._chapter_title(chapter, toc_size)
            chapters.append(EpubChapter(filename=filename, title=title, body=body))
        return chapters

    def _chapter_title(self, chapter: Chapter, toc_size: int) -> str:
        # Title of the entry the chapter just added to the TOC, if any
        elements = self.html.plain_toc.elements
        if len(elements) > toc_size:
            return elements[toc_size].title
        if chapter.number.is_hidden():
            return self.options.get_str("title")
        for token in chapter.content:
            if isinstance(token, Header):
                return text_of(token.children)
        return self.options.get_str("title")

    def _navigation(self, toc: Toc, numbered: bool, escape: bool) -> Toc:
        """Copy of ``toc`` with the cover and the title page prepended."""
        result = Toc(numbered=numbered)
        if self.options.get_bool("epub.toc.extras"):
            title = self.options.get_str("title")
            if escape:
                title = escape_attribute(title)
            if self.options.get_or("cover"):
                result.add(1, COVER_PAGE, "Cover")
            result.add(1, TITLE_PAGE, title)
        result.elements.extend(toc.elements)
        return result

    def render_book(self) -> bytes:
        """
        Render the whole book as an EPUB archive.

        Returns:
            The EPUB file content

        Raises:
            RenderError: If a template or the stylesheet cannot be used
            BookFileNotFoundError: If an image or the cover is missing
        """
        chapters = self.render_chapters()

        cover = None
        cover_path = self.options.get_or("cover")
        if cover_path:
            cover = self.html.handler.map_image(cover_path)

        builder = EPUBBuilder(
            metadata=BookMetadata.from_options(self.options),
            chapters=chapters,
            stylesheet=self.html.stylesheet("epub.css"),
            root=self.book.root,
            images=list(self.html.handler.images()),
            cover=cover,
            version=self.options.get_i32("epub.version"),
        )
        toc = self._navigation(self.html.plain_toc, numbered=False, escape=False)
        nav = self._navigation(self.html.toc, numbered=True, escape=True)
        return builder.build(toc, nav)
