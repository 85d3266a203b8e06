"""
HTML renderer.

``HtmlRenderer.render_vec`` produces HTML fragments; ``render_book`` wraps
all chapters in a standalone document built from ``book.html.j2``.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import TemplateError
from markupsafe import Markup

from ..book.resources import ResourceHandler, is_local
from ..models.token import (
    BlockQuote,
    Code,
    CodeBlock,
    Emphasis,
    Header,
    Image,
    Item,
    Link,
    List,
    OrderedList,
    Paragraph,
    Str,
    Strong,
    Token,
    text_of,
)
from ..utils.exceptions import RenderError
from .base import Renderer, TokenHook, template_env
from .escape import escape_attribute, escape_html, escape_nb_spaces
from .toc import Toc


if TYPE_CHECKING:
    from ..book.book import Book


DEFAULT_CSS = Path(__file__).parent / "templates" / "book.css"


class HtmlRenderer(Renderer):
    """
    Renders tokens to HTML.

    Args:
        book: Book providing options, logger and chapters
        hooks: Token hooks consulted before the default rendering
        anchors: Give headers ``id = "link-N"`` anchors and record them in
            the table of contents (needed when rendering whole books)
        filename: Prefix of the URLs recorded in the table of contents
    """

    format_name = "HTML"
    escape_nb_option = "html.escape_nb_spaces"

    def __init__(
        self,
        book: "Book",
        hooks: Sequence[TokenHook] = (),
        anchors: bool = False,
        filename: str = "",
    ):
        super().__init__(book, hooks)
        self.anchors = anchors
        self.filename = filename
        self.escape_nb = self.options.get_bool(self.escape_nb_option)
        self.link_number = 0
        self.toc = Toc()
        # Same entries as ``toc`` with plain-text titles, for navigation metadata
        self.plain_toc = Toc()
        self.handler = ResourceHandler(book.root, self.logger)

    def escape_text(self, text: str) -> str:
        return escape_html(text)

    # ---------------------------------------------------------------- leaves

    def render_str(self, token: Str) -> str:
        content = escape_html(token.text)
        if self.escape_nb and not self.verbatim:
            content = escape_nb_spaces(content)
        return content

    def render_rule(self, _token: Token) -> str:
        return '<p class = "rule">***</p>\n'

    def render_soft_break(self, _token: Token) -> str:
        return " "

    def render_hard_break(self, _token: Token) -> str:
        return "<br />\n"

    # ------------------------------------------------------------ containers

    def render_paragraph(self, token: Paragraph) -> str:
        return f"<p>{self.render_vec(token.children)}</p>\n"

    def render_header(self, token: Header) -> str:
        if token.level == 1 and self.numbering.hidden:
            # Hidden chapter title: consumed, not displayed
            return ""
        _label, title, plain_title = self.header_parts(token)
        if not self.anchors:
            return f"<h{token.level}>{title}</h{token.level}>\n"
        self.link_number += 1
        anchor = f"link-{self.link_number}"
        if token.level <= max(self.numbering.num_depth, 1):
            url = f"{self.filename}#{anchor}"
            self.toc.add(token.level, url, title)
            self.plain_toc.add(token.level, url, plain_title)
        return f'<h{token.level} id = "{anchor}">{title}</h{token.level}>\n'

    def render_emphasis(self, token: Emphasis) -> str:
        return f"<em>{self.render_vec(token.children)}</em>"

    def render_strong(self, token: Strong) -> str:
        return f"<b>{self.render_vec(token.children)}</b>"

    def render_code(self, token: Code) -> str:
        return f"<code>{self.render_verbatim(token.children)}</code>"

    def render_block_quote(self, token: BlockQuote) -> str:
        return f"<blockquote>{self.render_vec(token.children)}</blockquote>\n"

    def render_code_block(self, token: CodeBlock) -> str:
        content = self.render_verbatim(token.children)
        if not token.language:
            return f"<pre><code>{content}</code></pre>\n"
        language = escape_attribute(token.language)
        return f'<pre><code class = "language-{language}">{content}</code></pre>\n'

    def render_list(self, token: List) -> str:
        return f"<ul>\n{self.render_vec(token.children)}</ul>\n"

    def render_ordered_list(self, token: OrderedList) -> str:
        start = "" if token.start == 1 else f' start = "{token.start}"'
        return f"<ol{start}>\n{self.render_vec(token.children)}</ol>\n"

    def render_item(self, token: Item) -> str:
        return f"<li>{self.render_vec(token.children)}</li>\n"

    def render_link(self, token: Link) -> str:
        url = token.url
        if self.anchors and is_local(url):
            url = self.local_link(url)
        title = f' title = "{escape_attribute(token.title)}"' if token.title else ""
        return f'<a href = "{escape_attribute(url)}"{title}>{self.render_vec(token.children)}</a>'

    def render_image(self, token: Image) -> str:
        return (
            f'<img src = "{escape_attribute(token.url)}" title = "{escape_attribute(token.title)}"'
            f' alt = "{escape_attribute(text_of(token.children))}" />'
        )

    def local_link(self, url: str) -> str:
        """Map a link to a chapter file onto its place in the output."""
        path, hash_sign, fragment = url.partition("#")
        if not path or not self.handler.contains_link(path):
            return url
        target = self.handler.get_link(path)
        if hash_sign and "#" not in target:
            return f"{target}#{fragment}"
        return target

    # ------------------------------------------------------------------ book

    def render_chapters(self) -> list[str]:
        """Render every chapter, each wrapped in its own ``div``."""
        for i, chapter in enumerate(self.book.chapters):
            if chapter.filename:
                self.handler.add_link(chapter.filename, f"#chapter-{i}")
        rendered = []
        for i, chapter in enumerate(self.book.chapters):
            content = self.render_chapter(i, chapter)
            rendered.append(f'<div id = "chapter-{i}" class = "chapter">\n{content}</div>\n')
        return rendered

    def stylesheet(self, option: str = "html.css") -> str:
        css = self.options.get_or(option)
        path = self.options.get_path(option) if css else DEFAULT_CSS
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise RenderError(f"could not read stylesheet '{path}': {e}") from e

    def render_book(self) -> str:
        """
        Render the whole book as a standalone HTML document.

        Returns:
            The HTML document

        Raises:
            RenderError: If the template or the stylesheet cannot be used
        """
        self.anchors = True
        chapters = self.render_chapters()
        options = self.options
        toc = ""
        if options.get_bool("rendering.inline_toc") and not self.toc.is_empty():
            toc = self.toc.render()
        try:
            template = template_env().get_template("book.html.j2")
            return template.render(
                lang=options.get_str("lang"),
                title=options.get_str("title"),
                subtitle=options.get_or("subtitle"),
                author=options.get_str("author"),
                description=options.get_or("description"),
                css=Markup(self.stylesheet()),
                header=Markup(options.get_or("html.header", "")),
                footer=Markup(options.get_or("html.footer", "")),
                toc_name=options.get_str("rendering.inline_toc.name"),
                toc=Markup(toc),
                content=Markup("".join(chapters)),
            )
        except TemplateError as e:
            raise RenderError(f"could not render HTML template: {e}") from e


def render_html(tokens: list[Token], book: "Book | None" = None) -> str:
    """
    Render a token list as an HTML fragment, without numbering or anchors.

    Args:
        tokens: Tokens to render
        book: Book supplying options; a default book is used when omitted

    Returns:
        HTML fragment
    """
    if book is None:
        from ..book.book import Book  # noqa: PLC0415

        book = Book()
    return HtmlRenderer(book).render_vec(tokens)
