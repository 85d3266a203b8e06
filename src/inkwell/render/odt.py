"""ODT (OpenDocument text) renderer."""

from typing import TYPE_CHECKING

from jinja2 import TemplateError
from markupsafe import Markup

from ..models.metadata import BookMetadata
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
from ..utils.archive import build_archive
from ..utils.exceptions import RenderError
from .base import Renderer, template_env
from .escape import escape_attribute, escape_html


if TYPE_CHECKING:
    from ..book.book import Book


MIMETYPE = "application/vnd.oasis.opendocument.text"

BLOCK_KINDS = frozenset(
    {"paragraph", "header", "block_quote", "code_block", "list", "ordered_list", "rule"}
)


class OdtRenderer(Renderer):
    """
    Renders a book to an ODT archive.

    Only text is rendered: images are replaced by a space, and ordered
    lists are rendered as bullet lists.
    """

    format_name = "ODT"

    def __init__(self, book: "Book"):
        super().__init__(book)
        self.paragraph_style = "Text_20_body"

    def escape_text(self, text: str) -> str:
        return escape_html(text)

    def render_str(self, token: Str) -> str:
        return escape_html(token.text)

    def render_rule(self, _token: Token) -> str:
        return '<text:p />\n<text:p text:style-name="Text_20_body">***</text:p>\n<text:p />\n'

    def render_soft_break(self, _token: Token) -> str:
        return " "

    def render_hard_break(self, _token: Token) -> str:
        return "<text:line-break />"

    def render_paragraph(self, token: Paragraph) -> str:
        content = self.render_vec(token.children)
        return f'<text:p text:style-name="{self.paragraph_style}">{content}</text:p>\n'

    def render_header(self, token: Header) -> str:
        if token.level == 1 and self.numbering.hidden:
            return ""
        _label, title, _plain_title = self.header_parts(token)
        return (
            f'<text:h text:style-name="Heading_20_{token.level}"'
            f' text:outline-level="{token.level}">{title}</text:h>\n'
        )

    def render_emphasis(self, token: Emphasis) -> str:
        return f'<text:span text:style-name="T1">{self.render_vec(token.children)}</text:span>'

    def render_strong(self, token: Strong) -> str:
        return f'<text:span text:style-name="T2">{self.render_vec(token.children)}</text:span>'

    def render_code(self, token: Code) -> str:
        content = self.render_verbatim(token.children)
        return f'<text:span text:style-name="Preformatted_20_Text">{content}</text:span>'

    def render_block_quote(self, token: BlockQuote) -> str:
        previous, self.paragraph_style = self.paragraph_style, "Quotations"
        try:
            return self.render_vec(token.children)
        finally:
            self.paragraph_style = previous

    def render_code_block(self, token: CodeBlock) -> str:
        content = self.render_verbatim(token.children)
        return "".join(
            f'<text:p text:style-name="Preformatted_20_Text">{line}</text:p>\n'
            for line in content.rstrip("\n").split("\n")
        )

    def render_list(self, token: List) -> str:
        return f"<text:list>\n{self.render_vec(token.children)}</text:list>\n"

    def render_ordered_list(self, token: OrderedList) -> str:
        self.logger.debug("Ordered lists are rendered as unordered ones in ODT")
        return f"<text:list>\n{self.render_vec(token.children)}</text:list>\n"

    def render_item(self, token: Item) -> str:
        # A list item may only hold blocks: inline runs get their own paragraph
        parts = []
        run: list[Token] = []
        for child in token.children:
            if child.kind not in BLOCK_KINDS:
                run.append(child)
                continue
            if run:
                parts.append(f"<text:p>{self.render_vec(run)}</text:p>")
                run = []
            parts.append(self.render_vec([child]))
        if run:
            parts.append(f"<text:p>{self.render_vec(run)}</text:p>")
        return f"<text:list-item>\n{''.join(parts)}</text:list-item>\n"

    def render_link(self, token: Link) -> str:
        return (
            f'<text:a xlink:type="simple" xlink:href="{escape_attribute(token.url)}">'
            f"{self.render_vec(token.children)}</text:a>"
        )

    def render_image(self, token: Image) -> str:
        self.warn(
            f"ODT: images are not supported, '{text_of(token.children) or token.url}' is ignored"
        )
        return " "

    def render_content(self) -> str:
        parts = [self.render_chapter(i, chapter) for i, chapter in enumerate(self.book.chapters)]
        self.source_file = ""
        return "".join(parts)

    def render_book(self) -> bytes:
        """
        Render the whole book as an ODT archive.

        Returns:
            The ODT file content

        Raises:
            RenderError: If a template cannot be rendered
        """
        content = self.render_content()
        metadata = BookMetadata.from_options(self.options)
        env = template_env()
        try:
            files = {
                "content.xml": env.get_template("odt/content.xml.j2").render(
                    content=Markup(content)
                ),
                "styles.xml": env.get_template("odt/styles.xml.j2").render(
                    language=metadata.lang.split("-")[0]
                ),
                "meta.xml": env.get_template("odt/meta.xml.j2").render(metadata=metadata),
                "META-INF/manifest.xml": env.get_template("odt/manifest.xml.j2").render(
                    mimetype=MIMETYPE
                ),
            }
        except TemplateError as e:
            raise RenderError(f"could not render ODT template: {e}") from e
        return build_archive(
            MIMETYPE, {name: text.encode("utf-8") for name, text in files.items()}
        )
