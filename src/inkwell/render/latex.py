"""
LaTeX renderer.

Numbering is left to LaTeX itself: headers become sectioning commands,
starred in unnumbered chapters, and a chapter with a specified number
resets the ``chapter`` counter first.
"""

from typing import TYPE_CHECKING

from jinja2 import TemplateError

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
from .base import Renderer, template_env
from .escape import escape_nb_spaces_tex, escape_tex, escape_url_argument


if TYPE_CHECKING:
    from ..book.book import Book


SECTIONING = {
    1: "chapter",
    2: "section",
    3: "subsection",
    4: "subsubsection",
}

BABEL_LANGUAGES = {
    "af": "afrikaans",
    "sq": "albanian",
    "eu": "basque",
    "bg": "bulgarian",
    "ca": "catalan",
    "hr": "croatian",
    "cs": "czech",
    "da": "danish",
    "nl": "dutch",
    "en": "english",
    "eo": "esperanto",
    "et": "estonian",
    "fi": "finnish",
    "fr": "francais",
    "gl": "galician",
    "el": "greek",
    "de": "ngerman",
    "he": "hebrew",
    "hu": "hungarian",
    "it": "italian",
    "is": "icelandic",
    "id": "indonesian",
    "ga": "irish",
    "la": "latin",
    "ms": "malay",
    "nn": "norsk",
    "pl": "polish",
    "pt": "portuguese",
    "ro": "romanian",
    "ru": "russian",
    "gd": "scottish",
    "sr": "serbian",
    "sk": "slovak",
    "sl": "slovene",
    "es": "spanish",
    "sw": "swedish",
    "tr": "turkish",
    "uk": "ukrainian",
    "cy": "welsh",
}


class LatexRenderer(Renderer):
    """
    Renders a book to a LaTeX document.

    Args:
        book: Book to render
    """

    format_name = "LaTeX"

    def __init__(self, book: "Book"):
        super().__init__(book)
        self.escape_nb = self.options.get_bool("tex.escape_nb_spaces")
        self.handler = ResourceHandler(book.root, self.logger)

    def escape_text(self, text: str) -> str:
        return escape_tex(text)

    def babel_language(self) -> str:
        """Return the babel name of the book language, ``english`` if unknown."""
        lang = self.options.get_str("lang")
        code = lang.replace("_", "-").split("-")[0].lower()
        if code in BABEL_LANGUAGES:
            return BABEL_LANGUAGES[code]
        self.logger.warning(
            f"LaTeX: can't find a tex equivalent for lang '{lang}', falling back on english"
        )
        return "english"

    # ---------------------------------------------------------------- leaves

    def render_str(self, token: Str) -> str:
        if self.verbatim:
            return token.text
        content = escape_tex(token.text)
        if self.escape_nb:
            content = escape_nb_spaces_tex(content)
        return content

    def render_rule(self, _token: Token) -> str:
        return "\\HRule\n"

    def render_soft_break(self, _token: Token) -> str:
        return " "

    def render_hard_break(self, _token: Token) -> str:
        return "\\\\\n"

    # ------------------------------------------------------------ containers

    def render_paragraph(self, token: Paragraph) -> str:
        return f"{self.render_vec(token.children)}\n\n"

    def render_header(self, token: Header) -> str:
        numbering = self.numbering
        if token.level == 1 and numbering.hidden:
            return ""
        label = numbering.allocate(token.level)
        content = ""
        if token.level == 1 and label is not None and numbering.number is not None:
            if numbering.number.kind == "specified":
                content += f"\\setcounter{{chapter}}{{{int(label) - 1}}}\n"
        command = SECTIONING.get(token.level, "paragraph")
        if not numbering.is_numbered(1):
            command += "*"
        if token.level == 1 and not token.children and label is not None:
            title = numbering.fallback_title(label, escape_tex)
        else:
            title = self.render_vec(token.children)
        return f"{content}\\{command}{{{title}}}\n"

    def render_emphasis(self, token: Emphasis) -> str:
        return f"\\emph{{{self.render_vec(token.children)}}}"

    def render_strong(self, token: Strong) -> str:
        return f"\\textbf{{{self.render_vec(token.children)}}}"

    def render_code(self, token: Code) -> str:
        return f"\\texttt{{{self.render_vec(token.children)}}}"

    def render_block_quote(self, token: BlockQuote) -> str:
        return f"\\begin{{quotation}}\n{self.render_vec(token.children)}\\end{{quotation}}\n"

    def render_code_block(self, token: CodeBlock) -> str:
        content = self.render_verbatim(token.children)
        return f"\\begin{{spverbatim}}\n{content}\\end{{spverbatim}}\n\\vspace{{1em}}\n"

    def render_list(self, token: List) -> str:
        return f"\\begin{{itemize}}\n{self.render_vec(token.children)}\\end{{itemize}}\n"

    def render_ordered_list(self, token: OrderedList) -> str:
        start = ""
        if token.start != 1:
            start = f"\\setcounter{{enumi}}{{{token.start - 1}}}\n"
        return f"\\begin{{enumerate}}\n{start}{self.render_vec(token.children)}\\end{{enumerate}}\n"

    def render_item(self, token: Item) -> str:
        return f"\\item {self.render_vec(token.children)}\n"

    def render_link(self, token: Link) -> str:
        content = self.render_vec(token.children)
        if is_local(token.url):
            path = token.url.partition("#")[0]
            if path and self.handler.contains_link(path):
                return f"\\hyperref[{self.handler.get_link(path)}]{{{content}}}"
            self.warn(f"LaTeX: local link '{token.url}' does not point to a chapter")
            return content
        url = escape_tex(token.url)
        if content == url:
            return f"\\url{{{token.url}}}"
        if self.options.get_bool("tex.links_as_footnotes"):
            footnote = escape_url_argument(token.url)
            return f"\\href{{{token.url}}}{{{content}}}\\footnote{{\\url{{{footnote}}}}}"
        return f"\\href{{{token.url}}}{{{content}}}"

    def render_image(self, token: Image) -> str:
        if not is_local(token.url):
            self.warn(f"LaTeX: image '{token.url}' doesn't seem to be local; ignoring it")
            return f"[{escape_tex(text_of(token.children))}]"
        path = self.handler.map_image(token.url)
        return (
            "\\begin{center}\n"
            f"  \\includegraphics[width=0.8\\linewidth]{{{path}}}\n"
            "\\end{center}\n"
        )

    # ------------------------------------------------------------------ book

    def render_content(self) -> str:
        """Render every chapter, each preceded by a label for cross references."""
        for i, chapter in enumerate(self.book.chapters):
            if chapter.filename:
                self.handler.add_link(chapter.filename, f"chapter-{i}")
        depth = self.numbering.num_depth - 1
        parts = [f"\\setcounter{{tocdepth}}{{{depth}}}\n\\setcounter{{secnumdepth}}{{{depth}}}\n"]
        if self.options.get_bool("rendering.inline_toc"):
            parts.append("\\tableofcontents\n")
        for i, chapter in enumerate(self.book.chapters):
            parts.append(f"\\label{{chapter-{i}}}\n")
            parts.append(self.render_chapter(i, chapter))
        self.source_file = ""
        return "".join(parts)

    def render_book(self) -> str:
        """
        Render the whole book as a standalone LaTeX document.

        Returns:
            The LaTeX source

        Raises:
            RenderError: If the template cannot be rendered
        """
        content = self.render_content()
        options = self.options
        try:
            template = template_env(latex=True).get_template("latex.tex.j2")
            return template.render(
                tex_class=options.get_str("tex.class"),
                paper_size=options.get_str("tex.paper.size"),
                font_size=options.get_or("tex.font.size"),
                tex_lang=self.babel_language(),
                tex_title=options.get_bool("tex.title"),
                title=escape_tex(options.get_str("title")),
                subtitle=escape_tex(options.get_or("subtitle", "")),
                author=escape_tex(options.get_str("author")),
                date=escape_tex(options.get_or("date", "")),
                content=content,
            )
        except TemplateError as e:
            raise RenderError(f"could not render LaTeX template: {e}") from e
