"""
Markdown parser - converts Markdown source into a list of inkwell tokens.

The tokenizing itself is done by markdown-it-py; this module walks the flat
open/close token stream it produces and rebuilds the nested tree of
``inkwell.models.token`` nodes, cleaning literal text on the way.
"""

from markdown_it import MarkdownIt
from markdown_it.token import Token as MdToken
from mdit_py_plugins.footnote import footnote_plugin

from ..models.token import (
    BlockQuote,
    Code,
    CodeBlock,
    Container,
    Emphasis,
    HardBreak,
    Header,
    Image,
    Item,
    Link,
    List,
    OrderedList,
    Paragraph,
    Rule,
    SoftBreak,
    Str,
    Strong,
    Token,
)
from ..utils.exceptions import ParseError
from .cleaner import Cleaner, Default


# Constructs the tokenizer recognises but no renderer supports
UNSUPPORTED = {
    "html_block": "raw HTML blocks",
    "html_inline": "inline HTML",
    "table_open": "tables",
    "footnote_ref": "footnotes",
    "footnote_block_open": "footnotes",
    "footnote_open": "footnotes",
}


class _Frame:
    """Children accumulated between an opening token and its closing one."""

    __slots__ = ("children", "opening")

    def __init__(self, opening: MdToken | None):
        self.opening = opening
        self.children: list[Token] = []


class Parser:
    """
    Parses Markdown into inkwell tokens.

    Every literal text run is passed through ``cleaner`` before being
    stored, except text inside inline code and code blocks. Raw HTML,
    tables and footnotes make the whole parse fail with ``ParseError``.

    Args:
        cleaner: Text cleaning strategy (defaults to whitespace collapsing)
        source_file: Name of the parsed file, used in error messages
    """

    def __init__(self, cleaner: Cleaner | None = None, source_file: str = ""):
        self.cleaner = cleaner if cleaner is not None else Default()
        self.source_file = source_file
        # Tables and footnotes are enabled only so that they can be rejected
        self.md = MarkdownIt("commonmark").enable("table").use(footnote_plugin)

    def parse(self, source: str) -> list[Token]:
        """
        Parse a whole Markdown document.

        Args:
            source: Markdown text

        Returns:
            Top-level tokens, in document order

        Raises:
            ParseError: If the document uses an unsupported construct
        """
        return self._blocks(self.md.parse(source))

    def parse_inline(self, source: str) -> list[Token]:
        """Parse a single line of Markdown, without block structure."""
        result: list[Token] = []
        for block in self.md.parseInline(source):
            result.extend(self._inlines(block.children or [], block))
        return result

    def _error(self, md_token: MdToken, line_token: MdToken | None = None) -> ParseError:
        what = UNSUPPORTED.get(md_token.type, f"'{md_token.type}' elements")
        mapped = (line_token or md_token).map
        line = mapped[0] + 1 if mapped else None
        return ParseError(f"{what} are not supported", source=self.source_file, line=line)

    def _check_supported(self, md_token: MdToken, line_token: MdToken | None = None) -> None:
        if md_token.type in UNSUPPORTED or md_token.type.startswith("footnote"):
            raise self._error(md_token, line_token)

    # ---------------------------------------------------------------- blocks

    def _blocks(self, md_tokens: list[MdToken]) -> list[Token]:
        stack = [_Frame(None)]
        for md_token in md_tokens:
            self._check_supported(md_token)
            if md_token.nesting == 1:
                stack.append(_Frame(md_token))
            elif md_token.nesting == -1:
                frame = stack.pop()
                assert frame.opening is not None
                assert frame.opening.type == md_token.type.replace("_close", "_open"), (
                    f"mismatched {frame.opening.type} closed by {md_token.type}"
                )
                if frame.opening.type == "paragraph_open" and frame.opening.hidden:
                    # Paragraphs of tight lists: keep the inline content only
                    stack[-1].children.extend(frame.children)
                else:
                    stack[-1].children.append(self._wrap_block(frame.opening, frame.children))
            elif md_token.type == "inline":
                stack[-1].children.extend(self._inlines(md_token.children or [], md_token))
            elif md_token.type == "fence":
                words = md_token.info.split()
                language = words[0] if words else ""
                stack[-1].children.append(CodeBlock(language, [Str(md_token.content)]))
            elif md_token.type == "code_block":
                stack[-1].children.append(CodeBlock("", [Str(md_token.content)]))
            elif md_token.type == "hr":
                stack[-1].children.append(Rule())
            else:
                raise self._error(md_token)
        assert len(stack) == 1, "unclosed block element"
        return stack[0].children

    def _wrap_block(self, opening: MdToken, children: list[Token]) -> Container:
        match opening.type:
            case "heading_open":
                return Header(int(opening.tag[1:]), children)
            case "paragraph_open":
                return Paragraph(children)
            case "blockquote_open":
                return BlockQuote(children)
            case "bullet_list_open":
                return List(children)
            case "ordered_list_open":
                start = opening.attrGet("start")
                return OrderedList(int(start) if start is not None else 1, children)
            case "list_item_open":
                return Item(children)
        raise self._error(opening)

    # --------------------------------------------------------------- inlines

    def _inlines(self, md_tokens: list[MdToken], block: MdToken) -> list[Token]:
        stack = [_Frame(None)]
        pending: list[str] = []

        def flush() -> None:
            # markdown-it may emit empty text tokens around delimiters
            text = "".join(pending)
            pending.clear()
            if text:
                stack[-1].children.append(Str(self.cleaner.clean(text)))

        for md_token in md_tokens:
            self._check_supported(md_token, block)
            if md_token.type in ("text", "text_special"):
                pending.append(md_token.content)
                continue
            flush()
            if md_token.nesting == 1:
                stack.append(_Frame(md_token))
            elif md_token.nesting == -1:
                frame = stack.pop()
                assert frame.opening is not None
                assert frame.opening.type == md_token.type.replace("_close", "_open"), (
                    f"mismatched {frame.opening.type} closed by {md_token.type}"
                )
                stack[-1].children.append(self._wrap_inline(frame.opening, frame.children, block))
            elif md_token.type == "softbreak":
                stack[-1].children.append(SoftBreak())
            elif md_token.type == "hardbreak":
                stack[-1].children.append(HardBreak())
            elif md_token.type == "code_inline":
                stack[-1].children.append(Code([Str(md_token.content)]))
            elif md_token.type == "image":
                alt = self._inlines(md_token.children or [], block)
                src = str(md_token.attrGet("src") or "")
                title = str(md_token.attrGet("title") or "")
                stack[-1].children.append(Image(src, title, alt))
            else:
                raise self._error(md_token, block)
        flush()
        assert len(stack) == 1, "unclosed inline element"
        return stack[0].children

    def _wrap_inline(self, opening: MdToken, children: list[Token], block: MdToken) -> Container:
        match opening.type:
            case "em_open":
                return Emphasis(children)
            case "strong_open":
                return Strong(children)
            case "link_open":
                return Link(
                    str(opening.attrGet("href") or ""),
                    str(opening.attrGet("title") or ""),
                    children,
                )
        raise self._error(opening, block)
