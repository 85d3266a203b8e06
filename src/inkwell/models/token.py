"""Pydantic models for the document tree produced by the Markdown parser.

Every node is a ``Token`` subclass. Leaves carry text (``Str``) or nothing
(``Rule``, ``SoftBreak``, ``HardBreak``); containers own an ordered list of
children. Constructors take positional arguments in the same order as the
node's parameters, so a tree reads the way it is printed::

    Header(1, [Str("Title")])
    Link("http://foo.bar", "", [Str("a link")])
"""

from collections.abc import Iterable, Iterator
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ..utils.exceptions import InvalidHeaderLevelError


class Token(BaseModel):
    """Base class of all document tree nodes."""

    model_config = ConfigDict(validate_assignment=False)

    # Lower-case variant name, used by renderers to dispatch on node type
    kind: ClassVar[str] = "token"

    @property
    def inner(self) -> list["Token"] | None:
        """Children of a container node, ``None`` for leaves."""
        return None

    def is_str(self) -> bool:
        return False

    def walk(self) -> Iterator["Token"]:
        """Iterate over this node and all its descendants, in document order."""
        yield self
        for child in self.inner or []:
            yield from child.walk()


class Str(Token):
    """A run of literal text."""

    kind: ClassVar[str] = "str"

    text: str

    def __init__(self, text: str, **data: Any) -> None:
        super().__init__(text=text, **data)

    def is_str(self) -> bool:
        return True


class Rule(Token):
    """A thematic break (horizontal rule)."""

    kind: ClassVar[str] = "rule"


class SoftBreak(Token):
    """A line break inside a paragraph that renders as a space."""

    kind: ClassVar[str] = "soft_break"


class HardBreak(Token):
    """A forced line break."""

    kind: ClassVar[str] = "hard_break"


class Container(Token):
    """A node owning an ordered sequence of child tokens."""

    children: list[Token] = Field(default_factory=list)

    def __init__(self, children: list[Token] | None = None, **data: Any) -> None:
        super().__init__(children=children if children is not None else [], **data)

    @property
    def inner(self) -> list[Token]:
        return self.children


class Paragraph(Container):
    kind: ClassVar[str] = "paragraph"


class Emphasis(Container):
    kind: ClassVar[str] = "emphasis"


class Strong(Container):
    kind: ClassVar[str] = "strong"


class Code(Container):
    """Inline code span. Its text is never cleaned."""

    kind: ClassVar[str] = "code"


class BlockQuote(Container):
    kind: ClassVar[str] = "block_quote"


class List(Container):
    """Unordered (bullet) list of ``Item`` nodes."""

    kind: ClassVar[str] = "list"


class Item(Container):
    kind: ClassVar[str] = "item"


class Header(Container):
    """Section header of level 1 (chapter title) to 6."""

    kind: ClassVar[str] = "header"

    level: int = Field(ge=1, le=6)

    def __init__(self, level: int, children: list[Token] | None = None, **data: Any) -> None:
        if not 1 <= level <= 6:
            raise InvalidHeaderLevelError(f"header level must be between 1 and 6, got {level}")
        super().__init__(children, level=level, **data)


class CodeBlock(Container):
    """Fenced or indented code block. Its text is never cleaned."""

    kind: ClassVar[str] = "code_block"

    language: str = ""

    def __init__(self, language: str, children: list[Token] | None = None, **data: Any) -> None:
        super().__init__(children, language=language, **data)


class OrderedList(Container):
    kind: ClassVar[str] = "ordered_list"

    start: int = Field(default=1, ge=0)

    def __init__(self, start: int, children: list[Token] | None = None, **data: Any) -> None:
        super().__init__(children, start=start, **data)


class Link(Container):
    """Hyperlink; ``url`` may be rewritten in place by the offsetting pass."""

    kind: ClassVar[str] = "link"

    url: str
    title: str = ""

    def __init__(
        self, url: str, title: str = "", children: list[Token] | None = None, **data: Any
    ) -> None:
        super().__init__(children, url=url, title=title, **data)


class Image(Container):
    """Image reference; children hold the alternative text."""

    kind: ClassVar[str] = "image"

    url: str
    title: str = ""

    def __init__(
        self, url: str, title: str = "", children: list[Token] | None = None, **data: Any
    ) -> None:
        super().__init__(children, url=url, title=title, **data)


def text_of(tokens: Iterable[Token]) -> str:
    """Flatten a token list to plain text, dropping all markup."""
    parts: list[str] = []
    for token in tokens:
        if isinstance(token, Str):
            parts.append(token.text)
        elif isinstance(token, SoftBreak | HardBreak):
            parts.append(" ")
        elif token.inner:
            parts.append(text_of(token.inner))
    return "".join(parts)


def has_chapter_title(tokens: Iterable[Token]) -> bool:
    """Return True if a top-level ``Header`` of level 1 is present."""
    return any(isinstance(token, Header) and token.level == 1 for token in tokens)
