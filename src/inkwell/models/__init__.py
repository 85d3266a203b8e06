"""Data models for inkwell."""

from .chapter import Chapter
from .config import InkwellConfig
from .metadata import BookMetadata
from .number import Number
from .options import OPTION_SPECS, BookOptions, OptionSpec
from .token import (
    BlockQuote,
    Code,
    CodeBlock,
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


__all__ = [
    "OPTION_SPECS",
    "BlockQuote",
    "BookMetadata",
    "BookOptions",
    "Chapter",
    "Code",
    "CodeBlock",
    "Emphasis",
    "HardBreak",
    "Header",
    "Image",
    "InkwellConfig",
    "Item",
    "Link",
    "List",
    "Number",
    "OptionSpec",
    "OrderedList",
    "Paragraph",
    "Rule",
    "SoftBreak",
    "Str",
    "Strong",
    "Token",
]
