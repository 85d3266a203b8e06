"""Book orchestration: chapters, book files and resources."""

from .book import RENDERERS, Book
from .chapter_list import ChapterEntry, parse_chapter_line, parse_chapter_list, split_config
from .resources import ResourceHandler, add_offset, is_local


__all__ = [
    "RENDERERS",
    "Book",
    "ChapterEntry",
    "ResourceHandler",
    "add_offset",
    "is_local",
    "parse_chapter_line",
    "parse_chapter_list",
    "split_config",
]
