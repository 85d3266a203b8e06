"""
inkwell - render Markdown book manuscripts to HTML, EPUB, LaTeX and ODT.
"""

from .book.book import Book
from .models.number import Number
from .parser.markdown import Parser


__version__ = "0.4.0"

__all__ = ["Book", "Number", "Parser", "__version__"]
