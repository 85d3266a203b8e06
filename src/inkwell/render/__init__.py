"""
Renderers turning a book's token trees into output formats.

Concrete renderers live in their own modules (``html``, ``epub``, ``latex``,
``odt``); the book looks them up by format name.
"""

from .escape import (
    escape_attribute,
    escape_html,
    escape_nb_spaces,
    escape_nb_spaces_tex,
    escape_tex,
)
from .toc import Toc


__all__ = [
    "Toc",
    "escape_attribute",
    "escape_html",
    "escape_nb_spaces",
    "escape_nb_spaces_tex",
    "escape_tex",
]
