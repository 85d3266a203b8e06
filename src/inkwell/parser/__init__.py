"""Markdown parsing and text cleaning."""

from .cleaner import Cleaner, Default, French, cleaner_for
from .markdown import Parser


__all__ = ["Cleaner", "Default", "French", "Parser", "cleaner_for"]
