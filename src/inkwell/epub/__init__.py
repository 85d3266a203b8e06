"""EPUB packaging module for inkwell."""

from .builder import EPUBBuilder, EpubChapter


__all__ = ["EPUBBuilder", "EpubChapter"]
