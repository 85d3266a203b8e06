"""Pydantic model for book metadata, as used by packaged output formats."""

import uuid

from pydantic import BaseModel, ConfigDict, Field

from .options import BookOptions


class BookMetadata(BaseModel):
    """Descriptive metadata of a book.

    Collected once from the book options so that templates (OPF, NCX,
    title pages, LaTeX preamble, ODT meta) never read options directly.
    """

    model_config = ConfigDict(frozen=True)

    # Required fields
    identifier: str = Field(..., description="Unique book identifier (urn:uuid)")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    lang: str = Field(default="en", description="Book language code")

    # Optional metadata
    subtitle: str | None = None
    subject: str | None = None
    description: str | None = None
    license: str | None = None
    version: str | None = None
    date: str | None = None

    @classmethod
    def from_options(cls, options: BookOptions) -> "BookMetadata":
        """
        Build metadata from book options.

        The identifier is derived from title and author, so that rendering
        the same book twice gives the same identifier.

        Args:
            options: Options of the book

        Returns:
            BookMetadata instance
        """
        title = options.get_str("title")
        author = options.get_str("author")
        identifier = uuid.uuid5(uuid.NAMESPACE_URL, f"inkwell:{author}:{title}")
        return cls(
            identifier=f"urn:uuid:{identifier}",
            title=title,
            author=author,
            lang=options.get_str("lang"),
            subtitle=options.get_or("subtitle"),
            subject=options.get_or("subject"),
            description=options.get_or("description"),
            license=options.get_or("license"),
            version=options.get_or("version"),
            date=options.get_or("date"),
        )
