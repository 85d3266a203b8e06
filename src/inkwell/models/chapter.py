"""Pydantic model for a parsed book chapter."""

from pydantic import BaseModel, ConfigDict, Field

from .number import Number
from .token import Token, has_chapter_title


class Chapter(BaseModel):
    """Single chapter of a book.

    Holds the numbering mode decided when the chapter was added, the source
    filename (empty for chapters added from a string) and the parsed token
    tree. A chapter is never modified once the book stores it.
    """

    model_config = ConfigDict(frozen=True)

    number: Number = Field(..., description="Numbering mode of the chapter")
    filename: str = Field(default="", description="Source file, relative to the book root")
    content: list[Token] = Field(default_factory=list, description="Parsed token tree")
    level: int = Field(
        default=0, ge=0, description="Subchapter depth (0 for a chapter), headers already shifted"
    )

    def is_subchapter(self) -> bool:
        return self.level > 0

    def has_title(self) -> bool:
        """Check if the chapter contains a level-1 header."""
        return has_chapter_title(self.content)
