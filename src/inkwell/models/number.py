"""Pydantic model describing how a chapter title is numbered."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator


NumberKind = Literal["hidden", "unnumbered", "default", "specified"]


class Number(BaseModel):
    """Numbering mode of a chapter.

    * ``hidden``: the chapter title is not displayed at all
    * ``unnumbered``: the title is displayed without a number
    * ``default``: follow the book's global numbering setting
    * ``specified``: numbered, with the chapter counter forced to ``value``

    Use the class constructors rather than building instances by hand::

        Number.default()
        Number.specified(3)
    """

    model_config = ConfigDict(frozen=True)

    kind: NumberKind
    value: int | None = None

    @model_validator(mode="after")
    def _check_value(self) -> "Number":
        if self.kind == "specified" and self.value is None:
            raise ValueError("a specified chapter number needs a value")
        if self.kind != "specified" and self.value is not None:
            raise ValueError(f"a {self.kind} chapter number takes no value")
        return self

    @classmethod
    def hidden(cls) -> "Number":
        return cls(kind="hidden")

    @classmethod
    def unnumbered(cls) -> "Number":
        return cls(kind="unnumbered")

    @classmethod
    def default(cls) -> "Number":
        return cls(kind="default")

    @classmethod
    def specified(cls, value: int) -> "Number":
        return cls(kind="specified", value=value)

    def is_hidden(self) -> bool:
        return self.kind == "hidden"

    def is_numbered(self, global_numbering: bool = True) -> bool:
        """Check whether chapters with this mode get a number.

        Args:
            global_numbering: Whether the book numbers chapters by default

        Returns:
            True for ``specified``, ``global_numbering`` for ``default``,
            False otherwise
        """
        if self.kind == "specified":
            return True
        if self.kind == "default":
            return global_numbering
        return False

    def __str__(self) -> str:
        if self.kind == "specified":
            return f"specified({self.value})"
        return self.kind
