"""Typed, schema-driven store for book options.

Every option key has a statically known type. Values arrive either as
strings (command line overrides, ``set``) or as already typed Python values
(YAML header, ``set_value``); both are checked against the key's type and a
mismatch raises ``InvalidOptionTypeError`` rather than being coerced.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..utils.exceptions import (
    InvalidOptionKeyError,
    InvalidOptionTypeError,
    OptionNotSetError,
)


OptionType = Literal["str", "bool", "char", "int", "float", "path", "strlist"]
OptionValue = str | bool | int | float | list[str]

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1


class OptionSpec(BaseModel):
    """Declaration of a single book option."""

    model_config = ConfigDict(frozen=True)

    key: str
    type: OptionType
    default: OptionValue | None = None
    description: str = ""


OPTION_SPECS: tuple[OptionSpec, ...] = (
    # Metadata
    OptionSpec(key="author", type="str", default="Anonymous", description="Author of the book"),
    OptionSpec(key="title", type="str", default="Untitled", description="Title of the book"),
    OptionSpec(key="lang", type="str", default="en", description="Language of the book"),
    OptionSpec(key="subtitle", type="str", description="Subtitle of the book"),
    OptionSpec(key="subject", type="str", description="Subject of the book (EPUB metadata)"),
    OptionSpec(key="description", type="str", description="Description of the book (metadata)"),
    OptionSpec(key="license", type="str", description="License of the book"),
    OptionSpec(key="version", type="str", description="Version of the book"),
    OptionSpec(key="date", type="str", description="Date the book was revised"),
    OptionSpec(key="cover", type="path", description="Path to the cover image of the book"),
    # Output
    OptionSpec(key="output", type="strlist", description="List of output formats to render"),
    OptionSpec(key="output.html", type="path", description="Output file for HTML rendering"),
    OptionSpec(key="output.epub", type="path", description="Output file for EPUB rendering"),
    OptionSpec(key="output.tex", type="path", description="Output file for LaTeX rendering"),
    OptionSpec(key="output.odt", type="path", description="Output file for ODT rendering"),
    OptionSpec(
        key="output.html.dir",
        type="path",
        description="Output directory for multi-file HTML rendering",
    ),
    OptionSpec(
        key="output.base_path",
        type="path",
        default="",
        description="Directory where output files are written",
    ),
    # Rendering
    OptionSpec(
        key="rendering.num_depth",
        type="int",
        default=1,
        description="Maximum header level that is numbered (0: none, 1: chapters only)",
    ),
    OptionSpec(
        key="rendering.chapter.template",
        type="str",
        default="{number}. {title}",
        description="Naming scheme of numbered chapters",
    ),
    OptionSpec(
        key="rendering.chapter.fallback",
        type="str",
        default="Chapter {number}",
        description="Title given to numbered chapters without a level-1 header",
    ),
    OptionSpec(
        key="rendering.chapter.require_title",
        type="bool",
        default=False,
        description="Fail instead of using the fallback title when a chapter has no title",
    ),
    OptionSpec(
        key="rendering.inline_toc",
        type="bool",
        default=False,
        description="Display a table of contents in the document",
    ),
    OptionSpec(
        key="rendering.inline_toc.name",
        type="str",
        default="Table of contents",
        description="Name of the inline table of contents",
    ),
    # HTML
    OptionSpec(key="html.css", type="path", description="Stylesheet for HTML rendering"),
    OptionSpec(key="html.header", type="str", description="Custom header for the HTML file"),
    OptionSpec(key="html.footer", type="str", description="Custom footer for the HTML file"),
    OptionSpec(
        key="html.escape_nb_spaces",
        type="bool",
        default=True,
        description="Replace non-breaking spaces with HTML entities and CSS",
    ),
    # EPUB
    OptionSpec(key="epub.version", type="int", default=2, description="EPUB version (2 or 3)"),
    OptionSpec(key="epub.css", type="path", description="Stylesheet for EPUB rendering"),
    OptionSpec(
        key="epub.toc.extras",
        type="bool",
        default=True,
        description="Add the title page (and cover) to the EPUB table of contents",
    ),
    OptionSpec(
        key="epub.escape_nb_spaces",
        type="bool",
        default=True,
        description="Replace non-breaking spaces with HTML entities and CSS",
    ),
    # LaTeX
    OptionSpec(
        key="tex.links_as_footnotes",
        type="bool",
        default=True,
        description="Add footnotes with the URL of external links",
    ),
    OptionSpec(
        key="tex.escape_nb_spaces",
        type="bool",
        default=True,
        description="Replace non-breaking spaces with TeX code",
    ),
    OptionSpec(key="tex.class", type="str", default="book", description="LaTeX document class"),
    OptionSpec(key="tex.paper.size", type="str", default="a5paper", description="Paper size"),
    OptionSpec(key="tex.title", type="bool", default=True, description="Generate \\maketitle"),
    OptionSpec(key="tex.font.size", type="int", description="Font size in pt (10, 11 or 12)"),
    # Resources
    OptionSpec(
        key="resources.base_path",
        type="path",
        description="Base path of links and images (overrides the chapter directory)",
    ),
    OptionSpec(
        key="resources.base_path.links",
        type="path",
        description="Base path of links only",
    ),
    OptionSpec(
        key="resources.base_path.images",
        type="path",
        description="Base path of images only",
    ),
    # Input
    OptionSpec(
        key="input.clean",
        type="bool",
        default=True,
        description="Typographic cleaning of the input according to lang",
    ),
    OptionSpec(
        key="input.clean.nb_char",
        type="char",
        default="\u202f",
        description="Non-breaking character inserted by the French cleaner",
    ),
)

# Renamed keys, still accepted on input
OPTION_ALIASES: dict[str, str] = {
    "numbering": "rendering.num_depth",
    "numbering_template": "rendering.chapter.template",
    "rendering.chapter_template": "rendering.chapter.template",
    "display_toc": "rendering.inline_toc",
    "toc_name": "rendering.inline_toc.name",
    "output.html_dir": "output.html.dir",
    "autoclean": "input.clean",
    "input.autoclean": "input.clean",
    "nb_char": "input.clean.nb_char",
    "base_path": "resources.base_path",
    "base_path.links": "resources.base_path.links",
    "base_path.images": "resources.base_path.images",
}

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


class BookOptions:
    """Typed key/value store holding the options of one book.

    Args:
        root: Book root directory, used to resolve ``path`` options
        logger: Logger receiving notices about replaced and renamed options
    """

    def __init__(self, root: Path | str = ".", logger: logging.Logger | None = None):
        self.root = Path(root)
        self.logger = logger or logging.getLogger("inkwell.options")
        self.specs: dict[str, OptionSpec] = {spec.key: spec for spec in OPTION_SPECS}
        self._values: dict[str, OptionValue] = {}

    # ------------------------------------------------------------------ keys

    def resolve_key(self, key: str) -> str:
        """Return the canonical key for ``key``, following renamed aliases."""
        if key in OPTION_ALIASES:
            new_key = OPTION_ALIASES[key]
            self.logger.warning(f"Option '{key}' has been renamed to '{new_key}'")
            return new_key
        return key

    def spec(self, key: str) -> OptionSpec:
        try:
            return self.specs[key]
        except KeyError:
            raise InvalidOptionKeyError(f"unknown option '{key}'") from None

    def __contains__(self, key: str) -> bool:
        return key in self._values or (key in self.specs and self.specs[key].default is not None)

    def __iter__(self) -> Iterator[tuple[str, OptionValue]]:
        """Iterate over explicitly set options, in insertion order."""
        return iter(self._values.items())

    # --------------------------------------------------------------- setters

    def set(self, key: str, value: str) -> OptionValue | None:
        """Set an option from its string representation.

        Args:
            key: Option key (renamed keys are accepted)
            value: String form of the value, parsed according to the key's type

        Returns:
            The previous value, or None if the option was not set

        Raises:
            InvalidOptionKeyError: If the key is unknown
            InvalidOptionTypeError: If the string cannot be parsed as the key's type
        """
        key = self.resolve_key(key)
        spec = self.spec(key)
        return self._store(key, self._parse(spec, value))

    def set_value(self, key: str, value: Any) -> OptionValue | None:
        """Set an option from an already typed value (e.g. loaded from YAML).

        Raises:
            InvalidOptionKeyError: If the key is unknown
            InvalidOptionTypeError: If the value does not have the key's type
        """
        key = self.resolve_key(key)
        spec = self.spec(key)
        return self._store(key, self._check(spec, value))

    def set_many(self, pairs: Iterable[tuple[str, Any]]) -> None:
        """Set options from an ordered sequence; later pairs win over earlier ones.

        String values are parsed, other values must already have the right type.
        """
        for key, value in pairs:
            if isinstance(value, str):
                self.set(key, value)
            else:
                self.set_value(key, value)

    def _store(self, key: str, value: OptionValue) -> OptionValue | None:
        previous = self._values.get(key)
        if previous is not None:
            self.logger.debug(
                f"Option '{key}' was already set to {previous!r}, replacing it with {value!r}"
            )
        self._values[key] = value
        return previous

    @staticmethod
    def _parse(spec: OptionSpec, value: str) -> OptionValue:
        kind = spec.type
        if kind in ("str", "path"):
            return value
        if kind == "bool":
            lowered = value.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise InvalidOptionTypeError(f"option '{spec.key}' expects a boolean, got '{value}'")
        if kind == "char":
            if len(value) != 1:
                raise InvalidOptionTypeError(
                    f"option '{spec.key}' expects a single character, got '{value}'"
                )
            return value
        if kind == "int":
            try:
                number = int(value.strip())
            except ValueError:
                raise InvalidOptionTypeError(
                    f"option '{spec.key}' expects an integer, got '{value}'"
                ) from None
            return BookOptions._check_i32(spec, number)
        if kind == "float":
            try:
                return float(value.strip())
            except ValueError:
                raise InvalidOptionTypeError(
                    f"option '{spec.key}' expects a float, got '{value}'"
                ) from None
        return value.split()

    @staticmethod
    def _check(spec: OptionSpec, value: Any) -> OptionValue:
        kind = spec.type
        if kind in ("str", "path"):
            if isinstance(value, str):
                return value
        elif kind == "bool":
            if isinstance(value, bool):
                return value
        elif kind == "char":
            if isinstance(value, str) and len(value) == 1:
                return value
        elif kind == "int":
            if isinstance(value, int) and not isinstance(value, bool):
                return BookOptions._check_i32(spec, value)
        elif kind == "float":
            if isinstance(value, int | float) and not isinstance(value, bool):
                return float(value)
        elif kind == "strlist":
            if isinstance(value, str):
                return value.split()
            if isinstance(value, list) and all(isinstance(item, str) for item in value):
                return list(value)
        raise InvalidOptionTypeError(
            f"option '{spec.key}' expects a value of type {kind}, got {value!r}"
        )

    @staticmethod
    def _check_i32(spec: OptionSpec, value: int) -> int:
        if not I32_MIN <= value <= I32_MAX:
            raise InvalidOptionTypeError(f"option '{spec.key}' is out of range: {value}")
        return value

    # --------------------------------------------------------------- getters

    def get(self, key: str) -> OptionValue:
        """Return the value of an option, or its default.

        Raises:
            InvalidOptionKeyError: If the key is unknown
            OptionNotSetError: If the option has neither a value nor a default
        """
        spec = self.spec(key)
        if key in self._values:
            return self._values[key]
        if spec.default is not None:
            return spec.default
        raise OptionNotSetError(f"option '{key}' is not set")

    def _get_typed(self, key: str, *kinds: OptionType) -> OptionValue:
        spec = self.spec(key)
        if spec.type not in kinds:
            raise InvalidOptionTypeError(
                f"option '{key}' has type {spec.type}, it cannot be read as {'/'.join(kinds)}"
            )
        return self.get(key)

    def get_str(self, key: str) -> str:
        value = self._get_typed(key, "str", "char", "path")
        assert isinstance(value, str)
        return value

    def get_bool(self, key: str) -> bool:
        return bool(self._get_typed(key, "bool"))

    def get_char(self, key: str) -> str:
        value = self._get_typed(key, "char")
        assert isinstance(value, str)
        return value

    def get_i32(self, key: str) -> int:
        value = self._get_typed(key, "int")
        assert isinstance(value, int)
        return value

    def get_f32(self, key: str) -> float:
        value = self._get_typed(key, "float")
        assert isinstance(value, float)
        return value

    def get_str_list(self, key: str) -> list[str]:
        value = self._get_typed(key, "strlist")
        assert isinstance(value, list)
        return list(value)

    def get_relative_path(self, key: str) -> str:
        """Return a path option as written, relative to the book root."""
        value = self._get_typed(key, "path")
        assert isinstance(value, str)
        return value

    def get_path(self, key: str) -> Path:
        """Return a path option resolved against the book root."""
        return self.root / self.get_relative_path(key)

    def get_or(self, key: str, default: Any = None) -> Any:
        """Return an option value, or ``default`` when it is not set."""
        try:
            return self.get(key)
        except OptionNotSetError:
            return default
