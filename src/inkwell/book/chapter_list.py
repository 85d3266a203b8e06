"""
Book configuration file reader.

A book file starts with a YAML mapping of options and ends with the chapter
list, one entry per line::

    title: My book
    author: Me

    ! preface.md
    + chapter_01.md
    -- chapter_01_annex.md
    3. chapter_03.md
    - afterword.md

The YAML header ends at the first line starting with ``-``, ``+``, ``!`` or
a digit. In the chapter list, ``#`` starts a comment line and blank lines
are ignored.
"""

import re
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

from ..models.number import Number
from ..utils.exceptions import ConfigParseError


CHAPTER_MARKS = ("-", "+", "!")


class HeaderLoader(yaml.SafeLoader):
    """
    Safe loader resolving scalars the YAML 1.2 way for dates and booleans.

    Dates stay strings and only ``true``/``false`` are booleans, so that
    ``date: 2024-05-01`` or ``subtitle: yes`` keep their text.
    """


_DROPPED_TAGS = ("tag:yaml.org,2002:bool", "tag:yaml.org,2002:timestamp")
HeaderLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _DROPPED_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
HeaderLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


class ChapterEntry(BaseModel):
    """One line of the chapter list."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["chapter", "subchapter"] = "chapter"
    number: Number = Field(default_factory=Number.default)
    level: int = Field(default=0, ge=0, description="Header shift of a subchapter")
    filename: str
    line: int = Field(..., description="Line number in the book file (1-based)")


def starts_chapter_list(line: str) -> bool:
    return bool(line) and (line.startswith(CHAPTER_MARKS) or line[0].isdigit())


def split_config(text: str) -> tuple[str, list[tuple[int, str]]]:
    """
    Split a book file into its YAML header and its chapter list.

    Args:
        text: Content of the book file

    Returns:
        The YAML header text, and the remaining lines with their 1-based
        line numbers
    """
    lines = text.splitlines()
    for index, line in enumerate(lines):
        if starts_chapter_list(line):
            header = "\n".join(lines[:index])
            return header, [(index + 1 + i, rest) for i, rest in enumerate(lines[index:])]
    return text, []


def parse_yaml_header(header: str, source: str | None = None) -> dict[str, Any]:
    """
    Parse the YAML header of a book file.

    Args:
        header: YAML text
        source: Book file name, for error messages

    Returns:
        Option keys mapped to their values, in file order

    Raises:
        ConfigParseError: If the header is not valid YAML or not a mapping
    """
    try:
        data = yaml.load(header, Loader=HeaderLoader)
    except yaml.YAMLError as e:
        line = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line = mark.line + 1
        raise ConfigParseError(f"YAML block was not valid YAML: {e}", source, line) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError("YAML part of the book is not a valid mapping", source)
    return {str(key): value for key, value in data.items()}


def _filename(rest: str, source: str | None, line: int) -> str:
    words = rest.split()
    if len(words) > 1:
        raise ConfigParseError("chapter filenames must not contain whitespace", source, line)
    if not words:
        raise ConfigParseError("no chapter name specified", source, line)
    return words[0]


def parse_chapter_line(text: str, line: int, source: str | None = None) -> ChapterEntry | None:
    """
    Parse one line of the chapter list.

    Returns:
        The chapter entry, or None for blank and comment lines

    Raises:
        ConfigParseError: If the line is not a valid chapter definition
    """
    text = text.strip()
    if not text or text.startswith("#"):
        return None

    if text.startswith("--"):
        dashes = len(text) - len(text.lstrip("-"))
        return ChapterEntry(
            kind="subchapter",
            level=dashes - 1,
            filename=_filename(text[dashes:], source, line),
            line=line,
        )
    if text.startswith("-"):
        number = Number.unnumbered()
    elif text.startswith("+"):
        number = Number.default()
    elif text.startswith("!"):
        number = Number.hidden()
    elif text[0].isdigit():
        digits = len(text) - len(text.lstrip("0123456789"))
        separator = text[digits : digits + 1]
        if separator not in (".", ":", "+"):
            raise ConfigParseError("ill-formatted line specifying chapter number", source, line)
        try:
            number = Number.specified(int(text[:digits]))
        except ValueError as e:
            raise ConfigParseError(f"error parsing chapter number: {e}", source, line) from e
        filename = _filename(text[digits + 1 :], source, line)
        return ChapterEntry(number=number, filename=filename, line=line)
    else:
        raise ConfigParseError("found invalid chapter definition in the chapter list", source, line)
    return ChapterEntry(number=number, filename=_filename(text[1:], source, line), line=line)


def parse_chapter_list(
    lines: list[tuple[int, str]], source: str | None = None
) -> list[ChapterEntry]:
    """Parse the numbered lines of a chapter list, skipping comments and blank lines."""
    entries = []
    for line, text in lines:
        entry = parse_chapter_line(text, line, source)
        if entry is not None:
            entries.append(entry)
    return entries
