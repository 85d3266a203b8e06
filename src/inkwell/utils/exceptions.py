"""Custom exception hierarchy for inkwell."""


class InkwellError(Exception):
    """Base exception for all inkwell errors.

    Args:
        message: Human readable description of the problem
        source: File the error relates to, if known
        line: Line number inside ``source``, if known
    """

    def __init__(self, message: str, source: str | None = None, line: int | None = None):
        super().__init__(message)
        self.message = message
        self.source = source
        self.line = line

    def __str__(self) -> str:
        if not self.source:
            return self.message
        if self.line is None:
            return f"{self.source}: {self.message}"
        return f"{self.source}:{self.line}: {self.message}"


class BookFileNotFoundError(InkwellError):
    """Raised when a chapter, image or book file does not exist."""


class InvalidUtf8Error(InkwellError):
    """Raised when a source file is not valid UTF-8."""


class ParseError(InkwellError):
    """Raised when Markdown contains a construct that cannot be rendered."""


class ConfigParseError(InkwellError):
    """Raised when the book configuration (YAML header or chapter list) is malformed."""


class InvalidOptionTypeError(InkwellError):
    """Raised when an option value does not match the type of its key."""


class InvalidOptionKeyError(InkwellError):
    """Raised when an option key is unknown."""


class RenderError(InkwellError):
    """Raised when rendering or packaging an output format fails."""


class MissingRequiredHeaderError(RenderError):
    """Raised when a numbered chapter has no level-1 header and no fallback is allowed."""


class InvalidHeaderLevelError(InkwellError, ValueError):
    """Raised when a header level is outside 1..6."""


class OptionNotSetError(InkwellError):
    """Raised when reading an option that has neither a value nor a default."""
