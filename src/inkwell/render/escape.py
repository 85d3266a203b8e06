"""Escaping of literal text for the output formats."""

HTML_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}

TEX_ESCAPES = {
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde",
    "^": r"\textasciicircum",
    "\\": r"\textbackslash",
}

NB_SPACE = "\u00a0"
NARROW_NB_SPACE = "\u202f"

_HTML_TABLE = str.maketrans(HTML_ESCAPES)
_ATTRIBUTE_TABLE = str.maketrans({**HTML_ESCAPES, '"': "&quot;"})
_TEX_TABLE = str.maketrans(TEX_ESCAPES)
_URL_ARGUMENT_TABLE = str.maketrans({"#": r"\#", "%": r"\%"})


def escape_html(text: str) -> str:
    """Escape ``&``, ``<`` and ``>``."""
    return text.translate(_HTML_TABLE)


def escape_attribute(text: str) -> str:
    """Escape text placed inside a double-quoted HTML/XML attribute."""
    return text.translate(_ATTRIBUTE_TABLE)


def escape_tex(text: str) -> str:
    """Escape LaTeX special characters, each one independently."""
    return text.translate(_TEX_TABLE)


def escape_url_argument(url: str) -> str:
    """Escape a URL given to ``\\url`` inside the argument of another command.

    ``\\url`` reads its argument verbatim only at top level: nested in a
    ``\\footnote``, ``#`` and ``%`` must be escaped.
    """
    return url.translate(_URL_ARGUMENT_TABLE)


def escape_nb_spaces(text: str) -> str:
    """Wrap non-breaking spaces in spans so that CSS can size them.

    Narrow no-break spaces are rendered by most fonts as full-width ones.
    """
    if NB_SPACE not in text and NARROW_NB_SPACE not in text:
        return text
    return text.replace(NB_SPACE, '<span class = "nbsp">&#160;</span>').replace(
        NARROW_NB_SPACE, '<span class = "nnbsp">&#8201;</span>'
    )


def escape_nb_spaces_tex(text: str) -> str:
    """Replace no-break spaces by the LaTeX tie ``~``.

    Must run after ``escape_tex``, which would otherwise escape the tie.
    """
    if NB_SPACE not in text and NARROW_NB_SPACE not in text:
        return text
    return text.replace(NB_SPACE, "~").replace(NARROW_NB_SPACE, r"\,")
