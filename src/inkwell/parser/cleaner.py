"""Typographic cleaning of literal text runs.

A cleaner is a small strategy object with a single ``clean`` method. The
parser applies it to every text run outside of code. Only three characters
count as whitespace here: the plain space, the no-break space (U+00A0) and
the narrow no-break space (U+202F); tabs and newlines are never touched.
"""

WHITESPACE = frozenset(" \u00a0\u202f")

# Punctuation preceded by a non-breaking space in French typography
FRENCH_CLOSING = frozenset("?!;:»")
FRENCH_OPENING = "«"
FRENCH_MARKS = FRENCH_CLOSING | {FRENCH_OPENING}

NARROW_NB_SPACE = "\u202f"


def has_whitespace_run(text: str) -> bool:
    """Check whether ``text`` contains two adjacent whitespace characters."""
    return any(a in WHITESPACE and b in WHITESPACE for a, b in zip(text, text[1:], strict=False))


def collapse_whitespace(text: str) -> str:
    """Collapse each run of whitespace to its first character.

    Returns ``text`` itself when there is nothing to collapse.
    """
    if not has_whitespace_run(text):
        return text
    output: list[str] = []
    previous_space = False
    for c in text:
        if c in WHITESPACE:
            if previous_space:
                continue
            previous_space = True
        else:
            previous_space = False
        output.append(c)
    return "".join(output)


class Cleaner:
    """Cleaner that leaves text untouched (used when cleaning is disabled)."""

    name = "off"

    def clean(self, text: str) -> str:
        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Default(Cleaner):
    """Collapse runs of whitespace, keeping the first character of each run."""

    name = "default"

    def clean(self, text: str) -> str:
        return collapse_whitespace(text)


class French(Default):
    """Default cleaning plus French non-breaking spaces around punctuation.

    A whitespace character right before ``? ! ; : »`` is replaced by
    ``nb_char``, and the whitespace following ``«`` is replaced by
    ``nb_char`` as well.

    Args:
        nb_char: Character inserted; defaults to the narrow no-break space
    """

    name = "french"

    def __init__(self, nb_char: str = NARROW_NB_SPACE):
        if len(nb_char) != 1:
            raise ValueError(f"nb_char must be a single character, got {nb_char!r}")
        self.nb_char = nb_char

    def clean(self, text: str) -> str:
        text = super().clean(text)
        if not any(c in FRENCH_MARKS for c in text):
            return text

        output: list[str] = []
        i = 0
        length = len(text)
        while i < length:
            c = text[i]
            following = text[i + 1] if i + 1 < length else ""
            if c in WHITESPACE and following in FRENCH_CLOSING:
                output.append(self.nb_char)
            elif c == FRENCH_OPENING and following in WHITESPACE:
                output.append(c)
                output.append(self.nb_char)
                i += 1
            else:
                output.append(c)
            i += 1
        return "".join(output)

    def __repr__(self) -> str:
        return f"French(nb_char={self.nb_char!r})"


def cleaner_for(lang: str, enabled: bool = True, nb_char: str = NARROW_NB_SPACE) -> Cleaner:
    """Select the cleaner matching a book language.

    Args:
        lang: Language code of the book (``fr``, ``fr_FR``, ``en``...)
        enabled: When False, return a cleaner that does nothing
        nb_char: Character used by the French cleaner

    Returns:
        ``French`` for languages starting with ``fr``, ``Default`` otherwise
    """
    if not enabled:
        return Cleaner()
    if lang.lower().startswith("fr"):
        return French(nb_char)
    return Default()
