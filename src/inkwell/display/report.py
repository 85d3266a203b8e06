"""
End-of-run report.

Renderers log the same warning once per occurrence (e.g. one per non-local
image). ``RunReport`` collects the records of a run and prints each
distinct message once, in the order it was first seen.
"""

import logging

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .constants import EMOJI_MAP, STYLES


class ReportEntry:
    """A distinct message of the run, with the number of times it was logged."""

    __slots__ = ("count", "level", "message")

    def __init__(self, level: int, message: str):
        self.level = level
        self.message = message
        self.count = 1

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level).lower()


class RunReport(logging.Handler):
    """
    Logging handler collecting the warnings and errors of one run.

    Messages are deduplicated by their exact text: the first record fixes
    the entry's level and position, later ones only increase its count.

    Args:
        level: Minimum level of collected records (default: WARNING)
    """

    def __init__(self, level: int = logging.WARNING):
        super().__init__(level)
        self.entries: dict[str, ReportEntry] = {}

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            self.handleError(record)
            return
        entry = self.entries.get(message)
        if entry is None:
            self.entries[message] = ReportEntry(record.levelno, message)
        else:
            entry.count += 1

    def __len__(self) -> int:
        return len(self.entries)

    def messages(self) -> list[str]:
        """Distinct messages, in first-seen order."""
        return list(self.entries)

    def has_errors(self) -> bool:
        return any(entry.level >= logging.ERROR for entry in self.entries.values())

    def clear(self) -> None:
        self.entries.clear()

    def build_table(self, title: str = "Run report") -> Table:
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("", width=2)
        table.add_column("Level", no_wrap=True)
        table.add_column("Message")
        table.add_column("Count", justify="right")
        for entry in self.entries.values():
            name = entry.level_name
            table.add_row(
                EMOJI_MAP.get(name, ""),
                f"[{STYLES.get(name, 'white')}]{name}[/]",
                Text(entry.message),
                str(entry.count),
            )
        return table

    def print(self, console: Console | None = None, title: str = "Run report") -> None:
        """Print the collected messages, or nothing when there are none."""
        if not self.entries:
            return
        console = console or Console(stderr=True)
        console.print(self.build_table(title))
