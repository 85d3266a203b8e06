"""Rich panel describing the book about to be rendered."""

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..book.book import Book
from ..models.metadata import BookMetadata
from .constants import EMOJI_MAP


def book_panel(book: Book, formats: list[str]) -> Panel:
    """
    Build a panel with the book metadata and what will be rendered.

    Args:
        book: Loaded book
        formats: Formats selected for this run

    Returns:
        Panel ready to be printed on a Rich console
    """
    metadata = BookMetadata.from_options(book.options)

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Field", style="bold cyan", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row(f"{EMOJI_MAP['book']} Title", Text(metadata.title))
    if metadata.subtitle:
        table.add_row("Subtitle", Text(metadata.subtitle))
    table.add_row("Author", Text(metadata.author))
    table.add_row("Language", metadata.lang)

    chapters = [c for c in book.chapters if not c.is_subchapter()]
    subchapters = len(book.chapters) - len(chapters)
    count = str(len(chapters))
    if subchapters:
        count += f" (+{subchapters} subchapters)"
    table.add_row("Chapters", count)
    table.add_row("Formats", ", ".join(formats) or "none")

    return Panel(
        table,
        title="[bold green]Book Information[/bold green]",
        border_style="green",
        padding=(1, 2),
    )
