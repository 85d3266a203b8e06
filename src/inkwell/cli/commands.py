"""
Click-based CLI commands for inkwell.

This module provides the ``inkwell`` command with:
- ``render``: load a book file (or a single Markdown file) and render it
- ``options``: list the known book options
- ``version``: display the version
"""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..book.book import RENDERERS, Book
from ..display.report import RunReport
from ..display.summary import book_panel
from ..logger import get_logger, get_valid_log_levels, setup_logger
from ..models.config import InkwellConfig
from ..models.number import Number
from ..models.options import OPTION_SPECS
from ..utils.exceptions import InkwellError


# Initialize Rich console for pretty output
console = Console()


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """
    inkwell - Render Markdown books to HTML, EPUB, LaTeX and ODT.

    A book file starts with YAML options (title, author, lang...) and ends
    with the list of its chapter files.

    \b
    Examples:
      # Render every format listed in the book file
      inkwell render book.book

      # Render only EPUB, to a chosen file
      inkwell render book.book -f epub -o out/book.epub

      # Override a book option
      inkwell render book.book --set rendering.num_depth 2

      # Render a single Markdown file as HTML
      inkwell render --single chapter.md -f html
    """
    # If no subcommand is given, show help
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        ctx.exit()


def load_book(
    path: Path,
    single: bool,
    overrides: list[tuple[str, str]],
    config: InkwellConfig,
    logger: logging.Logger,
) -> Book:
    """
    Create a book from a book file, or from a single Markdown file.

    Application settings are applied first, so that the book file and then
    the command line overrides take precedence over them.
    """
    book = Book(path.parent, logger)
    book.set_option("input.clean.nb_char", config.nb_char)
    if config.output_dir is not None:
        book.set_option("output.base_path", str(config.output_dir.absolute()))

    if single:
        book.source = str(path)
        book.set_options(overrides)
        book.add_chapter(Number.default(), path.name)
    else:
        book.load_file(path, overrides)
    return book


@cli.command()
@click.argument("book_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "-f",
    "formats",
    type=click.Choice(list(RENDERERS), case_sensitive=False),
    multiple=True,
    help="Format(s) to render. Defaults to the formats configured in the book file.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file. Only valid when a single format is rendered.",
)
@click.option(
    "--set",
    "overrides",
    type=(str, str),
    multiple=True,
    metavar="KEY VALUE",
    help="Set a book option, overriding the book file. Can be given multiple times.",
)
@click.option(
    "--single",
    "-s",
    is_flag=True,
    default=False,
    help="Treat BOOK_FILE as a single Markdown chapter instead of a book file.",
)
@click.option(
    "--log-level",
    type=click.Choice(get_valid_log_levels(), case_sensitive=False),
    default=None,
    help="Set the logging level for detailed output (default: from INKWELL_LOG_LEVEL).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a log file. When provided, logging output is also written to this file.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress all output except errors. Useful for scripting and automation.",
)
def render(
    book_file: Path,
    formats: tuple[str, ...],
    output: Path | None,
    overrides: tuple[tuple[str, str], ...],
    single: bool,
    log_level: str | None,
    log_file: Path | None,
    quiet: bool,
) -> None:
    """
    Render a book in one or several formats.

    Warnings and errors of the run are listed once at the end, each
    distinct message a single time. The exit code is 1 when any error
    was reported.
    """
    formats = tuple(fmt.lower() for fmt in formats)
    if output is not None and len(formats) != 1:
        raise click.UsageError("--output requires exactly one --format")

    try:
        config = InkwellConfig()
        config.validate_paths()
    except ValidationError as e:
        console.print(f"[bold red]Error:[/bold red] invalid settings: {escape(str(e))}")
        sys.exit(1)
    except OSError as e:
        console.print(
            f"[bold red]Error:[/bold red] could not create output directory: {escape(str(e))}"
        )
        sys.exit(1)

    level = "ERROR" if quiet else (log_level or config.log_level)
    setup_logger("inkwell", level, log_file=log_file or config.log_file)
    logger = get_logger("inkwell.book")
    root_logger = logging.getLogger("inkwell")
    report = RunReport(logging.INFO if config.verbose_report else logging.WARNING)
    if config.verbose_report and not quiet:
        # Console handlers keep their own level
        root_logger.setLevel(min(root_logger.level, logging.INFO))
    root_logger.addHandler(report)

    failed = False
    try:
        book = load_book(book_file, single, list(overrides), config, logger)
    except InkwellError as e:
        logger.error(str(e))
        book = None
        failed = True

    if book is not None:
        selected = list(formats) or book.formats() or list(config.default_formats)
        if not quiet:
            console.print(book_panel(book, selected))
        for fmt in selected:
            try:
                path = book.render_format_to_file(fmt, output)
            except InkwellError as e:
                logger.error(f"Error rendering {fmt}: {e}")
                failed = True
                continue
            if not quiet:
                console.print(
                    f"[bold green]✓[/bold green] {fmt}: [green]{escape(str(path))}[/green]"
                )

    root_logger.removeHandler(report)
    if not quiet:
        report.print()
    if failed or report.has_errors():
        sys.exit(1)


@cli.command()
def options() -> None:
    """List the book options with their type and default value."""
    table = Table(title="Book options", show_header=True, header_style="bold")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Type")
    table.add_column("Default")
    table.add_column("Description")
    for spec in OPTION_SPECS:
        default = "" if spec.default is None else repr(spec.default)
        table.add_row(spec.key, spec.type, escape(default), escape(spec.description))
    console.print(table)


@cli.command()
def version() -> None:
    """Display the version of inkwell."""
    console.print(f"[bold cyan]inkwell[/bold cyan] version {__version__}")


# Entry point for the CLI
def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
