"""Shared pytest fixtures and configuration for inkwell tests."""

import logging

import pytest

from inkwell.book.book import Book
from inkwell.models.number import Number


@pytest.fixture
def logger() -> logging.Logger:
    """Logger handed to books under test; propagates so caplog sees it."""
    test_logger = logging.getLogger("inkwell.tests")
    test_logger.setLevel(logging.DEBUG)
    return test_logger


@pytest.fixture
def book(tmp_path, logger) -> Book:
    """Empty book rooted in a temporary directory."""
    return Book(tmp_path, logger)


@pytest.fixture
def sample_chapter_md() -> str:
    """Markdown source of a typical chapter."""
    return (
        "# Getting started\n"
        "\n"
        "Some *emphasis* and **strong** text with `code`.\n"
        "\n"
        "## First section\n"
        "\n"
        "- one\n"
        "- two\n"
        "\n"
        "```python\n"
        "print('hello')\n"
        "```\n"
    )


@pytest.fixture
def book_dir(tmp_path, sample_chapter_md):
    """A book directory with a book file, three chapters and one image."""
    (tmp_path / "chapters").mkdir()
    (tmp_path / "chapters" / "images").mkdir()
    (tmp_path / "chapters" / "images" / "figure.png").write_bytes(b"\x89PNG fake image data")
    (tmp_path / "preface.md").write_text("# Preface\n\nWelcome.\n", encoding="utf-8")
    (tmp_path / "chapters" / "one.md").write_text(sample_chapter_md, encoding="utf-8")
    (tmp_path / "chapters" / "two.md").write_text(
        "# Going further\n\n![A figure](images/figure.png)\n\nBack to [the start](one.md).\n",
        encoding="utf-8",
    )
    (tmp_path / "book.book").write_text(
        "author: Jane Doe\n"
        "title: A Test Book\n"
        "lang: en\n"
        "output.html: out/book.html\n"
        "\n"
        "# Chapters\n"
        "- preface.md\n"
        "+ chapters/one.md\n"
        "+ chapters/two.md\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def two_chapter_book(book) -> Book:
    """Book with two default-numbered chapters, each with one title."""
    book.add_chapter_from_source(Number.default(), "# Alpha\n\nFirst.\n", "alpha.md")
    book.add_chapter_from_source(Number.default(), "# Beta\n\nSecond.\n", "beta.md")
    return book


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on location."""
    for item in items:
        # Auto-mark integration tests
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        # Auto-mark unit tests
        elif "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
