"""Unit tests for link/image offsetting and image mapping."""

import logging

import pytest

from inkwell.book.resources import ResourceHandler, add_offset, is_local
from inkwell.models.token import Image, Link, Paragraph, Str
from inkwell.utils.exceptions import BookFileNotFoundError


@pytest.fixture
def images_root(tmp_path):
    (tmp_path / "img").mkdir()
    (tmp_path / "img" / "a.png").write_bytes(b"a")
    (tmp_path / "img" / "b.jpg").write_bytes(b"b")
    (tmp_path / "img" / "raw").write_bytes(b"raw")
    return tmp_path


class TestIsLocal:
    def test_urls(self):
        assert is_local("chapter.md")
        assert is_local("../images/a.png")
        assert not is_local("http://example.com/a.png")
        assert not is_local("https://example.com")


class TestAddOffset:
    """Test offsetting of local URLs."""

    def test_offsets_nested_links_and_images(self):
        tokens = [
            Paragraph(
                [
                    Link("other.md", "", [Image("pic.png", "", [Str("alt")])]),
                    Image("fig.png", "", []),
                ]
            )
        ]
        add_offset("chapters", "media", tokens)
        link = tokens[0].children[0]
        assert link.url == "chapters/other.md"
        assert link.children[0].url == "media/pic.png"
        assert tokens[0].children[1].url == "media/fig.png"

    def test_remote_urls_untouched(self):
        tokens = [Paragraph([Link("http://foo.bar", "", []), Image("https://x/y.png", "", [])])]
        add_offset("chapters", "chapters", tokens)
        assert tokens[0].children[0].url == "http://foo.bar"
        assert tokens[0].children[1].url == "https://x/y.png"

    def test_empty_offsets(self):
        tokens = [Paragraph([Link("a.md", "", [])])]
        add_offset("", "", tokens)
        assert tokens[0].children[0].url == "a.md"


class TestResourceHandler:
    """Test image mapping and link registration."""

    def test_map_image_allocates_destinations(self, images_root):
        handler = ResourceHandler(images_root, map_images=True)
        assert handler.map_image("img/a.png") == "images/image_0.png"
        assert handler.map_image("img/b.jpg") == "images/image_1.jpg"
        # Same source maps to the same destination
        assert handler.map_image("img/a.png") == "images/image_0.png"
        assert list(handler.images()) == [
            ("img/a.png", "images/image_0.png"),
            ("img/b.jpg", "images/image_1.jpg"),
        ]

    def test_map_image_without_mapping(self, images_root):
        handler = ResourceHandler(images_root)
        assert handler.map_image("img/a.png") == "img/a.png"
        assert list(handler.images()) == []

    def test_missing_image(self, images_root):
        handler = ResourceHandler(images_root, map_images=True)
        with pytest.raises(BookFileNotFoundError, match="img/missing.png"):
            handler.map_image("img/missing.png")

    def test_remote_image_warns(self, images_root, caplog):
        logger = logging.getLogger("inkwell.tests.resources")
        handler = ResourceHandler(images_root, logger, map_images=True)
        with caplog.at_level(logging.WARNING, logger="inkwell.tests.resources"):
            assert handler.map_image("http://x/y.png") == "http://x/y.png"
        assert "not a local file" in caplog.text

    def test_image_without_extension_warns(self, images_root, caplog):
        logger = logging.getLogger("inkwell.tests.resources")
        handler = ResourceHandler(images_root, logger, map_images=True)
        with caplog.at_level(logging.WARNING, logger="inkwell.tests.resources"):
            assert handler.map_image("img/raw") == "images/image_0"
        assert "has no extension" in caplog.text

    def test_links(self):
        handler = ResourceHandler()
        handler.add_link("chapters/one.md", "chapter_001.xhtml")
        assert handler.contains_link("chapters/one.md")
        assert handler.get_link("chapters/one.md") == "chapter_001.xhtml"

    def test_link_matches_md_variant(self):
        handler = ResourceHandler()
        handler.add_link("chapters/one.md", "chapter_001.xhtml")
        assert handler.contains_link("chapters/one.html")
        assert handler.get_link("chapters/one.html") == "chapter_001.xhtml"

    def test_unknown_link_warns(self, caplog):
        logger = logging.getLogger("inkwell.tests.resources")
        handler = ResourceHandler(logger=logger)
        assert not handler.contains_link("nowhere.md")
        with caplog.at_level(logging.WARNING, logger="inkwell.tests.resources"):
            assert handler.get_link("nowhere.md") == "nowhere.md"
        assert "does not match any chapter" in caplog.text
