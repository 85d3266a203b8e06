"""
EPUB Builder module - Responsible for packaging rendered chapters as EPUB.
"""

import mimetypes
from datetime import UTC, datetime
from html import escape
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from markupsafe import Markup
from pydantic import BaseModel, ConfigDict

from ..models.metadata import BookMetadata
from ..render.toc import Toc
from ..utils.archive import build_archive
from ..utils.exceptions import BookFileNotFoundError, RenderError


MIMETYPE = "application/epub+zip"

TITLE_PAGE = "title_page.xhtml"
COVER_PAGE = "cover.xhtml"
NAV_PAGE = "nav.xhtml"
STYLESHEET = "stylesheet.css"


class EpubChapter(BaseModel):
    """Rendered chapter, ready to be wrapped in an XHTML page."""

    model_config = ConfigDict(frozen=True)

    filename: str
    title: str
    body: str


class EPUBBuilder:
    """
    Builds EPUB 2 or EPUB 3 files from book metadata and rendered chapters.

    This class handles:
    - Rendering EPUB metadata files (content.opf, toc.ncx, nav.xhtml)
    - Wrapping chapter bodies, the title page and the cover in XHTML pages
    - Creating proper EPUB ZIP structure
    """

    def __init__(
        self,
        metadata: BookMetadata,
        chapters: list[EpubChapter],
        stylesheet: str,
        root: Path | str = ".",
        images: list[tuple[str, str]] | None = None,
        cover: str | None = None,
        version: int = 2,
    ):
        """
        Initialize the EPUB builder.

        Args:
            metadata: Book metadata
            chapters: Rendered chapters, in reading order
            stylesheet: CSS shared by every page
            root: Book root directory, image sources are relative to it
            images: (source, destination) pairs of the images to embed
            cover: Destination of the cover image (optional)
            version: EPUB version, 2 or 3
        """
        if version not in (2, 3):
            raise RenderError(f"EPUB version {version} is not supported (use 2 or 3)")
        self.metadata = metadata
        self.chapters = chapters
        self.stylesheet = stylesheet
        self.root = Path(root)
        self.images = images or []
        self.cover = cover
        self.version = version

        # Initialize Jinja2 template environment
        templates_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(enabled_extensions=("xml", "xhtml", "j2")),
            keep_trailing_newline=True,
        )

    def build(self, toc: Toc, nav: Toc | None = None) -> bytes:
        """
        Build the complete EPUB file.

        Args:
            toc: Table of contents with plain-text titles (NCX)
            nav: Table of contents with XHTML titles (EPUB 3 navigation
                document); ``toc`` is used when omitted

        Returns:
            The EPUB archive

        Raises:
            RenderError: If a template fails to render
            BookFileNotFoundError: If an image cannot be read
        """
        files: dict[str, bytes] = {}
        try:
            files["META-INF/container.xml"] = self._encode(
                self.env.get_template("container.xml.j2").render()
            )
            files["OEBPS/content.opf"] = self._encode(self._render_content_opf())
            files["OEBPS/toc.ncx"] = self._encode(self._render_toc_ncx(toc))
            if self.version == 3:
                files[f"OEBPS/{NAV_PAGE}"] = self._encode(self._render_nav_xhtml(nav or toc))
            if self.cover:
                files[f"OEBPS/{COVER_PAGE}"] = self._encode(self._render_cover())
            files[f"OEBPS/{TITLE_PAGE}"] = self._encode(self._render_title_page())
            for chapter in self.chapters:
                files[f"OEBPS/{chapter.filename}"] = self._encode(self._render_chapter(chapter))
        except TemplateError as e:
            raise RenderError(f"could not render EPUB template: {e}") from e

        files[f"OEBPS/{STYLESHEET}"] = self._encode(self.stylesheet)
        for source, destination in self.images:
            files[f"OEBPS/{destination}"] = self._read_image(source)

        return build_archive(MIMETYPE, files)

    @staticmethod
    def _encode(content: str) -> bytes:
        return content.encode("utf-8", "xmlcharrefreplace")

    def _read_image(self, source: str) -> bytes:
        path = self.root / source
        try:
            return path.read_bytes()
        except OSError as e:
            raise BookFileNotFoundError(f"image file '{source}' could not be read: {e}") from e

    def _render_page(self, title: str, body: str) -> str:
        template = self.env.get_template("page.xhtml.j2")
        return template.render(
            version=self.version,
            lang=self.metadata.lang,
            title=title,
            stylesheet=STYLESHEET,
            body=Markup(body),
        )

    def _render_chapter(self, chapter: EpubChapter) -> str:
        return self._render_page(chapter.title, chapter.body)

    def _render_title_page(self) -> str:
        template = self.env.get_template("title_page.xhtml.j2")
        body = template.render(metadata=self.metadata)
        return self._render_page(self.metadata.title, body)

    def _render_cover(self) -> str:
        template = self.env.get_template("cover.xhtml.j2")
        body = template.render(cover=self.cover, title=self.metadata.title)
        return self._render_page(self.metadata.title, body)

    def _render_content_opf(self) -> str:
        """Render OEBPS/content.opf with book metadata, manifest and spine."""
        # EPUB 3 requires dcterms:modified timestamp
        modified_timestamp = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")

        template = self.env.get_template("content.opf.j2")
        return template.render(
            version=self.version,
            metadata=self.metadata,
            manifest=Markup("\n    ".join(self._build_manifest())),  # Already escaped XML
            spine=Markup("\n    ".join(self._build_spine())),  # Already escaped XML
            has_cover=self.cover is not None,
            cover_page=COVER_PAGE,
            modified=modified_timestamp,
        )

    @staticmethod
    def _item_id(filename: str) -> str:
        stem = filename.rsplit(".", 1)[0]
        return escape("".join(c if c.isalnum() else "_" for c in stem))

    def _build_manifest(self) -> list[str]:
        """Build manifest items for content.opf."""
        manifest = ['<item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml" />']
        if self.version == 3:
            manifest.append(
                f'<item id="nav" href="{NAV_PAGE}" media-type="application/xhtml+xml"'
                ' properties="nav" />'
            )
        manifest.append(f'<item id="stylesheet" href="{STYLESHEET}" media-type="text/css" />')

        pages = [TITLE_PAGE, *(chapter.filename for chapter in self.chapters)]
        if self.cover:
            pages.insert(0, COVER_PAGE)
        for filename in pages:
            manifest.append(
                f'<item id="{self._item_id(filename)}" href="{escape(filename)}"'
                ' media-type="application/xhtml+xml" />'
            )

        for _source, destination in self.images:
            media_type = mimetypes.guess_type(destination)[0] or "application/octet-stream"
            is_cover = destination == self.cover
            item_id = "cover-image" if is_cover else self._item_id(destination)
            # Add properties="cover-image" for the cover image (EPUB 3)
            properties_attr = ' properties="cover-image"' if is_cover and self.version == 3 else ""
            manifest.append(
                f'<item id="{item_id}" href="{escape(destination)}"'
                f' media-type="{media_type}"{properties_attr} />'
            )

        return manifest

    def _build_spine(self) -> list[str]:
        """Build spine items (reading order) for content.opf."""
        pages = [TITLE_PAGE, *(chapter.filename for chapter in self.chapters)]
        if self.cover:
            pages.insert(0, COVER_PAGE)
        return [f'<itemref idref="{self._item_id(filename)}" />' for filename in pages]

    def _render_toc_ncx(self, toc: Toc) -> str:
        """Render OEBPS/toc.ncx (NCX table of contents for EPUB 2 compatibility)."""
        template = self.env.get_template("toc.ncx.j2")
        return template.render(
            metadata=self.metadata,
            depth=max(toc.max_depth(), 1),
            navmap=Markup(toc.render_epub()),  # Escaped by Toc
        )

    def _render_nav_xhtml(self, nav: Toc) -> str:
        """Render OEBPS/nav.xhtml (EPUB 3 navigation document)."""
        template = self.env.get_template("nav.xhtml.j2")
        return template.render(
            lang=self.metadata.lang,
            title=self.metadata.title,
            nav=Markup(nav.render()),
        )
