"""
Resource handling: link/image offsetting and image mapping.

Links and images in a chapter are written relative to the chapter file.
``add_offset`` rewrites them so that they are relative to the book root,
and ``ResourceHandler`` assigns stable destination names to images that
are embedded in packaged formats (EPUB).
"""

import logging
import posixpath
from collections.abc import Iterator
from pathlib import Path

from ..models.token import Image, Link, Token
from ..utils.exceptions import BookFileNotFoundError


def is_local(url: str) -> bool:
    """A URL is local when it has no scheme marker."""
    return "://" not in url


def add_offset(link_offset: str, image_offset: str, tokens: list[Token]) -> None:
    """
    Prepend offsets to local link and image URLs, in place.

    Args:
        link_offset: Directory joined in front of local link URLs
        image_offset: Directory joined in front of local image URLs
        tokens: Token tree to rewrite
    """
    if not link_offset and not image_offset:
        return
    for token in tokens:
        if isinstance(token, Link):
            if is_local(token.url):
                token.url = posixpath.join(link_offset, token.url)
        elif isinstance(token, Image):
            if is_local(token.url):
                token.url = posixpath.join(image_offset, token.url)
        if token.inner:
            add_offset(link_offset, image_offset, token.inner)


class ResourceHandler:
    """
    Tracks images and internal links of a book.

    Args:
        root: Book root directory; image paths are relative to it
        logger: Logger used for warnings
        map_images: Whether images get new destination names (packaged formats)
    """

    def __init__(
        self,
        root: Path | str = ".",
        logger: logging.Logger | None = None,
        map_images: bool = False,
    ):
        self.root = Path(root)
        self.logger = logger or logging.getLogger("inkwell.resources")
        self.map_images = map_images
        self._images: dict[str, str] = {}
        self._links: dict[str, str] = {}

    @staticmethod
    def is_local(url: str) -> bool:
        return is_local(url)

    def map_image(self, url: str) -> str:
        """
        Return the destination of an image, allocating one on first use.

        Non-local images are returned unchanged. Mapping the same file twice
        returns the destination allocated the first time.

        Args:
            url: Image path relative to the book root

        Returns:
            Destination path inside the package (``images/image_N.ext``)

        Raises:
            BookFileNotFoundError: If the local image file does not exist
        """
        if not is_local(url):
            self.logger.warning(f"Image '{url}' is not a local file, it will not be embedded")
            return url

        if not (self.root / url).is_file():
            raise BookFileNotFoundError(f"image file '{url}' could not be found")

        if not self.map_images:
            return url

        if url in self._images:
            return self._images[url]

        extension = Path(url).suffix
        if not extension:
            self.logger.warning(f"Image '{url}' has no extension")
        destination = f"images/image_{len(self._images)}{extension}"
        self._images[url] = destination
        return destination

    def images(self) -> Iterator[tuple[str, str]]:
        """Iterate over (source, destination) pairs, in allocation order."""
        return iter(self._images.items())

    def add_link(self, source: str, destination: str) -> None:
        self._links[source] = destination

    @staticmethod
    def _md_variant(source: str) -> str:
        path = Path(source)
        if not path.name:
            return source
        return str(path.with_suffix(".md")).replace("\\", "/")

    def contains_link(self, source: str) -> bool:
        return source in self._links or self._md_variant(source) in self._links

    def get_link(self, source: str) -> str:
        """
        Return the destination registered for a local link.

        A link to ``chapter.html`` also matches a registered ``chapter.md``.
        Unknown links are returned unchanged, with a warning.
        """
        if source in self._links:
            return self._links[source]
        md_source = self._md_variant(source)
        if md_source in self._links:
            return self._links[md_source]
        self.logger.warning(
            f"Link '{source}' does not match any chapter (tried '{md_source}' too)"
        )
        return source
