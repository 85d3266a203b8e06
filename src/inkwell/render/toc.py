"""
Table of contents built while rendering.

Entries are added in document order as ``(level, url, title)``. A new entry
becomes a child of the last entry on the right-most path whose level is
strictly smaller, or a new top-level entry otherwise. Levels may be
skipped: a level-3 entry right after a level-1 entry is nested under it,
and rendering inserts one wrapper list per missing level.
"""

from html import escape


class TocElement:
    """Single entry of a table of contents, with its nested entries."""

    __slots__ = ("children", "level", "title", "url")

    def __init__(self, level: int, url: str, title: str):
        self.level = level
        self.url = url
        self.title = title
        self.children: list[TocElement] = []

    def add(self, element: "TocElement") -> None:
        if self.children and element.level > self.children[-1].level:
            self.children[-1].add(element)
        else:
            self.children.append(element)

    def __repr__(self) -> str:
        return f"TocElement({self.level}, {self.url!r}, {self.title!r}, {self.children!r})"


class Toc:
    """
    Table of contents of a book.

    Args:
        numbered: Render ``<ol>`` lists instead of ``<ul>``
    """

    def __init__(self, numbered: bool = False):
        self.elements: list[TocElement] = []
        self.numbered = numbered

    def is_empty(self) -> bool:
        """A table of contents with a single entry is as good as empty."""
        return len(self.elements) <= 1

    def add(self, level: int, url: str, title: str) -> None:
        """
        Add an entry.

        Args:
            level: Header level (1 for chapters)
            url: Link target, may be empty
            title: Already rendered title (markup allowed)
        """
        element = TocElement(level, url, title)
        if self.elements and level > self.elements[-1].level:
            self.elements[-1].add(element)
        else:
            self.elements.append(element)

    def render(self) -> str:
        """Render as nested HTML lists, one space of indentation per depth."""
        tag = "ol" if self.numbered else "ul"
        lines = [f"<{tag}>"]
        self._render_list(self.elements, 0, 1, lines)
        lines.append(f"</{tag}>")
        return "\n".join(lines)

    def _render_list(
        self, elements: list[TocElement], parent_level: int, depth: int, lines: list[str]
    ) -> None:
        tag = "ol" if self.numbered else "ul"
        for element in elements:
            skipped = max(element.level - parent_level - 1, 0)
            for i in range(skipped):
                lines.append(" " * (depth + i) + f"<{tag}>")
            indent = " " * (depth + skipped)
            if element.url:
                lines.append(f'{indent}<li><a href = "{element.url}">{element.title}</a>')
            else:
                lines.append(f"{indent}<li>{element.title}")
            if element.children:
                lines.append(f"{indent}<{tag}>")
                self._render_list(element.children, element.level, depth + skipped + 1, lines)
                lines.append(f"{indent}</{tag}>")
            lines.append(f"{indent}</li>")
            for i in reversed(range(skipped)):
                lines.append(" " * (depth + i) + f"</{tag}>")

    def render_epub(self) -> str:
        """Render as ``navPoint`` elements for an EPUB ``toc.ncx`` navMap.

        NCX labels are plain text, so titles are escaped here.
        """
        parts: list[str] = []
        counter = 0
        for element in self.elements:
            counter = self._render_nav_point(element, counter, parts)
        return "".join(parts)

    def _render_nav_point(self, element: TocElement, counter: int, parts: list[str]) -> int:
        counter += 1
        parts.append(
            f'\n<navPoint id="navPoint-{counter}" playOrder="{counter}">\n'
            f"  <navLabel>\n   <text>{escape(element.title, quote=False)}</text>\n  </navLabel>\n"
            f'  <content src="{escape(element.url)}" />'
        )
        for child in element.children:
            counter = self._render_nav_point(child, counter, parts)
        parts.append("\n</navPoint>")
        return counter

    def max_depth(self) -> int:
        """Depth of the deepest entry, counted in nesting steps."""

        def depth(elements: list[TocElement]) -> int:
            return max((1 + depth(e.children) for e in elements), default=0)

        return depth(self.elements)
