"""Unit tests for the table of contents."""

from inkwell.render.toc import Toc


class TestTocStructure:
    """Test how entries are nested."""

    def test_nesting(self):
        toc = Toc()
        toc.add(1, "#1", "One")
        toc.add(2, "#2", "Two")
        toc.add(3, "#3", "Three")
        toc.add(2, "#4", "Four")
        toc.add(1, "#5", "Five")

        assert [e.title for e in toc.elements] == ["One", "Five"]
        one = toc.elements[0]
        assert [e.title for e in one.children] == ["Two", "Four"]
        assert [e.title for e in one.children[0].children] == ["Three"]
        assert toc.max_depth() == 3

    def test_skipped_level_is_nested(self):
        toc = Toc()
        toc.add(1, "", "A")
        toc.add(3, "", "C")
        assert len(toc.elements) == 1
        assert toc.elements[0].children[0].title == "C"

    def test_first_entry_deeper_than_later_ones(self):
        toc = Toc()
        toc.add(2, "", "Section")
        toc.add(1, "", "Chapter")
        assert [e.title for e in toc.elements] == ["Section", "Chapter"]

    def test_is_empty(self):
        toc = Toc()
        assert toc.is_empty()
        toc.add(1, "", "Only")
        assert toc.is_empty()
        toc.add(1, "", "Second")
        assert not toc.is_empty()


class TestTocRender:
    """Test HTML rendering of the table of contents."""

    def test_render(self):
        toc = Toc()
        toc.add(1, "#1", "One")
        toc.add(2, "#2", "Two")
        toc.add(1, "#3", "Three")

        assert toc.render() == "\n".join(
            [
                "<ul>",
                ' <li><a href = "#1">One</a>',
                " <ul>",
                '  <li><a href = "#2">Two</a>',
                "  </li>",
                " </ul>",
                " </li>",
                ' <li><a href = "#3">Three</a>',
                " </li>",
                "</ul>",
            ]
        )

    def test_render_skipped_level(self):
        toc = Toc(numbered=True)
        toc.add(1, "", "A")
        toc.add(3, "", "C")

        assert toc.render() == "\n".join(
            [
                "<ol>",
                " <li>A",
                " <ol>",
                "  <ol>",
                "   <li>C",
                "   </li>",
                "  </ol>",
                " </ol>",
                " </li>",
                "</ol>",
            ]
        )

    def test_render_deep_entry_then_sibling(self):
        toc = Toc()
        toc.add(1, "u1", "T1")
        toc.add(3, "u2", "T2")
        toc.add(1, "u3", "T3")

        assert toc.render() == "\n".join(
            [
                "<ul>",
                ' <li><a href = "u1">T1</a>',
                " <ul>",
                "  <ul>",
                '   <li><a href = "u2">T2</a>',
                "   </li>",
                "  </ul>",
                " </ul>",
                " </li>",
                ' <li><a href = "u3">T3</a>',
                " </li>",
                "</ul>",
            ]
        )

    def test_render_mixed_levels(self):
        toc = Toc()
        toc.add(3, "", "0.0.1")
        toc.add(1, "", "1")
        toc.add(3, "", "1.0.1")
        toc.add(2, "", "1.1")
        toc.add(1, "", "2")

        expected = """<ul>
 <ul>
  <ul>
   <li>0.0.1
   </li>
  </ul>
 </ul>
 <li>1
 <ul>
  <ul>
   <li>1.0.1
   </li>
  </ul>
  <li>1.1
  </li>
 </ul>
 </li>
 <li>2
 </li>
</ul>"""
        assert toc.render() == expected

    def test_render_epub(self):
        toc = Toc()
        toc.add(1, "chapter_000.xhtml#link-1", "Fish & Chips")
        toc.add(2, "chapter_000.xhtml#link-2", "Sub")

        ncx = toc.render_epub()
        assert '<navPoint id="navPoint-1" playOrder="1">' in ncx
        assert '<navPoint id="navPoint-2" playOrder="2">' in ncx
        assert "<text>Fish &amp; Chips</text>" in ncx
        assert '<content src="chapter_000.xhtml#link-1" />' in ncx
        # Child navPoint is closed before its parent
        assert ncx.endswith("</navPoint>\n</navPoint>")
