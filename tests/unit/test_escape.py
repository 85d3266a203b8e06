"""Unit tests for output escaping."""

from inkwell.render.escape import (
    escape_attribute,
    escape_html,
    escape_nb_spaces,
    escape_nb_spaces_tex,
    escape_tex,
    escape_url_argument,
)


class TestHtmlEscape:
    def test_escape_html(self):
        assert escape_html("<a & b>") == "&lt;a &amp; b&gt;"

    def test_quotes_kept_in_text(self):
        assert escape_html('"quoted"') == '"quoted"'

    def test_escape_attribute(self):
        assert escape_attribute('say "hi" & <bye>') == "say &quot;hi&quot; &amp; &lt;bye&gt;"

    def test_nb_spaces(self):
        assert escape_nb_spaces("a\u00a0b") == 'a<span class = "nbsp">&#160;</span>b'
        assert escape_nb_spaces("a\u202fb") == 'a<span class = "nnbsp">&#8201;</span>b'
        assert escape_nb_spaces("plain") == "plain"


class TestTexEscape:
    def test_special_characters(self):
        assert escape_tex("50% of $x_1 & #2") == r"50\% of \$x\_1 \& \#2"

    def test_braces_and_backslash(self):
        assert escape_tex("{a}\\") == r"\{a\}\textbackslash"

    def test_each_character_escaped_once(self):
        # The backslash introduced for '%' must not be escaped again
        assert escape_tex("%") == r"\%"

    def test_tilde_and_caret(self):
        assert escape_tex("~^") == r"\textasciitilde\textasciicircum"

    def test_nb_spaces(self):
        assert escape_nb_spaces_tex("a\u00a0b\u202fc") == "a~b\\,c"
        assert escape_nb_spaces_tex("plain") == "plain"

    def test_url_argument(self):
        assert escape_url_argument("http://a.b/50%25#top") == r"http://a.b/50\%25\#top"
        assert escape_url_argument("http://a.b/x_y&z") == "http://a.b/x_y&z"
