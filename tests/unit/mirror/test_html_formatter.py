"""Unit tests for mirror.html_formatter module."""

from bs4 import BeautifulSoup

from src.mirror.html_formatter import format_html


def _format(html: str) -> str:
    return format_html(BeautifulSoup(html, "html.parser"))


class TestFormatHtml:
    """Tests for format_html()."""

    def test_empty_tree(self):
        assert _format("") == ""

    def test_whitespace_only_tree(self):
        assert _format("  \n\t ") == ""

    def test_inline_only_element_on_one_line(self):
        assert _format("<p>\n  hello\n   world  </p>") == "<p>hello world</p>\n"

    def test_nested_blocks_indented(self):
        html = "<ul><li>One</li><li>Two<ul><li>Inner</li></ul></li></ul>"
        assert _format(html) == (
            "<ul>\n"
            "  <li>One</li>\n"
            "  <li>\n"
            "    Two\n"
            "    <ul>\n"
            "      <li>Inner</li>\n"
            "    </ul>\n"
            "  </li>\n"
            "</ul>\n"
        )

    def test_inline_children_kept_inline(self):
        html = '<p>Go <a href="/x">here</a> now</p>'
        assert _format(html) == '<p>Go <a href="/x">here</a> now</p>\n'

    def test_void_elements_self_closed(self):
        assert _format("<p>a<br>b</p>") == "<p>a<br/>b</p>\n"
        assert _format('<img src="x.png">') == '<img src="x.png"/>\n'

    def test_text_escaped(self):
        assert _format("<p>a &lt; b &amp; c</p>") == "<p>a &lt; b &amp; c</p>\n"

    def test_attribute_values_escaped(self):
        assert _format('<p title="a &quot;b&quot; &amp; c">x</p>') == (
            '<p title="a &quot;b&quot; &amp; c">x</p>\n'
        )

    def test_non_breaking_space_preserved(self):
        assert _format("<p>a&nbsp;b</p>") == "<p>a\xa0b</p>\n"

    def test_empty_element(self):
        assert _format("<table><tr><td></td></tr></table>") == (
            "<table>\n"
            "  <tr>\n"
            "    <td></td>\n"
            "  </tr>\n"
            "</table>\n"
        )

    def test_formatting_is_stable(self):
        html = "<section><h2>T</h2><p>x <a href='/y'>y</a></p><ol><li>1</li></ol></section>"
        once = _format(html)
        assert _format(once) == once
