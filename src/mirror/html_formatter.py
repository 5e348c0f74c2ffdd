"""Deterministic pretty-printing for sanitized HTML trees.

Block elements start on their own line, indented two spaces per nesting
level. An element whose children are all inline is written on a single
line. Runs of HTML whitespace inside text collapse to one space, so
formatting already-formatted output returns it unchanged.
"""

import re
from html import escape
from typing import List

from bs4 import NavigableString, Tag

INDENT = "  "

HTML_WHITESPACE = " \t\n\r\f"

VOID_ELEMENTS = frozenset({'br', 'col', 'img', 'hr', 'wbr'})

INLINE_ELEMENTS = frozenset({
    'a', 'abbr', 'b', 'br', 'code', 'em', 'i', 'img', 's', 'small',
    'span', 'strong', 'sub', 'sup', 'u',
})

_WHITESPACE_RUN = re.compile(r'[ \t\n\r\f]+')


def format_html(root: Tag) -> str:
    """Render the children of ``root`` as indented HTML.

    Args:
        root: Parsed tree (usually a BeautifulSoup document)

    Returns:
        Formatted HTML ending with a newline, or "" for an empty tree
    """
    lines: List[str] = []
    for child in root.children:
        _render_block(child, 0, lines)
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def _collapse(text: str) -> str:
    return _WHITESPACE_RUN.sub(" ", text)


def _open_tag(tag: Tag) -> str:
    parts = [tag.name]
    for name, value in tag.attrs.items():
        if isinstance(value, list):
            value = " ".join(value)
        parts.append(f'{name}="{escape(value or "", quote=True)}"')
    if tag.name in VOID_ELEMENTS:
        return "<" + " ".join(parts) + "/>"
    return "<" + " ".join(parts) + ">"


def _is_inline_only(tag: Tag) -> bool:
    for child in tag.children:
        if isinstance(child, NavigableString):
            continue
        if not isinstance(child, Tag):
            return False
        if child.name not in INLINE_ELEMENTS or not _is_inline_only(child):
            return False
    return True


def _render_inline(node) -> str:
    if isinstance(node, NavigableString):
        return escape(_collapse(str(node)), quote=False)
    if node.name in VOID_ELEMENTS:
        return _open_tag(node)
    inner = "".join(_render_inline(child) for child in node.children)
    return f"{_open_tag(node)}{inner}</{node.name}>"


def _render_block(node, depth: int, lines: List[str]) -> None:
    indent = INDENT * depth

    if isinstance(node, NavigableString):
        text = _collapse(str(node)).strip(HTML_WHITESPACE)
        if text:
            lines.append(indent + escape(text, quote=False))
        return

    if not isinstance(node, Tag):
        return

    if node.name in VOID_ELEMENTS:
        lines.append(indent + _open_tag(node))
        return

    if node.name in INLINE_ELEMENTS and _is_inline_only(node):
        lines.append(indent + _render_inline(node))
        return

    if _is_inline_only(node):
        inner = "".join(_render_inline(child) for child in node.children)
        inner = inner.strip(HTML_WHITESPACE)
        lines.append(f"{indent}{_open_tag(node)}{inner}</{node.name}>")
        return

    lines.append(indent + _open_tag(node))
    for child in node.children:
        _render_block(child, depth + 1, lines)
    lines.append(f"{indent}</{node.name}>")
