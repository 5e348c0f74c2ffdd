"""Allow-list HTML sanitizer for mirrored page bodies.

This module provides the SanitizerPolicy value object and the HTMLSanitizer
that applies it. The policy is built once at startup by default_policy() and
passed to the sanitizer explicitly; sanitizing is a pure function of the
policy and the input HTML.

Policy summary (default_policy):
- Standard attributes (dir, id, lang, title) on every allowed element
- Standard URLs: relative, http, https, mailto
- Lists, tables and images
- section, summary, h1-h6, and the paragraph baseline (p, br)
- Anchors keep only href
- Attribute values must fully match the pattern registered for them
- Everything else is removed from the tree
"""

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Pattern
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag
from bs4.element import PreformattedString

from .html_formatter import format_html

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SanitizerPolicy:
    """Immutable allow-list policy.

    Attributes:
        allowed_elements: Element names kept in the tree
        global_attributes: Attributes allowed on every allowed element
        element_attributes: Extra attributes allowed per element
        exclusive_attribute_elements: Elements that only get their own
            element_attributes (global attributes are not applied)
        url_attributes: Attributes whose value must be an allowed URL
        url_schemes: Schemes accepted for absolute URLs
        attribute_patterns: Patterns an attribute value must fully match
        element_attribute_patterns: Per-element patterns that take precedence
            over attribute_patterns
        skip_content_elements: Disallowed elements removed with their content
        require_attributes: Elements dropped when no attribute survives
    """
    allowed_elements: FrozenSet[str]
    global_attributes: FrozenSet[str]
    element_attributes: Mapping[str, FrozenSet[str]]
    exclusive_attribute_elements: FrozenSet[str]
    url_attributes: FrozenSet[str]
    url_schemes: FrozenSet[str]
    attribute_patterns: Mapping[str, Pattern]
    element_attribute_patterns: Mapping[str, Mapping[str, Pattern]]
    skip_content_elements: FrozenSet[str]
    require_attributes: FrozenSet[str]

    def attributes_for(self, element: str) -> FrozenSet[str]:
        """Return the attribute names allowed on an element."""
        own = self.element_attributes.get(element, frozenset())
        if element in self.exclusive_attribute_elements:
            return own
        return self.global_attributes | own

    def pattern_for(self, element: str, attr: str) -> Optional[Pattern]:
        """Return the value pattern for an attribute, or None if any value goes."""
        own = self.element_attribute_patterns.get(element)
        if own is not None and attr in own:
            return own[attr]
        return self.attribute_patterns.get(attr)

    def is_allowed_url(self, value: str) -> bool:
        """Check a URL attribute value against the allowed schemes.

        Relative URLs are always allowed. Unparseable URLs are rejected.
        """
        try:
            parsed = urlparse(value.strip())
        except ValueError:
            return False
        if not parsed.scheme:
            return True
        return parsed.scheme.lower() in self.url_schemes


LIST_ELEMENTS = frozenset({'ol', 'ul', 'li', 'dl', 'dt', 'dd'})

TABLE_ELEMENTS = frozenset({
    'table', 'caption', 'col', 'colgroup', 'thead', 'tbody', 'tfoot', 'tr', 'td', 'th',
})

HEADING_ELEMENTS = frozenset({'h1', 'h2', 'h3', 'h4', 'h5', 'h6'})

TABLE_ATTRIBUTES = frozenset({'align', 'valign', 'width', 'height'})
TABLE_CELL_ATTRIBUTES = TABLE_ATTRIBUTES | {'colspan', 'rowspan', 'headers', 'scope', 'abbr'}

# Attribute value patterns, applied with fullmatch
DIRECTION = re.compile(r'(?i)rtl|ltr')
ELEMENT_ID = re.compile(r'[a-zA-Z0-9:\-_.]+')
LANGUAGE = re.compile(r'[a-zA-Z]{2,20}')
# Letters, digits, whitespace and common punctuation
PARAGRAPH = re.compile(r"(?:[^\W_]|[\s\-_',\[\]!./\\()])*")
INTEGER = re.compile(r'[0-9]+')
NUMBER_OR_PERCENT = re.compile(r'[0-9]+%?')
CELL_ALIGN = re.compile(r'(?i)center|justify|left|right|char')
CELL_VERTICAL_ALIGN = re.compile(r'(?i)baseline|bottom|middle|top')
IMAGE_ALIGN = re.compile(r'(?i)left|right|top|texttop|middle|absmiddle|baseline|bottom|absbottom')
LIST_TYPE = re.compile(r'(?i)circle|disc|square|a|i|1')
SPACE_SEPARATED_TOKENS = re.compile(r'(?:[^\W_]|[\s_-])+')
TABLE_SCOPE = re.compile(r'(?i)(?:row|col)(?:group)?')


def default_policy() -> SanitizerPolicy:
    """Build the policy used for mirrored wiki pages."""
    element_attributes = {
        'a': frozenset({'href'}),
        'img': frozenset({'src', 'alt', 'width', 'height', 'align'}),
        'ol': frozenset({'type', 'start', 'reversed'}),
        'ul': frozenset({'type'}),
        'li': frozenset({'value'}),
        'table': TABLE_ATTRIBUTES,
        'caption': frozenset({'align'}),
        'col': TABLE_ATTRIBUTES | {'span'},
        'colgroup': TABLE_ATTRIBUTES | {'span'},
        'thead': TABLE_ATTRIBUTES,
        'tbody': TABLE_ATTRIBUTES,
        'tfoot': TABLE_ATTRIBUTES,
        'tr': TABLE_ATTRIBUTES,
        'td': TABLE_CELL_ATTRIBUTES,
        'th': TABLE_CELL_ATTRIBUTES,
    }

    return SanitizerPolicy(
        allowed_elements=(
            LIST_ELEMENTS
            | TABLE_ELEMENTS
            | HEADING_ELEMENTS
            | {'a', 'img', 'section', 'summary', 'p', 'br'}
        ),
        global_attributes=frozenset({'dir', 'id', 'lang', 'title'}),
        element_attributes=MappingProxyType(element_attributes),
        exclusive_attribute_elements=frozenset({'a'}),
        url_attributes=frozenset({'href', 'src', 'cite'}),
        url_schemes=frozenset({'http', 'https', 'mailto'}),
        attribute_patterns=MappingProxyType({
            'dir': DIRECTION,
            'id': ELEMENT_ID,
            'lang': LANGUAGE,
            'title': PARAGRAPH,
            'alt': PARAGRAPH,
            'abbr': PARAGRAPH,
            'align': CELL_ALIGN,
            'valign': CELL_VERTICAL_ALIGN,
            'width': NUMBER_OR_PERCENT,
            'height': NUMBER_OR_PERCENT,
            'colspan': INTEGER,
            'rowspan': INTEGER,
            'span': INTEGER,
            'start': INTEGER,
            'value': INTEGER,
            'type': LIST_TYPE,
            'headers': SPACE_SEPARATED_TOKENS,
            'scope': TABLE_SCOPE,
        }),
        element_attribute_patterns=MappingProxyType({
            'img': MappingProxyType({'align': IMAGE_ALIGN}),
        }),
        skip_content_elements=frozenset({
            'script', 'style', 'iframe', 'object', 'noscript', 'noembed',
            'noframes', 'frameset', 'frame', 'nav', 'title',
        }),
        require_attributes=frozenset({'a', 'img'}),
    )


class HTMLSanitizer:
    """Applies a SanitizerPolicy to HTML and pretty-prints the result.

    Uses Python's built-in html.parser rather than lxml so fragments are not
    wrapped in html/body elements and no XML entity expansion happens.

    Example:
        >>> sanitizer = HTMLSanitizer(default_policy())
        >>> sanitizer.sanitize('<script>alert(1)</script><p>hi</p>')
        '<p>hi</p>\\n'
    """

    def __init__(self, policy: SanitizerPolicy):
        self.policy = policy
        self.parser = "html.parser"

    def sanitize(self, raw_html: str) -> str:
        """Return the cleaned, pretty-printed form of ``raw_html``."""
        return format_html(self.clean(raw_html))

    def clean(self, raw_html: str) -> BeautifulSoup:
        """Parse ``raw_html`` and strip everything the policy does not allow."""
        soup = BeautifulSoup(raw_html or "", self.parser)
        self._clean_children(soup)
        # Merge text split apart by unwrapping
        soup.smooth()
        return soup

    def _clean_children(self, parent: Tag) -> None:
        for child in list(parent.children):
            # Comments, doctypes, CDATA and processing instructions
            if isinstance(child, PreformattedString):
                child.extract()
                continue
            if not isinstance(child, Tag):
                continue

            name = child.name.lower()
            if name in self.policy.skip_content_elements:
                child.decompose()
                continue

            self._clean_children(child)

            if name not in self.policy.allowed_elements:
                child.unwrap()
                continue

            child.name = name
            self._clean_attributes(child)

            if name in self.policy.require_attributes and not child.attrs:
                if child.contents:
                    child.unwrap()
                else:
                    child.decompose()

    def _clean_attributes(self, tag: Tag) -> None:
        allowed = self.policy.attributes_for(tag.name)
        cleaned = {}

        for attr, value in tag.attrs.items():
            attr = attr.lower()
            if attr not in allowed:
                continue
            if isinstance(value, list):
                value = " ".join(value)
            value = value or ""

            if attr in self.policy.url_attributes and not self.policy.is_allowed_url(value):
                logger.debug(f"Dropping {attr}={value!r} on <{tag.name}>: scheme not allowed")
                continue

            pattern = self.policy.pattern_for(tag.name, attr)
            if pattern is not None and not pattern.fullmatch(value):
                logger.debug(f"Dropping {attr}={value!r} on <{tag.name}>: value not allowed")
                continue

            cleaned[attr] = value

        tag.attrs = cleaned
