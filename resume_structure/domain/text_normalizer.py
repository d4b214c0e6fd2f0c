"""Text normalization ahead of parsing: whitespace cleanup and HTML to lines.

All functions accept and return strings -- no file I/O.
"""

from __future__ import annotations

import re
from html.parser import HTMLParser

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_INLINE_SPACE_RE = re.compile(r"[ \t\u00a0]+")
_EXCESS_BLANKS_RE = re.compile(r"\n{3,}")
_MARKUP_RE = re.compile(r"<\s*/?\s*(h[1-6]|p|li|ul|ol|div|br|strong|em|b|i|span)\b[^>]*>", re.IGNORECASE)

_BLOCK_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6", "p", "div", "li", "ul", "ol", "tr", "section", "header"}
_SKIP_TAGS = {"script", "style", "noscript", "head", "title"}

BULLET_PREFIX = "• "


def looks_like_markup(content: str) -> bool:
    """Return True when *content* carries block/inline HTML tags."""
    return bool(_MARKUP_RE.search(content))


def normalize_text(content: str) -> str:
    """Normalize line endings and whitespace.

    CRLF/CR become LF, control characters are removed, runs of spaces/tabs
    collapse to one space, lines are stripped and more than one consecutive
    blank line is squeezed.
    """
    if not content:
        return ""
    text = content.replace("\r\n", "\n").replace("\r", "\n")
    text = _CONTROL_CHARS_RE.sub("", text)
    lines = [_INLINE_SPACE_RE.sub(" ", line).strip() for line in text.split("\n")]
    text = "\n".join(lines)
    text = _EXCESS_BLANKS_RE.sub("\n\n", text)
    return text.strip()


class _StructuredTextExtractor(HTMLParser):
    """Flatten lightly-tagged HTML into one line per block element."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self._skip_depth = 0
        self._lines: list[str] = []
        self._current: list[str] = []
        self._bullet_open = False

    def _flush(self):
        text = _INLINE_SPACE_RE.sub(" ", "".join(self._current)).strip()
        if text:
            self._lines.append(BULLET_PREFIX + text if self._bullet_open else text)
        self._current = []
        self._bullet_open = False

    def handle_starttag(self, tag: str, attrs):
        tag = tag.lower()
        if tag in _SKIP_TAGS:
            self._skip_depth += 1
            return
        if tag == "br":
            self._flush()
        elif tag in _BLOCK_TAGS:
            self._flush()
            if tag == "li":
                self._bullet_open = True

    def handle_startendtag(self, tag: str, attrs):
        if tag.lower() == "br":
            self._flush()

    def handle_endtag(self, tag: str):
        tag = tag.lower()
        if tag in _SKIP_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
            return
        if tag in _BLOCK_TAGS:
            self._flush()

    def handle_data(self, data: str):
        if not self._skip_depth:
            # source newlines inside a block are layout, not structure
            self._current.append(data.replace("\n", " "))

    def get_text(self) -> str:
        self._flush()
        return "\n".join(self._lines)


def html_to_text(content: str) -> str:
    """Convert lightly-tagged HTML to newline-separated text.

    Headings, paragraphs and divs become lines, ``<li>`` items become
    ``• `` bullets, entities are decoded and inline tags are dropped.
    """
    if not content:
        return ""
    extractor = _StructuredTextExtractor()
    extractor.feed(content)
    extractor.close()
    return extractor.get_text()


def prepare_text(content: str) -> str:
    """Return parse-ready text for plain text or lightly-tagged HTML."""
    if not content:
        return ""
    if looks_like_markup(content):
        content = html_to_text(content)
    return normalize_text(content)
