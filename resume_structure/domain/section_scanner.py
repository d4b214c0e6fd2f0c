"""Line classification and section bucketing for resume text.

The scanner only decides *where* each line belongs; turning lines into
records is the job of :mod:`field_extractors`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

CANONICAL_SECTIONS = ("contact", "summary", "experience", "education", "skills")


def _header(alternatives: str) -> re.Pattern[str]:
    return re.compile(rf"(?:{alternatives})\s*:?", re.IGNORECASE)


#: Whole-line header phrases (case-insensitive, optional trailing colon),
#: evaluated in order.
SECTION_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (_header(r"contact|contact info(?:rmation)?|contact details|personal (?:info|information|details)"), "contact"),
    (
        _header(r"(?:(?:professional|career|executive) )?(?:summary|profile)|(?:career )?objective|about(?: me)?"),
        "summary",
    ),
    (
        _header(r"(?:(?:professional|work|relevant) )?experience|employment(?: history)?|(?:work|career) history"),
        "experience",
    ),
    (
        _header(r"education|academic (?:background|history)|academics|qualifications|education (?:and|&) training"),
        "education",
    ),
    (
        _header(r"(?:(?:technical|core|key) )?(?:skills|competencies)|(?:areas of )?expertise|skills (?:and|&) \w+"),
        "skills",
    ),
]


#: All-caps line of letters, spaces, ampersands and hyphens, 3-30 chars.
CUSTOM_HEADER_RE = re.compile(r"^[A-Z][A-Z &-]{2,29}$")

BULLET_RE = re.compile(r"^[•\-*]\s*")


class LineKind(str, Enum):
    HEADER = "header"
    BULLET = "bullet"
    CONTENT = "content"
    BLANK = "blank"


@dataclass
class LineClass:
    """Result of classifying a single line."""

    kind: LineKind
    section: Optional[str] = None

    @property
    def is_custom_header(self) -> bool:
        return self.kind == LineKind.HEADER and self.section not in CANONICAL_SECTIONS


@dataclass
class ScannedLine:
    """A content line tagged with the section it was found under."""

    section: Optional[str]
    text: str
    kind: LineKind


@dataclass
class SectionBlock:
    """Consecutive scanned lines that share a section."""

    section: Optional[str]
    lines: List[str]

    @property
    def is_custom(self) -> bool:
        return self.section is not None and self.section not in CANONICAL_SECTIONS


def is_bullet(line: str) -> bool:
    return bool(BULLET_RE.match(line))


def strip_bullet(line: str) -> str:
    return BULLET_RE.sub("", line, count=1).strip()


def match_canonical_header(line: str) -> Optional[str]:
    """Return the canonical section a header phrase maps to, if any."""
    candidate = line.strip()
    for pattern, section in SECTION_PATTERNS:
        if pattern.fullmatch(candidate):
            return section
    return None


def classify_line(line: str, allow_custom: bool = True) -> LineClass:
    """Classify *line* as a header, bullet, content or blank line.

    Canonical header phrases win over the all-caps custom-header rule.
    *allow_custom* disables the custom rule (used for the document's first
    line, which is the name).
    """
    text = line.strip()
    if not text:
        return LineClass(LineKind.BLANK)

    canonical = match_canonical_header(text)
    if canonical:
        return LineClass(LineKind.HEADER, canonical)

    if allow_custom and CUSTOM_HEADER_RE.match(text):
        return LineClass(LineKind.HEADER, text)

    if is_bullet(text):
        return LineClass(LineKind.BULLET)
    return LineClass(LineKind.CONTENT)


def scan(text: str) -> List[ScannedLine]:
    """Walk *text* line by line and tag each content line with its section.

    ``None`` is the preamble (the lines before the first header). Header
    and blank lines produce no output.
    """
    scanned: List[ScannedLine] = []
    current: Optional[str] = None
    seen_content = False

    for raw in text.split("\n"):
        line = raw.strip()
        cls = classify_line(line, allow_custom=seen_content)
        if cls.kind == LineKind.BLANK:
            continue
        seen_content = True
        if cls.kind == LineKind.HEADER:
            current = cls.section
            continue
        scanned.append(ScannedLine(current, line, cls.kind))

    return scanned


def group_sections(scanned: List[ScannedLine]) -> List[SectionBlock]:
    """Group consecutive scanned lines into per-section blocks, in order."""
    blocks: List[SectionBlock] = []
    for item in scanned:
        if blocks and blocks[-1].section == item.section:
            blocks[-1].lines.append(item.text)
        else:
            blocks.append(SectionBlock(item.section, [item.text]))
    return blocks
