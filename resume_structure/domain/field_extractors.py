"""Per-section heuristics that turn bucketed lines into typed records.

Best effort: malformed or ambiguous lines are skipped, never raised on.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config import DEFAULT_CONFIG, ParserConfig
from .models import AdditionalSection, ContactInfo, Education, Experience, Skill
from .section_scanner import is_bullet, strip_bullet

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)*\.[A-Za-z]{2,}")
PHONE_RE = re.compile(r"\+?\(?\d[\d\s().-]{7,}\d")
URL_RE = re.compile(r"(?:https?://|www\.)[^\s|•,]+|\b(?:github|gitlab)\.com/[^\s|•,]+", re.IGNORECASE)
LOCATION_RE = re.compile(r"\b[A-Z][a-z]+(?:\s[A-Z][a-z]+)*,\s*[A-Z]{2}\b")

MONTHS = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
_DATE_TOKEN = rf"(?:{MONTHS}\s+)?(?:19|20)\d{{2}}|\d{{1,2}}/(?:19|20)\d{{2}}"
DATE_RANGE_RE = re.compile(
    rf"\b(?P<start>{_DATE_TOKEN})\s*(?:[-–—]|to)\s*(?P<end>{_DATE_TOKEN}|present|current)\b",
    re.IGNORECASE,
)
YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
BARE_DATE_RE = re.compile(rf"^(?:{_DATE_TOKEN}|present|current)$", re.IGNORECASE)
CURRENT_RE = re.compile(r"^(?:present|current)$", re.IGNORECASE)

#: "Title – Company – Location" separators; a plain hyphen needs spaces
#: around it so hyphenated words are not split.
ENTRY_SEPARATOR_RE = re.compile(r"\s+[-–—|]\s+|\s*[–—|]\s*")
#: Education lines are additionally split on commas.
EDU_SEPARATOR_RE = re.compile(r"\s*,\s*|\s+[-–—|]\s+|\s*[–—|]\s*")

DEGREE_RE = re.compile(
    r"\b(?:bachelor(?:'s)?|master(?:'s)?|ph\.?d\.?|b\.?sc?\.?|b\.?a\.?|m\.?sc?\.?|m\.?a\.?|mba|associate(?:'s)?)(?=\W|$)",
    re.IGNORECASE,
)
DEGREE_FIELD_RE = re.compile(r"^(?P<degree>.+?)\s+in\s+(?P<field>.+)$")
GPA_RE = re.compile(r"\bGPA\b", re.IGNORECASE)
GPA_VALUE_RE = re.compile(r"\bGPA\b[^\d]{0,5}(\d+\.\d+)|(\d+\.\d+)\s*GPA\b", re.IGNORECASE)
DECIMAL_RE = re.compile(r"\d+\.\d+")

SKILL_SPLIT_RE = re.compile(r"[,;]")

MAX_ENTRY_HEADER_LENGTH = 100
MAX_ENTRY_PART_LENGTH = 60

_SEPARATOR_CHARS = " \t-–—|,:"


def _strip_separators(text: str) -> str:
    return text.strip(_SEPARATOR_CHARS)


# ---------------------------------------------------------------------------
# Contact
# ---------------------------------------------------------------------------


@dataclass
class ContactExtraction:
    """Contact fields plus the lines that held no contact data."""

    contact: ContactInfo
    leftover: List[str] = field(default_factory=list)


def _find_phone(line: str) -> Optional[str]:
    for match in PHONE_RE.finditer(line):
        candidate = match.group().strip()
        digits = sum(ch.isdigit() for ch in candidate)
        if len(candidate) >= 10 and digits >= 7 and not DATE_RANGE_RE.search(candidate):
            return candidate
    return None


def _find_website(line: str) -> Optional[str]:
    for match in URL_RE.finditer(line):
        url = match.group().rstrip(".;)")
        if "linkedin" not in url.lower():
            return url
    return None


def _scan_contact_fields(line: str, contact: ContactInfo) -> bool:
    """Fill unset contact fields from *line*; True if the line held any."""
    found = False

    email = EMAIL_RE.search(line)
    if email:
        found = True
        if contact.email is None:
            contact.email = email.group()

    phone = _find_phone(line)
    if phone:
        found = True
        if contact.phone is None:
            contact.phone = phone

    if "linkedin" in line.lower():
        found = True
        if contact.linkedin is None:
            contact.linkedin = line

    website = _find_website(line)
    if website:
        found = True
        if contact.website is None:
            contact.website = website

    location = LOCATION_RE.search(line)
    if location:
        found = True
        if contact.location is None:
            contact.location = location.group()

    return found


def extract_contact(
    lines: List[str],
    config: Optional[ParserConfig] = None,
    existing: Optional[ContactInfo] = None,
    preamble: bool = True,
) -> ContactExtraction:
    """Extract contact fields from the first lines of the contact bucket.

    The first line is the name when no name is known yet. Under an explicit
    contact header (*preamble* false) that line only becomes the name if it
    holds no contact pattern. Every field is captured at most once (first
    match wins); fields already set on *existing* are kept. Lines that are
    neither the name nor contributed a contact pattern are returned as
    ``leftover``.
    """
    config = config or DEFAULT_CONFIG
    contact = ContactInfo(**existing.to_dict()) if existing else ContactInfo()
    leftover: List[str] = []

    window = config.contact_scan_lines
    for i, line in enumerate(lines[:window]):
        consumed = _scan_contact_fields(line, contact)
        if i == 0 and contact.name is None and (preamble or not consumed):
            contact.name = line
            consumed = True
        if not consumed:
            leftover.append(line)

    leftover.extend(lines[window:])
    return ContactExtraction(contact=contact, leftover=leftover)


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def extract_summary(lines: List[str]) -> Optional[str]:
    """Join the summary bucket into one paragraph."""
    text = " ".join(line.strip() for line in lines if line.strip())
    return text or None


# ---------------------------------------------------------------------------
# Experience
# ---------------------------------------------------------------------------


def split_entry_header(line: str) -> Optional[List[str]]:
    """Split a "Title – Company[ – Location]" line into its parts.

    Any date range on the line is ignored. Returns ``None`` unless the line
    starts with a capital letter and yields two or three short parts.
    """
    if len(line) > MAX_ENTRY_HEADER_LENGTH or not line[:1].isupper():
        return None
    remainder = _strip_separators(DATE_RANGE_RE.sub("", line))
    parts = [p.strip() for p in ENTRY_SEPARATOR_RE.split(remainder) if p and p.strip()]
    if not 2 <= len(parts) <= 3:
        return None
    if any(len(p) > MAX_ENTRY_PART_LENGTH for p in parts):
        return None
    return parts


def _apply_dates(entry: Experience, match: re.Match[str]) -> None:
    entry.start_date = match.group("start").strip()
    entry.end_date = match.group("end").strip()
    entry.current = bool(CURRENT_RE.match(entry.end_date))


class _ExperienceBuilder:
    """Accumulates one experience entry while its lines are consumed."""

    def __init__(self, entry: Experience):
        self.entry = entry
        self.bullets: List[str] = []
        self.plain: List[str] = []

    @property
    def has_body(self) -> bool:
        return bool(self.bullets or self.plain)

    @property
    def has_dates(self) -> bool:
        return bool(self.entry.start_date or self.entry.end_date)

    @property
    def has_title(self) -> bool:
        return bool(self.entry.position or self.entry.company)

    def build(self) -> Experience:
        self.entry.description = self.bullets if self.bullets else self.plain
        return self.entry


def extract_experience(lines: List[str]) -> List[Experience]:
    """Parse the experience bucket into entries, in source order.

    A title line or a date-range line starts an entry. A date line right
    after a title line (and a title line right after a date line) completes
    the same entry instead of starting a new one. Bulleted lines form the
    description; entries without bullets fall back to their plain lines.
    """
    entries: List[Experience] = []
    builder: Optional[_ExperienceBuilder] = None

    def finish() -> None:
        if builder is not None:
            entries.append(builder.build())

    for line in lines:
        if is_bullet(line):
            text = strip_bullet(line)
            if builder is None:
                logger.debug("Skipping bullet before first experience entry: %r", line)
            elif text:
                builder.bullets.append(text)
            continue

        parts = split_entry_header(line)
        dates = DATE_RANGE_RE.search(line)

        if parts:
            if builder is not None and not builder.has_title and not builder.has_body:
                entry = builder.entry
            else:
                finish()
                builder = _ExperienceBuilder(Experience())
                entry = builder.entry
            entry.position, entry.company = parts[0], parts[1]
            if len(parts) == 3:
                entry.location = parts[2]
            if dates:
                _apply_dates(entry, dates)
            continue

        if dates:
            leftover = _strip_separators(DATE_RANGE_RE.sub("", line))
            if builder is not None and not builder.has_dates and not builder.has_body:
                _apply_dates(builder.entry, dates)
                if leftover and builder.entry.location is None:
                    builder.entry.location = leftover
            else:
                finish()
                builder = _ExperienceBuilder(Experience(position=leftover))
                _apply_dates(builder.entry, dates)
            continue

        if builder is None:
            logger.debug("Skipping experience line outside an entry: %r", line)
            continue
        builder.plain.append(line)

    finish()
    return entries


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------


def _parse_degree(line: str) -> Tuple[Optional[str], Optional[str]]:
    match = DEGREE_RE.search(line)
    if not match:
        return None, None
    segment = EDU_SEPARATOR_RE.split(line[match.start():], maxsplit=1)[0]
    segment = re.sub(r"\s+", " ", YEAR_RE.sub("", DATE_RANGE_RE.sub("", segment))).strip()
    field_match = DEGREE_FIELD_RE.match(segment)
    if field_match:
        return field_match.group("degree").strip(), field_match.group("field").strip()
    return segment, None


def _find_institution(line: str) -> Optional[str]:
    candidates = []
    for part in EDU_SEPARATOR_RE.split(DATE_RANGE_RE.sub("", line)):
        part = part.strip()
        if len(part) < 3 or BARE_DATE_RE.match(part):
            continue
        if DEGREE_RE.search(part) or GPA_RE.search(part) or YEAR_RE.fullmatch(part):
            continue
        candidates.append(part)
    if not candidates:
        return None
    return max(candidates, key=len)


def _find_gpa(line: str) -> Optional[str]:
    if not GPA_RE.search(line):
        return None
    match = GPA_VALUE_RE.search(line)
    if match:
        return match.group(1) or match.group(2)
    decimal = DECIMAL_RE.search(line)
    return decimal.group() if decimal else None


class _EducationBuilder:
    """Accumulates one education entry and the years seen on its lines."""

    def __init__(self, first_line: str):
        self.entry = Education()
        self.years: List[str] = []
        self.open_ended: Optional[str] = None
        self.lines_seen = 0
        degree, field_name = _parse_degree(first_line)
        if degree:
            self.entry.degree = degree
            self.entry.field = field_name
        self.absorb(first_line)

    @property
    def is_complete(self) -> bool:
        return bool(self.entry.institution) and bool(self.years or self.open_ended)

    def absorb(self, line: str) -> None:
        """Take institution, years and GPA from a header/continuation line."""
        if not self.entry.institution:
            self.entry.institution = _find_institution(line) or ""
        self.years.extend(YEAR_RE.findall(line))
        dates = DATE_RANGE_RE.search(line)
        if dates and CURRENT_RE.match(dates.group("end")):
            self.open_ended = dates.group("end")
        gpa = _find_gpa(line)
        if gpa and self.entry.gpa is None:
            self.entry.gpa = gpa

    def build(self) -> Education:
        if len(self.years) >= 2:
            self.entry.start_date, self.entry.end_date = self.years[0], self.years[1]
        elif self.years and self.open_ended:
            self.entry.start_date, self.entry.end_date = self.years[0], self.open_ended
        elif self.years:
            self.entry.end_date = self.years[0]
        return self.entry


def extract_education(lines: List[str], config: Optional[ParserConfig] = None) -> List[Education]:
    """Parse the education bucket into entries, in source order.

    A line with a degree keyword always starts an entry; a line with a year
    starts one unless it completes the open entry within the lookahead
    window. GPA is read within the window; bullets become achievements.
    """
    config = config or DEFAULT_CONFIG
    entries: List[Education] = []
    builder: Optional[_EducationBuilder] = None

    def finish() -> None:
        if builder is not None:
            entries.append(builder.build())

    for line in lines:
        if is_bullet(line):
            text = strip_bullet(line)
            if builder is None:
                logger.debug("Skipping bullet before first education entry: %r", line)
            elif text:
                if builder.entry.achievements is None:
                    builder.entry.achievements = []
                builder.entry.achievements.append(text)
            continue

        has_degree = bool(DEGREE_RE.search(line))
        has_year = bool(YEAR_RE.search(line))
        in_window = builder is not None and builder.lines_seen < config.education_lookahead

        if builder is not None:
            builder.lines_seen += 1

        if has_degree:
            finish()
            builder = _EducationBuilder(line)
            continue

        if in_window and GPA_RE.search(line):
            gpa = _find_gpa(line)
            if gpa and builder.entry.gpa is None:
                builder.entry.gpa = gpa
            continue

        if in_window and not builder.is_complete:
            builder.absorb(line)
            continue

        if has_year:
            finish()
            builder = _EducationBuilder(line)
            continue

        logger.debug("Skipping education line: %r", line)

    finish()
    return entries


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


def split_skill_items(text: str) -> List[str]:
    return [item.strip() for item in SKILL_SPLIT_RE.split(text) if item.strip()]


def extract_skills(
    lines: List[str],
    config: Optional[ParserConfig] = None,
    existing: Optional[List[Skill]] = None,
) -> List[Skill]:
    """Group skill lines into categories; categories accumulate, never reset.

    ``"Category: a, b"`` appends to (or creates) *Category* and makes it the
    current category; lines without a colon extend the current category.
    """
    config = config or DEFAULT_CONFIG
    skills: List[Skill] = [Skill(s.category, list(s.items)) for s in existing or []]
    current_category = config.generic_skill_category

    def category_entry(name: str) -> Skill:
        for skill in skills:
            if skill.category == name:
                return skill
        skill = Skill(category=name)
        skills.append(skill)
        return skill

    for raw in lines:
        line = strip_bullet(raw).replace("：", ":")
        if not line:
            continue
        if ":" in line:
            category, rest = line.split(":", 1)
            category = category.strip()
            if category:
                current_category = category
            items = split_skill_items(rest)
            if items:
                category_entry(current_category).items.extend(items)
            continue
        items = split_skill_items(line)
        if items:
            category_entry(current_category).items.extend(items)

    return skills


# ---------------------------------------------------------------------------
# Additional sections
# ---------------------------------------------------------------------------


def extract_additional(title: str, lines: List[str]) -> Optional[AdditionalSection]:
    content = [line.strip() for line in lines if line.strip()]
    if not content:
        return None
    return AdditionalSection(title=title, content=content)
