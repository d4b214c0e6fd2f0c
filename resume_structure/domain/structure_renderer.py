"""Pure domain logic rendering a :class:`ResumeStructure` to semantic markup.

Sections are emitted in a fixed order and empty sections are omitted, so
the output parses back into the same populated fields.
"""

from __future__ import annotations

from html import escape
from typing import List, Optional

from ..config import DEFAULT_CONFIG, ParserConfig
from .models import AdditionalSection, Education, Experience, ResumeStructure, Skill
from .section_scanner import is_bullet, strip_bullet

SUMMARY_HEADING = "PROFESSIONAL SUMMARY"
EXPERIENCE_HEADING = "PROFESSIONAL EXPERIENCE"
EDUCATION_HEADING = "EDUCATION"
SKILLS_HEADING = "SKILLS"

#: Joins position/company/location and institution/year.
PART_SEPARATOR = " – "


def _text(value: str) -> str:
    return escape(value, quote=False)


def _join(parts: List[Optional[str]], sep: str = PART_SEPARATOR) -> str:
    return sep.join(p for p in parts if p)


def _list(items: List[str]) -> List[str]:
    if not items:
        return []
    return ["<ul>", *[f"<li>{_text(item)}</li>" for item in items], "</ul>"]


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def render_contact(structure: ResumeStructure, config: ParserConfig) -> List[str]:
    contact = structure.contact
    out: List[str] = []
    if contact.name:
        out.append(f"<h1>{_text(contact.name)}</h1>")
    details = _join([contact.email, contact.phone, contact.location, contact.website], sep=config.contact_separator)
    if details:
        out.append(f"<p>{_text(details)}</p>")
    # the parser keeps the whole LinkedIn line, so it gets a line of its own
    if contact.linkedin:
        out.append(f"<p>{_text(contact.linkedin)}</p>")
    return out


def render_summary(summary: Optional[str]) -> List[str]:
    if not summary or not summary.strip():
        return []
    return [f"<h2>{SUMMARY_HEADING}</h2>", f"<p>{_text(summary)}</p>"]


def render_experience_entry(entry: Experience) -> List[str]:
    out: List[str] = []
    dates = _join([entry.start_date, entry.end_date], sep=" - ")
    # a lone position is not an entry header; it parses back from the date line
    position_only = entry.position and not (entry.company or entry.location)
    if position_only and dates:
        out.append(f"<p><em>{_text(entry.position)} {_text(dates)}</em></p>")
    else:
        title = _join([entry.position, entry.company, entry.location])
        if title:
            out.append(f"<h3>{_text(title)}</h3>")
        if dates:
            out.append(f"<p><em>{_text(dates)}</em></p>")
    out.extend(_list(entry.description))
    return out


def render_education_entry(entry: Education) -> List[str]:
    out: List[str] = []
    degree = f"{entry.degree} in {entry.field}" if entry.degree and entry.field else entry.degree or entry.field
    if degree:
        out.append(f"<h3>{_text(degree)}</h3>")
    place = _join([entry.institution, _join([entry.start_date, entry.end_date], sep=" - ")])
    if place:
        out.append(f"<p>{_text(place)}</p>")
    if entry.gpa:
        out.append(f"<p>GPA: {_text(entry.gpa)}</p>")
    out.extend(_list(entry.achievements or []))
    return out


def render_skill(skill: Skill, config: ParserConfig, label_generic: bool = False) -> List[str]:
    """Render one category line; the generic category is unlabeled unless *label_generic*."""
    if not skill.items:
        return []
    items = _text(", ".join(skill.items))
    generic = not skill.category or skill.category == config.generic_skill_category
    if generic and not label_generic:
        return [f"<p>{items}</p>"]
    category = skill.category or config.generic_skill_category
    return [f"<p><strong>{_text(category)}:</strong> {items}</p>"]


def render_additional_section(section: AdditionalSection) -> List[str]:
    if not section.content:
        return []
    out = [f"<h2>{_text(section.title.upper())}</h2>"]
    pending: List[str] = []
    for line in section.content:
        if is_bullet(line):
            pending.append(strip_bullet(line))
            continue
        out.extend(_list(pending))
        pending = []
        out.append(f"<p>{_text(line)}</p>")
    out.extend(_list(pending))
    return out


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def to_markup(structure: ResumeStructure, config: Optional[ParserConfig] = None) -> str:
    """Render *structure* as HTML-like markup, one element per line.

    Order: contact, summary, experience, education, skills, additional
    sections. Sections without data produce no heading.
    """
    config = config or DEFAULT_CONFIG
    lines: List[str] = []

    lines.extend(render_contact(structure, config))
    lines.extend(render_summary(structure.summary))

    experience = [line for entry in structure.experience for line in render_experience_entry(entry)]
    if experience:
        lines.append(f"<h2>{EXPERIENCE_HEADING}</h2>")
        lines.extend(experience)

    education = [line for entry in structure.education for line in render_education_entry(entry)]
    if education:
        lines.append(f"<h2>{EDUCATION_HEADING}</h2>")
        lines.extend(education)

    # unlabeled lines extend the previous category on re-parse, so only a
    # leading generic category may go without its label
    skills: List[str] = []
    for skill in structure.skills:
        skills.extend(render_skill(skill, config, label_generic=bool(skills)))
    if skills:
        lines.append(f"<h2>{SKILLS_HEADING}</h2>")
        lines.extend(skills)

    for section in structure.additional_sections or []:
        lines.extend(render_additional_section(section))

    return "\n".join(lines) + ("\n" if lines else "")
