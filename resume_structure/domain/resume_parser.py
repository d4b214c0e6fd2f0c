"""Pure domain logic turning resume text into a :class:`ResumeStructure`.

Composes the section scanner and the field extractors. Accepts plain text
or lightly-tagged markup; never raises on malformed input.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..config import DEFAULT_CONFIG, ParserConfig
from .field_extractors import (
    extract_additional,
    extract_contact,
    extract_education,
    extract_experience,
    extract_skills,
    extract_summary,
)
from .models import AdditionalSection, ResumeStructure
from .section_scanner import group_sections, scan
from .text_normalizer import prepare_text

logger = logging.getLogger(__name__)


def parse(text: str, config: Optional[ParserConfig] = None) -> ResumeStructure:
    """Parse resume *text* into a structure.

    Lines before the first header (and under an explicit contact header)
    feed the contact extractor; the ones that carry no contact data end up
    in a leading catch-all additional section.
    """
    config = config or DEFAULT_CONFIG
    structure = ResumeStructure()
    if not text or not text.strip():
        return structure

    blocks = group_sections(scan(prepare_text(text)))

    summary_parts: List[str] = []
    unplaced: List[str] = []
    additional: List[AdditionalSection] = []

    for block in blocks:
        if block.section is None or block.section == "contact":
            result = extract_contact(
                block.lines, config, existing=structure.contact, preamble=block.section is None
            )
            structure.contact = result.contact
            unplaced.extend(result.leftover)
        elif block.section == "summary":
            summary = extract_summary(block.lines)
            if summary:
                summary_parts.append(summary)
        elif block.section == "experience":
            structure.experience.extend(extract_experience(block.lines))
        elif block.section == "education":
            structure.education.extend(extract_education(block.lines, config))
        elif block.section == "skills":
            structure.skills = extract_skills(block.lines, config, existing=structure.skills)
        elif block.is_custom:
            section = extract_additional(block.section, block.lines)
            if section:
                additional.append(section)

    if summary_parts:
        structure.summary = " ".join(summary_parts)
    if unplaced:
        additional.insert(0, AdditionalSection(title=config.catch_all_title, content=unplaced))
    structure.additional_sections = additional or None

    logger.debug(
        "Parsed resume: %d experience, %d education, %d skill categories, %d additional sections",
        len(structure.experience),
        len(structure.education),
        len(structure.skills),
        len(additional),
    )
    return structure
