"""Pure domain logic applying edit batches to a :class:`ResumeStructure`.

``apply_edits`` never raises on bad entries: anything it cannot apply is
logged and skipped. ``validate_edit_operation`` reports the same entries
without applying anything.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, TypeVar

from ..config import DEFAULT_CONFIG, ParserConfig
from .edit_operations import EDITABLE_FIELDS, LIST_SECTIONS, Addition, EditOperation, Removal, StructuredEdit
from .field_extractors import CURRENT_RE, extract_education, extract_experience, extract_skills
from .models import ContactInfo, Education, Experience, ResumeStructure, Skill, new_entry_id, normalize_field_name
from .text_normalizer import prepare_text

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RECORD_TYPES = {"experience": Experience, "education": Education, "skills": Skill}
_ID_PREFIXES = {"experience": "exp", "education": "edu"}


@dataclass
class EditValidationResult:
    """Entries of an :class:`EditOperation` that would not apply cleanly."""

    valid: bool
    errors: List[Dict[str, str]] = field(default_factory=list)
    warnings: List[Dict[str, str]] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _split_lines(value: str) -> List[str]:
    return [line.strip() for line in value.split("\n") if line.strip()]


def _split_commas(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _entry_at(items: Sequence[T], index: Optional[int]) -> Optional[T]:
    if index is None or index < 0 or index >= len(items):
        return None
    return items[index]


def _edit_field(edit: StructuredEdit) -> Optional[str]:
    return normalize_field_name(edit.field) if edit.field else None


def _records_from(section: str, content: Any, config: ParserConfig) -> List[Any]:
    """Convert addition *content* into records of *section*'s type.

    Accepts a model instance, a dict or a text snippet run through the
    section's extractor. Returns an empty list when nothing usable comes out.
    Entries get a new id; ids carried by the content are dropped.
    """
    record_type = _RECORD_TYPES[section]
    if isinstance(content, record_type):
        records = [copy.deepcopy(content)]
    elif isinstance(content, dict):
        if section == "skills":
            records = [Skill.from_dict(content, config)]
        else:
            records = [record_type.from_dict(content)]
    elif isinstance(content, str):
        lines = [line for line in prepare_text(content).split("\n") if line]
        if section == "experience":
            records = extract_experience(lines)
        elif section == "education":
            records = extract_education(lines, config)
        else:
            records = [s for s in extract_skills(lines, config) if s.items]
    else:
        return []

    prefix = _ID_PREFIXES.get(section)
    if prefix:
        for record in records:
            record.id = new_entry_id(prefix)
    return records


# ---------------------------------------------------------------------------
# Edits
# ---------------------------------------------------------------------------


def _apply_experience_edit(entry: Experience, name: str, value: str) -> None:
    if name == "description":
        entry.description = _split_lines(value)
    elif name == "location":
        entry.location = value or None
    elif name == "end_date":
        entry.end_date = value
        entry.current = bool(CURRENT_RE.match(value.strip()))
    else:
        setattr(entry, name, value)


def _apply_education_edit(entry: Education, name: str, value: str) -> None:
    if name == "achievements":
        entry.achievements = _split_lines(value)
    elif name in ("field", "start_date", "gpa"):
        setattr(entry, name, value or None)
    else:
        setattr(entry, name, value)


def _apply_edit(structure: ResumeStructure, edit: StructuredEdit) -> bool:
    """Apply one edit in place; return False when it was a no-op."""
    section = edit.section
    name = _edit_field(edit)
    value = edit.suggested

    if section == "contact":
        if name not in ContactInfo.FIELDS:
            return False
        setattr(structure.contact, name, value or None)
        return True

    if section == "summary":
        structure.summary = value or None
        return True

    if section == "experience":
        entry = _entry_at(structure.experience, edit.index)
        if entry is None or name not in Experience.EDITABLE:
            return False
        _apply_experience_edit(entry, name, value)
        return True

    if section == "education":
        entry = _entry_at(structure.education, edit.index)
        if entry is None or name not in Education.EDITABLE:
            return False
        _apply_education_edit(entry, name, value)
        return True

    if section == "skills":
        skill = _entry_at(structure.skills, edit.index)
        if skill is None:
            return False
        if name == "items":
            skill.items = _split_commas(value)
        elif name == "category":
            skill.category = value.strip() or skill.category
        else:
            return False
        return True

    return False


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def apply_edits(
    structure: ResumeStructure,
    operation: EditOperation,
    config: Optional[ParserConfig] = None,
) -> ResumeStructure:
    """Return a new structure with *operation* applied.

    Edits run first, then additions, then removals in descending index
    order. *structure* and *operation* are left untouched. Added entries
    always get a new id.
    """
    config = config or DEFAULT_CONFIG
    updated = copy.deepcopy(structure)

    for edit in operation.edits:
        if not _apply_edit(updated, edit):
            logger.warning(
                "Skipping edit: section=%r field=%r index=%r does not match the structure",
                edit.section,
                edit.field,
                edit.index,
            )

    for addition in operation.additions:
        if addition.section not in LIST_SECTIONS:
            logger.warning("Skipping addition to unsupported section %r", addition.section)
            continue
        records = _records_from(addition.section, addition.content, config)
        if not records:
            logger.warning("Skipping addition to %s: content is not a usable entry", addition.section)
            continue
        getattr(updated, addition.section).extend(records)

    seen: set = set()
    for removal in sorted(operation.removals, key=lambda r: r.index, reverse=True):
        key = (removal.section, removal.index)
        if key in seen:
            continue
        seen.add(key)
        if removal.section not in LIST_SECTIONS:
            logger.warning("Skipping removal from unsupported section %r", removal.section)
            continue
        items = getattr(updated, removal.section)
        if _entry_at(items, removal.index) is None:
            logger.warning("Skipping removal: %s[%d] is out of range", removal.section, removal.index)
            continue
        del items[removal.index]

    logger.debug(
        "Applied %d edits, %d additions, %d removals",
        len(operation.edits),
        len(operation.additions),
        len(operation.removals),
    )
    return updated


def validate_edit_operation(
    structure: ResumeStructure,
    operation: EditOperation,
    config: Optional[ParserConfig] = None,
) -> EditValidationResult:
    """Report every entry of *operation* that ``apply_edits`` would skip.

    Indexes are checked against *structure* as it is before the batch, plus
    the entries its additions would append.
    """
    config = config or DEFAULT_CONFIG
    issues: List[Dict[str, str]] = []

    for i, edit in enumerate(operation.edits):
        issues.extend(_check_edit(structure, edit, i))

    appended: Dict[str, int] = {name: 0 for name in LIST_SECTIONS}
    for i, addition in enumerate(operation.additions):
        problems = _check_addition(addition, i, config)
        if not problems:
            appended[addition.section] += len(_records_from(addition.section, addition.content, config))
        issues.extend(problems)

    seen: set = set()
    for i, removal in enumerate(operation.removals):
        issues.extend(_check_removal(structure, removal, i, appended, seen))

    errors = [i for i in issues if i["level"] == "error"]
    warnings = [i for i in issues if i["level"] == "warning"]
    return EditValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)


# ---------------------------------------------------------------------------
# Report formatting
# ---------------------------------------------------------------------------


def format_edit_report(result: EditValidationResult) -> str:
    """Render an :class:`EditValidationResult` as a human-readable report."""
    status = "PASS" if result.valid else "FAIL"
    lines = [f"## Edit validation: {status}", ""]

    if result.errors:
        lines.append("### Errors")
        for e in result.errors:
            lines.append(f"- [{e['check']}] {e['message']}")
        lines.append("")

    if result.warnings:
        lines.append("### Warnings")
        for w in result.warnings:
            lines.append(f"- [{w['check']}] {w['message']}")
        lines.append("")

    if not result.errors and not result.warnings:
        lines.append("All edits apply cleanly.")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Private checks
# ---------------------------------------------------------------------------


def _issue(level: str, check: str, message: str) -> Dict[str, str]:
    return {"level": level, "check": check, "message": message}


def _check_edit(structure: ResumeStructure, edit: StructuredEdit, position: int) -> List[Dict[str, str]]:
    label = f"edits[{position}]"
    if edit.section not in EDITABLE_FIELDS:
        return [_issue("error", "unknown_section", f"{label}: unknown section {edit.section!r}")]

    allowed = EDITABLE_FIELDS[edit.section]
    name = _edit_field(edit)
    issues: List[Dict[str, str]] = []

    if allowed is not None and name not in allowed:
        issues.append(
            _issue(
                "error",
                "unknown_field",
                f"{label}: field {edit.field!r} is not editable in {edit.section} "
                f"(allowed: {', '.join(allowed)})",
            )
        )

    if edit.section in LIST_SECTIONS:
        size = len(getattr(structure, edit.section))
        if edit.index is None:
            issues.append(_issue("error", "missing_index", f"{label}: {edit.section} edits need an index"))
        elif _entry_at(range(size), edit.index) is None:
            issues.append(
                _issue(
                    "error",
                    "index_out_of_range",
                    f"{label}: {edit.section}[{edit.index}] does not exist ({size} entries)",
                )
            )

    if edit.confidence is not None and not 0.0 <= edit.confidence <= 1.0:
        issues.append(_issue("warning", "confidence", f"{label}: confidence {edit.confidence} is outside 0..1"))

    return issues


def _check_addition(addition: Addition, position: int, config: ParserConfig) -> List[Dict[str, str]]:
    label = f"additions[{position}]"
    if addition.section not in LIST_SECTIONS:
        return [
            _issue(
                "error",
                "unknown_section",
                f"{label}: cannot add to {addition.section!r} (allowed: {', '.join(LIST_SECTIONS)})",
            )
        ]
    if not _records_from(addition.section, addition.content, config):
        return [_issue("error", "unusable_content", f"{label}: content does not form a {addition.section} entry")]
    return []


def _check_removal(
    structure: ResumeStructure,
    removal: Removal,
    position: int,
    appended: Dict[str, int],
    seen: set,
) -> List[Dict[str, str]]:
    label = f"removals[{position}]"
    if removal.section not in LIST_SECTIONS:
        return [
            _issue(
                "error",
                "unknown_section",
                f"{label}: cannot remove from {removal.section!r} (allowed: {', '.join(LIST_SECTIONS)})",
            )
        ]

    key: Tuple[str, int] = (removal.section, removal.index)
    if key in seen:
        return [_issue("warning", "duplicate_removal", f"{label}: {removal.section}[{removal.index}] is removed twice")]
    seen.add(key)

    size = len(getattr(structure, removal.section)) + appended[removal.section]
    if _entry_at(range(size), removal.index) is None:
        return [
            _issue(
                "error",
                "index_out_of_range",
                f"{label}: {removal.section}[{removal.index}] does not exist ({size} entries)",
            )
        ]
    return []
