"""Resume Structure - parse resume text into a typed model, render it back and patch it."""

from .config import ParserConfig, load_config
from .domain import (
    Addition,
    AdditionalSection,
    ContactInfo,
    EditOperation,
    EditValidationResult,
    Education,
    Experience,
    Removal,
    ResumeStructure,
    Skill,
    StructuredEdit,
    apply_edits,
    classify_line,
    format_edit_report,
    html_to_text,
    normalize_text,
    parse,
    scan,
    to_markup,
    validate_edit_operation,
)

__version__ = "0.1.0"

__all__ = [
    "ParserConfig",
    "load_config",
    "ContactInfo",
    "Experience",
    "Education",
    "Skill",
    "AdditionalSection",
    "ResumeStructure",
    "StructuredEdit",
    "Addition",
    "Removal",
    "EditOperation",
    "EditValidationResult",
    "parse",
    "to_markup",
    "apply_edits",
    "validate_edit_operation",
    "format_edit_report",
    "normalize_text",
    "html_to_text",
    "scan",
    "classify_line",
]
