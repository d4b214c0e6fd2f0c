"""Resume Structure Domain - Pure domain logic for resume document structure.

This package contains pure functions with no file system or LLM dependencies.
It operates on strings, dicts and the dataclasses in :mod:`.models`.
"""

from .edit_operations import Addition, EditOperation, Removal, StructuredEdit
from .models import AdditionalSection, ContactInfo, Education, Experience, ResumeStructure, Skill
from .resume_parser import parse
from .section_scanner import LineClass, LineKind, ScannedLine, classify_line, scan
from .structure_patcher import EditValidationResult, apply_edits, format_edit_report, validate_edit_operation
from .structure_renderer import to_markup
from .text_normalizer import html_to_text, normalize_text

__all__ = [
    # Models
    "ContactInfo",
    "Experience",
    "Education",
    "Skill",
    "AdditionalSection",
    "ResumeStructure",
    # Parser
    "parse",
    "scan",
    "classify_line",
    "LineClass",
    "LineKind",
    "ScannedLine",
    "normalize_text",
    "html_to_text",
    # Renderer
    "to_markup",
    # Patcher
    "StructuredEdit",
    "Addition",
    "Removal",
    "EditOperation",
    "apply_edits",
    "validate_edit_operation",
    "EditValidationResult",
    "format_edit_report",
]
