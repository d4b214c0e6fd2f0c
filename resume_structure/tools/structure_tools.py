"""Agent tools wrapping the resume structure domain: parse, render, apply edits."""

from __future__ import annotations

import logging

from ..contracts import EditOperationPayload
from ..domain import (
    ResumeStructure,
    apply_edits,
    format_edit_report,
    parse,
    to_markup,
    validate_edit_operation,
)
from .base import BaseTool, JsonObject, ToolResult

logger = logging.getLogger(__name__)


def _format_overview(structure: ResumeStructure) -> str:
    lines = ["=== Resume Structure ==="]
    if structure.contact.name:
        lines.append(f"Name: {structure.contact.name}")
    sections = structure.populated_sections
    lines.append(f"Sections: {', '.join(sections) if sections else '(none)'}")

    for i, entry in enumerate(structure.experience):
        dates = " - ".join(d for d in (entry.start_date, entry.end_date) if d)
        lines.append(f"  experience[{i}]: {entry.position or '?'} @ {entry.company or '?'} ({dates or 'no dates'})")
    for i, entry in enumerate(structure.education):
        lines.append(f"  education[{i}]: {entry.degree or '?'} - {entry.institution or '?'}")
    for i, skill in enumerate(structure.skills):
        lines.append(f"  skills[{i}]: {skill.category} ({len(skill.items)} items)")
    for section in structure.additional_sections or []:
        lines.append(f"  {section.title}: {len(section.content)} lines")
    return "\n".join(lines)


class ResumeStructureParseTool(BaseTool):
    """Parse resume text into a structured model."""

    name = "resume_structure_parse"
    description = """Parse resume text (plain text or simple HTML) into structured sections:
contact, summary, experience, education, skills and additional sections.
Returns an overview plus the full structure as JSON in data["structure"]."""
    parameters = {
        "content": {
            "type": "string",
            "description": "Resume text or HTML",
            "required": True,
        },
    }

    async def execute(self, content: str) -> ToolResult:
        try:
            structure = parse(content, self.config)
            return ToolResult(
                success=True,
                output=_format_overview(structure),
                data={
                    "structure": structure.to_dict(),
                    "sections": structure.populated_sections,
                },
            )
        except Exception as e:
            logger.warning("resume_structure_parse failed: %s", e)
            return ToolResult.failure(e)


class ResumeStructureRenderTool(BaseTool):
    """Render a structure back to HTML markup."""

    name = "resume_structure_render"
    description = """Render a resume structure (as returned by resume_structure_parse)
to HTML markup with h1/h2/h3/p/ul elements. Empty sections are omitted."""
    parameters = {
        "structure": {
            "type": "object",
            "description": "Resume structure JSON",
            "required": True,
        },
    }

    async def execute(self, structure: JsonObject) -> ToolResult:
        try:
            model = ResumeStructure.from_dict(self.load_object(structure, "structure"), self.config)
            markup = to_markup(model, self.config)
            return ToolResult(success=True, output=markup, data={"sections": model.populated_sections})
        except Exception as e:
            logger.warning("resume_structure_render failed: %s", e)
            return ToolResult.failure(e)


class ResumeStructureApplyEditsTool(BaseTool):
    """Apply a batch of edits, additions and removals to a structure."""

    name = "resume_structure_apply_edits"
    description = """Apply structured edits to a resume structure. The operation has
"edits" ({section, index, field, suggested, ...}), "additions" ({section, content})
and "removals" ({section, index}). Entries that do not match the structure are
skipped and listed in the report. Returns the updated structure and its markup."""
    parameters = {
        "structure": {
            "type": "object",
            "description": "Resume structure JSON",
            "required": True,
        },
        "operation": {
            "type": "object",
            "description": "Edit operation JSON with edits, additions and removals",
            "required": True,
        },
    }

    async def execute(self, structure: JsonObject, operation: JsonObject) -> ToolResult:
        try:
            model = ResumeStructure.from_dict(self.load_object(structure, "structure"), self.config)
            payload = EditOperationPayload.model_validate(self.load_object(operation, "operation"))
            edit_operation = payload.to_operation()

            validation = validate_edit_operation(model, edit_operation, self.config)
            updated = apply_edits(model, edit_operation, self.config)
            markup = to_markup(updated, self.config)

            return ToolResult(
                success=True,
                output=f"{format_edit_report(validation)}\n\n{markup}",
                data={
                    "structure": updated.to_dict(),
                    "markup": markup,
                    "valid": validation.valid,
                    "errors": validation.errors,
                    "warnings": validation.warnings,
                },
            )
        except Exception as e:
            logger.warning("resume_structure_apply_edits failed: %s", e)
            return ToolResult.failure(e)
