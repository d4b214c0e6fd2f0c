"""Resume Structure Tools - expose parse, render and apply-edits to an LLM agent."""

from .base import BaseTool, ToolResult
from .structure_tools import ResumeStructureApplyEditsTool, ResumeStructureParseTool, ResumeStructureRenderTool

__all__ = [
    "BaseTool",
    "ToolResult",
    "ResumeStructureParseTool",
    "ResumeStructureRenderTool",
    "ResumeStructureApplyEditsTool",
]
