"""Edit batches applied to a :class:`ResumeStructure`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .models import ContactInfo, Education, Experience

#: Sections accepting edits and, per section, the fields an edit may target.
#: ``None`` means the edit replaces the whole section value.
EDITABLE_FIELDS: Dict[str, Optional[tuple]] = {
    "contact": ContactInfo.FIELDS,
    "summary": None,
    "experience": Experience.EDITABLE,
    "education": Education.EDITABLE,
    "skills": ("category", "items"),
}

#: Sections that are lists and accept additions/removals.
LIST_SECTIONS = ("experience", "education", "skills")


@dataclass
class StructuredEdit:
    """Replace one field of one section with a suggested value."""

    section: str
    suggested: str
    field: Optional[str] = None
    index: Optional[int] = None
    original: str = ""
    reason: str = ""
    confidence: Optional[float] = None


@dataclass
class Addition:
    """Append *content* to a list section."""

    section: str
    content: Any
    reason: str = ""


@dataclass
class Removal:
    """Remove the entry at *index* of a list section."""

    section: str
    index: int
    reason: str = ""


@dataclass
class EditOperation:
    """A batch of edits, additions and removals applied together."""

    edits: List[StructuredEdit] = field(default_factory=list)
    additions: List[Addition] = field(default_factory=list)
    removals: List[Removal] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.edits or self.additions or self.removals)
