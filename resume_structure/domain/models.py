"""Typed resume model produced by the parser and consumed by renderer/patcher.

Plain dataclasses -- no I/O. ``to_dict``/``from_dict`` are the only
serialization seam; the tools layer uses them to move structures through JSON.
"""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import DEFAULT_CONFIG, ParserConfig

#: camelCase spellings accepted on input, mapped to attribute names.
FIELD_ALIASES: Dict[str, str] = {
    "startDate": "start_date",
    "endDate": "end_date",
    "additionalSections": "additional_sections",
}


def normalize_field_name(name: str) -> str:
    """Map a camelCase field name to its snake_case attribute name."""
    return FIELD_ALIASES.get(name, name)


def new_entry_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _normalized(data: Dict[str, Any]) -> Dict[str, Any]:
    return {normalize_field_name(k): v for k, v in data.items()}


def _str_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass
class ContactInfo:
    """Contact block; ``None`` means the field was not found."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    website: Optional[str] = None

    FIELDS = ("name", "email", "phone", "location", "linkedin", "website")

    def is_empty(self) -> bool:
        return all(getattr(self, f) is None for f in self.FIELDS)

    def to_dict(self) -> Dict[str, str]:
        return {f: getattr(self, f) for f in self.FIELDS if getattr(self, f) is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContactInfo":
        return cls(**{f: _opt_str(data.get(f)) for f in cls.FIELDS})


@dataclass
class Experience:
    """One job entry."""

    position: str = ""
    company: str = ""
    location: Optional[str] = None
    start_date: str = ""
    end_date: str = ""
    current: Optional[bool] = None
    description: List[str] = field(default_factory=list)
    id: str = field(default_factory=lambda: new_entry_id("exp"))

    EDITABLE = ("position", "company", "location", "start_date", "end_date", "description")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "position": self.position,
            "company": self.company,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "description": list(self.description),
        }
        if self.location is not None:
            data["location"] = self.location
        if self.current is not None:
            data["current"] = self.current
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Experience":
        data = _normalized(data)
        entry = cls(
            position=str(data.get("position") or ""),
            company=str(data.get("company") or ""),
            location=_opt_str(data.get("location")),
            start_date=str(data.get("start_date") or ""),
            end_date=str(data.get("end_date") or ""),
            current=data.get("current"),
            description=_str_list(data.get("description")),
        )
        if data.get("id"):
            entry.id = str(data["id"])
        return entry


@dataclass
class Education:
    """One degree/program entry."""

    institution: str = ""
    degree: str = ""
    field: Optional[str] = None
    start_date: Optional[str] = None
    end_date: str = ""
    gpa: Optional[str] = None
    achievements: Optional[List[str]] = None
    # ``field`` is shadowed by the attribute above
    id: str = dataclasses.field(default_factory=lambda: new_entry_id("edu"))

    EDITABLE = ("institution", "degree", "field", "start_date", "end_date", "gpa", "achievements")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "institution": self.institution,
            "degree": self.degree,
            "end_date": self.end_date,
        }
        for name in ("field", "start_date", "gpa"):
            if getattr(self, name) is not None:
                data[name] = getattr(self, name)
        if self.achievements is not None:
            data["achievements"] = list(self.achievements)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Education":
        data = _normalized(data)
        achievements = data.get("achievements")
        entry = cls(
            institution=str(data.get("institution") or ""),
            degree=str(data.get("degree") or ""),
            field=_opt_str(data.get("field")),
            start_date=_opt_str(data.get("start_date")),
            end_date=str(data.get("end_date") or ""),
            gpa=_opt_str(data.get("gpa")),
            achievements=_str_list(achievements) if achievements is not None else None,
        )
        if data.get("id"):
            entry.id = str(data["id"])
        return entry


@dataclass
class Skill:
    """A category label and its items, in insertion order."""

    category: str = DEFAULT_CONFIG.generic_skill_category
    items: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "items": list(self.items)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], config: Optional[ParserConfig] = None) -> "Skill":
        """An empty category falls back to the configured generic label."""
        config = config or DEFAULT_CONFIG
        return cls(
            category=str(data.get("category") or config.generic_skill_category),
            items=_str_list(data.get("items")),
        )


@dataclass
class AdditionalSection:
    """A section that is not one of the five canonical ones."""

    title: str
    content: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "content": list(self.content)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdditionalSection":
        return cls(title=str(data.get("title") or ""), content=_str_list(data.get("content")))


@dataclass
class ResumeStructure:
    """Aggregate root of a parsed resume."""

    contact: ContactInfo = field(default_factory=ContactInfo)
    summary: Optional[str] = None
    experience: List[Experience] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    skills: List[Skill] = field(default_factory=list)
    additional_sections: Optional[List[AdditionalSection]] = None

    @property
    def populated_sections(self) -> List[str]:
        """Names of the sections that hold any data, in render order."""
        names: List[str] = []
        if not self.contact.is_empty():
            names.append("contact")
        if self.summary:
            names.append("summary")
        for name in ("experience", "education", "skills"):
            if getattr(self, name):
                names.append(name)
        if self.additional_sections:
            names.append("additional_sections")
        return names

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "contact": self.contact.to_dict(),
            "experience": [e.to_dict() for e in self.experience],
            "education": [e.to_dict() for e in self.education],
            "skills": [s.to_dict() for s in self.skills],
        }
        if self.summary is not None:
            data["summary"] = self.summary
        if self.additional_sections is not None:
            data["additional_sections"] = [s.to_dict() for s in self.additional_sections]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], config: Optional[ParserConfig] = None) -> "ResumeStructure":
        data = _normalized(data)
        additional = data.get("additional_sections")
        return cls(
            contact=ContactInfo.from_dict(data.get("contact") or {}),
            summary=_opt_str(data.get("summary")),
            experience=[Experience.from_dict(e) for e in data.get("experience") or []],
            education=[Education.from_dict(e) for e in data.get("education") or []],
            skills=[Skill.from_dict(s, config) for s in data.get("skills") or []],
            additional_sections=(
                [AdditionalSection.from_dict(s) for s in additional] if additional is not None else None
            ),
        )
