"""Edit-operation payload contracts from the suggestion service."""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field

from ..domain.edit_operations import Addition, EditOperation, Removal, StructuredEdit


class StructuredEditPayload(BaseModel):
    section: str = Field(min_length=1)
    suggested: str
    index: Optional[int] = None
    field: Optional[str] = None
    original: str = ""
    reason: str = ""
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    def to_edit(self) -> StructuredEdit:
        return StructuredEdit(**self.model_dump())


class AdditionPayload(BaseModel):
    section: str = Field(min_length=1)
    content: Union[Dict[str, Any], str]
    reason: str = ""

    def to_addition(self) -> Addition:
        return Addition(section=self.section, content=self.content, reason=self.reason)


class RemovalPayload(BaseModel):
    section: str = Field(min_length=1)
    index: int
    reason: str = ""

    def to_removal(self) -> Removal:
        return Removal(section=self.section, index=self.index, reason=self.reason)


class EditOperationPayload(BaseModel):
    edits: list[StructuredEditPayload] = Field(default_factory=list)
    additions: list[AdditionPayload] = Field(default_factory=list)
    removals: list[RemovalPayload] = Field(default_factory=list)

    def to_operation(self) -> EditOperation:
        """Convert the validated payload into a domain :class:`EditOperation`."""
        return EditOperation(
            edits=[e.to_edit() for e in self.edits],
            additions=[a.to_addition() for a in self.additions],
            removals=[r.to_removal() for r in self.removals],
        )
