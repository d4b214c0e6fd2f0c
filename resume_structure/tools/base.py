"""Shared plumbing for the resume structure agent tools.

Every tool carries an optional :class:`ParserConfig`, accepts structure and
operation arguments either as objects or as their JSON text, and reports
failures through a :class:`ToolResult` instead of raising.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..config import ParserConfig

JsonObject = Union[Dict[str, Any], str]


@dataclass
class ToolResult:
    """What a structure tool hands back to the agent.

    ``output`` is the text the model reads (an overview, markup or an edit
    report); ``data`` holds the serialized structure and related values.
    """
    success: bool
    output: str
    error: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(cls, error: Union[Exception, str]) -> "ToolResult":
        return cls(success=False, output="", error=str(error))

    def to_message(self) -> str:
        if self.success:
            return self.output
        return f"Error: {self.error}\n{self.output}" if self.output else f"Error: {self.error}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BaseTool(ABC):
    """A parse, render or patch operation exposed for function calling.

    ``parameters`` maps argument names to JSON-schema fragments; a
    ``"required": True`` entry marks the argument as mandatory and is moved
    to the schema's ``required`` list by :meth:`to_schema`.
    """

    name: str
    description: str
    parameters: Dict[str, Any]

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config

    @abstractmethod
    async def execute(self, **kwargs) -> ToolResult:
        """Run the tool; errors come back as ``ToolResult.failure``."""

    @staticmethod
    def load_object(value: JsonObject, name: str) -> Dict[str, Any]:
        """Accept a dict or its JSON text (models often send the latter)."""
        if isinstance(value, str):
            value = json.loads(value)
        if not isinstance(value, dict):
            raise ValueError(f"{name} must be a JSON object")
        return value

    @property
    def required_parameters(self) -> List[str]:
        return [k for k, v in self.parameters.items() if v.get("required", False)]

    def to_schema(self) -> Dict[str, Any]:
        """Function-calling schema for this tool."""
        properties = {
            k: {key: value for key, value in v.items() if key != "required"} for k, v in self.parameters.items()
        }
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": properties,
                    "required": self.required_parameters,
                },
            },
        }
