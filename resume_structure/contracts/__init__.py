"""Payload contracts validated at the tool boundary."""

from .edits import AdditionPayload, EditOperationPayload, RemovalPayload, StructuredEditPayload

__all__ = [
    "AdditionPayload",
    "EditOperationPayload",
    "RemovalPayload",
    "StructuredEditPayload",
]
