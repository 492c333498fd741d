"""
Data model definitions package.

Aggregates models for use in other modules.
"""

from .context import BridgeContext
from .handler_map import UNASSIGNED, AssignedTo, HandlerAssignment, HandlerMap, Unassigned
from .result import InvocationResult
from .sqs_event import SQSEvent, SQSRecord

__all__ = [
    "BridgeContext",
    "UNASSIGNED",
    "AssignedTo",
    "HandlerAssignment",
    "HandlerMap",
    "Unassigned",
    "InvocationResult",
    "SQSEvent",
    "SQSRecord",
]
