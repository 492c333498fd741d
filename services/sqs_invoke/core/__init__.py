"""
Core logic package.

Provides shared logic such as event building and queue reference parsing.
"""

from .event_builder import EventBuilder, SqsEventBuilder
from .queue_reference import (
    QueueArnReference,
    QueueAttributeReference,
    QueueReference,
    UnrecognizedReference,
    parse_queue_reference,
)

__all__ = [
    "EventBuilder",
    "SqsEventBuilder",
    "QueueArnReference",
    "QueueAttributeReference",
    "QueueReference",
    "UnrecognizedReference",
    "parse_queue_reference",
]
