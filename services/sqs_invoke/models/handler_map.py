"""
Handler map models.

Queue name -> handler assignment table, built once at startup by the
resolver and read-only afterwards.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union

from services.sqs_invoke.core.exceptions import UnknownQueueError


@dataclass(frozen=True)
class Unassigned:
    """Queue declared, but no function consumes it."""

    def __str__(self) -> str:
        return "unassigned"


@dataclass(frozen=True)
class AssignedTo:
    """Queue consumed by `function_name`."""

    function_name: str

    def __str__(self) -> str:
        return self.function_name


HandlerAssignment = Union[Unassigned, AssignedTo]

UNASSIGNED = Unassigned()


class HandlerMap:
    """
    Immutable mapping from queue name to HandlerAssignment.

    Lookups for undeclared queues raise UnknownQueueError; nothing is ever
    inserted after construction. Iteration follows declaration order.
    """

    def __init__(self, assignments: Optional[Mapping[str, HandlerAssignment]] = None):
        self._assignments: Mapping[str, HandlerAssignment] = MappingProxyType(
            dict(assignments or {})
        )

    def lookup(self, queue_name: str) -> HandlerAssignment:
        try:
            return self._assignments[queue_name]
        except KeyError:
            raise UnknownQueueError(queue_name) from None

    def handler_for(self, queue_name: str) -> Optional[str]:
        """Return the assigned function name, or None when the queue is unassigned."""
        assignment = self.lookup(queue_name)
        if isinstance(assignment, AssignedTo):
            return assignment.function_name
        return None

    def items(self) -> Iterator[Tuple[str, HandlerAssignment]]:
        return iter(self._assignments.items())

    def as_dict(self) -> Dict[str, Optional[str]]:
        """Plain representation, e.g. for diagnostics."""
        return {
            name: a.function_name if isinstance(a, AssignedTo) else None
            for name, a in self._assignments.items()
        }

    def __contains__(self, queue_name: object) -> bool:
        return queue_name in self._assignments

    def __iter__(self) -> Iterator[str]:
        return iter(self._assignments)

    def __len__(self) -> int:
        return len(self._assignments)

    def __repr__(self) -> str:
        return f"HandlerMap({self.as_dict()!r})"
