"""
Queue resolver.

Builds the queue name -> handler mapping from AWS::SQS::Queue resources and
the sqs events of function definitions. Runs once at startup; every
malformed or ambiguous declaration is logged and skipped on its own.
"""

import json
import logging
from typing import Any, Dict, Iterator, Mapping, Optional

from ..core.queue_reference import (
    QueueArnReference,
    QueueAttributeReference,
    QueueReference,
    parse_queue_reference,
)
from ..models.handler_map import UNASSIGNED, AssignedTo, HandlerAssignment, HandlerMap

logger = logging.getLogger("sqs_invoke.resolver")

SQS_QUEUE_TYPE = "AWS::SQS::Queue"
QUEUE_NAME_PROPERTY = "QueueName"


def _queue_name_property(resource: Any) -> Optional[str]:
    """Return the resource's QueueName, or None when it is missing or unusable."""
    if not isinstance(resource, dict):
        return None
    properties = resource.get("Properties") or {}
    if not isinstance(properties, dict):
        return None
    queue_name = properties.get(QUEUE_NAME_PROPERTY)
    if not isinstance(queue_name, str) or not queue_name:
        return None
    return queue_name


def _sqs_references(definition: Mapping[str, Any]) -> Iterator[QueueReference]:
    """Yield a QueueReference for every sqs event of a function definition."""
    for event in definition.get("events") or []:
        if not isinstance(event, dict) or "sqs" not in event:
            continue
        sqs = event["sqs"]
        # `- sqs: arn:aws:sqs:...` shorthand
        raw = sqs.get("arn") if isinstance(sqs, dict) else sqs
        yield parse_queue_reference(raw)


class QueueResolver:
    """
    Resolves queue-triggered functions against declared queue resources.

    Declaration order decides every conflict: the first queue declaration
    and the first function bound to a queue win.
    """

    def __init__(self, resources: Optional[Mapping[str, Any]] = None):
        self.resources: Mapping[str, Any] = resources or {}
        self._queues: Dict[str, HandlerAssignment] = {}

    def register_queues(self) -> None:
        for name, resource in self.resources.items():
            if not isinstance(resource, dict) or resource.get("Type") != SQS_QUEUE_TYPE:
                continue

            queue_name = _queue_name_property(resource)
            if queue_name is None:
                logger.error(f"Queue '{name}' is missing QueueName property")
                continue

            if queue_name in self._queues:
                logger.warning(
                    f"Found multiple queues with name: '{queue_name}'. "
                    "Only using first definition."
                )
                continue

            self._queues[queue_name] = UNASSIGNED

    def queue_name_for(self, reference: QueueReference) -> Optional[str]:
        """
        Resolve a queue reference to a queue name.

        Returns None (after logging an error) when the reference cannot be resolved.
        """
        if isinstance(reference, QueueArnReference):
            return reference.queue_name

        if isinstance(reference, QueueAttributeReference):
            resource_name = reference.resource_name
            resource = self.resources.get(resource_name)
            if resource is None:
                logger.error(f"Unknown resource: {resource_name}")
                return None

            queue_name = _queue_name_property(resource)
            if queue_name is None:
                logger.error(f"Resource '{resource_name}' is missing QueueName property")
                return None
            return queue_name

        logger.error(f"Unknown SQS ARN format: {json.dumps(reference.raw, default=str)}")
        return None

    def bind(self, function_key: str, function_name: str, queue_name: str) -> bool:
        """Assign `function_name` to `queue_name` unless the queue is unknown or taken."""
        assignment = self._queues.get(queue_name)
        if assignment is None:
            logger.warning(f"Unknown SQS queue '{queue_name}' for function '{function_key}'")
            return False

        if isinstance(assignment, AssignedTo):
            logger.warning(
                f"Queue '{queue_name}' already has handler configured. "
                f"Only using {assignment.function_name}."
            )
            return False

        self._queues[queue_name] = AssignedTo(function_name)
        return True

    def bind_functions(self, functions: Mapping[str, Any]) -> None:
        for key, definition in functions.items():
            if not isinstance(definition, dict):
                continue
            function_name = definition.get("name")
            if not function_name or not definition.get("events"):
                continue

            for reference in _sqs_references(definition):
                queue_name = self.queue_name_for(reference)
                if queue_name is None:
                    continue
                self.bind(key, function_name, queue_name)

    def build(self) -> HandlerMap:
        return HandlerMap(self._queues)


def log_summary(handler_map: HandlerMap) -> None:
    logger.info("Queues available for local testing:")
    for queue_name, assignment in handler_map.items():
        logger.info(f"           * {queue_name}: {assignment}")


def resolve(
    resources: Optional[Mapping[str, Any]], functions: Optional[Mapping[str, Any]]
) -> HandlerMap:
    """
    Build the HandlerMap from resource and function definitions.

    Args:
        resources: logical id -> {"Type": ..., "Properties": {...}}
        functions: function key -> {"name": ..., "events": [...]}

    Returns:
        Frozen HandlerMap (empty when no resources are declared)
    """
    if not resources:
        logger.info("No resources declared, no queues available for local testing")
        return HandlerMap()

    resolver = QueueResolver(resources)
    resolver.register_queues()
    resolver.bind_functions(functions or {})

    handler_map = resolver.build()
    log_summary(handler_map)
    return handler_map
