"""
Message Dispatcher - Service Layer

Standardizes the flow: SendMessage payload -> SQS event -> Lambda invocation.
"""

import json
import logging
from typing import Any, Mapping, Optional

from services.sqs_invoke.core.event_builder import EventBuilder
from services.sqs_invoke.core.exceptions import LambdaInvokeError, UnknownQueueError
from services.sqs_invoke.models.handler_map import HandlerMap
from services.sqs_invoke.services.lambda_invoker import LambdaInvoker

logger = logging.getLogger("sqs_invoke.dispatcher")


def queue_name_from_url(queue_url: str) -> Optional[str]:
    """Return the last path segment of a queue URL, or None when it is empty."""
    queue_name = queue_url.rsplit("/", 1)[-1]
    return queue_name or None


class MessageDispatcher:
    """
    Delivers accepted messages to the function consuming their queue.

    Only reads the handler map; one request's failure never affects another.
    """

    def __init__(
        self, handler_map: HandlerMap, invoker: LambdaInvoker, event_builder: EventBuilder
    ):
        self.handler_map = handler_map
        self.invoker = invoker
        self.event_builder = event_builder

    async def dispatch(self, message: Mapping[str, Any]) -> bool:
        """
        Invoke the handler of the message's queue.

        Args:
            message: SendMessage parameters (QueueUrl, MessageBody)

        Returns:
            True when the invocation was accepted and succeeded
        """
        queue_url = message.get("QueueUrl")
        if not isinstance(queue_url, str) or not queue_url:
            logger.warning("Missing QueueUrl in SQS payload")
            return False

        message_body = message.get("MessageBody")
        if not isinstance(message_body, str) or not message_body:
            logger.warning("Missing MessageBody in SQS payload")
            return False

        queue_name = queue_name_from_url(queue_url)
        if queue_name is None:
            logger.warning(f"Missing queue name in queue url: {queue_url}")
            return False

        try:
            function_name = self.handler_map.handler_for(queue_name)
        except UnknownQueueError as e:
            logger.warning(str(e))
            return False

        if function_name is None:
            logger.warning(f"Queue '{queue_name}' has no handler configured")
            return False

        logger.info(f"Invoking function '{function_name}' from queue '{queue_name}'")

        event = self.event_builder.build(queue_name, message_body)
        payload = json.dumps(event).encode("utf-8")

        try:
            result = await self.invoker.invoke_function(function_name, payload)
        except LambdaInvokeError as e:
            logger.error(
                f"Error while invoking Lambda '{function_name}': {e}",
                exc_info=True,
                extra={"function_name": function_name, "queue_name": queue_name},
            )
            return False

        if not result.success:
            logger.error(
                f"Error while invoking Lambda '{function_name}': status {result.status_code}",
                extra={
                    "function_name": function_name,
                    "queue_name": queue_name,
                    "status_code": result.status_code,
                    "error_detail": result.error,
                },
            )
            return False

        if result.is_logic_error:
            logger.warning(
                f"Lambda '{function_name}' reported {result.function_error} "
                f"for message from queue '{queue_name}'",
                extra={"payload": result.payload.decode("utf-8", errors="replace")},
            )

        return True
