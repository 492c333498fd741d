import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

from services.sqs_invoke.models.sqs_event import SQSEvent, SQSRecord

logger = logging.getLogger("sqs_invoke.event_builder")

# Sentinel provenance for an offline queue.
LOCAL_MESSAGE_ID = "00000000-0000-0000-0000-000000000000"
LOCAL_REGION = "localhost"
LOCAL_ACCOUNT_ID = "000000000000"
EVENT_SOURCE = "aws:sqs"


def local_queue_arn(queue_name: str) -> str:
    return f"arn:aws:sqs:{LOCAL_REGION}:{LOCAL_ACCOUNT_ID}:{queue_name}"


class EventBuilder(ABC):
    @abstractmethod
    def build(self, queue_name: str, body: str) -> Dict[str, Any]:
        """
        Build an event dictionary for a message sent to `queue_name`.
        """
        pass


class SqsEventBuilder(EventBuilder):
    """SQS -> Lambda event source mapping compatible event builder."""

    def build(self, queue_name: str, body: str) -> Dict[str, Any]:
        """
        Build a single-record SQS event carrying `body` verbatim.
        """
        event_model = SQSEvent(
            Records=[
                SQSRecord(
                    messageId=LOCAL_MESSAGE_ID,
                    receiptHandle="",
                    body=body,
                    attributes={},
                    messageAttributes={},
                    md5OfBody="",
                    eventSource=EVENT_SOURCE,
                    eventSourceARN=local_queue_arn(queue_name),
                    awsRegion=LOCAL_REGION,
                )
            ]
        )

        return event_model.model_dump()
