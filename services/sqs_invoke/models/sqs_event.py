# services/sqs_invoke/models/sqs_event.py

"""
Pydantic models for the AWS SQS -> Lambda event structure.

Reference: https://docs.aws.amazon.com/lambda/latest/dg/with-sqs.html

Field names mirror the event keys so `model_dump()` yields the payload
Lambda handlers expect.
"""

from typing import Dict, Any, List
from pydantic import BaseModel, Field


class SQSRecord(BaseModel):
    """A single SQS message as delivered to a Lambda handler."""

    messageId: str
    receiptHandle: str = ""
    body: str
    attributes: Dict[str, Any] = Field(default_factory=dict)
    messageAttributes: Dict[str, Any] = Field(default_factory=dict)
    md5OfBody: str = ""
    eventSource: str = "aws:sqs"
    eventSourceARN: str
    awsRegion: str


class SQSEvent(BaseModel):
    """
    AWS SQS Event Structure

    Defines the batch object received by queue-triggered Lambda functions.
    """

    Records: List[SQSRecord]
