"""
Where: services/sqs_invoke/core/queue_reference.py
What: Parse the `arn` of a function's sqs event into a typed queue reference.
Why: Configuration trees are heterogeneous; reject unknown shapes explicitly.
"""

from dataclasses import dataclass
from typing import Any, Union

GET_ATT = "Fn::GetAtt"
ARN_ATTRIBUTE = "Arn"


@dataclass(frozen=True)
class QueueArnReference:
    """Literal queue ARN, e.g. `arn:aws:sqs:region:account:orders`."""

    arn: str

    @property
    def queue_name(self) -> str:
        return self.arn.rsplit(":", 1)[-1]


@dataclass(frozen=True)
class QueueAttributeReference:
    """`Fn::GetAtt: [<resource>, Arn]` pointing at a declared queue resource."""

    resource_name: str


@dataclass(frozen=True)
class UnrecognizedReference:
    raw: Any


QueueReference = Union[QueueArnReference, QueueAttributeReference, UnrecognizedReference]


def parse_queue_reference(raw: Any) -> QueueReference:
    """
    Classify a raw queue reference.

    Supported inputs:
    - literal ARN string (`arn:aws:sqs:localhost:000000000000:orders`)
    - `{"Fn::GetAtt": ["OrdersQueue", "Arn"]}`
    - `{"Fn::GetAtt": "OrdersQueue.Arn"}`
    """
    if isinstance(raw, str):
        return QueueArnReference(arn=raw)

    if isinstance(raw, dict) and GET_ATT in raw:
        target = raw[GET_ATT]
        if isinstance(target, str):
            target = target.split(".", 1)
        if (
            isinstance(target, (list, tuple))
            and len(target) == 2
            and isinstance(target[0], str)
            and target[0]
            and target[1] == ARN_ATTRIBUTE
        ):
            return QueueAttributeReference(resource_name=target[0])

    return UnrecognizedReference(raw=raw)
