"""
Bridge context model.

Everything the HTTP layer needs per request, constructed once at startup.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .handler_map import HandlerMap

if TYPE_CHECKING:
    from services.sqs_invoke.services.dispatcher import MessageDispatcher


@dataclass(frozen=True)
class BridgeContext:
    """
    Immutable startup context handed to the application.

    The handler map is never mutated after resolution, so concurrent
    requests read it without synchronization.
    """

    handler_map: HandlerMap
    dispatcher: "MessageDispatcher"
