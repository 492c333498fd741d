"""
Services package.

Provides business logic and external integrations.
"""

from .definition_loader import ServiceDefinitions, load_service_definitions
from .dispatcher import MessageDispatcher
from .lambda_invoker import LambdaInvoker
from .queue_resolver import QueueResolver, resolve

__all__ = [
    "ServiceDefinitions",
    "load_service_definitions",
    "MessageDispatcher",
    "LambdaInvoker",
    "QueueResolver",
    "resolve",
]
