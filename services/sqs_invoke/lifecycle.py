"""
Where: services/sqs_invoke/lifecycle.py
What: Startup/shutdown orchestration for the handler map and HTTP client.
Why: Keep main.py focused on app assembly while preserving lifecycle behavior.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from services.common.core.http_client import HttpClientFactory

from .config import SqsInvokeConfig
from .core.event_builder import SqsEventBuilder
from .core.exceptions import DefinitionLoadError
from .models.context import BridgeContext
from .models.handler_map import HandlerMap
from .services.definition_loader import load_service_definitions
from .services.dispatcher import MessageDispatcher
from .services.lambda_invoker import LambdaInvoker
from .services.queue_resolver import resolve

logger = logging.getLogger("sqs_invoke.main")


def build_handler_map(sqs_config: SqsInvokeConfig) -> HandlerMap:
    """Load the service definition and resolve it; an unreadable file yields an empty map."""
    try:
        definitions = load_service_definitions(
            sqs_config.SERVERLESS_CONFIG_PATH, stage=sqs_config.SERVERLESS_STAGE
        )
    except DefinitionLoadError as e:
        logger.error(str(e), exc_info=True)
        return HandlerMap()

    return resolve(definitions.resources, definitions.functions)


@asynccontextmanager
async def manage_lifespan(app: FastAPI, sqs_config: SqsInvokeConfig) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    if getattr(app.state, "bridge_context", None) is not None:
        # Context supplied at construction.
        yield
        return

    logger.info("Starting Offline SQS invoke")

    factory = HttpClientFactory(sqs_config)
    client = factory.create_async_client(timeout=sqs_config.LAMBDA_INVOKE_TIMEOUT)

    try:
        handler_map = build_handler_map(sqs_config)
        invoker = LambdaInvoker(client=client, config=sqs_config)
        dispatcher = MessageDispatcher(handler_map, invoker, SqsEventBuilder())

        app.state.http_client = client
        app.state.bridge_context = BridgeContext(handler_map=handler_map, dispatcher=dispatcher)

        _, port = sqs_config.bind_address
        logger.info(f"Offline SQS invoke listening on http://localhost:{port}")
        yield
    finally:
        logger.info("Offline SQS invoke shutting down, closing http client.")
        await client.aclose()
