"""
Dependency Injection for the SQS API.

Manage request handler dependencies using FastAPI Depends.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..models.context import BridgeContext
from ..models.handler_map import HandlerMap
from ..services.dispatcher import MessageDispatcher


def get_bridge_context(request: Request) -> BridgeContext:
    return request.app.state.bridge_context


BridgeContextDep = Annotated[BridgeContext, Depends(get_bridge_context)]


def get_handler_map(context: BridgeContextDep) -> HandlerMap:
    return context.handler_map


def get_dispatcher(context: BridgeContextDep) -> MessageDispatcher:
    return context.dispatcher


HandlerMapDep = Annotated[HandlerMap, Depends(get_handler_map)]
DispatcherDep = Annotated[MessageDispatcher, Depends(get_dispatcher)]
