"""
Where: services/sqs_invoke/api/routes.py
What: SQS query-protocol endpoint (SendMessage only) and health check.
Why: Keep request validation and response shaping apart from app assembly.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse, Response

from .deps import DispatcherDep, HandlerMapDep

logger = logging.getLogger("sqs_invoke.api")

SEND_MESSAGE_ACTION = "SendMessage"
SEND_MESSAGE_RESPONSE = "<SendMessageResponse></SendMessageResponse>"

router = APIRouter()


@router.post("/")
async def sqs_action(request: Request, dispatcher: DispatcherDep):
    """
    SQS API compatible endpoint (form-encoded query protocol).
    Handles requests from boto3.client('sqs').send_message().
    """
    form = await request.form()

    action = form.get("Action")
    if not action:
        logger.warning("Received SQS request without Action")
        return PlainTextResponse(
            "Missing Action parameter", status_code=status.HTTP_400_BAD_REQUEST
        )

    if action != SEND_MESSAGE_ACTION:
        logger.warning(f"Received unsupported SQS action: {action}")
        return PlainTextResponse(
            "Only SendMessage actions are supported", status_code=status.HTTP_400_BAD_REQUEST
        )

    success = await dispatcher.dispatch(form)
    if not success:
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    return Response(content=SEND_MESSAGE_RESPONSE, media_type="text/xml")


@router.get("/health")
async def health_check(handler_map: HandlerMapDep):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "queues": handler_map.as_dict(),
    }
