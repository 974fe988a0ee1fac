"""
Webhook routes for the LINE Messaging API.

Provides:
- GET  - liveness text for browser checks
- POST - event batch processing
- any other method - 405 with no body
"""

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger

from linerelay.channels.events import parse_payload
from linerelay.errors import MalformedBatch
from linerelay.server.dependencies import DispatcherDep

router = APIRouter()

LIVENESS_MESSAGE = "LINE Bot is running!"


@router.get("", response_class=PlainTextResponse)
async def webhook_liveness():
    """Answer browser checks without touching the pipeline."""
    return PlainTextResponse(LIVENESS_MESSAGE)


@router.post("")
async def receive_events(request: Request, dispatcher: DispatcherDep):
    """
    Process one webhook delivery.

    Returns ``{"status": "success", "results": [...]}`` with one outcome per
    event, or ``500 {"status": "error"}`` when the body cannot be decoded
    or dispatch itself fails.
    """
    try:
        body = await request.json()
        payload = parse_payload(body)
    except MalformedBatch as e:
        logger.warning(f"Rejected malformed webhook body: {e}")
        return JSONResponse({"status": "error"}, status_code=500)
    except Exception as e:
        logger.exception(f"Could not decode webhook body: {e}")
        return JSONResponse({"status": "error"}, status_code=500)

    try:
        result = await dispatcher.dispatch(payload.events)
    except Exception as e:
        logger.exception(f"Webhook dispatch failed: {e}")
        return JSONResponse({"status": "error"}, status_code=500)

    return JSONResponse(result.to_dict())


@router.api_route("", methods=["PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"], include_in_schema=False)
async def method_not_allowed():
    """Reject everything but GET and POST."""
    return Response(status_code=405)
