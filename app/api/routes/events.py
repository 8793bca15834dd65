"""
Server-sent events for dashboard refreshes.

Dashboards fetch their data once, then listen here and re-query when an
event names the data they show (e.g. ``stats_refreshed``).
"""

import asyncio
import json

import structlog
from fastapi import APIRouter
from sse_starlette.sse import EventSourceResponse

router = APIRouter(prefix="/api/events", tags=["events"])
logger = structlog.get_logger()

KEEPALIVE_SECONDS = 30.0

# Per-process subscriber queues; a multi-worker deployment needs a broker
event_queues: dict[str, asyncio.Queue] = {}


def get_event_queue(client_id: str) -> asyncio.Queue:
    if client_id not in event_queues:
        event_queues[client_id] = asyncio.Queue()
    return event_queues[client_id]


def drop_event_queue(client_id: str) -> None:
    event_queues.pop(client_id, None)


async def publish_event(event_type: str, data: dict, client_id: str | None = None) -> int:
    """
    Queue an event for one client, or for every connected client.

    Returns the number of queues the event was delivered to.
    """
    event = {"type": event_type, "data": data}
    if client_id:
        queue = event_queues.get(client_id)
        if queue is None:
            return 0
        await queue.put(event)
        return 1

    for queue in event_queues.values():
        await queue.put(event)
    return len(event_queues)


async def event_stream(client_id: str, keepalive: float = KEEPALIVE_SECONDS):
    queue = get_event_queue(client_id)
    logger.info("Client connected to SSE", client_id=client_id)

    try:
        while True:
            try:
                event = await asyncio.wait_for(queue.get(), timeout=keepalive)
            except asyncio.TimeoutError:
                yield {"event": "keepalive", "data": "{}"}
                continue
            yield {"event": event["type"], "data": json.dumps(event["data"])}
    finally:
        logger.info("Client disconnected from SSE", client_id=client_id)
        drop_event_queue(client_id)


@router.get("")
async def stream_events(client_id: str = "default"):
    """SSE endpoint for real-time refresh notifications."""
    return EventSourceResponse(event_stream(client_id))
