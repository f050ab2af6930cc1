"""Step timer API router.

Endpoints:
- POST /api/timer - Start a countdown (replaces the running one)
- GET /api/timer - Current countdown state
- GET /api/timer/events - Server-Sent Events: tick / done
"""

import asyncio
import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from ..deps import get_current_user
from ..realtime.timer_bus import subscribe_timer
from ..schemas import TimerOut, TimerStart, User
from ..services.timers import registry

router = APIRouter(prefix="/timer", tags=["timer"])
logger = logging.getLogger("recipebox.timers")


@router.post("", response_model=TimerOut)
async def start_timer(body: TimerStart, user: User = Depends(get_current_user)):
    timer = registry.start(user.email, body.seconds)
    return TimerOut(active=timer.active, remaining=timer.remaining)


@router.get("", response_model=TimerOut)
async def get_timer(user: User = Depends(get_current_user)):
    timer = registry.get(user.email)
    if timer is None:
        return TimerOut(active=False)
    return TimerOut(active=timer.active, remaining=timer.remaining)


@router.get("/events")
async def timer_events(request: Request, user: User = Depends(get_current_user)):
    """Server-Sent Events for the user's countdown via Redis Pub/Sub."""

    async def event_generator():
        pubsub = await subscribe_timer(user.email)
        last_ping = asyncio.get_running_loop().time()

        try:
            while True:
                if await request.is_disconnected():
                    break

                try:
                    msg = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
                    if msg:
                        data = json.loads(msg["data"])
                        yield f"event: {data['type']}\ndata: {json.dumps(data)}\n\n"
                except Exception as e:
                    logger.error(f"Redis PubSub Error: {e}")
                    await asyncio.sleep(1)

                # Keepalive Ping
                now = asyncio.get_running_loop().time()
                if now - last_ping > 15:
                    yield "event: ping\ndata: {}\n\n"
                    last_ping = now

        finally:
            await pubsub.unsubscribe()
            await pubsub.close()

    return StreamingResponse(event_generator(), media_type="text/event-stream")
