import json
from recipebox.infra.redis_client import get_redis

def channel_for_user(email: str) -> str:
    return f"recipebox:timer:{email}"

async def publish_timer_event(email: str, event_type: str, remaining: int):
    r = await get_redis()
    payload = {"type": event_type, "email": email, "remaining": remaining}
    await r.publish(channel_for_user(email), json.dumps(payload))

async def subscribe_timer(email: str):
    r = await get_redis()
    pubsub = r.pubsub()
    await pubsub.subscribe(channel_for_user(email))
    return pubsub
