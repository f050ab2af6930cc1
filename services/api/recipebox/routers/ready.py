from fastapi import APIRouter
from recipebox.infra.redis_client import get_redis

router = APIRouter()


@router.get("/ready")
async def ready():
    redis_ok = False
    try:
        r = await get_redis()
        redis_ok = bool(await r.ping())
    except Exception:
        pass
    return {"ok": True, "redis_ok": redis_ok}
