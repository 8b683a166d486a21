from typing import Dict, Any
from fastapi import Request, HTTPException
import os
import time

def _client_key_from_request(req: Request) -> str:
    # Un terminal = une IP; la clé inclut le chemin pour limiter chaque action séparément
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{req.url.path}"

def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance FastAPI de limitation de fréquence (ex: double clic sur « Payer »).
    - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (dev/tests).
    - app.state.rate_limit_enabled=False: aucune limite.
    - Sinon fastapi-limiter (Redis) si initialisé par le lifespan.
    """
    async def _dep(request: Request):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _client_key_from_request(request)
            store = getattr(request.app.state, "_rl_store", {})
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = store
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return

        from fastapi_limiter.depends import RateLimiter

        async def _identifier(req: Request) -> str:
            return _client_key_from_request(req)
        return await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request)
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)

    from fastapi_limiter import FastAPILimiter
    limiter_ready = getattr(FastAPILimiter, "redis", None) is not None

    return {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": "redis" if limiter_ready else None,
        "fallback": os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1",
    }
