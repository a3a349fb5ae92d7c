"""
Rate limiting optionnel des endpoints sensibles (checkout).
- Redis via fastapi-limiter quand le lifespan l'a initialisé (app.state.rate_limit_enabled)
- LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire du process (dev, tests)
- Sinon: aucune limite, la requête passe
Clé: hash du jeton de session (ou IP) + chemin.
"""
import hashlib
import logging
import os
import time
from typing import Any, Dict
from urllib.parse import urlparse

from fastapi import HTTPException, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter

from storefront.config import RATE_LIMIT_REDIS_URL
from storefront.utils.security import extract_token

logger = logging.getLogger(__name__)

def _user_key_from_request(req: Request) -> str:
    token = extract_token(req)
    if token:
        digest = hashlib.sha256(token.encode("utf-8")).hexdigest()[:16]
        return f"user:{digest}:{req.url.path}"
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{req.url.path}"

async def _identifier(req: Request) -> str:
    return _user_key_from_request(req)

def _local_hit(request: Request, times: int, seconds: int) -> None:
    now = time.time()
    key = _user_key_from_request(request)
    store = getattr(request.app.state, "_rl_store", None)
    if store is None:
        store = {}
        request.app.state._rl_store = store
    hits = [t for t in store.get(key, []) if now - t < seconds]
    if len(hits) >= times:
        raise HTTPException(status_code=429, detail="Too Many Requests")
    hits.append(now)
    store[key] = hits

def optional_rate_limit(times: int, seconds: int):
    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            _local_hit(request, times, seconds)
            return
        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return
        try:
            await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
        except HTTPException:
            raise
        except Exception:
            # Redis indisponible en cours de route: on laisse passer
            logger.warning("rate_limit backend unavailable path=%s", request.url.path)
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    ready = getattr(FastAPILimiter, "redis", None) is not None
    info: Dict[str, Any] = {
        "enabled": bool(enabled) if enabled is not None else None,
        "ready": ready,
        "backend": "redis" if ready else None,
    }
    if ready and RATE_LIMIT_REDIS_URL:
        p = urlparse(RATE_LIMIT_REDIS_URL)
        info["redis"] = {"scheme": p.scheme, "host": p.hostname, "port": p.port}
    return info
