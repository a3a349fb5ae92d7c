"""
Lifespan FastAPI: initialise le rate limiting (fastapi-limiter sur Redis) au démarrage
et ferme la connexion à l'arrêt.

Variables d'environnement:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: aucun Redis (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: Redis en mémoire via fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: compteur en mémoire du process (dev, voir utils.rate_limit)
"""
import logging
import os
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from storefront.config import RATE_LIMIT_REDIS_URL

logger = logging.getLogger("uvicorn.error")

def _redis_client():
    if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
        from fakeredis import FakeAsyncRedis
        return FakeAsyncRedis(decode_responses=True)
    return aioredis.from_url(RATE_LIMIT_REDIS_URL, encoding="utf-8", decode_responses=True)

async def _init_rate_limit(app: FastAPI) -> bool:
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        return False
    try:
        await FastAPILimiter.init(_redis_client())
    except Exception as e:
        mode = "local in-memory" if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1" else "disabled"
        logger.warning("Rate limiting %s, Redis init error: %s", mode, e)
        return False
    logger.info("Rate limiting enabled (redis)")
    return True

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.rate_limit_enabled = await _init_rate_limit(app)
    try:
        yield
    finally:
        if app.state.rate_limit_enabled:
            await FastAPILimiter.close()
