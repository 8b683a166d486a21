"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Crée l'état du terminal (app.state.pos) et charge le catalogue WooCommerce.
- Initialise FastAPILimiter (Redis) avec options de test (fakeredis).
- Variables d'environnement supportées:
  - CATALOG_FETCH_ON_STARTUP=0: pas de chargement du catalogue au démarrage (tests)
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive complètement le rate limiting
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: active un fallback local si l'init échoue
"""
import os
import logging
import redis.asyncio as redis
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from pos_backend.catalog.service import fetch_catalog
from pos_backend.state import PosState

async def _init_rate_limiter(app: FastAPI, logger: logging.Logger) -> None:
    try:
        if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
            app.state.rate_limit_enabled = False
            logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
            return

        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            from fakeredis.aioredis import FakeRedis
            r = FakeRedis(decode_responses=True)
        else:
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            r = redis.from_url(redis_url, encoding="utf-8", decode_responses=True)

        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            app.state.rate_limit_enabled = True
            logger.warning(f"Rate limiting falling back to local in-memory due to init error: {e}")
        else:
            app.state.rate_limit_enabled = False
            logger.warning(f"Rate limiting disabled due to init error: {e}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Prépare le terminal avant de servir la première page.
    - Le catalogue est chargé une fois; un échec laisse un catalogue vide (pas de crash).
    - En cas d'échec de Redis et sans fallback, le rate limiting est désactivé proprement.
    """
    logger = logging.getLogger("uvicorn.error")
    if getattr(app.state, "pos", None) is None:
        app.state.pos = PosState()

    if os.getenv("CATALOG_FETCH_ON_STARTUP", "1").lower() not in ("0", "false", "no"):
        categories, products = await fetch_catalog(app.state.pos.catalog)
        logger.info(f"Catalog loaded: {len(categories)} categories, {len(products)} products")

    await _init_rate_limiter(app, logger)
    yield
