"""
Factory d'application pour les entrypoints (storefront.asgi, tests).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import (
    register_access_log_middleware,
    register_basic_middlewares,
    register_no_cache_middleware,
    register_security_middleware,
)
from .exception_handlers import register_exception_handlers
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - middlewares de base, sécurité, no-cache, log d'accès
      - gestionnaires d'exceptions (StoreError, HTTPException)
      - tous les routers (API v1, health)
    Retour:
      FastAPI prêt à être utilisé par le serveur ASGI.
    """
    app = FastAPI(title="Storefront API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    register_access_log_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    return app
