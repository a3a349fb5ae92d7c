"""
Middlewares transverses de la boutique.
- register_basic_middlewares: session, CORS, TrustedHost.
- register_security_middleware: en-têtes de sécurité + CSP (connect-src vers Supabase).
- register_no_cache_middleware: aucune mise en cache des données propres à l'utilisateur
  (panier, checkout, bibliothèque, profil, liste de souhaits).
- register_access_log_middleware: une ligne de log par appel d'API avec sa durée.
"""
import logging
import time
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from storefront.config import ALLOWED_HOSTS, CORS_ORIGINS, COOKIE_SECURE, SESSION_SECRET_KEY, SUPABASE_URL

logger = logging.getLogger("storefront.access")

USER_DATA_PREFIXES = (
    "/api/v1/cart",
    "/api/v1/checkout",
    "/api/v1/library",
    "/api/v1/wishlist",
    "/api/v1/profile",
)
NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}
# Swagger (/docs) charge ses assets depuis ces CDNs
DOCS_CDNS = ["https://cdn.jsdelivr.net", "https://unpkg.com"]

def _security_headers() -> Dict[str, str]:
    connect = ["'self'"] + ([SUPABASE_URL] if SUPABASE_URL else []) + DOCS_CDNS
    cdns = " ".join(DOCS_CDNS)
    headers = {
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "no-referrer",
        "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
        "Content-Security-Policy": (
            "default-src 'self'; base-uri 'self'; object-src 'none'; frame-ancestors 'none'; "
            "img-src 'self' data: blob: https://fastapi.tiangolo.com; "
            f"style-src 'self' 'unsafe-inline' {cdns}; "
            f"script-src 'self' 'unsafe-inline' {cdns}; "
            f"connect-src {' '.join(connect)}"
        ),
    }
    if COOKIE_SECURE:
        headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains; preload"
    return headers

def register_basic_middlewares(app: FastAPI) -> None:
    app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET_KEY, https_only=COOKIE_SECURE)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )
    # CORS ouvert en dev ("*"): on n'ajoute pas de contrainte d'hôte
    hosts = ["*"] if "*" in CORS_ORIGINS else ALLOWED_HOSTS
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=hosts)

def register_security_middleware(app: FastAPI) -> None:
    headers = _security_headers()

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response

def register_no_cache_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def no_cache_for_user_data(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith(USER_DATA_PREFIXES):
            response.headers.update(NO_CACHE_HEADERS)
        return response

def register_access_log_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def access_log(request: Request, call_next):
        if not request.url.path.startswith("/api/"):
            return await call_next(request)
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s status=%s duration_ms=%.1f",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response
