"""
Gestionnaires d'exceptions.
- StoreError (taxonomie métier) -> JSON {"detail", "error"} avec le status_code de l'erreur.
- Checkout: ajoute {"state": "FAILED", "retry": true}; le panier est conservé côté serveur.
- Navigateur (Accept: text/html, hors /api/*): 401 -> redirection vers la page de connexion,
  panier vide -> redirection vers la page panier.
- HTTPException: même logique de redirection 401/403 pour les pages, JSON sinon.
"""
import logging
import urllib.parse
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from storefront.config import CART_PAGE_PATH, LOGIN_PAGE_PATH
from storefront.errors import AuthenticationRequired, EmptyCart, StoreError

logger = logging.getLogger(__name__)

def _wants_html(request: Request) -> bool:
    accept = (request.headers.get("accept") or "").lower()
    return "text/html" in accept and not request.url.path.startswith("/api/")

def _redirect(path: str, message: str) -> RedirectResponse:
    msg = urllib.parse.quote_plus(message)
    return RedirectResponse(url=f"{path}?error={msg}", status_code=HTTP_303_SEE_OTHER)

def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre les handlers StoreError et HTTPException.
    - UX web: redirection avec message encodé (query ?error=...).
    - UX API: code et body JSON pour le front (toast/bannière).
    """
    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        if exc.status_code >= 500:
            logger.warning("store error path=%s error=%s detail=%s", request.url.path, exc.code, exc.detail)
        if _wants_html(request):
            if isinstance(exc, AuthenticationRequired):
                return _redirect(LOGIN_PAGE_PATH, exc.detail)
            if isinstance(exc, EmptyCart):
                return _redirect(CART_PAGE_PATH, exc.detail)
        content = {"detail": exc.detail, "error": exc.code}
        if request.url.path.startswith("/api/v1/checkout"):
            content.update({"state": "FAILED", "retry": True})
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(HTTPException)
    async def html_redirect_on_auth_errors(request: Request, exc: HTTPException):
        if exc.status_code in (401, 403) and _wants_html(request):
            detail = str(getattr(exc, "detail", "")) or (
                "Veuillez vous connecter" if exc.status_code == 401 else "Accès interdit"
            )
            return _redirect(LOGIN_PAGE_PATH, detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
