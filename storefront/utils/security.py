from fastapi import Request, Depends
from typing import Optional
import logging

from storefront.errors import AuthenticationRequired
from storefront.infra.data_access import SupabaseDataAccess
from storefront.infra.supabase_client import get_user_supabase
from storefront.session import Session

logger = logging.getLogger(__name__)

COOKIE_NAME = "sb_access"

def extract_token(request: Request) -> Optional[str]:
    # Hybride: priorité au Bearer, fallback cookie
    token = None
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
    if not token:
        token = request.cookies.get(COOKIE_NAME)
    return token or None

def resolve_session(token: Optional[str]) -> Session:
    """
    Résout le JWT Supabase en Session (GoTrue: auth.get_user).
    - Retourne une session anonyme si le token est absent, invalide ou expiré.
    """
    if not token:
        return Session.anonymous()
    try:
        user = SupabaseDataAccess(get_user_supabase(token), user_token=token).get_current_user()
    except Exception:
        logger.exception("security.resolve_session failed")
        user = None
    if not user or not user.get("id"):
        return Session.anonymous()
    return Session(user_id=user["id"], email=user.get("email"), token=token)

def optional_session(request: Request) -> Session:
    """Session courante ou anonyme (jamais d'erreur): pour les vues consultables sans compte."""
    return resolve_session(extract_token(request))

def get_current_session(request: Request, session: Session = Depends(optional_session)) -> Session:
    if not session.is_authenticated:
        if not extract_token(request):
            raise AuthenticationRequired("Non authentifié")
        raise AuthenticationRequired("Session expirée, veuillez vous connecter")
    return session

def require_user(session: Session = Depends(get_current_session)) -> Session:
    return session
