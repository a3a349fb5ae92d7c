import logging
from typing import Any, Dict, Optional

from storefront.errors import ProfileIncomplete
from storefront.infra.data_access import DataAccess
from storefront.profile import repository

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 50

def get_profile_summary(data: DataAccess, user_id: str) -> Dict[str, Any]:
    """
    Résumé du profil: nom d'utilisateur, bio, compteurs bibliothèque/souhaits, 10 dernières activités.
    - username None tant que le profil n'est pas complété (le checkout est alors refusé)
    """
    profile = repository.get_profile(data, user_id) or {}
    return {
        "id": user_id,
        "username": (profile.get("username") or "").strip() or None,
        "bio": profile.get("bio"),
        "avatar_url": profile.get("avatar_url"),
        "library_count": repository.count_rows(data, "user_library", user_id),
        "wishlist_count": repository.count_rows(data, "wishlist", user_id),
        "recent_activity": repository.fetch_recent_activity(data, user_id, limit=10),
    }

def update_profile(
    data: DataAccess,
    user_id: str,
    username: Optional[str] = None,
    bio: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Met à jour le profil (seuls les champs fournis sont modifiés).
    - username: espaces retirés; vide -> ProfileIncomplete (le checkout en dépend)
    - Renvoie le résumé à jour
    """
    patch: Dict[str, Any] = {}
    if username is not None:
        cleaned = username.strip()
        if not cleaned:
            raise ProfileIncomplete("Le nom d'utilisateur ne peut pas être vide")
        if len(cleaned) > USERNAME_MAX_LENGTH:
            raise ProfileIncomplete(f"Nom d'utilisateur trop long (max {USERNAME_MAX_LENGTH} caractères)")
        patch["username"] = cleaned
    if bio is not None:
        patch["bio"] = bio.strip()
    if avatar_url is not None:
        patch["avatar_url"] = avatar_url.strip() or None
    if patch:
        repository.update_profile(data, user_id, patch)
        logger.info("profile updated user_id=%s fields=%s", user_id, sorted(patch))
    return get_profile_summary(data, user_id)
