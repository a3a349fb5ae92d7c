"""Accès aux données du profil: profiles, user_activity et compteurs bibliothèque/souhaits."""
import logging
from typing import Any, Dict, List, Optional

from storefront.infra.data_access import DataAccess

logger = logging.getLogger(__name__)

ACTIVITY_COLUMNS = "id, user_id, game_id, library_entry_id, activity_type, details, created_at"

def get_profile(data: DataAccess, user_id: str) -> Optional[Dict[str, Any]]:
    rows = data.query("profiles", {"id": user_id}, limit=1, columns="id, username, avatar_url, bio, member_since")
    return rows[0] if rows else None

def update_profile(data: DataAccess, user_id: str, patch: Dict[str, Any]) -> None:
    """Met à jour la ligne profiles; la crée si elle n'existe pas encore (utilisateur sans trigger)."""
    if get_profile(data, user_id) is None:
        data.insert("profiles", {"id": user_id, **patch})
    else:
        data.update("profiles", user_id, patch)

def count_rows(data: DataAccess, collection: str, user_id: str) -> int:
    return len(data.query(collection, {"user_id": user_id}, columns="id"))

def fetch_recent_activity(data: DataAccess, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
    return data.query("user_activity", {"user_id": user_id}, order=("created_at", True), limit=limit, columns=ACTIVITY_COLUMNS)

def record_activity(
    data: DataAccess,
    *,
    user_id: str,
    game_id: str,
    activity_type: str,
    details: Optional[Dict[str, Any]] = None,
    library_entry_id: Optional[str] = None,
) -> bool:
    """
    Journalise une activité (achat, lancement, installation...).
    Best-effort: une erreur est loguée et renvoie False, sans interrompre l'action principale.
    """
    payload: Dict[str, Any] = {
        "user_id": user_id,
        "game_id": game_id,
        "activity_type": activity_type,
        "details": details or {},
    }
    if library_entry_id:
        payload["library_entry_id"] = library_entry_id
    try:
        data.insert("user_activity", payload)
        return True
    except Exception:
        logger.exception("profile.record_activity failed user_id=%s game_id=%s type=%s", user_id, game_id, activity_type)
        return False
