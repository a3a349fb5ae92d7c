"""Couche service de la bibliothèque: liste, installation, désinstallation, lancement."""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from storefront.catalog.repository import get_games_map
from storefront.errors import NotOwned
from storefront.infra.data_access import DataAccess
from storefront.library import repository
from storefront.profile.repository import record_activity

logger = logging.getLogger(__name__)

def list_library(data: DataAccess, user_id: str) -> List[Dict[str, Any]]:
    """Entrées de bibliothèque jointes au jeu (title, image_url, genre...)."""
    rows = repository.fetch_library_rows(data, user_id)
    games = get_games_map(data, [r.get("game_id") for r in rows])
    entries = []
    for row in rows:
        game = games.get(str(row.get("game_id")))
        entries.append({
            "id": row.get("id"),
            "game_id": row.get("game_id"),
            "purchase_date": row.get("purchase_date"),
            "is_installed": bool(row.get("is_installed")),
            "last_played": row.get("last_played"),
            "playtime_minutes": int(row.get("playtime_minutes") or 0),
            "game": game.to_dict() if game else None,
        })
    return entries

def _require_entry(data: DataAccess, user_id: str, game_id: str) -> Dict[str, Any]:
    entry = repository.get_library_entry(data, user_id, game_id)
    if not entry:
        raise NotOwned()
    return entry

def set_installed(data: DataAccess, user_id: str, game_id: str, installed: bool) -> Dict[str, Any]:
    entry = _require_entry(data, user_id, game_id)
    repository.update_library_entry(data, entry["id"], {"is_installed": installed})
    record_activity(
        data,
        user_id=user_id,
        game_id=game_id,
        activity_type="install" if installed else "uninstall",
        library_entry_id=entry["id"],
    )
    logger.info("library.set_installed user_id=%s game_id=%s installed=%s", user_id, game_id, installed)
    return {**entry, "is_installed": installed}

def play(data: DataAccess, user_id: str, game_id: str) -> Dict[str, Any]:
    """Lance le jeu: met à jour last_played (UTC, ISO-8601) et journalise l'activité 'play'."""
    entry = _require_entry(data, user_id, game_id)
    now = datetime.now(timezone.utc).isoformat()
    repository.update_library_entry(data, entry["id"], {"last_played": now})
    record_activity(data, user_id=user_id, game_id=game_id, activity_type="play", library_entry_id=entry["id"])
    return {**entry, "last_played": now}
