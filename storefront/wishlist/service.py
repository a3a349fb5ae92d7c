"""
Liste de souhaits (table 'wishlist'): indépendante du checkout.
- toggle: ajoute ou retire selon l'état courant
- Un doublon concurrent à l'insertion vaut « déjà présent »
"""
import logging
from typing import Any, Dict, List

from storefront.catalog.repository import get_game, get_games_map
from storefront.errors import DuplicateKeyError, GameNotFound
from storefront.infra.data_access import DataAccess

logger = logging.getLogger(__name__)

WISHLIST_COLUMNS = "id, user_id, game_id, added_at, priority"

def list_wishlist(data: DataAccess, user_id: str) -> List[Dict[str, Any]]:
    rows = data.query("wishlist", {"user_id": user_id}, order=("added_at", True), columns=WISHLIST_COLUMNS)
    games = get_games_map(data, [r.get("game_id") for r in rows])
    return [
        {
            "id": r.get("id"),
            "game_id": r.get("game_id"),
            "added_at": r.get("added_at"),
            "priority": r.get("priority"),
            "game": games[str(r.get("game_id"))].to_dict() if str(r.get("game_id")) in games else None,
        }
        for r in rows
    ]

def is_in_wishlist(data: DataAccess, user_id: str, game_id: str) -> bool:
    return bool(data.query("wishlist", {"user_id": user_id, "game_id": game_id}, limit=1, columns="id"))

def remove(data: DataAccess, user_id: str, game_id: str) -> None:
    data.delete("wishlist", {"user_id": user_id, "game_id": game_id})

def toggle(data: DataAccess, user_id: str, game_id: str) -> bool:
    """Retourne True si le jeu est dans la liste après l'appel."""
    if is_in_wishlist(data, user_id, game_id):
        remove(data, user_id, game_id)
        logger.info("wishlist.remove user_id=%s game_id=%s", user_id, game_id)
        return False
    if get_game(data, game_id) is None:
        raise GameNotFound()
    try:
        data.insert("wishlist", {"user_id": user_id, "game_id": game_id, "priority": 0})
    except DuplicateKeyError:
        pass
    logger.info("wishlist.add user_id=%s game_id=%s", user_id, game_id)
    return True
