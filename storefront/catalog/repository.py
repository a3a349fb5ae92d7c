"""
Accès en lecture au catalogue (table 'games').
Le catalogue appartient à un collaborateur externe: aucune écriture ici.
"""
from typing import Dict, Iterable, Optional

from storefront.catalog.models import Game
from storefront.infra.data_access import DataAccess

GAME_COLUMNS = "id, title, price, is_free, genre, description, image_url, rating"

# module storefront.catalog.repository
def get_game(data: DataAccess, game_id: str) -> Optional[Game]:
    if not game_id:
        return None
    rows = data.query("games", {"id": game_id}, limit=1, columns=GAME_COLUMNS)
    return Game.from_row(rows[0]) if rows else None

def get_games_map(data: DataAccess, ids: Iterable[str]) -> Dict[str, Game]:
    """
    Retourne un dict {id: Game} à partir d'une liste d'IDs.
    """
    id_list = sorted({str(i) for i in ids if i})
    if not id_list:
        return {}
    rows = data.query("games", {"id": id_list}, columns=GAME_COLUMNS)
    return {str(r.get("id")): Game.from_row(r) for r in rows}
