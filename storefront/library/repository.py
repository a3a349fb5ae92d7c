"""
Accès aux données pour la feature 'library' (table 'user_library').
"""
from typing import Any, Dict, List, Optional

from storefront.infra.data_access import DataAccess

LIBRARY_COLUMNS = "id, user_id, game_id, payment_id, purchase_date, is_installed, last_played, playtime_minutes"

# module storefront.library.repository
def fetch_library_rows(data: DataAccess, user_id: str) -> List[Dict[str, Any]]:
    return data.query("user_library", {"user_id": user_id}, order=("purchase_date", True), columns=LIBRARY_COLUMNS)

def get_library_entry(data: DataAccess, user_id: str, game_id: str) -> Optional[Dict[str, Any]]:
    rows = data.query("user_library", {"user_id": user_id, "game_id": game_id}, limit=1, columns=LIBRARY_COLUMNS)
    return rows[0] if rows else None

def update_library_entry(data: DataAccess, entry_id: str, patch: Dict[str, Any]) -> None:
    data.update("user_library", entry_id, patch)
