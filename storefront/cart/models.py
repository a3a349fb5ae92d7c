from dataclasses import dataclass
from typing import Any, Dict, Optional

from storefront.catalog.models import Game


@dataclass(frozen=True)
class CartItem:
    id: str
    user_id: str
    game_id: str
    added_at: Optional[str] = None
    quantity: int = 1
    game: Optional[Game] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any], game: Optional[Game] = None) -> "CartItem":
        return cls(
            id=str(row.get("id") or ""),
            user_id=str(row.get("user_id") or ""),
            game_id=str(row.get("game_id") or ""),
            added_at=row.get("added_at"),
            quantity=int(row.get("quantity") or 1),
            game=game,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "game_id": self.game_id,
            "added_at": self.added_at,
            "quantity": self.quantity,
            "game": self.game.to_dict() if self.game else None,
        }
