from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional


def price_from_row(row: Dict[str, Any]) -> Optional[Decimal]:
    """
    Prix d'un jeu en Decimal.
    - Autorise row["price"] à être str|float|int|None.
    - Retourne None si absent ou non interprétable.
    """
    raw = row.get("price")
    if raw is None or raw == "":
        return None
    try:
        return Decimal(str(raw))
    except (InvalidOperation, ValueError):
        return None


@dataclass(frozen=True)
class Game:
    id: str
    title: str
    price: Optional[Decimal] = None
    is_free: bool = False
    genre: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    rating: Optional[float] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Game":
        rating = row.get("rating")
        return cls(
            id=str(row.get("id") or ""),
            title=row.get("title") or "",
            price=price_from_row(row),
            is_free=bool(row.get("is_free")),
            genre=row.get("genre"),
            description=row.get("description"),
            image_url=row.get("image_url"),
            rating=float(rating) if rating is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "price": float(self.price) if self.price is not None else None,
            "is_free": self.is_free,
            "genre": self.genre,
            "description": self.description,
            "image_url": self.image_url,
            "rating": self.rating,
        }
