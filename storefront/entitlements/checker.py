"""
Contrôle des droits: possession (bibliothèque), présence au panier ou en liste de souhaits.
- is_in_cart: instantané en mémoire du panier (O(1) après indexation)
- is_owned: toujours interrogé en base (la possession peut changer hors de cette session)
"""
from typing import Dict

from storefront.cart.store import CartStore
from storefront.infra.data_access import DataAccess
from storefront.session import Session
from storefront.wishlist import service as wishlist_service


class EntitlementChecker:
    def __init__(self, session: Session, cart: CartStore, data: DataAccess):
        self.session = session
        self.cart = cart
        self.data = data

    def is_in_cart(self, game_id: str) -> bool:
        return self.cart.contains(game_id)

    def is_owned(self, user_id: str, game_id: str) -> bool:
        if not user_id or not game_id:
            return False
        rows = self.data.query("user_library", {"user_id": user_id, "game_id": str(game_id)}, limit=1, columns="id")
        return bool(rows)

    def is_in_wishlist(self, user_id: str, game_id: str) -> bool:
        if not user_id or not game_id:
            return False
        return wishlist_service.is_in_wishlist(self.data, user_id, str(game_id))

    def game_status(self, game_id: str) -> Dict[str, bool]:
        """État affiché sur la fiche jeu (Ajouter au panier / Dans le panier / Possédé)."""
        if not self.session.is_authenticated:
            return {"in_cart": False, "owned": False, "in_wishlist": False}
        user_id = self.session.user_id
        return {
            "in_cart": self.is_in_cart(game_id),
            "owned": self.is_owned(user_id, game_id),
            "in_wishlist": self.is_in_wishlist(user_id, game_id),
        }
