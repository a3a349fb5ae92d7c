"""
Panier de l'utilisateur authentifié.
Rôles:
- Tenir un instantané ordonné des lignes (items) rafraîchi après chaque écriture.
- Refuser les doublons (AlreadyInCart) et les écritures anonymes (AuthenticationRequired).
- Exposer le calcul des montants (compute_totals, pur).
"""
import logging
from typing import List, Set

from storefront.cart import repository
from storefront.cart.models import CartItem
from storefront.cart.totals import CartTotals, compute_totals
from storefront.catalog.models import Game
from storefront.errors import AlreadyInCart, DuplicateKeyError
from storefront.infra.data_access import DataAccess
from storefront.session import Session

logger = logging.getLogger(__name__)


class CartStore:
    def __init__(self, session: Session, data: DataAccess):
        self.session = session
        self.data = data
        self._items: List[CartItem] = []
        self._game_ids: Set[str] = set()

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    @property
    def count(self) -> int:
        return len(self._items)

    def refresh(self) -> List[CartItem]:
        if not self.session.is_authenticated:
            self._items = []
        else:
            self._items = repository.fetch_cart_items(self.data, self.session.user_id)
        self._game_ids = {it.game_id for it in self._items}
        return self.items

    def contains(self, game_id: str) -> bool:
        return str(game_id) in self._game_ids

    def add_item(self, game: Game) -> CartItem:
        """Ajoute le jeu au panier; AlreadyInCart si une ligne (user, game) existe déjà."""
        user_id = self.session.require_user_id()
        if self.contains(game.id):
            raise AlreadyInCart(f"{game.title} est déjà dans votre panier")
        try:
            repository.insert_cart_item(self.data, user_id, game.id)
        except DuplicateKeyError:
            # Ajout concurrent (autre onglet): l'instantané était périmé
            self.refresh()
            raise AlreadyInCart(f"{game.title} est déjà dans votre panier")
        self.refresh()
        logger.info("cart.add_item user_id=%s game_id=%s", user_id, game.id)
        return next(it for it in self._items if it.game_id == game.id)

    def remove_item(self, game_id: str) -> None:
        """Retire la ligne du jeu si présente; sans effet sinon."""
        user_id = self.session.require_user_id()
        if not game_id:
            return
        repository.delete_cart_game(self.data, user_id, str(game_id))
        self.refresh()
        logger.info("cart.remove_item user_id=%s game_id=%s", user_id, game_id)

    def clear(self) -> None:
        user_id = self.session.require_user_id()
        repository.delete_user_cart(self.data, user_id)
        self._items = []
        self._game_ids = set()
        logger.info("cart.clear user_id=%s", user_id)

    def totals(self) -> CartTotals:
        return compute_totals(self._items)

    compute_totals = staticmethod(compute_totals)
