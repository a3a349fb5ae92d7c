"""
Cas d'usage 'cart': orchestre catalogue, contrôle des droits et panier.
"""
from typing import Any, Dict

from storefront.cart.models import CartItem
from storefront.cart.store import CartStore
from storefront.catalog.repository import get_game
from storefront.entitlements.checker import EntitlementChecker
from storefront.errors import AlreadyOwned, GameNotFound

def add_game_to_cart(cart: CartStore, entitlements: EntitlementChecker, game_id: str) -> CartItem:
    """
    Ajoute un jeu du catalogue au panier.
    - GameNotFound si le jeu n'existe pas
    - AlreadyOwned si le jeu est déjà dans la bibliothèque
    - AlreadyInCart si déjà présent (levé par CartStore.add_item)
    """
    user_id = cart.session.require_user_id()
    game = get_game(cart.data, game_id)
    if game is None:
        raise GameNotFound()
    if entitlements.is_owned(user_id, game.id):
        raise AlreadyOwned(f"{game.title} est déjà dans votre bibliothèque")
    return cart.add_item(game)

def cart_summary(cart: CartStore) -> Dict[str, Any]:
    """Vue du panier: lignes, nombre d'articles et montants."""
    items = cart.items
    return {
        "items": [it.to_dict() for it in items],
        "count": len(items),
        "totals": cart.compute_totals(items).to_dict(),
    }
