from fastapi import APIRouter, Depends
from pydantic import BaseModel

from storefront.cart import service as cart_service
from storefront.cart.store import CartStore
from storefront.dependencies import get_cart_store, get_entitlements
from storefront.entitlements.checker import EntitlementChecker
from storefront.session import Session
from storefront.utils.security import require_user

router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])


class AddToCartBody(BaseModel):
    game_id: str


# module storefront.cart.views
@router.get("")
def get_cart(user: Session = Depends(require_user), cart: CartStore = Depends(get_cart_store)):
    """
    Panier de l'utilisateur authentifié.
    - Réponse: {items: [...], count, totals: {subtotal, discount, total}}
    """
    return cart_service.cart_summary(cart)


@router.post("/items", status_code=201)
def add_to_cart(
    body: AddToCartBody,
    user: Session = Depends(require_user),
    cart: CartStore = Depends(get_cart_store),
    entitlements: EntitlementChecker = Depends(get_entitlements),
):
    """
    Ajoute un jeu au panier.
    - 404 si jeu introuvable, 409 si déjà dans le panier ou déjà possédé
    """
    item = cart_service.add_game_to_cart(cart, entitlements, body.game_id)
    return {"item": item.to_dict(), **cart_service.cart_summary(cart)}


@router.delete("/items/{game_id}")
def remove_from_cart(game_id: str, user: Session = Depends(require_user), cart: CartStore = Depends(get_cart_store)):
    """Retire un jeu du panier (sans erreur s'il n'y est pas)."""
    cart.remove_item(game_id)
    return cart_service.cart_summary(cart)


@router.delete("")
def clear_cart(user: Session = Depends(require_user), cart: CartStore = Depends(get_cart_store)):
    cart.clear()
    return cart_service.cart_summary(cart)
