"""
Calcul des montants du panier (pur: pas de DB, pas d'effet de bord).
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable

from storefront.cart.models import CartItem
from storefront.config import CART_DISCOUNT_RATE

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
DISCOUNT_RATE = CART_DISCOUNT_RATE


@dataclass(frozen=True)
class CartTotals:
    subtotal: Decimal = ZERO
    discount: Decimal = ZERO
    total: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subtotal": float(self.subtotal),
            "discount": float(self.discount),
            "total": float(self.total),
        }


def line_price(item: CartItem) -> Decimal:
    """Prix retenu pour une ligne: 0 pour un jeu gratuit ou sans prix."""
    game = item.game
    if game is None or game.is_free or game.price is None:
        return ZERO
    return game.price


def _cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


# module storefront.cart.totals
def compute_totals(items: Iterable[CartItem]) -> CartTotals:
    """
    subtotal = somme des prix des jeux non gratuits (prix manquant -> 0)
    discount = subtotal x DISCOUNT_RATE (remise promotionnelle fixe)
    total    = subtotal - discount
    Montants arrondis au centime (ROUND_HALF_UP); panier vide -> 0/0/0.
    """
    subtotal = _cents(sum((line_price(it) for it in items or []), ZERO))
    discount = _cents(subtotal * DISCOUNT_RATE)
    return CartTotals(subtotal=subtotal, discount=discount, total=subtotal - discount)
