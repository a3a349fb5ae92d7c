"""
Module 'cart' (feature-first): point d'entrée public.
Réunit le panier (CartStore) et le calcul des montants.
Les cas d'usage (storefront.cart.service) dépendent du contrôle des droits et restent importés à part.
"""

from .models import CartItem
from .totals import CartTotals, compute_totals, DISCOUNT_RATE
from .store import CartStore

__all__ = [
    "CartItem",
    "CartTotals",
    "compute_totals",
    "DISCOUNT_RATE",
    "CartStore",
]
