"""
Module 'checkout' (feature-first): point d'entrée public.
Réunit la machine à états du tunnel d'achat, la passerelle simulée et le repository.
"""

from .models import CheckoutResult, CheckoutState, PaymentMethod, PaymentStatus, METHOD_TABLES
from .gateway import SimulatedPaymentGateway
from .pipeline import CheckoutPipeline, checkout_guard

__all__ = [
    "CheckoutResult",
    "CheckoutState",
    "PaymentMethod",
    "PaymentStatus",
    "METHOD_TABLES",
    "SimulatedPaymentGateway",
    "CheckoutPipeline",
    "checkout_guard",
]
