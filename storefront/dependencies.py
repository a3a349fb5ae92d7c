"""
Dépendances FastAPI: construisent, par requête, l'accès aux données, le panier,
le contrôle des droits et le tunnel d'achat à partir de la session.
Les tests remplacent get_data_access / get_payment_gateway via app.dependency_overrides.
"""
from fastapi import Depends

from storefront.cart.store import CartStore
from storefront.checkout.gateway import SimulatedPaymentGateway
from storefront.checkout.pipeline import CheckoutPipeline
from storefront.entitlements.checker import EntitlementChecker
from storefront.infra.data_access import ChangeFeed, DataAccess, SupabaseDataAccess
from storefront.infra.supabase_client import get_supabase, get_user_supabase
from storefront.session import Session
from storefront.utils.security import optional_session

# Flux de changements partagé par toutes les requêtes du processus
change_feed = ChangeFeed()

def get_data_access(session: Session = Depends(optional_session)) -> DataAccess:
    if session.token:
        return SupabaseDataAccess(get_user_supabase(session.token), user_token=session.token, feed=change_feed)
    return SupabaseDataAccess(get_supabase(), feed=change_feed)

def get_payment_gateway() -> SimulatedPaymentGateway:
    return SimulatedPaymentGateway()

def get_cart_store(
    session: Session = Depends(optional_session),
    data: DataAccess = Depends(get_data_access),
) -> CartStore:
    cart = CartStore(session, data)
    cart.refresh()
    return cart

def get_entitlements(
    session: Session = Depends(optional_session),
    cart: CartStore = Depends(get_cart_store),
    data: DataAccess = Depends(get_data_access),
) -> EntitlementChecker:
    return EntitlementChecker(session, cart, data)

def get_checkout_pipeline(
    session: Session = Depends(optional_session),
    cart: CartStore = Depends(get_cart_store),
    entitlements: EntitlementChecker = Depends(get_entitlements),
    data: DataAccess = Depends(get_data_access),
    gateway: SimulatedPaymentGateway = Depends(get_payment_gateway),
) -> CheckoutPipeline:
    return CheckoutPipeline(session, cart, entitlements, data, gateway)
