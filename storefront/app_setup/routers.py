"""
Registre central des routers (API v1 + health).
- API v1: cart, checkout, games (état d'un jeu), library, wishlist, profile
- Health: health_router
"""
from fastapi import FastAPI
from storefront.cart import views as cart_views
from storefront.checkout import views as checkout_views
from storefront.entitlements import views as entitlements_views
from storefront.library import views as library_views
from storefront.wishlist import views as wishlist_views
from storefront.profile import views as profile_views
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l'application.
    - L'ordre n'a pas d'impact sauf conflits de chemins (évités par préfixes).
    """
    # API v1
    app.include_router(cart_views.router)
    app.include_router(checkout_views.router)
    app.include_router(entitlements_views.router)
    app.include_router(library_views.router)
    app.include_router(wishlist_views.router)
    app.include_router(profile_views.router)
    # Health & monitoring
    app.include_router(health_router)
