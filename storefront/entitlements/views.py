from fastapi import APIRouter, Depends

from storefront.entitlements.checker import EntitlementChecker
from storefront.dependencies import get_entitlements

router = APIRouter(prefix="/api/v1/games", tags=["Games API"])


@router.get("/{game_id}/status")
def game_status(game_id: str, entitlements: EntitlementChecker = Depends(get_entitlements)):
    """
    État d'un jeu pour l'utilisateur courant (fiche jeu): {in_cart, owned, in_wishlist}.
    - Consultable sans compte: tout à False pour une session anonyme.
    """
    return {"game_id": game_id, **entitlements.game_status(game_id)}
