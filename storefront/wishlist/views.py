from fastapi import APIRouter, Depends

from storefront.dependencies import get_data_access
from storefront.infra.data_access import DataAccess
from storefront.session import Session
from storefront.utils.security import require_user
from storefront.wishlist import service as wishlist_service

router = APIRouter(prefix="/api/v1/wishlist", tags=["Wishlist API"])


@router.get("")
def get_wishlist(user: Session = Depends(require_user), data: DataAccess = Depends(get_data_access)):
    return {"wishlist": wishlist_service.list_wishlist(data, user.user_id)}


@router.post("/{game_id}/toggle")
def toggle_wishlist(game_id: str, user: Session = Depends(require_user), data: DataAccess = Depends(get_data_access)):
    """Ajoute/retire le jeu de la liste de souhaits; réponse {"in_wishlist": bool}."""
    return {"game_id": game_id, "in_wishlist": wishlist_service.toggle(data, user.user_id, game_id)}


@router.delete("/{game_id}")
def remove_from_wishlist(game_id: str, user: Session = Depends(require_user), data: DataAccess = Depends(get_data_access)):
    wishlist_service.remove(data, user.user_id, game_id)
    return {"game_id": game_id, "in_wishlist": False}
