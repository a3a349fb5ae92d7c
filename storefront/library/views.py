from fastapi import APIRouter, Depends

from storefront.dependencies import get_data_access
from storefront.infra.data_access import DataAccess
from storefront.library import service as library_service
from storefront.session import Session
from storefront.utils.security import require_user

router = APIRouter(prefix="/api/v1/library", tags=["Library API"])


@router.get("")
def get_library(user: Session = Depends(require_user), data: DataAccess = Depends(get_data_access)):
    return {"library": library_service.list_library(data, user.user_id)}


@router.post("/{game_id}/install")
def install_game(game_id: str, user: Session = Depends(require_user), data: DataAccess = Depends(get_data_access)):
    """Marque le jeu comme installé (404 si non possédé)."""
    return {"entry": library_service.set_installed(data, user.user_id, game_id, True)}


@router.post("/{game_id}/uninstall")
def uninstall_game(game_id: str, user: Session = Depends(require_user), data: DataAccess = Depends(get_data_access)):
    return {"entry": library_service.set_installed(data, user.user_id, game_id, False)}


@router.post("/{game_id}/play")
def play_game(game_id: str, user: Session = Depends(require_user), data: DataAccess = Depends(get_data_access)):
    return {"entry": library_service.play(data, user.user_id, game_id)}
