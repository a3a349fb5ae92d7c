from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from storefront.dependencies import get_data_access
from storefront.infra.data_access import DataAccess
from storefront.profile.service import get_profile_summary, update_profile
from storefront.session import Session
from storefront.utils.security import require_user

router = APIRouter(prefix="/api/v1/profile", tags=["Profile API"])


class ProfileUpdateBody(BaseModel):
    username: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None


@router.get("")
def get_profile(user: Session = Depends(require_user), data: DataAccess = Depends(get_data_access)):
    return {"email": user.email, **get_profile_summary(data, user.user_id)}


@router.patch("")
def patch_profile(
    body: ProfileUpdateBody,
    user: Session = Depends(require_user),
    data: DataAccess = Depends(get_data_access),
):
    """
    Modifie le nom d'utilisateur, la bio ou l'avatar.
    - Champs absents: inchangés; username vide -> 400 ProfileIncomplete
    """
    summary = update_profile(data, user.user_id, username=body.username, bio=body.bio, avatar_url=body.avatar_url)
    return {"email": user.email, **summary}
