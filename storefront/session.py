"""
Session explicite (utilisateur courant) injectée dans le panier et le tunnel
d'achat, à la place d'un état global d'authentification.
"""
from dataclasses import dataclass
from typing import Optional

from storefront.errors import AuthenticationRequired


@dataclass(frozen=True)
class Session:
    user_id: Optional[str] = None
    email: Optional[str] = None
    token: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "Session":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    def require_user_id(self) -> str:
        if not self.user_id:
            raise AuthenticationRequired()
        return self.user_id
