"""
Taxonomie des erreurs métier de la boutique.
- Chaque erreur porte un status_code HTTP et un message lisible (detail).
- Les handlers FastAPI (app_setup.exception_handlers) les transforment en JSON
  ou en redirection HTML selon le client.
"""
from typing import Optional


class StoreError(Exception):
    status_code = 400
    default_detail = "Erreur inattendue"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def code(self) -> str:
        return type(self).__name__


class AuthenticationRequired(StoreError):
    status_code = 401
    default_detail = "Veuillez vous connecter"


class EmptyCart(StoreError):
    status_code = 400
    default_detail = "Panier vide"


class InvalidPaymentDetails(StoreError):
    status_code = 400
    default_detail = "Identifiant UPI manquant"


class ProfileIncomplete(StoreError):
    status_code = 400
    default_detail = "Veuillez définir un nom d'utilisateur dans votre profil"


class AlreadyInCart(StoreError):
    status_code = 409
    default_detail = "Jeu déjà présent dans le panier"


class AlreadyOwned(StoreError):
    status_code = 409
    default_detail = "Jeu déjà présent dans la bibliothèque"


class NotOwned(StoreError):
    status_code = 404
    default_detail = "Jeu absent de la bibliothèque"


class GameNotFound(StoreError):
    status_code = 404
    default_detail = "Jeu introuvable"


class CheckoutInProgress(StoreError):
    status_code = 409
    default_detail = "Un paiement est déjà en cours"


class DuplicateKeyError(StoreError):
    """Violation d'unicité remontée par le stockage (SQLSTATE 23505)."""
    status_code = 409
    default_detail = "Enregistrement déjà existant"


class StorageError(StoreError):
    status_code = 502
    default_detail = "Erreur d'accès aux données"


class Timeout(StorageError):
    status_code = 504
    default_detail = "Délai dépassé lors de l'accès aux données"
