"""
Accès aux données pour la feature 'checkout'.
Tables: payments, {creditcard,debitcard,upi}_payments, user_library.
Aucune suppression ni mise à jour ici: la piste d'audit est en insertion seule.
"""
from typing import Any, Dict

from storefront.checkout.models import PaymentMethod, PaymentStatus
from storefront.infra.data_access import DataAccess

# module storefront.checkout.repository
def insert_payment(
    data: DataAccess,
    *,
    user_id: str,
    username: str,
    game_id: str,
    method: PaymentMethod,
    status: PaymentStatus = PaymentStatus.COMPLETED,
) -> Dict[str, Any]:
    return data.insert("payments", {
        "user_id": user_id,
        "username": username,
        "game_id": game_id,
        "payment_type": method.value,
        "status": status.value,
    })

def insert_method_payment(
    data: DataAccess,
    *,
    method: PaymentMethod,
    payment_id: Any,
    user_id: str,
    username: str,
) -> Dict[str, Any]:
    """Ligne de détail dans la table propre au moyen de paiement (creditcard_payments, ...)."""
    return data.insert(method.table, {
        "payment_id": payment_id,
        "user_id": user_id,
        "username": username,
    })

def insert_library_entry(data: DataAccess, *, user_id: str, game_id: str, payment_id: Any) -> Dict[str, Any]:
    """
    Accorde le droit (entrée de bibliothèque).
    - Lève DuplicateKeyError si (user_id, game_id) existe déjà (contrainte d'unicité).
    """
    return data.insert("user_library", {
        "user_id": user_id,
        "game_id": game_id,
        "payment_id": payment_id,
        "is_installed": False,
        "playtime_minutes": 0,
    })
