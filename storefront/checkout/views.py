from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from storefront.checkout.pipeline import CheckoutPipeline
from storefront.dependencies import get_checkout_pipeline
from storefront.session import Session
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.security import require_user

router = APIRouter(prefix="/api/v1/checkout", tags=["Checkout API"])


class CheckoutBody(BaseModel):
    payment_method: str
    upi_id: Optional[str] = None


# module storefront.checkout.views
@router.post("", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def submit_checkout(
    body: CheckoutBody,
    user: Session = Depends(require_user),
    pipeline: CheckoutPipeline = Depends(get_checkout_pipeline),
):
    """
    Valide le panier de l'utilisateur authentifié.
    - Entrée JSON: {"payment_method": "creditcard"|"debitcard"|"upi", "upi_id": "..."}
    - Sécurité: require_user + rate limit (10 req / 60s) + un seul checkout en cours par utilisateur
    - Étapes: validation -> paiement simulé -> paiements + bibliothèque par ligne -> panier vidé
    - Réponse: {"status": "ok", "checkout": {attempt_id, state, totals, payment_ids, ...}}
    - Erreurs: 400 (panier vide, UPI manquant, profil incomplet), 401, 409, 502/504 (stockage);
      le panier n'est pas vidé en cas d'échec
    """
    result = pipeline.run(body.payment_method, upi_id=body.upi_id)
    return {"status": "ok", "checkout": result.to_dict(), "redirect": "/library"}
