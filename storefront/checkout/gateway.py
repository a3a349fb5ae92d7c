"""
Adaptateur de paiement simulé.
- Aucun appel externe: un délai fixe tient lieu d'aller-retour passerelle.
- Point d'intégration d'une vraie passerelle (à rendre idempotente par attempt_id).
"""
import logging
import time
from decimal import Decimal
from typing import Any, Dict, Optional

from storefront.checkout.models import PaymentMethod
from storefront.config import PAYMENT_SIMULATED_DELAY_SECONDS

logger = logging.getLogger(__name__)


class SimulatedPaymentGateway:
    def __init__(self, delay_seconds: float = PAYMENT_SIMULATED_DELAY_SECONDS):
        self.delay_seconds = max(0.0, float(delay_seconds))

    def authorize(
        self,
        *,
        attempt_id: str,
        user_id: str,
        method: PaymentMethod,
        amount: Decimal,
        upi_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Autorise le paiement d'un panier complet.
        Retour: {"reference": "<attempt_id>", "status": "authorized", "amount": "<montant>"}
        """
        if self.delay_seconds:
            time.sleep(self.delay_seconds)
        logger.info(
            "gateway.authorize attempt_id=%s user_id=%s method=%s amount=%s",
            attempt_id, user_id, method.value, amount,
        )
        return {"reference": attempt_id, "status": "authorized", "amount": str(amount)}
