from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from storefront.cart.totals import CartTotals
from storefront.errors import InvalidPaymentDetails


class PaymentMethod(str, Enum):
    CREDITCARD = "creditcard"
    DEBITCARD = "debitcard"
    UPI = "upi"

    @classmethod
    def parse(cls, value: Any) -> "PaymentMethod":
        """Accepte 'creditcard', 'credit-card', 'credit_card', 'UPI'..."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower().replace("-", "").replace("_", "")
        for method in cls:
            if method.value == key:
                return method
        raise InvalidPaymentDetails(f"Moyen de paiement inconnu: {value}")

    @property
    def table(self) -> str:
        return METHOD_TABLES[self]


METHOD_TABLES = {
    PaymentMethod.CREDITCARD: "creditcard_payments",
    PaymentMethod.DEBITCARD: "debitcard_payments",
    PaymentMethod.UPI: "upi_payments",
}


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class CheckoutState(str, Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    CHARGING = "CHARGING"
    GRANTING = "GRANTING"
    CLEARING = "CLEARING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"


@dataclass
class CheckoutResult:
    attempt_id: str
    state: CheckoutState
    payment_method: PaymentMethod
    totals: CartTotals
    payment_ids: List[Any] = field(default_factory=list)
    granted_game_ids: List[str] = field(default_factory=list)
    already_owned_game_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attempt_id": self.attempt_id,
            "state": self.state.value,
            "payment_method": self.payment_method.value,
            "totals": self.totals.to_dict(),
            "payment_ids": list(self.payment_ids),
            "granted_game_ids": list(self.granted_game_ids),
            "already_owned_game_ids": list(self.already_owned_game_ids),
        }
