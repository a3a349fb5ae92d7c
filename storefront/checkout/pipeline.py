"""
Tunnel d'achat: panier -> paiement -> détail par moyen de paiement -> bibliothèque -> panier vidé.

Machine à états (par appel de run):
    IDLE -> VALIDATING -> CHARGING -> GRANTING -> CLEARING -> COMPLETE
    toute étape -> FAILED (le panier reste intact, sauf droits déjà accordés)

Règles:
- Les validations (session, panier non vide, moyen de paiement, identifiant UPI, nom d'utilisateur)
  précèdent toute écriture.
- GRANTING traite les lignes dans l'ordre du panier; un doublon sur user_library
  (DuplicateKeyError) signifie « déjà possédé » et n'interrompt pas la boucle.
- Toute autre erreur arrête la boucle; les lignes déjà insérées ne sont pas annulées.
- Le panier n'est vidé que si toutes les lignes ont été traitées.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional, Set
from uuid import uuid4

from storefront.cart.store import CartStore
from storefront.cart.totals import compute_totals
from storefront.checkout import repository
from storefront.checkout.gateway import SimulatedPaymentGateway
from storefront.checkout.models import CheckoutResult, CheckoutState, PaymentMethod, PaymentStatus
from storefront.entitlements.checker import EntitlementChecker
from storefront.errors import (
    CheckoutInProgress,
    DuplicateKeyError,
    EmptyCart,
    InvalidPaymentDetails,
    ProfileIncomplete,
    StorageError,
    StoreError,
)
from storefront.infra.data_access import DataAccess
from storefront.profile.repository import record_activity
from storefront.session import Session

logger = logging.getLogger(__name__)

StateCallback = Callable[[CheckoutState, Dict[str, Any]], None]

_in_flight: Set[str] = set()
_in_flight_lock = threading.Lock()


@contextmanager
def checkout_guard(user_id: str):
    """Un seul checkout à la fois par utilisateur (double soumission, second onglet)."""
    with _in_flight_lock:
        if user_id in _in_flight:
            raise CheckoutInProgress()
        _in_flight.add(user_id)
    try:
        yield
    finally:
        with _in_flight_lock:
            _in_flight.discard(user_id)


class CheckoutPipeline:
    def __init__(
        self,
        session: Session,
        cart: CartStore,
        entitlements: EntitlementChecker,
        data: DataAccess,
        gateway: Optional[SimulatedPaymentGateway] = None,
    ):
        self.session = session
        self.cart = cart
        self.entitlements = entitlements
        self.data = data
        self.gateway = gateway or SimulatedPaymentGateway()
        self.state = CheckoutState.IDLE
        self.history: List[CheckoutState] = [CheckoutState.IDLE]
        self._observers: List[StateCallback] = []

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def _transition(self, state: CheckoutState, **info: Any) -> None:
        self.state = state
        self.history.append(state)
        for callback in list(self._observers):
            try:
                callback(state, info)
            except Exception:
                logger.exception("checkout observer failed state=%s", state.value)

    def run(self, payment_method: Any, upi_id: Optional[str] = None) -> CheckoutResult:
        """
        Exécute un checkout complet et renvoie le résultat (état COMPLETE).
        Lève une StoreError typée en cas d'échec (état FAILED).
        """
        if self.state not in (CheckoutState.IDLE, CheckoutState.FAILED):
            raise CheckoutInProgress("Ce checkout est déjà en cours ou terminé")
        attempt_id = str(uuid4())
        self._transition(CheckoutState.VALIDATING, attempt_id=attempt_id)
        try:
            user_id = self.session.require_user_id()
            with checkout_guard(user_id):
                return self._run(attempt_id, user_id, payment_method, upi_id)
        except StoreError as e:
            self._fail(attempt_id, e)
            raise
        except Exception as e:
            logger.exception("checkout unexpected error attempt_id=%s", attempt_id)
            err = StorageError()
            self._fail(attempt_id, err)
            raise err from e

    def _fail(self, attempt_id: str, error: StoreError) -> None:
        logger.warning("checkout failed attempt_id=%s error=%s detail=%s", attempt_id, error.code, error.detail)
        self._transition(CheckoutState.FAILED, attempt_id=attempt_id, error=error.code, detail=error.detail)

    def _run(self, attempt_id: str, user_id: str, payment_method: Any, upi_id: Optional[str]) -> CheckoutResult:
        items = self.cart.refresh()
        if not items:
            raise EmptyCart()
        method = PaymentMethod.parse(payment_method)
        if method is PaymentMethod.UPI and not (upi_id or "").strip():
            raise InvalidPaymentDetails()
        username = self.data.get_username(user_id)
        if not username:
            raise ProfileIncomplete()

        totals = compute_totals(items)
        self._transition(CheckoutState.CHARGING, attempt_id=attempt_id, amount=str(totals.total))
        self.gateway.authorize(
            attempt_id=attempt_id,
            user_id=user_id,
            method=method,
            amount=totals.total,
            upi_id=(upi_id or "").strip() or None,
        )

        self._transition(CheckoutState.GRANTING, attempt_id=attempt_id, items=len(items))
        result = CheckoutResult(attempt_id=attempt_id, state=CheckoutState.GRANTING, payment_method=method, totals=totals)
        library_entries: Dict[str, Any] = {}
        for item in items:
            try:
                payment = repository.insert_payment(
                    self.data,
                    user_id=user_id,
                    username=username,
                    game_id=item.game_id,
                    method=method,
                    status=PaymentStatus.COMPLETED,
                )
                payment_id = payment.get("id")
                result.payment_ids.append(payment_id)
                repository.insert_method_payment(
                    self.data, method=method, payment_id=payment_id, user_id=user_id, username=username,
                )
                try:
                    entry = repository.insert_library_entry(
                        self.data, user_id=user_id, game_id=item.game_id, payment_id=payment_id,
                    )
                    result.granted_game_ids.append(item.game_id)
                    library_entries[item.game_id] = entry.get("id")
                except DuplicateKeyError:
                    result.already_owned_game_ids.append(item.game_id)
            except StoreError:
                # Pas de rollback: les paiements/droits déjà insérés restent en base
                logger.error(
                    "checkout partial failure attempt_id=%s game_id=%s payments_committed=%s granted=%s",
                    attempt_id, item.game_id, len(result.payment_ids), result.granted_game_ids,
                )
                raise

        self._transition(CheckoutState.CLEARING, attempt_id=attempt_id)
        self.cart.clear()

        result.state = CheckoutState.COMPLETE
        self._transition(CheckoutState.COMPLETE, attempt_id=attempt_id, result=result)
        logger.info(
            "checkout complete attempt_id=%s user_id=%s method=%s payments=%s granted=%s already_owned=%s",
            attempt_id, user_id, method.value, len(result.payment_ids),
            len(result.granted_game_ids), len(result.already_owned_game_ids),
        )
        for game_id, entry_id in library_entries.items():
            record_activity(
                self.data,
                user_id=user_id,
                game_id=game_id,
                activity_type="purchase",
                details={"payment_type": method.value, "attempt_id": attempt_id},
                library_entry_id=entry_id,
            )
        return result
