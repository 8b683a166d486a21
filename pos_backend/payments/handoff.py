"""
Délégation du paiement à l'application externe (Zettle) par deep link.
- Montant en unités mineures: total * 100 arrondi au plus proche (ROUND_HALF_UP).
- Deux URLs de retour (succès/échec) vers l'origine du terminal, marquées par ?success / ?failure
  et par la référence de session (ref), encodées dans le deep link.
- Fire-and-forget: la navigation est faite par la vue (redirection), rien n'attend l'application externe.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple
from urllib.parse import quote, urlencode
from uuid import uuid4
import logging

from pos_backend.config import PAYMENT_APP_SCHEME, PAYMENT_CURRENCY
from pos_backend.errors import ValidationError
from pos_backend.payments.models import PaymentSession

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "success"
FAILURE_MARKER = "failure"
REFERENCE_PARAM = "ref"

# module pos_backend.payments.handoff
def to_minor_units(total: Decimal) -> int:
    return int((Decimal(total) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def build_callback_urls(origin: str, reference: str) -> Tuple[str, str]:
    """Retourne (success_url, failure_url) non encodées, pointant vers la racine du terminal."""
    base = origin.rstrip("/") + "/"
    success_url = f"{base}?{urlencode({SUCCESS_MARKER: 'true', REFERENCE_PARAM: reference})}"
    failure_url = f"{base}?{urlencode({FAILURE_MARKER: 'true', REFERENCE_PARAM: reference})}"
    return success_url, failure_url

def build_deep_link(amount: int, currency: str, success_url: str, failure_url: str, scheme: str = PAYMENT_APP_SCHEME) -> str:
    """
    scheme://payment?amount=<int>&currency=<code>&successURL=<url encodée>&failureURL=<url encodée>
    """
    return (
        f"{scheme}://payment?amount={amount}&currency={quote(currency, safe='')}"
        f"&successURL={quote(success_url, safe='')}&failureURL={quote(failure_url, safe='')}"
    )

def start_checkout(state, origin: str) -> PaymentSession:
    """
    Transition Idle -> Handoff.
    - ValidationError si le total du panier n'est pas > 0 (aucune session créée).
    - Enregistre la session en attente sur l'état et la retourne; l'appelant navigue vers session.deep_link.
    """
    total = state.cart.total
    if total <= 0:
        raise ValidationError("Panier vide ! Ajoutez des articles avant de payer.")

    reference = uuid4().hex
    amount = to_minor_units(total)
    success_url, failure_url = build_callback_urls(origin, reference)
    deep_link = build_deep_link(amount, PAYMENT_CURRENCY, success_url, failure_url)

    session = PaymentSession(
        reference=reference,
        amount=amount,
        currency=PAYMENT_CURRENCY,
        success_url=success_url,
        failure_url=failure_url,
        deep_link=deep_link,
        cart_snapshot=state.cart.snapshot(),
    )
    if state.pending_sessions:
        logger.info("payments.start_checkout %s session(s) déjà en attente, conservée(s)", len(state.pending_sessions))
    state.add_pending(session)
    logger.info("payments.start_checkout ref=%s amount=%s currency=%s items=%s", reference, amount, PAYMENT_CURRENCY, len(session.cart_snapshot))
    return session
