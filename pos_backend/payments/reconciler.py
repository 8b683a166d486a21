"""
Rapprochement au retour de l'application de paiement.
Appelé à chaque chargement de la page caisse, avant tout rendu:
- ?success=true: statut success, articles payés retirés du panier, synchronisation de la commande (une seule fois).
- ?failure=true: statut failed, panier conservé pour un nouvel essai.
- Les marqueurs sont ensuite retirés de l'adresse par la vue (redirection 303).
Le succès est reconnu au seul marqueur. La référence (ref) désigne la session et donc l'instantané
de panier à synchroniser; un succès dont la session est inconnue (redémarrage, ref inattendue) reste
un succès, signalé en rapprochement manuel (SyncIssue sans lignes), jamais ignoré.
Panier: seules les entrées de l'instantané sont retirées; un article ajouté après le checkout
n'a pas été payé et reste dans le panier.
Idempotence: une référence déjà consommée est ignorée.
Limite de confiance: les marqueurs ne sont pas signés; on suppose un terminal physiquement contrôlé.
"""
from typing import Any, Mapping, Optional, Union
import logging

from pos_backend.errors import SyncError
from pos_backend.orders import service as orders_service
from pos_backend.orders.models import SyncIssue
from pos_backend.payments.handoff import SUCCESS_MARKER, FAILURE_MARKER, REFERENCE_PARAM
from pos_backend.payments.models import PaymentStatus

logger = logging.getLogger(__name__)

RETURN_PARAMS = (SUCCESS_MARKER, FAILURE_MARKER, REFERENCE_PARAM)


class ReturnOutcome:
    def __init__(
        self,
        marker: Optional[str] = None,
        applied: bool = False,
        order_id: Optional[Union[int, str]] = None,
        sync_error: Optional[str] = None,
    ):
        self.marker = marker
        self.applied = applied
        self.order_id = order_id
        self.sync_error = sync_error

    @property
    def has_marker(self) -> bool:
        """Vrai si l'adresse portait un marqueur de retour (et doit donc être nettoyée)."""
        return self.marker is not None


def _is_set(value: Any) -> bool:
    return value is not None and str(value).strip().lower() not in ("", "false", "0")

def read_marker(query_params: Mapping[str, Any]) -> Optional[str]:
    if _is_set(query_params.get(SUCCESS_MARKER)):
        return SUCCESS_MARKER
    if _is_set(query_params.get(FAILURE_MARKER)):
        return FAILURE_MARKER
    return None

UNKNOWN_SESSION_ERROR = "Paiement confirmé sans session de paiement connue: commande à saisir manuellement"

def _resolve_session(state, reference: Optional[str]):
    if reference:
        return state.pending_sessions.get(reference)
    # Retour sans ref: la dernière session ouverte
    return state.pending_session

# module pos_backend.payments.reconciler
async def handle_return(state, query_params: Mapping[str, Any]) -> ReturnOutcome:
    marker = read_marker(query_params)
    if marker is None:
        return ReturnOutcome()

    reference = (query_params.get(REFERENCE_PARAM) or "").strip() or None
    if reference and reference in state.consumed_references:
        logger.info("payments.handle_return marqueur %s déjà consommé ref=%s", marker, reference)
        return ReturnOutcome(marker)

    session = _resolve_session(state, reference)
    state.consume(reference or (session.reference if session else None))

    if marker == FAILURE_MARKER:
        state.payment_status = PaymentStatus.FAILED
        if session is None:
            logger.warning("payments.handle_return échec sans session connue ref=%s", reference)
        else:
            logger.info("payments.handle_return échec ref=%s (panier conservé)", session.reference)
        return ReturnOutcome(marker, applied=True)

    state.payment_status = PaymentStatus.SUCCESS

    if session is None:
        logger.warning("payments.handle_return succès sans session connue ref=%s: rapprochement manuel", reference)
        state.cart.reset()
        state.sync_issue = SyncIssue(reference=reference, line_items=[], error=UNKNOWN_SESSION_ERROR)
        return ReturnOutcome(marker, applied=True, sync_error=UNKNOWN_SESSION_ERROR)

    state.cart.remove_paid(session.cart_snapshot)
    logger.info("payments.handle_return succès ref=%s amount=%s", session.reference, session.amount)

    try:
        order_id = await orders_service.sync_order(session.cart_snapshot, reference=session.reference)
    except SyncError as e:
        # Le paiement reste un succès: incident de rapprochement distinct
        state.sync_issue = SyncIssue(
            reference=session.reference,
            line_items=orders_service.to_line_items(session.cart_snapshot),
            error=e.message,
        )
        return ReturnOutcome(marker, applied=True, sync_error=e.message)

    state.last_order_id = order_id
    return ReturnOutcome(marker, applied=True, order_id=order_id)
