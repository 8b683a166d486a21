"""
État applicatif du terminal (un seul propriétaire: app.state.pos).
- Catalogue, panier, statut de paiement, sessions de paiement en attente, incident de synchro.
- Chaque checkout garde sa propre session (indexée par référence) jusqu'à son retour:
  un second appui sur « Payer » ne fait pas perdre la première.
- Les mutations passent par les services (catalog, payments, orders), jamais par accès global.
"""
from typing import Any, Dict, Optional, Set, Union

from fastapi import Request

from pos_backend.cart.ledger import CartLedger
from pos_backend.catalog.service import CatalogState
from pos_backend.orders.models import SyncIssue
from pos_backend.payments.models import PaymentSession, PaymentStatus


class PosState:
    def __init__(self):
        self.catalog = CatalogState()
        self.cart = CartLedger()
        self.payment_status = PaymentStatus.IDLE
        self.pending_sessions: Dict[str, PaymentSession] = {}
        self.consumed_references: Set[str] = set()
        self.sync_issue: Optional[SyncIssue] = None
        self.last_order_id: Optional[Union[int, str]] = None

    @property
    def pending_session(self) -> Optional[PaymentSession]:
        """Dernière session créée et non encore rapprochée."""
        if not self.pending_sessions:
            return None
        return list(self.pending_sessions.values())[-1]

    def add_pending(self, session: PaymentSession) -> None:
        self.pending_sessions[session.reference] = session

    def consume(self, reference: Optional[str]) -> Optional[PaymentSession]:
        """Marque la référence comme consommée et retire sa session en attente (si connue)."""
        if not reference:
            return None
        self.consumed_references.add(reference)
        return self.pending_sessions.pop(reference, None)

    def acknowledge(self) -> None:
        """Action opérateur « Retour à la caisse »: seul chemin vers le statut idle."""
        self.payment_status = PaymentStatus.IDLE
        self.sync_issue = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "payment_status": self.payment_status.value,
            "cart": {
                "items": [item.to_dict() for item in self.cart.items],
                "count": self.cart.count,
                "total": f"{self.cart.total:.2f}",
            },
            "pending_session": self.pending_session.to_dict() if self.pending_session else None,
            "pending_references": list(self.pending_sessions),
            "sync_issue": self.sync_issue.to_dict() if self.sync_issue else None,
            "last_order_id": self.last_order_id,
            "catalog": {
                "categories": len(self.catalog.categories),
                "products": len(self.catalog.products),
                "last_error": self.catalog.last_error,
            },
        }


def get_pos_state(request: Request) -> PosState:
    """Dépendance FastAPI: retourne (et crée au besoin) l'état du terminal."""
    state = getattr(request.app.state, "pos", None)
    if state is None:
        state = PosState()
        request.app.state.pos = state
    return state
