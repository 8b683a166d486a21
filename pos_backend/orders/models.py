# module pos_backend.orders.models
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class SyncIssue:
    """Paiement réussi mais commande non enregistrée: à rapprocher manuellement."""

    def __init__(self, reference: Optional[str], line_items: List[Dict[str, Any]], error: str):
        self.reference = reference
        self.line_items = line_items
        self.error = error
        self.created_at = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reference": self.reference,
            "line_items": self.line_items,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
        }
