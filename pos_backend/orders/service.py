"""Couche service de la synchronisation des commandes.
Rôles:
- Construire le payload de commande payée (méthode de paiement externe, set_paid=True).
- Agréger les produits répétés en une seule ligne avec la bonne quantité.
- Envoyer UNE seule requête POST /orders; tout échec devient SyncError (pas de retry).
"""
from typing import Any, Dict, List, Optional, Union
import logging

from pos_backend.cart.ledger import aggregate_quantities
from pos_backend.config import PAYMENT_METHOD, PAYMENT_METHOD_TITLE
from pos_backend.errors import PosError, SyncError
from pos_backend.orders import repository

logger = logging.getLogger(__name__)

def _product_id_value(product_id: str) -> Union[int, str]:
    # WooCommerce attend un entier; on garde la chaîne si l'id n'est pas numérique
    return int(product_id) if product_id.isdigit() else product_id

def to_line_items(product_ids: List[Union[int, str]]) -> List[Dict[str, Any]]:
    quantities = aggregate_quantities(product_ids)
    return [
        {"product_id": _product_id_value(pid), "quantity": qty}
        for pid, qty in quantities.items()
    ]

def build_order_payload(product_ids: List[Union[int, str]]) -> Dict[str, Any]:
    """
    Payload de commande finalisée:
    {payment_method, payment_method_title, set_paid: True, line_items: [{product_id, quantity}]}
    """
    return {
        "payment_method": PAYMENT_METHOD,
        "payment_method_title": PAYMENT_METHOD_TITLE,
        "set_paid": True,
        "line_items": to_line_items(product_ids),
    }

async def sync_order(product_ids: List[Union[int, str]], reference: Optional[str] = None) -> Union[int, str]:
    """
    Enregistre la commande payée côté WooCommerce et retourne son identifiant.
    - SyncError si le panier est vide, si l'appel échoue ou si la réponse n'a pas d'id.
    """
    payload = build_order_payload(product_ids)
    if not payload["line_items"]:
        raise SyncError("Aucune ligne de commande à synchroniser", reference=reference)
    try:
        created = await repository.create_order(payload)
    except PosError as e:
        logger.exception("orders.sync_order échec ref=%s", reference)
        raise SyncError(f"Commande non enregistrée: {e.message}", reference=reference) from e

    order_id = created.get("id") if isinstance(created, dict) else None
    if order_id is None:
        raise SyncError("Réponse de création de commande sans identifiant", reference=reference)
    logger.info("orders.sync_order ok ref=%s order_id=%s lines=%s", reference, order_id, len(payload["line_items"]))
    return order_id
