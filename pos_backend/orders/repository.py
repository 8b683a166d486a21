"""
Accès aux données pour la feature 'orders' (écriture WooCommerce).
"""
from typing import Any, Dict
import logging

import pos_backend.infra.woocommerce_client as woocommerce_client

logger = logging.getLogger(__name__)

# module pos_backend.orders.repository
async def create_order(payload: Dict[str, Any]) -> Any:
    """
    POST /orders avec le payload déjà construit.
    - Retourne la représentation de la commande créée (dict attendu).
    - Lève NetworkError/MalformedResponseError: pas de retry ici.
    """
    return await woocommerce_client.get_woocommerce().post_json("/orders", payload)
