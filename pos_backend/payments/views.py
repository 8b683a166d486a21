import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from pos_backend.catalog.filters import filter_products
from pos_backend.catalog.service import fetch_catalog, find_product
from pos_backend.errors import ValidationError
from pos_backend.payments.handoff import start_checkout
from pos_backend.payments.reconciler import handle_return
from pos_backend.state import PosState, get_pos_state
from pos_backend.utils.rate_limit import optional_rate_limit
from pos_backend.utils.urls import request_origin

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/pos", tags=["POS API"])


class CartItemRequest(BaseModel):
    product_id: str


# module pos_backend.payments.views
@router.get("/state")
async def get_state(state: PosState = Depends(get_pos_state)) -> Dict[str, Any]:
    """État complet du terminal (panier, statut de paiement, session en attente, incident de synchro)."""
    return state.to_dict()

@router.get("/catalog")
async def get_catalog(category: Optional[str] = None, state: PosState = Depends(get_pos_state)) -> Dict[str, Any]:
    """
    Catégories + produits filtrés (?category=<id>, numérique ou texte).
    - last_error renseigné si le dernier chargement a été partiel.
    """
    products = filter_products(state.catalog.products, category)
    return {
        "categories": [c.model_dump() for c in state.catalog.categories],
        "products": [p.model_dump() for p in products],
        "count": len(products),
        "last_error": state.catalog.last_error,
    }

@router.post("/catalog/refresh")
async def refresh_catalog(state: PosState = Depends(get_pos_state)) -> Dict[str, Any]:
    categories, products = await fetch_catalog(state.catalog)
    return {"categories": len(categories), "products": len(products), "last_error": state.catalog.last_error}

@router.post("/cart/items")
async def add_cart_item(body: CartItemRequest, state: PosState = Depends(get_pos_state)) -> Dict[str, Any]:
    """
    Ajoute une unité d'un produit du catalogue courant.
    - 400 si le produit est inconnu ou si son prix est invalide (panier inchangé).
    """
    product = find_product(state.catalog, body.product_id)
    if product is None:
        raise ValidationError(f"Produit {body.product_id} introuvable dans le catalogue")
    state.cart.add(product)
    return state.to_dict()["cart"]

@router.delete("/cart")
async def reset_cart(state: PosState = Depends(get_pos_state)) -> Dict[str, Any]:
    state.cart.reset()
    return state.to_dict()["cart"]

@router.post("/checkout", dependencies=[Depends(optional_rate_limit(times=5, seconds=10))])
async def create_checkout(request: Request, state: PosState = Depends(get_pos_state)) -> Dict[str, Any]:
    """
    Variante API du checkout: retourne le deep link au lieu de rediriger.
    - 400 (ValidationError) si le panier est vide; aucune session n'est créée.
    """
    session = start_checkout(state, request_origin(request))
    return session.to_dict()

@router.get("/return")
async def reconcile_return(request: Request, state: PosState = Depends(get_pos_state)) -> Dict[str, Any]:
    """
    Rapprochement explicite d'un retour (?success=true|failure=true&ref=...), sans redirection.
    - applied=False si le marqueur est absent ou déjà consommé; un succès sans session connue
      est appliqué et signalé en sync_error (rapprochement manuel).
    """
    outcome = await handle_return(state, request.query_params)
    return {
        "marker": outcome.marker,
        "applied": outcome.applied,
        "order_id": outcome.order_id,
        "sync_error": outcome.sync_error,
        "payment_status": state.payment_status.value,
    }

@router.post("/payment/acknowledge")
async def acknowledge_payment(state: PosState = Depends(get_pos_state)) -> Dict[str, Any]:
    state.acknowledge()
    return {"payment_status": state.payment_status.value}
