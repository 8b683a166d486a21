# module pos_backend.pages.views

"""Vues (page HTML) de la caisse.
- / : liste catégories + produits filtrés, panier, statut de paiement.
  Avant tout rendu, rapproche un éventuel retour de l'application de paiement
  puis redirige vers la même adresse sans marqueurs (un rafraîchissement ne rejoue rien).
- Actions de formulaire (POST + redirection 303): ajout panier, vidage, checkout, retour à la caisse.
Les erreurs métier (panier vide, prix invalide) sont converties en ?error= par le handler PosError.
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from pos_backend.catalog.filters import filter_products
from pos_backend.catalog.service import fetch_catalog, find_product
from pos_backend.config import PLACEHOLDER_IMAGE_URL, PAYMENT_CURRENCY
from pos_backend.errors import ValidationError
from pos_backend.payments.handoff import start_checkout
from pos_backend.payments.reconciler import RETURN_PARAMS, handle_return
from pos_backend.state import PosState, get_pos_state
from pos_backend.utils.rate_limit import optional_rate_limit
from pos_backend.utils.templates import templates
from pos_backend.utils.urls import home_url, request_origin, url_without_params

logger = logging.getLogger(__name__)
web_router = APIRouter(tags=["POS Pages"])

@web_router.get("/", response_class=HTMLResponse, name="pos_page")
async def pos_page(
    request: Request,
    category: Optional[str] = None,
    error: Optional[str] = None,
    state: PosState = Depends(get_pos_state),
):
    """Page caisse.
    - handle_return: lit ?success / ?failure une seule fois puis 303 sans les marqueurs.
    - Filtre les produits par catégorie (?category=<id>), sans modifier le catalogue.
    """
    outcome = await handle_return(state, request.query_params)
    if outcome.has_marker:
        return RedirectResponse(url=url_without_params(request, RETURN_PARAMS), status_code=HTTP_303_SEE_OTHER)

    products = filter_products(state.catalog.products, category)
    return templates.TemplateResponse(
        request,
        "pos.html",
        {
            "categories": state.catalog.categories,
            "products": products,
            "selected_category": category,
            "catalog_error": state.catalog.last_error,
            "cart": state.cart,
            "payment_status": state.payment_status.value,
            "sync_issue": state.sync_issue,
            "last_order_id": state.last_order_id,
            "error": error,
            "currency": PAYMENT_CURRENCY,
            "placeholder_image": PLACEHOLDER_IMAGE_URL,
        },
    )

@web_router.post("/catalog/refresh", include_in_schema=False)
async def refresh_catalog(category: Optional[str] = None, state: PosState = Depends(get_pos_state)):
    """Recharge entièrement le catalogue; le panier n'est pas touché."""
    await fetch_catalog(state.catalog)
    return RedirectResponse(url=home_url(category), status_code=HTTP_303_SEE_OTHER)

@web_router.post("/cart/add/{product_id}", include_in_schema=False)
async def add_to_cart(product_id: str, category: Optional[str] = None, state: PosState = Depends(get_pos_state)):
    """Ajoute une unité du produit (InvalidPriceError => message opérateur, panier inchangé)."""
    product = find_product(state.catalog, product_id)
    if product is None:
        raise ValidationError(f"Produit {product_id} introuvable dans le catalogue")
    state.cart.add(product)
    return RedirectResponse(url=home_url(category), status_code=HTTP_303_SEE_OTHER)

@web_router.post("/cart/reset", include_in_schema=False)
async def reset_cart(category: Optional[str] = None, state: PosState = Depends(get_pos_state)):
    state.cart.reset()
    return RedirectResponse(url=home_url(category), status_code=HTTP_303_SEE_OTHER)

@web_router.post(
    "/checkout",
    include_in_schema=False,
    dependencies=[Depends(optional_rate_limit(times=5, seconds=10))],
)
async def checkout(request: Request, state: PosState = Depends(get_pos_state)):
    """Délègue le paiement: 303 vers le deep link de l'application externe (aucune attente)."""
    session = start_checkout(state, request_origin(request))
    return RedirectResponse(url=session.deep_link, status_code=HTTP_303_SEE_OTHER)

@web_router.post("/payment/acknowledge", include_in_schema=False)
async def acknowledge_payment(state: PosState = Depends(get_pos_state)):
    """« Retour à la caisse »: statut idle (jamais par minuterie)."""
    state.acknowledge()
    return RedirectResponse(url="/", status_code=HTTP_303_SEE_OTHER)
