"""
Accès aux données pour la feature 'catalog' (API WooCommerce).
"""
from typing import List
import logging

import pos_backend.infra.woocommerce_client as woocommerce_client
from pos_backend.catalog.models import Category, Product, parse_categories, parse_products

logger = logging.getLogger(__name__)

# module pos_backend.catalog.repository
async def fetch_categories() -> List[Category]:
    """
    GET /products/categories.
    - Lève NetworkError ou MalformedResponseError (gérées par le service).
    """
    data = await woocommerce_client.get_woocommerce().get_json("/products/categories")
    return parse_categories(data)

async def fetch_products_page(page: int, per_page: int) -> List[Product]:
    """
    GET /products?per_page=<per_page>&page=<page>.
    - Une page vide signifie la fin de la pagination.
    """
    data = await woocommerce_client.get_woocommerce().get_json(
        "/products",
        params={"per_page": per_page, "page": page},
    )
    return parse_products(data)
