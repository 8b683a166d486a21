"""
Cas d'usage 'catalog': récupère catégories et produits puis les publie dans l'état du terminal.
Règles:
- Pagination strictement séquentielle (page n demandée après la page n-1), arrêt sur page vide.
- Une page en échec arrête la pagination et conserve les produits déjà collectés.
- Chaque appel remplace entièrement l'état précédent (pas de fusion incrémentale).
- Des appels concurrents sont départagés par un numéro de génération: seul le plus récent publie.
- Le panier n'est jamais touché.
"""
from datetime import datetime, timezone
from typing import List, Optional, Tuple
import logging

from pos_backend.catalog import repository
from pos_backend.catalog.models import Category, Product
from pos_backend.config import CATALOG_PER_PAGE, CATALOG_MAX_PAGES
from pos_backend.errors import PosError

logger = logging.getLogger(__name__)


class CatalogState:
    def __init__(self):
        self.categories: List[Category] = []
        self.products: List[Product] = []
        self.generation = 0
        self.last_error: Optional[str] = None
        self.loaded_at: Optional[datetime] = None

    def next_generation(self) -> int:
        self.generation += 1
        return self.generation

    def publish(self, generation: int, categories: List[Category], products: List[Product], error: Optional[str]) -> bool:
        """Remplace le catalogue si la génération est toujours la plus récente."""
        if generation != self.generation:
            logger.info("catalog.publish ignoré: génération %s périmée (courante=%s)", generation, self.generation)
            return False
        self.categories = list(categories)
        self.products = list(products)
        self.last_error = error
        self.loaded_at = datetime.now(timezone.utc)
        return True

# module pos_backend.catalog.service
async def fetch_all_products(
    per_page: int = CATALOG_PER_PAGE,
    max_pages: int = CATALOG_MAX_PAGES,
) -> Tuple[List[Product], Optional[str]]:
    """
    Boucle de pagination avec accumulateur.
    Retour: (produits dans l'ordre du backend, message d'erreur ou None).
    """
    collected: List[Product] = []
    for page in range(1, max_pages + 1):
        try:
            batch = await repository.fetch_products_page(page, per_page)
        except PosError as e:
            logger.warning("catalog.fetch_all_products page=%s en échec, %s produits conservés: %s", page, len(collected), e)
            return collected, f"Catalogue partiel (page {page}): {e.message}"
        if not batch:
            return collected, None
        collected.extend(batch)
    logger.warning("catalog.fetch_all_products arrêt à la limite de %s pages", max_pages)
    return collected, f"Catalogue tronqué à {max_pages} pages"

async def fetch_catalog(catalog: CatalogState) -> Tuple[List[Category], List[Product]]:
    """
    Récupère (catégories, produits) et les publie dans catalog.
    - Catégories en échec => [] (les produits sont quand même récupérés).
    - Ne lève pas: les erreurs sont journalisées et exposées via catalog.last_error.
    """
    generation = catalog.next_generation()
    errors: List[str] = []

    try:
        categories = await repository.fetch_categories()
    except PosError as e:
        logger.warning("catalog.fetch_catalog catégories indisponibles: %s", e)
        categories = []
        errors.append(f"Catégories indisponibles: {e.message}")

    products, products_error = await fetch_all_products()
    if products_error:
        errors.append(products_error)

    catalog.publish(generation, categories, products, "; ".join(errors) or None)
    logger.info("catalog.fetch_catalog generation=%s categories=%s products=%s", generation, len(categories), len(products))
    return categories, products

def find_product(catalog: CatalogState, product_id) -> Optional[Product]:
    """Recherche un produit du catalogue courant par identifiant (comparaison textuelle)."""
    wanted = str(product_id).strip()
    for product in catalog.products:
        if str(product.id) == wanted:
            return product
    return None
