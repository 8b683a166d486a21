"""
Logique panier pure (pas de HTTP, pas de WooCommerce).
- Une entrée par ajout (les doublons sont des entrées répétées).
- Le total est tenu en Decimal et incrémenté à chaque ajout; recalculé par reset() et remove_paid().
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Union
import logging

from pos_backend.catalog.models import Product
from pos_backend.errors import InvalidPriceError

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# module pos_backend.cart.ledger
def parse_price(product: Product) -> Decimal:
    """
    Convertit le prix texte d'un produit en Decimal.
    - Lève InvalidPriceError si vide, non numérique, non fini ou négatif.
    """
    raw = (product.price or "").strip()
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise InvalidPriceError(product.id, product.price)
    if not value.is_finite() or value < 0:
        raise InvalidPriceError(product.id, product.price)
    return value


class CartItem:
    def __init__(self, product: Product, unit_price: Decimal):
        self.product = product
        self.unit_price = unit_price

    @property
    def product_id(self) -> Union[int, str]:
        return self.product.id

    def to_dict(self) -> Dict[str, Any]:
        return {"product_id": self.product.id, "name": self.product.name, "price": f"{self.unit_price:.2f}"}


class CartLedger:
    def __init__(self):
        self._items: List[CartItem] = []
        self._total: Decimal = ZERO

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    @property
    def total(self) -> Decimal:
        return self._total

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def add(self, product: Product) -> CartItem:
        """Ajoute une unité du produit. En cas de prix invalide, rien n'est modifié."""
        price = parse_price(product)
        item = CartItem(product, price)
        self._items.append(item)
        self._total += price
        logger.info("cart.add product_id=%s price=%s total=%s", product.id, price, self._total)
        return item

    def reset(self) -> None:
        self._items = []
        self._total = ZERO

    def remove_paid(self, product_ids: List[Union[int, str]]) -> int:
        """
        Retire une entrée par identifiant payé (instantané du checkout).
        Les articles ajoutés après le checkout restent dans le panier. Retourne le nombre d'entrées retirées.
        """
        to_remove = aggregate_quantities(product_ids)
        kept: List[CartItem] = []
        removed = 0
        for item in self._items:
            key = str(item.product_id).strip()
            if to_remove.get(key, 0) > 0:
                to_remove[key] -= 1
                removed += 1
                continue
            kept.append(item)
        self._items = kept
        self._total = sum((item.unit_price for item in kept), ZERO)
        return removed

    def snapshot(self) -> List[Union[int, str]]:
        """Identifiants produits dans l'ordre d'ajout (copie indépendante du panier)."""
        return [item.product_id for item in self._items]

    def quantities(self) -> Dict[str, int]:
        return aggregate_quantities(self.snapshot())


def aggregate_quantities(product_ids: List[Union[int, str]]) -> Dict[str, int]:
    """
    Agrège une liste d'identifiants [id, id, ...] en {product_id: quantité}.
    - Ignore les identifiants vides.
    - Conserve l'ordre de première apparition.
    """
    quantities: Dict[str, int] = {}
    for pid in product_ids or []:
        key = str(pid if pid is not None else "").strip()
        if not key:
            continue
        quantities[key] = quantities.get(key, 0) + 1
    return quantities
