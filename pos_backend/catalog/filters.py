"""
Filtre par catégorie (fonction pure, appelée à chaque rendu).
"""
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from pos_backend.catalog.models import Product

# module pos_backend.catalog.filters
def _as_number(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return number if number.is_finite() else None

def filter_products(products: List[Product], selected_category_id: Any = None) -> List[Product]:
    """
    Retourne les produits dont au moins une catégorie correspond numériquement à selected_category_id.
    - None ou "" => la liste reçue, inchangée.
    - "12" et 12 sont équivalents; un identifiant non numérique ne correspond à rien.
    """
    if selected_category_id is None or selected_category_id == "":
        return products
    wanted = _as_number(selected_category_id)
    if wanted is None:
        return []
    return [
        product for product in products
        if any(_as_number(category.id) == wanted for category in product.categories)
    ]
