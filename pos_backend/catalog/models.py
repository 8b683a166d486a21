# module pos_backend.catalog.models
"""Modèles du catalogue (immutables une fois récupérés).
- Les champs inconnus renvoyés par WooCommerce sont ignorés.
- Les identifiants peuvent arriver en int ou en str: ils sont conservés tels quels,
  la comparaison numérique est faite par le filtre.
"""
from typing import Any, List, Union
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from pos_backend.errors import MalformedResponseError

logger = logging.getLogger(__name__)


class Category(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Union[int, str]
    name: str = ""


class ProductImage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    src: str = ""


class Product(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Union[int, str]
    name: str = ""
    price: str = ""
    images: List[ProductImage] = Field(default_factory=list)
    categories: List[Category] = Field(default_factory=list)

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_text(cls, v: Any) -> str:
        # WooCommerce renvoie "12.50" mais certains plugins renvoient un nombre
        return "" if v is None else str(v)

    @property
    def image_url(self) -> str:
        return self.images[0].src if self.images else ""


def _parse_list(data: Any, model, label: str) -> list:
    if not isinstance(data, list):
        raise MalformedResponseError(f"{label}: liste attendue, reçu {type(data).__name__}")
    parsed = []
    for record in data:
        try:
            parsed.append(model.model_validate(record))
        except PydanticValidationError:
            logger.warning("catalog.models enregistrement %s ignoré: %r", label, record)
    return parsed

def parse_categories(data: Any) -> List[Category]:
    return _parse_list(data, Category, "categories")

def parse_products(data: Any) -> List[Product]:
    return _parse_list(data, Product, "products")
