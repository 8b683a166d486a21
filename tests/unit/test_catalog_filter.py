import pytest

from pos_backend.catalog.filters import filter_products
from pos_backend.catalog.models import Product


def _products():
    return [
        Product(id=1, name="a", price="1", categories=[{"id": 5, "name": "x"}]),
        Product(id=2, name="b", price="1", categories=[{"id": "6", "name": "y"}, {"id": 5, "name": "x"}]),
        Product(id=3, name="c", price="1", categories=[]),
        Product(id=4, name="d", price="1", categories=[{"id": "6", "name": "y"}]),
    ]


@pytest.mark.parametrize("unset", [None, ""])
def test_unset_category_returns_same_products(unset):
    products = _products()
    assert filter_products(products, unset) is products


def test_empty_catalog():
    assert filter_products([], 5) == []


@pytest.mark.parametrize("selected", [5, "5", " 5 ", "5.0"])
def test_numeric_and_string_ids_match(selected):
    ids = [p.id for p in filter_products(_products(), selected)]
    assert ids == [1, 2]


@pytest.mark.parametrize("selected", [6, "6"])
def test_string_category_refs_match_numeric_selection(selected):
    ids = [p.id for p in filter_products(_products(), selected)]
    assert ids == [2, 4]


def test_non_numeric_selection_matches_nothing():
    assert filter_products(_products(), "boissons") == []


def test_filter_does_not_mutate_input_and_is_idempotent():
    products = _products()
    before = list(products)
    first = filter_products(products, 5)
    second = filter_products(products, 5)
    assert products == before
    assert first == second
