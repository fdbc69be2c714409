"""Shared test fixtures for visual matcher tests."""

import json

import pytest

from visual_matcher.catalog import Catalog, CatalogStore, Product
from visual_matcher.engine import MatchEngine


@pytest.fixture
def sample_products():
    """Small catalog with one unknown category and an extra field."""
    return [
        Product(id=1, category="electronics", name="Wireless Headphones", price=129.99),
        Product(id=2, category="fashion", name="Running Shoes", price=89.99),
        Product(id=3, category="home", name="Table Lamp", price=49.99),
        Product(id=4, category="sports", name="Yoga Mat", price=29.99),
        Product.from_dict({"id": 5, "category": "toys", "name": "Wooden Train",
                           "price": 15, "image": None, "description": "Hand-painted"}),
        Product(id=6, category="electronics", name="Smart Speaker", price=79.5),
    ]


@pytest.fixture
def sample_catalog(sample_products):
    return Catalog(products=tuple(sample_products))


@pytest.fixture
def engine(sample_catalog):
    return MatchEngine(CatalogStore(catalog=sample_catalog))


@pytest.fixture
def pinned_hash(monkeypatch):
    """Pin the hash term so only the base and bias rules drive the score."""
    def pin(value):
        monkeypatch.setattr("visual_matcher.scoring.string_hash", lambda text: value)
    pin(0)
    return pin


@pytest.fixture
def catalog_file(tmp_path):
    """Write product records to a JSON file and return its path."""
    def write(records, name="products.json"):
        path = tmp_path / name
        path.write_text(json.dumps(records), encoding="utf-8")
        return path
    return write
